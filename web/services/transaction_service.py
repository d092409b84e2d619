"""
Transaction 서비스

HTTP 요청 값을 Ledger 요청으로 변환하여 TransactionCoordinator에 위임.
"""

from datetime import date, datetime, time, timezone
from typing import Any, Mapping

from core.ledger.coordinator import TransactionCoordinator
from core.ledger.models import CategoryExpense, NewTransaction, TransactionView
from web.models.requests import TransactionCreateRequest


def start_of_day(day: date) -> datetime:
    """날짜의 시작 시각 (UTC)"""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    """날짜의 마지막 시각 (UTC, 포함 비교용)"""
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


class TransactionService:
    """Transaction 서비스

    Args:
        coordinator: 거래 Coordinator
    """

    def __init__(self, coordinator: TransactionCoordinator):
        self.coordinator = coordinator

    async def list_transactions(
        self,
        owner_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[TransactionView]:
        """거래 목록 (날짜 범위는 양끝 날짜 포함)"""
        return await self.coordinator.list(
            owner_id,
            start_date=start_of_day(start_date) if start_date else None,
            end_date=end_of_day(end_date) if end_date else None,
        )

    async def list_for_account(
        self, owner_id: int, account_id: int
    ) -> list[TransactionView]:
        return await self.coordinator.list_for_account(owner_id, account_id)

    async def get_transaction(
        self, owner_id: int, transaction_id: int
    ) -> TransactionView:
        return await self.coordinator.get(owner_id, transaction_id)

    async def create_transaction(
        self, owner_id: int, request: TransactionCreateRequest
    ) -> TransactionView:
        return await self.coordinator.create(
            owner_id,
            NewTransaction(
                account_id=request.account_id,
                description=request.description,
                category=request.category,
                kind=request.type,
                amount=request.amount,
                transaction_date=request.transaction_date,
                to_account_id=request.to_account_id,
                notes=request.notes,
            ),
        )

    async def update_transaction(
        self, owner_id: int, transaction_id: int, changes: Mapping[str, Any]
    ) -> TransactionView:
        return await self.coordinator.update(owner_id, transaction_id, changes)

    async def delete_transaction(self, owner_id: int, transaction_id: int) -> None:
        await self.coordinator.delete(owner_id, transaction_id)

    async def expenses_by_category(
        self, owner_id: int, month: int, year: int
    ) -> list[CategoryExpense]:
        return await self.coordinator.expenses_by_category(owner_id, month, year)
