"""
Account 서비스

계좌 메타데이터 CRUD 및 전체 잔액 조회
"""

import logging
from decimal import Decimal
from typing import Any

from adapters.interfaces import ILedgerStore
from core.ledger.errors import AccountNotFoundError
from core.ledger.models import Account, NewAccount

logger = logging.getLogger(__name__)


class AccountService:
    """Account 서비스

    거래와 무관한 계좌 메타데이터 관리.
    잔액 변경은 TransactionCoordinator를 통해서만 이루어지며,
    여기서의 balance 수정은 수동 보정(override) 용도.

    Args:
        store: Ledger 저장소
    """

    def __init__(self, store: ILedgerStore):
        self.store = store

    async def list_accounts(self, owner_id: int) -> list[Account]:
        """계좌 목록 (이름순)"""
        return await self.store.list_accounts(owner_id)

    async def get_account(self, owner_id: int, account_id: int) -> Account:
        """계좌 조회

        Raises:
            AccountNotFoundError: 계좌 없음 (다른 사용자 계좌 포함)
        """
        account = await self.store.get_account(account_id, owner_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    async def create_account(self, owner_id: int, draft: NewAccount) -> Account:
        return await self.store.create_account(owner_id, draft)

    async def update_account(
        self, owner_id: int, account_id: int, changes: dict[str, Any]
    ) -> Account:
        account = await self.store.update_account(account_id, owner_id, changes)
        if "balance" in changes:
            logger.warning(
                f"계좌 잔액 직접 보정: {account_id} -> {account.balance}",
                extra={"owner_id": owner_id, "account_id": account_id},
            )
        return account

    async def delete_account(self, owner_id: int, account_id: int) -> None:
        """계좌 삭제

        Raises:
            AccountNotFoundError: 계좌 없음
            AccountInUseError: 거래가 참조 중
        """
        await self.store.delete_account(account_id, owner_id)

    async def get_total_balance(self, owner_id: int) -> Decimal:
        return await self.store.get_total_balance(owner_id)
