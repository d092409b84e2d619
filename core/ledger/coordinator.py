"""
거래 Coordinator

거래 생성/수정/삭제를 계좌 잔액과 함께 원자적으로 처리.

잔액 규칙:
- INCOME: 출발 계좌 += amount
- EXPENSE: 출발 계좌 -= amount (잔액 부족 시 거부)
- TRANSFER: 출발 계좌 -= amount (잔액 부족 시 거부), 도착 계좌 += amount

삭제는 위 효과를 정확히 되돌림 (역분개는 잔액이 음수가 되어도 허용).
반영 후 잔액 절대값이 Money.MAX_AMOUNT를 넘으면 거부.
금액/유형/계좌는 생성 후 변경 불가 (삭제 후 재생성).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.constants import FieldLimits, Money
from core.ledger.errors import (
    AccountNotFoundError,
    BalanceLimitExceededError,
    DestinationAccountMissingError,
    ImmutableFieldError,
    InsufficientBalanceError,
    LedgerInconsistencyError,
    SameAccountTransferError,
    TransactionNotFoundError,
    UnexpectedDestinationError,
    ValidationError,
)
from core.ledger.models import (
    Account,
    CategoryExpense,
    NewTransaction,
    Transaction,
    TransactionDraft,
    TransactionView,
)
from core.ledger.types import (
    IMMUTABLE_TRANSACTION_FIELDS,
    MUTABLE_TRANSACTION_FIELDS,
    TransactionKind,
)
from core.ledger.validation import validate_amount, validate_text
from core.utils.money import percentage, to_money
from core.utils.timezone import ensure_utc, month_range, now_utc

if TYPE_CHECKING:
    from adapters.interfaces import ILedgerStore, ILedgerUnit

logger = logging.getLogger(__name__)


class TransactionCoordinator:
    """거래 Coordinator

    모든 쓰기는 store.run_atomic 안에서 수행.
    unit_of_work는 재시도 시 처음부터 다시 실행되므로
    로그 등 외부 부수 효과는 커밋 이후에만 발생시킴.

    Args:
        store: ILedgerStore 구현체 (SQLite 또는 In-memory)

    사용 예시:
    ```python
    coordinator = TransactionCoordinator(store)

    view = await coordinator.create(owner_id, NewTransaction(
        account_id=1,
        description="Lunch",
        category="Food",
        kind="expense",
        amount=Decimal("12.50"),
        transaction_date=now_utc(),
    ))
    ```
    """

    def __init__(self, store: ILedgerStore):
        self.store = store

    # =========================================================================
    # 생성
    # =========================================================================

    async def create(self, owner_id: int, request: NewTransaction) -> TransactionView:
        """거래 생성 + 잔액 반영

        Args:
            owner_id: 요청 사용자 ID
            request: 거래 생성 요청

        Returns:
            저장된 거래 (계좌 이름 포함)

        Raises:
            ValidationError: 요청 값 오류 (저장소 접근 전)
            AccountNotFoundError: 출발/도착 계좌 없음
            InsufficientBalanceError: 출금 계좌 잔액 부족
            BalanceLimitExceededError: 반영 후 잔액이 상한 초과
            TransientStorageError: 재시도 소진
        """
        draft = self._build_draft(owner_id, request)

        async def unit_of_work(unit: ILedgerUnit) -> TransactionView:
            at = now_utc()

            source = await unit.get_account(draft.account_id, owner_id)
            if source is None:
                raise AccountNotFoundError(draft.account_id)

            destination = None
            if draft.kind is TransactionKind.INCOME:
                source = source.credit(draft.amount, at)

            elif draft.kind is TransactionKind.EXPENSE:
                if not source.can_cover(draft.amount):
                    raise InsufficientBalanceError(
                        source.account_id, source.balance, draft.amount
                    )
                source = source.debit(draft.amount, at)

            else:
                assert draft.to_account_id is not None
                destination = await unit.get_account(draft.to_account_id, owner_id)
                if destination is None:
                    raise AccountNotFoundError(draft.to_account_id)
                if not source.can_cover(draft.amount):
                    raise InsufficientBalanceError(
                        source.account_id, source.balance, draft.amount
                    )
                source = source.debit(draft.amount, at)
                destination = destination.credit(draft.amount, at)

            _check_balance_limit(source, destination)

            transaction = await unit.insert_transaction(draft, at)
            await unit.save_account_balance(source)
            if destination is not None:
                await unit.save_account_balance(destination)

            return TransactionView(
                transaction=transaction,
                account_name=source.name,
                to_account_name=destination.name if destination else None,
            )

        view = await self.store.run_atomic(unit_of_work)

        logger.info(
            f"Transaction created: {view.transaction_id} ({draft.kind.value} {draft.amount})",
            extra={
                "owner_id": owner_id,
                "transaction_id": view.transaction_id,
                "account_id": draft.account_id,
                "to_account_id": draft.to_account_id,
            },
        )
        return view

    def _build_draft(self, owner_id: int, request: NewTransaction) -> TransactionDraft:
        """생성 요청 검증 (저장소 접근 없음)"""
        amount = validate_amount(request.amount)
        kind = TransactionKind.parse(request.kind)

        if kind.requires_destination:
            if request.to_account_id is None:
                raise DestinationAccountMissingError()
            if request.to_account_id == request.account_id:
                raise SameAccountTransferError(request.account_id)
        elif request.to_account_id is not None:
            raise UnexpectedDestinationError(kind.value)

        return TransactionDraft(
            owner_id=owner_id,
            account_id=request.account_id,
            description=validate_text(
                "description", request.description, FieldLimits.DESCRIPTION
            ),
            category=validate_text("category", request.category, FieldLimits.CATEGORY),
            kind=kind,
            amount=amount,
            transaction_date=_validate_date(request.transaction_date),
            to_account_id=request.to_account_id,
            notes=validate_text(
                "notes", request.notes, FieldLimits.NOTES, required=False
            ),
        )

    # =========================================================================
    # 수정
    # =========================================================================

    async def update(
        self,
        owner_id: int,
        transaction_id: int,
        changes: Mapping[str, Any],
    ) -> TransactionView:
        """잔액과 무관한 필드만 수정 (잔액 재계산 없음)

        Args:
            owner_id: 요청 사용자 ID
            transaction_id: 거래 ID
            changes: 수정할 필드 (description, category, transaction_date, notes)

        Raises:
            ImmutableFieldError: 금액/유형/계좌 변경 시도
            ValidationError: 알 수 없는 필드 또는 잘못된 값
            TransactionNotFoundError: 거래 없음
        """
        fields = self._validate_changes(changes)

        async def unit_of_work(unit: ILedgerUnit) -> TransactionView:
            current = await unit.get_transaction(transaction_id, owner_id)
            if current is None:
                raise TransactionNotFoundError(transaction_id)

            updated = replace(current, updated_at=now_utc(), **fields)
            await unit.update_transaction_fields(updated)
            return await _resolve_view(unit, updated)

        view = await self.store.run_atomic(unit_of_work)

        logger.info(
            f"Transaction updated: {transaction_id}",
            extra={"owner_id": owner_id, "fields": sorted(fields)},
        )
        return view

    def _validate_changes(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        keys = set(changes)

        immutable = sorted(keys & IMMUTABLE_TRANSACTION_FIELDS)
        if immutable:
            raise ImmutableFieldError(immutable)

        unknown = sorted(keys - MUTABLE_TRANSACTION_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown transaction fields: {', '.join(unknown)}")

        fields: dict[str, Any] = {}
        if "description" in changes:
            fields["description"] = validate_text(
                "description", changes["description"], FieldLimits.DESCRIPTION
            )
        if "category" in changes:
            fields["category"] = validate_text(
                "category", changes["category"], FieldLimits.CATEGORY
            )
        if "transaction_date" in changes:
            fields["transaction_date"] = _validate_date(changes["transaction_date"])
        if "notes" in changes:
            # None은 메모 삭제
            fields["notes"] = validate_text(
                "notes", changes["notes"], FieldLimits.NOTES, required=False
            )
        return fields

    # =========================================================================
    # 삭제
    # =========================================================================

    async def delete(self, owner_id: int, transaction_id: int) -> None:
        """거래 삭제 + 잔액 역분개

        Raises:
            TransactionNotFoundError: 거래 없음
            BalanceLimitExceededError: 역분개 후 잔액이 상한 초과
            LedgerInconsistencyError: 역분개 대상 계좌가 사라짐 (부분 역분개 없음)
        """

        async def unit_of_work(unit: ILedgerUnit) -> Transaction:
            at = now_utc()

            transaction = await unit.get_transaction(transaction_id, owner_id)
            if transaction is None:
                raise TransactionNotFoundError(transaction_id)

            source = await unit.get_account(transaction.account_id, owner_id)
            if source is None:
                raise LedgerInconsistencyError(
                    f"Source account {transaction.account_id} of transaction "
                    f"{transaction_id} no longer exists"
                )

            destination = None
            if transaction.kind is TransactionKind.INCOME:
                source = source.debit(transaction.amount, at)

            elif transaction.kind is TransactionKind.EXPENSE:
                source = source.credit(transaction.amount, at)

            else:
                destination = (
                    await unit.get_account(transaction.to_account_id, owner_id)
                    if transaction.to_account_id is not None
                    else None
                )
                if destination is None:
                    raise LedgerInconsistencyError(
                        f"Destination account {transaction.to_account_id} of "
                        f"transaction {transaction_id} no longer exists"
                    )
                source = source.credit(transaction.amount, at)
                destination = destination.debit(transaction.amount, at)

            _check_balance_limit(source, destination)

            await unit.delete_transaction(transaction_id, owner_id)
            await unit.save_account_balance(source)
            if destination is not None:
                await unit.save_account_balance(destination)

            return transaction

        try:
            deleted = await self.store.run_atomic(unit_of_work)
        except LedgerInconsistencyError as e:
            logger.error(
                f"Ledger 불일치로 삭제 중단: {e}",
                extra={"owner_id": owner_id, "transaction_id": transaction_id},
            )
            raise

        logger.info(
            f"Transaction deleted: {transaction_id} ({deleted.kind.value} {deleted.amount})",
            extra={"owner_id": owner_id, "account_id": deleted.account_id},
        )

    # =========================================================================
    # 조회
    # =========================================================================

    async def get(self, owner_id: int, transaction_id: int) -> TransactionView:
        view = await self.store.get_transaction_view(transaction_id, owner_id)
        if view is None:
            raise TransactionNotFoundError(transaction_id)
        return view

    async def list(
        self,
        owner_id: int,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[TransactionView]:
        """거래 목록 (최신순, 날짜 범위 양끝 포함)"""
        return await self.store.list_transactions(
            owner_id, start_date=start_date, end_date=end_date
        )

    async def list_for_account(
        self, owner_id: int, account_id: int
    ) -> list[TransactionView]:
        """출발 또는 도착 계좌가 account_id인 거래 목록

        Raises:
            AccountNotFoundError: 계좌 없음
        """
        if await self.store.get_account(account_id, owner_id) is None:
            raise AccountNotFoundError(account_id)
        return await self.store.list_transactions(owner_id, account_id=account_id)

    async def expenses_by_category(
        self, owner_id: int, month: int, year: int
    ) -> list[CategoryExpense]:
        """해당 월 카테고리별 지출 (금액 내림차순)

        이체는 지출에 포함하지 않음.
        """
        try:
            start, end = month_range(year, month)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        totals = await self.store.sum_by_category(
            owner_id, TransactionKind.EXPENSE, start, end
        )
        return build_category_breakdown(totals)


def build_category_breakdown(totals: Mapping[str, Decimal]) -> list[CategoryExpense]:
    """카테고리별 합계를 비율 포함 목록으로 변환

    금액 내림차순, 같으면 카테고리 이름순.
    """
    grand_total = sum(totals.values(), Decimal("0"))
    breakdown = [
        CategoryExpense(
            category=category,
            amount=to_money(amount),
            percentage=percentage(amount, grand_total),
        )
        for category, amount in totals.items()
    ]
    breakdown.sort(key=lambda item: (-item.amount, item.category))
    return breakdown



def _check_balance_limit(*accounts: Account | None) -> None:
    for account in accounts:
        if account is not None and abs(account.balance) > Money.MAX_AMOUNT:
            raise BalanceLimitExceededError(
                account.account_id, account.balance, Money.MAX_AMOUNT
            )

async def _resolve_view(unit: ILedgerUnit, transaction: Transaction) -> TransactionView:
    source = await unit.get_account(transaction.account_id, transaction.owner_id)
    destination = None
    if transaction.to_account_id is not None:
        destination = await unit.get_account(
            transaction.to_account_id, transaction.owner_id
        )
    return TransactionView(
        transaction=transaction,
        account_name=source.name if source else "",
        to_account_name=destination.name if destination else None,
    )


def _validate_date(value: Any) -> datetime:
    if not isinstance(value, datetime):
        raise ValidationError("transaction_date must be a datetime")
    return ensure_utc(value)
