"""
In-memory Ledger 저장소

테스트용 ILedgerStore / ILedgerUnit 구현.
SQLite 없이 Coordinator의 원자성/재시도 동작을 검증할 수 있음.

원자성:
- run_atomic은 시도마다 상태 사본을 만들어 unit에 전달
- 성공 시에만 사본으로 교체 (실패/취소 시 사본 폐기)
- asyncio.Lock으로 unit 직렬화
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Awaitable, Callable, TypeVar

from core.ledger.errors import (
    AccountInUseError,
    AccountNotFoundError,
    BudgetNotFoundError,
    DuplicateBudgetError,
    TransientStorageError,
)
from core.ledger.models import (
    Account,
    Budget,
    NewAccount,
    Transaction,
    TransactionDraft,
    TransactionView,
)
from core.ledger.types import TransactionKind
from core.ledger.validation import validate_account_fields
from core.utils.money import to_money
from core.utils.retry import RetryPolicy
from core.utils.timezone import ensure_utc, now_utc

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class InMemoryLedgerState:
    """Ledger 상태 (메모리 내 저장)

    엔티티는 불변 dataclass이므로 dict 얕은 복사로 스냅샷 생성 가능.
    """

    # account_id -> Account
    accounts: dict[int, Account] = field(default_factory=dict)

    # transaction_id -> Transaction
    transactions: dict[int, Transaction] = field(default_factory=dict)

    # budget_id -> Budget
    budgets: dict[int, Budget] = field(default_factory=dict)

    # ID 카운터
    account_counter: int = 0
    transaction_counter: int = 0
    budget_counter: int = 0

    def snapshot(self) -> "InMemoryLedgerState":
        return replace(
            self,
            accounts=dict(self.accounts),
            transactions=dict(self.transactions),
            budgets=dict(self.budgets),
        )


class InMemoryLedgerUnit:
    """In-memory unit-of-work 핸들

    ILedgerUnit Protocol 구현.
    run_atomic이 만든 상태 사본에만 쓰기.
    """

    def __init__(self, state: InMemoryLedgerState):
        self.state = state

    async def get_account(self, account_id: int, owner_id: int) -> Account | None:
        account = self.state.accounts.get(account_id)
        if account is None or account.owner_id != owner_id:
            return None
        return account

    async def get_transaction(
        self, transaction_id: int, owner_id: int
    ) -> Transaction | None:
        transaction = self.state.transactions.get(transaction_id)
        if transaction is None or transaction.owner_id != owner_id:
            return None
        return transaction

    async def save_account_balance(self, account: Account) -> None:
        current = await self.get_account(account.account_id, account.owner_id)
        if current is None:
            raise AccountNotFoundError(account.account_id)

        self.state.accounts[account.account_id] = replace(
            current,
            balance=to_money(account.balance),
            updated_at=account.updated_at or now_utc(),
        )

    async def insert_transaction(
        self, draft: TransactionDraft, at: datetime
    ) -> Transaction:
        self.state.transaction_counter += 1
        transaction = Transaction(
            transaction_id=self.state.transaction_counter,
            owner_id=draft.owner_id,
            account_id=draft.account_id,
            description=draft.description,
            category=draft.category,
            kind=draft.kind,
            amount=to_money(draft.amount),
            transaction_date=ensure_utc(draft.transaction_date),
            to_account_id=draft.to_account_id,
            notes=draft.notes,
            created_at=ensure_utc(at),
            updated_at=ensure_utc(at),
        )
        self.state.transactions[transaction.transaction_id] = transaction
        return transaction

    async def update_transaction_fields(self, transaction: Transaction) -> None:
        current = await self.get_transaction(
            transaction.transaction_id, transaction.owner_id
        )
        if current is None:
            return

        self.state.transactions[transaction.transaction_id] = replace(
            current,
            description=transaction.description,
            category=transaction.category,
            transaction_date=ensure_utc(transaction.transaction_date),
            notes=transaction.notes,
            updated_at=transaction.updated_at or now_utc(),
        )

    async def delete_transaction(self, transaction_id: int, owner_id: int) -> None:
        if await self.get_transaction(transaction_id, owner_id) is not None:
            del self.state.transactions[transaction_id]


class InMemoryLedgerStore:
    """In-memory Ledger 저장소

    ILedgerStore Protocol 구현.

    사용 예시:
    ```python
    store = InMemoryLedgerStore(retry_policy=RetryPolicy.no_retry())
    account = store.add_account(owner_id=1, name="Wallet", balance=Decimal("100"))

    # 다음 2번의 시도를 일시적 오류로 실패시킴
    store.fail_next_attempts = 2
    ```
    """

    def __init__(
        self,
        state: InMemoryLedgerState | None = None,
        retry_policy: RetryPolicy | None = None,
    ):
        self.state = state or InMemoryLedgerState()
        self.retry_policy = retry_policy or RetryPolicy(base_delay=0.0, max_delay=0.0)
        self._lock = asyncio.Lock()

        # 시뮬레이션 옵션
        self.fail_next_attempts: int = 0
        self.attempt_count: int = 0
        self.commit_count: int = 0

    # -------------------------------------------------------------------------
    # 상태 조작 메서드 (테스트용)
    # -------------------------------------------------------------------------

    def add_account(
        self,
        owner_id: int,
        name: str,
        balance: Decimal | int | str = Decimal("0"),
        account_type: str = "checking",
    ) -> Account:
        """계좌 직접 추가 (검증/락 없음)"""
        self.state.account_counter += 1
        at = now_utc()
        account = Account(
            account_id=self.state.account_counter,
            owner_id=owner_id,
            name=name,
            account_type=account_type,
            balance=to_money(balance),
            created_at=at,
            updated_at=at,
        )
        self.state.accounts[account.account_id] = account
        return account

    def remove_account(self, account_id: int) -> None:
        """참조 검사 없이 계좌 제거 (불일치 상황 재현용)"""
        self.state.accounts.pop(account_id, None)

    # -------------------------------------------------------------------------
    # 원자적 실행
    # -------------------------------------------------------------------------

    async def run_atomic(
        self, unit_of_work: Callable[[InMemoryLedgerUnit], Awaitable[T]]
    ) -> T:
        """unit_of_work를 상태 사본 위에서 실행, 성공 시 교체

        fail_next_attempts가 남아 있으면 unit 실행 후 커밋 직전에
        일시적 오류를 발생시켜 사본을 폐기 (커밋 실패 재현).
        """
        return await self._run_with_retry(unit_of_work, operation="run_atomic")

    async def _run_with_retry(
        self,
        operation_fn: Callable[[InMemoryLedgerUnit], Awaitable[T]],
        operation: str,
    ) -> T:
        attempt = 0
        while True:
            attempt += 1
            try:
                async with self._lock:
                    self.attempt_count += 1
                    working = self.state.snapshot()
                    result = await operation_fn(InMemoryLedgerUnit(working))

                    if self.fail_next_attempts > 0:
                        self.fail_next_attempts -= 1
                        raise TransientStorageError(
                            "Simulated transient failure", attempts=attempt
                        )

                    self.state = working
                    self.commit_count += 1
                    return result
            except TransientStorageError as e:
                if not self.retry_policy.should_retry(attempt):
                    logger.error(
                        f"{operation} 재시도 소진: {e}",
                        extra={"operation": operation, "attempts": attempt},
                    )
                    raise TransientStorageError(
                        f"Storage busy, gave up after {attempt} attempts: {e}",
                        attempts=attempt,
                    ) from e

                delay = self.retry_policy.delay_for(attempt)
                logger.warning(
                    f"{operation} 일시적 오류, 재시도: {e}",
                    extra={"operation": operation, "attempt": attempt, "delay": delay},
                )
                await asyncio.sleep(delay)

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def get_account(self, account_id: int, owner_id: int) -> Account | None:
        return await InMemoryLedgerUnit(self.state).get_account(account_id, owner_id)

    async def get_transaction(
        self, transaction_id: int, owner_id: int
    ) -> Transaction | None:
        return await InMemoryLedgerUnit(self.state).get_transaction(
            transaction_id, owner_id
        )

    async def get_transaction_view(
        self, transaction_id: int, owner_id: int
    ) -> TransactionView | None:
        transaction = await self.get_transaction(transaction_id, owner_id)
        if transaction is None:
            return None
        return self._to_view(transaction)

    async def list_transactions(
        self,
        owner_id: int,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        account_id: int | None = None,
    ) -> list[TransactionView]:
        start = ensure_utc(start_date) if start_date is not None else None
        end = ensure_utc(end_date) if end_date is not None else None

        matched = []
        for transaction in self.state.transactions.values():
            if transaction.owner_id != owner_id:
                continue
            if start is not None and transaction.transaction_date < start:
                continue
            if end is not None and transaction.transaction_date > end:
                continue
            if account_id is not None and account_id not in (
                transaction.account_id,
                transaction.to_account_id,
            ):
                continue
            matched.append(transaction)

        matched.sort(
            key=lambda t: (t.transaction_date, t.transaction_id), reverse=True
        )
        return [self._to_view(t) for t in matched]

    async def sum_by_category(
        self,
        owner_id: int,
        kind: TransactionKind,
        start: datetime,
        end: datetime,
    ) -> dict[str, Decimal]:
        start, end = ensure_utc(start), ensure_utc(end)
        totals: dict[str, Decimal] = {}
        for transaction in self.state.transactions.values():
            if transaction.owner_id != owner_id or transaction.kind != kind:
                continue
            if not start <= transaction.transaction_date < end:
                continue
            totals[transaction.category] = (
                totals.get(transaction.category, Decimal("0")) + transaction.amount
            )
        return {category: to_money(total) for category, total in totals.items()}

    async def sum_amounts(
        self,
        owner_id: int,
        kind: TransactionKind,
        start: datetime,
        end: datetime,
        category: str | None = None,
    ) -> Decimal:
        totals = await self.sum_by_category(owner_id, kind, start, end)
        if category is not None:
            return totals.get(category, to_money(0))
        return to_money(sum(totals.values(), Decimal("0")))

    def _to_view(self, transaction: Transaction) -> TransactionView:
        account = self.state.accounts.get(transaction.account_id)
        to_account = (
            self.state.accounts.get(transaction.to_account_id)
            if transaction.to_account_id is not None
            else None
        )
        return TransactionView(
            transaction=transaction,
            account_name=account.name if account else "",
            to_account_name=to_account.name if to_account else None,
        )

    # -------------------------------------------------------------------------
    # 계좌 메타데이터
    # -------------------------------------------------------------------------

    async def list_accounts(self, owner_id: int) -> list[Account]:
        accounts = [a for a in self.state.accounts.values() if a.owner_id == owner_id]
        return sorted(accounts, key=lambda a: (a.name, a.account_id))

    async def create_account(self, owner_id: int, draft: NewAccount) -> Account:
        fields = validate_account_fields(
            {
                "name": draft.name,
                "account_type": draft.account_type,
                "color": draft.color,
                "balance": draft.balance,
            }
        )

        async def insert(unit: InMemoryLedgerUnit) -> Account:
            unit.state.account_counter += 1
            at = now_utc()
            account = Account(
                account_id=unit.state.account_counter,
                owner_id=owner_id,
                created_at=at,
                updated_at=at,
                **fields,
            )
            unit.state.accounts[account.account_id] = account
            return account

        return await self._run_with_retry(insert, operation="create_account")

    async def update_account(
        self, account_id: int, owner_id: int, changes: dict[str, Any]
    ) -> Account:
        values = validate_account_fields(changes)

        async def update(unit: InMemoryLedgerUnit) -> Account:
            current = await unit.get_account(account_id, owner_id)
            if current is None:
                raise AccountNotFoundError(account_id)
            updated = replace(current, updated_at=now_utc(), **values)
            unit.state.accounts[account_id] = updated
            return updated

        return await self._run_with_retry(update, operation="update_account")

    async def delete_account(self, account_id: int, owner_id: int) -> None:
        async def delete(unit: InMemoryLedgerUnit) -> None:
            if await unit.get_account(account_id, owner_id) is None:
                raise AccountNotFoundError(account_id)

            reference_count = sum(
                1
                for t in unit.state.transactions.values()
                if account_id in (t.account_id, t.to_account_id)
            )
            if reference_count > 0:
                raise AccountInUseError(account_id, reference_count)
            del unit.state.accounts[account_id]

        await self._run_with_retry(delete, operation="delete_account")

    async def get_total_balance(self, owner_id: int) -> Decimal:
        accounts = await self.list_accounts(owner_id)
        return to_money(sum((a.balance for a in accounts), Decimal("0")))

    # -------------------------------------------------------------------------
    # 예산
    # -------------------------------------------------------------------------

    async def list_budgets(self, owner_id: int, month: int, year: int) -> list[Budget]:
        budgets = [
            b
            for b in self.state.budgets.values()
            if b.owner_id == owner_id and b.month == month and b.year == year
        ]
        return sorted(budgets, key=lambda b: b.category)

    async def create_budget(
        self, owner_id: int, category: str, amount: Decimal, month: int, year: int
    ) -> Budget:
        async def insert(unit: InMemoryLedgerUnit) -> Budget:
            for existing in unit.state.budgets.values():
                if (existing.owner_id, existing.category, existing.month, existing.year) == (
                    owner_id, category, month, year
                ):
                    raise DuplicateBudgetError(category, month, year)

            unit.state.budget_counter += 1
            at = now_utc()
            budget = Budget(
                budget_id=unit.state.budget_counter,
                owner_id=owner_id,
                category=category,
                amount=to_money(amount),
                month=month,
                year=year,
                created_at=at,
                updated_at=at,
            )
            unit.state.budgets[budget.budget_id] = budget
            return budget

        return await self._run_with_retry(insert, operation="create_budget")

    async def update_budget_amount(
        self, budget_id: int, owner_id: int, amount: Decimal
    ) -> Budget:
        async def update(unit: InMemoryLedgerUnit) -> Budget:
            current = unit.state.budgets.get(budget_id)
            if current is None or current.owner_id != owner_id:
                raise BudgetNotFoundError(budget_id)
            updated = replace(current, amount=to_money(amount), updated_at=now_utc())
            unit.state.budgets[budget_id] = updated
            return updated

        return await self._run_with_retry(update, operation="update_budget_amount")

    async def delete_budget(self, budget_id: int, owner_id: int) -> None:
        async def delete(unit: InMemoryLedgerUnit) -> None:
            current = unit.state.budgets.get(budget_id)
            if current is None or current.owner_id != owner_id:
                raise BudgetNotFoundError(budget_id)
            del unit.state.budgets[budget_id]

        await self._run_with_retry(delete, operation="delete_budget")
