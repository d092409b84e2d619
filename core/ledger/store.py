"""
Ledger 저장소 (SQLite)

계좌/거래/예산 저장 및 조회.
run_atomic으로 잔액 변경과 거래 레코드 변경을 하나의 트랜잭션에서 처리.

동시성:
- 연결 간: BEGIN IMMEDIATE로 잔액을 읽기 전에 쓰기 락 확보 (lost update 방지)
- 연결 내: asyncio.Lock으로 unit 직렬화 (한 연결에서 트랜잭션 중첩 불가)
- 락 경합(database is locked)은 일시적 오류로 보고 unit 전체 재실행
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Awaitable, Callable, TypeVar

from adapters.db.sqlite_adapter import is_transient_error
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
from core.utils.money import format_money, to_money
from core.utils.retry import RetryPolicy
from core.utils.timezone import from_db_timestamp, now_utc, to_db_timestamp

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from adapters.interfaces import UnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar("T")

ACCOUNT_COLUMNS = """
    account_id, owner_id, name, account_type, balance, color,
    created_at, updated_at
"""

TRANSACTION_COLUMNS = """
    t.transaction_id, t.owner_id, t.account_id, t.description, t.category,
    t.kind, t.amount, t.transaction_date, t.to_account_id, t.notes,
    t.created_at, t.updated_at
"""

BUDGET_COLUMNS = """
    budget_id, owner_id, category, amount, month, year, created_at, updated_at
"""


def _row_to_account(row: tuple[Any, ...]) -> Account:
    return Account(
        account_id=row[0],
        owner_id=row[1],
        name=row[2],
        account_type=row[3],
        balance=Decimal(row[4]),
        color=row[5],
        created_at=from_db_timestamp(row[6]),
        updated_at=from_db_timestamp(row[7]),
    )


def _row_to_transaction(row: tuple[Any, ...]) -> Transaction:
    return Transaction(
        transaction_id=row[0],
        owner_id=row[1],
        account_id=row[2],
        description=row[3],
        category=row[4],
        kind=TransactionKind(row[5]),
        amount=Decimal(row[6]),
        transaction_date=from_db_timestamp(row[7]),
        to_account_id=row[8],
        notes=row[9],
        created_at=from_db_timestamp(row[10]),
        updated_at=from_db_timestamp(row[11]),
    )


def _row_to_view(row: tuple[Any, ...]) -> TransactionView:
    """TRANSACTION_COLUMNS + 출발 계좌 이름 + 도착 계좌 이름"""
    return TransactionView(
        transaction=_row_to_transaction(row),
        account_name=row[12] or "",
        to_account_name=row[13],
    )


def _row_to_budget(row: tuple[Any, ...]) -> Budget:
    return Budget(
        budget_id=row[0],
        owner_id=row[1],
        category=row[2],
        amount=Decimal(row[3]),
        month=row[4],
        year=row[5],
        created_at=from_db_timestamp(row[6]),
        updated_at=from_db_timestamp(row[7]),
    )


class SQLiteLedgerUnit:
    """SQLite unit-of-work 핸들

    LedgerStore.run_atomic이 연 트랜잭션 안에서만 사용.
    ILedgerUnit Protocol 구현.
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def get_account(self, account_id: int, owner_id: int) -> Account | None:
        row = await self.db.fetchone(
            f"""
            SELECT {ACCOUNT_COLUMNS}
            FROM accounts
            WHERE account_id = ? AND owner_id = ?
            """,
            (account_id, owner_id),
        )
        return _row_to_account(row) if row else None

    async def get_transaction(
        self, transaction_id: int, owner_id: int
    ) -> Transaction | None:
        row = await self.db.fetchone(
            f"""
            SELECT {TRANSACTION_COLUMNS}
            FROM transactions t
            WHERE t.transaction_id = ? AND t.owner_id = ?
            """,
            (transaction_id, owner_id),
        )
        return _row_to_transaction(row) if row else None

    async def save_account_balance(self, account: Account) -> None:
        """balance, updated_at만 기록 (메타데이터는 건드리지 않음)"""
        updated_at = account.updated_at or now_utc()
        cursor = await self.db.execute(
            """
            UPDATE accounts
            SET balance = ?, updated_at = ?
            WHERE account_id = ? AND owner_id = ?
            """,
            (
                format_money(account.balance),
                to_db_timestamp(updated_at),
                account.account_id,
                account.owner_id,
            ),
        )
        if cursor.rowcount == 0:
            raise AccountNotFoundError(account.account_id)

    async def insert_transaction(
        self, draft: TransactionDraft, at: datetime
    ) -> Transaction:
        stamp = to_db_timestamp(at)
        cursor = await self.db.execute(
            """
            INSERT INTO transactions (
                owner_id, account_id, to_account_id, description, category,
                kind, amount, transaction_date, notes, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                draft.owner_id,
                draft.account_id,
                draft.to_account_id,
                draft.description,
                draft.category,
                draft.kind.value,
                format_money(draft.amount),
                to_db_timestamp(draft.transaction_date),
                draft.notes,
                stamp,
                stamp,
            ),
        )

        return Transaction(
            transaction_id=cursor.lastrowid,
            owner_id=draft.owner_id,
            account_id=draft.account_id,
            description=draft.description,
            category=draft.category,
            kind=draft.kind,
            amount=to_money(draft.amount),
            transaction_date=from_db_timestamp(to_db_timestamp(draft.transaction_date)),
            to_account_id=draft.to_account_id,
            notes=draft.notes,
            created_at=from_db_timestamp(stamp),
            updated_at=from_db_timestamp(stamp),
        )

    async def update_transaction_fields(self, transaction: Transaction) -> None:
        updated_at = transaction.updated_at or now_utc()
        await self.db.execute(
            """
            UPDATE transactions
            SET description = ?, category = ?, transaction_date = ?,
                notes = ?, updated_at = ?
            WHERE transaction_id = ? AND owner_id = ?
            """,
            (
                transaction.description,
                transaction.category,
                to_db_timestamp(transaction.transaction_date),
                transaction.notes,
                to_db_timestamp(updated_at),
                transaction.transaction_id,
                transaction.owner_id,
            ),
        )

    async def delete_transaction(self, transaction_id: int, owner_id: int) -> None:
        await self.db.execute(
            "DELETE FROM transactions WHERE transaction_id = ? AND owner_id = ?",
            (transaction_id, owner_id),
        )


class LedgerStore:
    """Ledger 저장소 (SQLite)

    ILedgerStore Protocol 구현.
    하나의 SQLiteAdapter 연결을 사용하며, 연결 내 작업은 asyncio.Lock으로 직렬화.

    Args:
        db: 연결된 SQLiteAdapter (쓰기 가능)
        retry_policy: 일시적 오류 재시도 정책

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        store = LedgerStore(db)

        async def unit(u):
            account = await u.get_account(1, owner_id)
            await u.save_account_balance(account.credit(amount, now_utc()))

        await store.run_atomic(unit)
    ```
    """

    def __init__(self, db: SQLiteAdapter, retry_policy: RetryPolicy | None = None):
        self.db = db
        self.retry_policy = retry_policy or RetryPolicy()
        self._lock = asyncio.Lock()

    # =========================================================================
    # 원자적 실행
    # =========================================================================

    async def run_atomic(self, unit_of_work: UnitOfWork[T]) -> T:
        """unit_of_work를 BEGIN IMMEDIATE 트랜잭션 안에서 실행

        일시적 오류 시 unit_of_work를 처음부터 재실행.
        그 외 예외는 롤백 후 그대로 전파.

        주의: unit_of_work 안에서 LedgerStore의 공개 메서드를 호출하면 안 됨
        (락 재진입 불가). 전달받은 unit 핸들만 사용.
        """

        async def attempt() -> T:
            return await unit_of_work(SQLiteLedgerUnit(self.db))

        return await self._run_with_retry(attempt, operation="run_atomic")

    async def _run_with_retry(
        self,
        operation_fn: Callable[[], Awaitable[T]],
        operation: str,
    ) -> T:
        """트랜잭션 + 재시도 실행

        Args:
            operation_fn: 트랜잭션 안에서 실행할 코루틴 함수
            operation: 로그용 작업 이름

        Raises:
            TransientStorageError: 재시도 소진
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                async with self._lock:
                    async with self.db.transaction(immediate=True):
                        return await operation_fn()
            except Exception as e:
                if not self._is_transient(e):
                    raise

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

    @staticmethod
    def _is_transient(exc: BaseException) -> bool:
        if isinstance(exc, TransientStorageError):
            return True
        return is_transient_error(exc)

    # =========================================================================
    # 조회
    # =========================================================================

    async def get_account(self, account_id: int, owner_id: int) -> Account | None:
        async with self._lock:
            return await SQLiteLedgerUnit(self.db).get_account(account_id, owner_id)

    async def get_transaction(
        self, transaction_id: int, owner_id: int
    ) -> Transaction | None:
        async with self._lock:
            return await SQLiteLedgerUnit(self.db).get_transaction(
                transaction_id, owner_id
            )

    async def get_transaction_view(
        self, transaction_id: int, owner_id: int
    ) -> TransactionView | None:
        async with self._lock:
            row = await self.db.fetchone(
                f"""
                SELECT {TRANSACTION_COLUMNS}, a.name, ta.name
                FROM transactions t
                LEFT JOIN accounts a ON a.account_id = t.account_id
                LEFT JOIN accounts ta ON ta.account_id = t.to_account_id
                WHERE t.transaction_id = ? AND t.owner_id = ?
                """,
                (transaction_id, owner_id),
            )
        return _row_to_view(row) if row else None

    async def list_transactions(
        self,
        owner_id: int,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        account_id: int | None = None,
    ) -> list[TransactionView]:
        """거래 목록 (transaction_date 최신순, 같으면 ID 역순)

        Args:
            owner_id: 소유자
            start_date: 시작 (포함)
            end_date: 종료 (포함)
            account_id: 출발 또는 도착 계좌 필터
        """
        conditions = ["t.owner_id = ?"]
        params: list[Any] = [owner_id]

        if start_date is not None:
            conditions.append("t.transaction_date >= ?")
            params.append(to_db_timestamp(start_date))
        if end_date is not None:
            conditions.append("t.transaction_date <= ?")
            params.append(to_db_timestamp(end_date))
        if account_id is not None:
            conditions.append("(t.account_id = ? OR t.to_account_id = ?)")
            params.extend([account_id, account_id])

        sql = f"""
            SELECT {TRANSACTION_COLUMNS}, a.name, ta.name
            FROM transactions t
            LEFT JOIN accounts a ON a.account_id = t.account_id
            LEFT JOIN accounts ta ON ta.account_id = t.to_account_id
            WHERE {" AND ".join(conditions)}
            ORDER BY t.transaction_date DESC, t.transaction_id DESC
        """

        async with self._lock:
            rows = await self.db.fetchall(sql, tuple(params))
        return [_row_to_view(row) for row in rows]

    async def sum_by_category(
        self,
        owner_id: int,
        kind: TransactionKind,
        start: datetime,
        end: datetime,
    ) -> dict[str, Decimal]:
        """[start, end) 구간 카테고리별 합계

        금액은 TEXT 저장이므로 SQL SUM(부동소수) 대신 Decimal로 합산.
        """
        async with self._lock:
            rows = await self.db.fetchall(
                """
                SELECT category, amount
                FROM transactions
                WHERE owner_id = ? AND kind = ?
                  AND transaction_date >= ? AND transaction_date < ?
                """,
                (owner_id, kind.value, to_db_timestamp(start), to_db_timestamp(end)),
            )

        totals: dict[str, Decimal] = {}
        for category, amount in rows:
            totals[category] = totals.get(category, Decimal("0")) + Decimal(amount)
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

    # =========================================================================
    # 계좌 메타데이터
    # =========================================================================

    async def list_accounts(self, owner_id: int) -> list[Account]:
        async with self._lock:
            rows = await self.db.fetchall(
                f"""
                SELECT {ACCOUNT_COLUMNS}
                FROM accounts
                WHERE owner_id = ?
                ORDER BY name, account_id
                """,
                (owner_id,),
            )
        return [_row_to_account(row) for row in rows]

    async def create_account(self, owner_id: int, draft: NewAccount) -> Account:
        fields = validate_account_fields(
            {
                "name": draft.name,
                "account_type": draft.account_type,
                "color": draft.color,
                "balance": draft.balance,
            }
        )
        stamp = to_db_timestamp(now_utc())
        balance = fields["balance"]

        async def insert() -> int:
            cursor = await self.db.execute(
                """
                INSERT INTO accounts (
                    owner_id, name, account_type, balance, color,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    owner_id,
                    draft.name,
                    draft.account_type,
                    format_money(balance),
                    draft.color,
                    stamp,
                    stamp,
                ),
            )
            return cursor.lastrowid

        account_id = await self._run_with_retry(insert, operation="create_account")
        logger.info(
            f"Account created: {account_id}",
            extra={"owner_id": owner_id, "balance": str(balance)},
        )

        return Account(
            account_id=account_id,
            owner_id=owner_id,
            name=draft.name,
            account_type=draft.account_type,
            balance=balance,
            color=draft.color,
            created_at=from_db_timestamp(stamp),
            updated_at=from_db_timestamp(stamp),
        )

    async def update_account(
        self, account_id: int, owner_id: int, changes: dict[str, Any]
    ) -> Account:
        """계좌 메타데이터 수정

        balance 직접 수정(override)도 허용 (거래 기록과 별개의 보정).

        Raises:
            ValidationError: 수정할 수 없는 필드
            AccountNotFoundError: 계좌 없음
        """
        values = validate_account_fields(changes)
        if "balance" in values:
            values["balance"] = format_money(values["balance"])

        async def update() -> Account:
            unit = SQLiteLedgerUnit(self.db)
            current = await unit.get_account(account_id, owner_id)
            if current is None:
                raise AccountNotFoundError(account_id)

            assignments = [f"{name} = ?" for name in values]
            params = list(values.values())
            assignments.append("updated_at = ?")
            params.append(to_db_timestamp(now_utc()))

            await self.db.execute(
                f"""
                UPDATE accounts SET {", ".join(assignments)}
                WHERE account_id = ? AND owner_id = ?
                """,
                (*params, account_id, owner_id),
            )
            updated = await unit.get_account(account_id, owner_id)
            assert updated is not None
            return updated

        account = await self._run_with_retry(update, operation="update_account")
        logger.info(
            f"Account updated: {account_id}",
            extra={"owner_id": owner_id, "fields": sorted(values)},
        )
        return account

    async def delete_account(self, account_id: int, owner_id: int) -> None:
        """계좌 삭제

        출발 또는 도착 계좌로 참조하는 거래가 하나라도 있으면 거부.

        Raises:
            AccountNotFoundError: 계좌 없음
            AccountInUseError: 참조 중인 거래 존재
        """

        async def delete() -> None:
            unit = SQLiteLedgerUnit(self.db)
            if await unit.get_account(account_id, owner_id) is None:
                raise AccountNotFoundError(account_id)

            row = await self.db.fetchone(
                """
                SELECT COUNT(*) FROM transactions
                WHERE account_id = ? OR to_account_id = ?
                """,
                (account_id, account_id),
            )
            reference_count = row[0] if row else 0
            if reference_count > 0:
                raise AccountInUseError(account_id, reference_count)

            try:
                await self.db.execute(
                    "DELETE FROM accounts WHERE account_id = ? AND owner_id = ?",
                    (account_id, owner_id),
                )
            except sqlite3.IntegrityError as e:
                # 외래 키 RESTRICT (동시 삽입 등)
                raise AccountInUseError(account_id, reference_count) from e

        await self._run_with_retry(delete, operation="delete_account")
        logger.info(f"Account deleted: {account_id}", extra={"owner_id": owner_id})

    async def get_total_balance(self, owner_id: int) -> Decimal:
        accounts = await self.list_accounts(owner_id)
        return to_money(sum((a.balance for a in accounts), Decimal("0")))

    # =========================================================================
    # 예산
    # =========================================================================

    async def list_budgets(self, owner_id: int, month: int, year: int) -> list[Budget]:
        async with self._lock:
            rows = await self.db.fetchall(
                f"""
                SELECT {BUDGET_COLUMNS}
                FROM budgets
                WHERE owner_id = ? AND month = ? AND year = ?
                ORDER BY category
                """,
                (owner_id, month, year),
            )
        return [_row_to_budget(row) for row in rows]

    async def create_budget(
        self, owner_id: int, category: str, amount: Decimal, month: int, year: int
    ) -> Budget:
        stamp = to_db_timestamp(now_utc())

        async def insert() -> int:
            try:
                cursor = await self.db.execute(
                    """
                    INSERT INTO budgets (
                        owner_id, category, amount, month, year,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (owner_id, category, format_money(amount), month, year, stamp, stamp),
                )
            except sqlite3.IntegrityError as e:
                raise DuplicateBudgetError(category, month, year) from e
            return cursor.lastrowid

        budget_id = await self._run_with_retry(insert, operation="create_budget")
        logger.info(
            f"Budget created: {budget_id}",
            extra={"owner_id": owner_id, "category": category},
        )

        return Budget(
            budget_id=budget_id,
            owner_id=owner_id,
            category=category,
            amount=to_money(amount),
            month=month,
            year=year,
            created_at=from_db_timestamp(stamp),
            updated_at=from_db_timestamp(stamp),
        )

    async def update_budget_amount(
        self, budget_id: int, owner_id: int, amount: Decimal
    ) -> Budget:
        async def update() -> Budget:
            cursor = await self.db.execute(
                """
                UPDATE budgets SET amount = ?, updated_at = ?
                WHERE budget_id = ? AND owner_id = ?
                """,
                (format_money(amount), to_db_timestamp(now_utc()), budget_id, owner_id),
            )
            if cursor.rowcount == 0:
                raise BudgetNotFoundError(budget_id)

            row = await self.db.fetchone(
                f"SELECT {BUDGET_COLUMNS} FROM budgets WHERE budget_id = ?",
                (budget_id,),
            )
            assert row is not None
            return _row_to_budget(row)

        return await self._run_with_retry(update, operation="update_budget_amount")

    async def delete_budget(self, budget_id: int, owner_id: int) -> None:
        async def delete() -> None:
            cursor = await self.db.execute(
                "DELETE FROM budgets WHERE budget_id = ? AND owner_id = ?",
                (budget_id, owner_id),
            )
            if cursor.rowcount == 0:
                raise BudgetNotFoundError(budget_id)

        await self._run_with_retry(delete, operation="delete_budget")
