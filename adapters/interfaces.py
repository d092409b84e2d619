"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체(SQLite, In-memory)는 이 Protocol을 준수해야 함.
금액/잔액은 반드시 Decimal 타입 사용.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Awaitable, Callable, Protocol, TypeVar, runtime_checkable

from core.ledger.models import (
    Account,
    Budget,
    NewAccount,
    Transaction,
    TransactionDraft,
    TransactionView,
)
from core.ledger.types import TransactionKind

T = TypeVar("T")


@runtime_checkable
class ILedgerUnit(Protocol):
    """Atomic unit 내부에서 사용하는 읽기/쓰기 핸들

    run_atomic에 전달된 unit_of_work 안에서만 유효.
    이 핸들로 수행한 쓰기는 unit이 커밋될 때 함께 반영되거나
    함께 폐기됨.
    """

    async def get_account(self, account_id: int, owner_id: int) -> Account | None:
        """소유자 범위 계좌 조회 (unit 스냅샷 기준)"""
        ...

    async def get_transaction(
        self, transaction_id: int, owner_id: int
    ) -> Transaction | None:
        """소유자 범위 거래 조회 (unit 스냅샷 기준)"""
        ...

    async def save_account_balance(self, account: Account) -> None:
        """계좌의 balance, updated_at만 기록"""
        ...

    async def insert_transaction(
        self, draft: TransactionDraft, at: datetime
    ) -> Transaction:
        """거래 레코드 추가 (ID 부여)"""
        ...

    async def update_transaction_fields(self, transaction: Transaction) -> None:
        """잔액과 무관한 필드(description, category, transaction_date, notes) 기록"""
        ...

    async def delete_transaction(self, transaction_id: int, owner_id: int) -> None:
        """거래 레코드 삭제"""
        ...


UnitOfWork = Callable[[ILedgerUnit], Awaitable[T]]


@runtime_checkable
class ILedgerStore(Protocol):
    """Ledger 저장소 인터페이스

    계좌/거래의 영속 저장, 참조 무결성 보장,
    그리고 run_atomic을 통한 원자적 실행 + 일시적 오류 재시도 제공.
    """

    # -------------------------------------------------------------------------
    # 원자적 실행
    # -------------------------------------------------------------------------

    async def run_atomic(self, unit_of_work: UnitOfWork[T]) -> T:
        """unit_of_work를 하나의 원자적 단위로 실행

        - 일시적 오류 시 unit_of_work를 처음부터 재실행 (재시도 정책 범위 내)
        - 그 외 예외 시 해당 시도의 모든 쓰기를 폐기하고 예외를 그대로 전파
        - 재시도 소진 시 TransientStorageError

        unit_of_work는 커밋 전까지 저장소 밖에 부수 효과가 없어야 함
        (안전하게 반복 실행 가능해야 함).
        """
        ...

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def get_account(self, account_id: int, owner_id: int) -> Account | None:
        ...

    async def get_transaction(
        self, transaction_id: int, owner_id: int
    ) -> Transaction | None:
        ...

    async def get_transaction_view(
        self, transaction_id: int, owner_id: int
    ) -> TransactionView | None:
        """계좌 이름을 포함한 거래 조회"""
        ...

    async def list_transactions(
        self,
        owner_id: int,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        account_id: int | None = None,
    ) -> list[TransactionView]:
        """거래 목록 (transaction_date 최신순)

        Args:
            owner_id: 소유자
            start_date: 시작일 (포함)
            end_date: 종료일 (포함)
            account_id: 출발 또는 도착 계좌 필터
        """
        ...

    async def sum_by_category(
        self,
        owner_id: int,
        kind: TransactionKind,
        start: datetime,
        end: datetime,
    ) -> dict[str, Decimal]:
        """[start, end) 구간의 카테고리별 금액 합계"""
        ...

    async def sum_amounts(
        self,
        owner_id: int,
        kind: TransactionKind,
        start: datetime,
        end: datetime,
        category: str | None = None,
    ) -> Decimal:
        """[start, end) 구간의 금액 합계"""
        ...

    # -------------------------------------------------------------------------
    # 계좌 메타데이터
    # -------------------------------------------------------------------------

    async def list_accounts(self, owner_id: int) -> list[Account]:
        """계좌 목록 (이름순)"""
        ...

    async def create_account(self, owner_id: int, draft: NewAccount) -> Account:
        ...

    async def update_account(
        self, account_id: int, owner_id: int, changes: dict[str, Any]
    ) -> Account:
        """이름/유형/색상/잔액 직접 수정 (AccountNotFoundError)"""
        ...

    async def delete_account(self, account_id: int, owner_id: int) -> None:
        """계좌 삭제 (AccountNotFoundError, AccountInUseError)"""
        ...

    async def get_total_balance(self, owner_id: int) -> Decimal:
        ...

    # -------------------------------------------------------------------------
    # 예산
    # -------------------------------------------------------------------------

    async def list_budgets(self, owner_id: int, month: int, year: int) -> list[Budget]:
        """해당 월 예산 목록 (spent_amount 미계산)"""
        ...

    async def create_budget(
        self, owner_id: int, category: str, amount: Decimal, month: int, year: int
    ) -> Budget:
        """예산 생성 (DuplicateBudgetError)"""
        ...

    async def update_budget_amount(
        self, budget_id: int, owner_id: int, amount: Decimal
    ) -> Budget:
        """예산 한도 변경 (BudgetNotFoundError)"""
        ...

    async def delete_budget(self, budget_id: int, owner_id: int) -> None:
        """예산 삭제 (BudgetNotFoundError)"""
        ...
