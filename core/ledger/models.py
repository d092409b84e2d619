"""
Ledger 도메인 모델

계좌, 거래, 예산 엔티티와 조회용 View.
모든 금액/잔액은 소수점 2자리 Decimal.

엔티티는 다른 엔티티를 직접 보유하지 않음.
관계는 외래 키(account_id, to_account_id)로만 표현하고 조회로 해석.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal

from core.constants import Defaults, Money
from core.ledger.types import TransactionKind
from core.utils.money import percentage


@dataclass(frozen=True)
class Account:
    """계좌

    Attributes:
        account_id: 계좌 ID
        owner_id: 소유 사용자 ID
        name: 표시 이름
        account_type: 분류 태그 (checking, savings, cash 등 자유 형식)
        balance: 현재 잔액
        color: UI 표시 색상 (hex)
        created_at: 생성 시간 (UTC)
        updated_at: 마지막 변경 시간 (UTC)
    """

    account_id: int
    owner_id: int
    name: str
    account_type: str
    balance: Decimal
    color: str = Defaults.ACCOUNT_COLOR
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def credit(self, amount: Decimal, at: datetime) -> "Account":
        """잔액 증가"""
        return replace(self, balance=self.balance + amount, updated_at=at)

    def debit(self, amount: Decimal, at: datetime) -> "Account":
        """잔액 감소 (잔액 부족 검사는 호출자 책임)"""
        return replace(self, balance=self.balance - amount, updated_at=at)

    def can_cover(self, amount: Decimal) -> bool:
        """amount만큼 출금 가능한지 여부"""
        return self.balance >= amount


@dataclass(frozen=True)
class NewAccount:
    """계좌 생성 요청"""

    name: str
    account_type: str
    balance: Decimal = Money.ZERO
    color: str = Defaults.ACCOUNT_COLOR


@dataclass(frozen=True)
class Transaction:
    """거래 (저장된 레코드)

    amount는 항상 양수. 잔액 영향의 부호는 kind로 결정.
    to_account_id는 TRANSFER일 때만 존재.
    """

    transaction_id: int
    owner_id: int
    account_id: int
    description: str
    category: str
    kind: TransactionKind
    amount: Decimal
    transaction_date: datetime
    to_account_id: int | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class NewTransaction:
    """거래 생성 요청 (검증 전)

    kind는 문자열도 허용하며 Coordinator가 TransactionKind로 파싱.
    """

    account_id: int
    description: str
    category: str
    kind: TransactionKind | str
    amount: Decimal
    transaction_date: datetime
    to_account_id: int | None = None
    notes: str | None = None


@dataclass(frozen=True)
class TransactionDraft:
    """검증을 통과한 거래 (저장 직전)

    ID와 타임스탬프는 저장소에서 부여.
    """

    owner_id: int
    account_id: int
    description: str
    category: str
    kind: TransactionKind
    amount: Decimal
    transaction_date: datetime
    to_account_id: int | None = None
    notes: str | None = None


@dataclass(frozen=True)
class TransactionView:
    """거래 조회 결과 (계좌 이름 포함)

    계좌 이름은 조회 시점에 해석되며 저장되지 않음.
    """

    transaction: Transaction
    account_name: str
    to_account_name: str | None = None

    @property
    def transaction_id(self) -> int:
        return self.transaction.transaction_id

    @property
    def kind(self) -> TransactionKind:
        return self.transaction.kind

    @property
    def amount(self) -> Decimal:
        return self.transaction.amount


@dataclass(frozen=True)
class CategoryExpense:
    """카테고리별 지출 합계

    Attributes:
        category: 카테고리
        amount: 해당 기간 지출 합계
        percentage: 전체 지출 대비 비율 (%)
    """

    category: str
    amount: Decimal
    percentage: float


@dataclass(frozen=True)
class Budget:
    """월별 카테고리 예산

    spent_amount는 저장하지 않고 조회 시 Ledger에서 계산해 채움.
    """

    budget_id: int
    owner_id: int
    category: str
    amount: Decimal
    month: int
    year: int
    spent_amount: Decimal = Money.ZERO
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def remaining_amount(self) -> Decimal:
        """남은 예산 (초과 시 음수)"""
        return self.amount - self.spent_amount

    @property
    def percentage_used(self) -> float:
        """예산 사용률 (%)"""
        return percentage(self.spent_amount, self.amount)


@dataclass(frozen=True)
class MonthlyReport:
    """월간 리포트"""

    month: int
    year: int
    total_income: Decimal
    total_expense: Decimal
    expenses_by_category: list[CategoryExpense] = field(default_factory=list)
    budgets: list[Budget] = field(default_factory=list)

    @property
    def net_savings(self) -> Decimal:
        return self.total_income - self.total_expense


@dataclass(frozen=True)
class DashboardSummary:
    """대시보드 요약 (이번 달 기준)"""

    total_balance: Decimal
    monthly_income: Decimal
    monthly_expense: Decimal
    accounts: list[Account] = field(default_factory=list)
    recent_transactions: list[TransactionView] = field(default_factory=list)
    expense_by_category: list[CategoryExpense] = field(default_factory=list)

    @property
    def net_savings(self) -> Decimal:
        return self.monthly_income - self.monthly_expense
