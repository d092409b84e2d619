"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 소수점 2자리 문자열 (예: "100.00").
"""

from datetime import datetime

from pydantic import BaseModel, Field

from core.ledger.models import (
    Account,
    Budget,
    CategoryExpense,
    DashboardSummary,
    MonthlyReport,
    TransactionView,
)
from core.utils.money import format_money


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    mode: str = Field(..., description="실행 모드 (production/development)")
    version: str = Field(..., description="API 버전")


class AccountResponse(BaseModel):
    """계좌 응답"""

    id: int = Field(..., description="계좌 ID")
    name: str = Field(..., description="계좌 이름")
    type: str = Field(..., description="계좌 유형")
    balance: str = Field(..., description="현재 잔액")
    color: str = Field(..., description="표시 색상")
    created_at: datetime | None = Field(default=None, description="생성 시간 (UTC)")
    updated_at: datetime | None = Field(default=None, description="마지막 변경 시간 (UTC)")

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.account_id,
            name=account.name,
            type=account.account_type,
            balance=format_money(account.balance),
            color=account.color,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class TotalBalanceResponse(BaseModel):
    """전체 잔액 응답"""

    total_balance: str = Field(..., description="전체 계좌 잔액 합계")


class TransactionResponse(BaseModel):
    """거래 응답 (계좌 이름 포함)"""

    id: int = Field(..., description="거래 ID")
    account_id: int = Field(..., description="출발 계좌 ID")
    account_name: str = Field(..., description="출발 계좌 이름")
    description: str = Field(..., description="설명")
    category: str = Field(..., description="카테고리")
    type: str = Field(..., description="거래 유형 (income/expense/transfer)")
    amount: str = Field(..., description="금액")
    to_account_id: int | None = Field(default=None, description="도착 계좌 ID")
    to_account_name: str | None = Field(default=None, description="도착 계좌 이름")
    transaction_date: datetime = Field(..., description="거래 일시 (UTC)")
    notes: str | None = Field(default=None, description="메모")
    created_at: datetime | None = Field(default=None, description="생성 시간 (UTC)")
    updated_at: datetime | None = Field(default=None, description="마지막 변경 시간 (UTC)")

    @classmethod
    def from_view(cls, view: TransactionView) -> "TransactionResponse":
        t = view.transaction
        return cls(
            id=t.transaction_id,
            account_id=t.account_id,
            account_name=view.account_name,
            description=t.description,
            category=t.category,
            type=t.kind.value,
            amount=format_money(t.amount),
            to_account_id=t.to_account_id,
            to_account_name=view.to_account_name,
            transaction_date=t.transaction_date,
            notes=t.notes,
            created_at=t.created_at,
            updated_at=t.updated_at,
        )


class CategoryExpenseResponse(BaseModel):
    """카테고리별 지출"""

    category: str = Field(..., description="카테고리")
    amount: str = Field(..., description="지출 합계")
    percentage: float = Field(..., description="전체 지출 대비 비율 (%)")

    @classmethod
    def from_domain(cls, item: CategoryExpense) -> "CategoryExpenseResponse":
        return cls(
            category=item.category,
            amount=format_money(item.amount),
            percentage=item.percentage,
        )


class BudgetResponse(BaseModel):
    """예산 응답 (사용액/잔여/사용률은 조회 시 계산)"""

    id: int = Field(..., description="예산 ID")
    category: str = Field(..., description="카테고리")
    amount: str = Field(..., description="월 예산 한도")
    spent_amount: str = Field(..., description="해당 월 지출")
    remaining_amount: str = Field(..., description="남은 예산 (초과 시 음수)")
    percentage_used: float = Field(..., description="사용률 (%)")
    month: int = Field(..., description="월")
    year: int = Field(..., description="연도")

    @classmethod
    def from_budget(cls, budget: Budget) -> "BudgetResponse":
        return cls(
            id=budget.budget_id,
            category=budget.category,
            amount=format_money(budget.amount),
            spent_amount=format_money(budget.spent_amount),
            remaining_amount=format_money(budget.remaining_amount),
            percentage_used=budget.percentage_used,
            month=budget.month,
            year=budget.year,
        )


class MonthlyReportResponse(BaseModel):
    """월간 리포트 응답"""

    month: int = Field(..., description="월")
    year: int = Field(..., description="연도")
    total_income: str = Field(..., description="총 수입")
    total_expense: str = Field(..., description="총 지출")
    net_savings: str = Field(..., description="순저축 (수입 - 지출)")
    expenses_by_category: list[CategoryExpenseResponse] = Field(default_factory=list, description="카테고리별 지출")
    budgets: list[BudgetResponse] = Field(default_factory=list, description="예산 현황")

    @classmethod
    def from_report(cls, report: MonthlyReport) -> "MonthlyReportResponse":
        return cls(
            month=report.month,
            year=report.year,
            total_income=format_money(report.total_income),
            total_expense=format_money(report.total_expense),
            net_savings=format_money(report.net_savings),
            expenses_by_category=[
                CategoryExpenseResponse.from_domain(item)
                for item in report.expenses_by_category
            ],
            budgets=[BudgetResponse.from_budget(b) for b in report.budgets],
        )


class DashboardSummaryResponse(BaseModel):
    """대시보드 요약 응답 (이번 달 기준)"""

    total_balance: str = Field(..., description="전체 잔액")
    monthly_income: str = Field(..., description="이번 달 수입")
    monthly_expense: str = Field(..., description="이번 달 지출")
    net_savings: str = Field(..., description="이번 달 순저축")
    accounts: list[AccountResponse] = Field(default_factory=list, description="계좌 목록")
    recent_transactions: list[TransactionResponse] = Field(default_factory=list, description="최근 거래")
    expense_by_category: list[CategoryExpenseResponse] = Field(default_factory=list, description="이번 달 카테고리별 지출")

    @classmethod
    def from_summary(cls, summary: DashboardSummary) -> "DashboardSummaryResponse":
        return cls(
            total_balance=format_money(summary.total_balance),
            monthly_income=format_money(summary.monthly_income),
            monthly_expense=format_money(summary.monthly_expense),
            net_savings=format_money(summary.net_savings),
            accounts=[AccountResponse.from_account(a) for a in summary.accounts],
            recent_transactions=[
                TransactionResponse.from_view(v) for v in summary.recent_transactions
            ],
            expense_by_category=[
                CategoryExpenseResponse.from_domain(item)
                for item in summary.expense_by_category
            ],
        )
