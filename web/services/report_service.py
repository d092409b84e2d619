"""
Report 서비스

월간 리포트와 대시보드 요약.
이체는 수입/지출에 포함하지 않음 (계좌 간 이동일 뿐).
"""

import logging
from datetime import datetime
from decimal import Decimal

from adapters.interfaces import ILedgerStore
from core.constants import Defaults
from core.ledger.coordinator import build_category_breakdown
from core.ledger.errors import ValidationError
from core.ledger.models import DashboardSummary, MonthlyReport
from core.ledger.types import TransactionKind
from core.utils.money import to_money
from core.utils.timezone import ensure_utc, month_range, now_utc
from web.services.budget_service import BudgetService

logger = logging.getLogger(__name__)


class ReportService:
    """Report 서비스

    Args:
        store: Ledger 저장소
    """

    def __init__(self, store: ILedgerStore):
        self.store = store

    async def monthly_report(self, owner_id: int, month: int, year: int) -> MonthlyReport:
        """월간 리포트

        Returns:
            총 수입/지출, 카테고리별 지출, 예산 현황

        Raises:
            ValidationError: month가 1-12 범위 밖
        """
        try:
            start, end = month_range(year, month)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        income = await self.store.sum_amounts(owner_id, TransactionKind.INCOME, start, end)
        expenses = await self.store.sum_by_category(
            owner_id, TransactionKind.EXPENSE, start, end
        )
        budgets = await BudgetService(self.store).list_budgets(owner_id, month, year)

        breakdown = build_category_breakdown(expenses)
        return MonthlyReport(
            month=month,
            year=year,
            total_income=income,
            total_expense=to_money(sum((item.amount for item in breakdown), Decimal("0"))),
            expenses_by_category=breakdown,
            budgets=budgets,
        )

    async def dashboard_summary(
        self, owner_id: int, today: datetime | None = None
    ) -> DashboardSummary:
        """대시보드 요약 (today가 속한 달 기준, 기본 현재 UTC)"""
        today = ensure_utc(today) if today is not None else now_utc()
        report = await self.monthly_report(owner_id, today.month, today.year)

        accounts = await self.store.list_accounts(owner_id)
        total_balance = await self.store.get_total_balance(owner_id)
        recent = await self.store.list_transactions(owner_id)

        return DashboardSummary(
            total_balance=total_balance,
            monthly_income=report.total_income,
            monthly_expense=report.total_expense,
            accounts=accounts,
            recent_transactions=recent[: Defaults.RECENT_TRANSACTIONS],
            expense_by_category=report.expenses_by_category,
        )
