"""
Budget 서비스

월별 카테고리 예산 CRUD.
사용액(spent)은 저장하지 않고 해당 월 지출 합계로 계산.
"""

import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from adapters.interfaces import ILedgerStore
from core.constants import FieldLimits
from core.ledger.errors import ValidationError
from core.ledger.models import Budget
from core.ledger.types import TransactionKind
from core.ledger.validation import validate_amount, validate_text
from core.utils.timezone import month_range

logger = logging.getLogger(__name__)


class BudgetService:
    """Budget 서비스

    Args:
        store: Ledger 저장소
    """

    def __init__(self, store: ILedgerStore):
        self.store = store

    async def list_budgets(self, owner_id: int, month: int, year: int) -> list[Budget]:
        """해당 월 예산 목록 (spent_amount 계산 포함)"""
        start, end = _month_bounds(month, year)
        budgets = await self.store.list_budgets(owner_id, month, year)
        if not budgets:
            return []

        spent = await self.store.sum_by_category(
            owner_id, TransactionKind.EXPENSE, start, end
        )
        return [
            replace(b, spent_amount=spent.get(b.category, b.spent_amount))
            for b in budgets
        ]

    async def create_budget(
        self,
        owner_id: int,
        category: str,
        amount: Decimal,
        month: int,
        year: int,
    ) -> Budget:
        """예산 생성

        Raises:
            ValidationError: 금액/카테고리/월 오류
            DuplicateBudgetError: 같은 카테고리/월 예산 존재
        """
        _month_bounds(month, year)
        category = validate_text("category", category, FieldLimits.CATEGORY)
        budget = await self.store.create_budget(
            owner_id, category, validate_amount(amount), month, year
        )
        return await self._with_spent(budget)

    async def update_budget(
        self, owner_id: int, budget_id: int, amount: Decimal
    ) -> Budget:
        budget = await self.store.update_budget_amount(
            budget_id, owner_id, validate_amount(amount)
        )
        return await self._with_spent(budget)

    async def delete_budget(self, owner_id: int, budget_id: int) -> None:
        await self.store.delete_budget(budget_id, owner_id)

    async def _with_spent(self, budget: Budget) -> Budget:
        start, end = _month_bounds(budget.month, budget.year)
        spent = await self.store.sum_amounts(
            budget.owner_id,
            TransactionKind.EXPENSE,
            start,
            end,
            category=budget.category,
        )
        return replace(budget, spent_amount=spent)


def _month_bounds(month: int, year: int) -> tuple[datetime, datetime]:
    try:
        return month_range(year, month)
    except ValueError as e:
        raise ValidationError(str(e)) from e
