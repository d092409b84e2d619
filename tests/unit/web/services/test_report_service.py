"""Report / Budget 서비스 테스트 (In-memory 저장소)"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from adapters.mock.ledger_store import InMemoryLedgerStore
from core.ledger.coordinator import TransactionCoordinator
from core.ledger.errors import InvalidAmountError, ValidationError
from core.ledger.models import NewTransaction
from web.services.budget_service import BudgetService
from web.services.report_service import ReportService

OWNER = 1
MARCH = datetime(2026, 3, 10, tzinfo=timezone.utc)


@pytest.fixture
def store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


async def record(
    coordinator: TransactionCoordinator,
    account_id: int,
    kind: str,
    amount: str,
    category: str,
    to_account_id: int | None = None,
) -> None:
    await coordinator.create(
        OWNER,
        NewTransaction(
            account_id=account_id,
            description=category,
            category=category,
            kind=kind,
            amount=Decimal(amount),
            transaction_date=MARCH,
            to_account_id=to_account_id,
        ),
    )


class TestBudgetService:
    """BudgetService 테스트"""

    @pytest.mark.asyncio
    async def test_spent_from_expenses(self, store: InMemoryLedgerStore) -> None:
        """사용액은 해당 월 같은 카테고리 지출 합계"""
        account = store.add_account(OWNER, "Bank", "1000")
        coordinator = TransactionCoordinator(store)
        await record(coordinator, account.account_id, "expense", "30", "Food")
        await record(coordinator, account.account_id, "expense", "15", "Food")
        await record(coordinator, account.account_id, "expense", "99", "Fun")

        service = BudgetService(store)
        await service.create_budget(OWNER, "Food", Decimal("100"), 3, 2026)
        await service.create_budget(OWNER, "Rent", Decimal("500"), 3, 2026)

        budgets = await service.list_budgets(OWNER, 3, 2026)

        by_category = {b.category: b for b in budgets}
        assert by_category["Food"].spent_amount == Decimal("45.00")
        assert by_category["Food"].remaining_amount == Decimal("55.00")
        assert by_category["Rent"].spent_amount == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_invalid_month(self, store: InMemoryLedgerStore) -> None:
        with pytest.raises(ValidationError):
            await BudgetService(store).create_budget(OWNER, "Food", Decimal("1"), 13, 2026)

    @pytest.mark.asyncio
    async def test_invalid_amount(self, store: InMemoryLedgerStore) -> None:
        with pytest.raises(InvalidAmountError):
            await BudgetService(store).create_budget(OWNER, "Food", Decimal("0"), 3, 2026)


class TestReportService:
    """ReportService 테스트"""

    @pytest.mark.asyncio
    async def test_monthly_report_excludes_transfers(self, store: InMemoryLedgerStore) -> None:
        bank = store.add_account(OWNER, "Bank", "1000")
        savings = store.add_account(OWNER, "Savings", "0")
        coordinator = TransactionCoordinator(store)
        await record(coordinator, bank.account_id, "income", "500", "Salary")
        await record(coordinator, bank.account_id, "expense", "30", "Food")
        await record(coordinator, bank.account_id, "expense", "20", "Transport")
        await record(
            coordinator, bank.account_id, "transfer", "200", "Saving",
            to_account_id=savings.account_id,
        )

        report = await ReportService(store).monthly_report(OWNER, 3, 2026)

        assert report.total_income == Decimal("500.00")
        assert report.total_expense == Decimal("50.00")
        assert report.net_savings == Decimal("450.00")
        assert [c.category for c in report.expenses_by_category] == ["Food", "Transport"]

    @pytest.mark.asyncio
    async def test_empty_month(self, store: InMemoryLedgerStore) -> None:
        report = await ReportService(store).monthly_report(OWNER, 1, 2026)

        assert report.total_income == Decimal("0.00")
        assert report.total_expense == Decimal("0.00")
        assert report.expenses_by_category == []

    @pytest.mark.asyncio
    async def test_dashboard_summary(self, store: InMemoryLedgerStore) -> None:
        bank = store.add_account(OWNER, "Bank", "100")
        store.add_account(OWNER, "Cash", "20")
        coordinator = TransactionCoordinator(store)
        await record(coordinator, bank.account_id, "expense", "10", "Food")

        summary = await ReportService(store).dashboard_summary(OWNER, today=MARCH)

        assert summary.total_balance == Decimal("110.00")
        assert summary.monthly_expense == Decimal("10.00")
        assert [a.name for a in summary.accounts] == ["Bank", "Cash"]
        assert len(summary.recent_transactions) == 1
        assert summary.expense_by_category[0].percentage == pytest.approx(100.0)
