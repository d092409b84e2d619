"""Ledger 도메인 모델 테스트"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.ledger.models import (
    Account,
    Budget,
    DashboardSummary,
    MonthlyReport,
    Transaction,
    TransactionView,
)
from core.ledger.types import TransactionKind

AT = datetime(2026, 3, 1, tzinfo=timezone.utc)


def make_account(balance: str = "100.00") -> Account:
    return Account(
        account_id=1,
        owner_id=1,
        name="Wallet",
        account_type="cash",
        balance=Decimal(balance),
    )


class TestAccount:
    """Account 테스트"""

    def test_credit_returns_new_instance(self) -> None:
        """잔액 증가는 새 인스턴스 반환"""
        account = make_account()
        credited = account.credit(Decimal("25.50"), AT)

        assert credited.balance == Decimal("125.50")
        assert credited.updated_at == AT
        assert account.balance == Decimal("100.00")

    def test_debit(self) -> None:
        assert make_account().debit(Decimal("40"), AT).balance == Decimal("60.00")

    def test_debit_may_go_negative(self) -> None:
        """debit 자체는 잔액 검사 없음"""
        assert make_account("10").debit(Decimal("15"), AT).balance == Decimal("-5")

    def test_can_cover(self) -> None:
        account = make_account("50")

        assert account.can_cover(Decimal("50"))
        assert not account.can_cover(Decimal("75"))

    def test_immutable(self) -> None:
        with pytest.raises(AttributeError):
            make_account().balance = Decimal("1")  # type: ignore


class TestTransactionView:
    def test_delegates_to_transaction(self) -> None:
        transaction = Transaction(
            transaction_id=7,
            owner_id=1,
            account_id=1,
            description="Salary",
            category="Income",
            kind=TransactionKind.INCOME,
            amount=Decimal("1000.00"),
            transaction_date=AT,
        )
        view = TransactionView(transaction=transaction, account_name="Bank")

        assert view.transaction_id == 7
        assert view.kind is TransactionKind.INCOME
        assert view.amount == Decimal("1000.00")
        assert view.to_account_name is None


class TestBudget:
    """Budget 계산 속성 테스트"""

    def test_remaining_and_percentage(self) -> None:
        budget = Budget(
            budget_id=1,
            owner_id=1,
            category="Food",
            amount=Decimal("200.00"),
            month=3,
            year=2026,
            spent_amount=Decimal("50.00"),
        )

        assert budget.remaining_amount == Decimal("150.00")
        assert budget.percentage_used == pytest.approx(25.0)

    def test_overspent(self) -> None:
        """초과 시 남은 예산은 음수"""
        budget = Budget(
            budget_id=1,
            owner_id=1,
            category="Food",
            amount=Decimal("100.00"),
            month=3,
            year=2026,
            spent_amount=Decimal("120.00"),
        )

        assert budget.remaining_amount == Decimal("-20.00")
        assert budget.percentage_used == pytest.approx(120.0)


class TestReports:
    def test_monthly_net_savings(self) -> None:
        report = MonthlyReport(
            month=3,
            year=2026,
            total_income=Decimal("500.00"),
            total_expense=Decimal("320.00"),
        )

        assert report.net_savings == Decimal("180.00")
        assert report.expenses_by_category == []

    def test_dashboard_net_savings(self) -> None:
        summary = DashboardSummary(
            total_balance=Decimal("0"),
            monthly_income=Decimal("100"),
            monthly_expense=Decimal("150"),
        )

        assert summary.net_savings == Decimal("-50")
