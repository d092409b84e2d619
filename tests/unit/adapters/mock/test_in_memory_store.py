"""
In-memory Ledger 저장소 테스트

계좌/예산 메타데이터 연산과 run_atomic 스냅샷 동작 확인.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from adapters.mock.ledger_store import InMemoryLedgerStore, InMemoryLedgerUnit
from core.ledger.errors import (
    AccountNotFoundError,
    BudgetNotFoundError,
    DuplicateBudgetError,
    TransientStorageError,
    ValidationError,
)
from core.ledger.models import NewAccount, TransactionDraft
from core.ledger.types import TransactionKind
from core.utils.retry import RetryPolicy

OWNER = 1
AT = datetime(2026, 3, 5, tzinfo=timezone.utc)


class TestInMemoryLedgerStore:
    """InMemoryLedgerStore 테스트"""

    @pytest.fixture
    def store(self) -> InMemoryLedgerStore:
        """저장소 픽스처"""
        return InMemoryLedgerStore()

    # -------------------------------------------------------------------------
    # run_atomic
    # -------------------------------------------------------------------------

    @pytest.mark.asyncio
    async def test_failed_unit_discards_writes(self, store: InMemoryLedgerStore) -> None:
        """unit 예외 시 사본 폐기"""
        account = store.add_account(OWNER, "Bank", "100")

        async def unit_of_work(unit: InMemoryLedgerUnit) -> None:
            await unit.save_account_balance(account.debit(Decimal("30"), AT))
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await store.run_atomic(unit_of_work)

        assert (await store.get_account(account.account_id, OWNER)).balance == Decimal("100.00")
        assert store.commit_count == 0

    @pytest.mark.asyncio
    async def test_committed_unit_visible(self, store: InMemoryLedgerStore) -> None:
        account = store.add_account(OWNER, "Bank", "100")

        async def unit_of_work(unit: InMemoryLedgerUnit) -> int:
            draft = TransactionDraft(
                owner_id=OWNER,
                account_id=account.account_id,
                description="Rent",
                category="Housing",
                kind=TransactionKind.EXPENSE,
                amount=Decimal("40"),
                transaction_date=AT,
            )
            transaction = await unit.insert_transaction(draft, AT)
            await unit.save_account_balance(account.debit(Decimal("40"), AT))
            return transaction.transaction_id

        transaction_id = await store.run_atomic(unit_of_work)

        view = await store.get_transaction_view(transaction_id, OWNER)
        assert view is not None
        assert view.account_name == "Bank"
        assert (await store.get_account(account.account_id, OWNER)).balance == Decimal("60.00")

    @pytest.mark.asyncio
    async def test_no_retry_policy(self) -> None:
        """재시도 없음 정책은 첫 실패에서 중단"""
        store = InMemoryLedgerStore(retry_policy=RetryPolicy.no_retry())
        store.fail_next_attempts = 1

        async def unit_of_work(unit: InMemoryLedgerUnit) -> None:
            return None

        with pytest.raises(TransientStorageError) as exc_info:
            await store.run_atomic(unit_of_work)

        assert exc_info.value.attempts == 1

    # -------------------------------------------------------------------------
    # 계좌
    # -------------------------------------------------------------------------

    @pytest.mark.asyncio
    async def test_create_and_list_accounts(self, store: InMemoryLedgerStore) -> None:
        """이름순 목록"""
        await store.create_account(OWNER, NewAccount(name="Savings", account_type="savings"))
        await store.create_account(
            OWNER, NewAccount(name="Cash", account_type="cash", balance=Decimal("12.5"))
        )
        await store.create_account(2, NewAccount(name="Other", account_type="cash"))

        accounts = await store.list_accounts(OWNER)

        assert [a.name for a in accounts] == ["Cash", "Savings"]
        assert accounts[0].balance == Decimal("12.50")
        assert await store.get_total_balance(OWNER) == Decimal("12.50")

    @pytest.mark.asyncio
    async def test_create_account_validation(self, store: InMemoryLedgerStore) -> None:
        with pytest.raises(ValidationError):
            await store.create_account(OWNER, NewAccount(name="", account_type="cash"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("balance", [Decimal("1e30"), Decimal("1000000000000")])
    async def test_create_account_balance_out_of_range(
        self, store: InMemoryLedgerStore, balance: Decimal
    ) -> None:
        """상한을 넘는 초기 잔액은 ValidationError, 계좌 미생성"""
        with pytest.raises(ValidationError, match="balance"):
            await store.create_account(
                OWNER, NewAccount(name="Bank", account_type="checking", balance=balance)
            )

        assert await store.list_accounts(OWNER) == []

    @pytest.mark.asyncio
    async def test_update_account(self, store: InMemoryLedgerStore) -> None:
        account = store.add_account(OWNER, "Bank", "10")

        updated = await store.update_account(
            account.account_id, OWNER, {"name": "Main Bank", "balance": "99.9"}
        )

        assert updated.name == "Main Bank"
        assert updated.balance == Decimal("99.90")

    @pytest.mark.asyncio
    async def test_update_account_other_owner(self, store: InMemoryLedgerStore) -> None:
        account = store.add_account(OWNER, "Bank", "10")

        with pytest.raises(AccountNotFoundError):
            await store.update_account(account.account_id, 2, {"name": "Mine"})

    @pytest.mark.asyncio
    async def test_delete_unused_account(self, store: InMemoryLedgerStore) -> None:
        account = store.add_account(OWNER, "Bank", "10")

        await store.delete_account(account.account_id, OWNER)

        assert await store.list_accounts(OWNER) == []

    @pytest.mark.asyncio
    async def test_delete_missing_account(self, store: InMemoryLedgerStore) -> None:
        with pytest.raises(AccountNotFoundError):
            await store.delete_account(1, OWNER)

    # -------------------------------------------------------------------------
    # 예산
    # -------------------------------------------------------------------------

    @pytest.mark.asyncio
    async def test_budget_lifecycle(self, store: InMemoryLedgerStore) -> None:
        budget = await store.create_budget(OWNER, "Food", Decimal("300"), 3, 2026)

        updated = await store.update_budget_amount(budget.budget_id, OWNER, Decimal("250"))
        assert updated.amount == Decimal("250.00")

        budgets = await store.list_budgets(OWNER, 3, 2026)
        assert [b.category for b in budgets] == ["Food"]
        assert await store.list_budgets(OWNER, 4, 2026) == []

        await store.delete_budget(budget.budget_id, OWNER)
        assert await store.list_budgets(OWNER, 3, 2026) == []

    @pytest.mark.asyncio
    async def test_duplicate_budget(self, store: InMemoryLedgerStore) -> None:
        await store.create_budget(OWNER, "Food", Decimal("300"), 3, 2026)

        with pytest.raises(DuplicateBudgetError):
            await store.create_budget(OWNER, "Food", Decimal("100"), 3, 2026)

        # 다른 사용자는 같은 카테고리 허용
        await store.create_budget(2, "Food", Decimal("100"), 3, 2026)

    @pytest.mark.asyncio
    async def test_budget_not_found(self, store: InMemoryLedgerStore) -> None:
        budget = await store.create_budget(OWNER, "Food", Decimal("300"), 3, 2026)

        with pytest.raises(BudgetNotFoundError):
            await store.update_budget_amount(budget.budget_id, 2, Decimal("1"))
        with pytest.raises(BudgetNotFoundError):
            await store.delete_budget(999, OWNER)
