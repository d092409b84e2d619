"""
가계부 Ledger 시스템

계좌 잔액과 거래 기록을 항상 일치시키는 Ledger.
거래 생성/삭제는 잔액 변경과 함께 하나의 원자적 단위로 처리.

사용 예시:
```python
from core.ledger import LedgerStore, TransactionCoordinator, NewTransaction

# 초기화
store = LedgerStore(db)
coordinator = TransactionCoordinator(store)

# 거래 생성 (잔액 자동 반영)
view = await coordinator.create(owner_id, NewTransaction(...))

# 거래 삭제 (잔액 역분개)
await coordinator.delete(owner_id, view.transaction_id)
```
"""

from core.ledger.coordinator import TransactionCoordinator, build_category_breakdown
from core.ledger.models import (
    Account,
    Budget,
    CategoryExpense,
    DashboardSummary,
    MonthlyReport,
    NewAccount,
    NewTransaction,
    Transaction,
    TransactionDraft,
    TransactionView,
)
from core.ledger.schema import init_ledger_schema
from core.ledger.store import LedgerStore, SQLiteLedgerUnit
from core.ledger.types import AccountCategory, TransactionKind

__all__ = [
    # 핵심 클래스
    "LedgerStore",
    "SQLiteLedgerUnit",
    "TransactionCoordinator",
    "build_category_breakdown",
    "init_ledger_schema",
    # 모델
    "Account",
    "NewAccount",
    "Transaction",
    "NewTransaction",
    "TransactionDraft",
    "TransactionView",
    "CategoryExpense",
    "Budget",
    "MonthlyReport",
    "DashboardSummary",
    # Enum
    "TransactionKind",
    "AccountCategory",
]
