"""
Web 서비스 패키지

비즈니스 로직 처리
"""

from web.services.account_service import AccountService
from web.services.budget_service import BudgetService
from web.services.report_service import ReportService
from web.services.transaction_service import TransactionService

__all__ = [
    "AccountService",
    "BudgetService",
    "ReportService",
    "TransactionService",
]
