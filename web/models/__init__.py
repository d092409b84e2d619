"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AccountCreateRequest,
    AccountUpdateRequest,
    BudgetCreateRequest,
    BudgetUpdateRequest,
    TransactionCreateRequest,
    TransactionUpdateRequest,
)
from web.models.responses import (
    AccountResponse,
    BudgetResponse,
    CategoryExpenseResponse,
    DashboardSummaryResponse,
    HealthResponse,
    MonthlyReportResponse,
    TotalBalanceResponse,
    TransactionResponse,
)

__all__ = [
    # Requests
    "AccountCreateRequest",
    "AccountUpdateRequest",
    "BudgetCreateRequest",
    "BudgetUpdateRequest",
    "TransactionCreateRequest",
    "TransactionUpdateRequest",
    # Responses
    "AccountResponse",
    "BudgetResponse",
    "CategoryExpenseResponse",
    "DashboardSummaryResponse",
    "HealthResponse",
    "MonthlyReportResponse",
    "TotalBalanceResponse",
    "TransactionResponse",
]
