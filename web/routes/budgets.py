"""
Budgets 라우트

월별 카테고리 예산 API
"""

from fastapi import APIRouter, Depends, Path, Query, status

from core.ledger.errors import LedgerError
from core.ledger.store import LedgerStore
from core.utils.timezone import now_utc
from web.auth import get_current_user_id
from web.dependencies import get_ledger_store
from web.errors import to_http_exception
from web.models.requests import BudgetCreateRequest, BudgetUpdateRequest
from web.models.responses import BudgetResponse
from web.services.budget_service import BudgetService

router = APIRouter(prefix="/api", tags=["Budgets"])


@router.get("/budgets", response_model=list[BudgetResponse])
async def list_budgets(
    month: int | None = Query(default=None, ge=1, le=12, description="월 (기본: 이번 달)"),
    year: int | None = Query(default=None, ge=1900, le=9999, description="연도 (기본: 올해)"),
    user_id: int = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_ledger_store),
) -> list[BudgetResponse]:
    """예산 목록 (사용액 포함)"""
    today = now_utc()
    service = BudgetService(store)
    try:
        budgets = await service.list_budgets(
            user_id, month or today.month, year or today.year
        )
    except LedgerError as e:
        raise to_http_exception(e) from e
    return [BudgetResponse.from_budget(b) for b in budgets]


@router.post(
    "/budgets",
    response_model=BudgetResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_budget(
    request: BudgetCreateRequest,
    user_id: int = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_ledger_store),
) -> BudgetResponse:
    """예산 생성 (같은 카테고리/월 중복 시 409)"""
    service = BudgetService(store)
    try:
        budget = await service.create_budget(
            user_id, request.category, request.amount, request.month, request.year
        )
    except LedgerError as e:
        raise to_http_exception(e) from e
    return BudgetResponse.from_budget(budget)


@router.put("/budgets/{budget_id}", response_model=BudgetResponse)
async def update_budget(
    request: BudgetUpdateRequest,
    budget_id: int = Path(..., description="예산 ID"),
    user_id: int = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_ledger_store),
) -> BudgetResponse:
    """예산 한도 변경"""
    service = BudgetService(store)
    try:
        budget = await service.update_budget(user_id, budget_id, request.amount)
    except LedgerError as e:
        raise to_http_exception(e) from e
    return BudgetResponse.from_budget(budget)


@router.delete("/budgets/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_budget(
    budget_id: int = Path(..., description="예산 ID"),
    user_id: int = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_ledger_store),
) -> None:
    """예산 삭제"""
    service = BudgetService(store)
    try:
        await service.delete_budget(user_id, budget_id)
    except LedgerError as e:
        raise to_http_exception(e) from e
