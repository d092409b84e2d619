"""
Transactions 라우트

거래 생성/수정/삭제 및 조회 API.
생성/삭제는 계좌 잔액과 함께 원자적으로 처리.
"""

from datetime import date

from fastapi import APIRouter, Depends, Path, Query, status

from core.ledger.coordinator import TransactionCoordinator
from core.ledger.errors import LedgerError
from web.auth import get_current_user_id
from web.dependencies import get_coordinator
from web.errors import to_http_exception
from web.models.requests import TransactionCreateRequest, TransactionUpdateRequest
from web.models.responses import CategoryExpenseResponse, TransactionResponse
from web.services.transaction_service import TransactionService

router = APIRouter(prefix="/api", tags=["Transactions"])


@router.get("/transactions", response_model=list[TransactionResponse])
async def list_transactions(
    start_date: date | None = Query(default=None, description="시작일 (포함)"),
    end_date: date | None = Query(default=None, description="종료일 (포함)"),
    user_id: int = Depends(get_current_user_id),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
) -> list[TransactionResponse]:
    """거래 목록 조회 (최신순)"""
    service = TransactionService(coordinator)
    views = await service.list_transactions(user_id, start_date, end_date)
    return [TransactionResponse.from_view(v) for v in views]


@router.get(
    "/transactions/expenses-by-category",
    response_model=list[CategoryExpenseResponse],
)
async def get_expenses_by_category(
    month: int = Query(..., ge=1, le=12, description="월"),
    year: int = Query(..., ge=1900, le=9999, description="연도"),
    user_id: int = Depends(get_current_user_id),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
) -> list[CategoryExpenseResponse]:
    """해당 월 카테고리별 지출 (금액 내림차순)"""
    service = TransactionService(coordinator)
    try:
        items = await service.expenses_by_category(user_id, month, year)
    except LedgerError as e:
        raise to_http_exception(e) from e
    return [CategoryExpenseResponse.from_domain(item) for item in items]


@router.get(
    "/transactions/account/{account_id}",
    response_model=list[TransactionResponse],
)
async def list_account_transactions(
    account_id: int = Path(..., description="계좌 ID (출발 또는 도착)"),
    user_id: int = Depends(get_current_user_id),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
) -> list[TransactionResponse]:
    """계좌별 거래 목록"""
    service = TransactionService(coordinator)
    try:
        views = await service.list_for_account(user_id, account_id)
    except LedgerError as e:
        raise to_http_exception(e) from e
    return [TransactionResponse.from_view(v) for v in views]


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: int = Path(..., description="거래 ID"),
    user_id: int = Depends(get_current_user_id),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
) -> TransactionResponse:
    """거래 조회"""
    service = TransactionService(coordinator)
    try:
        view = await service.get_transaction(user_id, transaction_id)
    except LedgerError as e:
        raise to_http_exception(e) from e
    return TransactionResponse.from_view(view)


@router.post(
    "/transactions",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_transaction(
    request: TransactionCreateRequest,
    user_id: int = Depends(get_current_user_id),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
) -> TransactionResponse:
    """거래 생성

    **잔액 반영**:
    - income: 출발 계좌 증가
    - expense: 출발 계좌 감소 (잔액 부족 시 400)
    - transfer: 출발 계좌 감소, 도착 계좌 증가 (to_account_id 필수)
    """
    service = TransactionService(coordinator)
    try:
        view = await service.create_transaction(user_id, request)
    except LedgerError as e:
        raise to_http_exception(e) from e
    return TransactionResponse.from_view(view)


@router.put("/transactions/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    request: TransactionUpdateRequest,
    transaction_id: int = Path(..., description="거래 ID"),
    user_id: int = Depends(get_current_user_id),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
) -> TransactionResponse:
    """거래 수정 (설명/카테고리/일시/메모만, 잔액 변경 없음)"""
    service = TransactionService(coordinator)
    try:
        view = await service.update_transaction(
            user_id, transaction_id, request.to_changes()
        )
    except LedgerError as e:
        raise to_http_exception(e) from e
    return TransactionResponse.from_view(view)


@router.delete(
    "/transactions/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_transaction(
    transaction_id: int = Path(..., description="거래 ID"),
    user_id: int = Depends(get_current_user_id),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
) -> None:
    """거래 삭제 (잔액 역분개)"""
    service = TransactionService(coordinator)
    try:
        await service.delete_transaction(user_id, transaction_id)
    except LedgerError as e:
        raise to_http_exception(e) from e
