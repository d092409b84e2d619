"""
Accounts 라우트

계좌 CRUD 및 전체 잔액 API
"""

from fastapi import APIRouter, Depends, Path, status

from core.ledger.errors import LedgerError
from core.ledger.models import NewAccount
from core.ledger.store import LedgerStore
from core.utils.money import format_money
from web.auth import get_current_user_id
from web.dependencies import get_ledger_store
from web.errors import to_http_exception
from web.models.requests import AccountCreateRequest, AccountUpdateRequest
from web.models.responses import AccountResponse, TotalBalanceResponse
from web.services.account_service import AccountService

router = APIRouter(prefix="/api", tags=["Accounts"])


@router.get("/accounts", response_model=list[AccountResponse])
async def list_accounts(
    user_id: int = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_ledger_store),
) -> list[AccountResponse]:
    """계좌 목록 조회 (이름순)"""
    service = AccountService(store)
    accounts = await service.list_accounts(user_id)
    return [AccountResponse.from_account(a) for a in accounts]


@router.get("/accounts/total-balance", response_model=TotalBalanceResponse)
async def get_total_balance(
    user_id: int = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_ledger_store),
) -> TotalBalanceResponse:
    """전체 계좌 잔액 합계"""
    service = AccountService(store)
    total = await service.get_total_balance(user_id)
    return TotalBalanceResponse(total_balance=format_money(total))


@router.get("/accounts/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: int = Path(..., description="계좌 ID"),
    user_id: int = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_ledger_store),
) -> AccountResponse:
    """계좌 조회"""
    service = AccountService(store)
    try:
        account = await service.get_account(user_id, account_id)
    except LedgerError as e:
        raise to_http_exception(e) from e
    return AccountResponse.from_account(account)


@router.post(
    "/accounts",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_account(
    request: AccountCreateRequest,
    user_id: int = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_ledger_store),
) -> AccountResponse:
    """계좌 생성"""
    service = AccountService(store)
    try:
        account = await service.create_account(
            user_id,
            NewAccount(
                name=request.name,
                account_type=request.type,
                balance=request.balance,
                color=request.color,
            ),
        )
    except LedgerError as e:
        raise to_http_exception(e) from e
    return AccountResponse.from_account(account)


@router.put("/accounts/{account_id}", response_model=AccountResponse)
async def update_account(
    request: AccountUpdateRequest,
    account_id: int = Path(..., description="계좌 ID"),
    user_id: int = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_ledger_store),
) -> AccountResponse:
    """계좌 수정 (이름/유형/색상/잔액 보정)"""
    service = AccountService(store)
    try:
        account = await service.update_account(user_id, account_id, request.to_changes())
    except LedgerError as e:
        raise to_http_exception(e) from e
    return AccountResponse.from_account(account)


@router.delete("/accounts/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: int = Path(..., description="계좌 ID"),
    user_id: int = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_ledger_store),
) -> None:
    """계좌 삭제

    거래가 참조 중인 계좌는 삭제 불가 (409).
    """
    service = AccountService(store)
    try:
        await service.delete_account(user_id, account_id)
    except LedgerError as e:
        raise to_http_exception(e) from e
