"""
Dashboard 라우트

대시보드 요약 및 월간 리포트 API
"""

from fastapi import APIRouter, Depends, Query

from core.ledger.errors import LedgerError
from core.ledger.store import LedgerStore
from web.auth import get_current_user_id
from web.dependencies import get_ledger_store
from web.errors import to_http_exception
from web.models.responses import DashboardSummaryResponse, MonthlyReportResponse
from web.services.report_service import ReportService

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummaryResponse)
async def get_dashboard_summary(
    user_id: int = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_ledger_store),
) -> DashboardSummaryResponse:
    """대시보드 요약

    전체 잔액, 이번 달 수입/지출, 계좌 목록, 최근 거래 10건,
    이번 달 카테고리별 지출.
    """
    service = ReportService(store)
    summary = await service.dashboard_summary(user_id)
    return DashboardSummaryResponse.from_summary(summary)


@router.get("/monthly-report", response_model=MonthlyReportResponse)
async def get_monthly_report(
    month: int = Query(..., ge=1, le=12, description="월"),
    year: int = Query(..., ge=1900, le=9999, description="연도"),
    user_id: int = Depends(get_current_user_id),
    store: LedgerStore = Depends(get_ledger_store),
) -> MonthlyReportResponse:
    """월간 리포트 (수입/지출/카테고리별 지출/예산 현황)"""
    service = ReportService(store)
    try:
        report = await service.monthly_report(user_id, month, year)
    except LedgerError as e:
        raise to_http_exception(e) from e
    return MonthlyReportResponse.from_report(report)
