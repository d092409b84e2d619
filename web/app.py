"""
FastAPI 애플리케이션

라우터 등록 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import SettingsLoadError, get_settings
from core.ledger.schema import init_ledger_schema
from core.logging import setup_logging
from web.routes import accounts, budgets, dashboard, health, transactions

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    settings = get_settings()

    # 시작 시 - DB 스키마 자동 초기화
    async with SQLiteAdapter(settings.db_path, busy_timeout_ms=settings.busy_timeout_ms) as db:
        await init_ledger_schema(db)

    logger.info(
        f"Web 시작: mode={settings.mode.value}",
        extra={"db_path": str(settings.db_path)},
    )

    yield

    logger.info("Web 종료")


def create_app(configure_logging: bool = True) -> FastAPI:
    """FastAPI 앱 생성

    Args:
        configure_logging: 로깅 설정 여부 (테스트에서는 False)
    """
    if configure_logging:
        # 로깅 설정 (콘솔 + 파일)
        setup_logging("web")

    application = FastAPI(
        title="Family Finance API",
        description="가계부 Ledger API (계좌, 거래, 예산, 리포트)",
        version=health.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS 설정 (settings.yaml web.cors_origins)
    try:
        origins = list(get_settings().web.cors_origins)
    except SettingsLoadError as e:
        logger.warning(f"CORS 설정 생략 (settings 로드 실패): {e}")
        origins = []
    if origins:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # =========================================================================
    # API 라우터 등록
    # =========================================================================

    application.include_router(health.router)
    application.include_router(accounts.router)
    application.include_router(transactions.router)
    application.include_router(budgets.router)
    application.include_router(dashboard.router)

    return application
