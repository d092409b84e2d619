"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

from typing import AsyncGenerator

from fastapi import Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings, get_settings
from core.ledger.coordinator import TransactionCoordinator
from core.ledger.store import LedgerStore


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


async def get_db_write(
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (쓰기 가능)

    요청마다 별도 연결. 연결 간 쓰기는 BEGIN IMMEDIATE + busy_timeout으로 직렬화.
    """
    async with SQLiteAdapter(
        settings.db_path,
        readonly=False,
        busy_timeout_ms=settings.busy_timeout_ms,
    ) as db:
        yield db


def get_ledger_store(
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> LedgerStore:
    """요청 범위 Ledger 저장소"""
    return LedgerStore(db, retry_policy=settings.retry_policy)


def get_coordinator(
    store: LedgerStore = Depends(get_ledger_store),
) -> TransactionCoordinator:
    """요청 범위 거래 Coordinator"""
    return TransactionCoordinator(store)
