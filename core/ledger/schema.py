"""
Ledger 스키마 초기화

Web 시작 시 자동으로 Ledger 테이블과 인덱스 생성.
CREATE IF NOT EXISTS 패턴으로 안전하게 동작.

금액/잔액은 TEXT로 저장 (소수점 2자리 고정 문자열, 예: '100.00').
시간은 UTC ISO 문자열로 저장하여 사전순 정렬 = 시간순 정렬.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """Ledger 스키마 초기화 (테이블 + 인덱스)

    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).

    Args:
        db: SQLiteAdapter 인스턴스
    """
    await _create_ledger_tables(db)
    await _create_ledger_indexes(db)
    await db.commit()
    logger.info("Ledger 스키마 초기화 완료")


async def _create_ledger_tables(db: "SQLiteAdapter") -> None:
    """Ledger 테이블 생성"""

    # accounts 테이블
    await db.execute("""
        CREATE TABLE IF NOT EXISTS accounts (
            account_id       INTEGER PRIMARY KEY AUTOINCREMENT,
            owner_id         INTEGER NOT NULL,
            name             TEXT NOT NULL,
            account_type     TEXT NOT NULL,
            balance          TEXT NOT NULL DEFAULT '0.00',
            color            TEXT NOT NULL DEFAULT '#3b82f6',
            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL
        )
    """)

    # transactions 테이블
    # 계좌를 두 번 참조 (출발, 도착). 참조 중인 계좌는 삭제 불가 (RESTRICT)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            transaction_id   INTEGER PRIMARY KEY AUTOINCREMENT,
            owner_id         INTEGER NOT NULL,
            account_id       INTEGER NOT NULL,
            to_account_id    INTEGER,
            description      TEXT NOT NULL,
            category         TEXT NOT NULL,
            kind             TEXT NOT NULL
                             CHECK (kind IN ('income', 'expense', 'transfer')),
            amount           TEXT NOT NULL,
            transaction_date TEXT NOT NULL,
            notes            TEXT,
            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL,
            CHECK (
                (kind = 'transfer' AND to_account_id IS NOT NULL
                    AND to_account_id != account_id)
                OR (kind != 'transfer' AND to_account_id IS NULL)
            ),
            FOREIGN KEY (account_id) REFERENCES accounts(account_id)
                ON DELETE RESTRICT,
            FOREIGN KEY (to_account_id) REFERENCES accounts(account_id)
                ON DELETE RESTRICT
        )
    """)

    # budgets 테이블 (월별 카테고리 예산, 사용액은 저장하지 않음)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS budgets (
            budget_id        INTEGER PRIMARY KEY AUTOINCREMENT,
            owner_id         INTEGER NOT NULL,
            category         TEXT NOT NULL,
            amount           TEXT NOT NULL,
            month            INTEGER NOT NULL CHECK (month BETWEEN 1 AND 12),
            year             INTEGER NOT NULL,
            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL,
            UNIQUE (owner_id, category, month, year)
        )
    """)


async def _create_ledger_indexes(db: "SQLiteAdapter") -> None:
    """조회/집계용 인덱스 생성"""

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_accounts_owner
        ON accounts(owner_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_owner
        ON transactions(owner_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_date
        ON transactions(transaction_date)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_category
        ON transactions(category)
    """)

    # 계좌 삭제 시 참조 검사용
    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_account
        ON transactions(account_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_to_account
        ON transactions(to_account_id)
    """)
