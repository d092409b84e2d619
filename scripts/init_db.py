"""
Ledger 스키마 초기화

사용법:
    python -m scripts.init_db --mode development
    python -m scripts.init_db --mode production
    python -m scripts.init_db --db-path data/custom.db
"""

import argparse
import asyncio
import logging
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter, get_db_path
from core.ledger.schema import init_ledger_schema
from core.logging import setup_logging
from core.types import AppMode

logger = logging.getLogger(__name__)


async def init_db(db_path: Path) -> None:
    async with SQLiteAdapter(db_path) as db:
        await init_ledger_schema(db)

        for table in ("accounts", "transactions", "budgets"):
            columns = await db.get_table_info(table)
            logger.info(f"  - {table}: {len(columns)} columns")

    logger.info(f"스키마 초기화 완료: {db_path}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Ledger 스키마 초기화")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in AppMode],
        default=AppMode.DEVELOPMENT.value,
        help="실행 모드 (DB 파일 선택)",
    )
    parser.add_argument("--db-path", type=Path, default=None, help="DB 경로 직접 지정")
    args = parser.parse_args()

    setup_logging("scripts")
    db_path = args.db_path or get_db_path(args.mode)
    asyncio.run(init_db(db_path))


if __name__ == "__main__":
    main()
