#!/usr/bin/env python3
"""DB 상태 확인 스크립트

사용법:
    python -m scripts.check_db --mode development
"""

import argparse
import asyncio
import sys
from decimal import Decimal
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from adapters.db.sqlite_adapter import SQLiteAdapter, get_db_path
from core.types import AppMode
from core.utils.money import format_money


async def main(db_path: Path) -> None:
    if not db_path.exists():
        print(f"DB not found: {db_path}")
        return

    async with SQLiteAdapter(db_path, readonly=True) as db:
        print(f"DB Path: {db_path}")

        for table in ("accounts", "transactions", "budgets"):
            if not await db.table_exists(table):
                print(f"  {table}: (missing)")
                continue
            row = await db.fetchone(f"SELECT COUNT(*) FROM {table}")
            print(f"  {table}: {row[0] if row else 0}")

        if not await db.table_exists("accounts"):
            return

        # 사용자별 계좌 잔액
        rows = await db.fetchall(
            """
            SELECT owner_id, account_id, name, account_type, balance
            FROM accounts
            ORDER BY owner_id, name
            """
        )
        print(f"\nAccounts ({len(rows)}):")
        totals: dict[int, Decimal] = {}
        for owner_id, account_id, name, account_type, balance in rows:
            totals[owner_id] = totals.get(owner_id, Decimal("0")) + Decimal(balance)
            print(f"  - owner {owner_id} | #{account_id} {name} ({account_type}): {balance}")

        for owner_id, total in totals.items():
            print(f"  = owner {owner_id} total: {format_money(total)}")

        negative = [r for r in rows if Decimal(r[4]) < 0]
        if negative:
            print(f"\n음수 잔액 계좌 {len(negative)}개 (삭제 역분개 결과일 수 있음)")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Ledger DB 상태 확인")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in AppMode],
        default=AppMode.DEVELOPMENT.value,
    )
    parser.add_argument("--db-path", type=Path, default=None)
    args = parser.parse_args()

    asyncio.run(main(args.db_path or get_db_path(args.mode)))
