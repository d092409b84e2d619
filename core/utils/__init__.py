"""
유틸리티 패키지

금액 정규화, 재시도 정책, 타임존 처리 등 공통 유틸리티
"""

from core.utils.money import format_money, has_money_precision, percentage, to_money
from core.utils.retry import RetryPolicy
from core.utils.timezone import (
    ensure_utc,
    from_db_timestamp,
    month_range,
    now_utc,
    to_db_timestamp,
)

__all__ = [
    "format_money",
    "has_money_precision",
    "percentage",
    "to_money",
    "RetryPolicy",
    "ensure_utc",
    "from_db_timestamp",
    "month_range",
    "now_utc",
    "to_db_timestamp",
]
