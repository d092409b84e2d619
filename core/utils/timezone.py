"""
타임존 유틸리티

내부 저장: UTC 원칙 준수를 위한 헬퍼 함수
"""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    datetime.now(timezone.utc)의 축약형.

    Returns:
        현재 UTC 시간 (tzinfo=timezone.utc)
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """datetime을 UTC로 정규화

    Args:
        dt: datetime 객체 (naive면 UTC로 간주)

    Returns:
        UTC 타임존의 datetime
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_db_timestamp(dt: datetime) -> str:
    """DB 저장용 ISO 문자열 (UTC, 사전순 = 시간순)

    Example:
        >>> to_db_timestamp(datetime(2026, 3, 1, tzinfo=timezone.utc))
        '2026-03-01T00:00:00.000000+00:00'
    """
    return ensure_utc(dt).isoformat(timespec="microseconds")


def from_db_timestamp(value: str) -> datetime:
    """DB에 저장된 ISO 문자열을 UTC datetime으로 변환"""
    return ensure_utc(datetime.fromisoformat(value))


def month_range(year: int, month: int) -> tuple[datetime, datetime]:
    """해당 월의 [시작, 다음 달 시작) UTC 구간

    Args:
        year: 연도
        month: 월 (1-12)

    Returns:
        (월 시작, 다음 달 시작) - 끝은 포함하지 않음

    Raises:
        ValueError: month가 1-12 범위를 벗어난 경우
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")

    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end
