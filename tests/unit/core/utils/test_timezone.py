"""타임존 유틸리티 테스트"""

from datetime import datetime, timedelta, timezone

import pytest

from core.utils.timezone import (
    ensure_utc,
    from_db_timestamp,
    month_range,
    now_utc,
    to_db_timestamp,
)


class TestEnsureUtc:
    def test_naive_treated_as_utc(self) -> None:
        """naive datetime은 UTC로 간주"""
        dt = ensure_utc(datetime(2026, 3, 1, 12, 0))

        assert dt.tzinfo == timezone.utc
        assert dt.hour == 12

    def test_converts_other_timezone(self) -> None:
        kst = timezone(timedelta(hours=9))
        dt = ensure_utc(datetime(2026, 3, 1, 9, 0, tzinfo=kst))

        assert dt == datetime(2026, 3, 1, 0, 0, tzinfo=timezone.utc)

    def test_now_utc_aware(self) -> None:
        assert now_utc().tzinfo == timezone.utc


class TestDbTimestamp:
    def test_roundtrip_preserves_instant(self) -> None:
        dt = datetime(2026, 3, 1, 10, 30, 15, 123456, tzinfo=timezone.utc)

        assert from_db_timestamp(to_db_timestamp(dt)) == dt

    def test_lexicographic_order(self) -> None:
        """문자열 정렬 = 시간 정렬"""
        earlier = to_db_timestamp(datetime(2026, 1, 9, tzinfo=timezone.utc))
        later = to_db_timestamp(datetime(2026, 1, 10, tzinfo=timezone.utc))

        assert earlier < later


class TestMonthRange:
    def test_regular_month(self) -> None:
        start, end = month_range(2026, 3)

        assert start == datetime(2026, 3, 1, tzinfo=timezone.utc)
        assert end == datetime(2026, 4, 1, tzinfo=timezone.utc)

    def test_december_rolls_year(self) -> None:
        start, end = month_range(2025, 12)

        assert end == datetime(2026, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("month", [0, 13])
    def test_invalid_month(self, month: int) -> None:
        with pytest.raises(ValueError):
            month_range(2026, month)
