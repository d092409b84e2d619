"""금액 유틸리티 테스트"""

from decimal import Decimal

import pytest

from core.utils.money import format_money, has_money_precision, percentage, to_money


class TestToMoney:
    """to_money 테스트"""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (10, Decimal("10.00")),
            ("10.5", Decimal("10.50")),
            (Decimal("3.14159"), Decimal("3.14")),
            ("10.005", Decimal("10.01")),
            (0.1, Decimal("0.10")),
        ],
    )
    def test_quantize(self, raw, expected) -> None:
        """소수점 2자리 정규화 (ROUND_HALF_UP)"""
        assert to_money(raw) == expected

    def test_float_without_binary_error(self) -> None:
        """float는 문자열 경유 변환"""
        assert to_money(0.1 + 0.2) == Decimal("0.30")

    @pytest.mark.parametrize("raw", ["abc", "", "NaN", "Infinity", None])
    def test_invalid_values(self, raw) -> None:
        with pytest.raises(ValueError):
            to_money(raw)

    @pytest.mark.parametrize("raw", ["1e26", Decimal("1e30"), "-1e40"])
    def test_out_of_range_raises_value_error(self, raw) -> None:
        """Decimal 정밀도를 넘는 값은 InvalidOperation이 아닌 ValueError"""
        with pytest.raises(ValueError, match="out of range"):
            to_money(raw)


class TestHasMoneyPrecision:
    def test_two_decimals(self) -> None:
        assert has_money_precision(Decimal("1.25"))
        assert has_money_precision(Decimal("7"))

    def test_three_decimals(self) -> None:
        assert not has_money_precision(Decimal("1.255"))

    def test_nan(self) -> None:
        assert not has_money_precision(Decimal("NaN"))

    def test_beyond_decimal_precision(self) -> None:
        """quantize가 정밀도를 넘는 값은 False (예외 없음)"""
        assert not has_money_precision(Decimal("1e30"))


class TestFormatMoney:
    def test_format(self) -> None:
        assert format_money(Decimal("5")) == "5.00"
        assert format_money(Decimal("-12.3")) == "-12.30"


class TestPercentage:
    def test_ratio(self) -> None:
        assert percentage(Decimal("30"), Decimal("50")) == pytest.approx(60.0)

    def test_zero_total(self) -> None:
        """전체가 0이면 0.0"""
        assert percentage(Decimal("10"), Decimal("0")) == 0.0
