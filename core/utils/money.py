"""
금액 유틸리티

모든 금액/잔액은 소수점 2자리 고정 Decimal.
float는 절대 사용하지 않음 (입력 시 문자열 경유 변환).
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from core.constants import Money


def to_money(value: Decimal | int | str | float) -> Decimal:
    """값을 소수점 2자리 Decimal로 변환 (ROUND_HALF_UP)

    Args:
        value: Decimal, int, str 또는 float

    Returns:
        2자리로 정규화된 Decimal

    Raises:
        ValueError: 숫자로 변환할 수 없거나 Decimal 정밀도를 넘는 값

    Example:
        >>> to_money("10.005")
        Decimal('10.01')
    """
    if isinstance(value, float):
        # float 오차 방지
        value = repr(value)

    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Not a valid money amount: {value!r}") from e

    if not amount.is_finite():
        raise ValueError(f"Not a valid money amount: {value!r}")

    try:
        return amount.quantize(Money.QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"Money amount out of range: {value!r}") from e


def has_money_precision(value: Decimal) -> bool:
    """소수점 2자리 이내인지 확인 (반올림 없이 표현 가능한지)"""
    if not value.is_finite():
        return False
    try:
        return value == value.quantize(Money.QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return False


def format_money(value: Decimal) -> str:
    """Decimal을 2자리 문자열로 포맷 (DB 저장 / JSON 응답용)

    Example:
        >>> format_money(Decimal("5"))
        '5.00'
    """
    return str(to_money(value))


def percentage(part: Decimal, total: Decimal) -> float:
    """전체 대비 비율(%) 계산

    total이 0 이하이면 0.0 반환.
    """
    if total <= 0:
        return 0.0
    return float(part / total * 100)
