"""
Ledger 입력 검증

저장소 구현(SQLite, In-memory)과 Coordinator가 공통으로 사용.
모든 검증은 트랜잭션 시작 전에 수행 (실패 시 부수 효과 없음).
"""

from decimal import Decimal
from typing import Any

from core.constants import FieldLimits, Money
from core.ledger.errors import InvalidAmountError, ValidationError
from core.utils.money import has_money_precision, to_money

# 계좌 메타데이터 중 직접 수정 가능한 필드
EDITABLE_ACCOUNT_FIELDS = frozenset({"name", "account_type", "color", "balance"})

ACCOUNT_TEXT_LIMITS = {
    "name": FieldLimits.ACCOUNT_NAME,
    "account_type": FieldLimits.ACCOUNT_TYPE,
    "color": FieldLimits.COLOR,
}


def validate_amount(value: Any) -> Decimal:
    """거래/예산 금액 검증

    Returns:
        소수점 2자리로 정규화된 금액

    Raises:
        InvalidAmountError: 숫자가 아님, 0 이하, 상한 초과, 소수점 2자리 초과
    """
    try:
        raw = Decimal(str(value)) if not isinstance(value, Decimal) else value
    except ArithmeticError as e:
        raise InvalidAmountError(value, "not a number") from e

    if not raw.is_finite():
        raise InvalidAmountError(value, "not a number")
    if raw <= 0:
        raise InvalidAmountError(value)
    if raw > Money.MAX_AMOUNT:
        raise InvalidAmountError(value, f"must not exceed {Money.MAX_AMOUNT}")
    if not has_money_precision(raw):
        raise InvalidAmountError(value, "at most 2 decimal places allowed")
    return to_money(raw)


def validate_text(
    field_name: str,
    value: Any,
    limit: int,
    required: bool = True,
) -> str | None:
    """문자열 필드 검증 (공백만 있는 값은 빈 값으로 취급)

    Raises:
        ValidationError: 필수값 누락 또는 길이 초과
    """
    if value is None:
        if required:
            raise ValidationError(f"{field_name} is required")
        return None

    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    if required and not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    if len(value) > limit:
        raise ValidationError(f"{field_name} exceeds {limit} characters")
    return value


def validate_account_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """계좌 생성/수정 필드 검증

    Returns:
        정규화된 필드 (balance는 소수점 2자리)

    Raises:
        ValidationError: 알 수 없는 필드, 빈 값, 길이 초과, 잘못된 잔액
    """
    unknown = sorted(set(fields) - EDITABLE_ACCOUNT_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown account fields: {', '.join(unknown)}")

    cleaned: dict[str, Any] = {}
    for name, value in fields.items():
        if name == "balance":
            cleaned[name] = validate_balance(value)
        else:
            cleaned[name] = validate_text(name, value, ACCOUNT_TEXT_LIMITS[name])
    return cleaned


def validate_balance(value: Any) -> Decimal:
    """계좌 잔액 검증 (음수 허용, 절대값은 상한 이내)

    Raises:
        ValidationError: 숫자가 아니거나 상한 초과
    """
    try:
        balance = to_money(value)
    except ValueError as e:
        raise ValidationError(f"Invalid balance: {value!r}") from e

    if abs(balance) > Money.MAX_AMOUNT:
        raise ValidationError(f"Invalid balance {value!r}: must be within ±{Money.MAX_AMOUNT}")
    return balance
