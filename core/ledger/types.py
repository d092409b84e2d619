"""
Ledger 타입 정의

TransactionKind 등 Ledger 시스템에서 사용하는 Enum과 필드 상수 정의
"""

from enum import Enum

from core.ledger.errors import InvalidTransactionKindError


class TransactionKind(str, Enum):
    """거래 유형

    닫힌 집합. 알 수 없는 값은 요청 파싱 단계에서 거부되어
    Coordinator까지 도달하지 않음.
    금액은 항상 양수로 저장하고 부호는 유형으로 결정.
    """

    INCOME = "income"  # 출발 계좌 잔액 증가
    EXPENSE = "expense"  # 출발 계좌 잔액 감소
    TRANSFER = "transfer"  # 출발 계좌 감소, 도착 계좌 증가

    @classmethod
    def parse(cls, value: "str | TransactionKind") -> "TransactionKind":
        """문자열을 TransactionKind로 변환 (대소문자, 앞뒤 공백 무시)

        Raises:
            InvalidTransactionKindError: 지원하지 않는 유형
        """
        if isinstance(value, cls):
            return value

        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise InvalidTransactionKindError(str(value)) from e

    @property
    def requires_destination(self) -> bool:
        """도착 계좌가 필요한 유형인지 여부"""
        return self is TransactionKind.TRANSFER


class AccountCategory(str, Enum):
    """계좌 분류 (UI 제안용)

    account_type은 자유 형식 문자열이며 이 목록 밖의 값도 허용.
    """

    CHECKING = "checking"
    SAVINGS = "savings"
    EWALLET = "ewallet"
    CASH = "cash"
    INVESTMENT = "investment"


# 생성 후 수정 가능한 거래 필드 (잔액에 영향 없음)
MUTABLE_TRANSACTION_FIELDS: frozenset[str] = frozenset({
    "description",
    "category",
    "transaction_date",
    "notes",
})

# 생성 후 수정 불가 필드 (잔액에 영향). "type"은 요청 스키마 별칭.
IMMUTABLE_TRANSACTION_FIELDS: frozenset[str] = frozenset({
    "amount",
    "kind",
    "type",
    "account_id",
    "to_account_id",
})
