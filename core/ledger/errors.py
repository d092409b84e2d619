"""
Ledger 예외 정의

모든 Ledger 예외는 LedgerError를 상속.
Web 레이어는 카테고리(NotFound/Validation/Conflict 등)만 보고 HTTP 상태로 변환.

재시도 정책:
- TransientStorageError만 run_atomic 내부에서 자동 재시도 대상
- 나머지는 즉시 unit을 중단하고 호출자에게 전파
"""

from decimal import Decimal


class LedgerError(Exception):
    """Ledger 예외 베이스"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# =========================================================================
# Not Found
# =========================================================================


class NotFoundError(LedgerError):
    """소유자 범위 내에서 엔티티를 찾을 수 없음"""

    entity: str = "Entity"

    def __init__(self, entity_id: int):
        self.entity_id = entity_id
        super().__init__(f"{self.entity} not found: {entity_id}")


class AccountNotFoundError(NotFoundError):
    entity = "Account"


class TransactionNotFoundError(NotFoundError):
    entity = "Transaction"


class BudgetNotFoundError(NotFoundError):
    entity = "Budget"


# =========================================================================
# Validation (클라이언트 입력 오류)
# =========================================================================


class ValidationError(LedgerError):
    """요청 값 검증 실패"""

    pass


class InvalidTransactionKindError(ValidationError):
    """지원하지 않는 거래 유형"""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Invalid transaction type: {kind!r}")


class DestinationAccountMissingError(ValidationError):
    """이체 요청에 도착 계좌가 없음"""

    def __init__(self) -> None:
        super().__init__("Transfer requires to_account_id")


class UnexpectedDestinationError(ValidationError):
    """이체가 아닌 거래에 도착 계좌가 지정됨"""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"to_account_id is only allowed for transfers, got type {kind!r}")


class SameAccountTransferError(ValidationError):
    """출발/도착 계좌가 동일한 이체"""

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Cannot transfer to the same account: {account_id}")


class InvalidAmountError(ValidationError):
    """금액이 0 이하이거나 소수점 2자리를 초과"""

    def __init__(self, amount: object, reason: str = "must be greater than zero"):
        self.amount = amount
        super().__init__(f"Invalid amount {amount}: {reason}")


class BalanceLimitExceededError(ValidationError):
    """거래 반영 후 잔액이 허용 범위를 벗어남"""

    def __init__(self, account_id: int, balance: Decimal, limit: Decimal):
        self.account_id = account_id
        self.balance = balance
        self.limit = limit
        super().__init__(
            f"Balance of account {account_id} would be {balance}, outside ±{limit}"
        )


class ImmutableFieldError(ValidationError):
    """생성 후 변경 불가 필드(금액/유형/계좌) 수정 시도

    잔액에 영향을 주는 수정은 삭제 후 재생성으로만 가능.
    """

    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__(
            f"Fields cannot be changed after creation: {', '.join(fields)}. "
            "Delete and recreate the transaction instead"
        )


# =========================================================================
# 잔액 부족
# =========================================================================


class InsufficientBalanceError(LedgerError):
    """출금 계좌 잔액 부족 (자동 재시도 없음)"""

    def __init__(self, account_id: int, balance: Decimal, amount: Decimal):
        self.account_id = account_id
        self.balance = balance
        self.amount = amount
        super().__init__(
            f"Insufficient balance in account {account_id}: "
            f"balance {balance}, required {amount}"
        )


# =========================================================================
# Conflict (참조 무결성)
# =========================================================================


class ConflictError(LedgerError):
    """참조 무결성 / 유일성 충돌"""

    pass


class AccountInUseError(ConflictError):
    """거래가 참조 중인 계좌 삭제 시도"""

    def __init__(self, account_id: int, reference_count: int):
        self.account_id = account_id
        self.reference_count = reference_count
        super().__init__(
            f"Cannot delete account {account_id} with existing transactions "
            f"({reference_count})"
        )


class DuplicateBudgetError(ConflictError):
    """같은 카테고리/월에 예산이 이미 존재"""

    def __init__(self, category: str, month: int, year: int):
        self.category = category
        self.month = month
        self.year = year
        super().__init__(f"Budget already exists: {category} {year}-{month:02d}")


# =========================================================================
# 저장소 오류
# =========================================================================


class TransientStorageError(LedgerError):
    """일시적 저장소 오류 (락 경합, 연결 끊김 등)

    run_atomic 내부에서 발생하면 unit 전체를 재실행.
    재시도를 모두 소진하면 호출자에게 전파 (서버 오류).
    """

    def __init__(self, message: str = "Transient storage failure", attempts: int = 0):
        self.attempts = attempts
        super().__init__(message)


class LedgerInconsistencyError(LedgerError):
    """Ledger 불일치 (예: 이체 역분개 시 도착 계좌가 사라짐)

    부분 역분개를 절대 적용하지 않고 unit을 중단.
    """

    pass
