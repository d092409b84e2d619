"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
금액은 Decimal로 받으며 0 초과/소수점 2자리 검증은 Ledger에서 수행.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from core.constants import Defaults, FieldLimits
from core.ledger.types import AccountCategory

# 계좌 유형 제안 목록 (자유 형식, 목록 밖 값도 허용)
ACCOUNT_TYPE_HINT = ", ".join(c.value for c in AccountCategory)


class AccountCreateRequest(BaseModel):
    """계좌 생성 요청"""

    name: str = Field(..., max_length=FieldLimits.ACCOUNT_NAME, description="계좌 이름")
    type: str = Field(..., max_length=FieldLimits.ACCOUNT_TYPE, description=f"계좌 유형 ({ACCOUNT_TYPE_HINT} 등)")
    balance: Decimal = Field(default=Decimal("0"), description="초기 잔액")
    color: str = Field(default=Defaults.ACCOUNT_COLOR, max_length=FieldLimits.COLOR, description="표시 색상 (hex)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Family Checking",
                    "type": "checking",
                    "balance": "1500.00",
                    "color": "#10b981",
                },
            ]
        }
    }


class AccountUpdateRequest(BaseModel):
    """계좌 수정 요청 (지정한 필드만 변경)

    balance 지정 시 거래 기록과 무관하게 잔액을 직접 보정.
    """

    name: str | None = Field(default=None, max_length=FieldLimits.ACCOUNT_NAME, description="계좌 이름")
    type: str | None = Field(default=None, max_length=FieldLimits.ACCOUNT_TYPE, description=f"계좌 유형 ({ACCOUNT_TYPE_HINT} 등)")
    balance: Decimal | None = Field(default=None, description="잔액 직접 보정")
    color: str | None = Field(default=None, max_length=FieldLimits.COLOR, description="표시 색상 (hex)")

    def to_changes(self) -> dict[str, object]:
        """None이 아닌 필드만 저장소 필드명으로 변환"""
        data = self.model_dump(exclude_none=True)
        if "type" in data:
            data["account_type"] = data.pop("type")
        return data


class TransactionCreateRequest(BaseModel):
    """거래 생성 요청"""

    account_id: int = Field(..., description="출발 계좌 ID")
    description: str = Field(..., description="설명")
    category: str = Field(..., description="카테고리")
    type: str = Field(..., description="거래 유형 (income/expense/transfer)")
    amount: Decimal = Field(..., description="금액 (양수, 소수점 2자리)")
    to_account_id: int | None = Field(default=None, description="도착 계좌 ID (이체만)")
    transaction_date: datetime = Field(..., description="거래 일시")
    notes: str | None = Field(default=None, description="메모")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "account_id": 1,
                    "description": "Groceries",
                    "category": "Food",
                    "type": "expense",
                    "amount": "42.50",
                    "transaction_date": "2026-03-14T10:00:00Z",
                },
                {
                    "account_id": 1,
                    "description": "Move to savings",
                    "category": "Transfer",
                    "type": "transfer",
                    "amount": "200.00",
                    "to_account_id": 2,
                    "transaction_date": "2026-03-15T09:00:00Z",
                },
            ]
        }
    }


class TransactionUpdateRequest(BaseModel):
    """거래 수정 요청

    description, category, transaction_date, notes만 변경 가능.
    amount/type/account_id/to_account_id를 포함하면 거부됨 (삭제 후 재생성).
    """

    description: str | None = Field(default=None, description="설명")
    category: str | None = Field(default=None, description="카테고리")
    transaction_date: datetime | None = Field(default=None, description="거래 일시")
    notes: str | None = Field(default=None, description="메모 (null이면 삭제)")

    # 변경 불가 필드 (지정 시 400)
    amount: Decimal | None = Field(default=None, description="변경 불가")
    type: str | None = Field(default=None, description="변경 불가")
    account_id: int | None = Field(default=None, description="변경 불가")
    to_account_id: int | None = Field(default=None, description="변경 불가")

    model_config = {"extra": "forbid"}

    def to_changes(self) -> dict[str, object]:
        """요청에 명시된 필드만 반환 (notes: null 유지)"""
        return self.model_dump(exclude_unset=True)


class BudgetCreateRequest(BaseModel):
    """예산 생성 요청"""

    category: str = Field(..., description="카테고리")
    amount: Decimal = Field(..., description="월 예산 한도")
    month: int = Field(..., ge=1, le=12, description="월")
    year: int = Field(..., ge=1900, le=9999, description="연도")


class BudgetUpdateRequest(BaseModel):
    """예산 수정 요청"""

    amount: Decimal = Field(..., description="월 예산 한도")
