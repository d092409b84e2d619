"""
Ledger 예외 → HTTP 변환

라우트는 서비스 호출을 감싸고 LedgerError를 이 함수로 변환.
"""

import logging

from fastapi import HTTPException, status

from core.ledger.errors import (
    ConflictError,
    InsufficientBalanceError,
    LedgerError,
    LedgerInconsistencyError,
    NotFoundError,
    TransientStorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# 순서 중요: 먼저 매칭되는 카테고리 사용
STATUS_BY_ERROR: list[tuple[type[LedgerError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InsufficientBalanceError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
    (TransientStorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (LedgerInconsistencyError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_code_for(exc: LedgerError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(exc: LedgerError) -> HTTPException:
    """LedgerError를 HTTPException으로 변환

    서버 측 오류(5xx)는 내부 메시지를 노출하지 않음.
    """
    status_code = status_code_for(exc)

    if status_code >= 500:
        logger.error(
            f"Ledger 서버 오류: {exc.message}",
            extra={"error_type": type(exc).__name__, "status_code": status_code},
        )
        if isinstance(exc, TransientStorageError):
            detail = "Storage is busy, please retry"
        else:
            detail = "Internal ledger error"
        return HTTPException(status_code=status_code, detail=detail)

    return HTTPException(status_code=status_code, detail=exc.message)
