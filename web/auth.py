"""
JWT 인증

Authorization: Bearer <token> 헤더 검증.
토큰의 sub 클레임이 소유자(사용자) ID.

토큰 발급(회원가입/로그인)은 이 서비스 범위 밖.
create_access_token은 운영/테스트용.
"""

import logging
from datetime import timedelta

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config.loader import Settings
from core.constants import Defaults
from core.utils.timezone import now_utc
from web.dependencies import get_app_settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(
    user_id: int,
    secret_key: str,
    expires_minutes: int = Defaults.JWT_EXPIRE_MINUTES,
) -> str:
    """액세스 토큰 생성

    Args:
        user_id: 소유자 ID (sub 클레임)
        secret_key: 서명 키 (settings.yaml web.secret_key)
        expires_minutes: 만료 시간 (분)

    Returns:
        HS256 서명 JWT 문자열
    """
    issued_at = now_utc()
    payload = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, secret_key, algorithm=Defaults.JWT_ALGORITHM)


def decode_user_id(token: str, secret_key: str) -> int:
    """토큰 검증 후 사용자 ID 반환

    Raises:
        jwt.InvalidTokenError: 서명/만료/형식 오류
    """
    payload = jwt.decode(
        token,
        secret_key,
        algorithms=[Defaults.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
    try:
        return int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise jwt.InvalidTokenError(f"Invalid subject: {payload['sub']!r}") from e


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> int:
    """현재 사용자 ID (FastAPI 의존성)

    Raises:
        HTTPException: 401 (토큰 없음 또는 검증 실패)
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return decode_user_id(credentials.credentials, settings.web_secret_key)
    except jwt.InvalidTokenError as e:
        logger.info(f"토큰 검증 실패: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
