"""JWT 인증 테스트"""

import jwt
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from core.config.loader import Settings
from core.constants import Defaults
from web.auth import create_access_token, decode_user_id, get_current_user_id

SECRET = "test_jwt_secret_key_xyz"


class TestAccessToken:
    """토큰 생성/검증"""

    def test_round_trip(self) -> None:
        token = create_access_token(7, SECRET)

        assert decode_user_id(token, SECRET) == 7

    def test_sub_is_string(self) -> None:
        """sub 클레임은 문자열"""
        token = create_access_token(7, SECRET)
        payload = jwt.decode(token, SECRET, algorithms=[Defaults.JWT_ALGORITHM])

        assert payload["sub"] == "7"

    def test_wrong_secret(self) -> None:
        token = create_access_token(7, SECRET)

        with pytest.raises(jwt.InvalidTokenError):
            decode_user_id(token, "other-secret")

    def test_expired(self) -> None:
        token = create_access_token(7, SECRET, expires_minutes=-1)

        with pytest.raises(jwt.ExpiredSignatureError):
            decode_user_id(token, SECRET)

    def test_non_numeric_subject(self) -> None:
        token = jwt.encode(
            {"sub": "alice", "exp": 9999999999}, SECRET, algorithm=Defaults.JWT_ALGORITHM
        )

        with pytest.raises(jwt.InvalidTokenError, match="Invalid subject"):
            decode_user_id(token, SECRET)

    def test_missing_exp(self) -> None:
        token = jwt.encode({"sub": "1"}, SECRET, algorithm=Defaults.JWT_ALGORITHM)

        with pytest.raises(jwt.MissingRequiredClaimError):
            decode_user_id(token, SECRET)


class TestGetCurrentUserId:
    """FastAPI 의존성 테스트"""

    @pytest.fixture
    def settings(self, temp_settings_file) -> Settings:
        return Settings(temp_settings_file)

    def test_valid_token(self, settings: Settings) -> None:
        credentials = HTTPAuthorizationCredentials(
            scheme="Bearer", credentials=create_access_token(3, SECRET)
        )

        assert get_current_user_id(credentials, settings) == 3

    def test_missing_credentials(self, settings: Settings) -> None:
        with pytest.raises(HTTPException) as exc_info:
            get_current_user_id(None, settings)

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    def test_invalid_token(self, settings: Settings) -> None:
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="garbage")

        with pytest.raises(HTTPException) as exc_info:
            get_current_user_id(credentials, settings)

        assert exc_info.value.status_code == 401
