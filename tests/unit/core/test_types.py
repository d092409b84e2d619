"""
core/types.py 테스트
"""

import pytest

from core.types import AppMode


class TestAppMode:
    """AppMode 테스트"""

    def test_values(self) -> None:
        """값 확인"""
        assert AppMode.PRODUCTION.value == "production"
        assert AppMode.DEVELOPMENT.value == "development"

    def test_from_string(self) -> None:
        """문자열에서 생성"""
        assert AppMode("development") is AppMode.DEVELOPMENT

    def test_invalid_value(self) -> None:
        with pytest.raises(ValueError):
            AppMode("testnet")
