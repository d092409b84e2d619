"""재시도 정책 테스트"""

import pytest

from core.utils.retry import RetryPolicy


class TestRetryPolicy:
    """RetryPolicy 테스트"""

    def test_exponential_backoff(self) -> None:
        """지수 백오프"""
        policy = RetryPolicy(max_attempts=5, base_delay=0.1, max_delay=1.0)

        assert policy.delay_for(1) == pytest.approx(0.1)
        assert policy.delay_for(2) == pytest.approx(0.2)
        assert policy.delay_for(3) == pytest.approx(0.4)

    def test_delay_capped(self) -> None:
        """상한 적용"""
        policy = RetryPolicy(max_attempts=10, base_delay=0.1, max_delay=0.5)

        assert policy.delay_for(8) == pytest.approx(0.5)

    def test_should_retry(self) -> None:
        policy = RetryPolicy(max_attempts=3, base_delay=0, max_delay=0)

        assert policy.should_retry(1)
        assert policy.should_retry(2)
        assert not policy.should_retry(3)

    def test_no_retry(self) -> None:
        policy = RetryPolicy.no_retry()

        assert policy.max_attempts == 1
        assert not policy.should_retry(1)

    def test_invalid_attempts(self) -> None:
        with pytest.raises(ValueError, match="max_attempts"):
            RetryPolicy(max_attempts=0)

    def test_negative_delay(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            RetryPolicy(base_delay=-1)

    def test_immutable(self) -> None:
        policy = RetryPolicy()

        with pytest.raises(AttributeError):
            policy.max_attempts = 10  # type: ignore
