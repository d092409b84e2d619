"""
재시도 정책

Atomic unit 재실행에 사용하는 지수 백오프 정책.
"""

from dataclasses import dataclass

from core.constants import RetryDefaults


@dataclass(frozen=True)
class RetryPolicy:
    """재시도 정책 (불변)

    Attributes:
        max_attempts: 최초 시도를 포함한 최대 시도 횟수
        base_delay: 첫 재시도 전 대기 시간 (초)
        max_delay: 대기 시간 상한 (초)
    """

    max_attempts: int = RetryDefaults.MAX_ATTEMPTS
    base_delay: float = RetryDefaults.BASE_DELAY_MS / 1000
    max_delay: float = RetryDefaults.MAX_DELAY_MS / 1000

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must be non-negative")

    def delay_for(self, attempt: int) -> float:
        """attempt번째 시도 실패 후 대기 시간 (attempt는 1부터)

        Example:
            >>> RetryPolicy(base_delay=0.1, max_delay=1.0).delay_for(3)
            0.4
        """
        return min(self.max_delay, self.base_delay * (2 ** (attempt - 1)))

    def should_retry(self, attempt: int) -> bool:
        """attempt번째 시도 실패 후 재시도 가능 여부"""
        return attempt < self.max_attempts

    @classmethod
    def no_retry(cls) -> "RetryPolicy":
        """재시도 없음 (1회 시도)"""
        return cls(max_attempts=1, base_delay=0.0, max_delay=0.0)
