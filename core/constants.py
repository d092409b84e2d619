"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    ACCOUNT_COLOR: str = "#3b82f6"

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"

    # 최근 거래 표시 개수 (대시보드)
    RECENT_TRANSACTIONS: int = 10

    # JWT
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60 * 24


class RetryDefaults:
    """Atomic unit 재시도 기본값

    settings.yaml의 ledger 섹션으로 덮어쓸 수 있음.
    """

    MAX_ATTEMPTS: int = 5
    BASE_DELAY_MS: int = 20
    MAX_DELAY_MS: int = 500
    BUSY_TIMEOUT_MS: int = 5000


class Money:
    """금액 관련 상수 (소수점 2자리 고정)"""

    QUANTUM: Decimal = Decimal("0.01")
    ZERO: Decimal = Decimal("0.00")
    # 금액/잔액 절대값 상한
    MAX_AMOUNT: Decimal = Decimal("999999999999.99")


class FieldLimits:
    """문자열 필드 최대 길이"""

    ACCOUNT_NAME: int = 100
    ACCOUNT_TYPE: int = 50
    COLOR: int = 7
    DESCRIPTION: int = 200
    CATEGORY: int = 50
    NOTES: int = 500


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    PROD_DB: Path = DATA_DIR / "finance_prod.db"
    DEV_DB: Path = DATA_DIR / "finance_dev.db"
