"""
설정 로더

settings.yaml 로드 및 Web/Ledger 설정 생성
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, Paths, RetryDefaults
from core.types import AppMode
from core.utils.retry import RetryPolicy


@dataclass(frozen=True)
class AppSecrets:
    """보안 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    mode: AppMode
    web_secret_key: str


@dataclass(frozen=True)
class WebConfig:
    """Web 서버 설정"""

    host: str = Defaults.WEB_HOST
    port: int = Defaults.WEB_PORT
    cors_origins: tuple[str, ...] = field(default_factory=tuple)
    token_expire_minutes: int = Defaults.JWT_EXPIRE_MINUTES


@dataclass(frozen=True)
class LedgerConfig:
    """Ledger 저장소 설정

    재시도 정책과 SQLite 락 대기 시간.
    db_path가 None이면 mode에 따른 기본 경로 사용.
    """

    retry_max_attempts: int = RetryDefaults.MAX_ATTEMPTS
    retry_base_delay_ms: int = RetryDefaults.BASE_DELAY_MS
    retry_max_delay_ms: int = RetryDefaults.MAX_DELAY_MS
    busy_timeout_ms: int = RetryDefaults.BUSY_TIMEOUT_MS
    db_path: Path | None = None

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.retry_max_attempts,
            base_delay=self.retry_base_delay_ms / 1000,
            max_delay=self.retry_max_delay_ms / 1000,
        )


class SettingsLoadError(Exception):
    """Settings 로드 실패 예외"""

    pass


def read_settings_file(path: Path) -> dict[str, Any]:
    """settings.yaml 파일 읽기

    Raises:
        SettingsLoadError: 파일이 없거나 비어 있거나 형식이 잘못된 경우
    """
    if not path.exists():
        raise SettingsLoadError(f"settings.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SettingsLoadError("settings.yaml이 비어 있습니다")
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    return data


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise SettingsLoadError(f"settings.yaml의 '{name}' 섹션은 매핑이어야 합니다")
    return section


def load_secrets(data: dict[str, Any]) -> AppSecrets:
    """mode와 web.secret_key 로드

    Raises:
        SettingsLoadError: 필수 필드 누락
        ValueError: 유효하지 않은 mode인 경우
    """
    # mode 검증
    mode_str = data.get("mode")
    if mode_str is None:
        raise SettingsLoadError("settings.yaml에 'mode' 필드가 없습니다")

    try:
        mode = AppMode(mode_str)
    except ValueError as e:
        valid_modes = [m.value for m in AppMode]
        raise ValueError(
            f"유효하지 않은 mode입니다: '{mode_str}'. "
            f"유효한 값: {valid_modes}"
        ) from e

    web_secret_key = _section(data, "web").get("secret_key", "")
    if not web_secret_key:
        raise SettingsLoadError(
            "settings.yaml의 web 섹션에 'secret_key'가 없습니다"
        )

    return AppSecrets(mode=mode, web_secret_key=str(web_secret_key))


def load_web_config(data: dict[str, Any]) -> WebConfig:
    web = _section(data, "web")
    try:
        return WebConfig(
            host=str(web.get("host", Defaults.WEB_HOST)),
            port=int(web.get("port", Defaults.WEB_PORT)),
            cors_origins=tuple(web.get("cors_origins") or ()),
            token_expire_minutes=int(
                web.get("token_expire_minutes", Defaults.JWT_EXPIRE_MINUTES)
            ),
        )
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(f"settings.yaml의 web 섹션 값이 잘못되었습니다: {e}") from e


def load_ledger_config(data: dict[str, Any]) -> LedgerConfig:
    ledger = _section(data, "ledger")
    db_path = ledger.get("db_path")

    try:
        config = LedgerConfig(
            retry_max_attempts=int(
                ledger.get("retry_max_attempts", RetryDefaults.MAX_ATTEMPTS)
            ),
            retry_base_delay_ms=int(
                ledger.get("retry_base_delay_ms", RetryDefaults.BASE_DELAY_MS)
            ),
            retry_max_delay_ms=int(
                ledger.get("retry_max_delay_ms", RetryDefaults.MAX_DELAY_MS)
            ),
            busy_timeout_ms=int(
                ledger.get("busy_timeout_ms", RetryDefaults.BUSY_TIMEOUT_MS)
            ),
            db_path=Path(db_path) if db_path else None,
        )
        # 범위 검증 (RetryPolicy.__post_init__)
        _ = config.retry_policy
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(f"settings.yaml의 ledger 섹션 값이 잘못되었습니다: {e}") from e

    return config


def get_db_path(secrets: AppSecrets, ledger: LedgerConfig | None = None) -> Path:
    """모드에 따른 DB 경로 반환

    Args:
        secrets: AppSecrets 인스턴스
        ledger: LedgerConfig (db_path 지정 시 우선)

    Returns:
        DB 파일 경로 (Path 타입)
    """
    if ledger is not None and ledger.db_path is not None:
        return ledger.db_path
    if secrets.mode == AppMode.PRODUCTION:
        return Paths.PROD_DB
    else:
        return Paths.DEV_DB


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _secrets: AppSecrets | None = None
    _web: WebConfig | None = None
    _ledger: LedgerConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._secrets is None:
            data = read_settings_file(settings_path or Paths.SETTINGS_FILE)
            secrets = load_secrets(data)
            web = load_web_config(data)
            ledger = load_ledger_config(data)

            cls = type(self)
            cls._secrets = secrets
            cls._web = web
            cls._ledger = ledger

    @property
    def mode(self) -> AppMode:
        """현재 실행 모드"""
        assert self._secrets is not None
        return self._secrets.mode

    @property
    def web_secret_key(self) -> str:
        """Web JWT Secret Key"""
        assert self._secrets is not None
        return self._secrets.web_secret_key

    @property
    def web(self) -> WebConfig:
        assert self._web is not None
        return self._web

    @property
    def ledger(self) -> LedgerConfig:
        assert self._ledger is not None
        return self._ledger

    @property
    def retry_policy(self) -> RetryPolicy:
        """Atomic unit 재시도 정책"""
        return self.ledger.retry_policy

    @property
    def busy_timeout_ms(self) -> int:
        return self.ledger.busy_timeout_ms

    @property
    def db_path(self) -> Path:
        """현재 모드의 DB 경로"""
        assert self._secrets is not None
        return get_db_path(self._secrets, self._ledger)

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._secrets = None
        cls._web = None
        cls._ledger = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
