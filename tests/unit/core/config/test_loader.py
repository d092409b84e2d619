"""
설정 로더 테스트
"""

from pathlib import Path

import pytest

from core.config.loader import (
    AppSecrets,
    LedgerConfig,
    Settings,
    SettingsLoadError,
    WebConfig,
    get_db_path,
    get_settings,
    load_ledger_config,
    load_secrets,
    load_web_config,
    read_settings_file,
)
from core.constants import Defaults, Paths, RetryDefaults
from core.types import AppMode


class TestReadSettingsFile:
    """read_settings_file 함수 테스트"""

    def test_read_valid_file(self, temp_settings_file: Path) -> None:
        """정상 파일 읽기"""
        data = read_settings_file(temp_settings_file)

        assert data["mode"] == "development"
        assert data["web"]["port"] == 8080

    def test_missing_file_raises_error(self, temp_dir: Path) -> None:
        """파일 없음 시 에러"""
        with pytest.raises(SettingsLoadError, match="찾을 수 없습니다"):
            read_settings_file(temp_dir / "nonexistent.yaml")

    def test_empty_file_raises_error(self, temp_dir: Path) -> None:
        """빈 파일 시 에러"""
        path = temp_dir / "empty.yaml"
        path.write_text("", encoding="utf-8")

        with pytest.raises(SettingsLoadError, match="비어 있습니다"):
            read_settings_file(path)

    def test_malformed_yaml_raises_error(self, temp_dir: Path) -> None:
        """YAML 문법 오류 시 에러"""
        path = temp_dir / "broken.yaml"
        path.write_text("mode: [development\n", encoding="utf-8")

        with pytest.raises(SettingsLoadError, match="파싱 실패"):
            read_settings_file(path)

    def test_non_mapping_raises_error(self, temp_dir: Path) -> None:
        """최상위가 리스트인 경우 에러"""
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(SettingsLoadError, match="매핑"):
            read_settings_file(path)


class TestLoadSecrets:
    """load_secrets 함수 테스트"""

    def test_load_valid_secrets(self) -> None:
        """정상 데이터 로드"""
        secrets = load_secrets({"mode": "development", "web": {"secret_key": "abc"}})

        assert secrets.mode == AppMode.DEVELOPMENT
        assert secrets.web_secret_key == "abc"

    def test_missing_mode_raises_error(self) -> None:
        """mode 누락 시 에러"""
        with pytest.raises(SettingsLoadError, match="'mode' 필드가 없습니다"):
            load_secrets({"web": {"secret_key": "abc"}})

    def test_invalid_mode_raises_error(self) -> None:
        """잘못된 mode 값 시 ValueError"""
        with pytest.raises(ValueError, match="유효하지 않은 mode"):
            load_secrets({"mode": "staging", "web": {"secret_key": "abc"}})

    def test_missing_secret_key_raises_error(self) -> None:
        """web.secret_key 누락 시 에러"""
        with pytest.raises(SettingsLoadError, match="'secret_key'가 없습니다"):
            load_secrets({"mode": "production", "web": {}})

    def test_web_section_must_be_mapping(self) -> None:
        """web 섹션이 매핑이 아니면 에러"""
        with pytest.raises(SettingsLoadError, match="'web' 섹션"):
            load_secrets({"mode": "production", "web": "secret"})

    def test_secrets_immutable(self) -> None:
        """AppSecrets 불변성 확인"""
        secrets = AppSecrets(mode=AppMode.PRODUCTION, web_secret_key="key")

        with pytest.raises(AttributeError):
            secrets.web_secret_key = "other"  # type: ignore


class TestLoadWebConfig:
    """load_web_config 함수 테스트"""

    def test_defaults_when_section_missing(self) -> None:
        """web 섹션 값이 없으면 기본값"""
        config = load_web_config({"mode": "development"})

        assert config.host == Defaults.WEB_HOST
        assert config.port == Defaults.WEB_PORT
        assert config.cors_origins == ()
        assert config.token_expire_minutes == Defaults.JWT_EXPIRE_MINUTES

    def test_cors_origins_as_tuple(self) -> None:
        config = load_web_config({"web": {"cors_origins": ["http://a", "http://b"]}})

        assert config.cors_origins == ("http://a", "http://b")

    def test_invalid_port_raises_error(self) -> None:
        """숫자가 아닌 port"""
        with pytest.raises(SettingsLoadError, match="web 섹션 값이 잘못되었습니다"):
            load_web_config({"web": {"port": "eighty"}})


class TestLoadLedgerConfig:
    """load_ledger_config 함수 테스트"""

    def test_defaults(self) -> None:
        config = load_ledger_config({})

        assert config == LedgerConfig()
        assert config.retry_max_attempts == RetryDefaults.MAX_ATTEMPTS
        assert config.db_path is None

    def test_retry_policy_from_milliseconds(self) -> None:
        """ms 단위 설정이 초 단위 정책으로 변환"""
        config = load_ledger_config(
            {
                "ledger": {
                    "retry_max_attempts": 4,
                    "retry_base_delay_ms": 10,
                    "retry_max_delay_ms": 80,
                }
            }
        )

        policy = config.retry_policy
        assert policy.max_attempts == 4
        assert policy.base_delay == pytest.approx(0.01)
        assert policy.max_delay == pytest.approx(0.08)

    def test_zero_attempts_rejected(self) -> None:
        """재시도 횟수 0은 허용하지 않음"""
        with pytest.raises(SettingsLoadError, match="ledger 섹션"):
            load_ledger_config({"ledger": {"retry_max_attempts": 0}})

    def test_db_path_override(self, temp_dir: Path) -> None:
        config = load_ledger_config({"ledger": {"db_path": str(temp_dir / "x.db")}})

        assert config.db_path == temp_dir / "x.db"


class TestGetDbPath:
    """get_db_path 함수 테스트"""

    def test_production_path(self) -> None:
        secrets = AppSecrets(mode=AppMode.PRODUCTION, web_secret_key="k")
        assert get_db_path(secrets) == Paths.PROD_DB

    def test_development_path(self) -> None:
        secrets = AppSecrets(mode=AppMode.DEVELOPMENT, web_secret_key="k")
        assert get_db_path(secrets) == Paths.DEV_DB

    def test_ledger_override_wins(self, temp_dir: Path) -> None:
        """ledger.db_path 지정 시 mode보다 우선"""
        secrets = AppSecrets(mode=AppMode.PRODUCTION, web_secret_key="k")
        ledger = LedgerConfig(db_path=temp_dir / "custom.db")

        assert get_db_path(secrets, ledger) == temp_dir / "custom.db"


class TestSettings:
    """Settings 싱글턴 테스트"""

    def test_load_development(self, temp_settings_file: Path, temp_dir: Path) -> None:
        """development 설정 로드"""
        settings = Settings(temp_settings_file)

        assert settings.mode == AppMode.DEVELOPMENT
        assert settings.web_secret_key == "test_jwt_secret_key_xyz"
        assert settings.web == WebConfig(
            host="0.0.0.0",
            port=8080,
            cors_origins=("http://localhost:5173",),
            token_expire_minutes=Defaults.JWT_EXPIRE_MINUTES,
        )
        assert settings.retry_policy.max_attempts == 3
        assert settings.busy_timeout_ms == 200
        assert settings.db_path == temp_dir / "finance_test.db"

    def test_production_defaults(self, temp_settings_file_production: Path) -> None:
        """production 모드 기본 경로와 기본 재시도 설정"""
        settings = Settings(temp_settings_file_production)

        assert settings.mode == AppMode.PRODUCTION
        assert settings.db_path == Paths.PROD_DB
        assert settings.retry_policy.max_attempts == RetryDefaults.MAX_ATTEMPTS

    def test_invalid_mode(self, temp_settings_file_invalid_mode: Path) -> None:
        with pytest.raises(ValueError, match="유효하지 않은 mode"):
            Settings(temp_settings_file_invalid_mode)

    def test_singleton(self, temp_settings_file: Path) -> None:
        """동일 인스턴스 반환"""
        first = Settings(temp_settings_file)
        second = Settings()

        assert first is second

    def test_failed_load_keeps_unloaded_state(
        self, temp_dir: Path, temp_settings_file: Path
    ) -> None:
        """로드 실패 후 다시 로드 가능"""
        with pytest.raises(SettingsLoadError):
            Settings(temp_dir / "missing.yaml")

        settings = Settings(temp_settings_file)
        assert settings.mode == AppMode.DEVELOPMENT

    def test_reset(self, temp_settings_file: Path, temp_settings_file_production: Path) -> None:
        """reset 후 다른 파일 로드"""
        Settings(temp_settings_file)
        Settings.reset()

        settings = Settings(temp_settings_file_production)
        assert settings.mode == AppMode.PRODUCTION

    def test_get_settings(self, temp_settings_file: Path) -> None:
        settings = get_settings(temp_settings_file)

        assert settings is get_settings()
