"""
pytest 공통 fixture 정의

설정 파일, 임시 디렉토리, Settings 싱글턴 초기화
"""

import tempfile
from pathlib import Path

import pytest

from core.config.loader import Settings


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_settings():
    """테스트 간 Settings 싱글턴 격리"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = f"""# 테스트용 settings.yaml
mode: development

web:
  secret_key: "test_jwt_secret_key_xyz"
  host: 0.0.0.0
  port: 8080
  cors_origins:
    - http://localhost:5173

ledger:
  retry_max_attempts: 3
  retry_base_delay_ms: 1
  retry_max_delay_ms: 5
  busy_timeout_ms: 200
  db_path: "{(temp_dir / 'finance_test.db').as_posix()}"
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_production(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성 (production 모드, 기본값)"""
    settings_content = """mode: production

web:
  secret_key: "prod_jwt_secret_key_xyz"
"""
    settings_path = temp_dir / "settings_prod.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_invalid_mode(temp_dir: Path) -> Path:
    """잘못된 모드의 settings.yaml 파일 생성"""
    settings_content = """mode: invalid_mode

web:
  secret_key: "jwt_secret"
"""
    settings_path = temp_dir / "settings_invalid.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path
