"""
액세스 토큰 발급 (운영용)

회원가입/로그인은 이 서비스 범위 밖이므로
운영자가 사용자 ID로 직접 토큰을 발급.

사용법:
    python -m scripts.issue_token --user-id 1
    python -m scripts.issue_token --user-id 1 --expires-minutes 60
"""

import argparse
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.config.loader import get_settings
from web.auth import create_access_token


def main() -> None:
    parser = argparse.ArgumentParser(description="JWT 액세스 토큰 발급")
    parser.add_argument("--user-id", type=int, required=True, help="소유자(사용자) ID")
    parser.add_argument("--settings", type=Path, default=None, help="settings.yaml 경로")
    parser.add_argument("--expires-minutes", type=int, default=None, help="만료 시간 (분)")
    args = parser.parse_args()

    settings = get_settings(args.settings)
    expires = args.expires_minutes or settings.web.token_expire_minutes
    print(create_access_token(args.user_id, settings.web_secret_key, expires))


if __name__ == "__main__":
    main()
