"""
타입 정의 모듈

애플리케이션 공통 Enum 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class AppMode(str, Enum):
    """실행 모드 (운영 / 개발)

    모드에 따라 사용하는 DB 파일이 달라짐.
    """

    PRODUCTION = "production"
    DEVELOPMENT = "development"
