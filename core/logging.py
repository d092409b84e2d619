"""
로깅 설정 유틸리티

Web 서버와 관리 스크립트에서 사용하는 공통 로깅 설정.
- 콘솔: INFO 레벨
- 파일: INFO 레벨 (TimedRotatingFileHandler, daily)

Ledger 코드는 extra={"owner_id": ..., "transaction_id": ...} 형태로 문맥을 넘김.
LedgerContextFormatter가 해당 키를 메시지 뒤에 [key=value ...]로 붙임.

사용법:
    from core.logging import setup_logging
    setup_logging("web")
    setup_logging("scripts")
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Paths

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 14

# 메시지 뒤에 출력할 extra 키 (출력 순서)
CONTEXT_FIELDS = (
    "owner_id",
    "transaction_id",
    "account_id",
    "to_account_id",
    "operation",
    "attempt",
    "attempts",
    "delay",
    "status_code",
    "error_type",
)

NOISY_LOGGERS = [
    "aiosqlite",
    "httpcore",
    "httpx",
    "asyncio",
    "uvicorn.access",
]


class LedgerContextFormatter(logging.Formatter):
    """extra로 전달된 ledger 문맥을 메시지 끝에 덧붙이는 Formatter

    Example:
        Transaction created: 7 (expense 12.50) [owner_id=1 transaction_id=7 account_id=3]
    """

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        context = " ".join(
            f"{name}={getattr(record, name)}"
            for name in CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        )
        if not context:
            return text

        # traceback이 붙은 경우 첫 줄(메시지 줄)에 문맥 삽입
        first, sep, rest = text.partition("\n")
        return f"{first} [{context}]{sep}{rest}"


def get_log_dir(process_name: str) -> Path:
    """프로세스별 로그 디렉토리"""
    if process_name == "web":
        return Paths.WEB_LOGS_DIR
    return Paths.LOGS_DIR / process_name


def setup_logging(
    process_name: str,
    console_level: int = logging.INFO,
    file_level: int = logging.INFO,
    log_dir: Path | None = None,
) -> logging.Logger:
    """루트 로거에 콘솔/파일 핸들러 설정 (기존 핸들러는 교체)

    Args:
        process_name: 프로세스 이름 ("web", "scripts")
        console_level: 콘솔 로그 레벨
        file_level: 파일 로그 레벨
        log_dir: 로그 디렉토리 (None이면 프로세스별 기본 경로)

    Returns:
        설정된 루트 Logger
    """
    if log_dir is None:
        log_dir = get_log_dir(process_name)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{process_name}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(min(console_level, file_level))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = LedgerContextFormatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        interval=1,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.suffix = "%Y-%m-%d"
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info(f"로깅 초기화 완료: {process_name} -> {log_file}")
    return root_logger
