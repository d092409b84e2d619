"""
로깅 설정 테스트
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest

from core.constants import Paths
from core.logging import LedgerContextFormatter, get_log_dir, setup_logging


def make_record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="core.ledger.coordinator",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLedgerContextFormatter:
    """LedgerContextFormatter 테스트"""

    @pytest.fixture
    def formatter(self) -> LedgerContextFormatter:
        return LedgerContextFormatter("%(message)s")

    def test_without_context(self, formatter: LedgerContextFormatter) -> None:
        """문맥 키가 없으면 메시지 그대로"""
        assert formatter.format(make_record("hello")) == "hello"

    def test_context_appended_in_order(self, formatter: LedgerContextFormatter) -> None:
        """정해진 순서로 key=value 출력"""
        record = make_record(
            "Transaction created: 7", transaction_id=7, owner_id=1, account_id=3
        )

        assert formatter.format(record) == (
            "Transaction created: 7 [owner_id=1 transaction_id=7 account_id=3]"
        )

    def test_none_and_unknown_keys_skipped(self, formatter: LedgerContextFormatter) -> None:
        """None 값과 목록에 없는 키는 출력하지 않음"""
        record = make_record("Transfer", owner_id=1, to_account_id=None, fields=["notes"])

        assert formatter.format(record) == "Transfer [owner_id=1]"

    def test_context_on_first_line_with_traceback(
        self, formatter: LedgerContextFormatter
    ) -> None:
        """traceback이 있어도 문맥은 메시지 줄에 붙음"""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record("failed", operation="run_atomic")
            record.exc_info = sys.exc_info()

        lines = formatter.format(record).splitlines()

        assert lines[0] == "failed [operation=run_atomic]"
        assert "RuntimeError: boom" in lines[-1]


class TestSetupLogging:
    """setup_logging 테스트"""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers = list(root.handlers)
        level = root.level
        yield
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)

    def test_log_dir_per_process(self) -> None:
        assert get_log_dir("web") == Paths.WEB_LOGS_DIR
        assert get_log_dir("scripts") == Paths.LOGS_DIR / "scripts"

    def test_handlers_installed(self, tmp_path: Path) -> None:
        """콘솔 + 일별 파일 핸들러, 모두 문맥 Formatter 사용"""
        root = setup_logging("scripts", log_dir=tmp_path)

        assert len(root.handlers) == 2
        file_handlers = [h for h in root.handlers if isinstance(h, TimedRotatingFileHandler)]
        assert len(file_handlers) == 1
        assert Path(file_handlers[0].baseFilename) == tmp_path / "scripts.log"
        assert all(isinstance(h.formatter, LedgerContextFormatter) for h in root.handlers)

    def test_repeat_setup_replaces_handlers(self, tmp_path: Path) -> None:
        """재호출 시 핸들러가 중복되지 않음"""
        setup_logging("scripts", log_dir=tmp_path)
        root = setup_logging("scripts", log_dir=tmp_path)

        assert len(root.handlers) == 2

    def test_context_written_to_file(self, tmp_path: Path) -> None:
        setup_logging("web", log_dir=tmp_path)

        logging.getLogger("core.ledger.store").info(
            "Account deleted: 4", extra={"owner_id": 9}
        )
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = (tmp_path / "web.log").read_text(encoding="utf-8")
        assert "Account deleted: 4 [owner_id=9]" in content

    def test_noisy_loggers_quieted(self, tmp_path: Path) -> None:
        setup_logging("scripts", log_dir=tmp_path)

        assert logging.getLogger("aiosqlite").level == logging.WARNING
