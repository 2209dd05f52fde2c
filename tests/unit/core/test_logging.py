"""
core/logging.py 테스트

로그 파일 경로, 핸들러 구성 테스트
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest

from core.constants import Paths
from core.logging import LOG_FILE_BACKUP_COUNT, NOISY_LOGGERS, get_log_file_path, setup_logging


@pytest.fixture
def restore_root_logger():
    """루트 로거 핸들러 복원"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestGetLogFilePath:
    """get_log_file_path 테스트"""

    def test_default_dir(self) -> None:
        assert get_log_file_path("web") == Paths.LOGS_DIR / "web" / "web.log"

    def test_custom_dir(self, tmp_path: Path) -> None:
        assert get_log_file_path("scripts", tmp_path) == tmp_path / "scripts" / "scripts.log"


class TestSetupLogging:
    """setup_logging 테스트"""

    def test_handlers(self, tmp_path: Path, restore_root_logger) -> None:
        """콘솔 + 일 단위 파일 핸들러"""
        root = setup_logging("web", log_dir=tmp_path)

        file_handlers = [h for h in root.handlers if isinstance(h, TimedRotatingFileHandler)]
        assert len(root.handlers) == 2
        assert len(file_handlers) == 1
        assert file_handlers[0].backupCount == LOG_FILE_BACKUP_COUNT
        assert (tmp_path / "web" / "web.log").exists()

    def test_repeated_setup_no_duplicates(self, tmp_path: Path, restore_root_logger) -> None:
        """재호출해도 핸들러 중복 없음"""
        setup_logging("web", log_dir=tmp_path)
        root = setup_logging("web", log_dir=tmp_path)

        assert len(root.handlers) == 2

    def test_noisy_loggers_quieted(self, tmp_path: Path, restore_root_logger) -> None:
        setup_logging("scripts", log_dir=tmp_path)

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
