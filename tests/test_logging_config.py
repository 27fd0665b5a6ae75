import logging
import logging.handlers

import pytest
from rich.logging import RichHandler

from ec2_mount_volume.config import Settings
from ec2_mount_volume.logging_config import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    def test_console_only_by_default(self, restore_root_logger):
        setup_logging(Settings(log_level="INFO"))

        handlers = restore_root_logger.handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RichHandler)
        assert restore_root_logger.level == logging.INFO
        assert logging.getLogger("botocore").level == logging.WARNING

    def test_file_handler_when_path_configured(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "ec2-mount-volume.log"

        setup_logging(Settings(log_level="DEBUG", log_file_path=str(log_file)))
        logging.getLogger("ec2_mount_volume.test").debug("hello from test")
        for handler in restore_root_logger.handlers:
            handler.flush()

        assert any(
            isinstance(h, logging.handlers.TimedRotatingFileHandler)
            for h in restore_root_logger.handlers
        )
        assert "hello from test" in log_file.read_text(encoding="utf-8")
