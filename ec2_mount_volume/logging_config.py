import logging
import logging.handlers

from rich.console import Console
from rich.logging import RichHandler

from .config import Settings

# Third-party loggers that are chatty at INFO/DEBUG
NOISY_LOGGERS = ("botocore", "boto3", "urllib3")


def setup_logging(settings: Settings) -> None:
    # stdout carries the mount plan, so diagnostics go to stderr
    console = Console(stderr=True, width=120)
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=True,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
    )
    rich_handler.setLevel(settings.log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(rich_handler)

    if settings.log_file_path:
        settings.log_directory.mkdir(parents=True, exist_ok=True)

        file_format = (
            "%(asctime)s - %(levelname)s - "
            "%(filename)s:%(lineno)d in %(funcName)s() - "
            "%(message)s"
        )
        file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=settings.log_file_path,
            when="midnight",
            interval=1,
            backupCount=settings.log_retention_days,
            encoding="utf-8",
        )
        file_handler.setLevel(settings.log_level)
        file_handler.setFormatter(logging.Formatter(file_format))
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.debug(
        f"Logging initialized - Level: {settings.log_level}, "
        f"File: {settings.log_file_path or 'disabled'}"
    )
