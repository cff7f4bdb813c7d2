"""Logging setup shared by the CLI entry points."""

import logging
from logging.handlers import RotatingFileHandler

from rich.logging import RichHandler

from hwsync.core.settings import EnvSettings

# Loggers that are too chatty at INFO
_NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(settings: EnvSettings, verbose: bool = False) -> None:
    """Configure the root logger from settings.

    Console output goes through rich; a rotating file handler is added when
    ``log_file_enabled`` is set.
    """
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console_handler = RichHandler(rich_tracebacks=True, show_path=False)
    console_handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))
    root.addHandler(console_handler)

    if settings.log_file_enabled:
        log_path = settings.get_path(settings.log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=settings.log_file_max_size_mb * 1024 * 1024,
            backupCount=settings.log_file_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(settings.log_format))
        root.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING if not verbose else logging.DEBUG)
