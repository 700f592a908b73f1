"""Root logger setup."""

import logging
import sys
from pathlib import Path

_HANDLER_MARKER = "_ebook_registry_handler"


def setup_logging(log_level: str = "INFO", log_file: str | Path | None = None) -> None:
    """Configure the root logger with a console and optional file handler.

    Handlers installed by a previous call are replaced, so calling this
    more than once does not duplicate output.

    Args:
        log_level: Level name such as ``"DEBUG"`` or ``"info"``.
        log_file: Optional path of a log file; parent directories are created.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level.upper())

    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root_logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARKER, True)
        root_logger.addHandler(handler)
