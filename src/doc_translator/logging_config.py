"""
Logging setup for doc-translator.

Console output goes through rich; an optional rotating file keeps the full log.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from rich.console import Console
from rich.logging import RichHandler

from doc_translator.config import LoggingConfig

# Transport libraries that are chatty at INFO
NOISY_LOGGERS = (
    "google.auth",
    "google.api_core",
    "grpc",
    "urllib3",
    "asyncio",
)


def setup_logging(config: LoggingConfig | None = None, console: Console | None = None) -> None:
    """Configure the `doc_translator` logger tree from a LoggingConfig."""
    config = config or LoggingConfig()
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger("doc_translator")
    # The file keeps DEBUG records even when the console is quieter
    root.setLevel(logging.DEBUG if config.file else level)
    root.handlers.clear()
    root.propagate = False

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    root.addHandler(console_handler)

    if config.file:
        config.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.file,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(config.format))
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
