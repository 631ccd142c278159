"""Centralized logging configuration module"""

import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler
from datetime import datetime
from typing import Optional, Union

# Whether already initialized
_initialized = False

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(name)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def _write_session_separator(log_file: Path) -> None:
    """Mark a new server run in the log file."""
    with open(log_file, 'a', encoding='utf-8') as f:
        f.write("\n" + "=" * 100 + "\n")
        f.write(f"Server started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        f.write("=" * 100 + "\n\n")


def setup_logging(
    level: Union[str, int] = "INFO",
    logs_dir: Optional[Path] = None,
    *,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 3,
) -> None:
    """Configure console and rotating file logging for the application."""
    global _initialized

    if _initialized:
        return

    logs_dir = Path(logs_dir or "logs")
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / "server.log"
    _write_session_separator(log_file)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8',
    )
    file_handler.setFormatter(formatter)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    # Configure root logger
    logging.basicConfig(
        level=level,
        handlers=[console_handler, file_handler],
        force=True
    )

    # Set log levels for specific modules
    logging.getLogger('src').setLevel(level)
    logging.getLogger('llm_interactions').setLevel(logging.DEBUG)

    # Reduce log level for third-party libraries
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)

    _initialized = True

    logging.getLogger(__name__).info(
        "Logging initialized: %s (rotation: %s bytes, keep %s backups)",
        log_file.absolute(),
        max_bytes,
        backup_count,
    )
