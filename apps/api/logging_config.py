"""
Logging configuration for RecipeScan API.
Sets up console logging plus rotating application and error log files.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Log format
DETAILED_FORMAT = "%(asctime)s [%(name)s:%(lineno)d] %(levelname)s - %(message)s"
SIMPLE_FORMAT = "%(levelname)s - %(message)s"

MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5


def _add_file_handler(root_logger: logging.Logger, path: Path, level: int) -> None:
    try:
        handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=BACKUP_COUNT)
    except OSError as e:
        print(f"Warning: Could not setup log file {path}: {e}", file=sys.stderr)
        return
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT))
    root_logger.addHandler(handler)


def setup_logging(log_level: str = "INFO", log_dir: str = "./logs") -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for app.log and error.log
    """
    # Convert string to logging level
    level = getattr(logging, log_level.upper(), logging.INFO)

    # Root logger configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture everything at root level

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))
    root_logger.addHandler(console_handler)

    directory = Path(log_dir)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Warning: Could not create log directory {directory}: {e}", file=sys.stderr)
        return

    _add_file_handler(root_logger, directory / "app.log", logging.DEBUG)
    _add_file_handler(root_logger, directory / "error.log", logging.ERROR)

    # Set specific loggers
    logging.getLogger("ppocr").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)
