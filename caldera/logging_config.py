"""
Centralized logging configuration for Caldera.

Provides debug logging to file for generation runs.
Log file: <log_dir>/caldera.log (with rotation)

Usage:
    from caldera.logging_config import setup_logging
    setup_logging(log_dir)  # Call once at startup

All caldera.* loggers will write DEBUG to file, WARNING+ to console.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime


# Global configuration
LOG_FILE_NAME = "caldera.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5  # Keep 5 backup files

_logging_initialized = False


def setup_logging(
    log_dir: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Configure the logging system for Caldera.

    Args:
        log_dir: Directory for the log file (created if missing)
        log_level: Level for file logging (default: DEBUG)
        console_level: Level for console output (default: WARNING)

    Returns:
        Path to the log file
    """
    global _logging_initialized

    log_path_dir = Path(log_dir)
    log_path_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_path_dir / LOG_FILE_NAME

    # Create root logger for caldera
    root_logger = logging.getLogger("caldera")
    root_logger.setLevel(logging.DEBUG)  # Capture all levels

    # Clear any existing handlers (for re-initialization)
    for handler in list(root_logger.handlers):
        handler.close()
    root_logger.handlers.clear()

    # File handler with rotation
    file_formatter = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-35s | %(funcName)-25s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    # Console handler (less verbose)
    console_formatter = logging.Formatter(
        fmt="%(levelname)-8s | %(name)-25s | %(message)s"
    )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    # Log startup
    if not _logging_initialized:
        root_logger.info("=" * 80)
        root_logger.info(f"Caldera logging initialized at {datetime.now().isoformat()}")
        root_logger.info(f"Log file: {log_path.absolute()}")
        root_logger.info("=" * 80)
        _logging_initialized = True

    return log_path


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger configured as child of caldera logger
    """
    # Create child logger under caldera namespace
    if name == "caldera" or name.startswith("caldera."):
        return logging.getLogger(name)
    else:
        return logging.getLogger(f"caldera.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_run(
    logger: logging.Logger,
    phase: str,
    details: str | None = None,
) -> None:
    """Log a generation run milestone (start, complete, failure, retry)."""
    details_str = f" | {details}" if details else ""
    logger.info(f"RUN | {phase}{details_str}")


def log_collapse(
    logger: logging.Logger,
    step: int,
    cell_id: int,
    point: object,
    state: str,
    forced: bool = False,
) -> None:
    """Log a cell collapsing to a state."""
    kind = "FORCED" if forced else "OBSERVED"
    logger.debug(f"STEP {step:06d} | {kind} | cell={cell_id} | point={point} | state={state}")


def log_propagation(
    logger: logging.Logger,
    step: int,
    cell_id: int,
    updated: int,
    forced: int = 0,
) -> None:
    """Log the outcome of one propagation call."""
    forced_str = f" | forced={forced}" if forced else ""
    logger.debug(f"STEP {step:06d} | PROPAGATE | from={cell_id} | updated={updated}{forced_str}")


def log_export(
    logger: logging.Logger,
    path: Path | str,
    cells: int,
    success: bool = True,
    details: str | None = None,
) -> None:
    """Log a placement-list export."""
    status = "OK" if success else "FAILED"
    details_str = f" | {details}" if details else ""
    logger.info(f"EXPORT | {path} | cells={cells} | {status}{details_str}")
