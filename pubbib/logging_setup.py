"""
Logging configuration for PubBib.

Provides centralized logging setup with:
- Console output (always enabled)
- Rotating, compressed log file (configurable)
"""

import sys
from pathlib import Path
from loguru import logger

# Determine log directory
LOG_DIR = Path(__file__).parent.parent / '.data' / 'logs'

# Flag to track if logging is already configured
_logging_configured = False


def setup_logging(
    log_level: str = "WARNING",
    enable_file_logging: bool = False,
    rotation_size_mb: int = 10,
    retention_count: int = 5,
    verbose: bool = False
):
    """
    Configure logging for PubBib.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        enable_file_logging: Whether to write logs to files
        rotation_size_mb: Size in MB before rotating log file
        retention_count: Number of rotated log files to keep
        verbose: Enable verbose/debug output
    """
    global _logging_configured

    if _logging_configured:
        return

    # Remove default handler
    logger.remove()

    effective_level = "DEBUG" if verbose else log_level.upper()

    console_format = (
        "<green>{time:HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
        "<level>{message}</level>"
    )
    logger.add(
        sys.stderr,
        format=console_format,
        level=effective_level,
        colorize=True,
    )

    if enable_file_logging:
        LOG_DIR.mkdir(parents=True, exist_ok=True)

        file_format = (
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
            "{level: <8} | "
            "{name}:{function}:{line} | "
            "{message}"
        )

        main_log = LOG_DIR / "pubbib.log"
        logger.add(
            str(main_log),
            format=file_format,
            level="DEBUG",
            rotation=f"{rotation_size_mb} MB",
            retention=retention_count,
            compression="zip",
            enqueue=True,
        )

        logger.info(f"File logging enabled. Log directory: {LOG_DIR}")

    _logging_configured = True
    logger.debug(f"PubBib logging initialized (level={effective_level})")


def log_lookup(source: str, result: str, details: dict = None):
    """
    Log the outcome of one title/URL lookup.

    Args:
        source: Title or URL that was looked up
        result: Result status (success, failed, etc.)
        details: Additional details
    """
    details = details or {}
    logger.debug(f"Lookup: {source} -> {result} | {details}")


def init_from_config(verbose: bool = False):
    """Initialize logging from config settings."""
    from pubbib.config import config
    setup_logging(
        log_level=config.LOG_LEVEL,
        enable_file_logging=config.ENABLE_FILE_LOGGING,
        rotation_size_mb=config.LOG_ROTATION_SIZE_MB,
        retention_count=config.LOG_RETENTION_COUNT,
        verbose=verbose or config.VERBOSE,
    )


__all__ = [
    'setup_logging',
    'log_lookup',
    'init_from_config',
]
