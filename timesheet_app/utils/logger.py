"""
Logging Configuration
"""

from loguru import logger
import sys
from pathlib import Path

from timesheet_app.config.settings import settings


def setup_logger():
    """
    Setup console, application file and approval audit sinks

    Returns:
        logger: Configured logger instance
    """
    # Remove default logger
    logger.remove()

    log_dir = Path(settings.LOG_FILE).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    # Console logging
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=settings.LOG_LEVEL,
        colorize=True
    )

    # File logging - all logs
    logger.add(
        settings.LOG_FILE,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        level=settings.LOG_LEVEL,
        rotation="10 MB",
        retention="30 days",
        compression="zip"
    )

    # File logging - approval audit trail
    logger.add(
        log_dir / "audit.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {message}",
        filter=lambda record: "AUDIT" in record["extra"],
        rotation="10 MB",
        retention="365 days",
        compression="zip"
    )

    return logger


def log_audit(user_id: str, action: str, details: str):
    """
    Log audit trail entry

    Args:
        user_id: User ID who performed the action
        action: Action performed
        details: Action details
    """
    logger.bind(AUDIT=True).info(f"USER_ID={user_id} | ACTION={action} | DETAILS={details}")
