"""
Logging utilities for the worklog dashboard
"""
import logging
import sys

from config import settings

# Configure basic logging
logging.basicConfig(
    level=getattr(logging, settings.app.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)


def _format(message: str, kwargs: dict) -> str:
    extra_info = " ".join([f"{k}={v}" for k, v in kwargs.items()])
    return f"{message} {extra_info}".strip()


class EnhancedLogger:
    """Logger that renders keyword arguments as key=value context"""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def info(self, message: str, **kwargs):
        self._logger.info(_format(message, kwargs))

    def error(self, message: str, exc_info: bool = False, **kwargs):
        self._logger.error(_format(message, kwargs), exc_info=exc_info)

    def warning(self, message: str, **kwargs):
        self._logger.warning(_format(message, kwargs))

    def debug(self, message: str, **kwargs):
        self._logger.debug(_format(message, kwargs))


def get_logger(name: str) -> EnhancedLogger:
    """Get a logger instance"""
    return EnhancedLogger(logging.getLogger(name))


def log_status_sync(source: str, count: int, **kwargs):
    """Log external status synchronisation events"""
    logger = get_logger("status_sync")
    logger.info(f"Synced {count} items from {source}", **kwargs)
