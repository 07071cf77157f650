import inspect
import logging
from typing import Optional

from pinet.shared.settings import app_settings
from .handlers import LogStreamHandler


def get_logger(
        name: Optional[str] = None,
        use_stream: bool = True,
        level: Optional[int | str] = None
) -> logging.Logger:
    """
    Get a logger configured with the package's stream handler

    Args:
        name: Logger name. If None, uses calling module's __name__
        use_stream: Whether to add console output handler
        level: Logging level

    Returns:
        Configured logger
    """
    if name is None:
        frame = inspect.currentframe().f_back
        name = frame.f_globals.get('__name__', 'unknown')

    logger = logging.getLogger(name)

    # Configure only if not already configured
    if not _is_logger_configured(logger):
        _configure_logger(logger=logger, use_stream=use_stream, level=level)

    return logger


def _is_logger_configured(logger: logging.Logger) -> bool:
    """
    Check if logger already has our custom handler configured
    """
    return any(isinstance(handler, LogStreamHandler) for handler in logger.handlers)


def _configure_logger(
        logger: logging.Logger,
        use_stream: bool,
        level: Optional[int | str] = None
) -> None:
    log_level = level or app_settings.log_level
    logger.setLevel(log_level)

    if use_stream:
        logger.propagate = False
        logger.addHandler(LogStreamHandler())
