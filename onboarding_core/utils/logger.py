"""
Console logging for the onboarding core.

This module provides:
1. ContextAwareLogger, which renders extras as pipe-delimited key=value pairs
2. CorrelationIdFilter, which stamps the current correlation ID on records
"""

import logging
import sys
from typing import Optional, Union

from ..config import get_config

PACKAGE_LOGGER_NAME = "onboarding_core"

_package_logger = None


class ContextAwareLogger:
    """
    Logger wrapper that formats extra attributes in message while preserving them.

    This keeps extras visible in console output even when a host replaces the formatters.
    """

    def __init__(self, logger):
        """Initialize with an existing logger."""
        self.logger = logger

    def _log_with_formatted_extra(self, level, msg, **kwargs):
        """
        Log with extra data formatted into the message.

        Args:
            level: Logging level method to use
            msg: Log message
            **kwargs: Additional arguments including 'extra'
        """
        extra = kwargs.pop("extra", {})

        if extra:
            extra_str = " | ".join([f"{k}={v}" for k, v in extra.items()])
            full_msg = f"{msg} | {extra_str}"
        else:
            full_msg = msg

        log_method = getattr(self.logger, level)
        log_method(full_msg, extra=extra)

    def set_level(self, level):
        """Set the logging level of the underlying logger."""
        self.logger.setLevel(level)

    def info(self, msg, **kwargs):
        """Log at INFO level with formatted extra."""
        self._log_with_formatted_extra("info", msg, **kwargs)

    def error(self, msg, **kwargs):
        """Log at ERROR level with formatted extra."""
        self._log_with_formatted_extra("error", msg, **kwargs)

    def warning(self, msg, **kwargs):
        """Log at WARNING level with formatted extra."""
        self._log_with_formatted_extra("warning", msg, **kwargs)

    def debug(self, msg, **kwargs):
        """Log at DEBUG level with formatted extra."""
        self._log_with_formatted_extra("debug", msg, **kwargs)

    def exception(self, msg, **kwargs):
        """Log exception with formatted extra."""
        self._log_with_formatted_extra("exception", msg, **kwargs)


class CorrelationIdFilter(logging.Filter):
    """Logging filter that adds the current correlation ID to log records."""

    def filter(self, record):
        # Lazy import to avoid circular dependency
        from ..exceptions import get_correlation_id

        correlation_id = get_correlation_id()
        if correlation_id and not hasattr(record, "correlation_id"):
            record.correlation_id = correlation_id

        return True


def _resolve_level(log_level: Union[int, str]) -> int:
    if isinstance(log_level, str):
        return getattr(logging, log_level.upper(), logging.INFO)
    return log_level


def configure_logging(
    component_name: Optional[str] = None,
    log_level: Optional[Union[int, str]] = None,
    stream=None,
) -> ContextAwareLogger:
    """
    Configure console logging for the package.

    Args:
        component_name: Optional child logger name (e.g. the host process name)
        log_level: Logging level (default: from config.logging.level)
        stream: Output stream (default: stdout)

    Returns:
        The configured logger wrapped with ContextAwareLogger
    """
    global _package_logger

    app_config = get_config()
    if log_level is None:
        log_level = app_config.logging.level
    log_level = _resolve_level(log_level)

    logger_name = PACKAGE_LOGGER_NAME
    if component_name:
        logger_name = f"{PACKAGE_LOGGER_NAME}.{component_name}"
    logger = logging.getLogger(logger_name)
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(app_config.logging.format))
    console_handler.addFilter(CorrelationIdFilter())
    logger.addHandler(console_handler)

    wrapped_logger = ContextAwareLogger(logger)
    wrapped_logger.debug(
        "Logger configured",
        extra={"logger_name": logger_name, "log_level": logging.getLevelName(log_level)},
    )
    _package_logger = wrapped_logger
    return wrapped_logger


def get_logger(log_level: Optional[Union[int, str]] = None) -> ContextAwareLogger:
    """
    Get the package logger.

    Args:
        log_level: Optional log level to set

    Returns:
        ContextAwareLogger instance
    """
    if _package_logger is not None:
        if log_level is not None:
            _package_logger.set_level(_resolve_level(log_level))
        return _package_logger

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    if log_level is None:
        log_level = get_config().logging.level
    logger.setLevel(_resolve_level(log_level))

    return ContextAwareLogger(logger)


def reset_logging() -> None:
    """Forget the configured package logger."""
    global _package_logger
    _package_logger = None
