import logging
import os
import re
import sys
from typing import Optional


class ControlCharacterFilter(logging.Filter):
    """Filter to neutralise control characters smuggled in through file and folder names."""

    PATTERN = re.compile(r'[\x00-\x08\x0b-\x1f\x7f]')
    NEWLINES = re.compile(r'[\r\n]+')

    def filter(self, record: logging.LogRecord) -> bool:
        """Escape control characters in the log message and its arguments."""
        if isinstance(record.msg, str):
            record.msg = self._clean(record.msg)

        if hasattr(record, 'args') and record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._clean_value(v) for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(self._clean_value(arg) for arg in record.args)

        return True

    def _clean(self, text: str) -> str:
        text = self.NEWLINES.sub(' ', text)
        return self.PATTERN.sub(lambda m: f'\\x{ord(m.group()):02x}', text)

    def _clean_value(self, value):
        """Clean string arguments, leave everything else untouched."""
        if isinstance(value, str):
            return self._clean(value)
        return value


def _build_formatter(correlation_id: Optional[str] = None) -> logging.Formatter:
    if correlation_id:
        fmt = f'%(asctime)s - %(name)s - %(levelname)s - [{correlation_id}] - %(message)s'
    else:
        fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    return logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S')


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
    correlation_id: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging configuration for a component.

    The component logger is the parent of every module logger in the
    package, so calling this once at process start is enough.

    Args:
        component_name: Name of the component (e.g., 'docserver', 'cli')
        log_level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env var or INFO
        correlation_id: Optional correlation ID to include in log format

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO')

    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(component_name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(_build_formatter(correlation_id))
    handler.addFilter(ControlCharacterFilter())

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
