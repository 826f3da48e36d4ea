"""
Structured logging for the unsubscribe pipeline.

Every component logs JSON records carrying its name, a persistent context
and optional extra fields. Unsubscribe URLs routinely embed per-recipient
tokens, so messages and context are scrubbed before they are emitted.
"""

import logging
import json
import time
import re
from typing import Dict, Any, Optional
from contextlib import contextmanager
from datetime import datetime, timezone

LOGGER_ROOT = "unsubscriber"


class SensitiveDataFilter:
    """Mask tokens and credentials in log payloads."""

    SENSITIVE_KEYS = {'password', 'token', 'api_key', 'secret', 'email_address'}

    def __init__(self):
        self.sensitive_patterns = [
            (re.compile(r'\b(token|t|uid|u|id|key|sig|hash)=([^&\s"]+)', re.IGNORECASE), r'\1=***'),
            (re.compile(r'password["\']?\s*[:=]\s*["\']?([^"\'\s&]+)', re.IGNORECASE), 'password=***'),
            (re.compile(r'secret["\']?\s*[:=]\s*["\']?([^"\'\s&]+)', re.IGNORECASE), 'secret=***'),
        ]

    def filter_message(self, message: str) -> str:
        filtered = message
        for pattern, replacement in self.sensitive_patterns:
            filtered = pattern.sub(replacement, filtered)
        return filtered

    def filter_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self.filter_message(value)
        if isinstance(value, dict):
            return self.filter_dict(value)
        if isinstance(value, (list, tuple)):
            return [self.filter_value(item) for item in value]
        return value

    def filter_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        filtered = {}
        for key, value in data.items():
            if key.lower() in self.SENSITIVE_KEYS:
                filtered[key] = '***'
            else:
                filtered[key] = self.filter_value(value)
        return filtered


class UnsubscribeLogger:
    """Component logger emitting JSON records with context."""

    def __init__(self, component: str):
        self.component = component
        self.logger = logging.getLogger(f"{LOGGER_ROOT}.{component}")
        self.context: Dict[str, Any] = {}
        self.filter = SensitiveDataFilter()

    def add_context(self, key: str, value: Any) -> None:
        self.context[key] = value

    def _prepare_log_data(self, message: str, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'component': self.component,
            'message': self.filter.filter_message(message),
            'context': self.filter.filter_dict(self.context.copy())
        }
        if extra:
            log_data['extra'] = self.filter.filter_dict(extra)
        return log_data

    def _emit(self, level: int, message: str, extra: Optional[Dict[str, Any]] = None):
        log_method = {
            logging.DEBUG: self.logger.debug,
            logging.INFO: self.logger.info,
            logging.WARNING: self.logger.warning,
            logging.ERROR: self.logger.error,
        }[level]
        log_method(json.dumps(self._prepare_log_data(message, extra), default=str))

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit(logging.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit(logging.WARNING, message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit(logging.ERROR, message, extra)

    @contextmanager
    def time_operation(self, operation_name: str):
        """Log the duration of the wrapped block, re-raising any error."""
        start_time = time.time()
        self.debug(f"Starting {operation_name}", {"operation": operation_name})
        try:
            yield
        except Exception as e:
            self.error(f"Operation {operation_name} failed", {
                "operation": operation_name,
                "duration_seconds": round(time.time() - start_time, 3),
                "error": str(e)
            })
            raise
        self.info(f"Operation {operation_name} completed", {
            "operation": operation_name,
            "duration_seconds": round(time.time() - start_time, 3)
        })

    def log_exception(self, exception: Exception, extra: Optional[Dict[str, Any]] = None):
        """Log an exception with its type, message and traceback."""
        log_data = self._prepare_log_data(f"Exception occurred: {exception}", extra)
        log_data['exception'] = {
            'type': type(exception).__name__,
            'message': self.filter.filter_message(str(exception))
        }
        context = getattr(exception, 'context', None)
        if context:
            log_data['exception']['context'] = self.filter.filter_dict(context)
        self.logger.error(json.dumps(log_data, default=str), exc_info=True)

    @contextmanager
    def scoped_context(self, context: Dict[str, Any]):
        """Add context for the duration of the block only."""
        original_context = self.context.copy()
        self.context.update(context)
        try:
            yield
        finally:
            self.context = original_context


def configure_unsubscribe_logging(
    level: str = "INFO",
    format: str = "json",
    output: str = "console",
    filename: Optional[str] = None
) -> logging.Logger:
    """Attach handlers to the package logger and return it."""
    logger = logging.getLogger(LOGGER_ROOT)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    if format == "json":
        formatter = logging.Formatter('%(message)s')
    else:
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    if output in ("console", "both"):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if output in ("file", "both") and filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
