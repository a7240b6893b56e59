"""
Structured logging utility for the CollegeHub client.

Provides JSON-formatted logging with credential masking (emails, bearer
tokens), context injection, and operation timing.
"""

import json
import logging
import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Type
from functools import wraps


def mask_email(email: Optional[str]) -> str:
    """
    Mask an email address to preserve privacy in logs.

    Keeps the first character of the local part and the full domain.

    Args:
        email: Email address such as "jane@example.com"

    Returns:
        Masked email string

    Example:
        >>> mask_email("jane@example.com")
        "j***@example.com"
    """
    if not email:
        return "unknown"

    if "@" not in email:
        return "invalid"

    local, domain = email.split("@", 1)
    if not local or not domain:
        return "invalid"

    return f"{local[0]}***@{domain}"


def mask_token(token: Optional[str]) -> str:
    """
    Mask a bearer token, keeping only the last 4 characters.

    Example:
        >>> mask_token("eyJhbGciOiJIUzI1NiJ9.abc.wxyz")
        "***wxyz"
    """
    if not token:
        return "none"

    if len(token) <= 8:
        return "***"

    return f"***{token[-4:]}"


class StructuredLogger:
    """
    JSON-formatted logger with context injection and operation timing.

    Every record is a single JSON object so client logs stay machine-parseable.
    """

    def __init__(self, name: str):
        """
        Initialize structured logger.

        Args:
            name: Logger name (typically __name__ from calling module)
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(os.getenv("COLLEGEHUB_LOG_LEVEL", "WARNING").upper())

            formatter = logging.Formatter("%(message)s", datefmt="%Y-%m-%dT%H:%M:%S")
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def _format_log(
        self,
        level: str,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
        error: Optional[str] = None,
    ) -> str:
        """
        Format log entry as JSON.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            message: Human-readable message
            operation: Operation name (e.g., "login", "get_colleges")
            context: Context dict with college_id, booking_id, etc.
            duration_ms: Operation duration in milliseconds
            error: Error message if applicable

        Returns:
            JSON-formatted log string
        """
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "message": message,
        }

        if operation:
            log_entry["operation"] = operation

        if context:
            log_entry["context"] = context

        if duration_ms is not None:
            log_entry["duration_ms"] = round(duration_ms, 2)

        if error:
            log_entry["error"] = error

        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def debug(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Log debug message."""
        self.logger.debug(self._format_log("DEBUG", message, operation, context))

    def info(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
    ):
        """Log info message."""
        self.logger.info(self._format_log("INFO", message, operation, context, duration_ms))

    def warning(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ):
        """Log warning message."""
        self.logger.warning(
            self._format_log("WARNING", message, operation, context, error=error)
        )

    def error(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        duration_ms: Optional[float] = None,
    ):
        """Log error message."""
        self.logger.error(
            self._format_log("ERROR", message, operation, context, duration_ms, error)
        )


def log_operation(operation_name: str, expected: Tuple[Type[BaseException], ...] = ()):
    """
    Decorator to log operation start, duration, and completion.

    Args:
        operation_name: Name recorded in the "operation" field
        expected: Exception types that are an ordinary outcome (for example a
            rejected login); they are logged at INFO instead of ERROR

    Usage:
        @log_operation("create_booking", expected=(APIError,))
        def create(self, payload):
            ...
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = StructuredLogger(func.__module__)

            context: Dict[str, Any] = {"function": func.__name__}
            if len(args) > 0:
                context["arg_count"] = len(args)
            if "email" in kwargs:
                context["email_masked"] = mask_email(kwargs["email"])

            logger.debug(f"Starting {operation_name}", operation=operation_name, context=context)

            start_time = time.time()
            try:
                result = func(*args, **kwargs)
                duration_ms = (time.time() - start_time) * 1000
                logger.info(
                    f"Completed {operation_name}",
                    operation=operation_name,
                    context=context,
                    duration_ms=duration_ms,
                )
                return result
            except expected as e:
                duration_ms = (time.time() - start_time) * 1000
                logger.info(
                    f"Rejected {operation_name}",
                    operation=operation_name,
                    context={**context, "error": str(e)},
                    duration_ms=duration_ms,
                )
                raise
            except Exception as e:
                duration_ms = (time.time() - start_time) * 1000
                logger.error(
                    f"Failed {operation_name}",
                    operation=operation_name,
                    context=context,
                    error=str(e),
                    duration_ms=duration_ms,
                )
                raise

        return wrapper

    return decorator


def get_logger(name: str) -> StructuredLogger:
    """
    Factory function to get a structured logger instance.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name)
