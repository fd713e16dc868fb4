"""Centralized logging utilities for aclcore.

This module provides:
- Logging configuration from AclConfig
- Safe preview utilities for logged values
- Secret redaction (store connection strings may carry credentials)
- Structured logging with automatic operation_id propagation
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional
from uuid import UUID

from .config import AclConfig, LogLevel


# Patterns for detecting secrets (common patterns to redact)
SECRET_PATTERNS = [
    r'(?i)(?:password|passwd|pwd|secret|token|key|api[_-]?key|auth[_-]?token)\s*[:=]\s*["\']?([^"\'\s]+)',
    r'(?i)(?:bearer|basic)\s+([a-zA-Z0-9+/=]+)',
    r'(?i)(?:[a-z][a-z0-9+.-]*://)[^/\s:@]+:([^/\s@]+)@',  # user:password@host in URLs
]

# LogRecord attributes that are never copied into structured output
_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName", "operation_id", "path",
}


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a safe, length-bounded preview of a value for logging.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A single-line, truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list, tuple, set, frozenset)):
        try:
            s = json.dumps(
                sorted(value) if isinstance(value, (set, frozenset)) else value,
                default=str,
                ensure_ascii=False,
            )
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    # Normalize whitespace
    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


def redact_secrets(text: str, replacement: str = "[REDACTED]") -> str:
    """Redact secret patterns from text.

    Args:
        text: The text to redact
        replacement: String to replace secrets with (default: "[REDACTED]")

    Returns:
        Text with secrets redacted
    """
    if not isinstance(text, str):
        return text

    result = text
    for pattern in SECRET_PATTERNS:
        result = re.sub(pattern, replacement, result, flags=re.IGNORECASE | re.DOTALL)

    return result


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """safe_preview() followed by optional redact_secrets()."""
    preview = safe_preview(value, limit=limit)
    if redact:
        preview = redact_secrets(preview)
    return preview


class AclLogFormatter(logging.Formatter):
    """Formatter that includes operation_id and path, as JSON or plain text."""

    def __init__(
        self,
        include_operation_id: bool = True,
        json_format: bool = True,
        redact_secrets: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.include_operation_id = include_operation_id
        self.json_format = json_format
        self.redact_secrets = redact_secrets

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record."""
        operation_id = getattr(record, "operation_id", None)
        path = getattr(record, "path", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_operation_id and operation_id:
            log_data["operation_id"] = str(operation_id) if isinstance(operation_id, UUID) else operation_id
        if path:
            log_data["path"] = path

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = safe_log_value(value, redact=self.redact_secrets)

        if self.redact_secrets:
            log_data["message"] = redact_secrets(log_data["message"])

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        if "operation_id" in log_data:
            parts.append(f"operation_id={log_data['operation_id']}")
        if path:
            parts.append(f"path={path}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class AclLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds operation_id (and optionally path) to records.

    Usage:
        logger = get_acl_logger(__name__, operation_id=op_id)
        logger.info("Resetting grants", path=dst)
    """

    def __init__(
        self,
        logger: logging.Logger,
        operation_id: Optional[UUID | str] = None,
    ):
        super().__init__(logger, {})
        self.operation_id = operation_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        operation_id = kwargs.pop("operation_id", self.operation_id)
        path = kwargs.pop("path", None)

        extra = kwargs.get("extra", {})
        if operation_id:
            extra["operation_id"] = operation_id
        if path:
            extra["path"] = path
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[AclConfig] = None,
    json_format: Optional[bool] = None,
    redact_secrets: bool = True,
) -> None:
    """Configure root logging for a process hosting aclcore.

    Args:
        config: AclConfig instance (if None, loads from environment)
        json_format: Force JSON on/off (default: config.log_json)
        redact_secrets: Whether to redact secrets (default: True)
    """
    if config is None:
        from .config import load_config_from_env
        config = load_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        AclLogFormatter(
            include_operation_id=True,
            json_format=config.log_json if json_format is None else json_format,
            redact_secrets=redact_secrets,
        )
    )
    root_logger.addHandler(console_handler)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(log_level)


def get_acl_logger(
    name: str,
    operation_id: Optional[UUID | str] = None,
) -> AclLoggerAdapter:
    """Get a logger adapter that stamps records with ``operation_id``.

    Example:
        logger = get_acl_logger(__name__, operation_id=uuid4())
        logger.info("Pruning obsolete grants", path="/tempZone/home/alice/tmp")
    """
    logger = logging.getLogger(name)
    return AclLoggerAdapter(logger, operation_id=operation_id)


__all__ = [
    "AclLogFormatter",
    "AclLoggerAdapter",
    "get_acl_logger",
    "redact_secrets",
    "safe_log_value",
    "safe_preview",
    "setup_logging",
]
