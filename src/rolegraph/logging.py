"""Centralized logging utilities for rolegraph.

This module provides:
- Logging configuration from RoleGraphConfig
- Safe preview utilities for long values (role/permission name lists)
- Structured logging with subject_id propagation
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from .config import LogLevel, RoleGraphConfig

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", "subject_id",
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a single-line, length-bounded preview of a value for logging.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list, tuple)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


class RoleGraphFormatter(logging.Formatter):
    """Formatter that includes subject_id and optionally emits JSON.

    Extra fields passed through ``extra=`` are rendered with :func:`safe_preview`.
    """

    def __init__(
        self,
        include_subject_id: bool = True,
        json_format: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.include_subject_id = include_subject_id
        self.json_format = json_format

    def _payload(self, record: logging.LogRecord) -> tuple[dict[str, Any], dict[str, str]]:
        """Split a record into fixed fields and previews of its ``extra`` fields."""
        fields: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        subject_id = getattr(record, "subject_id", None)
        if self.include_subject_id and subject_id is not None:
            fields["subject_id"] = str(subject_id)
        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)

        extra = {
            key: safe_preview(value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
        }
        return fields, extra

    def format(self, record: logging.LogRecord) -> str:
        fields, extra = self._payload(record)
        if self.json_format:
            return json.dumps({**extra, **fields}, default=str, ensure_ascii=False)

        head = f"[{fields['timestamp']}] {fields['level']} {fields['logger']}"
        context = [f"{key}={value}" for key, value in extra.items()]
        if "subject_id" in fields:
            context.insert(0, f"subject_id={fields['subject_id']}")
        line = " ".join([head, *context]) + f": {fields['message']}"
        if "exception" in fields:
            line += "\n" + fields["exception"]
        return line


class SubjectLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that stamps subject_id on every record.

    Usage:
        logger = get_subject_logger(__name__, subject_id=user.id)
        logger.info("Attached role %s", role_id)
    """

    def __init__(self, logger: logging.Logger, subject_id: Optional[Any] = None):
        super().__init__(logger, {})
        self.subject_id = subject_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        subject_id = kwargs.pop("subject_id", self.subject_id)
        extra = kwargs.get("extra", {})
        if subject_id is not None:
            extra["subject_id"] = subject_id
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(
    config: Optional[RoleGraphConfig] = None,
    json_format: Optional[bool] = None,
) -> None:
    """Configure the root logger from RoleGraphConfig.

    Args:
        config: RoleGraphConfig instance (if None, loads from environment)
        json_format: Override ``config.log_json``
    """
    if config is None:
        from .config import load_config_from_env

        config = load_config_from_env()

    log_level = getattr(logging, LogLevel(config.log_level).value, logging.INFO)
    use_json = config.log_json if json_format is None else json_format

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(RoleGraphFormatter(include_subject_id=True, json_format=use_json))
    root_logger.addHandler(console_handler)


def get_subject_logger(name: str, subject_id: Optional[Any] = None) -> SubjectLoggerAdapter:
    """Get a logger adapter bound to a subject.

    Args:
        name: Logger name (typically __name__)
        subject_id: Identity of the subject whose roles are being read or changed

    Returns:
        SubjectLoggerAdapter instance
    """
    return SubjectLoggerAdapter(logging.getLogger(name), subject_id=subject_id)


__all__ = [
    "safe_preview",
    "RoleGraphFormatter",
    "SubjectLoggerAdapter",
    "setup_logging",
    "get_subject_logger",
]
