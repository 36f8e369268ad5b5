"""
Structured logging configuration

Provides consistent logging across the service with:
- Structured JSON logging for production
- Human-readable logs for development
- Correlation ids for requests, campaigns, variants and export jobs
- Redaction of credentials passed through ``extra``
- Operation timing
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, UTC
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

SENSITIVE_KEY_TOKENS = (
    "password",
    "secret",
    "token",
    "api_key",
    "apikey",
    "authorization",
    "credential",
)

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
campaign_var: ContextVar[Optional[str]] = ContextVar("campaign", default=None)
variant_var: ContextVar[Optional[int]] = ContextVar("variant", default=None)
job_id_var: ContextVar[Optional[str]] = ContextVar("job_id", default=None)

_STANDARD_RECORD_ATTRS = frozenset({
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "getMessage",
    "message",
    "taskName",
})


def _correlation_fields() -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    request_id = request_id_var.get()
    if request_id:
        fields["request_id"] = request_id
    campaign = campaign_var.get()
    if campaign:
        fields["campaign"] = campaign
    variant = variant_var.get()
    if variant is not None:
        fields["variant"] = variant
    job_id = job_id_var.get()
    if job_id:
        fields["job_id"] = job_id
    return fields


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging in production"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        log_data.update(_correlation_fields())

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        extra: Dict[str, Any] = {}
        extra_data = getattr(record, "extra_data", None)
        if isinstance(extra_data, dict):
            extra.update(extra_data)

        for key, value in vars(record).items():
            if key in _STANDARD_RECORD_ATTRS or key.startswith("_") or key == "extra_data":
                continue
            if key in log_data or callable(value):
                continue
            extra.setdefault(key, value)

        if extra:
            log_data["extra"] = _sanitize_for_logging("extra", extra)

        return json.dumps(log_data, default=str)


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(token in lowered for token in SENSITIVE_KEY_TOKENS)


def _sanitize_for_logging(key: str, value: Any) -> Any:
    if isinstance(value, dict):
        sanitized: Dict[str, Any] = {}
        for child_key, child_value in value.items():
            if _is_sensitive_key(str(child_key)):
                sanitized[child_key] = "***REDACTED***"
            else:
                sanitized[child_key] = _sanitize_for_logging(str(child_key), child_value)
        return sanitized

    if isinstance(value, (list, tuple)):
        return [_sanitize_for_logging(key, item) for item in value]

    if isinstance(value, str) and _is_sensitive_key(key):
        return "***REDACTED***"

    return value


class DevelopmentFormatter(logging.Formatter):
    """Human-readable formatter for development"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]

        context_parts = []
        request_id = request_id_var.get()
        if request_id:
            context_parts.append(f"req:{request_id[:8]}")
        campaign = campaign_var.get()
        if campaign:
            context_parts.append(f"campaign:{campaign}")
        variant = variant_var.get()
        if variant is not None:
            context_parts.append(f"variant:{variant}")
        job_id = job_id_var.get()
        if job_id:
            context_parts.append(f"job:{job_id}")

        context = f" [{', '.join(context_parts)}]" if context_parts else ""

        log_line = (
            f"{color}{timestamp}{reset} "
            f"{color}{record.levelname:8s}{reset} "
            f"{record.name:30s}{context} "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            log_line += "\n" + self.formatException(record.exc_info)

        return log_line


class LoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that merges bound context and correlation ids into ``extra``"""

    def process(self, msg: str, kwargs: Any) -> tuple:
        extra = dict(kwargs.get("extra") or {})
        for key, value in _correlation_fields().items():
            extra.setdefault(key, value)
        if self.extra:
            for key, value in self.extra.items():
                extra.setdefault(key, value)
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    use_json: bool = False,
) -> None:
    """
    Configure application logging

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path; file logs are always JSON
        use_json: If True, console output is structured JSON
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(StructuredFormatter() if use_json else DevelopmentFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=int(os.getenv("LOG_MAX_BYTES", str(20 * 1024 * 1024))),
            backupCount=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    for noisy in ("httpx", "httpcore", "asyncio", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str, **extra: Any) -> LoggerAdapter:
    """
    Get a logger bound to optional extra context

    Example:
        logger = get_logger(__name__, component="merge")
        logger.info("Merging", extra={"video": "a.mp4"})
    """
    return LoggerAdapter(logging.getLogger(name), extra)


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def set_campaign_context(campaign: Optional[str], variant: Optional[int] = None) -> None:
    """Tag subsequent log lines with the running campaign and variant index"""
    campaign_var.set(campaign)
    variant_var.set(variant)


def set_job_id(job_id: Optional[str]) -> None:
    job_id_var.set(job_id)


def clear_context() -> None:
    """Clear every correlation id"""
    request_id_var.set(None)
    campaign_var.set(None)
    variant_var.set(None)
    job_id_var.set(None)


class LogTimer:
    """Context manager for timing operations with automatic logging"""

    def __init__(self, logger: logging.LoggerAdapter, operation: str, level: int = logging.INFO):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time: Optional[float] = None
        self.duration: Optional[float] = None

    def __enter__(self) -> "LogTimer":
        self.start_time = datetime.now().timestamp()
        self.logger.log(self.level, f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb) -> None:
        self.duration = datetime.now().timestamp() - self.start_time

        if exc_type:
            self.logger.error(
                f"Failed: {self.operation}",
                extra={"duration_seconds": round(self.duration, 3), "error": str(exc_val)},
            )
        else:
            self.logger.log(
                self.level,
                f"Completed: {self.operation}",
                extra={"duration_seconds": round(self.duration, 3)},
            )
