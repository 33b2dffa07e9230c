"""Log formatters for JSON and console output."""

import json
import logging
import re
import sys
from datetime import UTC, datetime
from typing import Any, Iterable, Optional

from client_auth.logging.context import get_log_context
from client_auth.utils.json_serializers import json_serializer

REDACTED = "[REDACTED]"


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter with context injection.

    Produces one JSON object per line for easy parsing with jq/grep.
    Values of fields named like credentials are replaced with [REDACTED],
    and credentials in URL query strings are masked.
    """

    # Fields to extract from LogRecord extras
    EXTRA_FIELDS = [
        # Descriptor
        "auth_type",
        "fields",
        "sasl_mechanism",
        # Volumes and mounts
        "volume_name",
        "secret_name",
        "mount_path",
        "volume_count",
        "mount_count",
        "env_var_count",
        # Token provider
        "scope",
        "resource",
        "endpoint_count",
        "callback_type",
        "timeout_seconds",
        "expires_at_ms",
        "duration_ms",
        "token_endpoint_uri",
        # Errors
        "error",
        "error_type",
        "error_category",
        "error_message",
        # Config
        "is_openshift",
    ]

    NUMERIC_FIELDS = {
        "duration_ms": float,
        "timeout_seconds": float,
        "expires_at_ms": int,
        "endpoint_count": int,
        "volume_count": int,
        "mount_count": int,
        "env_var_count": int,
    }

    URL_FIELDS = ["scope", "resource", "token_endpoint_uri"]

    SENSITIVE_PARAMS_PATTERN = re.compile(
        r"([?&])([^=&]*(?:sig|token|key|secret|password|auth)[^=&]*)=[^&]*",
        re.IGNORECASE,
    )

    # access_token, client_secret, password, ... but not secret_name
    SENSITIVE_FIELD_PATTERN = re.compile(
        r"(^|_)(token|secret|password|credential)$", re.IGNORECASE
    )

    def __init__(self, *args, extra_fields: Optional[Iterable[str]] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._extra_fields = list(self.EXTRA_FIELDS)
        for name in extra_fields or ():
            if name not in self._extra_fields:
                self._extra_fields.append(name)

    def _sanitize_url(self, url: str) -> str:
        return self.SENSITIVE_PARAMS_PATTERN.sub(r"\1\2=[REDACTED]", url)

    def _sanitize_value(self, key: str, value: Any) -> Any:
        if self.SENSITIVE_FIELD_PATTERN.search(key):
            return REDACTED
        if key in self.URL_FIELDS and isinstance(value, str):
            return self._sanitize_url(value)
        return value

    def _ensure_type(self, field: str, value: Any) -> Any:
        if field not in self.NUMERIC_FIELDS or value is None:
            return value
        try:
            return self.NUMERIC_FIELDS[field](value)
        except (ValueError, TypeError):
            return None

    @staticmethod
    def _base_log_entry(record: logging.LogRecord) -> dict[str, Any]:
        return {
            "ts": datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

    @staticmethod
    def _inject_context(log_entry: dict[str, Any], log_context: dict[str, Any]) -> None:
        for field, value in log_context.items():
            if value:
                log_entry[field] = value

    @staticmethod
    def _should_include_source_location(record: logging.LogRecord) -> bool:
        return record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL)

    def _inject_extra_fields(self, log_entry: dict[str, Any], record: logging.LogRecord) -> None:
        for field in self._extra_fields:
            value = getattr(record, field, None)
            if value is not None:
                typed_value = self._ensure_type(field, value)
                log_entry[field] = self._sanitize_value(field, typed_value)

    def _inject_exception(self, log_entry: dict[str, Any], record: logging.LogRecord) -> None:
        if not record.exc_info:
            return

        exc_type, exc_value, _ = record.exc_info
        log_entry["exception"] = {
            "type": exc_type.__name__ if exc_type else None,
            "message": str(exc_value) if exc_value else None,
            "stacktrace": self.formatException(record.exc_info),
        }

    def format(self, record: logging.LogRecord) -> str:
        log_entry = self._base_log_entry(record)
        self._inject_context(log_entry, get_log_context())

        if self._should_include_source_location(record):
            log_entry["file"] = f"{record.filename}:{record.lineno}"

        # Explicit extras win over ambient context
        self._inject_extra_fields(log_entry, record)
        self._inject_exception(log_entry, record)

        return json.dumps(log_entry, default=json_serializer, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter with color-coded log levels.

    Colors are auto-disabled when output is not a TTY (pipes, files).
    """

    COLORS = {
        logging.DEBUG: "\033[36m",  # Cyan
        logging.INFO: "\033[32m",  # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",  # Red
        logging.CRITICAL: "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._use_colors = sys.stdout.isatty()

    def _format_level_name(self, record: logging.LogRecord) -> str:
        level_name = record.levelname
        if not self._use_colors:
            return level_name

        color = self.COLORS.get(record.levelno, "")
        if not color:
            return level_name

        return f"{color}{level_name}{self.RESET}"

    @staticmethod
    def _build_prefix(level_name: str, log_context: dict[str, Any]) -> str:
        parts = [
            datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            level_name,
        ]

        if log_context["component"]:
            parts.append(f"[{log_context['component']}]")
        if log_context["resource_name"]:
            parts.append(f"[{log_context['resource_name']}]")

        return " - ".join(parts)

    @staticmethod
    def _build_tags(record: logging.LogRecord, log_context: dict[str, Any]) -> list[str]:
        auth_type = getattr(record, "auth_type", None) or log_context.get("auth_type")
        scope = getattr(record, "scope", None)

        tags = []
        if auth_type:
            tags.append(f"[auth:{auth_type}]")
        if scope:
            tags.append(f"[scope:{scope}]")
        return tags

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console output with optional color coding."""
        log_context = get_log_context()

        level_name = self._format_level_name(record)
        prefix = self._build_prefix(level_name, log_context)
        tags = self._build_tags(record, log_context)

        if tags:
            return f"{prefix} - {' '.join(tags)} {record.getMessage()}"

        return f"{prefix} - {record.getMessage()}"
