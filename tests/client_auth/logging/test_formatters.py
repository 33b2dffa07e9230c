"""Tests for JSON and console log formatters."""

import json
import logging
import sys

from client_auth.logging.context import set_log_context
from client_auth.logging.formatters import ConsoleFormatter, JSONFormatter
from client_auth.types import ErrorCategory


def _make_record(
    msg="test message",
    level=logging.INFO,
    name="test.logger",
    exc_info=None,
    **extras,
):
    record = logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extras.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_formats_basic_json_with_required_fields(self):
        output = json.loads(JSONFormatter().format(_make_record()))

        assert output["level"] == "INFO"
        assert output["logger"] == "test.logger"
        assert output["message"] == "test message"
        assert output["ts"].endswith("Z")

    def test_includes_context(self):
        set_log_context(component="kafka-bridge", resource_name="my-bridge")

        output = json.loads(JSONFormatter().format(_make_record()))

        assert output["component"] == "kafka-bridge"
        assert output["resource_name"] == "my-bridge"
        assert "auth_type" not in output

    def test_extra_overrides_context(self):
        set_log_context(auth_type="tls")

        output = json.loads(JSONFormatter().format(_make_record(auth_type="oauth")))

        assert output["auth_type"] == "oauth"

    def test_includes_whitelisted_extras_only(self):
        record = _make_record(scope="https://broker1:9093", unrelated="x")

        output = json.loads(JSONFormatter().format(record))

        assert output["scope"] == "https://broker1:9093"
        assert "unrelated" not in output

    def test_numeric_fields_are_typed(self):
        record = _make_record(endpoint_count="2", duration_ms="1.5", expires_at_ms="bad")

        output = json.loads(JSONFormatter().format(record))

        assert output["endpoint_count"] == 2
        assert output["duration_ms"] == 1.5
        assert output["expires_at_ms"] is None

    def test_sensitive_extra_fields_are_redacted(self):
        formatter = JSONFormatter(extra_fields=["access_token", "client_secret", "secret_name"])
        record = _make_record(access_token="abc", client_secret="def", secret_name="my-secret")

        output = json.loads(formatter.format(record))

        assert output["access_token"] == "[REDACTED]"
        assert output["client_secret"] == "[REDACTED]"
        assert output["secret_name"] == "my-secret"

    def test_url_query_credentials_are_masked(self):
        record = _make_record(token_endpoint_uri="https://idp/token?client_secret=abc&x=1")

        output = json.loads(JSONFormatter().format(record))

        assert "abc" not in output["token_endpoint_uri"]
        assert "x=1" in output["token_endpoint_uri"]

    def test_serializes_enums_and_lists(self):
        record = _make_record(error_category=ErrorCategory.AUTH, fields=["clientId"])

        output = json.loads(JSONFormatter().format(record))

        assert output["error_category"] == "auth"
        assert output["fields"] == ["clientId"]

    def test_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _make_record(level=logging.ERROR, exc_info=sys.exc_info())

        output = json.loads(JSONFormatter().format(record))

        assert output["exception"]["type"] == "ValueError"
        assert output["exception"]["message"] == "boom"
        assert output["file"] == "test.py:42"


class TestConsoleFormatter:

    def test_plain_output_without_tty(self):
        formatter = ConsoleFormatter()
        formatter._use_colors = False

        output = formatter.format(_make_record(level=logging.WARNING))

        assert " - WARNING - test message" in output

    def test_includes_context_and_tags(self):
        set_log_context(component="connect", resource_name="my-connect")
        formatter = ConsoleFormatter()
        formatter._use_colors = False

        output = formatter.format(_make_record(auth_type="oauth", scope="https://b:9093"))

        assert "[connect]" in output
        assert "[my-connect]" in output
        assert "[auth:oauth] [scope:https://b:9093] test message" in output

    def test_colors_level_name(self):
        formatter = ConsoleFormatter()
        formatter._use_colors = True

        output = formatter.format(_make_record(level=logging.ERROR))

        assert "\033[31mERROR\033[0m" in output
