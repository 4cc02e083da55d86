"""Tests for policycore.logging module."""

from __future__ import annotations

import json
import logging
import os
from unittest.mock import patch

import pytest

from policycore import (
    LogLevel,
    SharedConfig,
    get_access_logger,
    redact_secrets,
    safe_log_value,
    safe_preview,
    setup_logging,
)
from policycore.logging import AccessLoggerAdapter, PolicyLogFormatter


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("policycore").setLevel(logging.NOTSET)


def _record(msg: str = "Test message", **attrs) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


class TestSafePreview:
    """Tests for safe_preview function."""

    def test_none_value(self) -> None:
        assert safe_preview(None) == ""

    def test_string_with_whitespace(self) -> None:
        assert safe_preview("hello\n\tworld  test") == "hello world test"

    def test_truncation(self) -> None:
        result = safe_preview("a" * 300, limit=100)
        assert len(result) == 100
        assert result.endswith("…")

    def test_context_rendered_as_json(self) -> None:
        result = safe_preview({"department": "engineering", "level": 3})
        assert json.loads(result) == {"department": "engineering", "level": 3}


class TestRedactSecrets:
    """Tests for redact_secrets function."""

    def test_password_pattern(self) -> None:
        result = redact_secrets('password: "secret123"')
        assert "[REDACTED]" in result
        assert "secret123" not in result

    def test_bearer_token(self) -> None:
        assert "[REDACTED]" in redact_secrets("Authorization: Bearer abc123def456")

    def test_no_secrets(self) -> None:
        text = "Allowed read on document/report"
        assert redact_secrets(text) == text

    def test_custom_replacement(self) -> None:
        assert "[HIDDEN]" in redact_secrets("password: secret123", replacement="[HIDDEN]")

    def test_non_string_passthrough(self) -> None:
        assert redact_secrets(42) == 42  # type: ignore[arg-type]


class TestSafeLogValue:
    """Tests for safe_log_value function."""

    def test_with_redaction(self) -> None:
        assert "[REDACTED]" in safe_log_value("api_key: sk-1234567890")

    def test_without_redaction(self) -> None:
        assert safe_log_value("api_key: sk-1234567890", redact=False) == "api_key: sk-1234567890"

    def test_truncation(self) -> None:
        assert len(safe_log_value("a" * 500, limit=100)) <= 100


class TestPolicyLogFormatter:
    """Tests for PolicyLogFormatter."""

    def test_json_format(self) -> None:
        formatter = PolicyLogFormatter(json_format=True)
        data = json.loads(formatter.format(_record(user_id="alice", policy_id="editor")))
        assert data["level"] == "INFO"
        assert data["message"] == "Test message"
        assert data["user_id"] == "alice"
        assert data["policy_id"] == "editor"

    def test_plain_format(self) -> None:
        formatter = PolicyLogFormatter(json_format=False)
        result = formatter.format(_record(user_id="alice"))
        assert "INFO" in result
        assert "user_id=alice" in result
        assert result.endswith(": Test message")
        assert "policy_id" not in result

    def test_extra_fields_included(self) -> None:
        formatter = PolicyLogFormatter(json_format=True)
        data = json.loads(formatter.format(_record(action="read")))
        assert data["action"] == "read"

    def test_message_redacted(self) -> None:
        formatter = PolicyLogFormatter(json_format=True)
        data = json.loads(formatter.format(_record("login with password: hunter2")))
        assert "hunter2" not in data["message"]

    def test_redaction_can_be_disabled(self) -> None:
        formatter = PolicyLogFormatter(json_format=True, redact_secrets=False)
        data = json.loads(formatter.format(_record("login with password: hunter2")))
        assert "hunter2" in data["message"]


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_with_config(self) -> None:
        setup_logging(config=SharedConfig(log_level=LogLevel.DEBUG), json_format=False)
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("policycore").level == logging.DEBUG

    @patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}, clear=True)
    def test_setup_with_env(self) -> None:
        setup_logging(json_format=False)
        assert logging.getLogger().level == logging.WARNING

    def test_service_logger_level(self) -> None:
        setup_logging(config=SharedConfig(log_level="ERROR", service_name="authz-svc"))
        assert logging.getLogger("authz-svc").level == logging.ERROR

    def test_json_format(self, capsys: pytest.CaptureFixture) -> None:
        setup_logging(config=SharedConfig(log_level=LogLevel.INFO), json_format=True)
        logging.getLogger("test").info("Test message")

        data = json.loads(capsys.readouterr().err.strip())
        assert data["level"] == "INFO"
        assert data["message"] == "Test message"
        assert data["logger"] == "test"

    def test_json_from_config(self, capsys: pytest.CaptureFixture) -> None:
        setup_logging(config=SharedConfig(log_json=True))
        logging.getLogger("test").warning("from config")
        assert capsys.readouterr().err.strip().startswith("{")

    def test_plain_format(self, capsys: pytest.CaptureFixture) -> None:
        setup_logging(config=SharedConfig(log_level=LogLevel.INFO), json_format=False)
        logging.getLogger("test").info("Test message")

        output = capsys.readouterr().err.strip()
        assert "INFO" in output
        assert "Test message" in output
        assert not output.startswith("{")


class TestAccessLogger:
    """Tests for the identity-carrying logger adapter."""

    def test_identity_on_records(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_access_logger("test.access", user_id="alice", policy_id="editor")
        assert isinstance(logger, AccessLoggerAdapter)

        with caplog.at_level(logging.INFO, logger="test.access"):
            logger.info("Allowed read")

        record = caplog.records[-1]
        assert record.user_id == "alice"
        assert record.policy_id == "editor"

    def test_per_call_override(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_access_logger("test.access", user_id="alice")

        with caplog.at_level(logging.INFO, logger="test.access"):
            logger.info("Allowed read", policy_id="p-7", extra={"action": "read"})

        record = caplog.records[-1]
        assert record.user_id == "alice"
        assert record.policy_id == "p-7"
        assert record.action == "read"

    def test_without_identity(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_access_logger("test.access")

        with caplog.at_level(logging.INFO, logger="test.access"):
            logger.info("No identity")

        record = caplog.records[-1]
        assert not hasattr(record, "user_id")
        assert not hasattr(record, "policy_id")
