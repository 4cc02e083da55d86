"""Logging utilities for policycore.

This module provides:
- Root logger configuration driven by SharedConfig
- Bounded, single-line previews of request contexts
- Secret redaction for contexts and messages
- A formatter and adapter that carry user_id / policy_id on every record

Access decisions are logged by :class:`~policycore.access.AccessControl`
through :func:`get_access_logger`; the evaluation engine logs only at DEBUG
(plus a WARNING for unparseable validity dates).
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping, Optional

from .config import LogLevel, SharedConfig

# Patterns for secrets that can show up in request contexts or messages
SECRET_PATTERNS = [
    r'(?i)(?:password|passwd|pwd|secret|token|api[_-]?key|auth[_-]?token)\s*[:=]\s*["\']?([^"\'\s,}]+)',
    r'(?i)(?:bearer|basic)\s+([a-zA-Z0-9+/=]+)',
    r'(?i)(?:sk-|pk-)[a-zA-Z0-9]{32,}',
    r'[a-f0-9]{32,}',
]

_SECRET_RES = tuple(re.compile(p, re.IGNORECASE | re.DOTALL) for p in SECRET_PATTERNS)

IDENTITY_FIELDS = ("user_id", "policy_id")

# Everything a bare LogRecord carries; other attributes came in through extra=
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "taskName"}


def safe_preview(value: Any, limit: int = 240) -> str:
    """Render ``value`` on one line, at most ``limit`` characters long.

    Contexts (mappings) and sequences are rendered as JSON so condition
    attributes stay readable; ``None`` becomes an empty string. A cut
    preview ends with an ellipsis.
    """
    if value is None:
        return ""

    if isinstance(value, str):
        text = value
    elif isinstance(value, (Mapping, list, tuple)):
        try:
            text = json.dumps(dict(value) if isinstance(value, Mapping) else value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            text = str(value)
    else:
        text = str(value)

    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 1] + "…"


def redact_secrets(text: str, replacement: str = "[REDACTED]") -> str:
    """Replace passwords, tokens, API keys and long hex strings in ``text``.

    Non-string input is returned unchanged.
    """
    if not isinstance(text, str):
        return text
    for secret in _SECRET_RES:
        text = secret.sub(replacement, text)
    return text


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """Preview plus optional redaction. Use this for request contexts."""
    preview = safe_preview(value, limit=limit)
    return redact_secrets(preview) if redact else preview


class PolicyLogFormatter(logging.Formatter):
    """Formatter that emits JSON or plain text and includes identity fields.

    ``user_id`` and ``policy_id`` record attributes (set through
    :class:`AccessLoggerAdapter` or ``extra=``) become top-level fields.
    Other extra attributes only appear in JSON output, previewed through
    :func:`safe_log_value`.
    """

    def __init__(
        self,
        json_format: bool = True,
        redact_secrets: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.json_format = json_format
        self.redact_secrets = redact_secrets

    def _fields(self, record: logging.LogRecord) -> dict[str, Any]:
        message = record.getMessage()
        fields: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_secrets(message) if self.redact_secrets else message,
        }
        for name in IDENTITY_FIELDS:
            identity = getattr(record, name, None)
            if identity:
                fields[name] = str(identity)
        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in IDENTITY_FIELDS:
                fields[key] = safe_log_value(value, redact=self.redact_secrets)
        return fields

    def format(self, record: logging.LogRecord) -> str:
        fields = self._fields(record)
        if self.json_format:
            return json.dumps(fields, default=str, ensure_ascii=False)

        line = f"[{fields['timestamp']}] {fields['level']} {fields['logger']}"
        for name in IDENTITY_FIELDS:
            if name in fields:
                line += f" {name}={fields[name]}"
        line += f" : {fields['message']}"
        if "exception" in fields:
            line += "\n" + fields["exception"]
        return line


class AccessLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that stamps user_id and policy_id on records.

    Either can be overridden per call::

        logger = get_access_logger(__name__, user_id="u-1")
        logger.info("access granted", policy_id="p-7")
    """

    def __init__(
        self,
        logger: logging.Logger,
        user_id: Optional[str] = None,
        policy_id: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.user_id = user_id
        self.policy_id = policy_id

    def process(self, msg: str, kwargs: Any) -> tuple[str, Any]:
        identity = {
            "user_id": kwargs.pop("user_id", self.user_id),
            "policy_id": kwargs.pop("policy_id", self.policy_id),
        }
        extra = dict(kwargs.get("extra") or {})
        extra.update((name, value) for name, value in identity.items() if value)
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(
    config: Optional[SharedConfig] = None,
    json_format: Optional[bool] = None,
    redact_secrets: bool = True,
) -> None:
    """Configure the root logger from SharedConfig.

    Existing root handlers are replaced by one stderr handler using
    :class:`PolicyLogFormatter`. The ``policycore`` logger (and the
    ``service_name`` logger, when set) get the configured level too.

    Args:
        config: SharedConfig instance (if None, loads from environment)
        json_format: Force JSON (True) or plain text (False); default ``config.log_json``
        redact_secrets: Whether to redact secrets (default: True)
    """
    if config is None:
        from .config import load_shared_config_from_env

        config = load_shared_config_from_env()

    level = getattr(logging, LogLevel(config.log_level).value)
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        PolicyLogFormatter(
            json_format=config.log_json if json_format is None else json_format,
            redact_secrets=redact_secrets,
        )
    )

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in filter(None, ("policycore", config.service_name)):
        logging.getLogger(name).setLevel(level)


def get_access_logger(
    name: str,
    user_id: Optional[str] = None,
    policy_id: Optional[str] = None,
) -> AccessLoggerAdapter:
    """Get a logger adapter carrying user/policy identity.

    Args:
        name: Logger name (typically __name__)
        user_id: User whose request is being decided
        policy_id: Policy that decided it, if any
    """
    return AccessLoggerAdapter(logging.getLogger(name), user_id=user_id, policy_id=policy_id)


__all__ = [
    "IDENTITY_FIELDS",
    "SECRET_PATTERNS",
    "safe_preview",
    "redact_secrets",
    "safe_log_value",
    "PolicyLogFormatter",
    "AccessLoggerAdapter",
    "setup_logging",
    "get_access_logger",
]
