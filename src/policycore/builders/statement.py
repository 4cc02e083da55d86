"""Fluent construction of policy statements."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from ..exceptions import ValidationError
from ..models import Effect, Statement
from ..timestamps import parse_timestamp
from .types import ValidationResult


def _date_text(value: str | datetime) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def window_errors(start_date: Optional[str], end_date: Optional[str]) -> list[str]:
    """Check StartDate / EndDate strings: each must parse, start before end."""
    errors: list[str] = []

    start = end = None
    if start_date is not None:
        start = parse_timestamp(start_date)
        if start is None:
            errors.append("StartDate must be a valid ISO format date string")

    if end_date is not None:
        end = parse_timestamp(end_date)
        if end is None:
            errors.append("EndDate must be a valid ISO format date string")

    if start is not None and end is not None and start >= end:
        errors.append("StartDate must be before EndDate")

    return errors


class StatementBuilder:
    """Builds a validated :class:`~policycore.models.Statement`.

    Every setter overwrites what was set before and returns the builder.
    Dates are kept as given and only checked by :meth:`validate` /
    :meth:`build`.

    A builder is owned by one caller and is not thread-safe. ``build()``
    copies the current state into a frozen Statement, so the builder can be
    changed afterwards without touching statements already built.

    Example::

        statement = (
            StatementBuilder()
            .allow(["read", "write"])
            .on(["document/*"])
            .when({"department": "engineering"})
            .active_from("2025-01-01T00:00:00Z")
            .active_until("2025-12-31T23:59:59Z")
            .build()
        )
    """

    def __init__(self) -> None:
        self._effect: Optional[Effect] = None
        self._actions: list[str] = []
        self._resources: list[str] = []
        self._conditions: Optional[dict[str, Any]] = None
        self._start_date: Optional[str] = None
        self._end_date: Optional[str] = None

    def allow(self, actions: Iterable[str]) -> StatementBuilder:
        """Set the effect to Allow and replace the action list."""
        self._effect = Effect.ALLOW
        self._actions = list(actions)
        return self

    def deny(self, actions: Iterable[str]) -> StatementBuilder:
        """Set the effect to Deny and replace the action list."""
        self._effect = Effect.DENY
        self._actions = list(actions)
        return self

    def on(self, resources: Iterable[str]) -> StatementBuilder:
        """Replace the resource patterns."""
        self._resources = list(resources)
        return self

    def when(self, conditions: Mapping[str, Any]) -> StatementBuilder:
        """Replace the condition map."""
        self._conditions = dict(conditions)
        return self

    def active_from(self, start_date: str | datetime) -> StatementBuilder:
        """Set the inclusive ISO-8601 start of the validity window."""
        self._start_date = _date_text(start_date)
        return self

    def active_until(self, end_date: str | datetime) -> StatementBuilder:
        """Set the inclusive ISO-8601 end of the validity window."""
        self._end_date = _date_text(end_date)
        return self

    def validate(self) -> ValidationResult:
        """Check the current state and collect every violated rule."""
        errors: list[str] = []

        if self._effect is None:
            errors.append("Effect must be set using either allow() or deny()")

        if not self._actions:
            errors.append("At least one action must be specified")

        if not self._resources:
            errors.append("At least one resource must be specified using on()")

        if any(not isinstance(action, str) or not action for action in self._actions):
            errors.append("All actions must be non-empty strings")

        if any(not isinstance(resource, str) or not resource for resource in self._resources):
            errors.append("All resources must be non-empty strings")

        if self._conditions is not None and any(
            not isinstance(key, str) or not isinstance(value, (str, int, float))
            for key, value in self._conditions.items()
        ):
            errors.append("Condition keys must be strings and values must be strings, numbers or booleans")

        errors.extend(window_errors(self._start_date, self._end_date))

        return ValidationResult(errors=tuple(errors))

    def build(self) -> Statement:
        """Validate and return a new frozen Statement.

        Raises:
            ValidationError: listing every violated rule.
        """
        result = self.validate()
        if not result.is_valid:
            raise ValidationError("Invalid statement configuration", errors=result.errors)

        return Statement(
            effect=self._effect,
            action=tuple(self._actions),
            resource=tuple(self._resources),
            condition=dict(self._conditions) if self._conditions is not None else None,
            start_date=self._start_date,
            end_date=self._end_date,
        )

    def __repr__(self) -> str:
        effect = self._effect.value if self._effect else None
        return f"StatementBuilder(effect={effect!r}, actions={self._actions!r}, resources={self._resources!r})"


__all__ = ["StatementBuilder", "window_errors"]
