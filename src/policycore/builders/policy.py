"""Fluent construction of policies.

Two construction modes, never mixed on one builder:

- **simple mode**: ``allow/deny/on/when/active_from/active_until`` configure
  a single implicit statement.
- **complex mode**: one or more ``statement()`` calls, each taking a built
  Statement, a StatementBuilder or a wire-shape mapping.

Example::

    # Simple
    policy = (
        PolicyBuilder("policy-123")
        .allow(["read", "write"])
        .on(["document/*"])
        .when({"department": "engineering"})
        .build()
    )

    # Complex
    policy = (
        PolicyBuilder("policy-456")
        .statement(StatementBuilder().allow(["read", "write"]).on(["document/*"]))
        .statement(StatementBuilder().deny(["delete"]).on(["document/confidential/*"]))
        .build()
    )
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import ValidationError as ModelValidationError

from ..config import DEFAULT_POLICY_VERSION
from ..exceptions import ValidationError
from ..models import Policy, PolicyDocument, Statement
from .statement import StatementBuilder, window_errors
from .types import ValidationResult

StatementLike = Union[Statement, StatementBuilder, Mapping[str, Any]]

_SIMPLE_AFTER_COMPLEX = (
    "Cannot use simple statement methods (allow/deny/on/when/active_from/active_until) "
    "after using statement(). Use either simple mode or complex mode, not both."
)
_COMPLEX_AFTER_SIMPLE = (
    "Cannot mix simple statement methods (allow/deny/on/when/active_from/active_until) "
    "with statement(). Use either simple mode or complex mode, not both."
)


class PolicyBuilder:
    """Builds a validated, frozen :class:`~policycore.models.Policy`.

    Mode conflicts raise :class:`~policycore.exceptions.ValidationError`
    immediately, at the offending call. Everything else is checked by
    :meth:`validate` / :meth:`build`, which report all problems at once.

    Like :class:`StatementBuilder`, a PolicyBuilder belongs to a single
    caller and is not thread-safe; each ``build()`` returns an independent
    value.

    Args:
        policy_id: Externally assigned policy identifier.
        version: Document version label (default ``"2023-11-15"``).
    """

    def __init__(self, policy_id: str, *, version: str = DEFAULT_POLICY_VERSION) -> None:
        self._policy_id = policy_id
        self._version = version
        self._statements: list[Statement] = []
        self._simple: Optional[StatementBuilder] = None

    @classmethod
    def create(cls, policy_id: str, *, version: str = DEFAULT_POLICY_VERSION) -> PolicyBuilder:
        return cls(policy_id, version=version)

    def version(self, version: str) -> PolicyBuilder:
        """Set the document version label."""
        self._version = version
        return self

    # ── Simple mode ─────────────────────────────────────

    def _simple_statement(self) -> StatementBuilder:
        if self._statements:
            raise ValidationError(_SIMPLE_AFTER_COMPLEX, errors=[_SIMPLE_AFTER_COMPLEX])
        if self._simple is None:
            self._simple = StatementBuilder()
        return self._simple

    def allow(self, actions: Iterable[str]) -> PolicyBuilder:
        self._simple_statement().allow(actions)
        return self

    def deny(self, actions: Iterable[str]) -> PolicyBuilder:
        self._simple_statement().deny(actions)
        return self

    def on(self, resources: Iterable[str]) -> PolicyBuilder:
        self._simple_statement().on(resources)
        return self

    def when(self, conditions: Mapping[str, Any]) -> PolicyBuilder:
        self._simple_statement().when(conditions)
        return self

    def active_from(self, start_date: str | datetime) -> PolicyBuilder:
        self._simple_statement().active_from(start_date)
        return self

    def active_until(self, end_date: str | datetime) -> PolicyBuilder:
        self._simple_statement().active_until(end_date)
        return self

    # ── Complex mode ────────────────────────────────────

    def statement(self, statement: StatementLike) -> PolicyBuilder:
        """Append a statement.

        A StatementBuilder is built on the spot (its ValidationError
        propagates). A mapping is validated as a wire-shape statement. A
        mapping or a ready Statement must also carry parseable dates.
        """
        if self._simple is not None:
            raise ValidationError(_COMPLEX_AFTER_SIMPLE, errors=[_COMPLEX_AFTER_SIMPLE])

        if isinstance(statement, StatementBuilder):
            built = statement.build()
        elif isinstance(statement, Statement):
            built = statement
        else:
            try:
                built = Statement.model_validate(statement)
            except ModelValidationError as e:
                raise ValidationError(
                    "Invalid statement configuration",
                    errors=[err["msg"] for err in e.errors()],
                ) from e

        date_errors = window_errors(built.start_date, built.end_date)
        if date_errors:
            raise ValidationError("Invalid statement configuration", errors=date_errors)

        self._statements.append(built)
        return self

    def add_statements(self, statements: Iterable[StatementLike]) -> PolicyBuilder:
        for statement in statements:
            self.statement(statement)
        return self

    # ── Validation / build ──────────────────────────────

    def validate(self) -> ValidationResult:
        """Check the current state and collect every violated rule."""
        errors: list[str] = []

        if not isinstance(self._policy_id, str) or not self._policy_id:
            errors.append("Policy ID must be a non-empty string")

        if not isinstance(self._version, str) or not self._version:
            errors.append("Policy document version must be a non-empty string")

        if self._simple is not None:
            errors.extend(f"Statement: {error}" for error in self._simple.validate().errors)
        elif not self._statements:
            errors.append(
                "Policy must contain at least one statement. Use allow()/deny() methods or statement() method."
            )

        return ValidationResult(errors=tuple(errors))

    def build(self) -> Policy:
        """Validate and return a new frozen Policy.

        Raises:
            ValidationError: listing every violated rule.
        """
        result = self.validate()
        if not result.is_valid:
            raise ValidationError("Invalid policy configuration", errors=result.errors)

        statements = [self._simple.build()] if self._simple is not None else list(self._statements)
        return Policy(
            id=self._policy_id,
            document=PolicyDocument(version=self._version, statements=tuple(statements)),
        )

    def __repr__(self) -> str:
        mode = "simple" if self._simple is not None else "complex"
        return f"PolicyBuilder(policy_id={self._policy_id!r}, mode={mode!r}, statements={len(self._statements)})"


__all__ = ["PolicyBuilder", "StatementLike"]
