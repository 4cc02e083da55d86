"""Core data models for policycore.

Pydantic models for the policy document wire shape and the principals the
orchestrator resolves. Python attributes are snake_case; the wire field
names (``Version``, ``Statement``, ``Effect``, ``Action``, ``Resource``,
``Condition``, ``StartDate``, ``EndDate``) are aliases, so documents loaded
from storage validate directly::

    PolicyDocument.model_validate({
        "Version": "2023-11-15",
        "Statement": [{"Effect": "Allow", "Action": ["read"], "Resource": ["*"]}],
    })

Statements, documents and policies are frozen: updates produce new values.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

from .timestamps import parse_timestamp

# Closed set of scalar types permitted in conditions and request contexts
ConditionValue = Union[StrictStr, StrictBool, StrictInt, StrictFloat]


class Effect(str, Enum):
    """Outcome a matching statement contributes."""

    ALLOW = "Allow"
    DENY = "Deny"


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire/storage shape (aliases, optional fields omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Statement(_WireModel):
    """One Allow/Deny rule.

    ``start_date`` / ``end_date`` are kept as the ISO-8601 strings they were
    given. A string that does not parse is tolerated here and makes the
    statement inactive at evaluation time; builders refuse to produce one.
    """

    effect: Effect = Field(alias="Effect")
    action: tuple[str, ...] = Field(alias="Action")
    resource: tuple[str, ...] = Field(alias="Resource")
    condition: Optional[dict[str, ConditionValue]] = Field(default=None, alias="Condition")
    start_date: Optional[str] = Field(default=None, alias="StartDate")
    end_date: Optional[str] = Field(default=None, alias="EndDate")

    @field_validator("action", "resource")
    @classmethod
    def validate_patterns(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("must contain at least one pattern")
        if any(not pattern for pattern in v):
            raise ValueError("patterns must be non-empty strings")
        return v

    @model_validator(mode="after")
    def validate_window(self) -> "Statement":
        start = parse_timestamp(self.start_date) if self.start_date else None
        end = parse_timestamp(self.end_date) if self.end_date else None
        if start is not None and end is not None and start >= end:
            raise ValueError("StartDate must be before EndDate")
        return self


class PolicyDocument(_WireModel):
    """Versioned, ordered, non-empty list of statements."""

    version: str = Field(alias="Version")
    statements: tuple[Statement, ...] = Field(alias="Statement", min_length=1)

    @field_validator("statements", mode="before")
    @classmethod
    def normalize_statements(cls, v: Any) -> Any:
        # A lone statement is accepted in place of a list
        if isinstance(v, (dict, Statement)):
            return (v,)
        return v


class Policy(_WireModel):
    """A named, immutable set of permission statements."""

    id: str = Field(min_length=1)
    document: PolicyDocument

    @property
    def statements(self) -> tuple[Statement, ...]:
        return self.document.statements


class User(BaseModel):
    """Principal whose access is evaluated."""

    id: str
    name: str
    roles: list[str] = Field(default_factory=list)
    policies: list[str] = Field(default_factory=list)


class Role(BaseModel):
    """Named collection of policies that can be assigned to users."""

    id: str
    name: str
    policies: list[str] = Field(default_factory=list)


__all__ = [
    "ConditionValue",
    "Effect",
    "Policy",
    "PolicyDocument",
    "Role",
    "Statement",
    "User",
]
