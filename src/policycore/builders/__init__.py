"""Fluent, validating builders for statements and policies.

Provides:
- ``StatementBuilder``: one Allow/Deny statement.
- ``PolicyBuilder``: a policy in simple (one implicit statement) or
  complex (explicit ``statement()`` calls) mode.
- ``ValidationResult``: every violated rule, returned by ``validate()``.

``build()`` raises :class:`~policycore.exceptions.ValidationError` carrying
the same list of errors.
"""

from .policy import PolicyBuilder, StatementLike
from .statement import StatementBuilder
from .types import ValidationResult

__all__ = [
    "PolicyBuilder",
    "StatementBuilder",
    "StatementLike",
    "ValidationResult",
]
