"""Result type shared by the statement and policy builders."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a builder's ``validate()``.

    Attributes:
        errors: Every violated rule, in the order checked. Empty when valid.
    """

    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


__all__ = ["ValidationResult"]
