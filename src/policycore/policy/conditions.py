"""Attribute-condition matching against a request context."""

from __future__ import annotations

from typing import Any, Mapping

_MISSING = object()


def _same_value(expected: Any, actual: Any) -> bool:
    # bool is an int subclass; keep True distinct from 1
    if isinstance(expected, bool) or isinstance(actual, bool):
        return isinstance(expected, bool) and isinstance(actual, bool) and expected is actual
    if isinstance(expected, str) or isinstance(actual, str):
        return isinstance(expected, str) and isinstance(actual, str) and expected == actual
    if isinstance(expected, (int, float)) and isinstance(actual, (int, float)):
        return expected == actual
    return False


def evaluate_condition(condition: Mapping[str, Any], context: Mapping[str, Any]) -> bool:
    """Check that every condition key is present in the context with an equal value.

    Extra context keys are ignored and an empty condition always holds.
    Comparison is type-strict: ``"1"`` does not equal ``1`` and ``True``
    does not equal ``1``.
    """
    for key, expected in condition.items():
        actual = context.get(key, _MISSING)
        if actual is _MISSING or not _same_value(expected, actual):
            return False
    return True


__all__ = ["evaluate_condition"]
