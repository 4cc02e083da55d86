"""Policy evaluation engine.

Defines:
- matches(): Wildcard matching over action/resource patterns
- evaluate_condition(): Exact attribute matching against a request context
- is_statement_active(): StartDate/EndDate validity windows
- evaluate() / explain(): Deny-override evaluation over a list of policies
"""

from .conditions import evaluate_condition
from .evaluator import Decision, evaluate, explain
from .matching import matches
from .temporal import is_statement_active, parse_timestamp

__all__ = [
    "Decision",
    "evaluate",
    "evaluate_condition",
    "explain",
    "is_statement_active",
    "matches",
    "parse_timestamp",
]
