"""Policy evaluation with deny-override semantics.

Provides:
- ``evaluate()``: boolean Allow/Deny for one action + resource + context.
- ``explain()``: the same decision with the statement that produced it.
- ``Decision``: result of ``explain()``.

Decision logic, per statement in input order:
1. Inactive (outside its StartDate/EndDate window) → skipped.
2. Condition set and not satisfied by the context → skipped.
3. Action and resource both match:
   - ``Allow`` → remember the grant, keep scanning.
   - ``Deny``  → denied immediately, nothing else is considered.

No matching Allow (including an empty policy list) means denied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from ..models import Effect, Policy
from ..timestamps import as_utc, utc_now
from .conditions import evaluate_condition
from .matching import matches
from .temporal import is_statement_active

logger = logging.getLogger(__name__)

REASON_DENY = "explicit deny"
REASON_ALLOW = "allowed"
REASON_NO_MATCH = "no matching statement"


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy evaluation.

    Attributes:
        allowed: Final Allow/Deny.
        reason: ``"explicit deny"``, ``"allowed"`` or ``"no matching statement"``.
        effect: Effect of the deciding statement, None when nothing matched.
        policy_id: Policy holding the deciding statement.
        statement_index: Index of the deciding statement in that policy.
            For a grant this is the first matching Allow; for a denial it is
            the Deny that stopped the scan.
    """

    allowed: bool
    reason: str = REASON_NO_MATCH
    effect: Optional[Effect] = None
    policy_id: Optional[str] = None
    statement_index: Optional[int] = None

    @property
    def denied(self) -> bool:
        return not self.allowed


def explain(
    policies: Iterable[Policy],
    action: str,
    resource: str,
    context: Mapping[str, Any] | None = None,
    *,
    now: datetime | None = None,
) -> Decision:
    """Evaluate ``policies`` and report which statement decided the outcome.

    Args:
        policies: Policies attached to the principal, in evaluation order.
        action: Requested action (e.g. ``"read"``).
        resource: Requested resource (e.g. ``"document:report"``).
        context: Request attributes for statement conditions.
        now: Reference time for validity windows (default: current UTC time).
             Fixed once for the whole call.

    Returns:
        Decision with the final outcome.
    """
    ctx: Mapping[str, Any] = context or {}
    moment = utc_now() if now is None else as_utc(now)
    grant: Decision | None = None

    for policy in policies:
        for index, statement in enumerate(policy.document.statements):
            if not is_statement_active(statement, moment):
                continue
            if statement.condition and not evaluate_condition(statement.condition, ctx):
                continue
            if not (matches(statement.action, action) and matches(statement.resource, resource)):
                continue

            if statement.effect is Effect.DENY:
                logger.debug(
                    "Denied %s on %s by policy %s statement %d",
                    action,
                    resource,
                    policy.id,
                    index,
                )
                return Decision(
                    allowed=False,
                    reason=REASON_DENY,
                    effect=Effect.DENY,
                    policy_id=policy.id,
                    statement_index=index,
                )
            if grant is None:
                grant = Decision(
                    allowed=True,
                    reason=REASON_ALLOW,
                    effect=Effect.ALLOW,
                    policy_id=policy.id,
                    statement_index=index,
                )

    if grant is None:
        logger.debug("No statement grants %s on %s", action, resource)
        return Decision(allowed=False)

    logger.debug(
        "Allowed %s on %s by policy %s statement %d",
        action,
        resource,
        grant.policy_id,
        grant.statement_index,
    )
    return grant


def evaluate(
    policies: Iterable[Policy],
    action: str,
    resource: str,
    context: Mapping[str, Any] | None = None,
    *,
    now: datetime | None = None,
) -> bool:
    """Decide whether ``policies`` allow ``action`` on ``resource``.

    Deny overrides: any active, matching Deny statement wins regardless of
    how many Allow statements match or where they appear.

    Example::

        policies = [
            PolicyBuilder("p1").allow(["read", "write"]).on(["*"]).build(),
            PolicyBuilder("p2").deny(["write"]).on(["document:secret"]).build(),
        ]
        evaluate(policies, "read", "document")           # True
        evaluate(policies, "write", "document:secret")   # False
        evaluate([], "read", "document")                 # False
    """
    return explain(policies, action, resource, context, now=now).allowed


__all__ = [
    "Decision",
    "REASON_ALLOW",
    "REASON_DENY",
    "REASON_NO_MATCH",
    "evaluate",
    "explain",
]
