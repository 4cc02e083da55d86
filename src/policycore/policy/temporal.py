"""Validity windows for statements.

A statement with ``StartDate`` / ``EndDate`` only takes part in evaluation
while ``StartDate <= now <= EndDate``. A date that cannot be parsed makes
the statement inactive (fail closed); the anomaly is logged, never raised.
"""

from __future__ import annotations

import logging
from datetime import datetime

from ..models import Statement
from ..timestamps import as_utc, parse_timestamp, utc_now

logger = logging.getLogger(__name__)


def is_statement_active(statement: Statement, now: datetime | None = None) -> bool:
    """Check whether ``statement`` is inside its validity window at ``now``.

    Args:
        statement: Statement to check.
        now: Reference time (default: current UTC time; naive values are UTC).

    Returns:
        True when no bound excludes ``now``. Both bounds are inclusive.
    """
    if statement.start_date is None and statement.end_date is None:
        return True

    moment = utc_now() if now is None else as_utc(now)

    if statement.start_date is not None:
        start = parse_timestamp(statement.start_date)
        if start is None:
            logger.warning(
                "Invalid StartDate %r on statement %s, treating as inactive",
                statement.start_date,
                list(statement.action),
            )
            return False
        if moment < start:
            return False

    if statement.end_date is not None:
        end = parse_timestamp(statement.end_date)
        if end is None:
            logger.warning(
                "Invalid EndDate %r on statement %s, treating as inactive",
                statement.end_date,
                list(statement.action),
            )
            return False
        if moment > end:
            return False

    return True


__all__ = ["is_statement_active", "parse_timestamp"]
