"""Security score: 100 minus per-severity penalties, clamped to [0, 100]."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from solguard.scanner.models import Finding

MAX_SCORE = 100
MIN_SCORE = 0

# Keyed by Severity value so unknown severities fall through to 0
PENALTIES = {
    "CRITICAL": 50,
    "WARNING": 10,
    "INFO": 2,
}


def severity_penalty(severity) -> int:
    """Penalty for one finding of the given severity; unknown values cost nothing."""
    key = getattr(severity, "value", severity)
    return PENALTIES.get(key, 0)


def compute_score(findings: Iterable[Finding] | None) -> int:
    """Score a finding list.

    Penalties are summed before clamping, so the result depends only on
    the multiset of severities and never on discovery order.
    """
    if not findings:
        return MAX_SCORE

    total = sum(severity_penalty(f.severity) for f in findings)
    return max(MIN_SCORE, min(MAX_SCORE, MAX_SCORE - total))
