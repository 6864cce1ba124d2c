"""Tests for the security scorer."""

from __future__ import annotations

import itertools

from solguard.scanner.models import Finding, Severity
from solguard.scanner.scoring import compute_score


def _f(severity: Severity, fid: str = "X") -> Finding:
    return Finding(severity=severity, id=fid, message="")


def test_empty_is_perfect():
    assert compute_score([]) == 100
    assert compute_score(None) == 100


def test_penalties_per_severity():
    assert compute_score([_f(Severity.CRITICAL)]) == 50
    assert compute_score([_f(Severity.WARNING)]) == 90
    assert compute_score([_f(Severity.INFO)]) == 98
    assert compute_score([_f(Severity.WARNING), _f(Severity.INFO)]) == 88


def test_clamped_to_zero():
    findings = [_f(Severity.CRITICAL)] * 3 + [_f(Severity.WARNING)]
    assert compute_score(findings) == 0


def test_unknown_severity_costs_nothing():
    odd = Finding(severity="DEBUG", id="ODD", message="")
    assert compute_score([odd]) == 100
    assert compute_score([odd, _f(Severity.INFO)]) == 98


def test_order_independent():
    findings = [
        _f(Severity.CRITICAL),
        _f(Severity.CRITICAL),
        _f(Severity.WARNING),
        _f(Severity.INFO),
    ]
    scores = {compute_score(list(p)) for p in itertools.permutations(findings)}
    assert scores == {0}


def test_adding_a_finding_never_raises_score():
    findings: list[Finding] = []
    previous = compute_score(findings)
    for severity in [Severity.INFO, Severity.WARNING, Severity.INFO, Severity.CRITICAL]:
        findings.append(_f(severity))
        current = compute_score(findings)
        assert 0 <= current <= previous
        previous = current
