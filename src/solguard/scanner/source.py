"""Solidity source scanner: rule table, reentrancy, pragma and size checks."""

from __future__ import annotations

import logging

from solguard.scanner.models import Finding, ScanResult, ScanType, Severity
from solguard.scanner.patterns import (
    BLOCK_COMMENT,
    CALL_PRIMITIVES,
    CONTRACT_DEFINITION,
    LINE_COMMENT,
    MIN_SOLIDITY_VERSION,
    PRAGMA,
    PRAGMA_MARKER,
    REENTRANCY_GUARD,
    SOURCE_RULES,
    SPDX_MARKER,
    VERSION_TRIPLE,
    WHITESPACE,
)

logger = logging.getLogger(__name__)

# EIP-170 runtime bytecode limit, reused as a rough source-size threshold
SOURCE_SIZE_LIMIT = 24576


def scan_source(code: str | None) -> ScanResult:
    """Scan Solidity source for forbidden and risky constructs.

    Empty or whitespace-only input yields a failed result with a single
    EMPTY_SOURCE finding instead of raising.
    """
    if code is not None and not isinstance(code, str):
        raise TypeError(f"source must be str, not {type(code).__name__}")

    if code is None or not code.strip():
        return ScanResult.rejected(
            ScanType.SOURCE,
            Finding(Severity.CRITICAL, "EMPTY_SOURCE", "No source code provided"),
        )

    findings: list[Finding] = []

    for rule in SOURCE_RULES:
        if rule.matches(code):
            logger.debug("Source rule %s matched", rule.id)
            findings.append(rule.finding())

    reentrancy = check_reentrancy(code)
    if reentrancy:
        findings.append(reentrancy)

    findings.extend(extract_solidity_version(code))
    findings.append(estimate_source_size(code))

    return ScanResult.from_findings(ScanType.SOURCE, findings)


def check_reentrancy(code: str) -> Finding | None:
    """Flag external calls in a file that never mentions ReentrancyGuard.

    Deliberately file-level: a call anywhere plus the token missing
    everywhere. Not a per-function analysis.
    """
    has_external_call = any(p.search(code) for p in CALL_PRIMITIVES)
    if has_external_call and not REENTRANCY_GUARD.search(code):
        return Finding(
            Severity.WARNING,
            "MISSING_REENTRANCY_GUARD",
            "External calls detected without ReentrancyGuard: "
            "potential reentrancy vulnerability",
        )
    return None


def extract_solidity_version(code: str) -> list[Finding]:
    """Report the pragma constraint and whether it pins a recent compiler."""
    match = PRAGMA.search(code)
    if not match:
        return [
            Finding(
                Severity.WARNING,
                "NO_PRAGMA",
                "No pragma solidity directive found",
            )
        ]

    constraint = match.group(1).strip()
    findings = [
        Finding(
            Severity.INFO,
            "SOLIDITY_VERSION",
            f"Solidity version detected: {constraint}",
        )
    ]

    triple = VERSION_TRIPLE.search(constraint)
    if triple:
        version = tuple(int(part) for part in triple.groups())
        shown = ".".join(str(part) for part in version)
        minimum = ".".join(str(part) for part in MIN_SOLIDITY_VERSION)
        if version >= MIN_SOLIDITY_VERSION:
            findings.append(
                Finding(
                    Severity.INFO,
                    "SOLIDITY_VERSION_OK",
                    f"Solidity version {shown} meets minimum requirement (>= {minimum})",
                )
            )
        else:
            findings.append(
                Finding(
                    Severity.WARNING,
                    "SOLIDITY_VERSION_LOW",
                    f"Solidity version {shown} is below recommended minimum {minimum}",
                )
            )

    return findings


def stripped_length(code: str) -> int:
    """Count characters left after removing comments and all whitespace."""
    stripped = LINE_COMMENT.sub("", code)
    stripped = BLOCK_COMMENT.sub("", stripped)
    stripped = WHITESPACE.sub("", stripped)
    return len(stripped)


def estimate_source_size(code: str) -> Finding:
    size = stripped_length(code)
    if size > SOURCE_SIZE_LIMIT:
        return Finding(
            Severity.INFO,
            "LARGE_CONTRACT_SOURCE",
            f"Contract source is large ({size} chars stripped): compiled "
            f"bytecode may exceed EIP-170 {SOURCE_SIZE_LIMIT}-byte limit",
        )
    return Finding(
        Severity.INFO,
        "CONTRACT_SIZE_OK",
        f"Contract source size estimate: {size} chars stripped",
    )


def validate_contract(code: str) -> list[str]:
    """Pre-compile structural check. An empty list means the source looks compilable."""
    errors: list[str] = []

    if SPDX_MARKER not in code:
        errors.append("Missing SPDX-License-Identifier")

    if PRAGMA_MARKER not in code:
        errors.append("Missing pragma solidity statement")

    if not CONTRACT_DEFINITION.search(code):
        errors.append("No contract definition found")

    return errors
