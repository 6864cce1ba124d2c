"""Solidity source rules: forbidden and risky constructs as a static table."""

from __future__ import annotations

import re
from dataclasses import dataclass

from solguard.scanner.models import Finding, Severity


@dataclass(frozen=True)
class PatternRule:
    """A detection rule with compiled regex and the finding it produces."""

    severity: Severity
    id: str
    pattern: re.Pattern[str]
    message: str

    def matches(self, code: str) -> bool:
        return self.pattern.search(code) is not None

    def finding(self) -> Finding:
        return Finding(severity=self.severity, id=self.id, message=self.message)


def _import_path_containing(word: str) -> re.Pattern[str]:
    """Match an import whose quoted path contains word.

    The optional `{A, B} from` or `* as X from` prefix may not hold quotes,
    so the first quote opens the path and the match ends at its closing quote.
    """
    return re.compile(
        r"\bimport\s+(?:[^;\"']*\bfrom\s+)?[\"'][^\"'\n]*"
        + re.escape(word)
        + r"[^\"'\n]*[\"']"
    )


SOURCE_RULES: tuple[PatternRule, ...] = (
    # Critical: destruction, foreign code execution, upgradeability
    PatternRule(
        severity=Severity.CRITICAL,
        id="SELFDESTRUCT",
        pattern=re.compile(r"\bselfdestruct\s*\("),
        message="selfdestruct detected: contract can be permanently destroyed",
    ),
    PatternRule(
        severity=Severity.CRITICAL,
        id="SUICIDE",
        pattern=re.compile(r"\bsuicide\s*\("),
        message="suicide (deprecated selfdestruct alias) detected",
    ),
    PatternRule(
        severity=Severity.CRITICAL,
        id="DELEGATECALL",
        pattern=re.compile(r"\.delegatecall\s*\("),
        message="delegatecall detected: arbitrary code execution risk",
    ),
    PatternRule(
        severity=Severity.CRITICAL,
        id="CALLCODE",
        pattern=re.compile(r"\.callcode\s*\("),
        message="callcode detected: deprecated and dangerous",
    ),
    PatternRule(
        severity=Severity.CRITICAL,
        id="ERC1967_PROXY",
        pattern=re.compile(r"\bERC1967"),
        message="ERC1967 proxy pattern detected: upgradeable proxy infrastructure",
    ),
    PatternRule(
        severity=Severity.CRITICAL,
        id="UUPS_PROXY",
        pattern=re.compile(r"\bUUPS"),
        message="UUPS upgradeable proxy pattern detected",
    ),
    PatternRule(
        severity=Severity.CRITICAL,
        id="TRANSPARENT_PROXY",
        pattern=re.compile(r"TransparentProxy"),
        message="TransparentProxy pattern detected: upgradeable proxy infrastructure",
    ),
    PatternRule(
        severity=Severity.CRITICAL,
        id="PROXY_IMPORT",
        pattern=_import_path_containing("Proxy"),
        message="Proxy import detected: contract may be upgradeable",
    ),
    PatternRule(
        severity=Severity.CRITICAL,
        id="PROXY_INHERITANCE",
        pattern=re.compile(r"\bcontract\s+\w+\s+is\s+[^{;]*Proxy\b"),
        message="Proxy inheritance detected: contract may be upgradeable",
    ),
    PatternRule(
        severity=Severity.CRITICAL,
        id="UPGRADEABLE_IMPORT",
        pattern=_import_path_containing("Upgradeable"),
        message="Upgradeable import detected: contract uses upgradeable pattern",
    ),
    # Warning
    PatternRule(
        severity=Severity.WARNING,
        id="TX_ORIGIN",
        pattern=re.compile(r"\btx\.origin\b"),
        message="tx.origin used for authorization: phishing vulnerability",
    ),
    PatternRule(
        severity=Severity.WARNING,
        id="ASSEMBLY_CREATE2",
        pattern=re.compile(r"\bassembly\s*(?:\([^)]*\)\s*)?\{[^}]*\bcreate2\b"),
        message="assembly create2 detected: may enable deterministic deployment tricks",
    ),
)

# External-call primitives for the file-level reentrancy heuristic
CALL_PRIMITIVES: tuple[re.Pattern[str], ...] = (
    re.compile(r"\.call\s*[({]"),
    re.compile(r"\.send\s*\("),
    re.compile(r"\.transfer\s*\("),
)
REENTRANCY_GUARD = re.compile(r"ReentrancyGuard")

PRAGMA = re.compile(r"pragma\s+solidity\s+([^;]+);")
VERSION_TRIPLE = re.compile(r"(\d+)\.(\d+)\.(\d+)")
MIN_SOLIDITY_VERSION = (0, 8, 20)

LINE_COMMENT = re.compile(r"//.*$", re.MULTILINE)
BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
WHITESPACE = re.compile(r"\s+")

# Structural pre-compile checks
SPDX_MARKER = "SPDX-License-Identifier"
PRAGMA_MARKER = "pragma solidity"
CONTRACT_DEFINITION = re.compile(r"contract\s+\w+")
