"""Scanner data models: severities, findings, scan results and hashes."""

from __future__ import annotations

import enum
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from solguard.scanner.scoring import compute_score


def iso_timestamp(epoch: float) -> str:
    """Render epoch seconds as UTC ISO-8601 with milliseconds, e.g. 2024-05-01T12:00:00.000Z."""
    moment = datetime.fromtimestamp(epoch, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Severity(enum.Enum):
    """Finding severity level."""

    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    INFO = "INFO"


class ScanType(enum.Enum):
    """Which artifact a scan looked at."""

    SOURCE = "source"
    BYTECODE = "bytecode"


@dataclass(frozen=True)
class Finding:
    """A single rule hit."""

    severity: Severity
    id: str
    message: str

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "id": self.id,
            "message": self.message,
        }


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one scan call, bucketed by severity."""

    scan_type: ScanType
    critical: tuple[Finding, ...] = ()
    warnings: tuple[Finding, ...] = ()
    info: tuple[Finding, ...] = ()
    score: int = 100
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def from_findings(
        cls,
        scan_type: ScanType,
        findings: Iterable[Finding],
    ) -> ScanResult:
        """Bucket findings by severity and score them."""
        findings = list(findings)
        return cls(
            scan_type=scan_type,
            critical=tuple(f for f in findings if f.severity == Severity.CRITICAL),
            warnings=tuple(f for f in findings if f.severity == Severity.WARNING),
            info=tuple(f for f in findings if f.severity == Severity.INFO),
            score=compute_score(findings),
        )

    @classmethod
    def rejected(cls, scan_type: ScanType, finding: Finding) -> ScanResult:
        """A result for input that could not be scanned at all."""
        return cls(scan_type=scan_type, critical=(finding,), score=0)

    @property
    def passed(self) -> bool:
        return not self.critical

    @property
    def findings(self) -> tuple[Finding, ...]:
        return self.critical + self.warnings + self.info

    def ids(self) -> set[str]:
        return {f.id for f in self.findings}

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "critical": [f.to_dict() for f in self.critical],
            "warnings": [f.to_dict() for f in self.warnings],
            "info": [f.to_dict() for f in self.info],
            "scanType": self.scan_type.value,
            "timestamp": iso_timestamp(self.timestamp),
            "score": self.score,
        }


@dataclass(frozen=True)
class IntegrityHashSet:
    """SHA-256 digests of a contract's source, bytecode and both together."""

    source_hash: str
    bytecode_hash: str
    combined_hash: str

    def to_dict(self) -> dict:
        return {
            "sourceHash": self.source_hash,
            "bytecodeHash": self.bytecode_hash,
            "combinedHash": self.combined_hash,
        }
