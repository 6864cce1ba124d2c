"""Scan engine: finds contract artifacts on disk and runs the right scanner."""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path

from solguard.scanner.bytecode import normalize_hex, scan_bytecode
from solguard.scanner.integrity import hash_integrity
from solguard.scanner.models import IntegrityHashSet, ScanResult, iso_timestamp
from solguard.scanner.source import scan_source

logger = logging.getLogger(__name__)

# Directories to always skip
_SKIP_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "__pycache__",
    ".venv",
    "venv",
    "cache",
    "build-info",
    "typechain",
    "typechain-types",
    "coverage",
    "lib",
}

_SOURCE_SUFFIXES = {".sol"}
_BYTECODE_SUFFIXES = {".bin", ".hex"}
_ARTIFACT_SUFFIXES = {".json"}

# Default per-file cap (4 MiB)
DEFAULT_MAX_FILE_SIZE = 4 * 1024 * 1024


@dataclass(frozen=True)
class ArtifactReport:
    """Scan outcome for one file."""

    path: str
    kind: str
    result: ScanResult
    integrity: IntegrityHashSet

    @property
    def passed(self) -> bool:
        return self.result.passed

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "kind": self.kind,
            "result": self.result.to_dict(),
            "integrity": self.integrity.to_dict(),
        }


@dataclass
class EngineResult:
    """Aggregate result of scanning a file or directory."""

    target: str
    reports: list[ArtifactReport] = field(default_factory=list)
    files_scanned: int = 0
    files_skipped: int = 0
    duration: float = 0.0
    timestamp: float = field(default_factory=time.time)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.reports)

    def to_dict(self) -> dict:
        return {
            "target": self.target,
            "passed": self.passed,
            "filesScanned": self.files_scanned,
            "filesSkipped": self.files_skipped,
            "duration": self.duration,
            "timestamp": iso_timestamp(self.timestamp),
            "reports": [r.to_dict() for r in self.reports],
        }


class ScanEngine:
    """Runs source and bytecode scans across a file or directory tree."""

    def __init__(
        self,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        exclude_patterns: list[str] | None = None,
    ) -> None:
        self._max_file_size = max_file_size
        self._exclude = set(exclude_patterns or [])

    def scan(self, target: str | Path) -> EngineResult:
        """Scan a single artifact file or every artifact under a directory."""
        target = Path(target).resolve()
        start = time.time()
        result = EngineResult(target=str(target))

        paths = [target] if target.is_file() else self._walk(target)
        for path in paths:
            if not self._within_limit(path):
                result.files_skipped += 1
                continue

            try:
                content = path.read_text(encoding="utf-8", errors="ignore")
            except OSError as e:
                logger.debug("Skipping %s: %s", path, e)
                result.files_skipped += 1
                continue

            report = self.scan_content(content, str(path))
            if report is None:
                result.files_skipped += 1
                continue

            result.files_scanned += 1
            result.reports.append(report)

        result.duration = time.time() - start
        return result

    def scan_content(self, content: str, file_path: str) -> ArtifactReport | None:
        """Pick a scanner by file suffix. Returns None for non-artifacts."""
        suffix = Path(file_path).suffix.lower()

        if suffix in _SOURCE_SUFFIXES:
            return ArtifactReport(
                path=file_path,
                kind="source",
                result=scan_source(content),
                integrity=hash_integrity(source=content),
            )

        if suffix in _BYTECODE_SUFFIXES:
            bytecode = content.strip()
            return ArtifactReport(
                path=file_path,
                kind="bytecode",
                result=scan_bytecode(bytecode),
                integrity=hash_integrity(bytecode=bytecode),
            )

        if suffix in _ARTIFACT_SUFFIXES:
            bytecode = extract_artifact_bytecode(content)
            if bytecode is None:
                logger.debug("No bytecode field in %s", file_path)
                return None
            return ArtifactReport(
                path=file_path,
                kind="artifact",
                result=scan_bytecode(bytecode),
                integrity=hash_integrity(bytecode=bytecode),
            )

        return None

    def _walk(self, directory: Path):
        """Walk directory yielding candidate artifact files."""
        suffixes = _SOURCE_SUFFIXES | _BYTECODE_SUFFIXES | _ARTIFACT_SUFFIXES
        for root, dirs, files in os.walk(directory):
            # Prune skipped directories in-place
            dirs[:] = sorted(
                d for d in dirs if d not in _SKIP_DIRS and d not in self._exclude
            )

            for name in sorted(files):
                path = Path(root) / name
                if path.suffix.lower() not in suffixes:
                    continue
                if name in self._exclude:
                    continue
                yield path

    def _within_limit(self, path: Path) -> bool:
        try:
            size = path.stat().st_size
        except OSError as e:
            logger.debug("Cannot stat %s: %s", path, e)
            return False
        if size > self._max_file_size:
            logger.debug(
                "Skipping %s: %d bytes exceeds cap of %d",
                path,
                size,
                self._max_file_size,
            )
            return False
        return True


def extract_artifact_bytecode(content: str) -> str | None:
    """Pull bytecode out of a Hardhat, Foundry or solc JSON artifact.

    Interfaces and abstract contracts carry an empty "0x" and are treated as
    having no bytecode.
    """
    try:
        data = json.loads(content)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None

    for key in ("bytecode", "deployedBytecode"):
        value = data.get(key)
        # Foundry nests the hex under {"object": ...}
        if isinstance(value, dict):
            value = value.get("object")
        if isinstance(value, str) and normalize_hex(value):
            return value

    evm = data.get("evm")
    if isinstance(evm, dict):
        nested = evm.get("bytecode")
        if isinstance(nested, dict):
            value = nested.get("object")
            if isinstance(value, str) and normalize_hex(value):
                return value

    return None
