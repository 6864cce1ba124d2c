"""Integrity hashes for provenance records."""

from __future__ import annotations

import hashlib

from solguard.scanner.models import IntegrityHashSet


def _digest(text: str) -> str:
    return "0x" + hashlib.sha256(text.encode("utf-8")).hexdigest()


def hash_integrity(
    source: str | None = None,
    bytecode: str | None = None,
) -> IntegrityHashSet:
    """SHA-256 of source, bytecode, and source + bytecode with no separator.

    Missing inputs hash as the empty string. The concatenation order and the
    absence of a delimiter are fixed so external verifiers can recompute
    combined_hash.
    """
    source = source if isinstance(source, str) else ""
    bytecode = bytecode if isinstance(bytecode, str) else ""

    return IntegrityHashSet(
        source_hash=_digest(source),
        bytecode_hash=_digest(bytecode),
        combined_hash=_digest(source + bytecode),
    )
