"""Gate data models: proposal lifecycle and deployment gate policies."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class ProposalStatus(enum.Enum):
    """Where a governance proposal sits in the deployment pipeline."""

    PENDING = "pending"
    APPROVED = "approved"
    CODE_GENERATED = "code_generated"
    COMPILED = "compiled"
    DEPLOYED = "deployed"

    def next(self) -> ProposalStatus | None:
        """The status that follows this one, or None once deployed."""
        order = list(ProposalStatus)
        index = order.index(self)
        if index + 1 < len(order):
            return order[index + 1]
        return None


@dataclass(frozen=True)
class GatePolicy:
    """Thresholds a contract must meet before it may be deployed."""

    name: str
    min_source_score: int = 0
    min_bytecode_score: int = 0
    deny: tuple[str, ...] = ()
    require_bytecode: bool = True
    description: str = ""
    inherit: tuple[str, ...] = ()
