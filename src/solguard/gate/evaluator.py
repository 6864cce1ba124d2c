"""Gate evaluator: decides whether scanned artifacts may be deployed."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from solguard.gate.models import GatePolicy, ProposalStatus
from solguard.scanner.models import ScanResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateVerdict:
    """Result of evaluating scan results against a gate policy."""

    allowed: bool
    reasons: tuple[str, ...] = ()
    policy_name: str = ""

    def to_dict(self) -> dict:
        return {
            "allowed": self.allowed,
            "reasons": list(self.reasons),
            "policy": self.policy_name,
        }


class GateEvaluator:
    """Evaluates source and bytecode scan results against a GatePolicy."""

    def __init__(self, policy: GatePolicy) -> None:
        self.policy = policy
        self._deny = frozenset(policy.deny)

    def evaluate(
        self,
        source_result: ScanResult,
        bytecode_result: ScanResult | None = None,
    ) -> GateVerdict:
        """Collect every reason to block. No reasons means deployment is allowed."""
        reasons: list[str] = []

        reasons.extend(
            self._check(source_result, "source", self.policy.min_source_score)
        )

        if bytecode_result is None:
            if self.policy.require_bytecode:
                reasons.append("bytecode scan required but not provided")
        else:
            reasons.extend(
                self._check(
                    bytecode_result, "bytecode", self.policy.min_bytecode_score
                )
            )

        if reasons:
            logger.debug("Gate %s blocked: %s", self.policy.name, "; ".join(reasons))

        return GateVerdict(
            allowed=not reasons,
            reasons=tuple(reasons),
            policy_name=self.policy.name,
        )

    def can_advance(
        self,
        current: ProposalStatus,
        target: ProposalStatus,
        source_result: ScanResult | None = None,
        bytecode_result: ScanResult | None = None,
    ) -> GateVerdict:
        """Check a single-step status transition.

        Only the move to DEPLOYED is gated on scan results. Skipping steps or
        moving backwards is a caller error.
        """
        if current.next() is not target:
            raise ValueError(
                f"Invalid proposal transition: {current.value} -> {target.value}"
            )

        if target is not ProposalStatus.DEPLOYED:
            return GateVerdict(allowed=True, policy_name=self.policy.name)

        if source_result is None:
            return GateVerdict(
                allowed=False,
                reasons=("source scan required but not provided",),
                policy_name=self.policy.name,
            )

        return self.evaluate(source_result, bytecode_result)

    def _check(self, result: ScanResult, label: str, min_score: int) -> list[str]:
        reasons: list[str] = []
        if not result.passed:
            ids = ", ".join(f.id for f in result.critical)
            reasons.append(f"{label} scan has critical findings: {ids}")
        if result.score < min_score:
            reasons.append(
                f"{label} score {result.score} is below minimum {min_score}"
            )
        denied = sorted(result.ids() & self._deny)
        if denied:
            reasons.append(f"{label} scan has denied findings: {', '.join(denied)}")
        return reasons
