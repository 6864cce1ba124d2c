"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from solguard.gate.models import GatePolicy

# PUSH1 0x80 PUSH1 0x40 MSTORE
SAFE_BYTECODE = "0x6080604052"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("SOLGUARD_POLICY", raising=False)
    monkeypatch.delenv("SOLGUARD_MAX_INPUT_BYTES", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def vault_source(fixtures_dir: Path) -> str:
    return (fixtures_dir / "vault.sol").read_text(encoding="utf-8")


@pytest.fixture
def upgradeable_source(fixtures_dir: Path) -> str:
    return (fixtures_dir / "upgradeable.sol").read_text(encoding="utf-8")


@pytest.fixture
def safe_bytecode() -> str:
    return SAFE_BYTECODE


@pytest.fixture
def default_policy() -> GatePolicy:
    return GatePolicy(name="test")


@pytest.fixture
def strict_policy() -> GatePolicy:
    return GatePolicy(
        name="test-strict",
        min_source_score=60,
        min_bytecode_score=80,
        deny=("TX_ORIGIN", "MISSING_REENTRANCY_GUARD"),
    )
