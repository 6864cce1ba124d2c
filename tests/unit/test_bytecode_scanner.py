"""Tests for the EVM bytecode scanner."""

from __future__ import annotations

import pytest

from solguard.scanner.bytecode import (
    EIP170_LIMIT,
    estimate_deploy_gas,
    normalize_hex,
    scan_bytecode,
    walk_opcodes,
)
from solguard.scanner.models import ScanType


def _critical_ids(hex_text: str) -> list[str]:
    return [f.id for f in scan_bytecode(hex_text).critical]


class TestNormalization:
    def test_prefix_and_whitespace(self):
        assert normalize_hex("  0x6080\n") == "6080"
        assert normalize_hex("0X6080") == "6080"
        assert normalize_hex(None) == ""

    @pytest.mark.parametrize("value", ["", "   ", "0x", " 0X ", None])
    def test_empty(self, value):
        result = scan_bytecode(value)
        assert not result.passed
        assert result.score == 0
        assert [f.id for f in result.critical] == ["EMPTY_BYTECODE"]
        assert result.scan_type == ScanType.BYTECODE

    @pytest.mark.parametrize("value", ["zz", "0x60g0", "60 80", "abc"])
    def test_invalid(self, value: str):
        result = scan_bytecode(value)
        assert not result.passed
        assert result.score == 0
        assert [f.id for f in result.critical] == ["INVALID_BYTECODE"]

    def test_non_string_raises(self):
        with pytest.raises(TypeError):
            scan_bytecode(b"\x60\x80")


class TestOpcodeWalk:
    def test_bare_selfdestruct(self):
        result = scan_bytecode("ff")
        assert [f.id for f in result.critical] == ["SELFDESTRUCT_OPCODE"]
        assert "offset 0" in result.critical[0].message

    def test_push32_data_is_skipped(self):
        result = scan_bytecode("7f" + "ff" * 32)
        assert result.critical == ()
        assert result.passed

    def test_push1_data_is_skipped(self):
        # PUSH1 0xf4, then a real SELFDESTRUCT at offset 2
        result = scan_bytecode("60f4ff")
        assert [f.id for f in result.critical] == ["SELFDESTRUCT_OPCODE"]
        assert "offset 2" in result.critical[0].message

    def test_every_occurrence_reported(self):
        findings = walk_opcodes(bytes.fromhex("fff4f2ff"))
        assert [f.id for f in findings] == [
            "SELFDESTRUCT_OPCODE",
            "DELEGATECALL_OPCODE",
            "CALLCODE_OPCODE",
            "SELFDESTRUCT_OPCODE",
        ]
        assert "offset 3" in findings[3].message

    def test_truncated_push_ends_walk(self):
        assert walk_opcodes(bytes.fromhex("7fffff")) == []

    def test_opcode_after_push_operand(self):
        # PUSH2 0xffff, DELEGATECALL
        assert _critical_ids("61fffff4") == ["DELEGATECALL_OPCODE"]

    def test_uppercase_hex(self):
        assert _critical_ids("0xF2") == ["CALLCODE_OPCODE"]


class TestSize:
    def test_limit_is_allowed(self):
        result = scan_bytecode("00" * EIP170_LIMIT)
        assert "EIP170_EXCEEDED" not in result.ids()
        assert "BYTECODE_SIZE" in {f.id for f in result.info}
        assert result.passed

    def test_one_over_limit(self):
        result = scan_bytecode("00" * (EIP170_LIMIT + 1))
        assert _count(result.critical, "EIP170_EXCEEDED") == 1
        assert "24577" in result.critical[0].message
        assert not result.passed

    def test_safe_bytecode_score(self, safe_bytecode: str):
        result = scan_bytecode(safe_bytecode)
        assert result.passed
        assert result.score == 98


def _count(findings, fid: str) -> int:
    return sum(1 for f in findings if f.id == fid)


class TestDeployGas:
    def test_estimate(self):
        assert estimate_deploy_gas("0x6080") == 21000 + 2 * 200

    def test_empty(self):
        assert estimate_deploy_gas("") == 21000

    def test_invalid_raises(self):
        with pytest.raises(ValueError):
            estimate_deploy_gas("xyz")
