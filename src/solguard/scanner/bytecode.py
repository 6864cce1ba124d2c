"""EVM bytecode scanner: size limit and a PUSH-aware opcode walk."""

from __future__ import annotations

import logging
import re

from solguard.scanner.models import Finding, ScanResult, ScanType, Severity

logger = logging.getLogger(__name__)

EIP170_LIMIT = 24576

PUSH1 = 0x60
PUSH32 = 0x7F

# opcode -> (finding id, mnemonic)
DANGEROUS_OPCODES = {
    0xFF: ("SELFDESTRUCT_OPCODE", "SELFDESTRUCT"),
    0xF4: ("DELEGATECALL_OPCODE", "DELEGATECALL"),
    0xF2: ("CALLCODE_OPCODE", "CALLCODE"),
}

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")

# Deployment gas estimate
BASE_DEPLOY_GAS = 21000
GAS_PER_BYTE = 200


def normalize_hex(bytecode: str | None) -> str:
    """Trim whitespace and drop an optional 0x/0X prefix."""
    if bytecode is None:
        return ""
    if not isinstance(bytecode, str):
        raise TypeError(f"bytecode must be str, not {type(bytecode).__name__}")
    text = bytecode.strip()
    if text[:2] in ("0x", "0X"):
        text = text[2:]
    return text


def is_valid_hex(text: str) -> bool:
    return _HEX_DIGITS.fullmatch(text) is not None and len(text) % 2 == 0


def scan_bytecode(bytecode: str | None) -> ScanResult:
    """Scan hex-encoded bytecode for dangerous opcodes and oversize code.

    Empty and malformed input each produce a distinct failed result
    (EMPTY_BYTECODE, INVALID_BYTECODE) rather than an exception.
    """
    text = normalize_hex(bytecode)

    if not text:
        return ScanResult.rejected(
            ScanType.BYTECODE,
            Finding(Severity.CRITICAL, "EMPTY_BYTECODE", "No bytecode provided"),
        )

    if not is_valid_hex(text):
        return ScanResult.rejected(
            ScanType.BYTECODE,
            Finding(
                Severity.CRITICAL,
                "INVALID_BYTECODE",
                "Bytecode contains invalid hex characters or an odd number of digits",
            ),
        )

    code = bytes.fromhex(text)
    findings = [check_size(len(code))]
    findings.extend(walk_opcodes(code))

    return ScanResult.from_findings(ScanType.BYTECODE, findings)


def check_size(size: int) -> Finding:
    if size > EIP170_LIMIT:
        return Finding(
            Severity.CRITICAL,
            "EIP170_EXCEEDED",
            f"Bytecode size ({size} bytes) exceeds EIP-170 limit of {EIP170_LIMIT} bytes",
        )
    return Finding(
        Severity.INFO,
        "BYTECODE_SIZE",
        f"Bytecode size: {size} bytes (limit: {EIP170_LIMIT})",
    )


def walk_opcodes(code: bytes) -> list[Finding]:
    """Walk instructions, skipping PUSH1..PUSH32 immediates.

    Operand bytes are never read as opcodes, so a PUSH32 of 0xFF..FF does
    not look like SELFDESTRUCT. A PUSH whose immediate runs past the end
    simply ends the walk.
    """
    findings: list[Finding] = []
    i = 0
    end = len(code)

    while i < end:
        opcode = code[i]

        hit = DANGEROUS_OPCODES.get(opcode)
        if hit:
            finding_id, mnemonic = hit
            logger.debug("%s at offset %d", mnemonic, i)
            findings.append(
                Finding(
                    Severity.CRITICAL,
                    finding_id,
                    f"{mnemonic} opcode (0x{opcode:02X}) found at byte offset {i}",
                )
            )

        if PUSH1 <= opcode <= PUSH32:
            i += 1 + (opcode - PUSH1 + 1)
        else:
            i += 1

    return findings


def estimate_deploy_gas(bytecode: str) -> int:
    """Rough deployment cost: base transaction gas plus a flat per-byte charge."""
    text = normalize_hex(bytecode)
    if not is_valid_hex(text):
        raise ValueError("bytecode is not valid hex")
    return BASE_DEPLOY_GAS + (len(text) // 2) * GAS_PER_BYTE
