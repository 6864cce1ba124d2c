"""Tests for the artifact scan engine."""

from __future__ import annotations

import json
from pathlib import Path

from solguard.scanner.engine import ScanEngine, extract_artifact_bytecode


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestExtractArtifactBytecode:
    def test_hardhat(self):
        assert extract_artifact_bytecode('{"bytecode": "0x6080"}') == "0x6080"

    def test_foundry(self):
        content = json.dumps({"bytecode": {"object": "0x6080", "linkReferences": {}}})
        assert extract_artifact_bytecode(content) == "0x6080"

    def test_solc_standard_json(self):
        content = json.dumps({"evm": {"bytecode": {"object": "6080"}}})
        assert extract_artifact_bytecode(content) == "6080"

    def test_interface_has_no_bytecode(self):
        assert extract_artifact_bytecode('{"bytecode": "0x"}') is None

    def test_not_an_artifact(self):
        assert extract_artifact_bytecode('{"name": "pkg"}') is None
        assert extract_artifact_bytecode("[1, 2]") is None
        assert extract_artifact_bytecode("not json") is None


class TestScanEngine:
    def test_scan_directory(self, tmp_path: Path, vault_source: str, safe_bytecode: str):
        _write(tmp_path / "contracts" / "Vault.sol", vault_source)
        _write(tmp_path / "out" / "Vault.bin", safe_bytecode + "\n")
        _write(
            tmp_path / "artifacts" / "Vault.json",
            json.dumps({"contractName": "Vault", "bytecode": safe_bytecode}),
        )
        _write(tmp_path / "README.md", "# not a contract")

        result = ScanEngine().scan(tmp_path)

        assert result.files_scanned == 3
        assert result.passed
        kinds = sorted(r.kind for r in result.reports)
        assert kinds == ["artifact", "bytecode", "source"]

    def test_failing_artifact(self, tmp_path: Path, upgradeable_source: str):
        _write(tmp_path / "Proxy.sol", upgradeable_source)
        _write(tmp_path / "Kill.json", json.dumps({"bytecode": {"object": "0xff"}}))

        result = ScanEngine().scan(tmp_path)

        assert not result.passed
        assert all(not r.passed for r in result.reports)

    def test_integrity_attached(self, tmp_path: Path, vault_source: str):
        path = _write(tmp_path / "Vault.sol", vault_source)
        result = ScanEngine().scan(path)

        assert result.files_scanned == 1
        report = result.reports[0]
        assert report.integrity.source_hash.startswith("0x")
        assert report.path == str(path.resolve())

    def test_skips_dependency_dirs(self, tmp_path: Path, upgradeable_source: str):
        _write(tmp_path / "node_modules" / "oz" / "Proxy.sol", upgradeable_source)
        _write(tmp_path / ".git" / "x.sol", upgradeable_source)

        result = ScanEngine().scan(tmp_path)
        assert result.reports == []
        assert result.passed

    def test_interface_artifact_skipped(self, tmp_path: Path):
        _write(tmp_path / "IVault.json", '{"bytecode": "0x"}')

        result = ScanEngine().scan(tmp_path)
        assert result.files_scanned == 0
        assert result.files_skipped == 1

    def test_size_cap(self, tmp_path: Path, vault_source: str):
        _write(tmp_path / "Vault.sol", vault_source)

        result = ScanEngine(max_file_size=10).scan(tmp_path)
        assert result.files_scanned == 0
        assert result.files_skipped == 1

    def test_exclude(self, tmp_path: Path, vault_source: str, upgradeable_source: str):
        _write(tmp_path / "keep" / "Vault.sol", vault_source)
        _write(tmp_path / "legacy" / "Proxy.sol", upgradeable_source)

        result = ScanEngine(exclude_patterns=["legacy"]).scan(tmp_path)
        paths = [r.path for r in result.reports]
        assert len(paths) == 1
        assert "legacy" not in paths[0]

    def test_to_dict(self, tmp_path: Path, vault_source: str):
        _write(tmp_path / "Vault.sol", vault_source)
        data = ScanEngine().scan(tmp_path).to_dict()
        assert data["passed"] is True
        assert data["filesScanned"] == 1
        assert data["reports"][0]["result"]["scanType"] == "source"
