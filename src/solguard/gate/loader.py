"""Load and resolve GatePolicy objects from YAML files."""

from __future__ import annotations

import importlib.resources
from pathlib import Path

import yaml

from solguard.gate.models import GatePolicy

_PRESET_PREFIX = "preset:"


def load_gate_policy(path: str | Path, _resolved: set[str] | None = None) -> GatePolicy:
    """Load a gate policy from a YAML file path."""
    text = Path(path).read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError("Gate policy YAML must be a mapping")
    return _build_policy(data, _resolved=_resolved if _resolved is not None else set())


def load_gate_policy_from_string(text: str) -> GatePolicy:
    """Parse a YAML string into a GatePolicy, resolving inheritance."""
    data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError("Gate policy YAML must be a mapping")
    return _build_policy(data, _resolved=set())


def load_preset(name: str) -> GatePolicy:
    """Load one of the bundled presets by name."""
    return _load_preset(name, set())


def _build_policy(data: dict, _resolved: set[str]) -> GatePolicy:
    name = data.get("name", "unnamed")

    # Circular inheritance detection. Only ancestors on this branch count,
    # so two parents sharing a base (a diamond) is fine.
    if name in _resolved:
        raise ValueError(f"Circular gate policy inheritance detected: {name}")
    ancestors = _resolved | {name}

    min_source = _parse_score(data.get("min_source_score", 0), "min_source_score")
    min_bytecode = _parse_score(
        data.get("min_bytecode_score", 0), "min_bytecode_score"
    )
    deny = _parse_ids(data.get("deny", []))
    require_bytecode = bool(data.get("require_bytecode", True))

    inherit_list = data.get("inherit", [])
    if isinstance(inherit_list, str):
        inherit_list = [inherit_list]

    # Inheritance only tightens: thresholds take the max, deny lists union
    for ref in inherit_list:
        parent = _load_ref(ref, ancestors)
        min_source = max(min_source, parent.min_source_score)
        min_bytecode = max(min_bytecode, parent.min_bytecode_score)
        deny = deny + tuple(d for d in parent.deny if d not in deny)
        require_bytecode = require_bytecode or parent.require_bytecode

    return GatePolicy(
        name=name,
        min_source_score=min_source,
        min_bytecode_score=min_bytecode,
        deny=deny,
        require_bytecode=require_bytecode,
        description=data.get("description", ""),
        inherit=tuple(inherit_list),
    )


def _parse_score(value, key: str) -> int:
    try:
        score = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be an integer, got {value!r}") from None
    if not 0 <= score <= 100:
        raise ValueError(f"{key} must be between 0 and 100, got {score}")
    return score


def _parse_ids(raw) -> tuple[str, ...]:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        raise ValueError("deny must be a list of finding ids")
    ids: list[str] = []
    for item in raw:
        item = str(item).strip().upper()
        if item and item not in ids:
            ids.append(item)
    return tuple(ids)


def _load_ref(ref: str, _resolved: set[str]) -> GatePolicy:
    if ref.startswith(_PRESET_PREFIX):
        preset_name = ref[len(_PRESET_PREFIX) :]
        return _load_preset(preset_name, _resolved)
    # Treat as file path
    return load_gate_policy(ref, _resolved=_resolved)


def _load_preset(name: str, _resolved: set[str]) -> GatePolicy:
    filename = f"{name}.yaml"
    pkg = importlib.resources.files("solguard.gate.presets")
    resource = pkg.joinpath(filename)
    if not resource.is_file():
        raise ValueError(f"Unknown gate policy preset: {name}")
    text = resource.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return _build_policy(data, _resolved)
