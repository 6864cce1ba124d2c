"""Global configuration: XDG paths, env vars, defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from solguard.scanner.engine import DEFAULT_MAX_FILE_SIZE


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "solguard"
    return Path.home() / ".config" / "solguard"


@dataclass
class SolGuardConfig:
    """Application-wide configuration."""

    config_dir: Path = field(default_factory=_default_config_dir)
    policy_dirs: list[Path] = field(default_factory=list)
    policy_path: Path | None = None
    max_input_bytes: int = DEFAULT_MAX_FILE_SIZE
    verbose: bool = False

    @classmethod
    def load(cls) -> SolGuardConfig:
        """Load config from environment variables with XDG defaults."""
        config = cls()

        env_max = os.environ.get("SOLGUARD_MAX_INPUT_BYTES")
        if env_max:
            config.max_input_bytes = int(env_max)

        env_policy = os.environ.get("SOLGUARD_POLICY")
        if env_policy:
            config.policy_path = Path(env_policy)

        # Add config dir's policies/ subdirectory if it exists
        policies_dir = config.config_dir / "policies"
        if policies_dir.is_dir():
            config.policy_dirs.append(policies_dir)

        return config

    def find_policy(self, name: str) -> Path | None:
        """Look up <name>.yaml in the configured policy directories."""
        for directory in self.policy_dirs:
            candidate = directory / f"{name}.yaml"
            if candidate.is_file():
                return candidate
        return None
