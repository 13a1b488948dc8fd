"""
Tooling Configuration
=====================
Network presets and environment-driven settings for the deployment and
claim scripts. Values come from the process environment, optionally seeded
from a .env file.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import math
import os

from core.exceptions import ConfigError

PROJECT_ROOT = Path(__file__).parent

# ============================================================================
# Network Presets
# ============================================================================

NETWORKS: Dict[str, Dict[str, object]] = {
    "localhost": {
        "name": "Localhost",
        "chain_id": 31337,
        "rpc_url": "http://127.0.0.1:8545",
    },
    "hardhat": {
        "name": "Hardhat Network",
        "chain_id": 31337,
        "rpc_url": "http://127.0.0.1:8545",
    },
}

DEFAULT_NETWORK = "localhost"

# Compiler settings (kept in step with the Hardhat project that owns the sources)
SOLC_VERSION = "0.8.23"
OPTIMIZER_RUNS = 200

# Semaphore group defaults
DEFAULT_GROUP_TREE_DEPTH = 20
# Minimum depth accepted by the Semaphore verifier
DEFAULT_CLAIM_TREE_DEPTH = 1

POSEIDON_LIBRARY = "poseidon-solidity/PoseidonT3.sol:PoseidonT3"

DEFAULT_BRIDGE_SCRIPT = PROJECT_ROOT / "registry" / "bridge" / "semaphore_bridge.mjs"

ENV_NAMES = {
    "rpc_url": "RPC_URL",
    "private_key": "PRIVATE_KEY",
    "semaphore_address": "SEMAPHORE_ADDRESS",
    "group_id": "GROUP_ID",
    "user_id_seed": "USER_ID_SEED",
    "registry_address": "OWNERSHIP_REGISTRY_ADDRESS",
}


def _env(name: str, environ: Dict[str, str]) -> str:
    value = environ.get(name, "").strip()
    # Unset shell expansions end up as the literal string "undefined"
    if value in ("undefined", "null"):
        return ""
    return value


def _env_int(name: str, environ: Dict[str, str], default: Optional[int]) -> Optional[int]:
    raw = _env(name, environ)
    if not raw:
        return default
    try:
        return int(raw, 0)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _env_seconds(name: str, environ: Dict[str, str], default: float) -> float:
    raw = _env(name, environ)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"{name} must be a positive number of seconds, got {raw!r}")
    return value


def load_env_file(env_file: Optional[str] = None) -> bool:
    """Load .env into os.environ (existing variables win)."""
    from dotenv import load_dotenv

    if env_file:
        candidates = [Path(env_file)]
    else:
        candidates = [Path.cwd() / ".env", PROJECT_ROOT / ".env"]
    for path in candidates:
        if path.exists():
            return load_dotenv(path)
    return False


@dataclass
class Settings:
    """Resolved configuration for one script run."""

    network: str = DEFAULT_NETWORK
    rpc_url: str = str(NETWORKS[DEFAULT_NETWORK]["rpc_url"])
    chain_id: int = int(NETWORKS[DEFAULT_NETWORK]["chain_id"])  # type: ignore[arg-type]
    private_key: str = ""

    semaphore_address: str = ""
    group_id: Optional[int] = None
    user_id_seed: str = ""
    registry_address: str = ""

    group_tree_depth: int = DEFAULT_GROUP_TREE_DEPTH
    claim_tree_depth: int = DEFAULT_CLAIM_TREE_DEPTH

    artifacts_dir: Path = PROJECT_ROOT / "artifacts"
    contracts_dir: Path = PROJECT_ROOT / "contracts"
    node_modules_dir: Path = PROJECT_ROOT / "node_modules"
    deployments_dir: Path = PROJECT_ROOT / "deployments"

    node_binary: str = "node"
    bridge_script: Path = DEFAULT_BRIDGE_SCRIPT
    bridge_timeout: float = 300.0

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "Settings":
        environ = dict(os.environ if environ is None else environ)

        network = (_env("NETWORK", environ) or DEFAULT_NETWORK).lower()
        if network not in NETWORKS:
            raise ConfigError(
                f"Unknown NETWORK {network!r}; expected one of {', '.join(sorted(NETWORKS))}"
            )
        preset = NETWORKS[network]

        private_key = _env("PRIVATE_KEY", environ)
        if private_key and not private_key.startswith("0x"):
            private_key = "0x" + private_key

        def _path(name: str, default: Path) -> Path:
            raw = _env(name, environ)
            return Path(raw) if raw else default

        return cls(
            network=network,
            rpc_url=_env("RPC_URL", environ) or str(preset["rpc_url"]),
            chain_id=int(preset["chain_id"]),  # type: ignore[arg-type]
            private_key=private_key,
            semaphore_address=_env("SEMAPHORE_ADDRESS", environ),
            group_id=_env_int("GROUP_ID", environ, None),
            user_id_seed=_env("USER_ID_SEED", environ),
            registry_address=(
                _env("OWNERSHIP_REGISTRY_ADDRESS", environ) or _env("REGISTRY_ADDRESS", environ)
            ),
            group_tree_depth=_env_int("GROUP_TREE_DEPTH", environ, DEFAULT_GROUP_TREE_DEPTH),
            claim_tree_depth=_env_int("CLAIM_TREE_DEPTH", environ, DEFAULT_CLAIM_TREE_DEPTH),
            artifacts_dir=_path("ARTIFACTS_DIR", PROJECT_ROOT / "artifacts"),
            contracts_dir=_path("CONTRACTS_DIR", PROJECT_ROOT / "contracts"),
            node_modules_dir=_path("NODE_MODULES_DIR", PROJECT_ROOT / "node_modules"),
            deployments_dir=_path("DEPLOYMENTS_DIR", PROJECT_ROOT / "deployments"),
            node_binary=_env("NODE_BINARY", environ) or "node",
            bridge_script=_path("SEMAPHORE_BRIDGE", DEFAULT_BRIDGE_SCRIPT),
            bridge_timeout=_env_seconds("BRIDGE_TIMEOUT", environ, 300.0),
        )

    def require(self, *names: str) -> None:
        """
        Ensure settings are present.

        Args:
            names: Attribute names (see ENV_NAMES)

        Raises:
            ConfigError: listing the environment variables that are missing
        """
        missing = []
        for name in names:
            value = getattr(self, name)
            if value is None or value == "":
                missing.append(ENV_NAMES.get(name, name.upper()))
        if missing:
            raise ConfigError(f"{', '.join(missing)} not set in environment", missing=missing)


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Load .env, then resolve Settings from the environment."""
    load_env_file(env_file)
    return Settings.from_env()
