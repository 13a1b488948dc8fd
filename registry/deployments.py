"""
Deployment Records
==================

[CHAIN] Addresses produced by the deploy scripts are kept in
deployments/<network>.json so later runs (and humans) can find them.

    {
      "network": "localhost",
      "chain_id": 31337,
      "contracts": {"Semaphore": "0x...", "AnonOwnershipRegistry": "0x..."},
      "groupId": 0,
      "updated_at": "2026-01-01T00:00:00Z"
    }
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def deployment_path(deployments_dir: Path, network: str) -> Path:
    return Path(deployments_dir) / f"{network}.json"


def load_deployment(deployments_dir: Path, network: str) -> Dict[str, Any]:
    """Existing record for network, or an empty dict."""
    path = deployment_path(deployments_dir, network)
    if not path.exists():
        return {}
    try:
        return json.loads(path.read_text())
    except ValueError as e:
        logger.warning(f"[CHAIN] Ignoring unreadable deployment record {path}: {e}")
        return {}


def save_deployment(
    deployments_dir: Path,
    network: str,
    chain_id: int,
    contracts: Dict[str, str],
    group_id: Optional[int] = None,
    **extra: Any,
) -> Path:
    """
    Merge contract addresses into the network's record.

    Returns:
        Path of the written file
    """
    path = deployment_path(deployments_dir, network)
    record = load_deployment(deployments_dir, network)

    record["network"] = network
    record["chain_id"] = chain_id
    record.setdefault("contracts", {}).update(contracts)
    if group_id is not None:
        record["groupId"] = group_id
    record.update(extra)
    record["updated_at"] = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(record, indent=2) + "\n")
    logger.info(f"[CHAIN] Deployment saved to {path}")
    return path
