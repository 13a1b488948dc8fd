"""
Script Wiring
=============

[CLI] Builds connected managers from Settings so every script wires the
chain, artifacts and SDK the same way.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

from config import Settings
from registry.chain import ChainManager
from registry.contracts import ArtifactStore, ContractCompiler
from registry.ownership import OwnershipRegistry
from registry.sdk import SemaphoreSDK
from registry.semaphore import SemaphoreManager
from registry.workflow import ClaimWorkflow

logger = logging.getLogger(__name__)


def contract_sources(settings: Settings) -> Tuple[ArtifactStore, ContractCompiler]:
    """Artifact store and fallback compiler for the configured directories."""
    store = ArtifactStore(settings.artifacts_dir)
    compiler = ContractCompiler(settings.contracts_dir, settings.node_modules_dir)
    return store, compiler


def connect_chain(settings: Settings) -> Tuple[ChainManager, int]:
    """Connected ChainManager and the endpoint's chain id."""
    chain = ChainManager(settings.rpc_url, settings.private_key or None)
    chain_id = chain.connect()
    if chain_id != settings.chain_id:
        logger.warning(
            f"[CHAIN] Endpoint chain id {chain_id} differs from {settings.network} preset {settings.chain_id}"
        )
    return chain, chain_id


def build_sdk(settings: Settings) -> SemaphoreSDK:
    return SemaphoreSDK(
        node_binary=settings.node_binary,
        bridge_script=settings.bridge_script,
        timeout=settings.bridge_timeout,
    )


def build_workflow(
    settings: Settings,
    chain: ChainManager,
    members: Sequence[int] = (),
    sdk: Optional[SemaphoreSDK] = None,
) -> ClaimWorkflow:
    """ClaimWorkflow for the configured identity, group and registry."""
    settings.require("semaphore_address", "group_id", "user_id_seed", "registry_address")
    return ClaimWorkflow(
        sdk=sdk or build_sdk(settings),
        semaphore=SemaphoreManager(chain, address=settings.semaphore_address),
        registry=OwnershipRegistry(chain, address=settings.registry_address),
        group_id=settings.group_id,
        seed=settings.user_id_seed,
        claim_tree_depth=settings.claim_tree_depth,
        members=members,
    )


def load_object(text: Optional[str] = None, path: Optional[str] = None, default: Any = None) -> Any:
    """
    JSON object from --object text or --file path, else default.

    Raises:
        ValueError: on invalid JSON
    """
    if text is not None and path is not None:
        raise ValueError("Use either --object or --file, not both")
    if path is not None:
        text = Path(path).read_text(encoding="utf-8")
    if text is None:
        return default
    try:
        return json.loads(text)
    except ValueError as e:
        raise ValueError(f"Invalid JSON object: {e}") from None


def parse_members(values: Sequence[str]) -> list:
    """Member commitments from repeated/comma-separated --member options."""
    members = []
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if part:
                members.append(int(part, 0))
    return members
