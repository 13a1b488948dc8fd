"""
Semaphore Manager
=================

[SEMAPHORE] Deploys the Semaphore stack and manages groups on-chain.

Deployment order:
1. PoseidonT3 library
2. SemaphoreVerifier
3. Semaphore(verifier), linked against PoseidonT3
4. createGroup(admin, ...) -> groupId = groupCounter() - 1
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from config import DEFAULT_GROUP_TREE_DEPTH, POSEIDON_LIBRARY
from core.exceptions import GroupCreationError
from registry.chain import ChainManager
from registry.contracts import (
    SEMAPHORE_ABI,
    ArtifactStore,
    ContractCompiler,
    link_bytecode,
    load_contract,
)

logger = logging.getLogger(__name__)

# Tried in order; Semaphore releases differ in which overloads they expose.
CREATE_GROUP_SIGNATURES: Tuple[str, ...] = (
    "createGroup(address,uint256)",
    "createGroup(address)",
)


@dataclass
class GroupInfo:
    """On-chain view of a Semaphore group."""
    group_id: int
    size: int
    depth: int
    root: int
    admin: Optional[str] = None


@dataclass
class SemaphoreDeployment:
    """Addresses produced by deploy_stack()."""
    poseidon: str
    verifier: str
    semaphore: str
    group_id: int
    admin: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "PoseidonT3": self.poseidon,
            "SemaphoreVerifier": self.verifier,
            "Semaphore": self.semaphore,
            "groupId": self.group_id,
            "admin": self.admin,
        }


class SemaphoreManager:
    """
    Semaphore contract operations.

    [USAGE]
        manager = SemaphoreManager(chain, address=settings.semaphore_address)
        manager.add_member(group_id, commitment)
        info = manager.group_info(group_id)
    """

    def __init__(
        self,
        chain: ChainManager,
        address: Optional[str] = None,
        store: Optional[ArtifactStore] = None,
        compiler: Optional[ContractCompiler] = None,
    ):
        self.chain = chain
        self.store = store
        self.compiler = compiler
        self.address = address
        self.contract = chain.contract(address, SEMAPHORE_ABI) if address else None

    def _require_contract(self):
        if self.contract is None:
            raise ValueError("Semaphore contract not connected")
        return self.contract

    # ========================================================================
    # Deployment
    # ========================================================================

    def deploy_stack(self, depth: int = DEFAULT_GROUP_TREE_DEPTH) -> SemaphoreDeployment:
        """Deploy PoseidonT3, SemaphoreVerifier and Semaphore, then create a group."""
        poseidon_artifact = load_contract("PoseidonT3", self.store, self.compiler)
        logger.info("[SEMAPHORE] Deploying Poseidon library...")
        poseidon = self.chain.deploy(poseidon_artifact.abi, poseidon_artifact.bytecode)
        logger.info(f"[SEMAPHORE] PoseidonT3: {poseidon}")

        verifier_artifact = load_contract("SemaphoreVerifier", self.store, self.compiler)
        logger.info("[SEMAPHORE] Deploying verifier...")
        verifier = self.chain.deploy(verifier_artifact.abi, verifier_artifact.bytecode)
        logger.info(f"[SEMAPHORE] Verifier: {verifier}")

        semaphore_artifact = load_contract("Semaphore", self.store, self.compiler)
        bytecode = semaphore_artifact.bytecode
        if semaphore_artifact.needs_linking:
            bytecode = link_bytecode(
                bytecode,
                semaphore_artifact.link_references,
                {POSEIDON_LIBRARY: poseidon},
            )
        logger.info("[SEMAPHORE] Deploying Semaphore...")
        semaphore = self.chain.deploy(semaphore_artifact.abi, bytecode, verifier)
        logger.info(f"[SEMAPHORE] Semaphore: {semaphore}")

        self.address = semaphore
        self.contract = self.chain.contract(semaphore, SEMAPHORE_ABI)

        admin = self.chain.sender
        group_id = self.create_group(admin, depth)

        return SemaphoreDeployment(
            poseidon=poseidon,
            verifier=verifier,
            semaphore=semaphore,
            group_id=group_id,
            admin=admin,
        )

    # ========================================================================
    # Groups
    # ========================================================================

    def create_group(
        self,
        admin: str,
        depth: int = DEFAULT_GROUP_TREE_DEPTH,
        signatures: Sequence[str] = CREATE_GROUP_SIGNATURES,
    ) -> int:
        """
        Create a group, falling back through createGroup overloads.

        Returns:
            New group id (groupCounter() - 1)

        Raises:
            GroupCreationError: every variant failed
        """
        contract = self._require_contract()
        attempts: List[Tuple[str, str]] = []

        for signature in signatures:
            args = (admin, depth) if signature.endswith("uint256)") else (admin,)
            logger.info(f"[SEMAPHORE] Trying {signature}")
            try:
                function = contract.get_function_by_signature(signature)
                self.chain.send(function(*args))
            except Exception as e:
                logger.warning(f"[SEMAPHORE] {signature} failed: {e}")
                attempts.append((signature, str(e)))
                continue

            group_id = contract.functions.groupCounter().call() - 1
            logger.info(f"[SEMAPHORE] Group created with {signature}, groupId={group_id}")
            return group_id

        raise GroupCreationError("All createGroup attempts failed", attempts=attempts)

    def add_member(self, group_id: int, commitment: int) -> Dict[str, Any]:
        """Add an identity commitment to a group (admin only)."""
        contract = self._require_contract()
        receipt = self.chain.send(contract.functions.addMember(group_id, commitment))
        logger.info(f"[SEMAPHORE] Added member {commitment} to group {group_id}")
        return receipt

    def group_admin(self, group_id: int) -> str:
        return self._require_contract().functions.getGroupAdmin(group_id).call()

    def group_info(self, group_id: int, with_admin: bool = False) -> GroupInfo:
        """Read size, depth and root of a group's Merkle tree."""
        functions = self._require_contract().functions
        info = GroupInfo(
            group_id=group_id,
            size=functions.getMerkleTreeSize(group_id).call(),
            depth=functions.getMerkleTreeDepth(group_id).call(),
            root=functions.getMerkleTreeRoot(group_id).call(),
        )
        if with_admin:
            info.admin = self.group_admin(group_id)
        return info
