"""
Ownership Registry Client
=========================

[REGISTRY] Deployment of and calls into AnonOwnershipRegistry.

The registry verifies a Semaphore proof against its group and records the
object hash as claimed. The same identity can later prove ownership again
with a fresh proof.
"""

import logging
from typing import Any, Dict, Optional, Sequence, Union

from core.proof import proof_as_list
from registry.chain import ChainManager
from registry.contracts import REGISTRY_ABI, ArtifactStore, ContractCompiler, load_contract

logger = logging.getLogger(__name__)

ObjectHash = Union[str, bytes]


def to_bytes32(object_hash: ObjectHash) -> bytes:
    """Accept 0x-hex or raw bytes and return exactly 32 bytes."""
    if isinstance(object_hash, (bytes, bytearray)):
        value = bytes(object_hash)
    else:
        text = object_hash[2:] if object_hash.startswith("0x") else object_hash
        try:
            value = bytes.fromhex(text)
        except ValueError:
            raise ValueError(f"Object hash is not hex: {object_hash!r}") from None
    if len(value) != 32:
        raise ValueError(f"Object hash must be 32 bytes, got {len(value)}")
    return value


class OwnershipRegistry:
    """
    AnonOwnershipRegistry operations.

    [USAGE]
        registry = OwnershipRegistry(chain, address)
        if not registry.is_claimed(object_hash):
            registry.claim(object_hash, 1, root, nullifier, points)
    """

    CONTRACT_NAME = "AnonOwnershipRegistry"

    def __init__(self, chain: ChainManager, address: Optional[str] = None):
        self.chain = chain
        self.address = address
        self.contract = chain.contract(address, REGISTRY_ABI) if address else None

    def _require_contract(self):
        if self.contract is None:
            raise ValueError("Registry contract not connected")
        return self.contract

    def deploy(
        self,
        semaphore_address: str,
        group_id: int,
        store: Optional[ArtifactStore] = None,
        compiler: Optional[ContractCompiler] = None,
    ) -> str:
        """Deploy the registry bound to a Semaphore instance and group."""
        artifact = load_contract(self.CONTRACT_NAME, store, compiler)
        logger.info(f"[REGISTRY] Deploying {self.CONTRACT_NAME} (semaphore={semaphore_address}, group={group_id})")
        self.address = self.chain.deploy(artifact.abi, artifact.bytecode, semaphore_address, group_id)
        self.contract = self.chain.contract(self.address, REGISTRY_ABI)
        logger.info(f"[REGISTRY] {self.CONTRACT_NAME}: {self.address}")
        return self.address

    def is_claimed(self, object_hash: ObjectHash) -> bool:
        return bool(self._require_contract().functions.claimed(to_bytes32(object_hash)).call())

    def claim(
        self,
        object_hash: ObjectHash,
        merkle_tree_depth: int,
        merkle_tree_root: int,
        nullifier: int,
        points: Union[Sequence[int], Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Submit claimOwnership; points in any shape pack_proof accepts."""
        function = self._require_contract().functions.claimOwnership(
            to_bytes32(object_hash),
            merkle_tree_depth,
            merkle_tree_root,
            nullifier,
            proof_as_list(points),
        )
        receipt = self.chain.send(function)
        logger.info(f"[REGISTRY] Ownership claimed for {_hash_text(object_hash)}")
        return receipt

    def prove(
        self,
        object_hash: ObjectHash,
        merkle_tree_depth: int,
        merkle_tree_root: int,
        nullifier: int,
        points: Union[Sequence[int], Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Submit proveOwnership."""
        function = self._require_contract().functions.proveOwnership(
            to_bytes32(object_hash),
            merkle_tree_depth,
            merkle_tree_root,
            nullifier,
            proof_as_list(points),
        )
        receipt = self.chain.send(function)
        logger.info(f"[REGISTRY] Ownership proven for {_hash_text(object_hash)}")
        return receipt


def _hash_text(object_hash: ObjectHash) -> str:
    if isinstance(object_hash, (bytes, bytearray)):
        return "0x" + bytes(object_hash).hex()
    return object_hash
