"""
Claim Workflow
==============

[CLAIM] Sequencing for anonymous ownership claims:

1. Derive the identity commitment from USER_ID_SEED
2. Read the on-chain group; build the local mirror of its members
3. Hash the object: objectHash = keccak256(canonical_json(obj))
4. Generate a Semaphore proof with scope = message = uint(objectHash)
5. claimOwnership / proveOwnership on the registry

The proof only verifies if the local group's root matches the on-chain root,
so a mismatch is reported before any proof is generated.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from config import DEFAULT_CLAIM_TREE_DEPTH
from core.canonical import canonical_json, object_hash, object_hash_field
from registry.ownership import OwnershipRegistry
from registry.sdk import LocalGroup, SemaphoreProof, SemaphoreSDK
from registry.semaphore import GroupInfo, SemaphoreManager

logger = logging.getLogger(__name__)

ACTION_CLAIM = "claim"
ACTION_PROVE = "prove"


@dataclass
class ClaimTarget:
    """An object together with its claim identifier."""
    obj: Any
    canonical: str
    object_hash: str
    hash_field: int


@dataclass
class ClaimResult:
    """What a workflow run did on-chain."""
    target: ClaimTarget
    already_claimed: bool = False
    actions: List[str] = field(default_factory=list)
    proofs: List[SemaphoreProof] = field(default_factory=list)
    receipts: List[Dict[str, Any]] = field(default_factory=list)


class ClaimWorkflow:
    """
    Claim/prove orchestration for one identity and one group.

    [USAGE]
        workflow = ClaimWorkflow(sdk, semaphore, registry, group_id, seed)
        workflow.check_group()
        result = workflow.claim_and_prove({"a": 1})
    """

    def __init__(
        self,
        sdk: SemaphoreSDK,
        semaphore: SemaphoreManager,
        registry: OwnershipRegistry,
        group_id: int,
        seed: str,
        claim_tree_depth: int = DEFAULT_CLAIM_TREE_DEPTH,
        members: Sequence[int] = (),
    ):
        """
        Args:
            sdk: Semaphore SDK bridge
            semaphore: Connected Semaphore manager
            registry: Connected ownership registry
            group_id: Semaphore group the registry is bound to
            seed: Identity secret (USER_ID_SEED)
            claim_tree_depth: Minimum tree depth submitted with each proof
            members: Group members in insertion order; the own commitment is
                appended when missing
        """
        self.sdk = sdk
        self.semaphore = semaphore
        self.registry = registry
        self.group_id = group_id
        self.seed = seed
        self.claim_tree_depth = claim_tree_depth
        self._members = [int(m) for m in members]
        self._commitment: Optional[int] = None
        self._local_group: Optional[LocalGroup] = None

    # ========================================================================
    # Identity & Group
    # ========================================================================

    @property
    def commitment(self) -> int:
        if self._commitment is None:
            self._commitment = self.sdk.commitment(self.seed)
            logger.info(f"[CLAIM] Identity commitment: {self._commitment}")
        return self._commitment

    @property
    def members(self) -> List[int]:
        members = list(self._members)
        if self.commitment not in members:
            members.append(self.commitment)
        return members

    def onchain_group(self) -> GroupInfo:
        info = self.semaphore.group_info(self.group_id)
        logger.info(f"[CLAIM] On-chain group {self.group_id}: size={info.size}, depth={info.depth}, root={info.root}")
        return info

    def local_group(self) -> LocalGroup:
        if self._local_group is None:
            self._local_group = self.sdk.group(self.members)
            logger.info(f"[CLAIM] Local group: size={self._local_group.size}, root={self._local_group.root}")
        return self._local_group

    def check_group(self) -> bool:
        """
        Compare the local mirror with the on-chain group.

        Returns:
            True when the roots match
        """
        onchain = self.onchain_group()
        local = self.local_group()
        if onchain.root != local.root:
            logger.warning(
                f"[CLAIM] Local root {local.root} differs from on-chain root {onchain.root} "
                f"(local size {local.size}, on-chain size {onchain.size}); "
                f"pass every member commitment in insertion order"
            )
            return False
        return True

    # ========================================================================
    # Steps
    # ========================================================================

    @staticmethod
    def prepare(obj: Any) -> ClaimTarget:
        """Hash an object into its claim identifier."""
        target = ClaimTarget(
            obj=obj,
            canonical=canonical_json(obj),
            object_hash=object_hash(obj),
            hash_field=object_hash_field(obj),
        )
        logger.info(f"[CLAIM] Object {target.canonical} -> {target.object_hash}")
        return target

    def generate(self, target: ClaimTarget) -> SemaphoreProof:
        """Membership proof bound to the object (scope = message = hash field)."""
        return self.sdk.generate_proof(
            self.seed,
            self.members,
            scope=target.hash_field,
            message=target.hash_field,
        )

    def submitted_depth(self, proof: SemaphoreProof) -> int:
        return max(self.claim_tree_depth, proof.merkle_tree_depth)

    def claim(self, target: ClaimTarget, proof: SemaphoreProof) -> Dict[str, Any]:
        depth = self.submitted_depth(proof)
        logger.info(f"[CLAIM] Claiming {target.object_hash} (depth {depth})")
        return self.registry.claim(
            target.object_hash, depth, proof.merkle_tree_root, proof.nullifier, proof.points,
        )

    def prove(self, target: ClaimTarget, proof: SemaphoreProof) -> Dict[str, Any]:
        depth = self.submitted_depth(proof)
        logger.info(f"[CLAIM] Proving {target.object_hash} (depth {depth})")
        return self.registry.prove(
            target.object_hash, depth, proof.merkle_tree_root, proof.nullifier, proof.points,
        )

    # ========================================================================
    # Flows
    # ========================================================================

    def _run(self, result: ClaimResult, action: str) -> None:
        proof = self.generate(result.target)
        result.proofs.append(proof)
        step = self.claim if action == ACTION_CLAIM else self.prove
        result.receipts.append(step(result.target, proof))
        result.actions.append(action)

    def claim_and_prove(self, obj: Any) -> ClaimResult:
        """Claim the object, then prove ownership again with a fresh proof."""
        result = ClaimResult(target=self.prepare(obj))
        self._run(result, ACTION_CLAIM)
        self._run(result, ACTION_PROVE)
        return result

    def claim_or_prove(self, obj: Any) -> ClaimResult:
        """
        Prove ownership if the object is already claimed, otherwise claim it
        and prove again.
        """
        target = self.prepare(obj)
        result = ClaimResult(target=target, already_claimed=self.registry.is_claimed(target.object_hash))
        logger.info(f"[CLAIM] Already claimed: {result.already_claimed}")

        if result.already_claimed:
            self._run(result, ACTION_PROVE)
        else:
            self._run(result, ACTION_CLAIM)
            self._run(result, ACTION_PROVE)
        return result
