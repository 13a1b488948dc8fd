"""
Semaphore SDK Bridge
====================

[SDK] Identities, groups and proofs come from the JavaScript Semaphore SDK
(@semaphore-protocol/identity, /group, /proof). This module drives it through
a small Node.js helper (bridge/semaphore_bridge.mjs):

    stdin : {"command": "...", ...}      one JSON request
    stdout: {"ok": true, "result": ...}  one JSON response

Big integers cross the boundary as decimal strings.

Setup:
    cd registry/bridge && npm install
"""

import json
import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from config import DEFAULT_BRIDGE_SCRIPT
from core.exceptions import SemaphoreBridgeError

logger = logging.getLogger(__name__)

BigIntLike = Union[int, str]


@dataclass
class LocalGroup:
    """Off-chain mirror of a Semaphore group."""
    members: List[int]
    size: int
    root: int
    depth: int = 0


@dataclass
class SemaphoreProof:
    """Output of generateProof()."""
    merkle_tree_depth: int
    merkle_tree_root: int
    nullifier: int
    message: int
    scope: int
    points: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SemaphoreProof":
        return cls(
            merkle_tree_depth=int(data["merkleTreeDepth"]),
            merkle_tree_root=int(data["merkleTreeRoot"]),
            nullifier=int(data["nullifier"]),
            message=int(data["message"]),
            scope=int(data["scope"]),
            points=data["points"],
        )


class SemaphoreSDK:
    """
    Client for the Node.js Semaphore helper.

    [USAGE]
        sdk = SemaphoreSDK()
        commitment = sdk.commitment(seed)
        group = sdk.group([commitment])
        proof = sdk.generate_proof(seed, [commitment], scope=field, message=field)
    """

    def __init__(
        self,
        node_binary: str = "node",
        bridge_script: Path = DEFAULT_BRIDGE_SCRIPT,
        timeout: float = 300.0,
    ):
        self.node_binary = node_binary
        self.bridge_script = Path(bridge_script)
        self.timeout = timeout

    def _call(self, command: str, **params: Any) -> Any:
        request = json.dumps({"command": command, **params})
        cmd = [self.node_binary, str(self.bridge_script)]
        logger.debug(f"[SDK] {command} via {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                input=request,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            raise SemaphoreBridgeError(
                f"Node.js binary not found: {self.node_binary} (set NODE_BINARY)"
            ) from None
        except subprocess.TimeoutExpired as e:
            raise SemaphoreBridgeError(
                f"Semaphore helper timed out after {self.timeout}s on {command}",
                stderr=e.stderr if isinstance(e.stderr, str) else "",
            ) from e

        try:
            response = json.loads(result.stdout)
        except ValueError:
            response = None

        if isinstance(response, dict) and response.get("ok") and result.returncode == 0:
            return response["result"]

        if isinstance(response, dict) and response.get("error"):
            message = f"Semaphore helper error on {command}: {response['error']}"
        elif result.returncode != 0:
            message = f"Semaphore helper failed on {command} (exit {result.returncode})"
        elif response is None:
            message = f"Semaphore helper returned invalid JSON for {command}"
        else:
            message = f"Semaphore helper error on {command}: {response!r}"
        raise SemaphoreBridgeError(message, stderr=result.stderr, returncode=result.returncode)

    # ========================================================================
    # Identity & Group
    # ========================================================================

    def commitment(self, seed: str) -> int:
        """Identity commitment of new Identity(seed); the same seed gives the same identity."""
        result = self._call("commitment", seed=seed)
        return int(result["commitment"])

    def group(self, members: Sequence[BigIntLike]) -> LocalGroup:
        """Build a local group from identity commitments."""
        result = self._call("group", members=[str(m) for m in members])
        return LocalGroup(
            members=[int(m) for m in result["members"]],
            size=int(result["size"]),
            root=int(result["root"]),
            depth=int(result.get("depth", 0)),
        )

    # ========================================================================
    # Proofs
    # ========================================================================

    def generate_proof(
        self,
        seed: str,
        members: Sequence[BigIntLike],
        scope: BigIntLike,
        message: BigIntLike,
        merkle_tree_depth: Optional[int] = None,
    ) -> SemaphoreProof:
        """
        Generate a membership proof.

        Args:
            seed: Identity secret
            members: Group members, in insertion order
            scope: External nullifier
            message: Signal
            merkle_tree_depth: Circuit depth (default: SDK picks from group size)
        """
        params: Dict[str, Any] = {
            "seed": seed,
            "members": [str(m) for m in members],
            "scope": str(scope),
            "message": str(message),
        }
        if merkle_tree_depth is not None:
            params["merkleTreeDepth"] = merkle_tree_depth

        result = self._call("prove", **params)
        proof = SemaphoreProof.from_dict(result)
        logger.info(f"[SDK] Proof generated: root={proof.merkle_tree_root}, nullifier={proof.nullifier}")
        return proof
