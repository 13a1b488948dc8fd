"""
Core Module
===========
Pure helpers shared by the registry clients and scripts:
- canonical: deterministic JSON + Keccak-256 claim identifiers
- proof: Groth16 proof packing into the verifier's uint256[8]
- exceptions: error hierarchy
- logger / console: logging setup and script output
"""

from .canonical import canonical_json, object_hash, object_hash_field
from .proof import pack_proof, proof_as_list
from .exceptions import (
    OwnershipToolError,
    ConfigError,
    UnsupportedProofError,
    SemaphoreBridgeError,
    TransactionFailedError,
    GroupCreationError,
)

__all__ = [
    "canonical_json",
    "object_hash",
    "object_hash_field",
    "pack_proof",
    "proof_as_list",
    "OwnershipToolError",
    "ConfigError",
    "UnsupportedProofError",
    "SemaphoreBridgeError",
    "TransactionFailedError",
    "GroupCreationError",
]
