"""
Proof Packing
=============

[ZK] Groth16 proofs come out of the prover as {pi_a, pi_b, pi_c}. The
Semaphore verifier contract takes them as a flat uint256[8]:

    [a0, a1, b01, b00, b11, b10, c0, c1]

The two coordinates of each pi_b pair are swapped (Fq2 elements are ordered
(imaginary, real) on the EVM side). Flat 8-element arrays are assumed to be
packed already and pass through unchanged.
"""

import json
import logging
from typing import Any, List, Sequence, Tuple, Union

from core.exceptions import UnsupportedProofError

logger = logging.getLogger(__name__)

PackedProof = Tuple[int, int, int, int, int, int, int, int]

Numeric = Union[int, str]


def to_uint(value: Numeric) -> int:
    """Parse an int, decimal string or 0x-hex string into a non-negative int."""
    if isinstance(value, bool):
        raise UnsupportedProofError(f"Unsupported proof value: {value!r}")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            if text.lower().startswith("0x"):
                result = int(text, 16)
            else:
                result = int(text, 10)
        except ValueError:
            raise UnsupportedProofError(f"Unsupported proof value: {value!r}") from None
    else:
        raise UnsupportedProofError(f"Unsupported proof value: {value!r}")

    if result < 0:
        raise UnsupportedProofError(f"Proof values must be unsigned: {value!r}")
    return result


def _has_points(obj: Any) -> bool:
    return isinstance(obj, dict) and all(obj.get(key) for key in ("pi_a", "pi_b", "pi_c"))


def _pack_points(pi_a: Sequence, pi_b: Sequence[Sequence], pi_c: Sequence) -> PackedProof:
    try:
        return (
            to_uint(pi_a[0]), to_uint(pi_a[1]),
            to_uint(pi_b[0][1]), to_uint(pi_b[0][0]),
            to_uint(pi_b[1][1]), to_uint(pi_b[1][0]),
            to_uint(pi_c[0]), to_uint(pi_c[1]),
        )
    except (IndexError, KeyError, TypeError) as e:
        raise UnsupportedProofError(f"Unsupported proof structure: malformed points ({e})") from e


def _describe(proof: Any) -> str:
    try:
        return json.dumps(proof, default=str)
    except (TypeError, ValueError):
        return repr(proof)


def pack_proof(proof: Any) -> PackedProof:
    """
    Reorder a proof into the verifier's uint256[8] calling convention.

    Accepted shapes:
        {"proof": {"pi_a": ..., "pi_b": ..., "pi_c": ...}}
        {"pi_a": ..., "pi_b": ..., "pi_c": ...}
        [p0, p1, p2, p3, p4, p5, p6, p7]

    Raises:
        UnsupportedProofError: for anything else
    """
    logger.debug(f"[ZK] Raw proof structure: {_describe(proof)}")

    if isinstance(proof, dict) and _has_points(proof.get("proof")):
        inner = proof["proof"]
        return _pack_points(inner["pi_a"], inner["pi_b"], inner["pi_c"])

    if _has_points(proof):
        return _pack_points(proof["pi_a"], proof["pi_b"], proof["pi_c"])

    if isinstance(proof, (list, tuple)) and len(proof) == 8:
        return tuple(to_uint(p) for p in proof)  # type: ignore[return-value]

    raise UnsupportedProofError(f"Unsupported proof structure: {_describe(proof)}")


def proof_as_list(proof: Any) -> List[int]:
    """pack_proof() as a list, the form web3 expects for uint256[8]."""
    return list(pack_proof(proof))
