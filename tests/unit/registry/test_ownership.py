"""
Ownership Registry Unit Tests
=============================

[REGISTRY] claimOwnership / proveOwnership argument encoding.
"""

import pytest

REGISTRY = "0x" + "44" * 20
OBJECT_HASH = "0x" + "ab" * 32
POINTS = {
    "pi_a": ["1", "2"],
    "pi_b": [["3", "4"], ["5", "6"]],
    "pi_c": ["7", "8"],
}


class TestToBytes32:
    """Test object hash coercion."""

    def test_hex(self):
        from registry.ownership import to_bytes32

        assert to_bytes32(OBJECT_HASH) == bytes.fromhex("ab" * 32)

    def test_unprefixed_hex(self):
        from registry.ownership import to_bytes32

        assert to_bytes32("ab" * 32) == bytes.fromhex("ab" * 32)

    def test_bytes(self):
        from registry.ownership import to_bytes32

        assert to_bytes32(b"\x01" * 32) == b"\x01" * 32

    def test_wrong_length(self):
        from registry.ownership import to_bytes32

        with pytest.raises(ValueError, match="32 bytes"):
            to_bytes32("0x1234")

    def test_not_hex(self):
        from registry.ownership import to_bytes32

        with pytest.raises(ValueError, match="not hex"):
            to_bytes32("0xzz")


class TestOwnershipRegistry:
    """Test registry calls."""

    def test_claim(self, mock_chain):
        from registry.ownership import OwnershipRegistry

        registry = OwnershipRegistry(mock_chain, REGISTRY)
        functions = mock_chain.contracts[REGISTRY].functions

        receipt = registry.claim(OBJECT_HASH, 1, 999, 77, POINTS)

        functions.claimOwnership.assert_called_once_with(
            bytes.fromhex("ab" * 32), 1, 999, 77, [1, 2, 4, 3, 6, 5, 7, 8],
        )
        mock_chain.send.assert_called_once_with(functions.claimOwnership.return_value)
        assert receipt["status"] == 1

    def test_prove_packed_points(self, mock_chain):
        """Already-packed points pass through unchanged."""
        from registry.ownership import OwnershipRegistry

        registry = OwnershipRegistry(mock_chain, REGISTRY)
        functions = mock_chain.contracts[REGISTRY].functions

        registry.prove(OBJECT_HASH, 1, 999, 78, [str(i) for i in range(8)])

        functions.proveOwnership.assert_called_once_with(
            bytes.fromhex("ab" * 32), 1, 999, 78, [0, 1, 2, 3, 4, 5, 6, 7],
        )

    def test_bad_proof_not_sent(self, mock_chain):
        from core.exceptions import UnsupportedProofError
        from registry.ownership import OwnershipRegistry

        registry = OwnershipRegistry(mock_chain, REGISTRY)

        with pytest.raises(UnsupportedProofError):
            registry.claim(OBJECT_HASH, 1, 999, 77, [1, 2, 3])
        mock_chain.send.assert_not_called()

    def test_is_claimed(self, mock_chain):
        from registry.ownership import OwnershipRegistry

        registry = OwnershipRegistry(mock_chain, REGISTRY)
        functions = mock_chain.contracts[REGISTRY].functions
        functions.claimed.return_value.call.return_value = True

        assert registry.is_claimed(OBJECT_HASH) is True
        functions.claimed.assert_called_once_with(bytes.fromhex("ab" * 32))

    def test_deploy(self, mock_chain, artifacts_dir):
        from registry.contracts import ArtifactStore
        from registry.ownership import OwnershipRegistry

        mock_chain.deploy.return_value = REGISTRY
        registry = OwnershipRegistry(mock_chain)

        address = registry.deploy("0xsemaphore", 0, ArtifactStore(artifacts_dir))

        assert address == REGISTRY
        assert registry.address == REGISTRY
        mock_chain.deploy.assert_called_once_with([], "0x6005", "0xsemaphore", 0)

    def test_requires_contract(self, mock_chain):
        from registry.ownership import OwnershipRegistry

        with pytest.raises(ValueError, match="not connected"):
            OwnershipRegistry(mock_chain).is_claimed(OBJECT_HASH)
