"""
Test Configuration
==================

[QA] Central pytest configuration with fixtures for all test types:
- Unit tests: isolated, no RPC node, no Node.js

[FIXTURES]
- mock_w3: fake Web3 that records raw transactions and returns receipts
- mock_chain: ChainManager stand-in with controllable deploy/send
- fake_sdk: SemaphoreSDK stand-in with deterministic commitments and proofs
- artifacts_dir: Hardhat-style artifacts for the Semaphore stack
- temp_dir / env_file: per-test files

Usage:
    pytest tests/unit/          # Fast unit tests
"""

import json
import sys
import shutil
import tempfile
import logging
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional
from unittest.mock import MagicMock

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Hardhat's first default account (public test key)
HARDHAT_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
HARDHAT_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (RPC node, Node.js)")


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests based on their path."""
    for item in items:
        if "/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


# ============================================================================
# Logging Configuration
# ============================================================================

@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Configure logging for tests."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logging.getLogger("web3").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# ============================================================================
# Temporary Directory Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp(prefix="ownership_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(scope="function")
def env_file(temp_dir: Path) -> Path:
    """A .env file with a comment, an exported key and a plain key."""
    path = temp_dir / ".env"
    path.write_text(
        "# local hardhat node\n"
        "RPC_URL=http://127.0.0.1:8545\n"
        "export SEMAPHORE_ADDRESS=0xold\n"
        "\n"
        "USER_ID_SEED=secret\n"
    )
    return path


# ============================================================================
# Mock Blockchain
# ============================================================================

class MockWeb3:
    """
    Minimal Web3 stand-in.

    [MOCK] send_raw_transaction assigns sequential hashes; receipts report
    status 1 unless the hash was marked failed. Deployment receipts pop
    addresses from `contract_addresses`.
    """

    def __init__(self, chain_id: int = 31337, accounts: Optional[List[str]] = None):
        self.connected = True
        self.block_number = 1
        self.raw_transactions: List[bytes] = []
        self.failed_hashes: set = set()
        self.contract_addresses: List[str] = []
        self._tx_counter = 0

        self.eth = MagicMock()
        self.eth.chain_id = chain_id
        self.eth.accounts = accounts if accounts is not None else [HARDHAT_ADDRESS]
        self.eth.get_transaction_count = MagicMock(return_value=0)
        self.eth.send_raw_transaction = self._send_raw_transaction
        self.eth.wait_for_transaction_receipt = self._wait_receipt

    def is_connected(self) -> bool:
        return self.connected

    def next_hash(self) -> bytes:
        self._tx_counter += 1
        return bytes.fromhex(f"{self._tx_counter:064x}")

    def _send_raw_transaction(self, raw_tx: bytes) -> bytes:
        self.raw_transactions.append(raw_tx)
        return self.next_hash()

    def _wait_receipt(self, tx_hash: bytes, **kwargs) -> Dict[str, Any]:
        self.block_number += 1
        return {
            "transactionHash": tx_hash,
            "status": 0 if tx_hash in self.failed_hashes else 1,
            "blockNumber": self.block_number,
            "gasUsed": 21000,
            "contractAddress": self.contract_addresses.pop(0) if self.contract_addresses else None,
        }


@pytest.fixture(scope="function")
def mock_w3() -> MockWeb3:
    """
    Mock Web3 for ChainManager tests.

    [USAGE]
        def test_send(mock_w3):
            chain = ChainManager("http://x", HARDHAT_KEY, w3=mock_w3)
    """
    return MockWeb3()


@pytest.fixture(scope="function")
def mock_chain() -> MagicMock:
    """
    ChainManager stand-in.

    contract(address, abi) returns one MagicMock contract per address so
    tests can inspect calls.
    """
    chain = MagicMock()
    chain.sender = HARDHAT_ADDRESS
    contracts: Dict[str, MagicMock] = {}

    def _contract(address, abi):
        if address not in contracts:
            contracts[address] = MagicMock(name=f"contract_{address}")
        return contracts[address]

    chain.contract = MagicMock(side_effect=_contract)
    chain.contracts = contracts
    chain.send = MagicMock(return_value={"status": 1, "blockNumber": 2, "gasUsed": 21000})
    return chain


# ============================================================================
# Fake Semaphore SDK
# ============================================================================

@pytest.fixture(scope="function")
def fake_sdk() -> MagicMock:
    """
    SemaphoreSDK stand-in.

    - commitment(seed) -> 1000 + len(seed)
    - group(members) -> root = sum(members)
    - generate_proof(...) -> depth 1, root = sum(members), nullifier 77,
      points = 8 packed values
    """
    from registry.sdk import LocalGroup, SemaphoreProof

    sdk = MagicMock()
    sdk.commitment = MagicMock(side_effect=lambda seed: 1000 + len(seed))
    sdk.group = MagicMock(side_effect=lambda members: LocalGroup(
        members=list(members), size=len(members), root=sum(members), depth=1,
    ))

    def _prove(seed, members, scope, message, merkle_tree_depth=None):
        return SemaphoreProof(
            merkle_tree_depth=merkle_tree_depth or 1,
            merkle_tree_root=sum(members),
            nullifier=77,
            message=int(message),
            scope=int(scope),
            points=[str(i) for i in range(1, 9)],
        )

    sdk.generate_proof = MagicMock(side_effect=_prove)
    return sdk


# ============================================================================
# Artifacts
# ============================================================================

POSEIDON_PLACEHOLDER = "__$" + "a" * 34 + "$__"


def write_artifact(root: Path, source: str, name: str, bytecode: str, link_references=None) -> Path:
    """Write a Hardhat-format artifact under root."""
    path = root / source / f"{name}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({
        "_format": "hh-sol-artifact-1",
        "contractName": name,
        "sourceName": source,
        "abi": [],
        "bytecode": bytecode,
        "linkReferences": link_references or {},
    }))
    # Hardhat debug companions must be ignored
    (path.parent / f"{name}.dbg.json").write_text(json.dumps({"buildInfo": "../build-info/x.json"}))
    return path


@pytest.fixture(scope="function")
def artifacts_dir(temp_dir: Path) -> Path:
    """Artifacts for PoseidonT3, SemaphoreVerifier, Semaphore and the registry."""
    root = temp_dir / "artifacts"
    write_artifact(root, "poseidon-solidity/PoseidonT3.sol", "PoseidonT3", "0x6001")
    write_artifact(root, "@semaphore-protocol/contracts/base/SemaphoreVerifier.sol", "SemaphoreVerifier", "0x6002")
    write_artifact(
        root,
        "@semaphore-protocol/contracts/Semaphore.sol",
        "Semaphore",
        "0x6003" + POSEIDON_PLACEHOLDER + "6004",
        {"poseidon-solidity/PoseidonT3.sol": {"PoseidonT3": [{"start": 2, "length": 20}]}},
    )
    write_artifact(root, "contracts/AnonOwnershipRegistry.sol", "AnonOwnershipRegistry", "0x6005")
    return root


@pytest.fixture(scope="function")
def artifact_writer():
    """write_artifact(root, source, name, bytecode, link_references=None)."""
    return write_artifact


@pytest.fixture(scope="session")
def hardhat_account():
    """(private key, checksummed address) of Hardhat's first default account."""
    return HARDHAT_KEY, HARDHAT_ADDRESS
