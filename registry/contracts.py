"""
Contract Artifacts
==================

[BLOCKCHAIN] ABIs, bytecode and library linking for the contracts the
scripts deploy and call.

Components:
- SEMAPHORE_ABI / REGISTRY_ABI: minimal ABIs for interaction
- ArtifactStore: reads Hardhat artifacts (artifacts/**/<Name>.json)
- ContractCompiler: compiles Solidity sources with py-solc-x
- link_bytecode: fills library placeholders from linkReferences

[USAGE]
    artifact = load_contract("Semaphore", store, compiler)
    bytecode = link_bytecode(artifact.bytecode, artifact.link_references, {
        POSEIDON_LIBRARY: poseidon_address,
    })
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from config import OPTIMIZER_RUNS, SOLC_VERSION

logger = logging.getLogger(__name__)


# ============================================================================
# Contract Sources
# ============================================================================

# Contract name -> Solidity source unit. Package-prefixed units resolve under
# node_modules, bare ones under the contracts directory.
CONTRACT_SOURCES = {
    "PoseidonT3": "poseidon-solidity/PoseidonT3.sol",
    "SemaphoreVerifier": "@semaphore-protocol/contracts/base/SemaphoreVerifier.sol",
    "Semaphore": "@semaphore-protocol/contracts/Semaphore.sol",
    "AnonOwnershipRegistry": "AnonOwnershipRegistry.sol",
}

PACKAGE_PREFIXES = ("@", "poseidon-solidity/")


# ============================================================================
# Minimal ABIs
# ============================================================================

SEMAPHORE_ABI = [
    {"inputs": [{"name": "admin", "type": "address"}], "name": "createGroup", "outputs": [{"type": "uint256"}], "stateMutability": "nonpayable", "type": "function"},
    {"inputs": [{"name": "admin", "type": "address"}, {"name": "merkleTreeDuration", "type": "uint256"}], "name": "createGroup", "outputs": [{"type": "uint256"}], "stateMutability": "nonpayable", "type": "function"},
    {"inputs": [], "name": "groupCounter", "outputs": [{"type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"inputs": [{"name": "groupId", "type": "uint256"}, {"name": "identityCommitment", "type": "uint256"}], "name": "addMember", "outputs": [], "stateMutability": "nonpayable", "type": "function"},
    {"inputs": [{"name": "groupId", "type": "uint256"}], "name": "getGroupAdmin", "outputs": [{"type": "address"}], "stateMutability": "view", "type": "function"},
    {"inputs": [{"name": "groupId", "type": "uint256"}], "name": "getMerkleTreeRoot", "outputs": [{"type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"inputs": [{"name": "groupId", "type": "uint256"}], "name": "getMerkleTreeDepth", "outputs": [{"type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"inputs": [{"name": "groupId", "type": "uint256"}], "name": "getMerkleTreeSize", "outputs": [{"type": "uint256"}], "stateMutability": "view", "type": "function"},
]

_OWNERSHIP_INPUTS = [
    {"name": "objectHash", "type": "bytes32"},
    {"name": "merkleTreeDepth", "type": "uint256"},
    {"name": "merkleTreeRoot", "type": "uint256"},
    {"name": "nullifier", "type": "uint256"},
    {"name": "points", "type": "uint256[8]"},
]

REGISTRY_ABI = [
    {"inputs": [{"name": "semaphore", "type": "address"}, {"name": "groupId", "type": "uint256"}], "stateMutability": "nonpayable", "type": "constructor"},
    {"inputs": _OWNERSHIP_INPUTS, "name": "claimOwnership", "outputs": [], "stateMutability": "nonpayable", "type": "function"},
    {"inputs": _OWNERSHIP_INPUTS, "name": "proveOwnership", "outputs": [], "stateMutability": "nonpayable", "type": "function"},
    {"inputs": [{"name": "objectHash", "type": "bytes32"}], "name": "claimed", "outputs": [{"type": "bool"}], "stateMutability": "view", "type": "function"},
]


# ============================================================================
# Artifacts
# ============================================================================

@dataclass
class ContractArtifact:
    """Compiled contract ready for deployment."""
    name: str
    abi: List[Dict[str, Any]]
    bytecode: str
    link_references: Dict[str, Dict[str, List[Dict[str, int]]]] = field(default_factory=dict)
    source: str = ""

    @property
    def needs_linking(self) -> bool:
        return bool(self.link_references)


def _prefixed(bytecode: str) -> str:
    return bytecode if bytecode.startswith("0x") else "0x" + bytecode


class ArtifactStore:
    """
    Reads Hardhat-format artifacts.

    Hardhat writes one JSON per contract at
    artifacts/<source path>/<ContractName>.json (plus .dbg.json companions).
    """

    def __init__(self, artifacts_dir: Path):
        self.artifacts_dir = Path(artifacts_dir)

    def path_for(self, name: str) -> Optional[Path]:
        if not self.artifacts_dir.is_dir():
            return None
        matches = sorted(
            p for p in self.artifacts_dir.rglob(f"{name}.json")
            if "build-info" not in p.parts
        )
        return matches[0] if matches else None

    def find(self, name: str) -> Optional[ContractArtifact]:
        path = self.path_for(name)
        if path is None:
            return None

        data = json.loads(path.read_text())
        bytecode = data.get("bytecode") or ""
        if isinstance(bytecode, dict):
            bytecode = bytecode.get("object", "")
        if not bytecode or bytecode == "0x":
            logger.warning(f"[CHAIN] Artifact {path} has no bytecode (abstract contract or interface?)")
            return None

        logger.debug(f"[CHAIN] Loaded artifact {name} from {path}")
        return ContractArtifact(
            name=data.get("contractName", name),
            abi=data["abi"],
            bytecode=_prefixed(bytecode),
            link_references=data.get("linkReferences") or {},
            source=data.get("sourceName", ""),
        )


# ============================================================================
# Contract Compiler
# ============================================================================

class ContractCompiler:
    """
    Compiles Solidity contracts using py-solc-x.

    Imports of npm packages (@semaphore-protocol/..., poseidon-solidity/...)
    are remapped into node_modules.
    """

    def __init__(
        self,
        contracts_dir: Path,
        node_modules_dir: Path,
        solc_version: str = SOLC_VERSION,
        optimizer_runs: int = OPTIMIZER_RUNS,
    ):
        self.contracts_dir = Path(contracts_dir)
        self.node_modules_dir = Path(node_modules_dir)
        self.solc_version = solc_version
        self.optimizer_runs = optimizer_runs
        self._compiled_cache: Dict[str, ContractArtifact] = {}

    def resolve_source(self, source_unit: str) -> Path:
        if source_unit.startswith(PACKAGE_PREFIXES):
            return self.node_modules_dir / source_unit
        return self.contracts_dir / source_unit

    def remappings(self) -> List[str]:
        """One remapping per package (or scope) present in node_modules."""
        if not self.node_modules_dir.is_dir():
            return []
        result = []
        for entry in sorted(self.node_modules_dir.iterdir()):
            if entry.is_dir() and not entry.name.startswith("."):
                result.append(f"{entry.name}/={entry}/")
        return result

    def _ensure_solc(self):
        import solcx

        installed = [str(v) for v in solcx.get_installed_solc_versions()]
        if self.solc_version not in installed:
            logger.info(f"[CHAIN] Installing solc {self.solc_version}...")
            solcx.install_solc(self.solc_version)
        solcx.set_solc_version(self.solc_version)
        return solcx

    def compile(self, name: str, source_unit: Optional[str] = None) -> ContractArtifact:
        """
        Compile one contract.

        Args:
            name: Contract name
            source_unit: Source unit (default: CONTRACT_SOURCES[name])

        Returns:
            ContractArtifact with abi, bytecode and linkReferences
        """
        if name in self._compiled_cache:
            return self._compiled_cache[name]

        source_unit = source_unit or CONTRACT_SOURCES.get(name, f"{name}.sol")
        source_path = self.resolve_source(source_unit)
        if not source_path.exists():
            raise FileNotFoundError(f"Contract source not found: {source_path}")

        try:
            solcx = self._ensure_solc()
        except ImportError:
            logger.error("[CHAIN] py-solc-x not installed. Run: pip install py-solc-x")
            raise

        compiled = solcx.compile_standard(
            {
                "language": "Solidity",
                "sources": {source_unit: {"content": source_path.read_text()}},
                "settings": {
                    "optimizer": {"enabled": True, "runs": self.optimizer_runs},
                    "remappings": self.remappings(),
                    "outputSelection": {
                        "*": {"*": ["abi", "evm.bytecode.object", "evm.bytecode.linkReferences"]}
                    },
                },
            },
            allow_paths=[str(self.contracts_dir), str(self.node_modules_dir)],
        )

        try:
            contract_data = compiled["contracts"][source_unit][name]
        except KeyError:
            raise FileNotFoundError(f"Contract {name} not found in {source_unit}") from None

        bytecode = contract_data["evm"]["bytecode"]
        artifact = ContractArtifact(
            name=name,
            abi=contract_data["abi"],
            bytecode=_prefixed(bytecode["object"]),
            link_references=bytecode.get("linkReferences") or {},
            source=source_unit,
        )
        self._compiled_cache[name] = artifact
        logger.info(f"[CHAIN] Compiled {name}: {len(artifact.bytecode) // 2 - 1} bytes")
        return artifact


def load_contract(
    name: str,
    store: Optional[ArtifactStore] = None,
    compiler: Optional[ContractCompiler] = None,
) -> ContractArtifact:
    """
    Find a deployable artifact: prebuilt artifact first, then compile.

    Raises:
        FileNotFoundError: if neither an artifact nor a source exists
    """
    if store is not None:
        artifact = store.find(name)
        if artifact is not None:
            return artifact

    if compiler is not None:
        return compiler.compile(name)

    raise FileNotFoundError(
        f"No artifact for {name}. Compile the contracts (npx hardhat compile) "
        f"or set CONTRACTS_DIR / NODE_MODULES_DIR so they can be built."
    )


# ============================================================================
# Library Linking
# ============================================================================

def link_bytecode(
    bytecode: str,
    link_references: Dict[str, Dict[str, List[Dict[str, int]]]],
    libraries: Dict[str, str],
) -> str:
    """
    Insert library addresses into unlinked bytecode.

    Args:
        bytecode: 0x-prefixed creation bytecode with placeholders
        link_references: {source: {library: [{"start": n, "length": 20}]}}
            (byte offsets, as emitted by solc and Hardhat)
        libraries: Address per library, keyed "source:Name" or "Name"

    Returns:
        Linked 0x-prefixed bytecode

    Raises:
        ValueError: when a referenced library has no address
    """
    code = bytecode[2:] if bytecode.startswith("0x") else bytecode

    for source, libs in link_references.items():
        for lib_name, positions in libs.items():
            address = libraries.get(f"{source}:{lib_name}") or libraries.get(lib_name)
            if not address:
                raise ValueError(f"Missing address for library {source}:{lib_name}")

            addr_hex = address.lower().replace("0x", "")
            if len(addr_hex) != 40:
                raise ValueError(f"Invalid library address for {lib_name}: {address}")

            for position in positions:
                start = position["start"] * 2
                length = position["length"] * 2
                code = code[:start] + addr_hex[:length].rjust(length, "0") + code[start + length:]

    return "0x" + code
