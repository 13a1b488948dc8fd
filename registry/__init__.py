"""
Registry Module
===============
On-chain side of anonymous ownership claims:
- ChainManager: RPC connection, signing, deployment
- SemaphoreManager: Semaphore stack deployment and groups
- SemaphoreSDK: bridge to the JavaScript identity/group/proof SDK
- OwnershipRegistry: AnonOwnershipRegistry claim/prove calls
- ClaimWorkflow: claim and prove sequencing
"""

from .chain import ChainManager
from .semaphore import SemaphoreManager, GroupInfo, SemaphoreDeployment
from .sdk import SemaphoreSDK, SemaphoreProof, LocalGroup
from .ownership import OwnershipRegistry
from .workflow import ClaimWorkflow, ClaimTarget, ClaimResult

__all__ = [
    "ChainManager",
    "SemaphoreManager",
    "GroupInfo",
    "SemaphoreDeployment",
    "SemaphoreSDK",
    "SemaphoreProof",
    "LocalGroup",
    "OwnershipRegistry",
    "ClaimWorkflow",
    "ClaimTarget",
    "ClaimResult",
]
