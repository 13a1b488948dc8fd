#!/usr/bin/env python3
"""
Semaphore Deployment Script
===========================

Deploys PoseidonT3, SemaphoreVerifier and Semaphore, then creates a group
administered by the deployer.

Usage:
    python scripts/deploy_semaphore.py [--depth 20] [--write-env]

Environment Variables (via .env):
    RPC_URL       - RPC endpoint (default: http://127.0.0.1:8545)
    PRIVATE_KEY   - Deployer key (default: node's first account)
    ARTIFACTS_DIR - Hardhat artifacts (default: ./artifacts)

Output:
    SEMAPHORE_ADDRESS and GROUP_ID lines for .env
    deployments/<network>.json
"""

import argparse
import sys
import traceback
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import load_settings
from core.console import Console
from core.exceptions import OwnershipToolError
from core.logger import setup_logging
from core.utils.env import update_env_variables
from registry.deployments import save_deployment
from registry.factory import connect_chain, contract_sources
from registry.semaphore import SemaphoreManager


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Deploy Semaphore and create a group")
    parser.add_argument("--depth", type=int, default=None, help="Group tree parameter passed to createGroup (default: GROUP_TREE_DEPTH or 20)")
    parser.add_argument("--env-file", default=None, help="Path to .env")
    parser.add_argument("--write-env", action="store_true", help="Write SEMAPHORE_ADDRESS and GROUP_ID into .env")
    args = parser.parse_args(argv)

    settings = load_settings(args.env_file)
    setup_logging()
    depth = args.depth if args.depth is not None else settings.group_tree_depth

    Console.header("Semaphore Deployment")

    Console.step(1, 3, "Connecting to Blockchain")
    chain, chain_id = connect_chain(settings)
    Console.kv("Network", settings.network)
    Console.kv("Chain ID", chain_id)
    Console.kv("Deployer", chain.sender)

    Console.step(2, 3, "Deploying Contracts")
    store, compiler = contract_sources(settings)
    manager = SemaphoreManager(chain, store=store, compiler=compiler)
    deployment = manager.deploy_stack(depth)
    Console.kv("PoseidonT3", deployment.poseidon)
    Console.kv("Verifier", deployment.verifier)
    Console.kv("Semaphore", deployment.semaphore)
    Console.success(f"Group created successfully! Group ID: {deployment.group_id}")
    Console.kv("Admin", deployment.admin)

    Console.step(3, 3, "Group Info")
    try:
        info = manager.group_info(deployment.group_id, with_admin=True)
        Console.kv("Group Admin", info.admin)
        Console.kv("Merkle Tree Depth", info.depth)
        Console.kv("Merkle Tree Size", info.size)
    except Exception as e:
        Console.warning(f"Could not fetch group info: {e}")

    save_deployment(
        settings.deployments_dir,
        settings.network,
        chain_id,
        {
            "PoseidonT3": deployment.poseidon,
            "SemaphoreVerifier": deployment.verifier,
            "Semaphore": deployment.semaphore,
        },
        group_id=deployment.group_id,
    )

    Console.section("Add these to your .env file")
    Console.env_line("SEMAPHORE_ADDRESS", deployment.semaphore)
    Console.env_line("GROUP_ID", deployment.group_id)

    if args.write_env:
        env_path = args.env_file or str(PROJECT_ROOT / ".env")
        update_env_variables(
            {"SEMAPHORE_ADDRESS": deployment.semaphore, "GROUP_ID": deployment.group_id},
            env_path,
        )
        Console.success(f"Updated {env_path}")

    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n[ABORT] Deployment cancelled by user")
        sys.exit(130)
    except (OwnershipToolError, ConnectionError, FileNotFoundError) as e:
        Console.error(f"Deployment failed: {e}")
        sys.exit(1)
    except Exception as e:
        Console.error(f"Deployment failed: {e}")
        traceback.print_exc()
        sys.exit(1)
