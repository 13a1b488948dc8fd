#!/usr/bin/env python3
"""
Ownership Registry Deployment Script
====================================

Deploys AnonOwnershipRegistry bound to an existing Semaphore instance and
group.

Usage:
    python scripts/deploy_registry.py [--write-env]

Environment Variables (via .env):
    SEMAPHORE_ADDRESS - Semaphore contract (from deploy_semaphore.py)
    GROUP_ID          - Semaphore group id
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
from registry.ownership import OwnershipRegistry


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Deploy AnonOwnershipRegistry")
    parser.add_argument("--env-file", default=None, help="Path to .env")
    parser.add_argument("--write-env", action="store_true", help="Write OWNERSHIP_REGISTRY_ADDRESS into .env")
    args = parser.parse_args(argv)

    settings = load_settings(args.env_file)
    setup_logging()
    settings.require("semaphore_address", "group_id")

    chain, chain_id = connect_chain(settings)
    store, compiler = contract_sources(settings)

    registry = OwnershipRegistry(chain)
    address = registry.deploy(settings.semaphore_address, settings.group_id, store, compiler)

    Console.kv("AnonOwnershipRegistry", address, indent=0)
    Console.env_line("REGISTRY_ADDRESS", address)

    save_deployment(
        settings.deployments_dir,
        settings.network,
        chain_id,
        {OwnershipRegistry.CONTRACT_NAME: address},
    )

    if args.write_env:
        env_path = args.env_file or str(PROJECT_ROOT / ".env")
        update_env_variables({"OWNERSHIP_REGISTRY_ADDRESS": address}, env_path)
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
