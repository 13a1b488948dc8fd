#!/usr/bin/env python3
"""
Add Group Member
================

Adds the identity derived from USER_ID_SEED to GROUP_ID.

Usage:
    python scripts/add_member.py

Environment Variables (via .env):
    SEMAPHORE_ADDRESS, GROUP_ID, USER_ID_SEED

[SECURITY] Keep USER_ID_SEED safe; it reproduces the same identity.
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
from registry.factory import build_sdk, connect_chain
from registry.semaphore import SemaphoreManager


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Add the USER_ID_SEED identity to the Semaphore group")
    parser.add_argument("--env-file", default=None, help="Path to .env")
    args = parser.parse_args(argv)

    settings = load_settings(args.env_file)
    setup_logging()
    settings.require("semaphore_address", "group_id", "user_id_seed")

    commitment = build_sdk(settings).commitment(settings.user_id_seed)

    chain, _ = connect_chain(settings)
    semaphore = SemaphoreManager(chain, address=settings.semaphore_address)
    semaphore.add_member(settings.group_id, commitment)

    Console.success(f"Added member. Commitment: {commitment}")
    Console.info("Keep USER_ID_SEED safe; it reproduces the same identity.")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n[ABORT] Cancelled by user")
        sys.exit(130)
    except (OwnershipToolError, ConnectionError) as e:
        Console.error(str(e))
        sys.exit(1)
    except Exception as e:
        Console.error(f"Script failed: {e}")
        traceback.print_exc()
        sys.exit(1)
