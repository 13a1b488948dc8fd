#!/usr/bin/env python3
"""
Claim And Prove
===============

Claims ownership of a JSON object anonymously, then proves ownership again
with a fresh proof.

Usage:
    python scripts/claim_and_prove.py [--object '{"a": 1}' | --file obj.json] [--member C ...]

Environment Variables (via .env):
    SEMAPHORE_ADDRESS, GROUP_ID, USER_ID_SEED, OWNERSHIP_REGISTRY_ADDRESS
"""

import sys
import traceback
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.console import Console
from registry.cli import MODE_CLAIM_AND_PROVE, run_claim

DEFAULT_OBJECT = {"a": 1, "b": 2, "nested": {"x": ["y", 3]}}


def main(argv=None) -> int:
    return run_claim(
        argv,
        MODE_CLAIM_AND_PROVE,
        "Claim ownership of a JSON object and prove it again",
        lambda: dict(DEFAULT_OBJECT),
    )


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n[ABORT] Cancelled by user")
        sys.exit(130)
    except Exception as e:
        Console.error(f"Script failed: {e}")
        traceback.print_exc()
        sys.exit(1)
