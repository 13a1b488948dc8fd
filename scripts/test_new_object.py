#!/usr/bin/env python3
"""
Claim Or Prove A New Object
===========================

Checks whether an object is already claimed: if so, proves ownership;
otherwise claims it and proves again. The default object carries a
millisecond timestamp, so every run hashes a fresh object.

Usage:
    python scripts/test_new_object.py [--object JSON | --file PATH] [--member C ...]
"""

import sys
import time
import traceback
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.console import Console
from registry.cli import MODE_CLAIM_OR_PROVE, run_claim


def new_document() -> dict:
    return {
        "title": "My New Document",
        "version": 2,
        "metadata": {
            "author": "anonymous",
            "timestamp": int(time.time() * 1000),
        },
    }


def main(argv=None) -> int:
    return run_claim(
        argv,
        MODE_CLAIM_OR_PROVE,
        "Claim a new JSON object, or prove ownership if it is already claimed",
        new_document,
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
