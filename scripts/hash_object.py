#!/usr/bin/env python3
"""
Object Hash
===========

Prints the canonical JSON, bytes32 claim identifier and field element of a
JSON object. No chain access.

Usage:
    python scripts/hash_object.py --object '{"b": 2, "a": 1}'
    python scripts/hash_object.py --file document.json
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.canonical import canonical_json, object_hash, object_hash_field
from core.console import Console
from registry.factory import load_object


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Hash a JSON object into its claim identifier")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--object", dest="object_json", help="JSON text")
    source.add_argument("--file", dest="object_file", help="Path to a JSON file")
    args = parser.parse_args(argv)

    try:
        obj = load_object(args.object_json, args.object_file)
        canonical = canonical_json(obj)
    except (OSError, ValueError, TypeError) as e:
        Console.error(str(e))
        return 1

    Console.kv("JSON", canonical, indent=0)
    Console.kv("Hash", object_hash(obj), indent=0)
    Console.kv("Field", object_hash_field(obj), indent=0)
    return 0


if __name__ == "__main__":
    sys.exit(main())
