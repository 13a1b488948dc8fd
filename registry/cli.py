"""
Claim Script Runner
===================

[CLI] Shared body of scripts/claim_and_prove.py and scripts/test_new_object.py.
"""

import argparse
from typing import Any, Callable, Optional, Sequence

from web3.exceptions import Web3Exception

from config import load_settings
from core.console import Console
from core.exceptions import ConfigError, OwnershipToolError
from core.logger import setup_logging
from registry.factory import build_workflow, connect_chain, load_object, parse_members
from registry.workflow import ClaimResult, ClaimWorkflow

MODE_CLAIM_AND_PROVE = "claim-and-prove"
MODE_CLAIM_OR_PROVE = "claim-or-prove"


def build_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--object", dest="object_json", default=None, help="JSON object to claim")
    source.add_argument("--file", dest="object_file", default=None, help="Path to a JSON file to claim")
    parser.add_argument(
        "--member",
        dest="members",
        action="append",
        default=[],
        help="Group member commitment, in insertion order (repeatable or comma-separated)",
    )
    parser.add_argument("--env-file", default=None, help="Path to .env")
    return parser


def print_result(result: ClaimResult) -> None:
    for action, proof in zip(result.actions, result.proofs):
        verb = "claimed" if action == "claim" else "proven"
        Console.success(f"Ownership {verb} for {result.target.object_hash}")
        Console.kv("Merkle root", proof.merkle_tree_root)
        Console.kv("Nullifier", proof.nullifier)


def run_claim(
    argv: Optional[Sequence[str]],
    mode: str,
    description: str,
    default_object: Callable[[], Any],
) -> int:
    """
    Parse arguments, wire the workflow and run one claim flow.

    Returns:
        Process exit code
    """
    args = build_parser(description).parse_args(argv)
    settings = load_settings(args.env_file)
    setup_logging()

    Console.section("Configuration")
    Console.kv("Group ID", settings.group_id)
    Console.kv("Registry Address", settings.registry_address or "(unset)")
    Console.kv("Semaphore Address", settings.semaphore_address or "(unset)")

    if not settings.registry_address:
        Console.error("OWNERSHIP_REGISTRY_ADDRESS not set!")
        Console.info("Run: python scripts/deploy_registry.py --write-env")
        return 1

    try:
        obj = load_object(args.object_json, args.object_file, default=None)
        members = parse_members(args.members)
    except (OSError, ValueError) as e:
        Console.error(str(e))
        return 1
    if obj is None:
        obj = default_object()

    try:
        chain, _ = connect_chain(settings)
        workflow: ClaimWorkflow = build_workflow(settings, chain, members=members)
    except ConfigError as e:
        Console.error(str(e))
        return 1

    try:
        Console.section("Group")
        Console.kv("Identity commitment", workflow.commitment)
        if not workflow.check_group():
            Console.warning("Local group root does not match the on-chain root; the proof will be rejected")

        Console.section("Claim")
        if mode == MODE_CLAIM_OR_PROVE:
            result = workflow.claim_or_prove(obj)
            Console.kv("Already claimed", result.already_claimed)
        else:
            result = workflow.claim_and_prove(obj)
    except (OwnershipToolError, Web3Exception) as e:
        Console.error(f"Error: {e}")
        stderr = getattr(e, "stderr", "")
        if stderr:
            Console.error(stderr.strip())
        return 1

    Console.kv("JSON", result.target.canonical)
    Console.kv("Hash", result.target.object_hash)
    print_result(result)
    return 0
