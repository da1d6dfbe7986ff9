"""
CLI Local Commands

Offline operations on a local directory or file:
- root: print the Merkle root of a directory
- proof: print or write the proof for one file of a directory
- verify: check a local file against a root and a proof file

Usage:
    merklefs root ./files
    merklefs proof ./files 3 --out 3.proof
    merklefs verify ./3.bin 3 --proof 3.proof --root <hex>
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.crypto.hashing import hash_file, parse_digest, to_hex
from core.merkle.merkle_proofs import deserialize_proof, serialize_proof
from core.merkle.merkle_tree import MerkleTree, verify_leaf
from core.schemas.errors import InvalidIndexError, ProofFormatError
from core.sources.directory_source import DirectoryDigestSource


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def build_tree(files_dir: Path, workers: int) -> MerkleTree:
    """Tree over the files of ``files_dir`` in name order."""
    return MerkleTree.from_source(DirectoryDigestSource(files_dir, max_workers=workers))


def root_cmd(args: Namespace) -> int:
    """Print the root of a local directory."""
    config = args.cli_config
    files_dir = Path(args.files_dir)
    try:
        tree = build_tree(files_dir, config.client.hash_workers)
    except OSError as e:
        print(f"Failed to read files in {files_dir}: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.debug:
        logger.debug(f"Tree:\n{tree}")

    if args.json:
        print(json.dumps({
            "root": to_hex(tree.root),
            "file_count": tree.size,
            "depth": tree.height - 1,
        }, indent=2))
    else:
        print(to_hex(tree.root))
    return EXIT_SUCCESS


def proof_cmd(args: Namespace) -> int:
    """Print (hex, one sibling per line) or write (raw) a proof."""
    config = args.cli_config
    files_dir = Path(args.files_dir)
    try:
        tree = build_tree(files_dir, config.client.hash_workers)
        proof = tree.make_proof(args.index)
    except OSError as e:
        print(f"Failed to read files in {files_dir}: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except InvalidIndexError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.out:
        Path(args.out).write_bytes(serialize_proof(proof))
        logger.info(f"Wrote {len(proof)}-entry proof for index {args.index} to {args.out}")
    else:
        for sibling in proof:
            print(to_hex(sibling))
    return EXIT_SUCCESS


def verify_cmd(args: Namespace) -> int:
    """Check a local file against a trusted root using a raw proof file."""
    try:
        root = parse_digest(args.root)
    except ValueError as e:
        print(f"Invalid hex string for merkle root: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        leaf = hash_file(args.file)
        proof = deserialize_proof(Path(args.proof).read_bytes())
    except (OSError, ProofFormatError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    outcome = verify_leaf(root, args.index, leaf, proof)
    if not outcome.ok:
        print("File verification failed", file=sys.stderr)
        print(f"Calculated merkle root: {to_hex(outcome.computed_root)}", file=sys.stderr)
        print(f"Expected merkle root: {to_hex(outcome.expected_root)}", file=sys.stderr)
        return EXIT_VERIFICATION_FAILED

    print("ok")
    return EXIT_SUCCESS
