"""
CLI Download Command

Download one file with its proof and check it against a trusted root.
Content is released only when verification passes.

Usage:
    merklefs download 3 --root <hex> [--out PATH] [--server URL]
    merklefs download 3 < root.txt > 3.bin
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.crypto.hashing import parse_digest, to_hex
from core.http.remote import MerkleFSClient
from core.schemas.errors import ProofFormatError, TransportException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def read_trusted_root(root_arg: str | None) -> bytes:
    """
    Trusted root from ``--root`` or, failing that, the first line of stdin.

    Raises:
        ValueError: If the value is not a 32-byte hex digest
    """
    raw = root_arg if root_arg is not None else sys.stdin.readline()
    return parse_digest(raw)


def write_output(content: bytes, out: str | None) -> None:
    if out:
        Path(out).write_bytes(content)
    else:
        sys.stdout.buffer.write(content)
        sys.stdout.buffer.flush()


def download_cmd(args: Namespace) -> int:
    """
    Execute the download command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (2 when the file does not match the root)
    """
    config = args.cli_config
    index = args.index
    server_url = args.server or config.client.server_url

    try:
        root = read_trusted_root(args.root)
    except ValueError as e:
        print(f"Invalid hex string for merkle root: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        with MerkleFSClient(
            server_url,
            timeout=config.client.timeout,
            proxy=config.client.proxy,
        ) as remote:
            content, outcome = remote.download_verified(index, root)
    except (TransportException, ProofFormatError) as e:
        print(f"Failed to download file index {index}: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if not outcome.ok:
        logger.error("File verification failed")
        print("File verification failed", file=sys.stderr)
        print(f"Calculated merkle root: {to_hex(outcome.computed_root)}", file=sys.stderr)
        print(f"Expected merkle root: {to_hex(outcome.expected_root)}", file=sys.stderr)
        return EXIT_VERIFICATION_FAILED

    write_output(content, args.out)
    return EXIT_SUCCESS
