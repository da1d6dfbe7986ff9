"""
CLI Upload Command

Upload every file of a directory, in name order, then print the Merkle root
the client must keep to verify later downloads.

Usage:
    merklefs upload ./files [--server URL] [--json] > root.txt
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from tqdm import tqdm

from core.crypto.hashing import to_hex
from core.http.remote import MerkleFSClient
from core.merkle.merkle_tree import MerkleTree
from core.schemas.errors import TransportException
from core.sources.directory_source import DirectoryDigestSource


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def upload_all(remote: MerkleFSClient, files: list[Path], *, progress: bool = True) -> None:
    """Upload ``files``, each under its position in the list."""
    with tqdm(files, desc="Uploading", unit="file", file=sys.stderr, disable=not progress) as bar:
        for index, path in enumerate(bar):
            remote.upload_file(index, path)
            logger.debug(f"Uploaded {index + 1}/{len(files)}: {path.name}")


def upload_cmd(args: Namespace) -> int:
    """
    Execute the upload command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = args.cli_config
    files_dir = Path(args.files_dir)
    server_url = args.server or config.client.server_url

    source = DirectoryDigestSource(files_dir, max_workers=config.client.hash_workers)
    try:
        files = source.list_files()
    except OSError as e:
        print(f"Failed to read files in {files_dir}: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    logger.info(f"Uploading {len(files)} files to {server_url}...")
    try:
        with MerkleFSClient(
            server_url,
            timeout=config.client.timeout,
            proxy=config.client.proxy,
        ) as remote:
            upload_all(remote, files, progress=not args.no_progress)
    except (OSError, TransportException) as e:
        print(f"Upload failed: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    logger.info("Files uploaded!")

    try:
        tree = MerkleTree.from_hashes(source.digests_for(files))
    except OSError as e:
        print(f"Failed to compute merkle root: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    root_hex = to_hex(tree.root)
    logger.info(f"Merkle Root for {len(files)} files: {root_hex}")

    if args.json:
        print(json.dumps({"root": root_hex, "file_count": len(files)}, indent=2))
    else:
        print(root_hex)

    # Local copies are never removed here
    logger.info("Local files kept; delete them once the root is stored safely.")
    return EXIT_SUCCESS
