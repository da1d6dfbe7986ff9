"""
CLI Serve Command

Run the file server.

Usage:
    merklefs serve [--host 0.0.0.0] [--port 8080] [--storage-dir ./store]
"""

from __future__ import annotations

import copy
from argparse import Namespace


EXIT_SUCCESS = 0


def serve_cmd(args: Namespace) -> int:
    """Start uvicorn with the configured file store."""
    config = copy.deepcopy(args.cli_config)
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port
    if args.storage_dir:
        config.server.storage_dir = args.storage_dir

    from api.app import run_server

    run_server(config)
    return EXIT_SUCCESS
