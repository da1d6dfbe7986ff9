"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m merklefs_cli upload <dir> [--server URL] [--json] [--no-progress]
    python -m merklefs_cli download <index> [--root HEX] [--out PATH] [--server URL]
    python -m merklefs_cli root <dir> [--json] [--debug]
    python -m merklefs_cli proof <dir> <index> [--out PATH]
    python -m merklefs_cli verify <file> <index> --proof PATH --root HEX
    python -m merklefs_cli serve [--host HOST] [--port PORT] [--storage-dir DIR]
    python -m merklefs_cli config --init

Environment Variables:
    MERKLEFS_SERVER_URL         Server used by upload/download
    MERKLEFS_STORAGE_DIR        Directory the server stores files in
    MERKLEFS_HASH_WORKERS       Threads used to hash files (default: 1)
    MERKLEFS_LOG_LEVEL          Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config.runtime import get_default_config_template, load_runtime_config
from merklefs_cli.commands import upload, download, local, serve


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI. Everything goes to stderr."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(log_level)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merklefs",
        description="merklefs CLI - Upload files, keep one Merkle root, verify every download.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./merklefs.json or ~/.config/merklefs/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- upload command ---
    upload_parser = subparsers.add_parser(
        "upload",
        help="Upload a directory and print its Merkle root",
        description="Upload every regular file of a directory in name order, then print the root.",
    )
    upload_parser.add_argument("files_dir", type=str, help="Directory whose files are uploaded")
    upload_parser.add_argument(
        "--server", "-s",
        type=str,
        default=None,
        help="Server URL (default: from config)",
    )
    upload_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    upload_parser.add_argument(
        "--no-progress",
        action="store_true",
        default=False,
        help="Do not draw the upload progress bar on stderr",
    )
    upload_parser.set_defaults(func=upload.upload_cmd)

    # --- download command ---
    download_parser = subparsers.add_parser(
        "download",
        help="Download a file and verify it against a root",
        description="Download a file and its proof; output the file only if it matches the root.",
    )
    download_parser.add_argument("index", type=int, help="Index of the file to download")
    download_parser.add_argument(
        "--root", "-r",
        type=str,
        default=None,
        help="Trusted Merkle root in hex (default: first line of stdin)",
    )
    download_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the file here instead of stdout",
    )
    download_parser.add_argument(
        "--server", "-s",
        type=str,
        default=None,
        help="Server URL (default: from config)",
    )
    download_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Show tracebacks on errors",
    )
    download_parser.set_defaults(func=download.download_cmd)

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Print the Merkle root of a local directory",
    )
    root_parser.add_argument("files_dir", type=str, help="Directory to hash")
    root_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    root_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Log every tree level (implies --log-level DEBUG)",
    )
    root_parser.set_defaults(func=local.root_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Produce the proof for one file of a local directory",
    )
    proof_parser.add_argument("files_dir", type=str, help="Directory to hash")
    proof_parser.add_argument("index", type=int, help="Index of the file in name order")
    proof_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the raw proof here (default: hex siblings on stdout)",
    )
    proof_parser.set_defaults(func=local.proof_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a local file against a root and a proof file",
    )
    verify_parser.add_argument("file", type=str, help="File to check")
    verify_parser.add_argument("index", type=int, help="Claimed index of the file")
    verify_parser.add_argument("--proof", "-p", type=str, required=True, help="Raw proof file")
    verify_parser.add_argument("--root", "-r", type=str, required=True, help="Trusted Merkle root in hex")
    verify_parser.set_defaults(func=local.verify_cmd)

    # --- serve command ---
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the file server",
    )
    serve_parser.add_argument("--host", type=str, default=None, help="Bind address (default: from config)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: from config)")
    serve_parser.add_argument(
        "--storage-dir",
        type=str,
        default=None,
        help="Directory for uploaded files (default: from config)",
    )
    serve_parser.set_defaults(func=serve.serve_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="merklefs.json",
        help="Path for config file (default: merklefs.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (MERKLEFS_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: merklefs config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_runtime_config(args.config)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging; --debug lowers the level unless one was given explicitly
    log_level = args.log_level or ("DEBUG" if getattr(args, "debug", False) else config.log_level)
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
