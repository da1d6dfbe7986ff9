"""
CLI command modules.
"""

from merklefs_cli.commands import upload, download, local, serve

__all__ = ["upload", "download", "local", "serve"]
