"""
merklefs CLI

Command-line interface for uploading files and verifying downloads against
a Merkle root.

Usage:
    python -m merklefs_cli upload ./files > root.txt
    python -m merklefs_cli download 3 --out 3.bin < root.txt
    python -m merklefs_cli root ./files
    python -m merklefs_cli serve --storage-dir ./store
"""

__version__ = "0.1.0"
