"""API route handlers."""

from api.routes import health, files, root

__all__ = ["health", "files", "root"]
