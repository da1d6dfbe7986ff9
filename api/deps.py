"""
API Dependencies

Dependency injection for the API.
The file store is owned by the application instance, not by the module.
"""

from __future__ import annotations

import logging

from fastapi import Request

from core.config.runtime import RuntimeConfig
from core.storage.file_store import FileStore

logger = logging.getLogger(__name__)


def build_file_store(config: RuntimeConfig) -> FileStore:
    """Create the file store described by ``config.server``."""
    logger.info(f"Serving files from {config.server.storage_dir}")
    return FileStore(
        config.server.storage_dir,
        proofs_dirname=config.server.proofs_dirname,
        hash_workers=config.server.hash_workers,
    )


def get_file_store(request: Request) -> FileStore:
    """Return the store attached to the running application."""
    return request.app.state.store
