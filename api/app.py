"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn --factory api.app:create_app --reload

    # Or run directly
    python -m api.app
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI

from api.routes import health, files, root
from api.deps import build_file_store
from api.errors import APIError, api_error_handler, core_error_handler, generic_error_handler
from core.config.runtime import RuntimeConfig, load_runtime_config
from core.schemas.errors import MerkleFSException


# Configure logging; respects MERKLEFS_LOG_LEVEL env var
def _resolve_log_level() -> int:
    """Resolve log level from env var, defaulting to INFO."""
    raw = os.getenv("MERKLEFS_LOG_LEVEL")
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app(config: Optional[RuntimeConfig] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or load_runtime_config()

    app = FastAPI(
        title="merklefs API",
        description="""
File server whose downloads can be checked against a Merkle root kept by
the uploader.

## Endpoints

- **POST /upload** - Upload a file; the multipart filename is its leaf index
- **GET /files/{index}** - Download a stored file
- **GET /proofs/{index}** - Download the file's proof (32 raw bytes per sibling)
- **GET /root** - Root over the stored files
- **GET /health** - Health check
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # One store per application instance
    app.state.store = build_file_store(config)
    app.state.config = config

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(MerkleFSException, core_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(files.router)
    app.include_router(root.router)

    return app


def run_server(config: RuntimeConfig) -> None:
    """Serve the API with uvicorn until interrupted."""
    import uvicorn

    app = create_app(config)
    logging.getLogger(__name__).info(
        f"Starting server at {config.server.host}:{config.server.port}"
    )
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    run_server(load_runtime_config())
