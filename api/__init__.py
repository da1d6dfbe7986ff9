"""
Minimal API (FastAPI)

HTTP API for merklefs:
- POST /upload - Store a file under its leaf index
- GET /files/{index} - Download a stored file
- GET /proofs/{index} - Download a file's Merkle proof
- GET /root - Merkle root over stored files
- GET /health - Health check

Usage:
    uvicorn --factory api.app:create_app --reload
"""

__version__ = "0.1.0"
