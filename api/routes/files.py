"""
File Routes

Upload files by leaf index and download files and their proofs.

Handlers are plain functions so FastAPI runs the blocking disk and hashing
work in its thread pool.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Path as PathParam, UploadFile
from fastapi.responses import FileResponse, Response

from api.deps import get_file_store
from api.errors import InvalidFilenameError
from api.models.responses import UploadResponse
from core.storage.file_store import FileStore, parse_index


logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])

OCTET_STREAM = "application/octet-stream"


@router.post("/upload", response_model=UploadResponse)
def upload_file(
    file: UploadFile = File(..., description="File content; filename must be its leaf index"),
    store: FileStore = Depends(get_file_store),
) -> UploadResponse:
    """
    Store one uploaded file under the index given as its filename.
    """
    index = parse_index(file.filename or "")
    if index is None:
        raise InvalidFilenameError(file.filename)

    path = store.save(index, file.file)
    return UploadResponse(ok=True, index=index, size=path.stat().st_size)


@router.get("/files/{index}")
@router.get("/download/{index}", include_in_schema=False)
def download_file(
    index: int = PathParam(..., ge=0, description="Leaf index"),
    store: FileStore = Depends(get_file_store),
) -> FileResponse:
    """
    Download the stored file for ``index``.

    Proofs are computed on the first download after any upload.
    """
    logger.info(f"Downloading file {index}")
    store.ensure_proofs()
    return FileResponse(store.file_path(index), media_type=OCTET_STREAM)


@router.get("/proofs/{index}")
@router.get("/proof/{index}", include_in_schema=False)
def download_proof(
    index: int = PathParam(..., ge=0, description="Leaf index"),
    store: FileStore = Depends(get_file_store),
) -> Response:
    """
    Download the serialized proof for ``index``: 32 bytes per sibling.
    """
    logger.info(f"Downloading proof {index}")
    return Response(content=store.read_proof(index), media_type=OCTET_STREAM)
