"""
Root Route

Reports the Merkle root over the stored files.
"""

from fastapi import APIRouter, Depends

from api.deps import get_file_store
from api.models.responses import RootResponse
from core.storage.file_store import FileStore


router = APIRouter(tags=["root"])


@router.get("/root", response_model=RootResponse)
def get_root(store: FileStore = Depends(get_file_store)) -> RootResponse:
    """
    Root over the stored files.

    Informational only: clients verify against the root they computed
    before uploading, never against this value.
    """
    tree = store.ensure_proofs()
    return RootResponse(
        ok=True,
        root=tree.root.hex(),
        file_count=tree.size,
        depth=tree.height - 1,
    )
