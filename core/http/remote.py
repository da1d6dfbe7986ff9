"""
Remote File Server Client

Talks to a merklefs server: uploads files by index, downloads files and
proofs, and checks downloaded content against a root the caller trusts.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from core.crypto.hashing import parse_digest, sha256
from core.http.client import HttpClient, HttpError, HttpResponse
from core.merkle.merkle_proofs import deserialize_proof
from core.merkle.merkle_tree import VerificationOutcome, verify_leaf
from core.schemas.errors import TransportException


logger = logging.getLogger(__name__)


class MerkleFSClient:
    """
    Client for the merklefs HTTP API.

    Usage:
        with MerkleFSClient("http://127.0.0.1:8080") as remote:
            remote.upload_file(0, Path("a.txt"))
            content, outcome = remote.download_verified(0, trusted_root)
    """

    def __init__(
        self,
        server_url: str,
        *,
        http: Optional[HttpClient] = None,
        timeout: float = 30.0,
        proxy: Optional[str] = None,
    ) -> None:
        self.server_url = server_url.rstrip("/")
        self.http = http or HttpClient(timeout=timeout, proxy=proxy)

    def _url(self, path: str) -> str:
        return f"{self.server_url}{path}"

    def _checked(self, response: HttpResponse, what: str) -> HttpResponse:
        if not response.ok:
            raise TransportException(
                f"Failed to {what}: HTTP {response.status_code} {response.text[:200]}",
                status_code=response.status_code,
            )
        return response

    def _get(self, path: str, what: str) -> HttpResponse:
        try:
            response = self.http.get(self._url(path))
        except HttpError as e:
            raise TransportException(f"Failed to {what}: {e}") from e
        return self._checked(response, what)

    def upload_file(self, index: int, path: Path) -> None:
        """
        Upload one file; its multipart filename is its leaf index.

        Raises:
            OSError: If the local file cannot be read
            TransportException: If the server rejects the upload
        """
        what = f"upload file {path}"
        with open(path, "rb") as f:
            try:
                response = self.http.post(
                    self._url("/upload"),
                    files={"file": (str(index), f, "application/octet-stream")},
                )
            except HttpError as e:
                raise TransportException(f"Failed to {what}: {e}") from e
        self._checked(response, what)

    def download_file(self, index: int) -> bytes:
        return self._get(f"/files/{index}", f"download file index {index}").content

    def download_proof(self, index: int) -> list[bytes]:
        """
        Download and decode the proof for ``index``.

        Raises:
            ProofFormatError: If the server sent a malformed proof
        """
        content = self._get(f"/proofs/{index}", f"download proof for file index {index}").content
        return deserialize_proof(content)

    def fetch_root(self) -> bytes:
        """Root as currently reported by the server (not a trust anchor)."""
        data = self._get("/root", "fetch merkle root").json()
        return parse_digest(data["root"])

    def download_verified(
        self,
        index: int,
        root: bytes,
    ) -> tuple[bytes, VerificationOutcome]:
        """
        Download a file and its proof and check them against ``root``.

        Returns:
            (content, outcome); the content must not be trusted unless
            ``outcome.ok``
        """
        content = self.download_file(index)
        proof = self.download_proof(index)
        outcome = verify_leaf(root, index, sha256(content), proof)
        if outcome.ok:
            logger.info(f"File index {index} verified against root {root.hex()}")
        else:
            logger.warning(f"File index {index} failed verification")
        return content, outcome

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "MerkleFSClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()
