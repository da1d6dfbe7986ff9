"""
Common test fixtures shared by all modules.

Provides factory functions for:
- Leaf digest lists (synthetic and the fixed regression vector)
- Directories of files for the digest sources and the CLI
- An HttpClient that routes requests into an in-process FastAPI app
"""

from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlsplit

from core.crypto.hashing import sha256
from core.http.client import HttpClient, HttpResponse


# Six leaf digests with a known root
REGRESSION_LEAVES = [
    bytes.fromhex("1d26c74fd25a4c3dbb09e029fc609588da499fd4af2a41c88f6316c7f8c54cf1"),
    bytes.fromhex("44c92e3a70ad3307b7056871c2bdb096d8bfa9373f5bf06a79bb6324a20ff2fb"),
    bytes.fromhex("fe2d958bad389d6522b04844acc0dced92bcdce95c87971ccbe0f3ad74543f0e"),
    bytes.fromhex("bbd1319ff740a5546ea65c0d3596672a3705cb9f496012ad6f089e1e0ab6331d"),
    bytes.fromhex("c5fbbae0208e0c69e6f28fddce5b3770141c405f50100f666dce23c110090345"),
    bytes.fromhex("dcbccb66ce7ebd666ce5837ce9d73df56049538623e4492ad6b98b37de9751ac"),
]

REGRESSION_ROOT = bytes.fromhex(
    "909f4133d05851b483a924b2f3b565651a59efc2ecfcf522c161e446f9638a74"
)


def make_leaves(count: int, prefix: str = "leaf") -> list[bytes]:
    """Distinct leaf digests: sha256(b"<prefix><i>")."""
    return [sha256(f"{prefix}{i}".encode()) for i in range(count)]


def make_file_contents(count: int) -> list[bytes]:
    return [f"file content number {i}\n".encode() * (i + 1) for i in range(count)]


def write_files(directory: Path, contents: list[bytes], names: Optional[list[str]] = None) -> list[Path]:
    """
    Write ``contents`` into ``directory``.

    Default names are zero-padded so name order equals list order.
    """
    directory.mkdir(parents=True, exist_ok=True)
    names = names or [f"file_{i:04d}.txt" for i in range(len(contents))]
    paths = []
    for name, content in zip(names, contents):
        path = directory / name
        path.write_bytes(content)
        paths.append(path)
    return paths


class TestClientHttp(HttpClient):
    """
    HttpClient whose requests go to a FastAPI TestClient.

    Only the path of the URL is forwarded.
    """

    __test__ = False

    def __init__(self, test_client: Any) -> None:
        super().__init__()
        self.test_client = test_client

    def request(
        self,
        method: str,
        url: str,
        *,
        files: Optional[dict[str, Any]] = None,
    ) -> HttpResponse:
        path = urlsplit(url).path or "/"
        kwargs: dict[str, Any] = {}
        if files:
            kwargs["files"] = files
        response = self.test_client.request(method, path, **kwargs)
        return HttpResponse(
            status_code=response.status_code,
            content=response.content,
            url=url,
        )

    def close(self) -> None:
        pass
