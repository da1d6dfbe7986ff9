"""
HTTP Transport

Session-backed transport used by MerkleFSClient: plain GETs for files,
proofs and roots, and multipart POSTs for uploads.
"""

from __future__ import annotations

import json as jsonlib
from dataclasses import dataclass
from typing import Any, Optional

import requests


@dataclass
class HttpResponse:
    """Status and body of a completed request."""
    status_code: int
    content: bytes
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return jsonlib.loads(self.content)


class HttpError(Exception):
    """The request never produced a response (connection, timeout, proxy)."""


class HttpClient:
    """
    Transport over one requests session.

    Usage:
        with HttpClient(timeout=10) as http:
            response = http.get("http://127.0.0.1:8080/root")
            http.post("http://127.0.0.1:8080/upload", files={"file": ("0", f)})
    """

    def __init__(self, *, timeout: float = 30.0, proxy: Optional[str] = None) -> None:
        self.timeout = timeout
        self.proxy = proxy
        self._session: Optional[requests.Session] = None

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            if self.proxy:
                self._session.proxies = {"http": self.proxy, "https": self.proxy}
        return self._session

    def request(
        self,
        method: str,
        url: str,
        *,
        files: Optional[dict[str, Any]] = None,
    ) -> HttpResponse:
        """
        Send one request and buffer the whole response body.

        Raises:
            HttpError: If no response was received
        """
        try:
            response = self._get_session().request(
                method, url, files=files, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise HttpError(str(e)) from e

        return HttpResponse(
            status_code=response.status_code,
            content=response.content,
            url=str(response.url),
        )

    def get(self, url: str) -> HttpResponse:
        return self.request("GET", url)

    def post(self, url: str, *, files: Optional[dict[str, Any]] = None) -> HttpResponse:
        """POST a multipart body built from ``files``."""
        return self.request("POST", url, files=files)

    def close(self) -> None:
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()
