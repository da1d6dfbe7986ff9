"""
HTTP Client Module

Session-based HTTP client and the merklefs server client built on it.
"""

from .client import HttpClient, HttpError, HttpResponse
from .remote import MerkleFSClient

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
    "MerkleFSClient",
]
