"""HTTP clients for the bookstore API resources."""

from .authors import AuthorsApiClient
from .base import DEFAULT_HEADERS, USER_AGENT, BaseApiClient, ResourceClient
from .books import BooksApiClient
from .response import ResponseHandle, extract_json_path

__all__ = [
    "AuthorsApiClient",
    "BaseApiClient",
    "BooksApiClient",
    "DEFAULT_HEADERS",
    "ResourceClient",
    "ResponseHandle",
    "USER_AGENT",
    "extract_json_path",
]
