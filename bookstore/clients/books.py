"""Books API client: CRUD calls against ``/api/<version>/Books``."""

from __future__ import annotations

from bookstore.clients.base import ResourceClient
from bookstore.domain.models import Book


class BooksApiClient(ResourceClient[Book]):
    collection = "Books"
    model = Book
