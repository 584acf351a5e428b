"""Authors API client: CRUD calls against ``/api/<version>/Authors``."""

from __future__ import annotations

import logging

from bookstore.clients.base import ResourceClient
from bookstore.clients.response import ResponseHandle
from bookstore.domain.models import Author

logger = logging.getLogger(__name__)


class AuthorsApiClient(ResourceClient[Author]):
    collection = "Authors"
    model = Author

    def books_path(self, book_id: int | str) -> str:
        return f"{self.collection_path}/authors/books/{book_id}"

    def list_by_book_id(self, book_id: int | str) -> ResponseHandle:
        """Authors linked to a book (``GET /Authors/authors/books/{idBook}``)."""
        logger.info("Fetching authors for book ID: %s", book_id)
        return self._send("GET", self.books_path(book_id))

    def list_by_book_id_as_models(self, book_id: int | str) -> list[Author]:
        return self._as_models(self.list_by_book_id(book_id))
