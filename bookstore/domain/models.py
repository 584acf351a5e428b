"""Wire models for the Books and Authors resources.

Every field is optional: the remote API's own validation is what the suite
exercises, so the client never refuses to send a payload. ``to_payload()``
drops ``None`` fields, which is how creation payloads omit the
server-assigned ``id`` and how negative tests express an absent field.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys and without ``None`` values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> WireModel:
        return cls.model_validate(data)


class Book(WireModel):
    id: int | None = None
    title: str | None = None
    description: str | None = None
    page_count: int | None = Field(default=None, alias="pageCount")
    excerpt: str | None = None
    publish_date: datetime | None = Field(default=None, alias="publishDate")

    @classmethod
    def sample(cls) -> Book:
        return cls(
            id=1,
            title="Test Book Title",
            description="This is a test book description",
            page_count=250,
            excerpt="This is a test excerpt from the book...",
            publish_date=datetime.now(UTC),
        )

    @classmethod
    def with_title(cls, title: str) -> Book:
        """Creation payload (no ``id``) around a given title."""
        return cls(
            title=title,
            description=f"Auto-generated description for {title}",
            page_count=100,
            excerpt="Auto-generated excerpt",
            publish_date=datetime.now(UTC),
        )


class Author(WireModel):
    id: int | None = None
    id_book: int | None = Field(default=None, alias="idBook")
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")

    @property
    def full_name(self) -> str:
        """First and last name joined by a space; not part of the payload."""
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def sample(cls) -> Author:
        return cls(id=1, id_book=1, first_name="John", last_name="Doe")

    @classmethod
    def with_names(cls, first_name: str | None, last_name: str | None) -> Author:
        return cls(first_name=first_name, last_name=last_name, id_book=1)

    @classmethod
    def with_book_id(
        cls, first_name: str | None, last_name: str | None, book_id: int | None
    ) -> Author:
        return cls(first_name=first_name, last_name=last_name, id_book=book_id)
