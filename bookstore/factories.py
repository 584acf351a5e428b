"""
Test data factories for Books and Authors.

Three families of payloads:
- valid: random picks from fixed sample pools
- invalid: empty strings, absent fields and negative numbers
- boundary: very long strings and extreme integers

The id counters (Books from 1000, Authors from 2000) only label in-memory
sample objects. ``*_for_creation`` payloads carry no id so the server
assigns one.
"""

from __future__ import annotations

import itertools
import random
import threading
import time
from datetime import UTC, date, datetime, timedelta

from bookstore.domain.models import Author, Book

BOOK_TITLES = (
    "The Great Adventure",
    "Mystery of the Lost City",
    "Future Horizons",
    "Tales of Wonder",
    "Journey Through Time",
    "Secrets of the Universe",
    "The Last Guardian",
    "Digital Dreams",
    "Whispers in the Wind",
    "Chronicles of Tomorrow",
    "The Hidden Truth",
    "Beyond the Stars",
)

BOOK_DESCRIPTIONS = (
    "A captivating story that will keep you on the edge of your seat",
    "An epic adventure through unknown realms and mysterious lands",
    "A thought-provoking tale about the future of humanity",
    "A heartwarming story of friendship and courage",
    "An thrilling journey through time and space",
)

BOOK_EXCERPTS = (
    "In the beginning, there was darkness. Then came the light...",
    "The old man looked at the horizon, knowing his time had come...",
    "She opened the book and immediately felt transported to another world...",
    "The sound of footsteps echoed through the empty corridor...",
    "It was a dark and stormy night when everything changed...",
)

FIRST_NAMES = (
    "John", "Jane", "Michael", "Sarah", "David", "Emily", "Robert", "Lisa",
    "William", "Jessica", "James", "Ashley", "Daniel", "Amanda", "Christopher",
    "Stephanie", "Matthew", "Melissa", "Anthony", "Nicole",
)  # fmt: skip

LAST_NAMES = (
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller",
    "Davis", "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez",
    "Wilson", "Anderson", "Thomas", "Taylor", "Moore", "Jackson", "Martin",
)  # fmt: skip

BOOK_ID_START = 1000
AUTHOR_ID_START = 2000
INT32_MAX = 2**31 - 1
DATE_WINDOW_YEARS = 10

_rng = random.Random()
_counter_lock = threading.Lock()
_book_ids = itertools.count(BOOK_ID_START)
_author_ids = itertools.count(AUTHOR_ID_START)


def seed(value: int | None) -> None:
    """Reseed the shared random generator (deterministic sequences in tests)."""
    _rng.seed(value)


def _next_book_id() -> int:
    with _counter_lock:
        return next(_book_ids)


def _next_author_id() -> int:
    with _counter_lock:
        return next(_author_ids)


def _pick(pool: tuple[str, ...]) -> str:
    return _rng.choice(pool)


def _years_before(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return day.replace(year=day.year - years, day=28)


def random_publish_date() -> datetime:
    """Midnight UTC on a uniformly random day within the last ten years."""
    today = datetime.now(UTC).date()
    earliest = _years_before(today, DATE_WINDOW_YEARS)
    offset = _rng.randrange((today - earliest).days)
    day = earliest + timedelta(days=offset)
    return datetime(day.year, day.month, day.day, tzinfo=UTC)


def unique_string(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}"


def random_int(minimum: int, maximum: int) -> int:
    """Random integer in ``[minimum, maximum)``."""
    return _rng.randrange(minimum, maximum)


# ---------------------------------------------------------------------------
# Books
# ---------------------------------------------------------------------------


def random_book() -> Book:
    """Fully populated sample book with a local id."""
    return Book(
        id=_next_book_id(),
        title=_pick(BOOK_TITLES),
        description=_pick(BOOK_DESCRIPTIONS),
        page_count=random_int(50, 550),
        excerpt=_pick(BOOK_EXCERPTS),
        publish_date=random_publish_date(),
    )


def book_with_title(title: str) -> Book:
    return Book(
        title=title,
        description=f"Auto-generated description for: {title}",
        page_count=random_int(100, 500),
        excerpt=f"This is an excerpt from {title}",
        publish_date=random_publish_date(),
    )


def book_for_creation() -> Book:
    """Creation payload with a title made unique by a timestamp suffix."""
    return Book(
        title=f"{_pick(BOOK_TITLES)} {int(time.time() * 1000)}",
        description=_pick(BOOK_DESCRIPTIONS),
        page_count=random_int(100, 500),
        excerpt=_pick(BOOK_EXCERPTS),
        publish_date=datetime.now(UTC),
    )


def invalid_book() -> Book:
    return Book(
        id=-1,
        title="",
        description=None,
        page_count=-10,
        excerpt="",
        publish_date=None,
    )


def boundary_book(length: int = 30000) -> Book:
    """Very long text fields and the largest 32-bit page count."""
    return Book(
        title="T" * min(length, 1000),
        description="Very long description content " * (length // 30 or 1),
        page_count=INT32_MAX,
        excerpt="E" * length,
        publish_date=random_publish_date(),
    )


# ---------------------------------------------------------------------------
# Authors
# ---------------------------------------------------------------------------


def random_author() -> Author:
    return Author(
        id=_next_author_id(),
        id_book=random_int(1, 101),
        first_name=_pick(FIRST_NAMES),
        last_name=_pick(LAST_NAMES),
    )


def author_for_book(book_id: int) -> Author:
    return Author(
        id=_next_author_id(),
        id_book=book_id,
        first_name=_pick(FIRST_NAMES),
        last_name=_pick(LAST_NAMES),
    )


def author_for_creation() -> Author:
    return Author(
        id_book=random_int(1, 101),
        first_name=_pick(FIRST_NAMES),
        last_name=_pick(LAST_NAMES),
    )


def author_with_names(first_name: str | None, last_name: str | None) -> Author:
    return Author(
        id=_next_author_id(),
        id_book=random_int(1, 101),
        first_name=first_name,
        last_name=last_name,
    )


def invalid_author() -> Author:
    return Author(id=-1, id_book=-1, first_name="", last_name=None)


def boundary_author(length: int = 1000) -> Author:
    return Author(id_book=INT32_MAX, first_name="a" * length, last_name="a" * length)
