"""
Response handle returned by every client call.

Wraps one completed HTTP exchange so checks and tests never touch the
transport objects directly.
"""

from __future__ import annotations

import json
import re
from typing import Any

import httpx

_JSON_PATH_TOKEN = re.compile(r"^(?P<key>[^\[]*)(?P<indexes>(?:\[\d+\])*)$")
_MISSING = object()


def extract_json_path(data: Any, path: str) -> Any:
    """Extract a value from nested JSON using a simple path syntax.

    Supported syntax examples:
      - "title" -> top-level field
      - "data.id" -> nested dict
      - "items[0].id" -> list index
      - "[0].title" -> index into a top-level array
      - "$.title" -> JSONPath-style root
      - "" or "$" -> the whole document

    Returns the found value or None.
    """
    if path in ("", "$"):
        return data

    if path.startswith("$."):
        path = path[2:]

    cur = data
    for tok in path.split("."):
        match = _JSON_PATH_TOKEN.match(tok)
        if not match:
            return None

        key = match.group("key")
        if key:
            if isinstance(cur, dict):
                cur = cur.get(key, _MISSING)
            elif isinstance(cur, list) and key.isdigit():
                idx = int(key)
                cur = cur[idx] if idx < len(cur) else _MISSING
            else:
                return None
            if cur is _MISSING:
                return None

        for idx_text in re.findall(r"\[(\d+)\]", match.group("indexes")):
            idx = int(idx_text)
            if not isinstance(cur, list) or idx >= len(cur):
                return None
            cur = cur[idx]

    return cur


class ResponseHandle:
    """One HTTP exchange: status, headers, body and timing."""

    def __init__(self, response: httpx.Response, elapsed_ms: float):
        self._response = response
        self.elapsed_ms = elapsed_ms
        self._json: Any = _MISSING

    def __repr__(self) -> str:
        return f"<ResponseHandle {self.method} {self.url} -> {self.status_code}>"

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def content(self) -> bytes:
        return self._response.content

    @property
    def text(self) -> str:
        return self._response.text

    @property
    def method(self) -> str:
        return self._response.request.method

    @property
    def url(self) -> str:
        return str(self._response.request.url)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code <= 299

    def header(self, name: str) -> str | None:
        return self._response.headers.get(name)

    def json(self) -> Any:
        """Parsed body. Raises ``ValueError`` when the body is not JSON."""
        if self._json is _MISSING:
            self._json = json.loads(self.text)
        return self._json

    def json_or_none(self) -> Any:
        try:
            return self.json()
        except ValueError:
            return None

    def json_path(self, path: str) -> Any:
        """Value at ``path`` in the parsed body, or None if absent or not JSON."""
        data = self.json_or_none()
        if data is None:
            return None
        return extract_json_path(data, path)
