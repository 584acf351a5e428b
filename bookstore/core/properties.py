"""
Lightweight .properties file loader.

Parses the layered configuration files bundled with the harness
(``config.properties`` and ``config-<env>.properties``). The dialect is the
subset of Java properties the files actually use:

    # comment
    ! also a comment
    api.base.url=https://fakerestapi.azurewebsites.net
    api.version: v1

Usage:
    from bookstore.core.properties import load_properties, merge_layers

    base = load_properties("config.properties")
    overlay = load_properties("config-dev.properties")
    merged = merge_layers(base, overlay)
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path


def _strip_inline_comment(value: str) -> str:
    """Remove inline comments from unquoted values.

    Examples:
        "30000 # ms" -> "30000"
        '"value # not a comment"' -> '"value # not a comment"'
    """
    if not value or value[0] in ('"', "'"):
        return value

    for marker in (" #", "\t#"):
        idx = value.find(marker)
        if idx != -1:
            return value[:idx].rstrip()
    return value


def _unquote(value: str) -> str:
    """Remove surrounding quotes from a value."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def _split_key_value(line: str) -> tuple[str, str] | None:
    """Split on the first ``=`` or ``:``, whichever comes first."""
    positions = [idx for idx in (line.find("="), line.find(":")) if idx != -1]
    if not positions:
        return None
    idx = min(positions)
    return line[:idx], line[idx + 1 :]


def _parse_line(line: str) -> tuple[str, str] | None:
    """Parse a single line from a properties file.

    Returns:
        Tuple of (key, value) or None if line should be skipped.
    """
    line = line.strip()

    if not line or line[0] in ("#", "!"):
        return None

    parts = _split_key_value(line)
    if parts is None:
        return None

    key, value = parts
    key = key.strip()
    if not key:
        return None

    value = _unquote(_strip_inline_comment(value.strip()))
    return key, value


def parse_properties(text: str) -> dict[str, str]:
    """Parse properties text into an ordered dict. Later duplicates win."""
    parsed: dict[str, str] = {}
    for raw_line in text.splitlines():
        item = _parse_line(raw_line)
        if item:
            key, value = item
            parsed[key] = value
    return parsed


def load_properties(path: str | Path) -> dict[str, str]:
    """Load key/value pairs from a properties file.

    A missing file yields an empty dict; the caller decides whether that
    deserves a log line.
    """
    path = Path(path)
    if not path.is_file():
        return {}
    return parse_properties(path.read_text(encoding="utf-8"))


def merge_layers(*layers: Mapping[str, str] | None) -> dict[str, str]:
    """Merge configuration layers key-wise; later layers win."""
    merged: dict[str, str] = {}
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged
