"""CLI wrapper: Run the live contract suite against the bookstore API.

Extra arguments go to pytest, e.g. ``bookstore-live-test --env prod -k Books``.
"""

from __future__ import annotations

import sys

from cli._runner import run


def main() -> None:
    run([sys.executable, "-m", "pytest", "-m", "live_api", "-v", *sys.argv[1:]])
