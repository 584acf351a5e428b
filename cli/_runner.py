"""
Subprocess launcher behind the ``bookstore-*`` console scripts.

The test and lint wrappers build a pytest or ruff command line and pass it
to ``run``; the wrapper exits with the tool's status.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence


def run(cmd: Sequence[str]) -> None:
    """Execute ``cmd`` in the foreground and exit with its return code."""
    completed = subprocess.run(cmd, check=False)
    raise SystemExit(completed.returncode)
