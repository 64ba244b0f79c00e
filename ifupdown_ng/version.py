"""Program name and version banner."""

from __future__ import annotations

import sys
from typing import TextIO

PACKAGE_NAME = "ifupdown-ng"
PACKAGE_VERSION = "0.11.3"


def version_text() -> str:
    """Return the version banner."""
    return f"{PACKAGE_NAME} {PACKAGE_VERSION}\n"


def print_version(stream: TextIO | None = None) -> None:
    """Write the version banner to ``stream`` (stdout by default)."""
    (stream if stream is not None else sys.stdout).write(version_text())