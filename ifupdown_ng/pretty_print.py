"""Printing interfaces in interfaces(5) syntax."""

from __future__ import annotations

import sys
from typing import TextIO

from .execute import ExecuteOptions
from .interface import Interface
from .lifecycle import LifecycleError, query_dependents


def format_interface_eni(opts: ExecuteOptions, iface: Interface) -> str:
    """Return ``iface`` as an interfaces(5) stanza, or "" if its dependents cannot be queried."""
    try:
        query_dependents(opts, iface, iface.ifname)
    except LifecycleError:
        return ""

    lines: list[str] = []
    if iface.is_auto:
        lines.append(f"auto {iface.ifname}")
    lines.append(f"{'template' if iface.is_template else 'iface'} {iface.ifname}")

    for entry in iface.vars:
        if entry.key == "address":
            try:
                text = entry.value.unparse(True)
            except (OSError, ValueError):
                lines.append("  # warning: failed to unparse address")
                continue
            lines.append(f"  {entry.key} {text}")
        else:
            lines.append(f"  {entry.key} {entry.value}")

    return "\n".join(lines) + "\n\n"


def print_interface_eni(
    opts: ExecuteOptions, iface: Interface, stream: TextIO | None = None
) -> None:
    """Write the stanza of ``iface`` to ``stream`` (stdout by default)."""
    (stream if stream is not None else sys.stdout).write(format_interface_eni(opts, iface))