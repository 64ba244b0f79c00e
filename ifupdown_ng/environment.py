"""Environment variable lists handed to executors."""

from __future__ import annotations

from collections.abc import Iterator

# Longest "NAME=value" string kept; longer ones are truncated.
_ENTRY_MAX = 4095


class Environment:
    """An ordered list of ``NAME=value`` strings; names may repeat."""

    def __init__(self) -> None:
        self._entries: list[str] = []

    def push(self, name: str, value: str) -> None:
        """Append ``name=value``."""
        self._entries.append(f"{name}={value}"[:_ENTRY_MAX])

    def as_dict(self) -> dict[str, str]:
        """Return the variables as a mapping; later entries win."""
        result: dict[str, str] = {}
        for entry in self._entries:
            name, _, value = entry.partition("=")
            result[name] = value
        return result

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Environment({self._entries!r})"