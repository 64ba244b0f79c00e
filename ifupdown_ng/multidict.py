"""An ordered dictionary that may hold several values under one key."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(eq=False)
class Entry:
    """One key/value pair; entries are compared by identity."""

    key: str
    value: Any


class MultiDict:
    """Insertion-ordered multi-valued mapping of string keys.

    Iteration yields :class:`Entry` objects.  Entries added while iterating
    are visited too; take a ``list()`` first when removing during iteration.
    """

    def __init__(self, items: Iterable[tuple[str, Any]] = ()) -> None:
        self._entries: list[Entry] = []
        for key, value in items:
            self.add(key, value)

    def add(self, key: str, value: Any) -> Entry:
        """Append a new entry and return it."""
        entry = Entry(key, value)
        self._entries.append(entry)
        return entry

    def add_once(self, key: str, value: Any) -> Entry | None:
        """Append an entry unless ``key`` already holds an equal value.

        Returns the new entry, or None when nothing was added.
        """
        if value in self.find_all(key):
            return None
        return self.add(key, value)

    def find(self, key: str) -> Entry | None:
        """Return the first entry with ``key``, or None."""
        return next((entry for entry in self._entries if entry.key == key), None)

    def find_all(self, key: str) -> list[Any]:
        """Return every value stored under ``key``, in order."""
        return [entry.value for entry in self._entries if entry.key == key]

    def delete(self, key: str) -> None:
        """Remove the first entry with ``key``, if there is one."""
        entry = self.find(key)
        if entry is not None:
            self.remove_entry(entry)

    def remove_entry(self, entry: Entry) -> None:
        """Remove exactly this entry object."""
        for index, candidate in enumerate(self._entries):
            if candidate is entry:
                del self._entries[index]
                return
        raise ValueError(f"entry for key {entry.key!r} is not in this dictionary")

    def replace_entries(self, entries: Iterable[Entry]) -> None:
        """Replace the contents with ``entries``, in the given order."""
        self._entries = list(entries)

    def keys(self) -> list[str]:
        """Return the keys of all entries, duplicates included."""
        return [entry.key for entry in self._entries]

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __reversed__(self) -> Iterator[Entry]:
        return reversed(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return any(entry.key == key for entry in self._entries)

    def __repr__(self) -> str:
        pairs = ", ".join(f"({e.key!r}, {e.value!r})" for e in self._entries)
        return f"MultiDict([{pairs}])"