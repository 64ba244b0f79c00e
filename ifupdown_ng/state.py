"""The state file recording which interfaces are configured."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TextIO

from .interface import Interface, InterfaceCollection
from .lineread import iter_lines
from .multidict import MultiDict
from .tokenize import next_token

_ULONG_MAX = 2**64 - 1
_LEADING_UNSIGNED = re.compile(r"[ \t\n\v\f\r]*([+-]?)(\d*)")


def _parse_refcount(text: str) -> int:
    if not text:
        return 1
    match = _LEADING_UNSIGNED.match(text)
    assert match is not None
    sign, digits = match.groups()
    value = int(digits) if digits else 0
    if value > _ULONG_MAX:
        value = _ULONG_MAX
    elif sign == "-" and value:
        value = (-value) % (_ULONG_MAX + 1)
    if value in (0, _ULONG_MAX):
        return 1
    return value


@dataclass
class StateRecord:
    """What the state file knows about one configured interface name."""

    mapped_if: str
    refcount: int = 1
    is_explicit: bool = False


class State:
    """Ordered records of configured interfaces, keyed by interface name."""

    def __init__(self) -> None:
        self._records = MultiDict()

    def read(self, stream: TextIO) -> None:
        """Add the records of a state file read from ``stream``."""
        for line in iter_lines(stream):
            name, rest = next_token(line)
            refcount, rest = next_token(rest)
            explicit, _ = next_token(rest)
            if not name:
                continue

            ifname, eq, mapped = name.partition("=")
            if not eq:
                ifname = mapped = name

            self._store(
                ifname, StateRecord(mapped, _parse_refcount(refcount), explicit == "explicit")
            )

    def read_path(self, path: str) -> None:
        """Read the state file at ``path``; a missing file means no state."""
        try:
            stream = open(path, encoding="utf-8", errors="surrogateescape")
        except OSError:
            return
        with stream:
            self.read(stream)

    def _store(self, ifname: str, record: StateRecord) -> None:
        self.delete(ifname)
        self._records.add(ifname, record)

    def upsert(self, ifname: str, iface: Interface) -> None:
        """Record ``iface`` under ``ifname``, moving it to the end."""
        self._store(ifname, StateRecord(iface.ifname, iface.refcount, iface.is_explicit))

    def ref(self, ifname: str, iface: Interface) -> None:
        """Take a reference on ``iface`` and record it."""
        iface.refcount += 1
        self.upsert(ifname, iface)

    def unref(self, ifname: str, iface: Interface) -> None:
        """Drop a reference on ``iface``; forget it when none remain."""
        if iface.refcount == 0:
            return
        iface.refcount -= 1
        if iface.refcount:
            self.upsert(ifname, iface)
        else:
            self.delete(ifname)

    def delete(self, ifname: str) -> None:
        """Forget the record for ``ifname``, if any."""
        self._records.delete(ifname)

    def write(self, stream: TextIO) -> None:
        """Write all records to ``stream`` in state file format."""
        for ifname, record in self:
            explicit = " explicit" if record.is_explicit else ""
            stream.write(f"{ifname}={record.mapped_if} {record.refcount}{explicit}\n")

    def write_path(self, path: str) -> None:
        """Write the state file at ``path``; raise OSError on failure."""
        with open(path, "w", encoding="utf-8", errors="surrogateescape") as stream:
            self.write(stream)

    def lookup(self, collection: InterfaceCollection, ifname: str) -> Interface | None:
        """Return the interface that ``ifname`` is recorded as mapped to."""
        entry = self._records.find(ifname)
        if entry is None:
            return None
        return collection.find(entry.value.mapped_if)

    def sync(self, collection: InterfaceCollection) -> None:
        """Copy reference counts and explicit flags onto the interfaces."""
        for _, record in self:
            iface = collection.find_or_create(record.mapped_if)
            iface.refcount = record.refcount
            iface.is_explicit = record.is_explicit

    def __iter__(self) -> Iterator[tuple[str, StateRecord]]:
        return ((entry.key, entry.value) for entry in self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"State({list(self)!r})"