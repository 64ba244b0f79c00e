"""Reading interface statistics counters from sysfs."""

from __future__ import annotations

import errno
import os

SYSFS_NET_ROOT = "/sys/class/net"

_COUNTERS = {
    "rx.discard": "rx_dropped",
    "rx.errors": "rx_errors",
    "rx.octets": "rx_bytes",
    "rx.packets": "rx_packets",
    "tx.discard": "tx_dropped",
    "tx.errors": "tx_errors",
    "tx.octets": "tx_bytes",
    "tx.packets": "tx_packets",
}

_PATH_MAX = 4096
_READ_MAX = 1024


class CounterError(OSError):
    """A counter could not be read; ``errno`` says why."""


def _error(code: int, filename: str | None = None) -> CounterError:
    return CounterError(code, os.strerror(code), filename)


def _statistic_name(counter: str) -> str | None:
    if not counter.isascii():
        return None
    return _COUNTERS.get(counter.lower())


def available_counters() -> tuple[str, ...]:
    """Return the names of all supported counters, in order."""
    return tuple(_COUNTERS)


def counter_is_valid(name: str) -> bool:
    """Tell whether ``name`` is a supported counter (case-insensitive)."""
    return _statistic_name(name) is not None


def read_counter(interface: str, counter: str, root: str = SYSFS_NET_ROOT) -> str:
    """Return the value of ``counter`` for ``interface`` as text."""
    statistic = _statistic_name(counter)
    if statistic is None:
        raise _error(errno.ENOSYS, counter)

    path = f"{root}/{interface}/statistics/{statistic}"
    if len(path) > _PATH_MAX:
        raise _error(errno.ENOMEM, path)

    try:
        with open(path, "rb") as stream:
            data = stream.read(_READ_MAX)
    except OSError as exc:
        raise CounterError(exc.errno, exc.strerror, path) from exc

    if len(data) == _READ_MAX:
        raise _error(errno.ENOMEM, path)

    # the value ends in a newline, which callers add back themselves
    return data[:-1].decode("ascii", errors="replace")