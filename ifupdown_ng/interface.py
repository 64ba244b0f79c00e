"""Network interfaces, their addresses and collections of them."""

from __future__ import annotations

import platform
import re
import socket
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace

from .config import Config
from .multidict import Entry, MultiDict

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


@dataclass
class Address:
    """An IPv4 or IPv6 address with an optional prefix length (0 = unset)."""

    domain: int
    packed: bytes
    netmask: int = 0

    def unparse(self, with_netmask: bool = True) -> str:
        """Return the address as text, with ``/prefix`` when it is set."""
        text = socket.inet_ntop(self.domain, self.packed)
        if not with_netmask or not self.netmask:
            return text
        return f"{text}/{self.netmask}"

    def __str__(self) -> str:
        return self.unparse(True)


def parse_address(presentation: str) -> Address:
    """Parse ``addr`` or ``addr/prefix``; raise ValueError if invalid."""
    domain = socket.AF_INET6 if ":" in presentation else socket.AF_INET
    host, sep, mask = presentation.rpartition("/")
    if sep:
        netmask = _leading_int(mask)
    else:
        host, netmask = presentation, 0

    try:
        packed = socket.inet_pton(domain, host)
    except (OSError, ValueError) as exc:
        raise ValueError(f"invalid address {presentation!r}") from exc

    return Address(domain, packed, netmask)


def netmask_to_prefix(netmask: str) -> int:
    """Convert a dotted netmask or a prefix length to a prefix length.

    Invalid dotted netmasks give 0.
    """
    if "." not in netmask:
        return _leading_int(netmask)

    try:
        packed = socket.inet_pton(socket.AF_INET, netmask)
    except (OSError, ValueError):
        return 0

    inverted = ~int.from_bytes(packed, "big") & 0xFFFFFFFF
    return 32 - inverted.bit_length()


@dataclass(eq=False)
class Interface:
    """A configured interface; ``vars`` holds its settings as a multidict."""

    ifname: str
    config: Config = field(default_factory=Config, repr=False)
    is_auto: bool = False
    is_bridge: bool = False
    is_bond: bool = False
    is_template: bool = False
    is_pending: bool = False
    is_explicit: bool = False
    has_config_error: bool = False
    vars: MultiDict = field(default_factory=MultiDict, repr=False)
    refcount: int = 0
    rdepends_count: int = 0

    def __post_init__(self) -> None:
        self.use_executor("link")
        # the 'vlan' executor stays as a config hint for backwards compatibility
        if "." in self.ifname:
            self.use_executor("vlan")

    def use_executor(self, executor: str) -> None:
        """Record that ``executor`` handles this interface."""
        self.vars.add_once("use", executor)

        if executor == "bridge":
            self.is_bridge = True
        elif executor == "bond":
            self.is_bond = True

        if executor != "dhcp" or not self.config.use_hostname_for_dhcp:
            return

        hostname = platform.node()
        if hostname:
            self.vars.add("dhcp-hostname", hostname)

    def add_address(self, address: str) -> Address:
        """Parse and add an address; raise ValueError if it is invalid."""
        addr = parse_address(address)
        self.use_executor("static")
        self.vars.add("address", addr)
        return addr

    def delete_address(self, address: str) -> None:
        """Remove every address entry whose text matches ``address``."""
        try:
            wanted = parse_address(address)
        except ValueError:
            return

        for entry in list(self.vars):
            if entry.key != "address":
                continue
            if entry.value.unparse(wanted.netmask != 0) != address:
                continue
            self.vars.remove_entry(entry)

    def determine_netmask(self, address: Address) -> int:
        """Return the prefix length to use for an address without one."""
        entry = self.vars.find("netmask")
        if entry is not None:
            return netmask_to_prefix(entry.value)
        return 64 if address.domain == socket.AF_INET6 else 24

    def format_cidr(self, address: Address) -> str:
        """Return ``address`` in CIDR form, leaving it unchanged."""
        netmask = address.netmask or self.determine_netmask(address)
        return replace(address, netmask=netmask).unparse(True)

    def finalize(self) -> None:
        """Give every address a prefix and drop the ``netmask`` setting."""
        for entry in self.vars:
            if entry.key == "address" and not entry.value.netmask:
                entry.value.netmask = self.determine_netmask(entry.value)

        self.vars.delete("netmask")

    def inherit(self, parent: Interface) -> None:
        """Copy the settings of ``parent`` into this interface."""
        if self.config.implicit_template_conversion:
            parent.is_template = True

        self.vars.add("inherit", parent.ifname)
        self.is_bond = parent.is_bond
        self.is_bridge = parent.is_bridge

        for entry in list(parent.vars):
            if entry.key == "address":
                self.vars.add(entry.key, replace(entry.value))
            else:
                self.vars.add_once(entry.key, entry.value)


class InterfaceCollection:
    """Interfaces keyed by name, in order; always holds the loopback."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config if config is not None else Config()
        self._entries = MultiDict()

        loopback = self.find_or_create("lo")
        loopback.is_auto = True
        loopback.is_explicit = True
        loopback.use_executor("loopback")

    def find(self, ifname: str) -> Interface | None:
        """Return the interface named ``ifname``, or None."""
        entry = self._entries.find(ifname)
        return entry.value if entry is not None else None

    def find_or_create(self, ifname: str) -> Interface:
        """Return the interface named ``ifname``, creating it if needed."""
        iface = self.find(ifname)
        if iface is None:
            iface = Interface(ifname, config=self.config)
            self._entries.add(ifname, iface)
        return iface

    def upsert(self, iface: Interface) -> Interface:
        """Insert ``iface``, replacing any interface of the same name."""
        entry = self._entries.find(iface.ifname)
        if entry is not None:
            if entry.value is iface:
                return iface
            self._entries.remove_entry(entry)
        self._entries.add(iface.ifname, iface)
        return iface

    def delete(self, iface: Interface) -> None:
        """Remove the interface with the name of ``iface``, if present."""
        entry = self._entries.find(iface.ifname)
        if entry is not None:
            self._entries.remove_entry(entry)

    def reorder(self, ifaces: Iterable[Interface]) -> None:
        """Put the interfaces in the given order; it must hold them all."""
        ordered = list(ifaces)
        current = list(self)
        if len(ordered) != len(current) or {id(i) for i in ordered} != {
            id(i) for i in current
        }:
            raise ValueError("reorder needs exactly the interfaces of the collection")
        self._entries.replace_entries(Entry(i.ifname, i) for i in ordered)

    def __iter__(self) -> Iterator[Interface]:
        return (entry.value for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, ifname: object) -> bool:
        return ifname in self._entries