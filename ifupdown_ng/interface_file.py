"""Parser for interfaces(5) configuration files."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from dataclasses import dataclass, field

from .interface import Interface, InterfaceCollection
from .lineread import iter_lines
from .tokenize import next_token

_SPACE = " \t\n\v\f\r"

# Option names used by other implementations, mapped to their equivalents here.
_REMAPPED_TOKENS = {
    "bond-ad-sys-priority": "bond-ad-actor-sys-prio",
    "bond-slaves": "bond-members",
    "client": "dhcp-client-id",
    "driver-message-level": "ethtool-msglvl",
    "endpoint": "tunnel-remote",
    "ethernet-autoneg": "ethtool-ethernet-autoneg",
    "ethernet-pause-autoneg": "ethtool-pause-autoneg",
    "ethernet-pause-rx": "ethtool-pause-rx",
    "ethernet-pause-tx": "ethtool-pause-tx",
    "ethernet-port": "ethtool-ethernet-port",
    "ethernet-wol": "ethtool-ethernet-wol",
    "gro-offload": "ethtool-offload-gro",
    "gso-offload": "ethtool-offload-gso",
    "hardware-dma-ring-rx": "ethtool-dma-ring-rx",
    "hardware-dma-ring-rx-jumbo": "ethtool-dma-ring-rx-jumbo",
    "hardware-dma-ring-rx-mini": "ethtool-dma-ring-rx-mini",
    "hardware-dma-ring-tx": "ethtool-dma-ring-tx",
    "hardware-irq-coalesce-adaptive-rx": "ethtool-coalesce-adaptive-rx",
    "hardware-irq-coalesce-adaptive-tx": "ethtool-coalesce-adaptive-tx",
    "hardware-irq-coalesce-pkt-rate-high": "ethtool-coalesce-pkt-rate-high",
    "hardware-irq-coalesce-pkt-rate-low": "ethtool-coalesce-pkt-rate-low",
    "hardware-irq-coalesce-rx-frames": "ethtool-coalesce-rx-frames",
    "hardware-irq-coalesce-rx-frames-high": "ethtool-coalesce-rx-frames-high",
    "hardware-irq-coalesce-rx-frames-irq": "ethtool-coalesce-rx-frames-irq",
    "hardware-irq-coalesce-rx-frames-low": "ethtool-coalesce-rx-frames-low",
    "hardware-irq-coalesce-rx-usecs": "ethtool-coalesce-rx-usecs",
    "hardware-irq-coalesce-rx-usecs-high": "ethtool-coalesce-rx-usecs-high",
    "hardware-irq-coalesce-rx-usecs-irq": "ethtool-coalesce-rx-usecs-irq",
    "hardware-irq-coalesce-rx-usecs-low": "ethtool-coalesce-rx-usecs-low",
    "hardware-irq-coalesce-sample-interval": "ethtool-coalesce-sample-interval",
    "hardware-irq-coalesce-stats-block-usecs": "ethtool-coalesce-stats-block-usecs",
    "hardware-irq-coalesce-tx-frames": "ethtool-coalesce-tx-frames",
    "hardware-irq-coalesce-tx-frames-high": "ethtool-coalesce-tx-frames-high",
    "hardware-irq-coalesce-tx-frames-irq": "ethtool-coalesce-tx-frames-irq",
    "hardware-irq-coalesce-tx-frames-low": "ethtool-coalesce-tx-frames-low",
    "hardware-irq-coalesce-tx-usecs": "ethtool-coalesce-tx-usecs",
    "hardware-irq-coalesce-tx-usecs-high": "ethtool-coalesce-tx-usecs-high",
    "hardware-irq-coalesce-tx-usecs-irq": "ethtool-coalesce-tx-usecs-irq",
    "hardware-irq-coalesce-tx-usecs-low": "ethtool-coalesce-tx-usecs-low",
    "hostname": "dhcp-hostname",
    "key": "tunnel-key",
    "leasetime": "dhcp-leasetime",
    "link-autoneg": "ethtool-ethernet-autoneg",
    "link-duplex": "ethtool-link-duplex",
    "link-fec": "ethtool-link-fec",
    "link-speed": "ethtool-link-speed",
    "local": "tunnel-local",
    "lro-offload": "ethtool-offload-lro",
    "mode": "tunnel-mode",
    "offload-gro": "ethtool-offload-gro",
    "offload-gso": "ethtool-offload-gso",
    "offload-lro": "ethtool-offload-lro",
    "offload-rx": "ethtool-offload-rx",
    "offload-sg": "ethtool-offload-sg",
    "offload-tso": "ethtool-offload-tso",
    "offload-tx": "ethtool-offload-tx",
    "offload-ufo": "ethtool-offload-ufo",
    "pointopoint": "point-to-point",
    "provider": "ppp-provider",
    "script": "dhcp-script",
    "rx-offload": "ethtool-offload-rx",
    "tso-offload": "ethtool-offload-tso",
    "ttl": "tunnel-ttl",
    "tunnel-endpoint": "tunnel-remote",
    "tunnel-physdev": "tunnel-dev",
    "tx-offload": "ethtool-offload-tx",
    "ufo-offload": "ethtool-offload-ufo",
    "vendor": "dhcp-vendor",
    "vrf": "vrf-member",
    "vxlan-local-tunnelip": "vxlan-local-ip",
    "vxlan-remote-group": "vxlan-peer-group",
    "vxlan-remoteip": "vxlan-peer-ips",
    "vxlan-remote-ip": "vxlan-peer-ips",
    "vxlan-svcnodeip": "vxlan-peer-group",
}


class InterfacesFileError(OSError):
    """An interfaces file could not be read."""


def remap_token(token: str) -> str:
    """Return the native name for an option name from other implementations."""
    return _REMAPPED_TOKENS.get(token, token)


@dataclass
class ParseState:
    """State carried across the files of one interfaces configuration."""

    collection: InterfaceCollection = field(default_factory=InterfaceCollection)
    cur_iface: Interface | None = None
    cur_filename: str | None = None
    cur_lineno: int = 0
    loaded: set[str] = field(default_factory=set)
    errors: list[str] = field(default_factory=list)

    def report_error(self, message: str) -> None:
        """Record a non-fatal problem and print it to stderr."""
        text = f"{self.cur_filename}:{self.cur_lineno}: {message}"
        self.errors.append(text)
        print(text, file=sys.stderr)

    def parse(self, filename: str) -> None:
        """Parse ``filename`` into the collection.

        Raise :class:`InterfacesFileError` when it, or a file it sources,
        cannot be opened.  Files already parsed are skipped.
        """
        if filename in self.loaded:
            self.report_error(f"skipping already included file {filename}")
            return

        try:
            stream = open(filename, encoding="utf-8", errors="surrogateescape")
        except OSError as exc:
            raise InterfacesFileError(exc.errno, exc.strerror, filename) from exc

        old_filename, old_lineno = self.cur_filename, self.cur_lineno
        self.cur_filename, self.cur_lineno = filename, 0
        self.loaded.add(filename)

        try:
            with stream:
                for line in iter_lines(stream):
                    self.cur_lineno += 1
                    token, rest = next_token(line)
                    if not token or not (token[0].isascii() and token[0].isalpha()):
                        continue
                    handler = _KEYWORDS.get(token, _handle_generic)
                    handler(self, token, rest)

            if self.cur_iface is not None:
                self.cur_iface.finalize()
        finally:
            self.cur_filename, self.cur_lineno = old_filename, old_lineno


def _handle_address(state: ParseState, token: str, rest: str) -> None:
    addr, _ = next_token(rest)
    if state.cur_iface is None:
        state.report_error(f"{token} '{addr}' without interface")
        return
    try:
        state.cur_iface.add_address(addr)
    except ValueError:
        pass


def _handle_auto(state: ParseState, token: str, rest: str) -> None:
    ifname, _ = next_token(rest)
    if not ifname and state.cur_iface is None:
        state.report_error("auto without interface")
        return

    iface = state.collection.find_or_create(ifname)
    state.cur_iface = iface
    if not iface.is_template:
        iface.is_auto = True
    if iface.is_auto:
        iface.is_explicit = True


def _handle_gateway(state: ParseState, token: str, rest: str) -> None:
    addr, _ = next_token(rest)
    if state.cur_iface is None:
        state.report_error(f"{token} '{addr}' without interface")
        return
    state.cur_iface.use_executor("static")
    state.cur_iface.vars.add(token, addr)


def _handle_generic(state: ParseState, token: str, rest: str) -> None:
    iface = state.cur_iface
    if iface is None:
        return

    token = remap_token(token)
    if token == "bridge-ports":
        iface.is_bridge = True

    iface.vars.add(token, rest.lstrip(_SPACE))

    if not state.collection.config.auto_executor_selection:
        return

    # a token shaped like <word1>-<word*> hints at <word1> being an addon
    addon, dash, _ = token.partition("-")
    if dash:
        iface.use_executor(addon)


def _handle_hostname(state: ParseState, token: str, rest: str) -> None:
    hostname, _ = next_token(rest)
    if state.cur_iface is None:
        state.report_error(f"{token} '{hostname}' without interface")
        return
    state.cur_iface.vars.delete("dhcp-hostname")
    state.cur_iface.vars.add("dhcp-hostname", hostname)


def _handle_iface(state: ParseState, token: str, rest: str) -> None:
    ifname, rest = next_token(rest)
    if not ifname:
        state.report_error(f"{token} without any other tokens")
        return

    if state.cur_iface is not None:
        state.cur_iface.finalize()

    iface = state.collection.find_or_create(ifname)
    state.cur_iface = iface

    if token == "template":
        iface.is_auto = False
        iface.is_template = True

    # hints such as "inet dhcp" or "inet ppp" from classic configurations
    hint, rest = next_token(rest)
    while hint:
        if hint == "dhcp":
            iface.use_executor("dhcp")
        elif hint == "ppp":
            iface.use_executor("ppp")
        elif hint == "inherits":
            _handle_inherit(state, hint, rest)
        hint, rest = next_token(rest)


def _handle_inherit(state: ParseState, token: str, rest: str) -> None:
    target, _ = next_token(rest)
    iface = state.cur_iface
    if iface is None:
        state.report_error(f"{token} '{target}' without interface")
        return

    if not target:
        state.report_error(f"iface {iface.ifname}: unspecified inherit target")
        iface.has_config_error = True
        return

    parent = state.collection.find_or_create(target)

    if not state.collection.config.allow_any_iface_as_template and not parent.is_template:
        state.report_error(
            f"iface {iface.ifname}: could not inherit from {target}: "
            "inheritence from non-template interface not allowed"
        )
        iface.has_config_error = True
        return

    iface.inherit(parent)


def _handle_source(state: ParseState, token: str, rest: str) -> None:
    filename, _ = next_token(rest)
    if not filename:
        state.report_error("missing filename to source")
        return
    state.parse(filename)


def _handle_source_directory(state: ParseState, token: str, rest: str) -> None:
    directory, _ = next_token(rest)
    if not directory:
        state.report_error("missing directory to source")
        return

    try:
        with os.scandir(directory) as entries:
            names = [e.name for e in entries if e.is_file(follow_symlinks=False)]
    except OSError as exc:
        state.report_error(f"while opening directory {directory}: {exc.strerror}")
        return

    for name in names:
        state.parse(f"{directory}/{name}")


def _handle_use(state: ParseState, token: str, rest: str) -> None:
    executor, _ = next_token(rest)
    if state.cur_iface is None:
        state.report_error(f"{token} '{executor}' without interface")
        return
    state.cur_iface.use_executor(executor)


_KEYWORDS: dict[str, Callable[[ParseState, str, str], None]] = {
    "address": _handle_address,
    "auto": _handle_auto,
    "dhcp-hostname": _handle_hostname,
    "gateway": _handle_gateway,
    "hostname": _handle_hostname,
    "iface": _handle_iface,
    "inherit": _handle_inherit,
    "interface": _handle_iface,
    "source": _handle_source,
    "source-directory": _handle_source_directory,
    "template": _handle_iface,
    "use": _handle_use,
}