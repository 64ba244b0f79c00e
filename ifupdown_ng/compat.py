"""Compatibility glue for configurations written for other implementations."""

from __future__ import annotations

import sys

from .config import Config
from .interface import InterfaceCollection
from .tokenize import tokens


class CompatError(RuntimeError):
    """Compatibility glue could not be applied."""


def _bridge_ports_inherit_vlans(collection: InterfaceCollection, config: Config) -> None:
    for bridge in list(collection):
        if not bridge.is_bridge:
            continue

        pvid = bridge.vars.find("bridge-pvid")
        vids = bridge.vars.find("bridge-vids")
        if pvid is None and vids is None:
            continue

        ports = bridge.vars.find("bridge-ports")
        if ports is None or ports.value == "none":
            continue

        for port_name in tokens(ports.value):
            port = collection.find(port_name)
            if port is None:
                if not config.compat_create_interfaces:
                    print(
                        f'compat: Missing interface stanza for bridge-port "{port_name}" '
                        "but should not create one.",
                        file=sys.stderr,
                    )
                    continue
                port = collection.find_or_create(port_name)

            if pvid is not None and "bridge-pvid" not in port.vars:
                port.vars.add("bridge-pvid", pvid.value)
            if vids is not None and "bridge-vids" not in port.vars:
                port.vars.add("bridge-vids", vids.value)


def apply_compat(collection: InterfaceCollection, config: Config | None = None) -> None:
    """Apply the enabled compatibility rules to ``collection``.

    Without ``config`` the collection's own configuration is used.
    """
    if config is None:
        config = collection.config
    if config.compat_ifupdown2_bridge_ports_inherit_vlans:
        _bridge_ports_inherit_vlans(collection, config)