"""Loading of the global ifupdown-ng configuration file."""

from __future__ import annotations

import functools
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from typing import TextIO

from .lineread import iter_lines
from .tokenize import next_token_eq

DEFAULT_CONFIG_FILE = "/etc/network/ifupdown-ng.conf"

Handler = Callable[[str, str], None]

_TRUE_CHARS = frozenset("1YyTt")
_FALSE_CHARS = frozenset("0NnFf")


class ConfigError(ValueError):
    """A configuration file could not be read or holds an invalid value."""


def parse_bool(value: str) -> bool:
    """Interpret a boolean setting by its first character."""
    first = value[:1]
    if first and first in _TRUE_CHARS:
        return True
    if first and first in _FALSE_CHARS:
        return False
    raise ConfigError(f"invalid boolean value {value!r}")


@dataclass
class Config:
    """Behaviour switches read from the configuration file."""

    allow_addon_scripts: bool = True
    allow_any_iface_as_template: bool = True
    auto_executor_selection: bool = True
    compat_create_interfaces: bool = True
    compat_ifupdown2_bridge_ports_inherit_vlans: bool = True
    implicit_template_conversion: bool = True
    use_hostname_for_dhcp: bool = True

    def handlers(self) -> dict[str, Handler]:
        """Return a setter for each setting, keyed by setting name."""
        return {
            field.name: functools.partial(self._set_bool, field.name)
            for field in fields(self)
        }

    def _set_bool(self, attribute: str, key: str, value: str) -> None:
        setattr(self, attribute, parse_bool(value))


def parse_config_stream(
    stream: TextIO, filename: str, handlers: Mapping[str, Handler]
) -> None:
    """Apply every ``key = value`` line of ``stream`` through ``handlers``.

    Unknown keys produce a warning on stderr; a handler raising
    :class:`ConfigError` stops parsing.
    """
    for lineno, line in enumerate(iter_lines(stream), start=1):
        key, rest = next_token_eq(line)
        value, _ = next_token_eq(rest)

        if not key or not value or key.startswith("#"):
            continue

        handler = handlers.get(key)
        if handler is None:
            print(
                f"ifupdown-ng: {filename}:{lineno}: warning: unknown config setting {key}",
                file=sys.stderr,
            )
            continue

        try:
            handler(key, value)
        except ConfigError as exc:
            raise ConfigError(f"{filename}:{lineno}: {exc}") from exc


def parse_config_file(filename: str, handlers: Mapping[str, Handler]) -> None:
    """Open ``filename`` and parse it with ``handlers``."""
    try:
        stream = open(filename, encoding="utf-8", errors="surrogateescape")
    except OSError as exc:
        raise ConfigError(f"unable to parse {filename}: {exc.strerror}") from exc
    with stream:
        parse_config_stream(stream, filename, handlers)


def load_config(filename: str = DEFAULT_CONFIG_FILE, config: Config | None = None) -> Config:
    """Return ``config`` (or a fresh one) updated from ``filename``.

    A file that cannot be opened leaves the settings unchanged.
    """
    if config is None:
        config = Config()
    try:
        stream = open(filename, encoding="utf-8", errors="surrogateescape")
    except OSError:
        return config
    with stream:
        parse_config_stream(stream, filename, config.handlers())
    return config