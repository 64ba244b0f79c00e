"""A minimal YAML node tree and writer."""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass, field
from typing import TextIO

_INDENT_WIDTH = 2


class YamlType(enum.Enum):
    """Kinds of node the writer supports."""

    STRING = enum.auto()
    LIST = enum.auto()
    OBJECT = enum.auto()
    BOOLEAN = enum.auto()


@dataclass
class YamlNode:
    """A named node holding a scalar value or child nodes."""

    name: str | None
    type: YamlType
    value: str | bool | None = None
    children: list[YamlNode] = field(default_factory=list)

    def append(self, child: YamlNode) -> YamlNode:
        """Add ``child`` after the existing children and return it."""
        self.children.append(child)
        return child


def document(name: str | None = None) -> YamlNode:
    """Return an empty top-level object node."""
    return YamlNode(name, YamlType.OBJECT)


def boolean_node(name: str | None, value: bool) -> YamlNode:
    """Return a boolean node."""
    return YamlNode(name, YamlType.BOOLEAN, bool(value))


def string_node(name: str | None, value: str | None) -> YamlNode:
    """Return a string node."""
    return YamlNode(name, YamlType.STRING, value)


def object_node(name: str | None) -> YamlNode:
    """Return an empty object node."""
    return YamlNode(name, YamlType.OBJECT)


def list_node(name: str | None) -> YamlNode:
    """Return an empty list node."""
    return YamlNode(name, YamlType.LIST)


def _write_node(node: YamlNode, stream: TextIO, indent: int, annotate: bool) -> None:
    if node.name is not None:
        stream.write(f"{' ' * indent}{node.name}: ")

    child_indent = indent + _INDENT_WIDTH

    if node.type is YamlType.BOOLEAN:
        tag = "!!bool " if annotate else ""
        stream.write(f"{tag}{'true' if node.value else 'false'}\n")
    elif node.type is YamlType.STRING:
        tag = "!!str " if annotate else ""
        stream.write(f"{tag}{node.value if node.value is not None else ''}\n")
    elif node.type is YamlType.OBJECT:
        stream.write("\n")
    else:
        stream.write("\n")
        child_indent += _INDENT_WIDTH

    for child in node.children:
        if node.type is YamlType.LIST:
            stream.write(f"{' ' * (child_indent - _INDENT_WIDTH)}-\n")
        _write_node(child, stream, child_indent, annotate)


def write_yaml(
    node: YamlNode, stream: TextIO | None = None, type_annotations: bool = False
) -> None:
    """Write ``node`` and its children to ``stream`` (stdout by default)."""
    _write_node(node, stream if stream is not None else sys.stdout, 0, type_annotations)