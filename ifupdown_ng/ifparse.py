"""The ifparse applet: show interface configuration in other formats."""

from __future__ import annotations

import io
from collections.abc import Callable

from .compat import CompatError, apply_compat
from .interface import Interface, InterfaceCollection
from .interface_file import ParseState
from .lifecycle import LifecycleError, count_rdepends
from .options import (
    EXEC_OPTION_GROUP,
    GLOBAL_OPTION_GROUP,
    MATCH_OPTION_GROUP,
    Applet,
    Context,
    Option,
    OptionGroup,
    generic_usage,
)
from .pretty_print import format_interface_eni
from .state import State
from .yaml_tree import boolean_node, document, list_node, string_node, write_yaml

DEFAULT_FORMAT = "ifupdown"


def format_interface_yaml(iface: Interface) -> str:
    """Return ``iface`` as a YAML list with type annotations."""
    doc = document("interfaces")
    iface_node = doc.append(list_node(iface.ifname))

    if iface.is_auto:
        iface_node.append(boolean_node("auto", True))

    for entry in iface.vars:
        value = entry.value
        if entry.key == "address":
            try:
                value = value.unparse(True)
            except (OSError, ValueError):
                continue
        iface_node.append(string_node(entry.key, value))

    out = io.StringIO()
    write_yaml(iface_node, out, True)
    return out.getvalue()


def _format_eni(ctx: Context, iface: Interface) -> str:
    return format_interface_eni(ctx.exec_opts, iface)


def _format_yaml(ctx: Context, iface: Interface) -> str:
    return format_interface_yaml(iface)


_FORMATS: dict[str, Callable[[Context, Interface], str]] = {
    "ifupdown": _format_eni,
    "yaml-raw": _format_yaml,
}


def _load(ctx: Context) -> InterfaceCollection | None:
    state = State()
    try:
        state.read_path(ctx.exec_opts.state_file)
    except OSError:
        print(f"{ctx.argv0}: could not parse {ctx.exec_opts.state_file}", file=ctx.stderr)
        return None

    collection = InterfaceCollection(ctx.config)
    try:
        ParseState(collection=collection).parse(ctx.exec_opts.interfaces_file)
    except OSError:
        print(f"{ctx.argv0}: could not parse {ctx.exec_opts.interfaces_file}", file=ctx.stderr)
        return None

    if ctx.match_opts.property is None:
        try:
            count_rdepends(ctx.exec_opts, collection)
        except LifecycleError:
            print(f"{ctx.argv0}: could not validate dependency tree", file=ctx.stderr)
            return None

    try:
        apply_compat(collection, ctx.config)
    except CompatError:
        print(f"{ctx.argv0}: failed to apply compatibility glue", file=ctx.stderr)
        return None

    return collection


def ifparse_main(ctx: Context, args: list[str]) -> int:
    """Print the requested interfaces in the chosen format; return the exit status."""
    collection = _load(ctx)
    if collection is None:
        return 1

    fmt = ctx.flags.get("output_format", DEFAULT_FORMAT)
    handler = _FORMATS.get(fmt)
    if handler is None:
        print(f"{ctx.argv0}: {fmt}: output format not supported", file=ctx.stderr)
        return 1

    if ctx.flags.get("show_all", False):
        for iface in list(collection):
            ctx.stdout.write(handler(ctx, iface))
        return 0

    if not args:
        generic_usage(ctx.applet or IFPARSE_APPLET, 1, ctx.stderr)

    for name in args:
        iface = collection.find(name)
        if iface is None and ctx.flags.get("allow_undefined", False):
            iface = collection.find_or_create(name)
        if iface is None:
            print(f"{ctx.argv0}: unknown interface {name}", file=ctx.stderr)
            return 1
        ctx.stdout.write(handler(ctx, iface))

    return 0


def _set_output_format(ctx: Context, arg: str | None) -> None:
    ctx.flags["output_format"] = arg


def _set_show_all(ctx: Context, arg: str | None) -> None:
    ctx.flags["show_all"] = True


def _set_allow_undefined(ctx: Context, arg: str | None) -> None:
    ctx.flags["allow_undefined"] = True


LOCAL_OPTION_GROUP = OptionGroup(
    "Program-specific options",
    (
        Option("F", "format", None, "output format to use", True, _set_output_format),
        Option("A", "all", None, "show all interfaces", False, _set_show_all),
        Option("U", "allow-undefined", None,
               "allow querying undefined (virtual) interfaces", False, _set_allow_undefined),
    ),
)

IFPARSE_APPLET = Applet(
    name="ifparse",
    desc="redisplay interface configuration",
    main=ifparse_main,
    usage="ifparse [options] <interfaces>\n  ifparse [options] --all",
    manpage="8 ifparse",
    groups=(GLOBAL_OPTION_GROUP, MATCH_OPTION_GROUP, EXEC_OPTION_GROUP, LOCAL_OPTION_GROUP),
)