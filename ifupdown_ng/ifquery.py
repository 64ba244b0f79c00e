"""The ifquery applet: look up interface configuration and state."""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import TextIO

from .compat import CompatError, apply_compat
from .interface import Interface, InterfaceCollection
from .interface_file import ParseState
from .lifecycle import LifecycleError, count_rdepends, query_dependents
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
from .pretty_print import print_interface_eni
from .state import State
from .tokenize import tokens


def _out(stream: TextIO | None, ctx: Context) -> TextIO:
    return stream if stream is not None else ctx.stdout


def print_interface_dot(
    ctx: Context,
    collection: InterfaceCollection,
    iface: Interface,
    parent: Interface | None,
    stream: TextIO | None = None,
) -> None:
    """Write the dependency edges of ``iface`` in graphviz syntax."""
    out = _out(stream, ctx)
    try:
        query_dependents(ctx.exec_opts, iface, iface.ifname)
    except LifecycleError:
        return

    if parent is not None:
        out.write(f'"{parent.ifname} ({parent.rdepends_count})" -> ')
    out.write(f'"{iface.ifname} ({iface.rdepends_count})"\n')

    requires = iface.vars.find("requires")
    if requires is None:
        return

    for name in tokens(requires.value):
        child = collection.find_or_create(name)
        if child.is_pending:
            continue
        child.is_pending = True
        try:
            print_interface_dot(ctx, collection, child, iface, out)
        finally:
            child.is_pending = False


def print_interface_property(iface: Interface, prop: str, stream: TextIO) -> None:
    """Write every value of setting ``prop``, addresses in CIDR form."""
    for entry in iface.vars:
        if entry.key != prop:
            continue
        if prop == "address":
            try:
                text = iface.format_cidr(entry.value)
            except (OSError, ValueError):
                continue
            stream.write(f"{text}\n")
        else:
            stream.write(f"{entry.value}\n")


def _excluded(ctx: Context, name: str) -> bool:
    opts = ctx.match_opts
    if opts.exclude_pattern is not None and fnmatchcase(name, opts.exclude_pattern):
        return True
    if opts.include_pattern is not None and not fnmatchcase(name, opts.include_pattern):
        return True
    return False


def list_interfaces(
    ctx: Context, collection: InterfaceCollection, stream: TextIO | None = None
) -> None:
    """List the matching interfaces, pretty-printed or as a graph if asked."""
    out = _out(stream, ctx)
    opts = ctx.match_opts

    if opts.dot:
        out.write(
            "digraph interfaces {\n"
            "edge [color=blue fontname=Sans fontsize=10]\n"
            "node [fontname=Sans fontsize=10]\n"
        )

    for iface in list(collection):
        if opts.is_auto and not iface.is_auto:
            continue
        if _excluded(ctx, iface.ifname):
            continue

        if opts.pretty_print:
            print_interface_eni(ctx.exec_opts, iface, out)
        elif opts.dot:
            print_interface_dot(ctx, collection, iface, None, out)
        else:
            out.write(f"{iface.ifname}\n")

    if opts.dot:
        out.write("}\n")


def list_state(ctx: Context, state: State, stream: TextIO | None = None) -> None:
    """List the matching state records, or only their names when running."""
    out = _out(stream, ctx)
    running = ctx.flags.get("listing_running", False)

    for ifname, record in state:
        if _excluded(ctx, ifname):
            continue
        if running:
            out.write(f"{ifname}\n")
        else:
            explicit = " explicit" if record.is_explicit else ""
            out.write(f"{ifname}={record.mapped_if} {record.refcount}{explicit}\n")


def _load(ctx: Context) -> tuple[State, InterfaceCollection] | None:
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

    return state, collection


def ifquery_main(ctx: Context, args: list[str]) -> int:
    """Answer the query described by the options; return the exit status."""
    loaded = _load(ctx)
    if loaded is None:
        return 1
    state, collection = loaded

    applet = ctx.applet or IFQUERY_APPLET
    listing = ctx.flags.get("listing", False)
    listing_state = ctx.flags.get("listing_state", False)
    listing_running = ctx.flags.get("listing_running", False)

    if listing and (listing_state or listing_running):
        generic_usage(applet, 1, ctx.stderr)

    if listing:
        list_interfaces(ctx, collection, ctx.stdout)
        return 0
    if listing_state or listing_running:
        list_state(ctx, state, ctx.stdout)
        return 0

    if not args:
        generic_usage(applet, 1, ctx.stderr)

    for name in args:
        iface = state.lookup(collection, name)
        if iface is None:
            iface = collection.find(name)
            if iface is None and ctx.flags.get("allow_undefined", False):
                iface = collection.find_or_create(name)

        if iface is None:
            print(f"{ctx.argv0}: unknown interface {name}", file=ctx.stderr)
            return 1

        if ctx.match_opts.property is not None:
            print_interface_property(iface, ctx.match_opts.property, ctx.stdout)
        else:
            print_interface_eni(ctx.exec_opts, iface, ctx.stdout)

    return 0


def _set_flag(name: str):
    def handle(ctx: Context, arg: str | None) -> None:
        ctx.flags[name] = True

    return handle


def _set_pretty_print(ctx: Context, arg: str | None) -> None:
    ctx.match_opts.pretty_print = True


def _set_output_dot(ctx: Context, arg: str | None) -> None:
    ctx.match_opts.dot = True


def _set_property(ctx: Context, arg: str | None) -> None:
    ctx.match_opts.property = arg


LOCAL_OPTION_GROUP = OptionGroup(
    "Program-specific options",
    (
        Option("r", "running", None, "show configured (running) interfaces", False,
               _set_flag("listing_running")),
        Option("s", "state", None, "show configured state", False, _set_flag("listing_state")),
        Option("p", "property", "property PROPERTY",
               "print values of properties matching PROPERTY", True, _set_property),
        Option("D", "dot", None, "generate a dependency graph", False, _set_output_dot),
        Option("L", "list", None, "list matching interfaces", False, _set_flag("listing")),
        Option("P", "pretty-print", None,
               "pretty print the interfaces instead of just listing", False, _set_pretty_print),
        Option("U", "allow-undefined", None,
               "allow querying undefined (virtual) interfaces", False,
               _set_flag("allow_undefined")),
    ),
)

IFQUERY_APPLET = Applet(
    name="ifquery",
    desc="query interface configuration",
    main=ifquery_main,
    usage="ifquery [options] <interfaces>\n  ifquery [options] --list",
    manpage="8 ifquery",
    groups=(GLOBAL_OPTION_GROUP, MATCH_OPTION_GROUP, EXEC_OPTION_GROUP, LOCAL_OPTION_GROUP),
)