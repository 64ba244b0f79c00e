"""The ifctrstat applet: display interface statistics counters."""

from __future__ import annotations

from .counters import (
    SYSFS_NET_ROOT,
    CounterError,
    available_counters,
    counter_is_valid,
    read_counter,
)
from .options import GLOBAL_OPTION_GROUP, Applet, Context, Option, OptionGroup, generic_usage


def _print_counter(ctx: Context, name: str, value: str) -> None:
    if ctx.flags.get("show_label", True):
        print(f"{name}: {value}", file=ctx.stdout)
    else:
        print(value, file=ctx.stdout)


def _report_failure(ctx: Context, counter: str, iface: str, exc: CounterError) -> None:
    print(
        f"{ctx.argv0}: could not determine value of {counter} for interface {iface}: "
        f"{exc.strerror}",
        file=ctx.stderr,
    )


def _print_all_counters(ctx: Context, iface: str, root: str) -> int:
    code = 0
    for name in available_counters():
        try:
            value = read_counter(iface, name, root)
        except CounterError as exc:
            _report_failure(ctx, name, iface, exc)
            code = 1
        else:
            _print_counter(ctx, name, value)
    return code


def ifctrstat_main(ctx: Context, args: list[str]) -> int:
    """Print the requested counters of an interface; return the exit status."""
    if not args:
        generic_usage(ctx.applet or IFCTRSTAT_APPLET, 1, ctx.stderr)

    root = ctx.flags.get("sysfs_root", SYSFS_NET_ROOT)
    iface, counters = args[0], args[1:]

    if not counters:
        return _print_all_counters(ctx, iface, root)

    for counter in counters:
        if not counter_is_valid(counter):
            print(
                f"{ctx.argv0}: counter {counter} is not valid or not available",
                file=ctx.stderr,
            )
            return 1
        try:
            value = read_counter(iface, counter, root)
        except CounterError as exc:
            _report_failure(ctx, counter, iface, exc)
            return 1
        _print_counter(ctx, counter, value)

    return 0


def _list_counters(ctx: Context, arg: str | None) -> None:
    for name in available_counters():
        print(name, file=ctx.stdout)
    raise SystemExit(0)


def _set_no_label(ctx: Context, arg: str | None) -> None:
    ctx.flags["show_label"] = False


LOCAL_OPTION_GROUP = OptionGroup(
    "Program-specific options",
    (
        Option("L", "list", None, "list available counters", False, _list_counters),
        Option("n", "no-label", None, "print value without counter label", False, _set_no_label),
    ),
)

IFCTRSTAT_APPLET = Applet(
    name="ifctrstat",
    desc="display statistics about an interface",
    main=ifctrstat_main,
    usage="ifctrstat [options] <interface> <counter>\n  ifctrstat [options] --list",
    manpage="8 ifctrstat",
    groups=(GLOBAL_OPTION_GROUP, LOCAL_OPTION_GROUP),
)