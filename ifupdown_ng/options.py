"""Command-line options shared by the applets."""

from __future__ import annotations

import re
import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, Optional, TextIO

from .config import Config
from .execute import DEFAULT_TIMEOUT, ExecuteOptions
from .version import print_version

Handler = Callable[["Context", Optional[str]], None]

_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")


@dataclass(frozen=True)
class Option:
    """One command-line option and the handler that applies it."""

    short_opt: str
    long_opt: Optional[str]
    long_opt_desc: Optional[str]
    desc: str
    require_argument: bool
    handle: Handler


@dataclass(frozen=True)
class OptionGroup:
    """Options shown together under one heading in the usage text."""

    desc: str
    options: tuple[Option, ...]


@dataclass(frozen=True)
class Applet:
    """A program reachable through the multi-call entry point."""

    name: str
    main: Callable[["Context", list[str]], int]
    desc: Optional[str] = None
    usage: Optional[str] = None
    manpage: Optional[str] = None
    groups: tuple[OptionGroup, ...] = ()


@dataclass
class MatchOptions:
    """Which interfaces a command applies to, and how to show them."""

    is_auto: bool = False
    exclude_pattern: Optional[str] = None
    include_pattern: Optional[str] = None
    pretty_print: bool = False
    dot: bool = False
    property: Optional[str] = None


@dataclass
class Context:
    """Everything a running applet needs: settings, streams and flags."""

    argv0: str = "ifupdown"
    exec_opts: ExecuteOptions = field(default_factory=ExecuteOptions)
    match_opts: MatchOptions = field(default_factory=MatchOptions)
    config: Config = field(default_factory=Config)
    applet: Optional[Applet] = None
    flags: dict[str, Any] = field(default_factory=dict)
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)


def parse_timeout(value: str) -> int:
    """Parse a timeout in seconds; negative values give the default."""
    match = _LEADING_INT.match(value)
    timeout = int(match.group(1)) if match else 0
    return DEFAULT_TIMEOUT if timeout < 0 else timeout


def _usage_text(applet: Applet) -> str:
    parts = [applet.name]
    if applet.desc is not None:
        parts.append(f" - {applet.desc}")
    parts.append("\n")

    if applet.usage is not None:
        parts.append(f"\nUsage:\n  {applet.usage}\n")

    for group in applet.groups:
        parts.append(f"\n{group.desc}:\n")
        for opt in group.options:
            line = "  " + (f"-{opt.short_opt}" if opt.short_opt else "  ")
            if opt.long_opt:
                sep = "," if opt.short_opt else " "
                line += f"{sep} --{opt.long_opt_desc or opt.long_opt:<30}"
            else:
                line += " " * 34
            parts.append(f"{line}{opt.desc}\n")

    if applet.manpage is not None:
        parts.append(f"\nFor more information: man {applet.manpage}\n")

    return "".join(parts)


def generic_usage(applet: Applet, result: int, stream: TextIO | None = None) -> None:
    """Write the usage text of ``applet`` and exit with ``result``."""
    (stream if stream is not None else sys.stderr).write(_usage_text(applet))
    raise SystemExit(result)


def _options(applet: Applet) -> Iterator[Option]:
    for group in applet.groups:
        yield from group.options


def lookup_option(applet: Applet, opt: str) -> Option | None:
    """Return the option of ``applet`` with short name ``opt``."""
    return next((o for o in _options(applet) if o.short_opt == opt), None)


class _OptionError(Exception):
    pass


def _match_long(applet: Applet, name: str) -> Option:
    options = [o for o in _options(applet) if o.long_opt]
    for option in options:
        if option.long_opt == name:
            return option
    candidates = [o for o in options if o.long_opt.startswith(name)]
    if not candidates or not name:
        raise _OptionError(f"unrecognized option '--{name}'")
    if len({o.short_opt for o in candidates}) > 1:
        raise _OptionError(f"option '--{name}' is ambiguous")
    return candidates[0]


def process_options(ctx: Context, applet: Applet, argv: list[str]) -> list[str]:
    """Apply the options in ``argv`` and return the remaining arguments.

    Options may follow arguments; ``--`` ends option processing.  An
    invalid option is reported on ``ctx.stderr`` and stops processing.
    """
    ctx.applet = applet
    args = list(argv)
    positional: list[str] = []
    index = 0

    try:
        while index < len(args):
            arg = args[index]
            index += 1

            if arg == "--":
                break

            if arg.startswith("--"):
                name, eq, value = arg[2:].partition("=")
                option = _match_long(applet, name)
                if option.require_argument:
                    if not eq:
                        if index >= len(args):
                            raise _OptionError(
                                f"option '--{option.long_opt}' requires an argument"
                            )
                        value = args[index]
                        index += 1
                    option.handle(ctx, value)
                else:
                    if eq:
                        raise _OptionError(
                            f"option '--{option.long_opt}' doesn't allow an argument"
                        )
                    option.handle(ctx, None)
                continue

            if arg.startswith("-") and arg != "-":
                chars = arg[1:]
                for pos, char in enumerate(chars):
                    option = lookup_option(applet, char)
                    if option is None:
                        raise _OptionError(f"invalid option -- '{char}'")
                    if not option.require_argument:
                        option.handle(ctx, None)
                        continue
                    value = chars[pos + 1:]
                    if not value:
                        if index >= len(args):
                            raise _OptionError(f"option requires an argument -- '{char}'")
                        value = args[index]
                        index += 1
                    option.handle(ctx, value)
                    break
                continue

            positional.append(arg)
    except _OptionError as exc:
        print(f"{ctx.argv0}: {exc}", file=ctx.stderr)

    positional.extend(args[index:])
    return positional


def _help(ctx: Context, arg: str | None) -> None:
    generic_usage(ctx.applet, 0, ctx.stderr)


def _version(ctx: Context, arg: str | None) -> None:
    print_version(ctx.stdout)
    raise SystemExit(0)


def _set_force(ctx: Context, arg: str | None) -> None:
    ctx.exec_opts.force = True


def _set_interfaces_file(ctx: Context, arg: str | None) -> None:
    ctx.exec_opts.interfaces_file = arg


def _set_no_lock(ctx: Context, arg: str | None) -> None:
    ctx.exec_opts.no_lock = True


def _set_no_act(ctx: Context, arg: str | None) -> None:
    ctx.exec_opts.mock = True
    ctx.exec_opts.verbose = True


def _set_verbose(ctx: Context, arg: str | None) -> None:
    ctx.exec_opts.verbose = True


def _set_executor_path(ctx: Context, arg: str | None) -> None:
    ctx.exec_opts.executor_path = arg


def _set_state_file(ctx: Context, arg: str | None) -> None:
    ctx.exec_opts.state_file = arg


def _set_timeout(ctx: Context, arg: str | None) -> None:
    ctx.exec_opts.timeout = parse_timeout(arg or "")


def _set_auto(ctx: Context, arg: str | None) -> None:
    ctx.match_opts.is_auto = True


def _set_include(ctx: Context, arg: str | None) -> None:
    ctx.match_opts.include_pattern = arg


def _set_exclude(ctx: Context, arg: str | None) -> None:
    ctx.match_opts.exclude_pattern = arg


GLOBAL_OPTION_GROUP = OptionGroup(
    "Global options",
    (
        Option("h", "help", None, "this help", False, _help),
        Option("V", "version", None, "show this program's version", False, _version),
    ),
)

MATCH_OPTION_GROUP = OptionGroup(
    "Matching interfaces",
    (
        Option("a", "auto", None, "only match against interfaces hinted as 'auto'", False, _set_auto),
        Option("I", "include", "include PATTERN",
               "only match against interfaces matching PATTERN", True, _set_include),
        Option("X", "exclude", "exclude PATTERN",
               "never match against interfaces matching PATTERN", True, _set_exclude),
    ),
)

EXEC_OPTION_GROUP = OptionGroup(
    "Execution",
    (
        Option("f", "force", None, "force (de)configuration", False, _set_force),
        Option("i", "interfaces", "interfaces FILE",
               "use FILE for interface definitions", True, _set_interfaces_file),
        Option("l", "no-lock", None,
               "do not use a lockfile to serialize state changes", False, _set_no_lock),
        Option("n", "no-act", None, "do not actually run any commands", False, _set_no_act),
        Option("v", "verbose", None, "show what commands are being run", False, _set_verbose),
        Option("E", "executor-path", "executor-path PATH",
               "use PATH for executor directory", True, _set_executor_path),
        Option("S", "state-file", "state-file FILE", "use FILE for state", True, _set_state_file),
        Option("T", "timeout", "timeout TIMEOUT",
               "wait TIMEOUT seconds for executors to complete", True, _set_timeout),
    ),
)