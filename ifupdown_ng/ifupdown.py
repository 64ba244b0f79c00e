"""The ifup and ifdown applets: bring interfaces up or down."""

from __future__ import annotations

import fcntl
import os
from fnmatch import fnmatchcase

from .compat import CompatError, apply_compat
from .interface import Interface, InterfaceCollection
from .interface_file import ParseState
from .lifecycle import LifecycleError, count_rdepends, run
from .options import (
    EXEC_OPTION_GROUP,
    GLOBAL_OPTION_GROUP,
    MATCH_OPTION_GROUP,
    Applet,
    Context,
    generic_usage,
)
from .state import State


def acquire_state_lock(ctx: Context, state_path: str, lifname: str) -> int | None:
    """Take an exclusive lock for ``lifname`` and return its descriptor.

    Return None when locking is disabled; raise OSError on failure.
    """
    opts = ctx.exec_opts
    if opts.mock or opts.no_lock:
        return None

    lockpath = f"{state_path}.{lifname}.lock"
    try:
        fd = os.open(lockpath, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o600)
    except OSError as exc:
        if opts.verbose:
            print(f"{ctx.argv0}: while opening lockfile {lockpath}: {exc.strerror}",
                  file=ctx.stderr)
        raise

    os.set_inheritable(fd, False)

    if opts.verbose:
        print(f"{ctx.argv0}: acquiring lock on {lockpath}", file=ctx.stderr)

    try:
        fcntl.lockf(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
    except OSError as exc:
        os.close(fd)
        if opts.verbose:
            print(f"{ctx.argv0}: while locking lockfile: {exc.strerror}", file=ctx.stderr)
        raise

    return fd


def skip_interface(
    ctx: Context,
    iface: Interface,
    ifname: str,
    state: State,
    update_state: bool,
    up: bool,
) -> bool:
    """Tell whether the state change of ``iface`` should be skipped."""
    opts = ctx.exec_opts

    if iface.is_template:
        print(f"{ctx.argv0}: cannot change state on {ifname} (template interface)",
              file=ctx.stderr)
        return False

    if iface.has_config_error:
        if opts.force:
            print(f"{ctx.argv0}: (de)configuring interface {ifname} despite config errors",
                  file=ctx.stderr)
            return False
        print(f"{ctx.argv0}: skipping interface {ifname} due to config errors",
              file=ctx.stderr)
        return True

    if opts.force:
        return False

    auto = "auto " if iface.is_auto else ""

    if up and iface.refcount > 0:
        if opts.verbose:
            print(
                f"{ctx.argv0}: skipping {auto}interface {ifname} (already configured), "
                "use --force to force configuration",
                file=ctx.stderr,
            )
        if update_state:
            iface.is_explicit = True
            state.upsert(ifname, iface)
        return True

    if not up and iface.refcount == 0:
        if opts.verbose:
            print(
                f"{ctx.argv0}: skipping {auto}interface {ifname} (already deconfigured), "
                "use --force to force deconfiguration",
                file=ctx.stderr,
            )
        return True

    return False


def change_interface(
    ctx: Context,
    iface: Interface,
    collection: InterfaceCollection,
    state: State,
    ifname: str,
    update_state: bool,
    up: bool,
) -> bool:
    """Bring ``iface`` up or down under ``ifname``; return False on failure."""
    direction = "up" if up else "down"
    try:
        lockfd = acquire_state_lock(ctx, ctx.exec_opts.state_file, ifname)
    except OSError as exc:
        print(f"{ctx.argv0}: could not acquire exclusive lock for {ifname}: {exc.strerror}",
              file=ctx.stderr)
        return False

    try:
        if skip_interface(ctx, iface, ifname, state, update_state, up):
            return True

        if ctx.exec_opts.verbose:
            print(f"{ctx.argv0}: changing state of interface {ifname} to '{direction}'",
                  file=ctx.stderr)

        try:
            run(ctx.exec_opts, iface, collection, state, ifname, up)
        except LifecycleError:
            print(f"{ctx.argv0}: failed to change interface {ifname} state to '{direction}'",
                  file=ctx.stderr)
            return False
    finally:
        if lockfd is not None:
            os.close(lockfd)

    if up and update_state:
        iface.is_explicit = True
        state.upsert(ifname, iface)

    return True


def change_auto_interfaces(
    ctx: Context, collection: InterfaceCollection, state: State, up: bool
) -> bool:
    """Change every matching interface; stop at the first failure."""
    opts = ctx.match_opts
    for iface in list(collection):
        if opts.is_auto and not iface.is_auto:
            continue
        if opts.exclude_pattern is not None and fnmatchcase(iface.ifname, opts.exclude_pattern):
            continue
        if opts.include_pattern is not None and not fnmatchcase(
            iface.ifname, opts.include_pattern
        ):
            continue
        if not change_interface(ctx, iface, collection, state, iface.ifname, False, up):
            return False
    return True


def _finish(ctx: Context, rc: int, state: State) -> int:
    if ctx.exec_opts.mock:
        return rc
    try:
        state.write_path(ctx.exec_opts.state_file)
    except OSError:
        print(f"{ctx.argv0}: could not update {ctx.exec_opts.state_file}", file=ctx.stderr)
        return 1
    return rc


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

    state.sync(collection)
    return state, collection


def ifupdown_main(ctx: Context, args: list[str]) -> int:
    """Bring the named (or matching) interfaces up or down; return the exit status."""
    up = "ifdown" not in ctx.argv0

    loaded = _load(ctx)
    if loaded is None:
        return 1
    state, collection = loaded

    if ctx.match_opts.is_auto:
        ok = change_auto_interfaces(ctx, collection, state, up)
        return _finish(ctx, 0 if ok else 1, state)

    if not args:
        generic_usage(ctx.applet or (IFUP_APPLET if up else IFDOWN_APPLET), 1, ctx.stderr)

    for arg in args:
        ifname, eq, lifname = arg.partition("=")
        if not eq:
            lifname = arg

        iface = state.lookup(collection, arg)
        if iface is None:
            iface = collection.find(lifname)
            if iface is None:
                print(f"{ctx.argv0}: unknown interface {arg}", file=ctx.stderr)
                return _finish(ctx, 1, state)

        if not change_interface(ctx, iface, collection, state, ifname, True, up):
            return _finish(ctx, 1, state)

    return _finish(ctx, 0, state)


IFUP_APPLET = Applet(
    name="ifup",
    desc="bring interfaces up",
    main=ifupdown_main,
    usage="ifup [options] <interfaces>",
    manpage="8 ifup",
    groups=(GLOBAL_OPTION_GROUP, MATCH_OPTION_GROUP, EXEC_OPTION_GROUP),
)

IFDOWN_APPLET = Applet(
    name="ifdown",
    desc="take interfaces down",
    main=ifupdown_main,
    usage="ifdown [options] <interfaces>",
    manpage="8 ifdown",
    groups=(GLOBAL_OPTION_GROUP, MATCH_OPTION_GROUP, EXEC_OPTION_GROUP),
)