"""Bringing interfaces up and down through their lifecycle phases."""

from __future__ import annotations

import os
import sys

from .environment import Environment
from .execute import (
    ExecuteOptions,
    ExecutionError,
    execute,
    maybe_run_executor,
    maybe_run_executor_with_result,
)
from .interface import Interface, InterfaceCollection
from .state import State
from .tokenize import next_token, tokens

ADDON_SCRIPTS_DIR = "/etc/network"
UP_PHASES = ("create", "pre-up", "up", "post-up")
DOWN_PHASES = ("pre-down", "down", "post-down", "destroy")

# Largest amount of executor output taken as dependency names.
_RESULT_MAX = 1024


class LifecycleError(RuntimeError):
    """An interface could not be brought through a lifecycle step."""


def _env_key(key: str) -> str:
    converted = "".join(
        "_" if char == "-" else (char.upper() if char.isascii() else char)
        for char in key
    )
    return f"IF_{converted}"


def build_environment(
    opts: ExecuteOptions,
    iface: Interface,
    lifname: str | None,
    phase: str,
    mode: str,
) -> Environment:
    """Return the environment handed to executors and commands."""
    env = Environment()
    env.push("IFACE", lifname if lifname is not None else iface.ifname)
    env.push("PHASE", phase)
    env.push("MODE", mode)
    env.push("METHOD", "none")

    if opts.verbose:
        env.push("VERBOSE", "1")
    if opts.interfaces_file:
        env.push("INTERFACES_FILE", opts.interfaces_file)

    addresses: list[str] = []
    gateways: list[str] = []

    for entry in list(iface.vars):
        if entry.key == "address":
            try:
                text = iface.format_cidr(entry.value)
            except (OSError, ValueError):
                continue
            addresses.append(text)
            if len(addresses) == 1:
                env.push("IF_ADDRESS", text)
            continue

        if entry.key == "gateway":
            gateways.append(entry.value)
            if len(gateways) > 1:
                continue
        elif entry.key == "requires" and iface.is_bridge:
            env.push("IF_BRIDGE_PORTS", entry.value)

        env.push(_env_key(entry.key), entry.value)

    env.push("IF_ADDRESSES", "".join(f"{a} " for a in addresses))
    env.push("IF_GATEWAYS", "".join(f"{g} " for g in gateways))
    return env


def _query_executor_dependents(
    opts: ExecuteOptions, env: Environment, iface: Interface, phase: str
) -> str:
    query_opts = ExecuteOptions(
        verbose=opts.verbose,
        executor_path=opts.executor_path,
        interfaces_file=opts.interfaces_file,
        timeout=opts.timeout,
    )
    found = ""
    for entry in list(iface.vars):
        if entry.key != "use":
            continue
        try:
            result = maybe_run_executor_with_result(
                query_opts, env, entry.value, phase, iface.ifname
            )
        except ExecutionError as exc:
            raise LifecycleError(
                f"{iface.ifname}: querying dependents from {entry.value} failed"
            ) from exc
        result = result[:_RESULT_MAX]
        if result:
            found += " " + result
    return found


def query_dependents(opts: ExecuteOptions, iface: Interface, lifname: str | None) -> None:
    """Merge the dependencies reported by executors into ``requires``.

    Raise :class:`LifecycleError` when an executor fails.
    """
    if lifname is None:
        lifname = iface.ifname

    env = build_environment(opts, iface, lifname, "depend", "depend")

    entry = iface.vars.find("requires")
    deps = entry.value if entry is not None else ""
    deps += _query_executor_dependents(opts, env, iface, "depend")

    final = ""
    rest = deps
    while rest:
        token, rest = next_token(rest)
        # substring match: a name contained in one already listed is dropped
        if token in final:
            continue
        final += token + " "

    if entry is not None:
        entry.value = final
    elif final:
        iface.vars.add("requires", final)


def run_phase(
    opts: ExecuteOptions, iface: Interface, phase: str, lifname: str | None, up: bool
) -> None:
    """Run executors, commands and add-on scripts for one phase.

    Executor failures are ignored; a failing command raises
    :class:`LifecycleError`.
    """
    env = build_environment(opts, iface, lifname, phase, "start" if up else "stop")

    entries = list(iface.vars) if up else list(reversed(iface.vars))
    for entry in entries:
        if entry.key != "use":
            continue
        try:
            maybe_run_executor(opts, env, entry.value, phase, iface.ifname)
        except ExecutionError:
            pass

    for entry in list(iface.vars):
        if entry.key != phase:
            continue
        try:
            execute(opts, env, entry.value)
        except ExecutionError as exc:
            raise LifecycleError(f"{iface.ifname}: {phase} command failed: {exc}") from exc

    if not iface.config.allow_addon_scripts:
        return

    dir_path = f"{ADDON_SCRIPTS_DIR}/if-{phase}.d"
    if not os.path.isdir(dir_path):
        return

    # failures of add-on scripts are not fatal
    try:
        execute(opts, env, f"/bin/run-parts {dir_path}")
    except ExecutionError:
        pass


def _handle_refcounting(state: State, iface: Interface, up: bool) -> bool:
    """Adjust the refcount; return True if the interface needs no change now."""
    orig_refcount = iface.refcount
    if up:
        state.ref(iface.ifname, iface)
    else:
        state.unref(iface.ifname, iface)

    if up and orig_refcount > 0:
        return True
    if not up and iface.refcount > 1:
        return True
    return False


def _handle_dependents(
    opts: ExecuteOptions,
    parent: Interface,
    collection: InterfaceCollection,
    state: State,
    up: bool,
) -> None:
    requires = parent.vars.find("requires")
    if requires is None:
        return

    parent.is_pending = True
    try:
        for name in tokens(requires.value):
            iface = collection.find_or_create(name)

            if iface.has_config_error:
                if opts.force:
                    print(
                        f"ifupdown: (de)configuring dependent interface {iface.ifname} "
                        f"(of {parent.ifname}) despite config errors",
                        file=sys.stderr,
                    )
                else:
                    print(
                        f"ifupdown: skipping dependent interface {iface.ifname} "
                        f"(of {parent.ifname}) as it has config errors",
                        file=sys.stderr,
                    )
                    continue

            if _handle_refcounting(state, iface, up):
                if opts.verbose:
                    reason = (
                        "already configured" if up else "transient dependencies still exist"
                    )
                    print(
                        f"ifupdown: skipping dependent interface {iface.ifname} "
                        f"(of {parent.ifname}) -- {reason}",
                        file=sys.stderr,
                    )
                continue

            if not up and iface.is_explicit:
                if opts.verbose:
                    print(
                        f"ifupdown: skipping dependent interface {iface.ifname} "
                        f"(of {parent.ifname}) -- interface is marked as explicitly configured",
                        file=sys.stderr,
                    )
                continue

            if opts.verbose:
                print(
                    f"ifupdown: changing state of dependent interface {iface.ifname} "
                    f"(of {parent.ifname}) to {'up' if up else 'down'}",
                    file=sys.stderr,
                )

            run(opts, iface, collection, state, iface.ifname, up)
    finally:
        parent.is_pending = False


def run(
    opts: ExecuteOptions,
    iface: Interface,
    collection: InterfaceCollection,
    state: State,
    lifname: str | None,
    up: bool,
) -> None:
    """Bring ``iface`` up or down, dependents included.

    Raise :class:`LifecycleError` on failure or for template interfaces.
    """
    if iface.is_pending:
        return
    if iface.is_template:
        raise LifecycleError(f"{iface.ifname}: cannot change state of a template interface")

    if lifname is None:
        lifname = iface.ifname

    if up:
        # dependents go up first
        _handle_dependents(opts, iface, collection, state, up)
        for phase in UP_PHASES:
            run_phase(opts, iface, phase, lifname, up)
        state.ref(lifname, iface)
    else:
        for phase in DOWN_PHASES:
            run_phase(opts, iface, phase, lifname, up)
        # dependents go down last
        _handle_dependents(opts, iface, collection, state, up)
        state.unref(lifname, iface)


def _count_interface_rdepends(
    opts: ExecuteOptions, collection: InterfaceCollection, parent: Interface, depth: int
) -> None:
    if parent.is_pending:
        return

    query_dependents(opts, parent, parent.ifname)

    parent.is_pending = True
    parent.rdepends_count = depth
    try:
        requires = parent.vars.find("requires")
        if requires is None:
            return
        for name in tokens(requires.value):
            child = collection.find_or_create(name)
            _count_interface_rdepends(opts, collection, child, depth + 1)
    finally:
        parent.is_pending = False


def count_rdepends(opts: ExecuteOptions, collection: InterfaceCollection) -> int:
    """Compute dependency depths, order the collection by them, return the maximum."""
    for iface in collection:
        try:
            _count_interface_rdepends(opts, collection, iface, iface.rdepends_count)
        except LifecycleError as exc:
            print(
                f"ifupdown: dependency graph is broken for interface {iface.ifname}",
                file=sys.stderr,
            )
            raise LifecycleError(
                f"dependency graph is broken for interface {iface.ifname}"
            ) from exc

    maxdepth = max((iface.rdepends_count for iface in collection), default=0)
    collection.reorder(sorted(collection, key=lambda i: i.rdepends_count))
    return maxdepth