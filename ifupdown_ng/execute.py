"""Running shell commands and executor programs."""

from __future__ import annotations

import os
import stat
import subprocess
import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Optional, Union

SHELL = "/bin/sh"
DEFAULT_TIMEOUT = 300
INTERFACES_FILE = "/etc/network/interfaces"
STATE_FILE = "/run/ifstate"
EXECUTOR_PATH = "/usr/libexec/ifupdown-ng"

# Longest command line or executor path passed to the shell.
_COMMAND_MAX = 4095

EnvLike = Optional[Union[Mapping[str, str], Iterable[str]]]


class ExecutionError(RuntimeError):
    """A command could not be started, failed or timed out."""

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"execution of '{command}': {reason}")
        self.command = command
        self.reason = reason


@dataclass
class ExecuteOptions:
    """Settings that control how commands and executors are run."""

    verbose: bool = False
    mock: bool = False
    no_lock: bool = False
    force: bool = False
    executor_path: str = EXECUTOR_PATH
    interfaces_file: Optional[str] = INTERFACES_FILE
    state_file: str = STATE_FILE
    timeout: int = DEFAULT_TIMEOUT


def _env_dict(env: EnvLike) -> dict[str, str]:
    if env is None:
        return {}
    if isinstance(env, Mapping):
        return dict(env)
    result: dict[str, str] = {}
    for item in env:
        name, _, value = item.partition("=")
        result[name] = value
    return result


def _spawn(command: str, env: EnvLike, capture: bool) -> subprocess.Popen:
    try:
        return subprocess.Popen(
            [SHELL, "-c", command],
            env=_env_dict(env),
            stdout=subprocess.PIPE if capture else None,
        )
    except OSError as exc:
        print(f"execute '{command}': {exc.strerror}", file=sys.stderr)
        raise ExecutionError(command, exc.strerror or "cannot start") from exc


def _timed_out(command: str, proc: subprocess.Popen, timeout: int) -> ExecutionError:
    print(
        f"execution of '{command}': timeout after {timeout} seconds",
        file=sys.stderr,
    )
    proc.kill()
    proc.communicate()
    return ExecutionError(command, f"timeout after {timeout} seconds")


def _check_status(command: str, proc: subprocess.Popen) -> None:
    if proc.returncode != 0:
        raise ExecutionError(command, f"exit status {proc.returncode}")


def execute(opts: ExecuteOptions, env: EnvLike, command: str) -> None:
    """Run ``command`` with the shell; raise ExecutionError on failure.

    In verbose mode the command is printed first; in mock mode it is not run.
    """
    command = command[:_COMMAND_MAX]
    if opts.verbose:
        print(command, flush=True)
    if opts.mock:
        return

    proc = _spawn(command, env, capture=False)
    try:
        proc.wait(timeout=opts.timeout)
    except subprocess.TimeoutExpired:
        raise _timed_out(command, proc, opts.timeout) from None
    _check_status(command, proc)


def execute_with_result(opts: ExecuteOptions, env: EnvLike, command: str) -> str:
    """Run ``command`` like :func:`execute` and return what it printed."""
    command = command[:_COMMAND_MAX]
    if opts.verbose:
        print(command, flush=True)
    if opts.mock:
        return ""

    proc = _spawn(command, env, capture=True)
    try:
        output, _ = proc.communicate(timeout=opts.timeout)
    except subprocess.TimeoutExpired:
        raise _timed_out(command, proc, opts.timeout) from None
    _check_status(command, proc)
    return output.decode("utf-8", errors="replace")


def file_is_executable(path: str) -> bool:
    """Tell whether ``path`` is a regular file we may execute."""
    try:
        st = os.stat(path)
    except OSError:
        return False
    if not stat.S_ISREG(st.st_mode):
        return False
    return os.access(path, os.X_OK)


def _executor_path(opts: ExecuteOptions, executor: str, phase: str, lifname: str) -> str:
    if opts.verbose:
        print(
            f"ifupdown: {lifname}: attempting to run {executor} executor for phase {phase}",
            file=sys.stderr,
        )
    return f"{opts.executor_path}/{executor}"[:_COMMAND_MAX]


def maybe_run_executor(
    opts: ExecuteOptions, env: EnvLike, executor: str, phase: str, lifname: str
) -> None:
    """Run the named executor if it exists and is executable."""
    path = _executor_path(opts, executor, phase, lifname)
    if not file_is_executable(path):
        return
    execute(opts, env, path)


def maybe_run_executor_with_result(
    opts: ExecuteOptions, env: EnvLike, executor: str, phase: str, lifname: str
) -> str:
    """Run the named executor if present and return its output ("" if absent)."""
    path = _executor_path(opts, executor, phase, lifname)
    if not file_is_executable(path):
        return ""
    return execute_with_result(opts, env, path)