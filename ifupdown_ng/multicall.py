"""Multi-call entry point dispatching to the applets by program name."""

from __future__ import annotations

import os
import sys
from typing import TextIO

from .config import Config, ConfigError, load_config
from .ifctrstat import IFCTRSTAT_APPLET
from .ifparse import IFPARSE_APPLET
from .ifquery import IFQUERY_APPLET
from .ifupdown import IFDOWN_APPLET, IFUP_APPLET
from .options import GLOBAL_OPTION_GROUP, Applet, Context, process_options
from .version import PACKAGE_NAME, PACKAGE_VERSION

CONFIG_FILE = "/etc/network/ifupdown-ng.conf"


def _multicall_main(ctx: Context, args: list[str]) -> int:
    if not args:
        multicall_usage(1, ctx.stderr)
    return main(args)


IFUPDOWN_APPLET = Applet(
    name="ifupdown",
    main=_multicall_main,
    groups=(GLOBAL_OPTION_GROUP,),
)

APPLETS: tuple[Applet, ...] = (
    IFCTRSTAT_APPLET,
    IFDOWN_APPLET,
    IFPARSE_APPLET,
    IFQUERY_APPLET,
    IFUP_APPLET,
    IFUPDOWN_APPLET,
)


def find_applet(name: str) -> Applet | None:
    """Return the applet called ``name``, or None."""
    return next((a for a in APPLETS if a.name == name), None)


def multicall_usage(status: int, stream: TextIO | None = None) -> None:
    """Write the list of built-in applets and exit with ``status``."""
    out = stream if stream is not None else sys.stderr
    out.write(
        f"{PACKAGE_NAME} {PACKAGE_VERSION}\n"
        "usage: ifupdown <applet> [options]\n"
        "\n"
        "Built-in applets:\n"
    )
    for applet in APPLETS:
        if applet is IFUPDOWN_APPLET:
            continue
        out.write(f"  {applet.name:<10} {applet.desc}\n")
    raise SystemExit(status)


def main(argv: list[str] | None = None) -> int:
    """Run the applet named by ``argv[0]``; return its exit status."""
    if argv is None:
        argv = sys.argv
    if not argv:
        multicall_usage(1)

    config = Config()
    try:
        load_config(CONFIG_FILE, config)
    except (OSError, ConfigError):
        pass

    ctx = Context(argv0=os.path.basename(argv[0]), config=config)

    applet = find_applet(ctx.argv0)
    if applet is None:
        print(f"{ctx.argv0}: applet not found", file=ctx.stderr)
        multicall_usage(1, ctx.stderr)

    ctx.applet = applet
    if applet is IFUPDOWN_APPLET:
        args = list(argv[1:])
    else:
        args = process_options(ctx, applet, list(argv[1:]))

    return applet.main(ctx, args)


if __name__ == "__main__":
    raise SystemExit(main())