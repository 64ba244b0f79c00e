import io

import pytest

from ifupdown_ng.ifquery import (
    ifquery_main,
    list_interfaces,
    list_state,
    print_interface_property,
)
from ifupdown_ng.interface import Interface, InterfaceCollection
from ifupdown_ng.options import Context
from ifupdown_ng.state import State


def make_ctx(tmp_path, text, state_text=None):
    ifaces = tmp_path / "interfaces"
    ifaces.write_text(text)
    execdir = tmp_path / "executors"
    execdir.mkdir()
    state = tmp_path / "ifstate"
    if state_text is not None:
        state.write_text(state_text)
    ctx = Context(argv0="ifquery", stdout=io.StringIO(), stderr=io.StringIO())
    ctx.exec_opts.interfaces_file = str(ifaces)
    ctx.exec_opts.state_file = str(state)
    ctx.exec_opts.executor_path = str(execdir)
    ctx.config.allow_addon_scripts = False
    return ctx


CONFIG = "auto eth0\niface eth0\n  address 192.0.2.1/24\niface eth1\n"


def test_list_all(tmp_path):
    ctx = make_ctx(tmp_path, CONFIG)
    ctx.flags["listing"] = True
    assert ifquery_main(ctx, []) == 0
    assert set(ctx.stdout.getvalue().splitlines()) == {"lo", "eth0", "eth1"}


def test_list_auto_with_exclude(tmp_path):
    ctx = make_ctx(tmp_path, CONFIG)
    ctx.flags["listing"] = True
    ctx.match_opts.is_auto = True
    ctx.match_opts.exclude_pattern = "l*"
    assert ifquery_main(ctx, []) == 0
    assert ctx.stdout.getvalue().splitlines() == ["eth0"]


def test_list_include_pattern():
    collection = InterfaceCollection()
    collection.find_or_create("eth0")
    collection.find_or_create("wlan0")
    ctx = Context(stdout=io.StringIO())
    ctx.match_opts.include_pattern = "eth*"
    out = io.StringIO()
    list_interfaces(ctx, collection, out)
    assert out.getvalue().splitlines() == ["eth0"]


def test_property_address(tmp_path):
    ctx = make_ctx(tmp_path, CONFIG)
    ctx.match_opts.property = "address"
    assert ifquery_main(ctx, ["eth0"]) == 0
    assert ctx.stdout.getvalue().splitlines() == ["192.0.2.1/24"]


def test_property_use_lists_executors():
    iface = Interface("eth0")
    iface.add_address("192.0.2.1")
    out = io.StringIO()
    print_interface_property(iface, "use", out)
    assert out.getvalue().splitlines() == ["link", "static"]


def test_pretty_print_single(tmp_path):
    ctx = make_ctx(tmp_path, CONFIG)
    assert ifquery_main(ctx, ["eth0"]) == 0
    assert ctx.stdout.getvalue().startswith("auto eth0\niface eth0\n")


def test_unknown_interface(tmp_path):
    ctx = make_ctx(tmp_path, CONFIG)
    assert ifquery_main(ctx, ["eth9"]) == 1
    assert "unknown interface eth9" in ctx.stderr.getvalue()


def test_allow_undefined(tmp_path):
    ctx = make_ctx(tmp_path, CONFIG)
    ctx.flags["allow_undefined"] = True
    assert ifquery_main(ctx, ["eth9"]) == 0
    assert "iface eth9" in ctx.stdout.getvalue().splitlines()


def test_list_and_state_conflict(tmp_path):
    ctx = make_ctx(tmp_path, CONFIG)
    ctx.flags["listing"] = True
    ctx.flags["listing_state"] = True
    with pytest.raises(SystemExit) as exc:
        ifquery_main(ctx, [])
    assert exc.value.code == 1


def test_state_listing_round_trip(tmp_path):
    ctx = make_ctx(tmp_path, CONFIG, "eth0=eth0 2 explicit\n")
    ctx.flags["listing_state"] = True
    assert ifquery_main(ctx, []) == 0
    assert ctx.stdout.getvalue() == "eth0=eth0 2 explicit\n"


def test_running_listing():
    state = State()
    state.read(io.StringIO("eth0=eth0 1\nbr0=br0 1\n"))
    ctx = Context(stdout=io.StringIO())
    ctx.flags["listing_running"] = True
    ctx.match_opts.exclude_pattern = "br*"
    out = io.StringIO()
    list_state(ctx, state, out)
    assert out.getvalue().splitlines() == ["eth0"]


def test_lookup_through_state_mapping(tmp_path):
    ctx = make_ctx(tmp_path, CONFIG, "virt=eth0 1\n")
    ctx.match_opts.property = "address"
    assert ifquery_main(ctx, ["virt"]) == 0
    assert ctx.stdout.getvalue().splitlines() == ["192.0.2.1/24"]


def test_dot_graph(tmp_path):
    ctx = make_ctx(tmp_path, "iface br0\n  requires eth0\n")
    ctx.flags["listing"] = True
    ctx.match_opts.dot = True
    assert ifquery_main(ctx, []) == 0
    out = ctx.stdout.getvalue()
    assert out.startswith("digraph interfaces {\n")
    assert out.endswith("}\n")
    assert '"br0 (0)" -> "eth0 (1)"' in out.splitlines()