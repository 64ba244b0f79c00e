import io

import pytest

from ifupdown_ng.counters import available_counters
from ifupdown_ng.ifctrstat import IFCTRSTAT_APPLET, ifctrstat_main
from ifupdown_ng.options import Context, process_options


@pytest.fixture
def sysfs(tmp_path):
    stats = tmp_path / "eth0" / "statistics"
    stats.mkdir(parents=True)
    (stats / "rx_bytes").write_text("123\n")
    (stats / "tx_packets").write_text("7\n")
    return tmp_path


@pytest.fixture
def ctx(sysfs):
    return Context(
        argv0="ifctrstat",
        stdout=io.StringIO(),
        stderr=io.StringIO(),
        flags={"sysfs_root": str(sysfs)},
        applet=IFCTRSTAT_APPLET,
    )


def test_single_counter_with_label(ctx):
    assert ifctrstat_main(ctx, ["eth0", "rx.octets"]) == 0
    assert ctx.stdout.getvalue() == "rx.octets: 123\n"


def test_several_counters(ctx):
    assert ifctrstat_main(ctx, ["eth0", "rx.octets", "tx.packets"]) == 0
    assert ctx.stdout.getvalue().splitlines() == ["rx.octets: 123", "tx.packets: 7"]


def test_counter_names_are_case_insensitive(ctx):
    assert ifctrstat_main(ctx, ["eth0", "RX.OCTETS"]) == 0
    assert ctx.stdout.getvalue() == "RX.OCTETS: 123\n"


def test_no_label_option(ctx):
    args = process_options(ctx, IFCTRSTAT_APPLET, ["-n", "eth0", "rx.octets"])
    assert args == ["eth0", "rx.octets"]
    assert ifctrstat_main(ctx, args) == 0
    assert ctx.stdout.getvalue() == "123\n"


def test_invalid_counter(ctx):
    assert ifctrstat_main(ctx, ["eth0", "rx.bogus"]) == 1
    assert "counter rx.bogus is not valid or not available" in ctx.stderr.getvalue()
    assert ctx.stdout.getvalue() == ""


def test_unreadable_counter(ctx):
    assert ifctrstat_main(ctx, ["eth0", "rx.errors"]) == 1
    assert (
        "could not determine value of rx.errors for interface eth0"
        in ctx.stderr.getvalue()
    )


def test_all_counters_reports_missing_ones(ctx):
    assert ifctrstat_main(ctx, ["eth0"]) == 1
    assert ctx.stdout.getvalue().splitlines() == ["rx.octets: 123", "tx.packets: 7"]
    errors = ctx.stderr.getvalue().splitlines()
    assert len(errors) == len(available_counters()) - 2


def test_list_option_prints_counters(ctx):
    with pytest.raises(SystemExit) as exc:
        process_options(ctx, IFCTRSTAT_APPLET, ["--list"])
    assert exc.value.code == 0
    assert tuple(ctx.stdout.getvalue().splitlines()) == available_counters()


def test_missing_interface_shows_usage(ctx):
    with pytest.raises(SystemExit) as exc:
        ifctrstat_main(ctx, [])
    assert exc.value.code == 1
    assert ctx.stderr.getvalue().startswith(
        "ifctrstat - display statistics about an interface\n"
    )