import io

import pytest

from ifupdown_ng.multicall import find_applet, main, multicall_usage


def test_find_applet():
    assert find_applet("ifquery").name == "ifquery"
    assert find_applet("ifup").desc == "bring interfaces up"
    assert find_applet("nope") is None


def test_usage_lists_applets_but_not_itself():
    out = io.StringIO()
    with pytest.raises(SystemExit) as exc:
        multicall_usage(3, out)
    assert exc.value.code == 3
    lines = out.getvalue().splitlines()
    assert lines[0] == "ifupdown-ng 0.11.3"
    assert "  ifquery    query interface configuration" in lines
    names = [line.split()[0] for line in lines if line.startswith("  ")]
    assert names == ["ifctrstat", "ifdown", "ifparse", "ifquery", "ifup"]


def test_unknown_applet(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["/sbin/nope"])
    assert exc.value.code == 1
    assert "nope: applet not found" in capsys.readouterr().err


def test_multicall_without_applet():
    with pytest.raises(SystemExit) as exc:
        main(["ifupdown"])
    assert exc.value.code == 1


def make_files(tmp_path):
    ifaces = tmp_path / "interfaces"
    ifaces.write_text("iface eth0\n")
    execdir = tmp_path / "executors"
    execdir.mkdir()
    return [
        "-i", str(ifaces),
        "-S", str(tmp_path / "ifstate"),
        "-E", str(execdir),
        "-L",
    ]


def test_ifquery_by_name(tmp_path, capsys):
    assert main(["/sbin/ifquery", *make_files(tmp_path)]) == 0
    assert "eth0" in capsys.readouterr().out.splitlines()


def test_ifquery_through_multicall(tmp_path, capsys):
    assert main(["ifupdown", "ifquery", *make_files(tmp_path)]) == 0
    assert "eth0" in capsys.readouterr().out.splitlines()


def test_ifctrstat_list(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["ifctrstat", "--list"])
    assert exc.value.code == 0
    assert "rx.octets" in capsys.readouterr().out.splitlines()


def test_version_option(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["ifquery", "-V"])
    assert exc.value.code == 0
    assert capsys.readouterr().out.startswith("ifupdown-ng 0.11.3")


def test_help_option(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["ifup", "--help"])
    assert exc.value.code == 0
    assert capsys.readouterr().err.startswith("ifup - bring interfaces up\n")