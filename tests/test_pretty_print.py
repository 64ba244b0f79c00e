import io
import os

import pytest

from ifupdown_ng.config import Config
from ifupdown_ng.execute import ExecuteOptions
from ifupdown_ng.interface import Interface
from ifupdown_ng.pretty_print import format_interface_eni, print_interface_eni


@pytest.fixture
def config():
    return Config(allow_addon_scripts=False, use_hostname_for_dhcp=False)


@pytest.fixture
def executors(tmp_path):
    path = tmp_path / "executors"
    path.mkdir()
    return path


@pytest.fixture
def opts(executors):
    return ExecuteOptions(executor_path=str(executors), interfaces_file=None)


def _executor(directory, name, body):
    path = directory / name
    path.write_text("#!/bin/sh\n" + body)
    os.chmod(path, 0o755)


def test_plain_interface(opts, config):
    iface = Interface("eth0", config=config)
    iface.add_address("192.0.2.1/24")
    assert format_interface_eni(opts, iface) == (
        "iface eth0\n  use link\n  use static\n  address 192.0.2.1/24\n\n"
    )


def test_auto_interface_has_auto_line(opts, config):
    iface = Interface("eth0", config=config)
    iface.is_auto = True
    text = format_interface_eni(opts, iface)
    assert text.splitlines()[:2] == ["auto eth0", "iface eth0"]


def test_template_keyword(opts, config):
    iface = Interface("tpl", config=config)
    iface.is_template = True
    assert format_interface_eni(opts, iface).startswith("template tpl\n")


def test_requires_is_normalised(opts, config):
    iface = Interface("br0", config=config)
    iface.vars.add("requires", "eth1 eth2")
    assert "  requires eth1 eth2 \n" in format_interface_eni(opts, iface)


def test_dependents_from_executor(opts, executors, config):
    _executor(executors, "link", "echo eth9\n")
    iface = Interface("br0", config=config)
    assert "  requires eth9 \n" in format_interface_eni(opts, iface)


def test_failing_executor_prints_nothing(opts, executors, config):
    _executor(executors, "link", "exit 1\n")
    iface = Interface("eth0", config=config)
    stream = io.StringIO()
    print_interface_eni(opts, iface, stream)
    assert stream.getvalue() == ""


def test_print_matches_format(opts, config):
    iface = Interface("eth0", config=config)
    iface.vars.add("mtu", "1500")
    stream = io.StringIO()
    print_interface_eni(opts, iface, stream)
    assert stream.getvalue() == format_interface_eni(opts, iface)
    assert stream.getvalue().endswith("  mtu 1500\n\n")