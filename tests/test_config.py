import io
from dataclasses import asdict

import pytest

from ifupdown_ng.config import (
    Config,
    ConfigError,
    load_config,
    parse_bool,
    parse_config_file,
    parse_config_stream,
)


def test_defaults_are_all_enabled():
    assert asdict(Config()) == {
        "allow_addon_scripts": True,
        "allow_any_iface_as_template": True,
        "auto_executor_selection": True,
        "compat_create_interfaces": True,
        "compat_ifupdown2_bridge_ports_inherit_vlans": True,
        "implicit_template_conversion": True,
        "use_hostname_for_dhcp": True,
    }


@pytest.mark.parametrize("value", ["1", "yes", "Yes", "true", "T"])
def test_parse_bool_true(value):
    assert parse_bool(value) is True


@pytest.mark.parametrize("value", ["0", "no", "N", "false", "F"])
def test_parse_bool_false(value):
    assert parse_bool(value) is False


@pytest.mark.parametrize("value", ["maybe", "", "2"])
def test_parse_bool_invalid(value):
    with pytest.raises(ConfigError):
        parse_bool(value)


def test_handlers_cover_every_setting():
    config = Config()
    assert set(config.handlers()) == set(asdict(config))


def test_parse_stream_updates_config():
    config = Config()
    text = "allow_addon_scripts=0\nimplicit_template_conversion = n\n"
    parse_config_stream(io.StringIO(text), "cfg", config.handlers())
    assert config.allow_addon_scripts is False
    assert config.implicit_template_conversion is False
    assert config.use_hostname_for_dhcp is True


def test_comments_and_missing_values_are_ignored(capsys):
    config = Config()
    text = "# allow_addon_scripts = 0\ncompat_create_interfaces\n"
    parse_config_stream(io.StringIO(text), "cfg", config.handlers())
    assert asdict(config) == asdict(Config())
    assert capsys.readouterr().err == ""


def test_unknown_setting_warns(capsys):
    config = Config()
    parse_config_stream(io.StringIO("bogus = 1\n"), "cfg", config.handlers())
    err = capsys.readouterr().err
    assert "unknown config setting bogus" in err
    assert "cfg:1" in err


def test_invalid_value_raises_with_location():
    config = Config()
    text = "allow_addon_scripts = 1\nuse_hostname_for_dhcp = maybe\n"
    with pytest.raises(ConfigError, match="cfg:2"):
        parse_config_stream(io.StringIO(text), "cfg", config.handlers())


def test_parse_config_file_missing(tmp_path):
    with pytest.raises(ConfigError):
        parse_config_file(str(tmp_path / "missing.conf"), Config().handlers())


def test_load_config_missing_file_keeps_defaults(tmp_path):
    config = load_config(str(tmp_path / "missing.conf"))
    assert asdict(config) == asdict(Config())


def test_load_config_reads_file_into_given_config(tmp_path):
    path = tmp_path / "ifupdown-ng.conf"
    path.write_text("auto_executor_selection = no\n")
    config = Config()
    result = load_config(str(path), config)
    assert result is config
    assert config.auto_executor_selection is False