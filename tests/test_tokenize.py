import pytest

from ifupdown_ng.tokenize import next_token, next_token_eq, tokens


def test_next_token_skips_leading_whitespace():
    assert next_token("  foo bar") == ("foo", "bar")


def test_next_token_consumes_single_delimiter():
    token, rest = next_token("foo  bar")
    assert token == "foo"
    assert rest == " bar"


def test_next_token_empty_input():
    assert next_token("") == ("", "")


def test_next_token_only_whitespace():
    token, rest = next_token(" \t\n ")
    assert token == ""
    assert rest == ""


def test_next_token_keeps_equals():
    token, _ = next_token("key=value rest")
    assert token == "key=value"


def test_next_token_eq_splits_on_equals():
    key, rest = next_token_eq("key = value")
    assert key == "key"
    value, _ = next_token_eq(rest)
    assert value == "value"


def test_next_token_eq_without_spaces():
    key, rest = next_token_eq("key=value")
    assert key == "key"
    assert rest == "value"


def test_tokens_yields_all():
    assert list(tokens("a  b\tc\n")) == ["a", "b", "c"]


@pytest.mark.parametrize("text", ["", "   ", "\t\n"])
def test_tokens_empty(text):
    assert list(tokens(text)) == []


def test_tokens_round_trip():
    words = ["eth0", "eth1", "bond0"]
    assert list(tokens("   ".join(words))) == words