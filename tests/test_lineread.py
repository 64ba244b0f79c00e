import io

from ifupdown_ng.lineread import iter_lines, read_line


def lines_of(text):
    return list(iter_lines(io.StringIO(text)))


def test_simple_lines():
    assert lines_of("a\nb\n") == ["a", "b"]


def test_last_line_without_newline():
    assert lines_of("first\nx") == ["first", "x"]


def test_empty_stream_returns_none():
    assert read_line(io.StringIO("")) is None


def test_blank_lines_are_kept():
    assert lines_of("\n\nfoo\n") == ["", "", "foo"]


def test_comment_is_stripped():
    assert lines_of("iface eth0 # comment\nnext\n") == ["iface eth0 ", "next"]


def test_comment_at_eof_yields_blank_line():
    assert lines_of("# only a comment") == [""]


def test_backslash_continuation_trims_blanks():
    assert lines_of("foo \\\n    bar\n") == ["foo bar"]


def test_backslash_kept_before_ordinary_char():
    assert lines_of("a\\b\n") == ["a\\b"]


def test_crlf_line_endings():
    assert lines_of("a\r\nb\r\n") == ["a", "b"]


def test_bare_cr_line_endings_with_read_line():
    stream = io.StringIO("a\rb\r")
    assert read_line(stream) == "a"
    assert read_line(stream) == "b"
    assert read_line(stream) is None


def test_bare_cr_line_endings_with_iter_lines():
    assert lines_of("a\rb\r") == ["a", "b"]


def test_read_line_consumes_sequentially():
    stream = io.StringIO("one\ntwo\n")
    assert read_line(stream) == "one"
    assert read_line(stream) == "two"
    assert read_line(stream) is None


def test_long_line_is_split():
    text = "a" * 5000
    lines = lines_of(text + "\n")
    assert len(lines) == 2
    assert max(len(line) for line in lines) <= 4094
    assert "".join(lines) == text