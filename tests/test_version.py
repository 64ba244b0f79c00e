import io

from ifupdown_ng.version import print_version, version_text


def test_version_text():
    assert version_text().startswith("ifupdown-ng 0.11.3")


def test_print_version_to_stream():
    out = io.StringIO()
    print_version(out)
    assert out.getvalue() == version_text()


def test_print_version_stdout(capsys):
    print_version()
    assert capsys.readouterr().out == version_text()