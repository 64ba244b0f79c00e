"""Whitespace tokenization of configuration lines."""

from __future__ import annotations

import re
from collections.abc import Iterator

_SPACE = r" \t\n\v\f\r"

_WORD_RE = re.compile(rf"[{_SPACE}]*([^{_SPACE}]*)[{_SPACE}]?(.*)", re.DOTALL)
_WORD_EQ_RE = re.compile(rf"[{_SPACE}=]*([^{_SPACE}=]*)[{_SPACE}=]?(.*)", re.DOTALL)


def next_token(buf: str) -> tuple[str, str]:
    """Return the next whitespace-delimited token and the text after it.

    Leading whitespace is skipped and exactly one delimiter after the
    token is consumed.  At the end of the input the token is empty.
    """
    match = _WORD_RE.match(buf)
    assert match is not None
    return match.group(1), match.group(2)


def next_token_eq(buf: str) -> tuple[str, str]:
    """Like :func:`next_token`, but '=' also separates tokens."""
    match = _WORD_EQ_RE.match(buf)
    assert match is not None
    return match.group(1), match.group(2)


def tokens(buf: str) -> Iterator[str]:
    """Yield every whitespace-delimited token of ``buf`` in order."""
    while True:
        word, buf = next_token(buf)
        if not word:
            return
        yield word