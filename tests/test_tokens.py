import pytest

from arena_argparser import TokenKind, classify
from arena_argparser.tokens import is_option


@pytest.mark.parametrize(
    "token, kind",
    [
        ("--help", TokenKind.LONG_OPTION),
        ("--x", TokenKind.LONG_OPTION),
        ("--x-y", TokenKind.LONG_OPTION),
        ("-h", TokenKind.SHORT_OPTION),
        ("-abc", TokenKind.SHORT_OPTION),
        ("-5", TokenKind.SHORT_OPTION),
        ("value", TokenKind.POSITIONAL),
        ("7", TokenKind.POSITIONAL),
        ("a-b", TokenKind.POSITIONAL),
        ("", TokenKind.POSITIONAL),
        ("-", TokenKind.MALFORMED),
        ("--", TokenKind.MALFORMED),
        ("---", TokenKind.MALFORMED),
        ("---long", TokenKind.MALFORMED),
    ],
)
def test_classify(token, kind):
    assert classify(token) is kind


def test_is_option():
    assert is_option(TokenKind.LONG_OPTION)
    assert is_option(TokenKind.SHORT_OPTION)
    assert not is_option(TokenKind.POSITIONAL)
    assert not is_option(TokenKind.MALFORMED)
