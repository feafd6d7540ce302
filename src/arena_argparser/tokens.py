"""Classification of raw command-line tokens."""

import enum


class TokenKind(enum.Enum):
    LONG_OPTION = "long_option"
    SHORT_OPTION = "short_option"
    POSITIONAL = "positional"
    MALFORMED = "malformed"


def classify(token: str) -> TokenKind:
    """
    Classify a raw token.

    "--name" is a long option and "-n" a short option. Anything not starting
    with a hyphen (including the empty string) is positional. "-", "--" and
    tokens starting with three or more hyphens are malformed.
    """
    if len(token) >= 3 and token.startswith("--"):
        return TokenKind.LONG_OPTION if token[2] != "-" else TokenKind.MALFORMED
    if len(token) >= 2 and token.startswith("-"):
        return TokenKind.SHORT_OPTION if token[1] != "-" else TokenKind.MALFORMED
    if token.startswith("-"):
        return TokenKind.MALFORMED
    return TokenKind.POSITIONAL


def is_option(kind: TokenKind) -> bool:
    return kind in (TokenKind.LONG_OPTION, TokenKind.SHORT_OPTION)
