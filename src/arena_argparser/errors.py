"""
Error taxonomy for the arena argument parser.

Every failure the parser can report carries an ``ErrorKind`` together with a
human-readable message. Operations report failures as ``result.Err`` values;
the exception classes below are what those values hold, so callers that prefer
exceptions can simply raise them.
"""

import enum


class ErrorKind(enum.Enum):
    """The kind of failure reported by a parser operation."""

    ALLOCATION_FAILURE = "allocation_failure"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    INVALID_DEFINITION = "invalid_definition"
    MALFORMED_TOKEN = "malformed_token"
    UNKNOWN_OPTION = "unknown_option"
    TOO_MANY_POSITIONAL_ARGUMENTS = "too_many_positional_arguments"
    TOO_FEW_POSITIONAL_ARGUMENTS = "too_few_positional_arguments"
    MISSING_OPTION_VALUE = "missing_option_value"
    INVALID_VALUE = "invalid_value"


class ArgParserError(Exception):
    kind: ErrorKind = ErrorKind.ALLOCATION_FAILURE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class AllocationFailureError(ArgParserError):
    kind = ErrorKind.ALLOCATION_FAILURE


class CapacityExceededError(ArgParserError):
    kind = ErrorKind.CAPACITY_EXCEEDED


class InvalidDefinitionError(ArgParserError):
    kind = ErrorKind.INVALID_DEFINITION


class MalformedTokenError(ArgParserError):
    kind = ErrorKind.MALFORMED_TOKEN


class UnknownOptionError(ArgParserError):
    kind = ErrorKind.UNKNOWN_OPTION


class TooManyPositionalArgumentsError(ArgParserError):
    kind = ErrorKind.TOO_MANY_POSITIONAL_ARGUMENTS


class TooFewPositionalArgumentsError(ArgParserError):
    kind = ErrorKind.TOO_FEW_POSITIONAL_ARGUMENTS


class MissingOptionValueError(ArgParserError):
    kind = ErrorKind.MISSING_OPTION_VALUE


class InvalidValueError(ArgParserError):
    kind = ErrorKind.INVALID_VALUE


_ERRORS_BY_KIND = {
    cls.kind: cls
    for cls in (
        AllocationFailureError,
        CapacityExceededError,
        InvalidDefinitionError,
        MalformedTokenError,
        UnknownOptionError,
        TooManyPositionalArgumentsError,
        TooFewPositionalArgumentsError,
        MissingOptionValueError,
        InvalidValueError,
    )
}


def error_for(kind: ErrorKind, message: str) -> ArgParserError:
    """Build the exception subclass that matches ``kind``."""
    return _ERRORS_BY_KIND[kind](message)
