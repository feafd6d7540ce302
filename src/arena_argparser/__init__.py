"""
arena_argparser - A declarative command-line argument parser with bounded storage.

This package lets callers register optional and positional parameters bound to
their own storage cells, then parse an argument vector in a single call. It
performs type conversion (with automatic integer base detection), applies
defaults, enforces positional arity and generates help and version text. All
strings the parser owns live in one fixed-size arena, and parameter counts are
bounded, so registration failures are deterministic.
"""

from .arena import ArenaRef, StringArena
from .config import ParserLimits, load_limits
from .errors import (
    AllocationFailureError,
    ArgParserError,
    CapacityExceededError,
    ErrorKind,
    InvalidDefinitionError,
    InvalidValueError,
    MalformedTokenError,
    MissingOptionValueError,
    TooFewPositionalArgumentsError,
    TooManyPositionalArgumentsError,
    UnknownOptionError,
)
from .parser import ArgParser, ExitRequest, ParameterDefinition
from .tokens import TokenKind, classify
from .values import AttributeCell, Cell, Value, VarType, attr_cell

__version__ = "1.0.0"
__all__ = [
    "AllocationFailureError",
    "ArenaRef",
    "ArgParser",
    "ArgParserError",
    "AttributeCell",
    "CapacityExceededError",
    "Cell",
    "ErrorKind",
    "ExitRequest",
    "InvalidDefinitionError",
    "InvalidValueError",
    "MalformedTokenError",
    "MissingOptionValueError",
    "ParameterDefinition",
    "ParserLimits",
    "StringArena",
    "TokenKind",
    "TooFewPositionalArgumentsError",
    "TooManyPositionalArgumentsError",
    "UnknownOptionError",
    "Value",
    "VarType",
    "attr_cell",
    "classify",
    "load_limits",
]
