"""
ArgParser - a declarative command-line argument parser with bounded storage.

Callers register optional and positional parameters, each bound to a
caller-owned destination, and then run a single parse over the argument vector.
Parsing writes every default first and then overwrites destinations with the
supplied values, so there is no separate result object to unpack.

All strings owned by the parser (program information, option tokens, names,
descriptions and string defaults) live in one bounded ``StringArena``. The
number of parameters per category is bounded as well. A registration that
would exceed either bound fails without changing the parser.
"""

import io
import logging
import sys
from dataclasses import dataclass, field
from typing import IO, Any, Optional, Sequence

from result import Err, Ok, Result

from .arena import ArenaRef, StringArena
from .config import ParserLimits
from .errors import (
    AllocationFailureError,
    ArgParserError,
    CapacityExceededError,
    ErrorKind,
    error_for,
)
from .tokens import TokenKind, classify
from .values import Cell, Destination, Value, VarType, convert_token

logger = logging.getLogger(__name__)

OK_MESSAGE = "OK."

_INDENT = "    "
_DESCRIPTION_PREFIX = "    |    "


@dataclass(frozen=True)
class ParameterDefinition:
    """
    A registered parameter.

    Option tokens, the name and the description are stored in the owning
    parser's arena and decoded on access. A definition is optional when it has
    a short or long option token and positional otherwise.
    """

    var_type: VarType
    destination: Destination = field(repr=False)
    default: Value
    short_ref: ArenaRef = field(repr=False)
    long_ref: ArenaRef = field(repr=False)
    name_ref: ArenaRef = field(repr=False)
    description_ref: ArenaRef = field(repr=False)
    arena: StringArena = field(repr=False, compare=False)

    @property
    def short_option(self) -> str:
        return self.arena.text(self.short_ref)

    @property
    def long_option(self) -> str:
        return self.arena.text(self.long_ref)

    @property
    def name(self) -> str:
        return self.arena.text(self.name_ref)

    @property
    def description(self) -> str:
        return self.arena.text(self.description_ref)

    @property
    def is_optional(self) -> bool:
        return bool(self.short_ref.length or self.long_ref.length)

    @property
    def is_positional(self) -> bool:
        return not self.is_optional

    def matches(self, token: str) -> bool:
        if not token:
            return False
        return token == self.short_option or token == self.long_option


@dataclass(frozen=True)
class ExitRequest:
    """
    Returned by ``ArgParser.parse`` when help or version text was requested.

    The text has already been written to the parser's output stream; the caller
    decides whether to terminate with ``code``.
    """

    code: int = 0
    output: str = ""


def _is_option_token(token: Optional[str]) -> bool:
    return bool(token)


class ArgParser:
    """
    A command-line argument parser that writes straight into caller-owned cells.

    Two optional parameters are always present: ``-h/--help`` and
    ``-v/--version``. They are registered before anything else and therefore win
    over any user parameter bound to the same tokens.

    Example:
        count = Cell()
        path = Cell()

        parser = ArgParser("prog", "Process some files")
        parser.add_int(count, 1, "-c", "--count", "count", "Number of passes")
        parser.add_string(path, "", 256, None, None, "path", "File to process")

        result = parser.parse(sys.argv)
        if result.is_err():
            print(parser.get_error_message(), file=sys.stderr)
    """

    def __init__(
        self,
        program_name: str,
        description: Optional[str] = None,
        limits: Optional[ParserLimits] = None,
        output: Optional[IO[str]] = None,
    ) -> None:
        """
        Create a parser and register the implicit help and version options.

        Args:
            program_name: Name shown in usage and version text.
            description: Program description shown in help text.
            limits: Capacity bounds; defaults to ``ParserLimits()``.
            output: Stream for help and version text; defaults to ``sys.stdout``
                at the time the text is written.

        Raises:
            AllocationFailureError: If the program information or the implicit
                options do not fit into the configured limits.
        """
        self.limits: ParserLimits = limits or ParserLimits()
        self.output: Optional[IO[str]] = output
        self._arena = StringArena(self.limits.arena_size)
        self._optional: list[ParameterDefinition] = []
        self._positional: list[ParameterDefinition] = []
        self._require_full_positional = False
        self._has_error = False
        self._error_message = OK_MESSAGE
        self.help_requested: Cell[bool] = Cell(False)
        self.version_requested: Cell[bool] = Cell(False)

        try:
            self._program_name_ref = self._arena.intern(program_name)
            self._description_ref = self._arena.intern(description)
            self._version_ref = self._arena.intern("")
            self._author_ref = self._arena.intern("")
            self._date_ref = self._arena.intern("")
        except CapacityExceededError as e:
            raise AllocationFailureError(
                f"Cannot store program information: {e}"
            ) from e

        help_result = self.add_flag(
            self.help_requested, "-h", "--help", "help", "Show help message."
        )
        if help_result.is_err():
            raise AllocationFailureError("Cannot set help option.") from help_result.unwrap_err()
        self._help_definition = help_result.unwrap()

        version_result = self.add_flag(
            self.version_requested, "-v", "--version", "version", "Show version string."
        )
        if version_result.is_err():
            raise AllocationFailureError(
                "Cannot set version option."
            ) from version_result.unwrap_err()
        self._version_definition = version_result.unwrap()

    @classmethod
    def create(
        cls,
        program_name: str,
        description: Optional[str] = None,
        limits: Optional[ParserLimits] = None,
        output: Optional[IO[str]] = None,
    ) -> Result["ArgParser", ArgParserError]:
        """Like the constructor, but reports failure as ``Err`` instead of raising."""
        try:
            return Ok(cls(program_name, description, limits=limits, output=output))
        except AllocationFailureError as e:
            return Err(e)

    # -- program information -------------------------------------------------

    @property
    def program_name(self) -> str:
        return self._arena.text(self._program_name_ref)

    @property
    def description(self) -> str:
        return self._arena.text(self._description_ref)

    @property
    def version(self) -> str:
        return self._arena.text(self._version_ref)

    @property
    def author(self) -> str:
        return self._arena.text(self._author_ref)

    @property
    def date(self) -> str:
        return self._arena.text(self._date_ref)

    @property
    def arena(self) -> StringArena:
        return self._arena

    def set_version(self, version: str) -> Result[None, ArgParserError]:
        """Set the version string shown by ``-v/--version``."""
        try:
            self._version_ref = self._arena.intern(version)
        except CapacityExceededError:
            return self._fail(ErrorKind.CAPACITY_EXCEEDED, "Cannot add version string.")
        return Ok(None)

    def set_author(self, author: str) -> Result[None, ArgParserError]:
        """Set the author name shown by ``-v/--version``."""
        try:
            self._author_ref = self._arena.intern(author)
        except CapacityExceededError:
            return self._fail(ErrorKind.CAPACITY_EXCEEDED, "Cannot add author name.")
        return Ok(None)

    def set_date(self, date: str) -> Result[None, ArgParserError]:
        """Set the release date shown by ``-v/--version``."""
        try:
            self._date_ref = self._arena.intern(date)
        except CapacityExceededError:
            return self._fail(ErrorKind.CAPACITY_EXCEEDED, "Cannot add release date.")
        return Ok(None)

    def require_full_positional_params(self) -> None:
        """Make omitting any registered positional parameter a parse failure."""
        self._require_full_positional = True

    @property
    def requires_full_positional_params(self) -> bool:
        return self._require_full_positional

    # -- registration --------------------------------------------------------

    def add_int(
        self,
        destination: Destination,
        default: int,
        short_option: Optional[str] = None,
        long_option: Optional[str] = None,
        name: str = "",
        description: str = "",
    ) -> Result[ParameterDefinition, ArgParserError]:
        """Register a signed 64-bit integer parameter."""
        return self._add_param(
            VarType.INT, destination, default, short_option, long_option, name, description
        )

    def add_uint(
        self,
        destination: Destination,
        default: int,
        short_option: Optional[str] = None,
        long_option: Optional[str] = None,
        name: str = "",
        description: str = "",
    ) -> Result[ParameterDefinition, ArgParserError]:
        """Register an unsigned 64-bit integer parameter."""
        return self._add_param(
            VarType.UINT, destination, default, short_option, long_option, name, description
        )

    def add_int32(
        self,
        destination: Destination,
        default: int,
        short_option: Optional[str] = None,
        long_option: Optional[str] = None,
        name: str = "",
        description: str = "",
    ) -> Result[ParameterDefinition, ArgParserError]:
        """Register a signed 32-bit integer parameter."""
        return self._add_param(
            VarType.INT32, destination, default, short_option, long_option, name, description
        )

    def add_uint32(
        self,
        destination: Destination,
        default: int,
        short_option: Optional[str] = None,
        long_option: Optional[str] = None,
        name: str = "",
        description: str = "",
    ) -> Result[ParameterDefinition, ArgParserError]:
        """Register an unsigned 32-bit integer parameter."""
        return self._add_param(
            VarType.UINT32, destination, default, short_option, long_option, name, description
        )

    def add_float(
        self,
        destination: Destination,
        default: float,
        short_option: Optional[str] = None,
        long_option: Optional[str] = None,
        name: str = "",
        description: str = "",
    ) -> Result[ParameterDefinition, ArgParserError]:
        """Register a single precision floating point parameter."""
        return self._add_param(
            VarType.FLOAT, destination, default, short_option, long_option, name, description
        )

    def add_double(
        self,
        destination: Destination,
        default: float,
        short_option: Optional[str] = None,
        long_option: Optional[str] = None,
        name: str = "",
        description: str = "",
    ) -> Result[ParameterDefinition, ArgParserError]:
        return self._add_param(
            VarType.DOUBLE, destination, default, short_option, long_option, name, description
        )

    def add_string(
        self,
        destination: Destination,
        default: Optional[str],
        max_len: int,
        short_option: Optional[str] = None,
        long_option: Optional[str] = None,
        name: str = "",
        description: str = "",
    ) -> Result[ParameterDefinition, ArgParserError]:
        """
        Register a string parameter.

        ``max_len`` counts the terminator slot, so at most ``max_len - 1``
        characters are ever written into the destination.
        """
        return self._add_param(
            VarType.STRING,
            destination,
            default,
            short_option,
            long_option,
            name,
            description,
            max_len=max_len,
        )

    def add_bool(
        self,
        destination: Destination,
        default: bool,
        short_option: Optional[str] = None,
        long_option: Optional[str] = None,
        name: str = "",
        description: str = "",
    ) -> Result[ParameterDefinition, ArgParserError]:
        """Register a boolean parameter that takes a 0/1 (any integer) value."""
        return self._add_param(
            VarType.BOOL, destination, default, short_option, long_option, name, description
        )

    def add_flag(
        self,
        destination: Destination,
        short_option: Optional[str] = None,
        long_option: Optional[str] = None,
        name: str = "",
        description: str = "",
    ) -> Result[ParameterDefinition, ArgParserError]:
        """
        Register a switch: False by default, True when its option is present.

        A flag never consumes a following token, so it must have a short or
        long option.
        """
        if not (_is_option_token(short_option) or _is_option_token(long_option)):
            return self._fail(
                ErrorKind.INVALID_DEFINITION,
                "Flag parameter '%s' needs a short or long option.",
                name,
            )
        return self._add_param(
            VarType.TRUE, destination, False, short_option, long_option, name, description
        )

    def _add_param(
        self,
        var_type: VarType,
        destination: Destination,
        default: Any,
        short_option: Optional[str],
        long_option: Optional[str],
        name: str,
        description: str,
        max_len: Optional[int] = None,
    ) -> Result[ParameterDefinition, ArgParserError]:
        """
        Add a new optional or positional parameter.

        Nothing is changed unless the whole registration succeeds: a failed
        intern rolls the arena back to where it was when the call started.
        """
        if not callable(getattr(destination, "set", None)):
            return self._fail(
                ErrorKind.INVALID_DEFINITION,
                "Destination of parameter '%s' is not writable.",
                name,
            )

        optional = _is_option_token(short_option) or _is_option_token(long_option)
        bucket = self._optional if optional else self._positional
        if len(bucket) >= self.limits.max_params:
            return self._fail(
                ErrorKind.CAPACITY_EXCEEDED,
                "Maximum number of %s parameters reached.",
                "optional" if optional else "positional",
            )

        try:
            default_value = Value.of(var_type, default, max_len)
        except (TypeError, ValueError, OverflowError) as e:
            return self._fail(
                ErrorKind.INVALID_DEFINITION,
                "Invalid default value for parameter '%s': %s",
                name,
                e,
            )

        saved_offset = self._arena.offset
        try:
            if var_type is VarType.STRING:
                default_ref = self._arena.intern(str(default_value.data))
                default_value = Value(
                    var_type, self._arena.text(default_ref), default_value.max_len
                )
            short_ref = self._arena.intern(short_option)
            long_ref = self._arena.intern(long_option)
            name_ref = self._arena.intern(name)
            description_ref = self._arena.intern(description)
        except CapacityExceededError as e:
            self._arena.rollback(saved_offset)
            return self._fail(
                ErrorKind.CAPACITY_EXCEEDED,
                "Cannot register parameter '%s': %s",
                name,
                e,
            )

        definition = ParameterDefinition(
            var_type=var_type,
            destination=destination,
            default=default_value,
            short_ref=short_ref,
            long_ref=long_ref,
            name_ref=name_ref,
            description_ref=description_ref,
            arena=self._arena,
        )
        bucket.append(definition)
        logger.debug(
            "Registered %s parameter '%s' (%s), arena at %d/%d",
            "optional" if optional else "positional",
            name,
            var_type.label,
            self._arena.offset,
            self._arena.capacity,
        )
        return Ok(definition)

    # -- lookup --------------------------------------------------------------

    @property
    def optional_params(self) -> tuple[ParameterDefinition, ...]:
        return tuple(self._optional)

    @property
    def positional_params(self) -> tuple[ParameterDefinition, ...]:
        return tuple(self._positional)

    def find_optional(self, token: str) -> Optional[ParameterDefinition]:
        """
        Return the first optional parameter whose short or long option is ``token``.

        Duplicate tokens are not rejected at registration, so the earliest
        registered parameter wins.
        """
        for definition in self._optional:
            if definition.matches(token):
                return definition
        return None

    # -- parsing -------------------------------------------------------------

    def parse(
        self, argv: Optional[Sequence[str]] = None
    ) -> Result[Optional[ExitRequest], ArgParserError]:
        """
        Parse an argument vector into the registered destinations.

        ``argv[0]`` is the program invocation and is skipped. When ``argv`` is
        None, ``sys.argv`` is used.

        Returns:
            Result[Optional[ExitRequest], ArgParserError]:
                - Ok(None) when every token was consumed,
                - Ok(ExitRequest) when help or version text was written,
                - Err with the failure; destinations then hold a mix of defaults
                  and values parsed before the failing token.
        """
        args = list(sys.argv if argv is None else argv)

        defaults = self._write_defaults()
        if defaults.is_err():
            return defaults

        positional_index = 0
        i = 1
        while i < len(args):
            token = args[i]
            kind = classify(token)

            if kind is TokenKind.MALFORMED:
                return self._fail(
                    ErrorKind.MALFORMED_TOKEN,
                    "Illegal argument type: near the arg '%s'.",
                    token,
                )

            if kind is TokenKind.POSITIONAL:
                if positional_index == len(self._positional):
                    return self._fail(
                        ErrorKind.TOO_MANY_POSITIONAL_ARGUMENTS,
                        "Too many positional arguments: near the arg '%s'. "
                        "Needs %d positional args, but has more args.",
                        token,
                        len(self._positional),
                    )
                definition = self._positional[positional_index]
                written = self._write_arg(token, definition)
                if written.is_err():
                    return written
                positional_index += 1
                i += 1
                continue

            definition = self.find_optional(token)
            if definition is None:
                return self._fail(
                    ErrorKind.UNKNOWN_OPTION, "Unknown option: near the arg '%s'.", token
                )

            if definition is self._help_definition:
                definition.destination.set(True)
                return Ok(self._request_exit(self.format_help()))

            if definition is self._version_definition:
                definition.destination.set(True)
                return Ok(self._request_exit(self.format_version()))

            if definition.var_type is VarType.TRUE:
                definition.destination.set(True)
                logger.debug("Switch '%s' set by %s", definition.name, token)
                i += 1
                continue

            if i == len(args) - 1:
                return self._fail(
                    ErrorKind.MISSING_OPTION_VALUE,
                    "Lack of the last argument: near the arg '%s'.",
                    token,
                )
            i += 1

            written = self._write_arg(args[i], definition)
            if written.is_err():
                return written
            i += 1

        if self._require_full_positional and positional_index < len(self._positional):
            return self._fail(
                ErrorKind.TOO_FEW_POSITIONAL_ARGUMENTS,
                "Too few positional arguments: needs %d args, but has only %d args.",
                len(self._positional),
                positional_index,
            )

        return Ok(None)

    def parse_or_exit(self, argv: Optional[Sequence[str]] = None) -> None:
        """
        Parse for a script that wants argparse-like behaviour.

        Raises:
            SystemExit: With the requested code after help or version output.
            ArgParserError: If parsing fails.
        """
        result = self.parse(argv)
        if result.is_err():
            raise result.unwrap_err()
        request = result.unwrap()
        if request is not None:
            raise SystemExit(request.code)

    def _write_defaults(self) -> Result[None, ArgParserError]:
        for definition in self._optional + self._positional:
            try:
                definition.default.write_into(definition.destination)
            except (AttributeError, TypeError) as e:
                return self._fail(
                    ErrorKind.INVALID_DEFINITION,
                    "Cannot write default value. near the parameter '%s': %s",
                    definition.name,
                    e,
                )
        return Ok(None)

    def _write_arg(
        self, token: str, definition: ParameterDefinition
    ) -> Result[None, ArgParserError]:
        """Convert ``token`` to the definition's type and store it."""
        try:
            value = convert_token(definition.var_type, token, definition.default.max_len)
            definition.destination.set(value)
        except (ValueError, OverflowError, AttributeError, TypeError):
            return self._fail(
                ErrorKind.INVALID_VALUE,
                "Invalid value: arg '%s', %s",
                token,
                definition.name,
            )
        logger.debug("Parameter '%s' set to %r", definition.name, value)
        return Ok(None)

    def _request_exit(self, text: str) -> ExitRequest:
        stream = self.output if self.output is not None else sys.stdout
        stream.write(text)
        stream.flush()
        logger.debug("Exit requested after writing %d characters", len(text))
        return ExitRequest(code=0, output=text)

    # -- error slot ----------------------------------------------------------

    @property
    def has_error(self) -> bool:
        return self._has_error

    @property
    def error_message(self) -> str:
        return self._error_message

    def get_error_message(self) -> str:
        """Return the last error message, or "OK." if nothing has failed."""
        return self._error_message

    def _set_error(self, fmt: str, *args: Any) -> str:
        """Format a printf-style message into the bounded error slot."""
        message = fmt % args if args else fmt
        self._error_message = message[: self.limits.max_error_message - 1]
        self._has_error = True
        return message

    def _fail(self, kind: ErrorKind, fmt: str, *args: Any) -> Err[ArgParserError]:
        message = self._set_error(fmt, *args)
        logger.debug("%s: %s", kind.value, message)
        return Err(error_for(kind, message))

    # -- reporting -----------------------------------------------------------

    def format_help(self) -> str:
        """Build the help text: usage line, then optional and positional blocks."""
        out = io.StringIO()
        out.write("\n")
        out.write(
            f"Usage   : {self.program_name} [-h/--help] [-v/--version] "
            "(optional_parameters ...) "
        )
        for definition in self._positional:
            out.write(f"[{definition.name}] ")
        out.write("\n\n")

        if self.description:
            out.write(f"{self.description}\n\n")

        if self._optional:
            plural = "s" if len(self._optional) != 1 else ""
            out.write(f"Optional Parameter{plural}:\n\n")
            for definition in self._optional:
                self._format_param(definition, out)

        if self._positional:
            plural = "s" if len(self._positional) != 1 else ""
            out.write(f"Positional Parameter{plural}:\n\n")
            for definition in self._positional:
                self._format_param(definition, out)

        return out.getvalue()

    @staticmethod
    def _format_param(definition: ParameterDefinition, out: IO[str]) -> None:
        tag = definition.var_type.help_tag
        short_option = definition.short_option
        long_option = definition.long_option

        out.write(_INDENT)
        if short_option:
            out.write(f"{short_option} ")
            if tag:
                out.write(f"{tag} ")
        if short_option and long_option:
            out.write("/ ")
        if long_option:
            out.write(f"{long_option} ")
            if tag:
                out.write(f"{tag} ")
        if not short_option and not long_option:
            out.write(f"{tag} ")
        out.write(f": {definition.name}\n")

        out.write(f"{_INDENT}| description:\n")
        body = definition.description.replace("\n", "\n" + _DESCRIPTION_PREFIX)
        out.write(f"{_DESCRIPTION_PREFIX}{body}\n\n")

    def print_help(self, file: Optional[IO[str]] = None) -> None:
        """Write the help text to ``file`` (default: the parser's output)."""
        stream = file or self.output or sys.stdout
        stream.write(self.format_help())

    def format_version(self) -> str:
        return (
            f"{self.program_name} {self.version}\n"
            f"written by {self.author}\n"
            f"released on {self.date}\n"
            "\n"
        )

    def print_version(self, file: Optional[IO[str]] = None) -> None:
        stream = file or self.output or sys.stdout
        stream.write(self.format_version())

    def dump(self, file: Optional[IO[str]] = None) -> None:
        """Write a short summary of the parser state, for debugging."""
        stream = file or sys.stderr
        stream.write("*** ArgParser ***\n")
        stream.write(f"program_name = '{self.program_name}'\n")
        stream.write(f"description = '{self.description}'\n")
        stream.write(f"optional_params = {len(self._optional)}\n")
        stream.write(f"positional_params = {len(self._positional)}\n")
        stream.write(f"arena = {self._arena.offset}/{self._arena.capacity}\n")
        stream.write(f"has_error = '{int(self._has_error)}'\n")
        stream.write(f"error_message = '{self._error_message}'\n")

    def __repr__(self) -> str:
        return (
            f"ArgParser(program_name={self.program_name!r}, "
            f"optional={len(self._optional)}, positional={len(self._positional)})"
        )
