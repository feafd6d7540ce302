"""
Typed values, destinations and token conversion.

A ``Value`` is a tagged union over the scalar types the parser understands.
Destinations are caller-owned cells the parser writes straight into: either a
standalone ``Cell`` or an ``AttributeCell`` bound to an attribute of an
existing object such as a dataclass instance.
"""

import enum
import math
import re
import struct
from dataclasses import dataclass
from typing import Any, Generic, Optional, Protocol, TypeVar, Union

T = TypeVar("T")

Scalar = Union[int, float, bool, str]


class VarType(enum.Enum):
    """Declared type of a parameter, with the tag shown in help output."""

    INT = ("int", "[int]")
    UINT = ("uint", "[uint]")
    STRING = ("string", "[string]")
    BOOL = ("bool", "[0/1]")
    INT32 = ("int32", "[int32]")
    UINT32 = ("uint32", "[uint32]")
    FLOAT = ("float", "[float]")
    DOUBLE = ("double", "[double]")
    TRUE = ("flag", "")

    def __init__(self, label: str, help_tag: str) -> None:
        self.label = label
        self.help_tag = help_tag


# Inclusive bounds for the integer types.
_INT_RANGES = {
    VarType.INT: (-(2**63), 2**63 - 1),
    VarType.UINT: (0, 2**64 - 1),
    VarType.INT32: (-(2**31), 2**31 - 1),
    VarType.UINT32: (0, 2**32 - 1),
}

_INT_PATTERN = re.compile(
    r"^(?P<sign>[+-]?)(?:(?P<hex>0[xX][0-9a-fA-F]+)|(?P<oct>0[0-7]+)|(?P<dec>[0-9]+))$"
)
_FLOAT_PATTERN = re.compile(
    r"^[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)$",
    re.IGNORECASE,
)


class Destination(Protocol[T]):
    """Anything the parser can write a converted value into."""

    def get(self) -> T: ...

    def set(self, value: T) -> None: ...


class Cell(Generic[T]):
    """
    A caller-owned storage cell.

    Example:
        count = Cell(0)
        parser.add_int(count, 10, "-c", "--count", "count", "Number of items")
        parser.parse(["prog", "-c", "3"])
        assert count.value == 3
    """

    __slots__ = ("value",)

    def __init__(self, value: Optional[T] = None) -> None:
        self.value = value

    def get(self) -> Optional[T]:
        return self.value

    def set(self, value: T) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Cell({self.value!r})"


class AttributeCell:
    """Destination that writes into ``getattr(obj, name)``."""

    __slots__ = ("obj", "name")

    def __init__(self, obj: Any, name: str) -> None:
        if not hasattr(obj, name):
            raise AttributeError(f"{type(obj).__name__!s} has no attribute '{name}'")
        self.obj = obj
        self.name = name

    def get(self) -> Any:
        return getattr(self.obj, self.name)

    def set(self, value: Any) -> None:
        setattr(self.obj, self.name, value)

    def __repr__(self) -> str:
        return f"AttributeCell({type(self.obj).__name__}.{self.name})"


def attr_cell(obj: Any, name: str) -> AttributeCell:
    """Shorthand for binding a destination to an attribute of ``obj``."""
    return AttributeCell(obj, name)


def truncate(text: str, max_len: int) -> str:
    """Bounded copy: at most ``max_len - 1`` characters survive."""
    return text[: max(max_len - 1, 0)]


def to_float32(value: float) -> float:
    """
    Round a Python float to IEEE single precision.

    Raises OverflowError if the value does not fit in a 32-bit float.
    """
    if math.isinf(value) or math.isnan(value):
        return value
    return struct.unpack("<f", struct.pack("<f", value))[0]


def parse_integer(text: str) -> int:
    """
    Parse integer text with automatic base detection.

    A "0x" prefix selects base 16, a leading "0" followed by more digits selects
    base 8, and anything else is decimal. Raises ValueError on any unconverted
    character.
    """
    match = _INT_PATTERN.match(text)
    if match is None:
        raise ValueError(f"Invalid integer value: '{text}'")
    if match.group("hex"):
        magnitude = int(match.group("hex")[2:], 16)
    elif match.group("oct"):
        magnitude = int(match.group("oct")[1:], 8)
    else:
        digits = match.group("dec")
        if len(digits) > 1 and digits.startswith("0"):
            # "08", "09": octal prefix with a non-octal digit
            raise ValueError(f"Invalid integer value: '{text}'")
        magnitude = int(digits, 10)
    return -magnitude if match.group("sign") == "-" else magnitude


def parse_floating(text: str) -> float:
    """Parse decimal/exponential text; raises ValueError on trailing characters."""
    if _FLOAT_PATTERN.match(text) is None:
        raise ValueError(f"Invalid floating point value: '{text}'")
    return float(text)


def check_integer_range(var_type: VarType, value: int) -> int:
    low, high = _INT_RANGES[var_type]
    if not low <= value <= high:
        raise ValueError(f"Value {value} is out of range for {var_type.label}")
    return value


def convert_token(var_type: VarType, text: str, max_len: Optional[int] = None) -> Scalar:
    """
    Convert a single command-line token into the Python value for ``var_type``.

    Raises:
        ValueError: If the text is not a valid literal for the type.
        OverflowError: If a float value does not fit in single precision.
    """
    if var_type is VarType.STRING:
        return truncate(text, max_len if max_len is not None else len(text) + 1)
    if var_type in _INT_RANGES:
        return check_integer_range(var_type, parse_integer(text))
    if var_type in (VarType.BOOL, VarType.TRUE):
        return parse_integer(text) != 0
    if var_type is VarType.FLOAT:
        return to_float32(parse_floating(text))
    if var_type is VarType.DOUBLE:
        return parse_floating(text)
    raise ValueError(f"Unsupported variable type: {var_type}")


@dataclass(frozen=True)
class Value:
    """
    A value tagged with its variable type.

    ``max_len`` is only meaningful for ``VarType.STRING`` and bounds every write
    into the destination.
    """

    var_type: VarType
    data: Scalar
    max_len: Optional[int] = None

    @classmethod
    def of(cls, var_type: VarType, data: Any, max_len: Optional[int] = None) -> "Value":
        """
        Build a value from a typed literal, normalising it to the declared type.

        Raises:
            TypeError: If ``data`` has the wrong Python type.
            ValueError: If ``data`` does not fit the declared type.
        """
        if var_type is VarType.STRING:
            if max_len is None or max_len < 1:
                raise ValueError("String parameters need a max_len of at least 1")
            if data is None:
                data = ""
            if not isinstance(data, str):
                raise TypeError(f"Expected str default, got {type(data).__name__}: {data!r}")
            return cls(var_type, data, max_len)

        if var_type in _INT_RANGES:
            if not isinstance(data, int) or isinstance(data, bool):
                raise TypeError(f"Expected int default, got {type(data).__name__}: {data!r}")
            return cls(var_type, check_integer_range(var_type, data))

        if var_type in (VarType.BOOL, VarType.TRUE):
            if not isinstance(data, bool):
                raise TypeError(f"Expected bool default, got {type(data).__name__}: {data!r}")
            return cls(var_type, data)

        if var_type in (VarType.FLOAT, VarType.DOUBLE):
            if not isinstance(data, (int, float)) or isinstance(data, bool):
                raise TypeError(f"Expected float default, got {type(data).__name__}: {data!r}")
            data = float(data)
            if var_type is VarType.FLOAT:
                data = to_float32(data)
            return cls(var_type, data)

        raise ValueError(f"Unsupported variable type: {var_type}")

    def write_into(self, destination: Destination) -> None:
        """Copy the active member into ``destination``, bounding strings."""
        if self.var_type is VarType.STRING:
            destination.set(truncate(str(self.data), self.max_len or 1))
        else:
            destination.set(self.data)
