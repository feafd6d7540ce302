"""
Capacity limits for a parser instance, optionally loaded from YAML or JSON.

Example limits file (YAML):

    max_params: 64
    arena_size: 8192
    max_error_message: 512
"""

import dataclasses
import json
import os
from dataclasses import dataclass, field
from typing import Any, Union

try:
    import yaml

    HAS_YAML = True
except ImportError:
    HAS_YAML = False

from .arena import DEFAULT_ARENA_SIZE

DEFAULT_MAX_PARAMS = 32
DEFAULT_MAX_ERROR_MESSAGE = 256


@dataclass(frozen=True)
class ParserLimits:
    """Fixed capacity bounds applied by a parser instance."""

    max_params: int = field(
        default=DEFAULT_MAX_PARAMS,
        metadata={"help": "Maximum optional (and, separately, positional) parameters"},
    )
    arena_size: int = field(
        default=DEFAULT_ARENA_SIZE,
        metadata={"help": "Size in bytes of the string arena"},
    )
    max_error_message: int = field(
        default=DEFAULT_MAX_ERROR_MESSAGE,
        metadata={"help": "Size of the error message slot, terminator included"},
    )

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(
                    f"Field '{f.name}' expects int, got {type(value).__name__}: {value!r}"
                )
            if value < 1:
                raise ValueError(f"Field '{f.name}' must be positive, got {value}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ParserLimits":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown limit(s): {', '.join(unknown)}")
        return cls(**data)


def _read_config_file(config_path: Union[str, os.PathLike]) -> Any:
    """
    Read a YAML or JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file format is not supported or invalid.
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    file_ext = os.path.splitext(config_path)[1].lower()

    with open(config_path, "r") as f:
        if file_ext in [".yaml", ".yml"]:
            if not HAS_YAML:
                raise ValueError(
                    "YAML support not available. Please install PyYAML: pip install PyYAML"
                )
            try:
                return yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML file: {e}")
        elif file_ext == ".json":
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON file: {e}")
        else:
            raise ValueError(
                f"Unsupported file format: {file_ext}. "
                "Supported formats are: .yaml, .yml, .json"
            )


def load_limits(config_path: Union[str, os.PathLike]) -> ParserLimits:
    """
    Load parser limits from a YAML or JSON file.

    Missing keys keep their defaults. An empty file yields the defaults.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file is invalid or holds unknown keys.
        TypeError: If a limit is not an integer.
    """
    data = _read_config_file(config_path)
    if data is None:
        return ParserLimits()
    if not isinstance(data, dict):
        raise ValueError(
            f"Limits file must contain a mapping, got {type(data).__name__}"
        )
    return ParserLimits.from_dict(data)
