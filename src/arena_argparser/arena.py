"""
Bounded string storage shared by every definition of a parser.

All names, descriptions, option tokens and string defaults are copied into a
single fixed-size buffer. The buffer lives exactly as long as the parser that
owns it, so there is no per-string release.
"""

import logging
from typing import NamedTuple, Optional

from .errors import CapacityExceededError

logger = logging.getLogger(__name__)

DEFAULT_ARENA_SIZE = 0x1000

_TERMINATOR = b"\x00"


class ArenaRef(NamedTuple):
    """Location of an interned string: byte offset and encoded length."""

    offset: int
    length: int


class StringArena:
    """
    A fixed-capacity byte buffer that owns interned strings.

    Each interned string occupies its UTF-8 encoding plus one terminator byte.
    Failed interns leave the arena untouched, and ``rollback`` rewinds the
    cursor to a previously recorded offset. Rolled-back bytes are not zeroed,
    they are simply no longer reachable.
    """

    def __init__(self, capacity: int = DEFAULT_ARENA_SIZE) -> None:
        if capacity < 1:
            raise ValueError(f"Arena capacity must be positive, got {capacity}")
        self._buf = bytearray(capacity)
        self._offset = 0

    @property
    def capacity(self) -> int:
        return len(self._buf)

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return self.capacity - self._offset

    def intern(self, text: Optional[str]) -> ArenaRef:
        """
        Copy ``text`` (or "" when it is None) into the arena.

        Returns:
            ArenaRef: Reference valid for the lifetime of the arena.

        Raises:
            CapacityExceededError: If the text and its terminator do not fit.
        """
        encoded = (text if text is not None else "").encode("utf-8")
        needed = len(encoded) + len(_TERMINATOR)
        if needed > self.remaining:
            raise CapacityExceededError(f"Cannot store the string '{text or ''}'.")

        start = self._offset
        self._buf[start : start + len(encoded)] = encoded
        self._buf[start + len(encoded)] = 0
        self._offset += needed
        return ArenaRef(start, len(encoded))

    def text(self, ref: ArenaRef) -> str:
        """Decode the string stored at ``ref``."""
        return bytes(self._buf[ref.offset : ref.offset + ref.length]).decode("utf-8")

    def rollback(self, offset: int) -> None:
        """Rewind the cursor to ``offset``, discarding everything interned after it."""
        if not 0 <= offset <= self._offset:
            raise ValueError(f"Cannot roll back arena to offset {offset}")
        if offset != self._offset:
            logger.debug("Rolling back arena from %d to %d", self._offset, offset)
        self._offset = offset

    def __len__(self) -> int:
        return self._offset

    def __repr__(self) -> str:
        return f"StringArena(used={self._offset}, capacity={self.capacity})"
