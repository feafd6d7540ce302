import pytest

from arena_argparser import ArenaRef, CapacityExceededError, StringArena


class TestStringArena:
    """Bounded interning with rollback."""

    def test_intern_and_read_back(self):
        arena = StringArena(32)
        first = arena.intern("hello")
        second = arena.intern(None)
        third = arena.intern("wörld")

        assert first == ArenaRef(0, 5)
        assert second == ArenaRef(6, 0)
        # UTF-8 bytes are counted, not characters
        assert third == ArenaRef(7, 6)
        assert arena.text(first) == "hello"
        assert arena.text(second) == ""
        assert arena.text(third) == "wörld"
        assert arena.offset == 14
        assert len(arena) == 14
        assert arena.remaining == 18

    def test_exact_fit(self):
        arena = StringArena(6)
        arena.intern("hello")
        assert arena.remaining == 0
        with pytest.raises(CapacityExceededError):
            arena.intern("")

    def test_overflow_leaves_arena_unchanged(self):
        arena = StringArena(8)
        ref = arena.intern("abc")

        with pytest.raises(CapacityExceededError, match="Cannot store the string 'abcde'"):
            arena.intern("abcde")

        assert arena.offset == 4
        assert arena.text(ref) == "abc"

    def test_rollback(self):
        arena = StringArena(16)
        kept = arena.intern("keep")
        mark = arena.offset
        arena.intern("drop")
        arena.rollback(mark)

        assert arena.offset == mark
        assert arena.text(kept) == "keep"
        assert arena.intern("next") == ArenaRef(mark, 4)

    def test_rollback_cannot_move_forward(self):
        arena = StringArena(16)
        with pytest.raises(ValueError):
            arena.rollback(4)

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            StringArena(0)
