"""Exceptions raised by the vmre engine."""

from typing import Optional


class RegexError(Exception):
    """Base exception for all vmre errors."""

    pass


class PatternSyntaxError(RegexError, ValueError):
    """Raised when a pattern cannot be parsed."""

    def __init__(self, message: str, pattern: str = "", position: int = -1) -> None:
        self.pattern = pattern
        self.position = position
        super().__init__(message)

    def __str__(self) -> str:
        if self.position >= 0:
            return f"{super().__str__()} at position {self.position}"
        return super().__str__()


class ThreadOverflowError(RegexError, RuntimeError):
    """Raised when a single match call needs more pending threads than allowed."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"VM thread list overflowed (limit {limit})")


class InvalidInputError(RegexError, ValueError):
    """Raised when the subject contains the reserved end-of-input character."""

    def __init__(self, sentinel: str, position: Optional[int] = None) -> None:
        self.sentinel = sentinel
        self.position = position
        super().__init__(
            f"input contains the reserved end-of-input character {sentinel!r}"
            + (f" at offset {position}" if position is not None else "")
        )


class InternalConsistencyError(RegexError, AssertionError):
    """Raised when compiled bytecode violates its own invariants."""

    pass
