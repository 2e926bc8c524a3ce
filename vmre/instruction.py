"""
VM instructions.

An Instruction refers to its successors by identity, never by position, so
fragments can be spliced together without rewriting any edge.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class Opcode(IntEnum):
    LITERAL = 0
    ANY = 1
    MATCH = 2
    JUMP = 3
    SPLIT = 4
    NOP = 5


@dataclass(eq=False)
class Instruction:
    """
    One VM operation.

    `x` is used by JUMP and SPLIT, `y` only by SPLIT (x is tried first).
    LITERAL, ANY and NOP fall through to the next instruction in sequence.
    """

    opcode: Opcode
    char: Optional[str] = None
    x: Optional["Instruction"] = None
    y: Optional["Instruction"] = None

    @classmethod
    def literal(cls, char: str) -> "Instruction":
        return cls(Opcode.LITERAL, char=char)

    @classmethod
    def any(cls) -> "Instruction":
        return cls(Opcode.ANY)

    @classmethod
    def match(cls) -> "Instruction":
        return cls(Opcode.MATCH)

    @classmethod
    def jump(cls, target: "Instruction") -> "Instruction":
        return cls(Opcode.JUMP, x=target)

    @classmethod
    def split(cls, first: "Instruction", second: "Instruction") -> "Instruction":
        return cls(Opcode.SPLIT, x=first, y=second)

    @classmethod
    def nop(cls) -> "Instruction":
        return cls(Opcode.NOP)

    @property
    def is_branch(self) -> bool:
        return self.opcode in (Opcode.JUMP, Opcode.SPLIT)

    def targets(self):
        """The instructions this one branches to explicitly."""
        if self.opcode == Opcode.JUMP:
            return (self.x,)
        if self.opcode == Opcode.SPLIT:
            return (self.x, self.y)
        return ()

    def __repr__(self) -> str:
        if self.opcode == Opcode.LITERAL:
            return f"<LITERAL {self.char!r}>"
        return f"<{self.opcode.name}>"
