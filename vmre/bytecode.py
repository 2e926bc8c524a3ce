"""
Bytecode containers.

`Program` is the mutable, spliceable form produced by the compiler and edited
by the optimizer. `CompiledProgram` is the frozen form handed to the VM: every
edge is resolved to an integer position once, at freeze time.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from vmre.errors import InternalConsistencyError
from vmre.instruction import Instruction, Opcode

NO_TARGET = -1


def _format_line(index: int, opcode: Opcode, char: Optional[str], targets: List[str]) -> str:
    line = f"{index:02d}: {opcode.name}"
    if opcode == Opcode.LITERAL:
        line += f" {char!r}"
    if targets:
        line += " -> " + ", ".join(targets)
    return line


class Program:
    """
    An ordered, mutable sequence of instructions.

    Order is fall-through order; branches use explicit references, so
    instructions may be inserted anywhere without breaking existing edges.
    """

    def __init__(self, code: Optional[Iterable[Instruction]] = None):
        self.code: List[Instruction] = list(code or [])

    def __len__(self) -> int:
        return len(self.code)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.code)

    def __getitem__(self, index: int) -> Instruction:
        return self.code[index]

    @property
    def entry(self) -> Instruction:
        """The first instruction, i.e. where a fragment is entered."""
        if not self.code:
            raise InternalConsistencyError("empty program has no entry instruction")
        return self.code[0]

    def index_of(self, inst: Instruction) -> int:
        """Position of `inst` in this program, or -1 if it is not here."""
        for i, candidate in enumerate(self.code):
            if candidate is inst:
                return i
        return -1

    def positions(self) -> Dict[Instruction, int]:
        """Identity map from instruction to position."""
        return {inst: i for i, inst in enumerate(self.code)}

    def add_inst(self, inst: Instruction, i: int) -> None:
        """Insert one instruction at position i."""
        if not 0 <= i <= len(self.code):
            raise IndexError(f"insert position {i} outside program of length {len(self.code)}")
        self.code.insert(i, inst)

    def push_inst(self, inst: Instruction) -> None:
        self.add_inst(inst, 0)

    def append_inst(self, inst: Instruction) -> None:
        self.code.append(inst)

    def add_code(self, other: "Program", i: int) -> None:
        """Splice every instruction of `other` in at position i."""
        if not 0 <= i <= len(self.code):
            raise IndexError(f"insert position {i} outside program of length {len(self.code)}")
        self.code[i:i] = other.code

    def push_code(self, other: "Program") -> None:
        self.add_code(other, 0)

    def append_code(self, other: "Program") -> None:
        self.add_code(other, len(self.code))

    def reference_counts(self) -> Counter:
        """How many branch operands point at each instruction."""
        counts: Counter = Counter()
        for inst in self.code:
            for target in inst.targets():
                if target is not None:
                    counts[target] += 1
        return counts

    def validate(self) -> None:
        """Raise if any branch operand points outside this program."""
        positions = self.positions()
        for i, inst in enumerate(self.code):
            for target in inst.targets():
                if target is None:
                    raise InternalConsistencyError(
                        f"{inst.opcode.name} at {i} has no target"
                    )
                if target not in positions:
                    raise InternalConsistencyError(
                        f"{inst.opcode.name} at {i} refers to {target!r}, "
                        "which is not part of the program"
                    )

    def freeze(self) -> "CompiledProgram":
        """
        Resolve every edge to a position and return the immutable program.

        Raises:
            InternalConsistencyError: On dangling or missing references, or if
                execution could fall off the end of the program
        """
        if not self.code:
            raise InternalConsistencyError("cannot freeze an empty program")
        self.validate()
        positions = self.positions()
        last = len(self.code) - 1
        resolved = []
        for i, inst in enumerate(self.code):
            if inst.opcode == Opcode.MATCH:
                x, y = NO_TARGET, NO_TARGET
            elif inst.opcode == Opcode.JUMP:
                x, y = positions[inst.x], NO_TARGET
            elif inst.opcode == Opcode.SPLIT:
                x, y = positions[inst.x], positions[inst.y]
            else:
                if i == last:
                    raise InternalConsistencyError(
                        f"{inst.opcode.name} at {i} falls through past the end of the program"
                    )
                x, y = i + 1, NO_TARGET
            resolved.append(ResolvedInstruction(inst.opcode, inst.char, x, y))
        return CompiledProgram(tuple(resolved))

    def dump(self) -> str:
        """Plain structural listing: `index: opcode operand -> target(s)`."""
        positions = self.positions()
        lines = []
        for i, inst in enumerate(self.code):
            targets = [
                f"{positions[t]:02d}" if t in positions else "??"
                for t in inst.targets()
            ]
            lines.append(_format_line(i, inst.opcode, inst.char, targets))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Program({len(self.code)} instructions)"


@dataclass(frozen=True)
class ResolvedInstruction:
    """An instruction whose successors are positions; `x` holds fall-through too."""

    opcode: Opcode
    char: Optional[str]
    x: int
    y: int


@dataclass(frozen=True)
class CompiledProgram:
    """Read-only program executed by the VM."""

    code: Tuple[ResolvedInstruction, ...]

    def __len__(self) -> int:
        return len(self.code)

    def __getitem__(self, index: int) -> ResolvedInstruction:
        return self.code[index]

    def dump(self) -> str:
        lines = []
        for i, inst in enumerate(self.code):
            if inst.opcode == Opcode.JUMP:
                targets = [f"{inst.x:02d}"]
            elif inst.opcode == Opcode.SPLIT:
                targets = [f"{inst.x:02d}", f"{inst.y:02d}"]
            else:
                targets = []
            lines.append(_format_line(i, inst.opcode, inst.char, targets))
        return "\n".join(lines)
