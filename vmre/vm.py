"""
Matching virtual machine.

Runs a CompiledProgram against a subject with an explicit ready list of
threads instead of recursion. Successor-A of a SPLIT is always explored
before successor-B, so the first thread to reach MATCH is the preferred
match. Each (pc, sp) state runs at most once per scan, which bounds a scan by
instructions x subject length.
"""

import logging
from typing import NamedTuple, Set, Tuple

from vmre.bytecode import CompiledProgram
from vmre.config import DEFAULT_MAX_THREADS, DEFAULT_SENTINEL
from vmre.errors import InternalConsistencyError, InvalidInputError, ThreadOverflowError
from vmre.instruction import Opcode

logger = logging.getLogger(__name__)

NOT_FOUND = -1


class Thread(NamedTuple):
    """One speculative execution path: program counter and string pointer."""

    pc: int
    sp: int


class VM:
    """
    Thompson-style NFA simulation over a frozen program.

    The VM holds no per-run state, so one instance can serve any number of
    calls, including after a ThreadOverflowError.
    """

    def __init__(
        self,
        program: CompiledProgram,
        max_threads: int = DEFAULT_MAX_THREADS,
        sentinel: str = DEFAULT_SENTINEL,
    ):
        self.program = program
        self.max_threads = max_threads
        self.sentinel = sentinel

    def _terminate(self, text: str) -> str:
        position = text.find(self.sentinel)
        if position != -1:
            raise InvalidInputError(self.sentinel, position)
        return text + self.sentinel

    def run(self, text: str, start: int = 0) -> int:
        """
        Match the program anchored at `start`.

        Returns:
            The end offset of the match, or -1 if there is none
        """
        if not 0 <= start <= len(text):
            raise ValueError(f"start offset {start} outside input of length {len(text)}")
        subject = self._terminate(text)
        return self._execute(subject, start, set())

    def matches(self, text: str, start: int = 0) -> bool:
        """Whether the program matches anchored at `start`."""
        return self.run(text, start) != NOT_FOUND

    def search(self, text: str, start: int = 0) -> Tuple[int, int]:
        """
        Find the leftmost match at or after `start`.

        Returns:
            (start, end) of the match, or (-1, -1) if there is none
        """
        if start < 0:
            raise ValueError(f"start offset {start} is negative")
        subject = self._terminate(text)
        # States explored by a failed start offset can never succeed later.
        failed: Set[int] = set()
        for offset in range(start, len(text) + 1):
            end = self._execute(subject, offset, failed)
            if end != NOT_FOUND:
                return offset, end
        return NOT_FOUND, NOT_FOUND

    def _execute(self, subject: str, start: int, visited: Set[int]) -> int:
        # pylint: disable=too-many-branches
        code = self.program.code
        sentinel = self.sentinel
        stride = len(subject)
        ready = [Thread(0, start)]

        while ready:
            pc, sp = ready.pop()
            while True:
                state = pc * stride + sp
                if state in visited:
                    break
                visited.add(state)

                inst = code[pc]
                opcode = inst.opcode
                if opcode == Opcode.LITERAL:
                    char = subject[sp]
                    if char != inst.char or char == sentinel:
                        break
                    pc = inst.x
                    sp += 1
                elif opcode == Opcode.ANY:
                    if subject[sp] == sentinel:
                        break
                    pc = inst.x
                    sp += 1
                elif opcode == Opcode.MATCH:
                    return sp
                elif opcode == Opcode.JUMP:
                    pc = inst.x
                elif opcode == Opcode.SPLIT:
                    if len(ready) >= self.max_threads:
                        logger.warning(
                            "Thread list overflowed at pc=%s sp=%s (limit %s)",
                            pc,
                            sp,
                            self.max_threads,
                        )
                        raise ThreadOverflowError(self.max_threads)
                    ready.append(Thread(inst.y, sp))
                    pc = inst.x
                elif opcode == Opcode.NOP:
                    pc = inst.x
                else:
                    raise InternalConsistencyError(f"unknown opcode {opcode!r} at {pc}")
        return NOT_FOUND
