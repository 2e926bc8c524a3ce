"""
Bytecode optimizer for vmre.

Three passes, run in this order by `optimize`:
1. Nop elision: retarget branches past NOPs, then drop every NOP
2. Jump-chain collapsing: branches into a JUMP go straight to its final target
3. Unreachable-jump pruning: drop an unreferenced JUMP that follows a JUMP

None of the passes changes the language a program matches.
"""

import logging
from typing import Dict, Optional

from vmre.bytecode import Program
from vmre.errors import InternalConsistencyError
from vmre.instruction import Instruction, Opcode

logger = logging.getLogger(__name__)


def optimize(program: Program) -> Program:
    """
    Run every pass over `program` in place.

    Args:
        program: A complete program (normally already terminated by MATCH)

    Returns:
        The same program, for chaining
    """
    before = len(program)
    remove_nops(program)
    collapse_jump_chains(program)
    remove_unreachable_jumps(program)
    logger.debug("Optimized program: %s -> %s instructions", before, len(program))
    return program


def _first_non_nop(
    program: Program, positions: Dict[Instruction, int], target: Instruction
) -> Optional[Instruction]:
    index = positions.get(target)
    if index is None:
        raise InternalConsistencyError(
            f"branch refers to {target!r}, which is not part of the program"
        )
    for inst in program.code[index:]:
        if inst.opcode != Opcode.NOP:
            return inst
    return None


def remove_nops(program: Program) -> Program:
    """
    Drop every NOP, first pointing branches at the instruction a NOP falls into.

    A branch whose NOP chain runs off the end of the program is left with no
    target; freezing such a program fails.
    """
    positions = program.positions()
    for inst in program.code:
        if not inst.is_branch:
            continue
        if inst.x is not None and inst.x.opcode == Opcode.NOP:
            inst.x = _first_non_nop(program, positions, inst.x)
        if inst.opcode == Opcode.SPLIT and inst.y is not None and inst.y.opcode == Opcode.NOP:
            inst.y = _first_non_nop(program, positions, inst.y)

    before = len(program)
    program.code = [inst for inst in program.code if inst.opcode != Opcode.NOP]
    logger.debug("Nop elision: %s -> %s instructions", before, len(program))
    return program


def _chain_destination(jump: Instruction) -> Instruction:
    """Follow a JUMP chain to the first instruction that is not a JUMP."""
    seen = set()
    dst = jump
    while dst is not None and dst.opcode == Opcode.JUMP:
        if dst in seen:
            raise InternalConsistencyError("jump chain loops back on itself")
        seen.add(dst)
        dst = dst.x
    if dst is None:
        raise InternalConsistencyError("jump chain ends in a missing target")
    return dst


def collapse_jump_chains(program: Program) -> Program:
    """Rewrite branches into a JUMP to point at the chain's final destination."""
    rewritten = 0
    for inst in program.code:
        if not inst.is_branch:
            continue
        if inst.x is not None and inst.x.opcode == Opcode.JUMP:
            inst.x = _chain_destination(inst.x)
            rewritten += 1
        if inst.opcode == Opcode.SPLIT and inst.y is not None and inst.y.opcode == Opcode.JUMP:
            inst.y = _chain_destination(inst.y)
            rewritten += 1
    logger.debug("Jump-chain collapsing: %s references rewritten", rewritten)
    return program


def remove_unreachable_jumps(program: Program) -> Program:
    """
    Remove a JUMP directly after another JUMP when nothing branches to it.

    Such a JUMP cannot be reached by fall-through (the previous JUMP is
    unconditional) nor by any branch, so it is dead.
    """
    counts = program.reference_counts()
    code = program.code
    before = len(code)
    for i in range(len(code) - 1, 0, -1):
        inst = code[i]
        if (
            inst.opcode == Opcode.JUMP
            and code[i - 1].opcode == Opcode.JUMP
            and counts[inst] == 0
        ):
            if inst.x is not None:
                counts[inst.x] -= 1
            del code[i]
    logger.debug("Unreachable-jump pruning: %s -> %s instructions", before, len(code))
    return program
