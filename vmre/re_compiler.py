"""
Syntax tree to bytecode compiler.

Every node compiles to a relocatable fragment: a Program with no MATCH whose
entry is its first instruction. Branching fragments end in a join NOP that
their internal branches point at. `compile_tree` appends the single MATCH,
optimizes, and freezes the result.
"""

import logging
from typing import List

from vmre import re_ast as ast
from vmre.bytecode import CompiledProgram, Program
from vmre.instruction import Instruction
from vmre.optimizer import optimize as optimize_program

logger = logging.getLogger(__name__)


def _compile_union(left: Program, right: Program) -> Program:
    """
        Split L1, L2
    L1: code for left
        Jump L3
    L2: code for right
    L3: Nop
    """
    join = Instruction.nop()
    program = Program([Instruction.split(left.entry, right.entry)])
    program.append_code(left)
    program.append_inst(Instruction.jump(join))
    program.append_code(right)
    program.append_inst(join)
    return program


def _compile_star(body: Program) -> Program:
    """
    L1: Split L2, L3
    L2: code for body
        Jump L1
    L3: Nop
    """
    join = Instruction.nop()
    split = Instruction.split(body.entry, join)
    program = Program([split])
    program.append_code(body)
    program.append_inst(Instruction.jump(split))
    program.append_inst(join)
    return program


def _compile_plus(body: Program) -> Program:
    """
    L1: code for body
        Split L1, L2
    L2: Nop
    """
    join = Instruction.nop()
    program = Program(body.code)
    program.append_inst(Instruction.split(body.entry, join))
    program.append_inst(join)
    return program


def _compile_question(body: Program) -> Program:
    """
        Split L1, L2
    L1: code for body
    L2: Nop
    """
    join = Instruction.nop()
    program = Program([Instruction.split(body.entry, join)])
    program.append_code(body)
    program.append_inst(join)
    return program


def _assemble(node: ast.Node, operands: List[Program]) -> Program:
    """Build the fragment for `node` from its already-compiled children."""
    if isinstance(node, ast.Literal):
        return Program([Instruction.literal(node.char)])
    if isinstance(node, ast.AnyChar):
        return Program([Instruction.any()])
    if isinstance(node, ast.Epsilon):
        return Program([Instruction.nop()])
    if isinstance(node, ast.Concat):
        left, right = operands
        left.append_code(right)
        return left
    if isinstance(node, ast.Union):
        return _compile_union(*operands)
    if isinstance(node, ast.Star):
        return _compile_star(operands[0])
    if isinstance(node, ast.Plus):
        return _compile_plus(operands[0])
    if isinstance(node, ast.Question):
        return _compile_question(operands[0])
    raise TypeError(f"Unexpected syntax-tree node {node!r}")


def compile_node(root: ast.Node) -> Program:
    """
    Compile a syntax tree into a fragment, children before parents.

    The walk keeps its own stack, so deeply nested trees do not hit the
    interpreter's recursion limit.
    """
    pending = [(root, False)]
    fragments: List[Program] = []
    while pending:
        node, expanded = pending.pop()
        kids = ast.children(node)
        if kids and not expanded:
            pending.append((node, True))
            for kid in reversed(kids):
                pending.append((kid, False))
            continue
        split_at = len(fragments) - len(kids)
        operands = fragments[split_at:]
        del fragments[split_at:]
        fragments.append(_assemble(node, operands))
    return fragments.pop()


def compile_tree(root: ast.Node, optimize: bool = True) -> CompiledProgram:
    """
    Compile a syntax tree into a frozen program ready for the VM.

    Args:
        root: Root of the syntax tree
        optimize: Whether to run the optimizer before freezing

    Returns:
        The frozen, MATCH-terminated program
    """
    program = compile_node(root)
    program.append_inst(Instruction.match())
    logger.debug("Compiled %s instructions", len(program))
    if optimize:
        optimize_program(program)
    return program.freeze()
