"""
vmre - a regular-expression engine built as a small compiler pipeline.

A pattern is parsed into a syntax tree, compiled into a graph of VM
instructions, optimized, and executed by a thread-list VM:

- re_parser / re_transformer: pattern text to syntax tree (lark)
- re_ast: syntax-tree nodes
- instruction / bytecode: instructions, mutable and frozen programs
- re_compiler: syntax tree to bytecode
- optimizer: nop elision, jump-chain collapsing, unreachable-jump pruning
- vm: thread-list NFA simulation
- engine: the compile/match facade

Example usage:
    >>> import vmre
    >>> vmre.compile("a+").match("baaab").span
    (1, 4)
"""

from .config import EngineConfig
from .engine import NO_MATCH, MatchResult, Regexp, compile
from .errors import (
    InternalConsistencyError,
    InvalidInputError,
    PatternSyntaxError,
    RegexError,
    ThreadOverflowError,
)

__version__ = "0.1.0"

__all__ = [
    "compile",
    "Regexp",
    "MatchResult",
    "NO_MATCH",
    "EngineConfig",
    "RegexError",
    "PatternSyntaxError",
    "ThreadOverflowError",
    "InvalidInputError",
    "InternalConsistencyError",
    "__version__",
]
