"""
Engine facade: one compiled pattern and the VM that runs it.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from vmre.config import EngineConfig
from vmre.re_compiler import compile_tree
from vmre.re_parser import parse_string
from vmre.vm import NOT_FOUND, VM

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a match query; start and end are -1 when nothing matched."""

    matched: bool
    start: int = NOT_FOUND
    end: int = NOT_FOUND

    def __bool__(self) -> bool:
        return self.matched

    @property
    def span(self) -> Tuple[int, int]:
        return (self.start, self.end)

    @property
    def length(self) -> int:
        """
        The length of the match, or 0 if nothing matched.
        """
        return self.end - self.start if self.matched else 0


NO_MATCH = MatchResult(matched=False)


class Regexp:
    """
    A compiled pattern.

    Construction parses, compiles and (unless disabled) optimizes the pattern;
    a malformed pattern raises PatternSyntaxError and no Regexp is created.
    """

    def __init__(self, pattern: str, config: Optional[EngineConfig] = None):
        self.pattern = pattern
        self.config = config or EngineConfig()
        self.tree = parse_string(pattern)
        self.program = compile_tree(self.tree, optimize=self.config.optimize)
        self.vm = VM(
            self.program,
            max_threads=self.config.max_threads,
            sentinel=self.config.sentinel,
        )
        logger.debug(
            "Compiled pattern %r into %s instructions", pattern, len(self.program)
        )

    def match(self, text: str, start: int = 0) -> MatchResult:
        """
        Find the leftmost match in `text` at or after `start`.

        Args:
            text: The subject string
            start: First offset to try

        Returns:
            MatchResult with the span of the match, or NO_MATCH
        """
        match_start, match_end = self.vm.search(text, start)
        if match_start == NOT_FOUND:
            return NO_MATCH
        return MatchResult(matched=True, start=match_start, end=match_end)

    def is_match(self, text: str) -> bool:
        return self.match(text).matched

    def match_at(self, text: str, pos: int) -> bool:
        """Whether a match starts exactly at `pos`."""
        return self.vm.matches(text, pos)

    def end_at(self, text: str, pos: int) -> int:
        """End offset of the match starting exactly at `pos`, or -1."""
        return self.vm.run(text, pos)

    def dump(self) -> str:
        return self.program.dump()

    def __repr__(self) -> str:
        return f"Regexp({self.pattern!r})"


def compile(pattern: str, config: Optional[EngineConfig] = None) -> Regexp:  # pylint: disable=redefined-builtin
    """Compile `pattern` into a reusable Regexp."""
    return Regexp(pattern, config)
