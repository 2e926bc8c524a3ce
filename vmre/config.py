"""
Engine configuration for vmre.

Holds the knobs shared by the compiler pipeline and the matching VM.
"""

from dataclasses import dataclass

DEFAULT_MAX_THREADS = 10000
DEFAULT_SENTINEL = "\x00"


@dataclass(frozen=True)
class EngineConfig:
    """Settings for compiling and running one pattern."""

    max_threads: int = DEFAULT_MAX_THREADS
    optimize: bool = True
    sentinel: str = DEFAULT_SENTINEL

    def __post_init__(self):
        if self.max_threads < 1:
            raise ValueError(
                f"max_threads must be at least 1, got {self.max_threads}"
            )
        if not isinstance(self.sentinel, str) or len(self.sentinel) != 1:
            raise ValueError(
                f"sentinel must be a single character, got {self.sentinel!r}"
            )
