from dataclasses import dataclass

# === Node Base Class ===


class Node:
    """Base class for all syntax-tree nodes."""

    pass


# === Atomic Nodes ===


@dataclass(frozen=True)
class Literal(Node):
    """Matches exactly one character."""

    char: str


@dataclass(frozen=True)
class AnyChar(Node):
    """Represents the dot (.) wildcard, matching any character."""

    pass


@dataclass(frozen=True)
class Epsilon(Node):
    """Matches the empty string (empty pattern, empty alternative or group)."""

    pass


# === Composite Nodes ===


@dataclass(frozen=True)
class Concat(Node):
    """Represents `left` followed by `right`."""

    left: Node
    right: Node


@dataclass(frozen=True)
class Union(Node):
    """Represents a choice between two alternatives; `left` has priority."""

    left: Node
    right: Node


@dataclass(frozen=True)
class Star(Node):
    """Zero or more repetitions, ex: `a*`."""

    operand: Node


@dataclass(frozen=True)
class Plus(Node):
    """One or more repetitions, ex: `a+`."""

    operand: Node


@dataclass(frozen=True)
class Question(Node):
    """Zero or one occurrence, ex: `a?`."""

    operand: Node


def children(node: Node) -> tuple:
    """
    Return the direct children of a node, in compilation order.
    """
    if isinstance(node, (Concat, Union)):
        return (node.left, node.right)
    if isinstance(node, (Star, Plus, Question)):
        return (node.operand,)
    return ()


def subtree_string(node: Node) -> str:
    """
    Render a subtree as a compact one-line string, ex: `Union(Literal('a'), Epsilon)`.
    """
    if isinstance(node, Literal):
        return f"Literal({node.char!r})"
    if isinstance(node, (AnyChar, Epsilon)):
        return type(node).__name__
    inner = ", ".join(subtree_string(child) for child in children(node))
    return f"{type(node).__name__}({inner})"
