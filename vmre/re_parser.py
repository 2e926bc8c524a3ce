from pathlib import Path

from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken, VisitError

from vmre.errors import PatternSyntaxError
from vmre.re_ast import Node
from vmre.re_transformer import RegexTransformer

GRAMMAR_PATH = Path(__file__).parent / "re_grammar.lark"
with open(GRAMMAR_PATH, "r", encoding="utf-8") as f:
    REGEX_GRAMMAR = f.read()

regex_parser = Lark(REGEX_GRAMMAR, start="start", parser="lalr")


def _describe(err: UnexpectedInput, pattern: str):
    """Turn a lark error into a (message, position) pair."""
    if isinstance(err, UnexpectedToken):
        if err.token.type == "$END":
            return "unexpected end of pattern", len(pattern)
        return f"unexpected {str(err.token)!r}", err.token.start_pos
    if isinstance(err, UnexpectedCharacters):
        return f"unexpected character {err.char!r}", err.pos_in_stream
    return "unexpected end of pattern", len(pattern)


def parse_string(pattern: str) -> Node:
    """
    Parse a pattern into its syntax tree.

    Args:
        pattern: The regular expression source text

    Returns:
        The root node of the syntax tree

    Raises:
        PatternSyntaxError: If the pattern is malformed
    """
    try:
        tree = regex_parser.parse(pattern)
    except UnexpectedInput as err:
        message, position = _describe(err, pattern)
        raise PatternSyntaxError(message, pattern, position) from err
    try:
        return RegexTransformer().transform(tree)
    except VisitError as ve:
        raise ve.orig_exc from ve
