"""
Regex Transformer: Lark parse-tree transformer for vmre patterns.

This module provides the RegexTransformer class that converts Lark parse trees
into the binary syntax tree consumed by the compiler. Alternation folds to the
left and concatenation folds to the right.
"""

from lark import Transformer, v_args

from vmre import re_ast as ast


@v_args(inline=True)  # This simplifies most method signatures
class RegexTransformer(Transformer):
    """
    Transformer that converts Lark parse trees into vmre syntax-tree nodes.
    """

    def start(self, node):
        """Unwrap the start rule."""
        return node

    def union(self, *options):
        """Transform `a|b|c` into Union(Union(a, b), c)."""
        node = options[0]
        for option in options[1:]:
            node = ast.Union(left=node, right=option)
        return node

    def seq(self, *parts):
        """Transform a sequence into right-nested Concat nodes; empty is Epsilon."""
        if not parts:
            return ast.Epsilon()
        node = parts[-1]
        for part in reversed(parts[:-1]):
            node = ast.Concat(left=part, right=node)
        return node

    def star(self, operand):
        """Transform * quantifier (0 or more occurrences)."""
        return ast.Star(operand=operand)

    def plus(self, operand):
        """Transform + quantifier (1 or more occurrences)."""
        return ast.Plus(operand=operand)

    def question(self, operand):
        """Transform ? quantifier (0 or 1 occurrence)."""
        return ast.Question(operand=operand)

    def any_char(self):
        """Transform dot (.) wildcard."""
        return ast.AnyChar()

    def literal(self, token):
        """Transform a literal character token."""
        return ast.Literal(char=str(token))
