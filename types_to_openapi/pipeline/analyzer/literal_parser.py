"""
Literal-only expression parser for default values.

Initializers are never executed. Only these forms are accepted:
strings, numbers (optionally negated), booleans, None, f-strings without
substitutions, and lists or tuples of accepted forms.
"""

from __future__ import annotations

import ast
from typing import Any

from ...errors import LiteralParseError


def parse_literal(text: str) -> Any:
    """
    Read the value of a literal expression.

    Args:
        text: Source text of the expression

    Returns:
        The value (tuples are returned as lists)

    Raises:
        LiteralParseError: If the text is not a literal expression
    """
    try:
        tree = ast.parse(text.strip(), mode="eval")
    except SyntaxError as e:
        raise LiteralParseError(f"Invalid expression {text!r}") from e
    return _evaluate(tree.body, text)


def _evaluate(node: ast.expr, text: str) -> Any:
    if isinstance(node, ast.Constant):
        value = node.value
        if value is None or isinstance(value, (str, bool, int, float)):
            return value
    elif isinstance(node, (ast.List, ast.Tuple)):
        return [_evaluate(element, text) for element in node.elts]
    elif isinstance(node, ast.UnaryOp) and isinstance(node.op, (ast.USub, ast.UAdd)):
        operand = node.operand
        if isinstance(operand, ast.Constant) and isinstance(operand.value, (int, float)) and not isinstance(operand.value, bool):
            return -operand.value if isinstance(node.op, ast.USub) else operand.value
    elif isinstance(node, ast.JoinedStr):
        # f"..." without placeholders
        if all(isinstance(v, ast.Constant) for v in node.values):
            return "".join(v.value for v in node.values)
    raise LiteralParseError(f"Initializer is an expression: {text.strip()}")
