"""Action guard expressions: ``Left == Right`` and ``Left != Right``.

Each side is a quoted literal ('x' or "x"), an integer, ``true``/``false``,
or a bag key such as ``Parts[0]``, ``Parts.Length`` or ``Text``. Bag keys
that are missing read as "". Comparison is ordinal (case-sensitive).
"""
import re
from dataclasses import dataclass

from supplier_rules.engine.context import CellContext

_INT_RE = re.compile(r"^[+-]?\d+$")

OPERATORS = ("==", "!=")


def _resolve_token(token: str, ctx: CellContext) -> str:
    if not token:
        return ""
    if len(token) >= 2 and token[0] == token[-1] and token[0] in ("'", '"'):
        return token[1:-1]
    if token.lower() in ("true", "false") or _INT_RE.match(token):
        return token
    return ctx.read(token)


@dataclass(frozen=True)
class Condition:
    """Parsed guard expression."""
    left: str
    operator: str
    right: str

    def evaluate(self, ctx: CellContext) -> bool:
        equal = _resolve_token(self.left, ctx) == _resolve_token(self.right, ctx)
        return equal if self.operator == "==" else not equal

    def __str__(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


def parse_condition(expression: str) -> Condition:
    """Parse ``expression`` into a Condition.

    Raises:
        ValueError: If the expression is blank or has no ``==``/``!=``
    """
    text = (expression or "").strip()
    if not text:
        raise ValueError("Condition expression is empty")
    # "==" is looked for first, so "a == '!='" compares against a literal
    for operator in OPERATORS:
        position = text.find(operator)
        if position >= 0:
            left = text[:position].strip()
            right = text[position + len(operator):].strip()
            return Condition(left, operator, right)
    raise ValueError(f"Unsupported condition '{expression}': expected '==' or '!='")
