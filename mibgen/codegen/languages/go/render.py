"""
Renders declaration-model expressions as Go source text.

Multi-line values are indented with tabs and end every element with a
comma, which is the layout gofmt keeps.
"""

from ...core.declarations import (
    Cast,
    CompositeLit,
    Expr,
    ListExpr,
    Literal,
    Ref,
)

INDENT = "\t"

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def quote(value: str) -> str:
    """Quote a string as a Go interpreted string literal."""
    parts = []
    for char in value:
        if char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif char.isprintable():
            parts.append(char)
        elif ord(char) <= 0xFFFF:
            parts.append(f"\\u{ord(char):04x}")
        else:
            parts.append(f"\\U{ord(char):08x}")
    return '"' + "".join(parts) + '"'


def render_expr(expr: Expr, depth: int = 0) -> str:
    """Render an expression that starts at the given indentation depth."""
    if isinstance(expr, Ref):
        return expr.name

    if isinstance(expr, Literal):
        if isinstance(expr.value, str):
            return quote(expr.value)
        return str(int(expr.value))

    if isinstance(expr, Cast):
        return f"{expr.type_name}({render_expr(expr.expr, depth)})"

    if isinstance(expr, ListExpr):
        items = [render_expr(item, depth + 1) for item in expr.items]
        return _render_block(expr.type_name, items, expr.inline, depth)

    if isinstance(expr, CompositeLit):
        items = [
            f"{name}: {render_expr(value, depth + 1)}" for name, value in expr.fields
        ]
        prefix = "&" if expr.address_of else ""
        return prefix + _render_block(expr.type_name, items, expr.inline, depth)

    raise TypeError(f"Cannot render {type(expr).__name__}")


def _render_block(type_name: str, items: list[str], inline: bool, depth: int) -> str:
    if inline or not items:
        return f"{type_name}{{{', '.join(items)}}}"

    inner = INDENT * (depth + 1)
    lines = [f"{type_name}{{"]
    lines.extend(f"{inner}{item}," for item in items)
    lines.append(f"{INDENT * depth}}}")
    return "\n".join(lines)
