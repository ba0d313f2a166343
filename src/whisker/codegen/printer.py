"""Elm printer — render the IR as elm-format style source text.

Layout rules:

- Top-level declarations are separated by two blank lines.
- Multi-line lists and records use leading commas at the opening bracket's
  column; nested records start on the line after their field name.
- ``case`` arms are indented four spaces past ``case`` and separated by a
  blank line.

Printing is pure: identical IR always yields identical text.
"""

from __future__ import annotations

from whisker.codegen.ir import (
    Call,
    Case,
    Declaration,
    Expr,
    Import,
    Infix,
    ListExpr,
    Module,
    Raw,
    RecordExpr,
    Ref,
    StringLit,
    TopLevel,
    TypeAlias,
    UnionType,
)

_INDENT = 4

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def quote(value: str) -> str:
    """Render a single-line Elm string literal."""
    return '"' + "".join(_ESCAPES.get(ch, ch) for ch in value) + '"'


def quote_block(value: str) -> str:
    """Render a triple-quoted Elm string; newlines are kept literally."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return '"""' + escaped + '"""'


def _pad(indent: int) -> str:
    return " " * indent


def _is_compound(expr: Expr) -> bool:
    return isinstance(expr, Infix) or (isinstance(expr, Call) and bool(expr.args))


def render_expr(expr: Expr, indent: int = 0) -> str:
    """Render *expr*; continuation lines are indented relative to *indent*.

    The first line carries no leading whitespace so callers can place it
    after ``=`` or on a freshly indented line.

    """
    match expr:
        case Ref(name=name):
            return name
        case Raw(text=text):
            return text
        case StringLit(value=value, block=True):
            return quote_block(value)
        case StringLit(value=value):
            return quote(value)
        case ListExpr():
            return _render_list(expr, indent)
        case RecordExpr():
            return _render_record(expr, indent)
        case Call():
            return _render_call(expr, indent)
        case Infix(op=op, operands=operands):
            parts = [
                f"({render_expr(o, indent)})" if isinstance(o, Infix) else render_expr(o, indent)
                for o in operands
            ]
            return f" {op} ".join(parts)
        case Case():
            return _render_case(expr, indent)
    msg = f"Cannot render {type(expr).__name__}"
    raise TypeError(msg)


def _render_list(expr: ListExpr, indent: int) -> str:
    if not expr.items:
        return "[]"
    if expr.inline:
        return "[ " + ", ".join(render_expr(i, indent) for i in expr.items) + " ]"
    pad = _pad(indent)
    lines = [render_expr(i, indent + 2) for i in expr.items]
    return "[ " + f"\n{pad}, ".join(lines) + f"\n{pad}]"


def _render_record(expr: RecordExpr, indent: int) -> str:
    if not expr.fields:
        return "{}"
    pad = _pad(indent)
    parts: list[str] = []
    for f in expr.fields:
        if isinstance(f.value, RecordExpr) and f.value.fields:
            nested = indent + _INDENT
            parts.append(f"{f.name} =\n{_pad(nested)}{render_expr(f.value, nested)}")
        else:
            parts.append(f"{f.name} = {render_expr(f.value, indent + 2)}")
    return "{ " + f"\n{pad}, ".join(parts) + f"\n{pad}}}"


def _render_call(expr: Call, indent: int) -> str:
    if not expr.args:
        return expr.func
    inner = indent + _INDENT
    rendered = [
        f"({render_expr(a, inner)})" if _is_compound(a) else render_expr(a, inner)
        for a in expr.args
    ]
    if any("\n" in r for r in rendered):
        pad = _pad(inner)
        return expr.func + "".join(f"\n{pad}{r}" for r in rendered)
    return " ".join([expr.func, *rendered])


def _render_case(expr: Case, indent: int) -> str:
    head = f"case {expr.subject} of"
    if not expr.arms:
        return head
    arm_pad = _pad(indent + _INDENT)
    body_indent = indent + 2 * _INDENT
    arms = [
        f"{arm_pad}{arm.pattern} ->\n{_pad(body_indent)}{render_expr(arm.body, body_indent)}"
        for arm in expr.arms
    ]
    return head + "\n" + "\n\n".join(arms)


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


def _render_union(decl: UnionType) -> str:
    head = f"type {decl.name}"
    if not decl.constructors:
        return head
    pad = _pad(_INDENT)
    return head + f"\n{pad}= " + f"\n{pad}| ".join(decl.constructors)


def _render_alias(decl: TypeAlias) -> str:
    pad = _pad(_INDENT)
    fields = [f"{name} : {type_}" for name, type_ in decl.fields]
    if not fields:
        return f"type alias {decl.name} =\n{pad}{{}}"
    return (
        f"type alias {decl.name} =\n{pad}{{ "
        + f"\n{pad}, ".join(fields)
        + f"\n{pad}}}"
    )


def _render_declaration(decl: Declaration) -> str:
    lines: list[str] = []
    if decl.annotation is not None:
        lines.append(f"{decl.name} : {decl.annotation}")
    head = " ".join([decl.name, *decl.params])
    lines.append(f"{head} =\n{_pad(_INDENT)}{render_expr(decl.body, _INDENT)}")
    return "\n".join(lines)


def render_declaration(decl: TopLevel) -> str:
    match decl:
        case UnionType():
            return _render_union(decl)
        case TypeAlias():
            return _render_alias(decl)
        case Declaration():
            return _render_declaration(decl)
    msg = f"Cannot render {type(decl).__name__}"
    raise TypeError(msg)


def _render_import(imp: Import) -> str:
    text = f"import {imp.module}"
    if imp.alias:
        text += f" as {imp.alias}"
    if imp.exposing:
        text += f" exposing ({', '.join(imp.exposing)})"
    return text


def print_module(module: Module) -> str:
    """Render a whole module, ending with exactly one newline."""
    header = f"module {module.name} exposing ({', '.join(module.exposing)})"
    sections = [header]
    if module.imports:
        sections.append("\n".join(_render_import(i) for i in module.imports))
    text = "\n\n".join(sections)

    body = "\n\n\n".join(render_declaration(d) for d in module.declarations)
    if body:
        text += "\n\n\n" + body
    return text + "\n"
