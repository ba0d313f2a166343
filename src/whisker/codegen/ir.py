"""Elm intermediate representation — what to express, not how to print it.

The emitter builds a :class:`Module` out of these nodes; the printer in
:mod:`whisker.codegen.printer` owns all layout decisions.  Keeping the
module as data lets the emitter check that every lookup ``case`` covers
the route union before any text is produced.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from whisker._errors import GenerationError

# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Ref:
    """A bare name: variable, constructor, or qualified function."""

    name: str


@dataclass(frozen=True, slots=True)
class StringLit:
    """A string literal.  ``block=True`` renders a triple-quoted string."""

    value: str
    block: bool = False


@dataclass(frozen=True, slots=True)
class Raw:
    """Pre-formatted single-line expression text."""

    text: str


@dataclass(frozen=True, slots=True)
class ListExpr:
    """A list literal.  ``inline=True`` keeps it on one line."""

    items: tuple[Expr, ...]
    inline: bool = False


@dataclass(frozen=True, slots=True)
class Field:
    name: str
    value: Expr


@dataclass(frozen=True, slots=True)
class RecordExpr:
    fields: tuple[Field, ...]


@dataclass(frozen=True, slots=True)
class Call:
    """Function application; arguments are parenthesized when compound."""

    func: str
    args: tuple[Expr, ...]


@dataclass(frozen=True, slots=True)
class Infix:
    """Operands joined by a binary operator, e.g. ``s "a" </> s "b"``."""

    op: str
    operands: tuple[Expr, ...]


@dataclass(frozen=True, slots=True)
class CaseArm:
    pattern: str
    body: Expr


@dataclass(frozen=True, slots=True)
class Case:
    subject: str
    arms: tuple[CaseArm, ...]


type Expr = Ref | StringLit | Raw | ListExpr | RecordExpr | Call | Infix | Case


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class UnionType:
    """``type Name = A | B``.  May have no constructors."""

    name: str
    constructors: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class TypeAlias:
    """``type alias Name = { field : Type, ... }``."""

    name: str
    fields: tuple[tuple[str, str], ...]


@dataclass(frozen=True, slots=True)
class Declaration:
    """A top-level value or function, with an optional type annotation."""

    name: str
    body: Expr
    annotation: str | None = None
    params: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Import:
    module: str
    alias: str | None = None
    exposing: tuple[str, ...] = ()


type TopLevel = UnionType | TypeAlias | Declaration


@dataclass(frozen=True, slots=True)
class Module:
    name: str
    exposing: tuple[str, ...]
    imports: tuple[Import, ...] = ()
    declarations: tuple[TopLevel, ...] = field(default_factory=tuple)

    def exposed_names(self) -> set[str]:
        """Exposed names without ``(..)`` suffixes."""
        return {name.removesuffix("(..)") for name in self.exposing}


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------


def check_exhaustive(union: UnionType, case: Case) -> None:
    """Verify *case* has exactly one arm per constructor, in declaration order.

    Raises:
        GenerationError: On a missing, duplicated, extra, or reordered arm.

    """
    patterns = tuple(arm.pattern for arm in case.arms)
    if patterns == union.constructors:
        return

    expected = set(union.constructors)
    actual = set(patterns)
    missing = sorted(expected - actual)
    extra = sorted(actual - expected)
    duplicated = sorted({p for p in patterns if patterns.count(p) > 1})

    problems: list[str] = []
    if missing:
        problems.append(f"missing {', '.join(missing)}")
    if extra:
        problems.append(f"unknown {', '.join(extra)}")
    if duplicated:
        problems.append(f"duplicated {', '.join(duplicated)}")
    if not problems:
        problems.append("arms out of declaration order")

    msg = f"case over {case.subject} is not exhaustive for type {union.name}: " + "; ".join(
        problems
    )
    raise GenerationError(msg)
