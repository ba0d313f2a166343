"""Code emitter — turn route trees into the generated Elm routing module.

Builds a :class:`~whisker.codegen.ir.Module` from :class:`~whisker.tree.TreeData`
and prints it.  Two skeletons share one exposed surface:

- ``public``: wired to ``Browser.Navigation`` for the real application.
- ``internal``: same names, side-effect-free stub bodies, no browser
  runtime import, so the consuming application can be compiled and run
  headless against it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from whisker.codegen.ir import (
    Call,
    Case,
    CaseArm,
    Declaration,
    Field,
    Import,
    Infix,
    ListExpr,
    Module,
    RecordExpr,
    Ref,
    StringLit,
    TopLevel,
    TypeAlias,
    UnionType,
    check_exhaustive,
)
from whisker.codegen.printer import print_module
from whisker.tree import RESERVED_KEY, Branch, Leaf

if TYPE_CHECKING:
    from whisker._types import RouteId, Target
    from whisker.tree import TreeData, UrlFragment

DEFAULT_MODULE = "Pages.My"

EXPOSING: tuple[str, ...] = (
    "Route(..)",
    "Page",
    "all",
    "pages",
    "parser",
    "routeToString",
    "urlToRoute",
    "page",
    "urlToPage",
    "toMetadata",
    "toExtension",
    "toSourcePath",
    "navigate",
    "assets",
)

_URL_IMPORTS: tuple[Import, ...] = (
    Import("Url", exposing=("Url",)),
    Import("Url.Builder"),
    Import("Url.Parser", alias="Parser", exposing=("(</>)", "Parser", "s")),
)

_PAGE_ALIAS = TypeAlias(
    name="Page",
    fields=(
        ("route", "Route"),
        ("metadata", "String"),
        ("extension", "String"),
        ("source", "String"),
    ),
)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def _record(branch: Branch, *, as_type: bool) -> RecordExpr:
    """Render a tree level; every level gets a trailing ``all`` field."""
    fields: list[Field] = []
    for key, node in branch.children.items():
        if isinstance(node, Leaf):
            value = Ref(node.value) if as_type else StringLit(node.value)
            fields.append(Field(key, value))
        else:
            fields.append(Field(key, _record(node, as_type=as_type)))

    leaves = tuple(Ref(v) if as_type else StringLit(v) for v in branch.leaves())
    fields.append(Field(RESERVED_KEY, ListExpr(leaves, inline=True)))
    return RecordExpr(tuple(fields))


def _url_parser(fragment: UrlFragment) -> Call:
    segments = tuple(Call("s", (StringLit(seg),)) for seg in fragment.segments)
    return Call("Parser.map", (Ref(fragment.route_id), Infix("</>", segments)))


def _url_builder(fragment: UrlFragment) -> Call:
    segments = tuple(StringLit(seg) for seg in fragment.segments)
    return Call(
        "Url.Builder.absolute",
        (ListExpr(segments, inline=True), ListExpr(())),
    )


def _lookup(
    name: str,
    pairs: list[tuple[RouteId, str]],
    union: UnionType,
    *,
    block: bool = False,
) -> Declaration:
    """A ``Route -> String`` case dispatch, checked against the union."""
    case = Case(
        "route",
        tuple(CaseArm(route_id, StringLit(value, block=block)) for route_id, value in pairs),
    )
    check_exhaustive(union, case)
    return Declaration(name, case, annotation="Route -> String", params=("route",))


def _navigate(target: Target) -> Declaration:
    if target == "internal":
        return Declaration(
            "navigate",
            Ref("Cmd.none"),
            annotation="key -> Route -> Cmd msg",
            params=("_", "_"),
        )
    return Declaration(
        "navigate",
        Call("Navigation.pushUrl", (Ref("key"), Call("routeToString", (Ref("route"),)))),
        annotation="Navigation.Key -> Route -> Cmd msg",
        params=("key", "route"),
    )


def _imports(target: Target) -> tuple[Import, ...]:
    if target == "internal":
        return _URL_IMPORTS
    return (Import("Browser.Navigation", alias="Navigation"), *_URL_IMPORTS)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_module(
    tree: TreeData,
    *,
    target: Target = "public",
    module_name: str = DEFAULT_MODULE,
) -> Module:
    """Assemble the module IR for *tree*.

    Raises:
        GenerationError: If a lookup would not cover every route.

    """
    union = UnionType("Route", tuple(tree.route_ids))

    to_string = Case(
        "route",
        tuple(CaseArm(f.route_id, _url_builder(f)) for f in tree.url_fragments),
    )
    check_exhaustive(union, to_string)

    declarations: list[TopLevel] = [
        union,
        _PAGE_ALIAS,
        Declaration(
            "all",
            ListExpr(tuple(Ref(r) for r in tree.route_ids)),
            annotation="List Route",
        ),
        Declaration("pages", _record(tree.routes, as_type=True)),
        Declaration(
            "parser",
            Call(
                "Parser.oneOf",
                (ListExpr(tuple(_url_parser(f) for f in tree.url_fragments)),),
            ),
            annotation="Parser (Route -> a) a",
        ),
        Declaration(
            "routeToString", to_string, annotation="Route -> String", params=("route",)
        ),
        Declaration(
            "urlToRoute",
            Call("Parser.parse", (Ref("parser"), Ref("url"))),
            annotation="Url -> Maybe Route",
            params=("url",),
        ),
        Declaration(
            "page",
            RecordExpr((
                Field("route", Ref("route")),
                Field("metadata", Call("toMetadata", (Ref("route"),))),
                Field("extension", Call("toExtension", (Ref("route"),))),
                Field("source", Call("toSourcePath", (Ref("route"),))),
            )),
            annotation="Route -> Page",
            params=("route",),
        ),
        Declaration(
            "urlToPage",
            Call("Maybe.map", (Ref("page"), Call("urlToRoute", (Ref("url"),)))),
            annotation="Url -> Maybe Page",
            params=("url",),
        ),
        _lookup("toMetadata", tree.metadata_pairs, union, block=True),
        _lookup("toExtension", tree.extension_pairs, union),
        _lookup("toSourcePath", tree.source_pairs, union),
        _navigate(target),
        Declaration("assets", _record(tree.assets, as_type=False)),
    ]

    return Module(
        name=module_name,
        exposing=EXPOSING,
        imports=_imports(target),
        declarations=tuple(declarations),
    )


def emit(
    tree: TreeData,
    *,
    target: Target = "public",
    module_name: str = DEFAULT_MODULE,
) -> str:
    """Render the generated routing module for *tree* as Elm source text."""
    return print_module(build_module(tree, target=target, module_name=module_name))
