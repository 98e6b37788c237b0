"""
Declaration model for generated source.

Generators describe their output with these objects and hand them to a
language renderer, which owns all spelling, quoting and layout.
"""

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Ref:
    """Reference to a declared identifier."""

    name: str


@dataclass(frozen=True)
class Literal:
    """String or integer literal."""

    value: Union[str, int]


@dataclass(frozen=True)
class Cast:
    """Type conversion of an expression, e.g. ``T(x)``."""

    type_name: str
    expr: "Expr"


@dataclass(frozen=True)
class ListExpr:
    """Typed list of expressions."""

    type_name: str
    items: Tuple["Expr", ...] = ()
    inline: bool = False


@dataclass(frozen=True)
class CompositeLit:
    """Struct-like value with named fields in declaration order."""

    type_name: str
    fields: Tuple[Tuple[str, "Expr"], ...] = ()
    inline: bool = False
    address_of: bool = False


Expr = Union[Ref, Literal, Cast, ListExpr, CompositeLit]


@dataclass(frozen=True)
class StructField:
    name: str
    type_name: str


@dataclass(frozen=True)
class StructDecl:
    """Struct-like type declaration."""

    name: str
    fields: Tuple[StructField, ...] = ()


@dataclass(frozen=True)
class VarDecl:
    """Value declaration bound to an expression."""

    name: str
    value: Expr


Declaration = Union[StructDecl, VarDecl]
