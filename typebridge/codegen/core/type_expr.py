"""
Structured type expressions for Rust type signatures.

Signatures are turned into a small closed tree once, while parsing, so that
type mapping recurses over typed nodes instead of slicing raw text.
"""

from dataclasses import dataclass
from typing import Union


# Rust primitive spellings recognised by the mappers
PRIMITIVE_NAMES = frozenset(
    {"f32", "f64", "i32", "i64", "u32", "u64", "bool", "String", "str"}
)


@dataclass(frozen=True)
class Primitive:
    """One of the fixed scalar types (``f32``, ``String``, ...)."""

    name: str


@dataclass(frozen=True)
class OptionalOf:
    """``Option<T>``."""

    inner: "TypeExpr"


@dataclass(frozen=True)
class ListOf:
    """``Vec<T>`` or ``Box<[T]>``; both spellings build the same node."""

    element: "TypeExpr"
    spelling: str = "Vec"


@dataclass(frozen=True)
class Named:
    """
    Any other path type.

    ``name`` is the last path segment without generic arguments, ``text`` is
    the full source spelling (``crate::Foo<'a>``).
    """

    name: str
    text: str = ""

    def __post_init__(self):
        if not self.text:
            object.__setattr__(self, "text", self.name)


TypeExpr = Union[Primitive, OptionalOf, ListOf, Named]


def strip_generics(type_name: str) -> str:
    """Return the part of a type name before its generic parameter list."""
    return type_name.split("<", 1)[0].strip()


def unwrap_optional(expr: TypeExpr) -> tuple[TypeExpr, bool]:
    """Peel every ``Option`` layer; returns (inner, was_optional)."""
    optional = False
    while isinstance(expr, OptionalOf):
        optional = True
        expr = expr.inner
    return expr, optional


def named_types(expr: TypeExpr) -> list[str]:
    """List every named (non-primitive) type referenced by an expression."""
    if isinstance(expr, OptionalOf):
        return named_types(expr.inner)
    if isinstance(expr, ListOf):
        return named_types(expr.element)
    if isinstance(expr, Named):
        return [expr.name]
    return []


def describe(expr: TypeExpr) -> str:
    """Render an expression back to a normalized Rust-like spelling."""
    if isinstance(expr, Primitive):
        return expr.name
    if isinstance(expr, OptionalOf):
        return f"Option<{describe(expr.inner)}>"
    if isinstance(expr, ListOf):
        if expr.spelling == "Box":
            return f"Box<[{describe(expr.element)}]>"
        return f"Vec<{describe(expr.element)}>"
    return expr.text
