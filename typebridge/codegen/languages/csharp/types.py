"""
C#-specific type system for code generation.

Maps Rust type expressions to C# type names plus nullability.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, FrozenSet, Optional

from ...core.type_expr import ListOf, Named, OptionalOf, Primitive, TypeExpr, describe


class MappingMode(Enum):
    """How nullability is decided."""

    FIELD = "field"  # nullable only where the source says Option<...>
    STYLE = "style"  # always nullable; absence means "inherit"


@dataclass(frozen=True)
class CSharpType:
    """
    Immutable representation of a C# type.

    ``name`` never carries the ``?`` marker; ``declaration`` adds it.
    """

    name: str
    nullable: bool = False
    is_value_type: bool = False
    is_list: bool = False
    is_opaque: bool = False
    is_abstract: bool = False
    validation_hints: tuple = field(default=())

    @property
    def declaration(self) -> str:
        """Type as written in a property declaration."""
        return f"{self.name}?" if self.nullable else self.name

    @property
    def default_value(self) -> Optional[str]:
        """Initializer for non-nullable reference types, None otherwise."""
        if self.nullable or self.is_value_type:
            return None
        if self.name == "string":
            return "string.Empty"
        if self.is_abstract:
            return "null!"
        return "new()"

    def as_nullable(self) -> "CSharpType":
        """Return a nullable version of this type (never double-wrapped)."""
        if self.nullable:
            return self
        return replace(self, nullable=True)


# Rust primitive -> (C# name, is value type)
PRIMITIVE_TYPES: Dict[str, tuple] = {
    "f32": ("float", True),
    "f64": ("double", True),
    "i32": ("int", True),
    "i64": ("long", True),
    "u32": ("uint", True),
    "u64": ("ulong", True),
    "bool": ("bool", True),
    "String": ("string", False),
    "str": ("string", False),
}


@dataclass
class CSharpTypeConfig:
    """Configuration for C# type mapping behavior."""

    # Named types that already exist in the generated model
    known_types: FrozenSet[str] = frozenset({"Style", "TailwindValues"})

    # Fallback for shapes that cannot be represented precisely
    opaque_type: str = "JsonElement"

    # Rust union type name -> C# abstract base name
    union_bases: Dict[str, str] = field(default_factory=dict)

    # Known value types among known_types (emitted without initializer)
    value_types: FrozenSet[str] = frozenset({"TailwindValues"})


class CSharpTypeMapper:
    """
    Maps type expressions to C# types.

    Rules, in priority order: Option<T> marks nullable and collapses nested
    options; Vec<T> and Box<[T]> become List<T>; primitives use a fixed table;
    named types on the allow-list (or known unions) pass through; everything
    else becomes the opaque JSON element type.
    """

    def __init__(self, config: Optional[CSharpTypeConfig] = None):
        """Initialize with type configuration."""
        self.config = config or CSharpTypeConfig()

    def map_type(self, expr: TypeExpr, mode: MappingMode = MappingMode.FIELD) -> CSharpType:
        """
        Map a type expression to a C# type.

        Args:
            expr: Parsed type expression
            mode: FIELD keeps non-optional strings and lists non-nullable;
                STYLE makes every result nullable
        """
        result = self._map(expr)
        if mode == MappingMode.STYLE:
            result = result.as_nullable()
        return result

    def _map(self, expr: TypeExpr) -> CSharpType:
        if isinstance(expr, OptionalOf):
            return self._map(expr.inner).as_nullable()

        if isinstance(expr, ListOf):
            element = self._map(expr.element)
            return CSharpType(
                name=f"List<{element.declaration}>",
                is_list=True,
                validation_hints=element.validation_hints,
            )

        if isinstance(expr, Primitive):
            return self._map_primitive(expr)

        if isinstance(expr, Named):
            return self._map_named(expr)

        return self._get_fallback_type(repr(expr))

    def _map_primitive(self, expr: Primitive) -> CSharpType:
        if expr.name not in PRIMITIVE_TYPES:
            return self._get_fallback_type(expr.name)
        name, is_value_type = PRIMITIVE_TYPES[expr.name]
        # Scalar value types are always nullable so unset values are omitted
        return CSharpType(name=name, nullable=is_value_type, is_value_type=is_value_type)

    def _map_named(self, expr: Named) -> CSharpType:
        if expr.name in self.config.union_bases:
            return CSharpType(name=self.config.union_bases[expr.name], is_abstract=True)
        if expr.name in self.config.known_types:
            is_value_type = expr.name in self.config.value_types
            return CSharpType(
                name=expr.name, nullable=is_value_type, is_value_type=is_value_type
            )
        return self._get_fallback_type(describe(expr))

    def _get_fallback_type(self, source_type: str) -> CSharpType:
        """Opaque type for unknown shapes; never fails generation."""
        return CSharpType(
            name=self.config.opaque_type,
            nullable=True,
            is_value_type=True,
            is_opaque=True,
            validation_hints=(
                f"Unrecognized type '{source_type}', using {self.config.opaque_type}",
            ),
        )
