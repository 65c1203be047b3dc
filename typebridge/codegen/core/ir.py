"""
Intermediate representation shared by the source readers and generators.

Entries are created once while scanning sources, then frozen and handed to a
generator which only reads them.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from .type_expr import TypeExpr, strip_generics


@dataclass
class FieldDef:
    """A named field of a record declaration."""

    name: str
    raw_type: str
    type_expr: TypeExpr
    rename: Optional[str] = None  # from #[serde(rename = "...")]


@dataclass
class StructDef:
    """A record ("node") declaration."""

    name: str
    fields: List[FieldDef] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)
    source_file: Optional[str] = None

    # Name of the union that lists this struct as a variant; set after scanning
    family: Optional[str] = None


@dataclass
class EnumVariant:
    """One variant of a tagged union."""

    name: str
    # Only set for variants with exactly one unnamed positional field
    inner_type: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def inner_type_name(self) -> Optional[str]:
        """Inner type without generic parameters (``Foo<'a>`` -> ``Foo``)."""
        if self.inner_type is None:
            return None
        return strip_generics(self.inner_type).split("::")[-1]

    def implementing_type(self, fallback_suffix: str) -> str:
        """Concrete type behind this variant, named from the variant if needed."""
        return self.inner_type_name or f"{self.name}{fallback_suffix}"


@dataclass
class EnumDef:
    """A tagged-union discriminant declaration."""

    name: str
    variants: List[EnumVariant] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)
    source_file: Optional[str] = None


@dataclass
class StyleProperty:
    """A presentation property; always emitted as nullable."""

    name: str
    raw_type: str
    type_expr: TypeExpr


@dataclass
class SourceModel:
    """Everything read from the sources for one generation run."""

    structs: Mapping[str, StructDef] = field(default_factory=dict)
    enums: Mapping[str, EnumDef] = field(default_factory=dict)
    styles: List[StyleProperty] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)
    frozen: bool = False

    def add_struct(self, struct: StructDef):
        """Register a struct; a later definition with the same name wins."""
        self._ensure_mutable()
        self.structs[struct.name] = struct

    def add_enum(self, enum: EnumDef):
        """Register an enum; a later definition with the same name wins."""
        self._ensure_mutable()
        self.enums[enum.name] = enum

    def merge(self, other: "SourceModel"):
        """Fold the declarations of one parsed file into this model."""
        for struct in other.structs.values():
            self.add_struct(struct)
        for enum in other.enums.values():
            self.add_enum(enum)

    def resolve_families(self, node_suffix: str = "Node", unions: Optional[Iterable[str]] = None):
        """
        Record on each struct the union that lists it as a variant type.

        Args:
            node_suffix: Suffix that names the type behind a variant without one
            unions: Enums allowed to own structs; all enums when omitted. The
                first one in name order wins.
        """
        # Derived data only; allowed on a frozen model
        for struct in self.structs.values():
            struct.family = None
        candidates = self.enums if unions is None else set(unions) & set(self.enums)
        for enum_name in sorted(candidates):
            for variant in self.enums[enum_name].variants:
                struct = self.structs.get(variant.implementing_type(node_suffix))
                if struct is not None and struct.family is None:
                    struct.family = enum_name

    def freeze(self) -> "SourceModel":
        """Make the struct and enum tables read-only for emission."""
        if not self.frozen:
            self.structs = MappingProxyType(dict(self.structs))
            self.enums = MappingProxyType(dict(self.enums))
            self.styles = list(self.styles)
            self.frozen = True
        return self

    def _ensure_mutable(self):
        if self.frozen:
            raise RuntimeError("SourceModel is frozen; emission has started")
