"""
Selection of the declarations that take part in generation.

A declaration qualifies through an explicit manifest entry, a marker
attribute on the item, or (when enabled) the naming suffix convention.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Set

from ..codegen.core.config import GeneratorConfig


class DeclarationKind(Enum):
    """Role a selected declaration plays in the output."""

    NODE = "node"
    UNION = "union"


@dataclass
class TypeRegistry:
    """Decides which structs are nodes and which enums are unions."""

    node_suffix: str = "Node"
    union_suffix: str = "Kind"
    use_suffix_convention: bool = True
    node_types: Set[str] = field(default_factory=set)
    union_types: Set[str] = field(default_factory=set)
    exclude_types: Set[str] = field(default_factory=set)
    marker_attribute: Optional[str] = "typebridge"

    @classmethod
    def from_config(cls, config: GeneratorConfig) -> "TypeRegistry":
        return cls(
            node_suffix=config.node_suffix,
            union_suffix=config.union_suffix,
            use_suffix_convention=config.use_suffix_convention,
            node_types=set(config.node_types),
            union_types=set(config.union_types),
            exclude_types=set(config.exclude_types),
            marker_attribute=config.marker_attribute or None,
        )

    def qualifies(
        self, name: str, kind: DeclarationKind, markers: Iterable[str] = ()
    ) -> bool:
        """
        Check whether a declaration takes part in generation.

        Args:
            name: Declared type name
            kind: NODE for structs, UNION for enums
            markers: Arguments of the item's marker attributes, e.g. ``node``
                for ``#[typebridge(node)]``
        """
        if name in self.exclude_types:
            return False

        listed = self.node_types if kind == DeclarationKind.NODE else self.union_types
        if name in listed:
            return True

        if self.marker_attribute and kind.value in set(markers):
            return True

        if self.use_suffix_convention:
            suffix = self.suffix_for(kind)
            return bool(suffix) and name.endswith(suffix) and len(name) > len(suffix)

        return False

    def suffix_for(self, kind: DeclarationKind) -> str:
        return self.node_suffix if kind == DeclarationKind.NODE else self.union_suffix

    def base_name(self, union_name: str) -> str:
        """
        Name of the abstract base emitted for a union.

        The union suffix is stripped (an empty result means the union is
        skipped); unions selected through the manifest or a marker that do not
        carry the suffix keep their full name.
        """
        if self.union_suffix and union_name.endswith(self.union_suffix):
            return union_name[: -len(self.union_suffix)]
        return union_name
