"""
C# code generator implementation.

Emits System.Text.Json model classes from the IR: polymorphic bases for
tagged unions, concrete record classes, the style class and the scalar
wrapper type with its converter.
"""

from typing import Dict, List, Optional, Any
from pathlib import Path

from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator
from ...core.ir import EnumDef, EnumVariant, FieldDef, SourceModel, StructDef
from ...core.naming import NamingCase, apply_rename_all, naming_case_from_serde
from ...core.type_expr import named_types, unwrap_optional, ListOf
from ....logging_config import get_logger
from ....source.selection import TypeRegistry
from .naming import create_csharp_sanitizer, property_name, validate_csharp_namespace
from .types import CSharpType, CSharpTypeConfig, CSharpTypeMapper, MappingMode

logger = get_logger(__name__)

USINGS = [
    "System",
    "System.Collections.Generic",
    "System.Text.Json",
    "System.Text.Json.Serialization",
]


class CSharpGenerator(CodeGenerator):
    """Code generator for C# classes with System.Text.Json attributes."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize C# generator with configuration."""
        super().__init__(config)

        self.sanitizer = create_csharp_sanitizer()
        self.registry = TypeRegistry.from_config(self.config)

        custom = self.config.custom
        self.discriminator_property = custom.get("discriminator_property", "type")
        self.file_scoped_namespace = custom.get("file_scoped_namespace", True)
        self.opaque_type = custom.get("opaque_type", "JsonElement")

        self.type_mapper = CSharpTypeMapper(self._build_type_config({}))

    def get_template_directory(self) -> Optional[Path]:
        """Return the C# templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    def _build_type_config(self, union_bases: Dict[str, str]) -> CSharpTypeConfig:
        """Build CSharpTypeConfig from generator config."""
        wrapper = self.config.wrapper_type_name
        return CSharpTypeConfig(
            known_types=frozenset(self.config.known_types) | {wrapper},
            opaque_type=self.opaque_type,
            union_bases=dict(union_bases),
            value_types=frozenset({wrapper}),
        )

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "csharp"

    @property
    def file_extension(self) -> str:
        """Return C# file extension."""
        return ".cs"

    def generate(self, model: SourceModel) -> str:
        """Generate the complete C# file for a source model."""
        self.emission_warnings = []
        union_bases = self._union_bases(model)
        self.type_mapper = CSharpTypeMapper(self._build_type_config(union_bases))

        sections = []
        for enum_name in sorted(model.enums):
            section = self._render_union(model.enums[enum_name], union_bases, model)
            if section:
                sections.append(section)

        for struct_name in sorted(model.structs):
            sections.append(
                self._render_struct(model.structs[struct_name], union_bases)
            )

        sections.append(self._render_style_class(model))
        sections.append(self._render_scalar_wrapper())

        context = {
            "usings": USINGS,
            "namespace": self.config.namespace,
            "file_scoped_namespace": self.file_scoped_namespace,
            "indent": self.config.indent_size,
            "sections": [section.strip("\n") for section in sections],
        }
        return self.render_template("file.cs.j2", context)

    def _union_bases(self, model: SourceModel) -> Dict[str, str]:
        """Map each emitted union's Rust name to its abstract base name."""
        bases = {}
        for enum_name in sorted(model.enums):
            base_name = self.registry.base_name(enum_name)
            if base_name:
                bases[enum_name] = base_name
            else:
                logger.debug("Union %s has an empty base name; skipped", enum_name)
        return bases

    def family_unions(self, model: SourceModel) -> List[str]:
        """Only unions with a non-empty base can be a struct's supertype."""
        return sorted(self._union_bases(model))

    # Unions

    def _render_union(
        self, enum: EnumDef, union_bases: Dict[str, str], model: SourceModel
    ) -> Optional[str]:
        base_name = union_bases.get(enum.name)
        if not base_name:
            return None

        variants = []
        for variant in enum.variants:
            type_name = variant.implementing_type(self.config.node_suffix)
            if type_name not in model.structs:
                self.emission_warnings.append(
                    f"{enum.name}::{variant.name} refers to {type_name}, "
                    f"which was not found among the parsed structs"
                )
            variants.append(
                {
                    "type_name": type_name,
                    "discriminator": self._discriminator_value(enum, variant),
                }
            )

        context = {
            "summary": (
                f"Polymorphic base for the variants of the Rust enum <c>{enum.name}</c>."
                if self.config.add_comments
                else None
            ),
            "discriminator": enum.attributes.get("tag", self.discriminator_property),
            "variants": variants,
            "base_name": base_name,
        }
        return self.render_template("union_base.cs.j2", context)

    @staticmethod
    def _discriminator_value(enum: EnumDef, variant: EnumVariant) -> str:
        """Variant rename, else the enum's rename_all, else the lower-cased name."""
        if "rename" in variant.attributes:
            return variant.attributes["rename"]
        if "rename_all" in enum.attributes:
            return apply_rename_all(variant.name, enum.attributes["rename_all"])
        return variant.name.lower()

    # Records

    def _render_struct(self, struct: StructDef, union_bases: Dict[str, str]) -> str:
        self.sanitizer.reset_used_names()
        json_case = naming_case_from_serde(struct.attributes.get("rename_all", "camelCase"))

        fields = []
        for field in struct.fields:
            cs_type = self._map_field_type(struct, field, union_bases)
            fields.append(
                self._generate_field_data(
                    struct.name,
                    field.name,
                    cs_type,
                    field.rename or self.sanitizer.convert(field.name, json_case),
                )
            )

        family = struct.family
        context = {
            "summary": None,
            "class_name": struct.name,
            "base_name": union_bases.get(family) if family else None,
            "fields": fields,
        }
        return self.render_template("record_class.cs.j2", context)

    def _map_field_type(
        self, struct: StructDef, field: FieldDef, union_bases: Dict[str, str]
    ) -> CSharpType:
        """Map a field, resolving child-node collections to the right family."""
        cs_type = self.type_mapper.map_type(field.type_expr)

        if not self._is_child_collection(field):
            self._collect_hints(struct.name, field.name, cs_type)
            return cs_type

        if any(name in union_bases for name in named_types(field.type_expr)):
            return cs_type

        inner, optional = unwrap_optional(field.type_expr)
        family = struct.family
        family_base = union_bases.get(family) if family else None
        if family_base is None or not isinstance(inner, ListOf):
            self.emission_warnings.append(
                f"{struct.name}.{field.name}: child collection '{field.raw_type}' has no "
                f"union family to resolve against, using {cs_type.declaration}"
            )
            return cs_type

        resolved = CSharpType(name=f"List<{family_base}>", is_list=True)
        return resolved.as_nullable() if optional else resolved

    def _is_child_collection(self, field: FieldDef) -> bool:
        markers = self.config.child_markers
        return bool(markers) and all(marker in field.raw_type for marker in markers)

    def _collect_hints(self, owner: str, field_name: str, cs_type: CSharpType):
        for hint in cs_type.validation_hints:
            self.emission_warnings.append(f"{owner}.{field_name}: {hint}")

    def _generate_field_data(
        self, class_name: str, field_name: str, cs_type: CSharpType, json_name: str
    ) -> Dict[str, Any]:
        """Generate field data for the record template."""
        return {
            "name": property_name(self.sanitizer, field_name, class_name),
            "json_name": json_name,
            "type": cs_type.declaration,
            "default": cs_type.default_value,
        }

    # Style class and boilerplate

    def _render_style_class(self, model: SourceModel) -> str:
        self.sanitizer.reset_used_names()
        class_name = self.config.style_class_name

        fields = []
        for prop in model.styles:
            cs_type = self.type_mapper.map_type(prop.type_expr, MappingMode.STYLE)
            self._collect_hints(class_name, prop.name, cs_type)
            fields.append(
                self._generate_field_data(
                    class_name,
                    prop.name,
                    cs_type,
                    self.sanitizer.convert(prop.name, NamingCase.CAMEL_CASE),
                )
            )

        context = {
            "summary": (
                "Presentation properties; unset values inherit." if self.config.add_comments else None
            ),
            "class_name": class_name,
            "base_name": None,
            "fields": fields,
        }
        return self.render_template("record_class.cs.j2", context)

    def _render_scalar_wrapper(self) -> str:
        type_name = self.config.wrapper_type_name
        return self.render_template(
            "scalar_wrapper.cs.j2",
            {"type_name": type_name, "converter_name": f"{type_name}Converter"},
        )

    def validate_model(self, model: SourceModel) -> List[str]:
        """Validate the IR for C# generation."""
        warnings = super().validate_model(model)

        for error in validate_csharp_namespace(self.config.namespace):
            warnings.append(f"Invalid namespace {self.config.namespace}: {error}")

        reserved = {self.config.style_class_name, self.config.wrapper_type_name}
        for name in sorted(model.structs):
            if name in reserved:
                warnings.append(f"Struct {name} collides with a generated class name")

        bases = self._union_bases(model)
        for name, base in sorted(bases.items()):
            if base in model.structs:
                warnings.append(f"Union base {base} (from {name}) collides with a struct name")

        return warnings
