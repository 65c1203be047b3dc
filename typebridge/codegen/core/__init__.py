"""
Core code generation components.

Provides the IR, type expressions, base generator and shared utilities used
by all target generators.
"""

from .generator import (
    CodeGenerator,
    GeneratorError,
    GenerationResult,
    generate_code,
    write_output,
)
from .ir import EnumDef, EnumVariant, FieldDef, SourceModel, StructDef, StyleProperty
from .type_expr import ListOf, Named, OptionalOf, Primitive, TypeExpr
from .naming import NameSanitizer, NamingCase, convert_case
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config, load_manifest
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    "write_output",
    # Intermediate representation
    "EnumDef",
    "EnumVariant",
    "FieldDef",
    "SourceModel",
    "StructDef",
    "StyleProperty",
    # Type expressions
    "ListOf",
    "Named",
    "OptionalOf",
    "Primitive",
    "TypeExpr",
    # Naming utilities
    "NameSanitizer",
    "NamingCase",
    "convert_case",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    "load_manifest",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
