"""
typebridge code generation module.

Turns the intermediate representation read from Rust sources into target
language source text.
"""

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    is_language_supported,
    list_supported_languages,
)
from .core.generator import CodeGenerator, GeneratorError, GenerationResult, generate_code
from .core.ir import SourceModel
from .core.config import GeneratorConfig, ConfigError, load_config

__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "SourceModel",
    "GeneratorConfig",
    "ConfigError",
    "generate_code",
    "get_generator",
    "get_language_info",
    "is_language_supported",
    "list_supported_languages",
    "load_config",
]
