"""
typebridge - generate C# serialization models from Rust declarations.
"""

__version__ = "0.1.0"

from .codegen.core.config import GeneratorConfig, load_config
from .codegen.core.generator import GenerationResult, GeneratorError
from .pipeline import build_source_model, generate_bindings

__all__ = [
    "GeneratorConfig",
    "GenerationResult",
    "GeneratorError",
    "build_source_model",
    "generate_bindings",
    "load_config",
]
