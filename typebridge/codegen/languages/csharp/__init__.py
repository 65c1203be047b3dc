"""
C# code generator module.

Generates System.Text.Json model classes from parsed Rust declarations.
"""

from .generator import CSharpGenerator
from .naming import create_csharp_sanitizer
from .types import CSharpType, CSharpTypeConfig, CSharpTypeMapper, MappingMode

__all__ = [
    "CSharpGenerator",
    "CSharpType",
    "CSharpTypeConfig",
    "CSharpTypeMapper",
    "MappingMode",
    "create_csharp_sanitizer",
]
