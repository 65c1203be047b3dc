"""
C#-specific naming utilities and sanitization.

Handles C# keywords and the member naming rules of generated classes.
"""

from ...core.naming import NameSanitizer, NamingCase


# C# reserved keywords (contextual keywords are valid identifiers)
CSHARP_RESERVED_WORDS = {
    "abstract", "as", "base", "bool", "break", "byte", "case", "catch",
    "char", "checked", "class", "const", "continue", "decimal", "default",
    "delegate", "do", "double", "else", "enum", "event", "explicit",
    "extern", "false", "finally", "fixed", "float", "for", "foreach",
    "goto", "if", "implicit", "in", "int", "interface", "internal", "is",
    "lock", "long", "namespace", "new", "null", "object", "operator", "out",
    "override", "params", "private", "protected", "public", "readonly",
    "ref", "return", "sbyte", "sealed", "short", "sizeof", "stackalloc",
    "static", "string", "struct", "switch", "this", "throw", "true", "try",
    "typeof", "uint", "ulong", "unchecked", "unsafe", "ushort", "using",
    "virtual", "void", "volatile", "while",
}


def create_csharp_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for C# (keywords escaped with @)."""
    return NameSanitizer(CSHARP_RESERVED_WORDS, escape_prefix="@")


def property_name(sanitizer: NameSanitizer, field_name: str, class_name: str) -> str:
    """
    PascalCase property name that is unique within its class.

    A member may not share its enclosing type's name in C#, so such
    properties get a ``Value`` suffix.
    """
    name = sanitizer.convert(field_name, NamingCase.PASCAL_CASE)
    if name == class_name:
        name = f"{name}Value"
    return sanitizer.sanitize_name(name, NamingCase.PASCAL_CASE)


def validate_csharp_namespace(namespace: str) -> list[str]:
    """
    Validate a dotted C# namespace.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not namespace:
        errors.append("Namespace cannot be empty")
        return errors

    for part in namespace.split("."):
        if not part.isidentifier():
            errors.append(f"'{part}' is not a valid C# identifier")
        elif part in CSHARP_RESERVED_WORDS:
            errors.append(f"'{part}' is a C# reserved word")

    return errors
