"""
Naming utilities for safe code generation.

Handles case conversion between word-delimited naming conventions and
keyword conflicts in the target language.
"""

import re
from typing import Set, Dict
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""
    SNAKE_CASE = "snake"      # font_size
    CAMEL_CASE = "camel"      # fontSize
    PASCAL_CASE = "pascal"    # FontSize
    KEBAB_CASE = "kebab"      # font-size
    SCREAMING_SNAKE = "screaming_snake"  # FONT_SIZE


# Rust raw identifier prefix (r#type)
RAW_IDENT_PREFIX = "r#"


class NameSanitizer:
    """Handles name sanitization and case conversion."""

    def __init__(self, reserved_words: Set[str] = None, escape_prefix: str = "",
                 conflict_suffix: str = "_"):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of target language reserved words
            escape_prefix: Prefix that makes a reserved word usable as an
                identifier (``@`` in C#); used instead of the suffix when set
            conflict_suffix: Suffix appended on reserved words or duplicates
        """
        self.reserved_words = reserved_words or set()
        self.escape_prefix = escape_prefix
        self.conflict_suffix = conflict_suffix
        self._name_cache: Dict[str, str] = {}
        self._used_names: Set[str] = set()

    def convert(self, name: str, target_case: NamingCase) -> str:
        """Convert a name to another case without conflict tracking."""
        cache_key = f"{name}_{target_case.value}"
        if cache_key not in self._name_cache:
            self._name_cache[cache_key] = convert_case(name, target_case)
        return self._name_cache[cache_key]

    def sanitize_name(self, name: str,
                      target_case: NamingCase = NamingCase.PASCAL_CASE) -> str:
        """
        Convert a name and make it safe and unique in the current scope.

        Args:
            name: Original name to sanitize
            target_case: Desired case style

        Returns:
            Sanitized name safe for use
        """
        converted = self.convert(name, target_case)
        final_name = self._resolve_conflicts(converted)
        self._used_names.add(final_name)
        return final_name

    def _resolve_conflicts(self, name: str) -> str:
        """Resolve naming conflicts with reserved words and existing names."""
        if name in self.reserved_words:
            if self.escape_prefix:
                name = f"{self.escape_prefix}{name}"
            else:
                name = f"{name}{self.conflict_suffix}"

        original_name = name
        counter = 1
        while name in self._used_names:
            name = f"{original_name}{counter}"
            counter += 1

        return name

    def reset_used_names(self):
        """Reset the tracking of used names (call once per scope)."""
        self._used_names.clear()


def clean_identifier(name: str) -> str:
    """Basic cleanup: drop raw prefixes and characters invalid in identifiers."""
    if name.startswith(RAW_IDENT_PREFIX):
        name = name[len(RAW_IDENT_PREFIX):]

    cleaned = re.sub(r'[^a-zA-Z0-9_-]', '_', name)
    cleaned = cleaned.strip('_-')

    if cleaned and cleaned[0].isdigit():
        cleaned = f"_{cleaned}"

    return cleaned or "field"


def to_snake_case(name: str) -> str:
    """Convert to snake_case."""
    name = clean_identifier(name).replace('-', '_')
    name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)
    name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
    name = re.sub(r'_+', '_', name.lower())
    return name.strip('_') or "field"


def to_camel_case(name: str) -> str:
    """Convert to camelCase: first word lower case, later words capitalized."""
    parts = [part for part in to_snake_case(name).split('_') if part]
    if not parts:
        return name
    return parts[0] + ''.join(part.capitalize() for part in parts[1:])


def to_pascal_case(name: str) -> str:
    """Convert to PascalCase."""
    parts = to_snake_case(name).split('_')
    result = ''.join(part.capitalize() for part in parts if part)
    if result and result[0].isdigit():
        result = f"_{result}"
    return result


def convert_case(name: str, target_case: NamingCase) -> str:
    """Convert name to target case style."""
    if target_case == NamingCase.SNAKE_CASE:
        return to_snake_case(name)
    elif target_case == NamingCase.CAMEL_CASE:
        return to_camel_case(name)
    elif target_case == NamingCase.PASCAL_CASE:
        return to_pascal_case(name)
    elif target_case == NamingCase.KEBAB_CASE:
        return to_snake_case(name).replace('_', '-')
    elif target_case == NamingCase.SCREAMING_SNAKE:
        return to_snake_case(name).upper()
    return name


def naming_case_from_serde(rename_all: str) -> NamingCase:
    """
    Map a ``#[serde(rename_all = "...")]`` value to a NamingCase.

    Unrecognised values fall back to camelCase.
    """
    return {
        "snake_case": NamingCase.SNAKE_CASE,
        "camelCase": NamingCase.CAMEL_CASE,
        "PascalCase": NamingCase.PASCAL_CASE,
        "kebab-case": NamingCase.KEBAB_CASE,
        "SCREAMING_SNAKE_CASE": NamingCase.SCREAMING_SNAKE,
    }.get(rename_all, NamingCase.CAMEL_CASE)


def apply_rename_all(name: str, rename_all: str) -> str:
    """Rename a Rust identifier the way serde's ``rename_all`` would."""
    if rename_all == "lowercase":
        return clean_identifier(name).lower()
    if rename_all == "UPPERCASE":
        return clean_identifier(name).upper()
    if rename_all == "SCREAMING-KEBAB-CASE":
        return convert_case(name, NamingCase.KEBAB_CASE).upper()
    return convert_case(name, naming_case_from_serde(rename_all))
