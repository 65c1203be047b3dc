"""
Style property extraction from the stylesheet macro.

This is a line scanner, not a parser: it finds the body of one macro
invocation and reads ``name: Type`` declarations out of it. Anything it cannot
read yields an empty list rather than an error.
"""

import re
from pathlib import Path
from typing import List, Optional, Union

from ..codegen.core.ir import StyleProperty
from ..logging_config import get_logger
from .parser import normalize_signature, parse_type_signature

logger = get_logger(__name__)

_OPENERS = {"(": ")", "{": "}", "[": "]"}
_CLOSERS = {")", "}", "]"}

COMMENT_MARKER = "//"
ATTRIBUTE_MARKER = "#"
# `pub`, `pub(crate)`, `pub(in path)`
_VISIBILITY_RE = re.compile(r"^pub(\s*\([^)]*\))?\s+")


class MacroStyleExtractor:
    """Extracts style properties from a ``define_style!(...)`` invocation."""

    def __init__(self, macro_token: str = "define_style!", conditional_keyword: str = "where"):
        self.macro_token = macro_token
        self.conditional_keyword = conditional_keyword

    def extract_file(self, path: Union[str, Path]) -> List[StyleProperty]:
        """Read a stylesheet file; unreadable files give an empty list."""
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Stylesheet %s not readable, no style properties: %s", path, e)
            return []
        properties = self.extract(content)
        logger.info("Extracted %d style properties from %s", len(properties), path)
        return properties

    def extract(self, content: str) -> List[StyleProperty]:
        """Extract style properties from stylesheet text."""
        body = self.find_macro_body(content)
        if body is None:
            return []

        properties = []
        for line in body.splitlines():
            prop = self.parse_line(line)
            if prop is not None:
                properties.append(prop)
        return properties

    def find_macro_body(self, content: str) -> Optional[str]:
        """
        Return the text between the macro's opening delimiter and its match.

        None when the token is missing or the delimiters never balance.
        """
        start = content.find(self.macro_token)
        if start < 0:
            logger.debug("Macro token %r not found", self.macro_token)
            return None

        index = start + len(self.macro_token)
        while index < len(content) and content[index] not in _OPENERS:
            index += 1
        if index >= len(content):
            return None

        body_start = index + 1
        depth = 0
        for position in range(index, len(content)):
            char = content[position]
            if char in _OPENERS:
                depth += 1
            elif char in _CLOSERS:
                depth -= 1
                if depth == 0:
                    return content[body_start:position]

        logger.warning("Unbalanced delimiters after %r; no style properties", self.macro_token)
        return None

    def parse_line(self, line: str) -> Optional[StyleProperty]:
        """Read one ``name: Type [where ...],`` line of the macro body."""
        stripped = line.strip()
        if not stripped:
            return None
        if stripped.startswith(COMMENT_MARKER) or stripped.startswith(ATTRIBUTE_MARKER):
            return None
        stripped = _VISIBILITY_RE.sub("", stripped)
        if ":" not in stripped:
            return None

        name, remainder = stripped.split(":", 1)
        name = name.strip()
        if not name.isidentifier() and not name.startswith("r#"):
            return None

        signature = normalize_signature(self._cut_signature(remainder))
        if not signature:
            return None

        return StyleProperty(
            name=name,
            raw_type=signature,
            type_expr=parse_type_signature(signature),
        )

    def _cut_signature(self, remainder: str) -> str:
        """Trim at the conditional keyword, else the last comma, else keep all."""
        if self.conditional_keyword:
            keyword = f" {self.conditional_keyword} "
            padded = f" {remainder} "
            position = padded.find(keyword)
            if position >= 0:
                return padded[:position]

        comma = remainder.rfind(",")
        if comma >= 0:
            return remainder[:comma]
        return remainder
