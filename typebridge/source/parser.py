"""
Rust declaration parser built on tree-sitter.

Reads one source file, keeps the struct and enum declarations selected by a
TypeRegistry and turns them into IR entries. Type signatures are converted to
type expressions straight from the syntax tree.
"""

import re
from typing import Dict, Iterator, List, Optional, Tuple, Union

import tree_sitter_rust
from tree_sitter import Language, Node, Parser

from ..codegen.core.generator import GeneratorError
from ..codegen.core.ir import EnumDef, EnumVariant, FieldDef, SourceModel, StructDef
from ..codegen.core.type_expr import (
    PRIMITIVE_NAMES,
    ListOf,
    Named,
    OptionalOf,
    Primitive,
    TypeExpr,
    strip_generics,
)
from ..logging_config import get_logger
from .selection import DeclarationKind, TypeRegistry

logger = get_logger(__name__)

RUST_LANGUAGE = Language(tree_sitter_rust.language())

# Attributes whose key/value arguments are kept on the IR
CAPTURED_ATTRIBUTES = {"serde"}

_KEY_VALUE_RE = re.compile(r'(\w+)\s*=\s*"((?:[^"\\]|\\.)*)"')
_FLAG_RE = re.compile(r"\b([A-Za-z_]\w*)\b")

# Wrapper used to parse a bare type signature with the full grammar
_SIGNATURE_ALIAS = "__TypebridgeSignature"


class SourceParseError(GeneratorError):
    """Raised when a source file cannot be parsed."""

    def __init__(self, source_name: str, message: str):
        super().__init__(f"{source_name}: {message}")
        self.source_name = source_name


_parser: Optional[Parser] = None


def get_parser() -> Parser:
    """Shared tree-sitter parser for the Rust grammar."""
    global _parser
    if _parser is None:
        _parser = Parser(RUST_LANGUAGE)
    return _parser


def node_text(node: Node) -> str:
    return node.text.decode("utf-8")


def normalize_signature(text: str) -> str:
    """Collapse whitespace inside a type signature."""
    return " ".join(text.split())


def _first_error(node: Node) -> Optional[Node]:
    """Depth-first search for the first ERROR or MISSING node."""
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def parse_attribute(attr_item: Node) -> Tuple[str, Dict[str, str], List[str]]:
    """
    Split an ``attribute_item`` into (path, key/value arguments, bare flags).

    ``#[serde(tag = "type", untagged)]`` gives
    ``("serde", {"tag": "type"}, ["untagged"])``.
    """
    attribute = next((c for c in attr_item.named_children if c.type == "attribute"), None)
    if attribute is None or not attribute.named_children:
        return "", {}, []

    path = node_text(attribute.named_children[0])
    arguments = attribute.child_by_field_name("arguments")
    if arguments is None:
        return path, {}, []

    text = node_text(arguments)
    values = {key: value for key, value in _KEY_VALUE_RE.findall(text)}
    remainder = _KEY_VALUE_RE.sub("", text)
    flags = _FLAG_RE.findall(remainder)
    return path, values, flags


def build_type_expr(node: Node) -> TypeExpr:
    """Convert a tree-sitter type node into a type expression."""
    kind = node.type

    if kind == "primitive_type":
        return Primitive(node_text(node))

    if kind == "type_identifier":
        name = node_text(node)
        if name in PRIMITIVE_NAMES:
            return Primitive(name)
        return Named(name)

    if kind == "scoped_type_identifier":
        name_node = node.child_by_field_name("name")
        name = node_text(name_node) if name_node else node_text(node)
        if name in PRIMITIVE_NAMES:
            return Primitive(name)
        return Named(name, normalize_signature(node_text(node)))

    if kind == "reference_type":
        inner = node.child_by_field_name("type")
        if inner is not None:
            return build_type_expr(inner)

    if kind == "generic_type":
        return _build_generic(node)

    # Tuples, arrays, function pointers, ...: opaque to the mappers
    return Named(normalize_signature(node_text(node)))


def _type_arguments(node: Node) -> List[Node]:
    arguments = node.child_by_field_name("type_arguments")
    if arguments is None:
        return []
    return [
        child
        for child in arguments.named_children
        if child.type not in ("lifetime", "line_comment", "block_comment")
    ]


def _build_generic(node: Node) -> TypeExpr:
    text = normalize_signature(node_text(node))
    base = node.child_by_field_name("type")
    if base is not None and base.type == "scoped_type_identifier":
        base = base.child_by_field_name("name") or base
    base_name = node_text(base) if base is not None else strip_generics(text)
    arguments = _type_arguments(node)

    if len(arguments) == 1:
        argument = arguments[0]
        if base_name == "Option":
            return OptionalOf(build_type_expr(argument))
        if base_name == "Vec":
            return ListOf(build_type_expr(argument), spelling="Vec")
        if (
            base_name == "Box"
            and argument.type == "array_type"
            and argument.child_by_field_name("length") is None
        ):
            element = argument.child_by_field_name("element")
            if element is not None:
                return ListOf(build_type_expr(element), spelling="Box")

    return Named(base_name, text)


def parse_type_signature(signature: str) -> TypeExpr:
    """
    Parse a free-standing type signature such as ``Option<Vec<f32>>``.

    Signatures the grammar rejects become an opaque named type.
    """
    signature = normalize_signature(signature)
    if not signature:
        return Named("")

    source = f"type {_SIGNATURE_ALIAS} = {signature};".encode("utf-8")
    tree = get_parser().parse(source)
    root = tree.root_node
    if not root.has_error:
        for item in root.named_children:
            if item.type == "type_item":
                type_node = item.child_by_field_name("type")
                if type_node is not None:
                    return build_type_expr(type_node)

    logger.debug("Could not parse type signature %r; treating as opaque", signature)
    return Named(strip_generics(signature) or signature, signature)


class DeclarationParser:
    """Parses Rust source text into struct and enum IR entries."""

    def __init__(self, registry: Optional[TypeRegistry] = None):
        self.registry = registry or TypeRegistry()
        self.parser = get_parser()

    def parse(self, content: Union[str, bytes], source_name: str = "<string>") -> SourceModel:
        """
        Parse one file's text.

        Raises:
            SourceParseError: If the text is not valid UTF-8 or has syntax errors
        """
        if isinstance(content, str):
            source = content.encode("utf-8")
        else:
            source = content
            try:
                source.decode("utf-8")
            except UnicodeDecodeError as e:
                raise SourceParseError(source_name, f"not valid UTF-8: {e}")

        tree = self.parser.parse(source)
        root = tree.root_node
        if root.has_error:
            error = _first_error(root) or root
            line, column = error.start_point
            raise SourceParseError(
                source_name, f"syntax error at line {line + 1}, column {column + 1}"
            )

        model = SourceModel()
        for item, attributes in self._items_with_attributes(root):
            if item.type == "struct_item":
                struct = self._parse_struct(item, attributes, source_name)
                if struct is not None:
                    model.add_struct(struct)
            elif item.type == "enum_item":
                enum = self._parse_enum(item, attributes, source_name)
                if enum is not None:
                    model.add_enum(enum)

        logger.debug(
            "Parsed %s: %d structs, %d enums",
            source_name,
            len(model.structs),
            len(model.enums),
        )
        return model

    def _items_with_attributes(self, container: Node) -> Iterator[Tuple[Node, List[Node]]]:
        """Yield items with their outer attributes; descends into inline modules."""
        pending: List[Node] = []
        for child in container.named_children:
            if child.type == "attribute_item":
                pending.append(child)
                continue
            if child.type in ("line_comment", "block_comment"):
                continue

            if child.type == "mod_item":
                body = child.child_by_field_name("body")
                if body is not None:
                    yield from self._items_with_attributes(body)
            else:
                yield child, pending
            pending = []

    def _collect_attributes(self, attribute_items: List[Node]) -> Tuple[Dict[str, str], List[str]]:
        """Merge captured attribute values and gather marker flags."""
        values: Dict[str, str] = {}
        markers: List[str] = []
        for attr_item in attribute_items:
            path, attr_values, flags = parse_attribute(attr_item)
            if path in CAPTURED_ATTRIBUTES:
                values.update(attr_values)
                for flag in flags:
                    values.setdefault(flag, "true")
            elif self.registry.marker_attribute and path == self.registry.marker_attribute:
                markers.extend(flags)
        return values, markers

    def _parse_struct(
        self, item: Node, attribute_items: List[Node], source_name: str
    ) -> Optional[StructDef]:
        name_node = item.child_by_field_name("name")
        if name_node is None:
            return None
        name = node_text(name_node)

        attributes, markers = self._collect_attributes(attribute_items)
        if not self.registry.qualifies(name, DeclarationKind.NODE, markers):
            return None

        struct = StructDef(name=name, attributes=attributes, source_file=source_name)
        body = item.child_by_field_name("body")
        if body is not None and body.type == "field_declaration_list":
            struct.fields = self._parse_fields(body)
        return struct

    def _parse_fields(self, body: Node) -> List[FieldDef]:
        fields = []
        pending: List[Node] = []
        for child in body.named_children:
            if child.type == "attribute_item":
                pending.append(child)
                continue
            if child.type != "field_declaration":
                continue

            field_attributes, _ = self._collect_attributes(pending)
            pending = []
            if "skip" in field_attributes or "skip_serializing" in field_attributes:
                continue

            name_node = child.child_by_field_name("name")
            type_node = child.child_by_field_name("type")
            if name_node is None or type_node is None:
                continue

            fields.append(
                FieldDef(
                    name=node_text(name_node),
                    raw_type=normalize_signature(node_text(type_node)),
                    type_expr=build_type_expr(type_node),
                    rename=field_attributes.get("rename"),
                )
            )
        return fields

    def _parse_enum(
        self, item: Node, attribute_items: List[Node], source_name: str
    ) -> Optional[EnumDef]:
        name_node = item.child_by_field_name("name")
        if name_node is None:
            return None
        name = node_text(name_node)

        attributes, markers = self._collect_attributes(attribute_items)
        if not self.registry.qualifies(name, DeclarationKind.UNION, markers):
            return None

        enum = EnumDef(name=name, attributes=attributes, source_file=source_name)
        body = item.child_by_field_name("body")
        if body is None:
            return enum

        pending: List[Node] = []
        for child in body.named_children:
            if child.type == "attribute_item":
                pending.append(child)
                continue
            if child.type != "enum_variant":
                continue

            variant_attributes, _ = self._collect_attributes(pending)
            pending = []
            variant_name = node_text(child.child_by_field_name("name"))
            enum.variants.append(
                EnumVariant(
                    name=variant_name,
                    inner_type=self._single_positional_type(child),
                    attributes=variant_attributes,
                )
            )
        return enum

    @staticmethod
    def _single_positional_type(variant: Node) -> Optional[str]:
        """Inner type of a variant with exactly one unnamed field, else None."""
        body = variant.child_by_field_name("body")
        if body is None or body.type != "ordered_field_declaration_list":
            return None
        types = body.children_by_field_name("type")
        if len(types) != 1:
            return None
        return normalize_signature(node_text(types[0]))
