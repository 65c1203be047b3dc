import pytest

from typebridge.codegen.core.type_expr import ListOf, Named, OptionalOf, Primitive
from typebridge.codegen.languages.csharp.types import (
    CSharpTypeConfig,
    CSharpTypeMapper,
    MappingMode,
)
from typebridge.source.parser import parse_type_signature


@pytest.fixture
def mapper():
    return CSharpTypeMapper(CSharpTypeConfig(union_bases={"NodeKind": "Node"}))


def map_signature(mapper, signature, mode=MappingMode.FIELD):
    return mapper.map_type(parse_type_signature(signature), mode)


@pytest.mark.parametrize(
    "signature, expected",
    [
        ("f32", "float?"),
        ("f64", "double?"),
        ("i32", "int?"),
        ("i64", "long?"),
        ("u32", "uint?"),
        ("u64", "ulong?"),
        ("bool", "bool?"),
        ("String", "string"),
        ("&'a str", "string"),
    ],
)
def test_primitives(mapper, signature, expected):
    assert map_signature(mapper, signature).declaration == expected


def test_primitives_keep_their_mapping_under_nesting(mapper):
    assert map_signature(mapper, "Vec<f32>").declaration == "List<float?>"
    assert map_signature(mapper, "Option<Vec<u32>>").declaration == "List<uint?>?"
    assert map_signature(mapper, "Vec<Vec<String>>").declaration == "List<List<string>>"


def test_nested_options_collapse(mapper):
    assert map_signature(mapper, "Option<Option<String>>").declaration == "string?"
    assert map_signature(mapper, "Option<Option<f32>>").declaration == "float?"


def test_box_slice_maps_like_vec(mapper):
    boxed = map_signature(mapper, "Box<[Style]>")
    vec = map_signature(mapper, "Vec<Style>")
    assert boxed.declaration == vec.declaration == "List<Style>"


def test_non_nullable_defaults(mapper):
    assert map_signature(mapper, "String").default_value == "string.Empty"
    assert map_signature(mapper, "Vec<f32>").default_value == "new()"
    assert map_signature(mapper, "Style").default_value == "new()"
    assert map_signature(mapper, "f32").default_value is None
    assert map_signature(mapper, "Option<String>").default_value is None


def test_unions_map_to_abstract_base(mapper):
    union = map_signature(mapper, "NodeKind")
    assert union.declaration == "Node"
    assert union.default_value == "null!"
    assert map_signature(mapper, "Vec<NodeKind>").declaration == "List<Node>"


def test_wrapper_type_is_a_nullable_value_type(mapper):
    assert map_signature(mapper, "Option<TailwindValues>").declaration == "TailwindValues?"
    assert map_signature(mapper, "TailwindValues").declaration == "TailwindValues?"


def test_unknown_types_fall_back_to_opaque(mapper):
    result = map_signature(mapper, "HashMap<String, f32>")
    assert result.declaration == "JsonElement?"
    assert result.is_opaque
    assert "HashMap" in result.validation_hints[0]


def test_unknown_element_hint_survives_list(mapper):
    result = map_signature(mapper, "Vec<LengthUnit>")
    assert result.declaration == "List<JsonElement?>"
    assert result.validation_hints


def test_opaque_type_is_configurable():
    mapper = CSharpTypeMapper(CSharpTypeConfig(opaque_type="object"))
    assert mapper.map_type(Named("Mystery")).declaration == "object?"


def test_style_mode_makes_everything_nullable(mapper):
    assert map_signature(mapper, "String", MappingMode.STYLE).declaration == "string?"
    assert map_signature(mapper, "Vec<f32>", MappingMode.STYLE).declaration == "List<float?>?"
    assert map_signature(mapper, "Option<f32>", MappingMode.STYLE).declaration == "float?"


def test_mapper_accepts_hand_built_expressions(mapper):
    expr = OptionalOf(ListOf(Primitive("bool"), spelling="Box"))
    assert mapper.map_type(expr).declaration == "List<bool?>?"
