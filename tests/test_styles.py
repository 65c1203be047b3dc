import textwrap

from typebridge.codegen.core.type_expr import OptionalOf, Primitive
from typebridge.source.styles import MacroStyleExtractor

STYLESHEET = textwrap.dedent(
    """
    use crate::style::*;

    define_style!(
        // Layout
        width: Option<LengthUnit>,

        #[doc = "Opacity of the node"]
        opacity: f32 where inherit = false,
        pub font_size: Option<f32>,
        font_family: FontFamily = FontFamily::default(),
    );
    """
)


def test_extracts_properties_in_order():
    properties = MacroStyleExtractor().extract(STYLESHEET)
    assert [p.name for p in properties] == ["width", "opacity", "font_size", "font_family"]


def test_conditional_clause_is_cut():
    properties = {p.name: p for p in MacroStyleExtractor().extract(STYLESHEET)}
    assert properties["opacity"].raw_type == "f32"
    assert properties["opacity"].type_expr == Primitive("f32")
    assert properties["font_size"].type_expr == OptionalOf(Primitive("f32"))


def test_blank_and_comment_lines_are_skipped():
    content = "define_style!(\n\n    // comment: not a property\n    gap: f32,\n)"
    properties = MacroStyleExtractor().extract(content)
    assert len(properties) == 1
    assert properties[0].name == "gap"


def test_missing_token_gives_empty_list():
    assert MacroStyleExtractor().extract("fn main() {}") == []


def test_unbalanced_body_gives_empty_list():
    assert MacroStyleExtractor().extract("define_style!(\n    gap: f32,\n") == []


def test_braced_body_with_nested_delimiters():
    content = "define_style! {\n    pair: Option<(f32, f32)>,\n    gap: f32,\n}"
    properties = MacroStyleExtractor().extract(content)
    assert [p.raw_type for p in properties] == ["Option<(f32, f32)>", "f32"]


def test_custom_macro_token_and_keyword():
    extractor = MacroStyleExtractor("style_props!", conditional_keyword="if")
    properties = extractor.extract("style_props!(\n    margin: u32 if inherited,\n)")
    assert properties[0].raw_type == "u32"


def test_missing_file_gives_empty_list(tmp_path):
    assert MacroStyleExtractor().extract_file(tmp_path / "nope.rs") == []


def test_restricted_visibility_is_stripped():
    content = (
        "define_style!(\n"
        "    pub(crate) gap: f32,\n"
        "    pub(in crate::style) margin: u32,\n"
        "    pub (super) padding: Option<f32>,\n"
        ")"
    )
    properties = MacroStyleExtractor().extract(content)
    assert [(p.name, p.raw_type) for p in properties] == [
        ("gap", "f32"),
        ("margin", "u32"),
        ("padding", "Option<f32>"),
    ]
