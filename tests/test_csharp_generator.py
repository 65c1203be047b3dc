import pytest

from typebridge.codegen.core.generator import generate_code
from typebridge.codegen.core.ir import SourceModel
from typebridge.codegen.languages.csharp import CSharpGenerator
from typebridge.pipeline import build_source_model, generate_bindings


def generate(config):
    result = generate_bindings(config, write=False)
    assert result.success, result.error_message
    return result


def test_union_base_and_derived_types(node_sources, make_config):
    code = generate(make_config()).code

    assert code.count("[JsonDerivedType(") == 2
    assert '[JsonPolymorphic(TypeDiscriminatorPropertyName = "type")]' in code
    assert '[JsonDerivedType(typeof(AlphaNode), "alpha")]' in code
    assert '[JsonDerivedType(typeof(BetaNode), "beta")]' in code
    assert "public abstract class Node" in code
    assert "public class AlphaNode : Node" in code
    assert "public class BetaNode : Node" in code


def test_properties_carry_json_attributes(node_sources, make_config):
    code = generate(make_config()).code

    assert '[JsonPropertyName("label")]' in code
    assert "[JsonIgnore(Condition = JsonIgnoreCondition.WhenWritingNull)]" in code
    assert "public string Label { get; set; } = string.Empty;" in code
    assert "public Style? Style { get; set; }" in code
    assert "public float? Size { get; set; }" in code
    assert "public TailwindValues? Tw { get; set; }" in code


def test_file_preamble(node_sources, make_config):
    code = generate(make_config()).code

    assert code.startswith("// <auto-generated>")
    assert "#nullable enable" in code
    assert "using System.Text.Json.Serialization;" in code
    assert "namespace Takumi.Models;" in code
    assert code.endswith("}\n")


def test_structs_are_emitted_sorted(write_rust, make_config):
    write_rust("a.rs", "pub struct ZetaNode { pub x: f32 }")
    write_rust("b.rs", "pub struct AlphaNode { pub x: f32 }")

    code = generate(make_config()).code

    assert code.index("public class AlphaNode") < code.index("public class ZetaNode")


def test_output_is_deterministic(node_sources, make_config, stylesheet):
    config = make_config(stylesheet=str(stylesheet))
    assert generate(config).code == generate(config).code


def test_style_class(node_sources, make_config, stylesheet):
    code = generate(make_config(stylesheet=str(stylesheet))).code

    assert "public class Style\n" in code
    assert '[JsonPropertyName("fontSize")]' in code
    assert "public float? FontSize { get; set; }" in code
    assert "public string? Color { get; set; }" in code


def test_scalar_wrapper_is_always_emitted(make_config):
    code = generate(make_config()).code

    assert "public readonly record struct TailwindValues(string Value)" in code
    assert "public sealed class TailwindValuesConverter : JsonConverter<TailwindValues>" in code
    assert "[JsonConverter(typeof(TailwindValuesConverter))]" in code
    assert "public abstract class" not in code


def test_enum_tag_and_variant_rename(write_rust, make_config):
    write_rust(
        "nodes.rs",
        """
        pub struct ImageNode { pub src: String }

        #[serde(tag = "kind")]
        pub enum NodeKind {
            #[serde(rename = "img")]
            Image(ImageNode),
        }
        """,
    )
    code = generate(make_config()).code

    assert '[JsonPolymorphic(TypeDiscriminatorPropertyName = "kind")]' in code
    assert '[JsonDerivedType(typeof(ImageNode), "img")]' in code


def test_struct_rename_all_and_field_rename(write_rust, make_config):
    write_rust(
        "nodes.rs",
        """
        #[serde(rename_all = "snake_case")]
        pub struct BoxNode {
            pub font_size: f32,
            #[serde(rename = "tw")]
            pub tailwind: Option<TailwindValues>,
        }
        """,
    )
    code = generate(make_config()).code

    assert '[JsonPropertyName("font_size")]' in code
    assert '[JsonPropertyName("tw")]' in code
    assert "public TailwindValues? Tailwind { get; set; }" in code


def test_children_resolve_to_their_own_family(write_rust, make_config):
    write_rust(
        "layout.rs",
        """
        pub struct ContainerNode { pub children: Option<Vec<AnyNode>> }
        pub struct TextNode { pub text: String }

        pub enum NodeKind {
            Container(ContainerNode),
            Text(TextNode),
        }
        """,
    )
    write_rust(
        "shapes.rs",
        """
        pub struct GroupNode { pub children: Vec<AnyNode> }
        pub struct CircleNode { pub radius: f32 }

        pub enum ShapeKind {
            Group(GroupNode),
            Circle(CircleNode),
        }
        """,
    )
    result = generate(make_config())

    assert "public List<Node>? Children { get; set; }" in result.code
    assert "public List<Shape> Children { get; set; } = new();" in result.code
    assert "public class GroupNode : Shape" in result.code
    assert not [w for w in result.warnings if "child collection" in w]


def test_children_naming_a_union_directly(write_rust, make_config):
    write_rust(
        "layout.rs",
        """
        pub struct ContainerNode { pub children: Vec<NodeKind> }
        pub enum NodeKind { Container(ContainerNode) }
        """,
    )
    code = generate(make_config()).code

    assert "public List<Node> Children { get; set; } = new();" in code


def test_orphan_child_collection_warns(write_rust, make_config):
    write_rust("loose.rs", "pub struct LooseNode { pub children: Vec<ThingNode> }")

    result = generate(make_config())

    assert any("child collection" in w for w in result.warnings)
    assert "public List<JsonElement?> Children" in result.code


def test_missing_variant_struct_warns(write_rust, make_config):
    write_rust("kind.rs", "pub enum NodeKind { Ghost }")

    result = generate(make_config())

    assert '[JsonDerivedType(typeof(GhostNode), "ghost")]' in result.code
    assert any("GhostNode" in w for w in result.warnings)


def test_unknown_field_type_warns(write_rust, make_config):
    write_rust("a.rs", "pub struct MapNode { pub extra: HashMap<String, f32> }")

    result = generate(make_config())

    assert "public JsonElement? Extra { get; set; }" in result.code
    assert any("HashMap" in w for w in result.warnings)


def test_skipped_files_reach_warnings(write_rust, make_config):
    write_rust("bad.rs", "pub struct BadNode {")

    result = generate(make_config())

    assert result.metadata["skipped_files"] == 1
    assert any("bad.rs" in w for w in result.warnings)


def test_block_namespace(node_sources, make_config):
    config = make_config(custom={"file_scoped_namespace": False})
    code = generate(config).code

    assert "namespace Takumi.Models\n{\n" in code
    assert "    public abstract class Node" in code


def test_custom_namespace_and_discriminator(node_sources, make_config):
    config = make_config(namespace="Acme.Bindings", custom={"discriminator_property": "$type"})
    code = generate(config).code

    assert "namespace Acme.Bindings;" in code
    # The enum's own serde tag takes precedence
    assert 'TypeDiscriminatorPropertyName = "type"' in code


def test_no_comments(node_sources, make_config, stylesheet):
    config = make_config(stylesheet=str(stylesheet), add_comments=False)
    code = generate(config).code

    assert "Polymorphic base" not in code


def test_name_collisions_are_reported(write_rust, make_config):
    write_rust("a.rs", "#[typebridge(node)]\npub struct Style { pub x: f32 }")

    result = generate(make_config())

    assert any("collides" in w for w in result.warnings)


def test_model_is_frozen_for_emission(node_sources, make_config):
    config = make_config()
    model = build_source_model(config)
    generate_code(CSharpGenerator(config), model)

    assert model.frozen
    with pytest.raises(RuntimeError):
        model.add_struct(model.structs["AlphaNode"])


def test_generation_failure_returns_error_result(make_config, monkeypatch):
    generator = CSharpGenerator(make_config())

    def explode(model):
        raise ValueError("boom")

    monkeypatch.setattr(generator, "generate", explode)
    result = generate_code(generator, SourceModel())

    assert not result.success
    assert "boom" in result.error_message


def test_output_is_written(node_sources, make_config, tmp_path):
    output = tmp_path / "out" / "Models.g.cs"
    result = generate_bindings(make_config(output_file=str(output)))

    assert output.read_text(encoding="utf-8") == result.code
    assert result.metadata["output_file"] == str(output)


def test_skipped_union_does_not_claim_structs(write_rust, make_config):
    write_rust(
        "nodes.rs",
        """
        pub struct AlphaNode { pub label: String }

        pub enum Kind {
            Alpha(AlphaNode),
        }

        pub enum NodeKind {
            Alpha(AlphaNode),
        }
        """,
    )
    code = generate(make_config(union_types=["Kind"])).code

    assert "public abstract class Node" in code
    assert "public class AlphaNode : Node" in code


def test_families_resolved_for_prefrozen_model(node_sources, make_config):
    config = make_config()
    model = build_source_model(config).freeze()

    result = generate_code(CSharpGenerator(config), model)

    assert result.success, result.error_message
    assert "public class AlphaNode : Node" in result.code


def test_enum_rename_all_sets_discriminators(write_rust, make_config):
    write_rust(
        "nodes.rs",
        """
        pub struct TextBlockNode { pub text: String }
        pub struct ImageNode { pub src: String }

        #[serde(tag = "type", rename_all = "snake_case")]
        pub enum NodeKind {
            TextBlock(TextBlockNode),
            #[serde(rename = "img")]
            Image(ImageNode),
        }
        """,
    )
    code = generate(make_config()).code

    assert '[JsonDerivedType(typeof(TextBlockNode), "text_block")]' in code
    assert '[JsonDerivedType(typeof(ImageNode), "img")]' in code


def test_camel_case_rename_all_discriminator(write_rust, make_config):
    write_rust(
        "nodes.rs",
        """
        pub struct TextBlockNode { pub text: String }

        #[serde(rename_all = "camelCase")]
        pub enum NodeKind {
            TextBlock(TextBlockNode),
        }
        """,
    )
    code = generate(make_config()).code

    assert '[JsonDerivedType(typeof(TextBlockNode), "textBlock")]' in code
