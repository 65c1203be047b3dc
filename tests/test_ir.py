import pytest

from typebridge.codegen.core.ir import EnumDef, EnumVariant, SourceModel, StructDef


def build_model():
    model = SourceModel()
    model.add_struct(StructDef("SharedNode"))
    model.add_struct(StructDef("LoneNode"))
    model.add_enum(EnumDef("ZoneKind", [EnumVariant("Shared", "SharedNode")]))
    model.add_enum(EnumDef("AreaKind", [EnumVariant("Shared", "SharedNode")]))
    return model


def test_first_family_in_name_order_wins():
    model = build_model()
    model.resolve_families()

    assert model.structs["SharedNode"].family == "AreaKind"
    assert model.structs["LoneNode"].family is None


def test_fallback_variant_type_name():
    model = SourceModel()
    model.add_struct(StructDef("EmptyNode"))
    model.add_enum(EnumDef("NodeKind", [EnumVariant("Empty")]))
    model.resolve_families()

    assert model.structs["EmptyNode"].family == "NodeKind"


def test_variant_inner_type_name_strips_path_and_generics():
    variant = EnumVariant("Image", "crate::nodes::ImageNode<'a>")
    assert variant.inner_type_name == "ImageNode"
    assert variant.implementing_type("Node") == "ImageNode"


def test_frozen_model_rejects_changes():
    model = build_model().freeze()

    with pytest.raises(RuntimeError):
        model.add_enum(EnumDef("OtherKind"))
    with pytest.raises(TypeError):
        model.structs["NewNode"] = StructDef("NewNode")


def test_merge_keeps_last_definition():
    first = build_model()
    second = SourceModel()
    second.add_struct(StructDef("LoneNode", source_file="later.rs"))

    first.merge(second)

    assert first.structs["LoneNode"].source_file == "later.rs"


def test_families_limited_to_given_unions():
    model = build_model()
    model.resolve_families(unions=["ZoneKind", "MissingKind"])

    assert model.structs["SharedNode"].family == "ZoneKind"


def test_resolving_again_replaces_families():
    model = build_model()
    model.resolve_families()
    model.resolve_families(unions=[])

    assert model.structs["SharedNode"].family is None
