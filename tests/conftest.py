"""Shared fixtures: Rust sources written into a temporary directory."""

import textwrap

import pytest

from typebridge.codegen.core.config import GeneratorConfig


@pytest.fixture
def source_dir(tmp_path):
    directory = tmp_path / "src"
    directory.mkdir()
    return directory


@pytest.fixture
def write_rust(source_dir):
    """Write a dedented Rust file into the source directory."""

    def _write(filename, text):
        path = source_dir / filename
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def stylesheet(tmp_path):
    path = tmp_path / "properties.rs"
    path.write_text(
        textwrap.dedent(
            """
            define_style!(
                // Typography
                font_size: Option<f32>,
                color: String where inherit = true,
            );
            """
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def make_config(source_dir):
    def _make(**overrides):
        overrides.setdefault("source_dir", str(source_dir))
        return GeneratorConfig(**overrides)

    return _make


NODE_SOURCES = {
    "alpha.rs": """
        #[derive(Debug, Clone, Serialize, Deserialize)]
        pub struct AlphaNode {
            pub label: String,
            pub style: Option<Style>,
        }
        """,
    "beta.rs": """
        #[derive(Debug, Clone, Serialize, Deserialize)]
        pub struct BetaNode {
            pub size: f32,
            pub tw: Option<TailwindValues>,
        }
        """,
    "kind.rs": """
        #[derive(Debug, Clone, Serialize, Deserialize)]
        #[serde(tag = "type", rename_all = "camelCase")]
        pub enum NodeKind {
            Alpha(AlphaNode),
            Beta(BetaNode),
        }
        """,
}


@pytest.fixture
def node_sources(write_rust):
    for filename, text in NODE_SOURCES.items():
        write_rust(filename, text)
