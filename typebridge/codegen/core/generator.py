"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional
from pathlib import Path

from .config import GeneratorConfig
from .ir import SourceModel
from .templates import TemplateEngine, create_template_engine
from ...logging_config import get_logger

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self._template_engine = None
        self.emission_warnings: List[str] = []
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'csharp')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.cs')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate(self, model: SourceModel) -> str:
        """
        Generate the complete output text for a source model.

        Args:
            model: Frozen IR produced by the source readers

        Returns:
            Generated code as a string
        """
        pass

    def family_unions(self, model: SourceModel) -> List[str]:
        """Unions that are emitted and may therefore own structs as subtypes."""
        return sorted(model.enums)

    def validate_model(self, model: SourceModel) -> List[str]:
        """
        Validate the IR for basic structural issues.

        Language generators should override this to add their own checks.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = list(model.diagnostics)

        for struct in model.structs.values():
            if not struct.fields:
                warnings.append(f"Struct '{struct.name}' has no fields")

        for enum in model.enums.values():
            if not enum.variants:
                warnings.append(f"Enum '{enum.name}' has no variants")

        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply basic formatting to generated code.

        Strips trailing whitespace, collapses runs of blank lines and makes
        sure the text ends with exactly one newline.
        """
        formatted_lines = []
        blank_count = 0

        for line in code.split("\n"):
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message = None
        self.exception = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, model: SourceModel) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Args:
        generator: Code generator instance
        model: IR to generate code for; frozen before emission starts

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        model.resolve_families(generator.config.node_suffix, generator.family_unions(model))
        model.freeze()

        warnings = generator.validate_model(model)
        code = generator.generate(model)
        formatted_code = generator.format_code(code)
        warnings.extend(generator.emission_warnings)

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "struct_count": len(model.structs),
            "enum_count": len(model.enums),
            "style_property_count": len(model.styles),
            "skipped_files": len(model.diagnostics),
        }

        logger.info(
            "Generated %s code for %d structs and %d enums",
            generator.language_name,
            len(model.structs),
            len(model.enums),
        )
        return GenerationResult(formatted_code, warnings, metadata)

    except Exception as e:
        logger.error("Code generation failed: %s", e, exc_info=True)
        return GenerationResult.error(f"Code generation failed: {str(e)}", exception=e)


def write_output(code: str, output_path: Path) -> Path:
    """
    Write generated code to its destination.

    Raises:
        GeneratorError: If the file cannot be written; this aborts generation
    """
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(code, encoding="utf-8", newline="\n")
    except OSError as e:
        raise GeneratorError(f"Failed to write {output_path}: {e}") from e

    logger.info("Wrote %s", output_path)
    return output_path
