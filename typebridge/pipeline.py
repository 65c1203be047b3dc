"""
End-to-end generation: scan the Rust sources, extract the style list, emit
the target file and write it out.
"""

from pathlib import Path
from typing import Optional

from .codegen.core.config import GeneratorConfig
from .codegen.core.generator import GenerationResult, generate_code, write_output
from .codegen.core.ir import SourceModel
from .codegen.registry import get_generator
from .logging_config import get_logger
from .source.parser import DeclarationParser
from .source.scanner import SourceScanner
from .source.selection import TypeRegistry
from .source.styles import MacroStyleExtractor

logger = get_logger(__name__)


def build_source_model(config: GeneratorConfig) -> SourceModel:
    """
    Read declarations and style properties into one IR.

    Raises:
        GeneratorError: If ``require_source_dir`` is set and the directory is missing
    """
    parser = DeclarationParser(TypeRegistry.from_config(config))
    scanner = SourceScanner(parser, extension=config.source_extension)
    model = scanner.scan(config.source_dir, required=config.require_source_dir)

    if config.stylesheet:
        extractor = MacroStyleExtractor(config.style_macro, config.conditional_keyword)
        model.styles = extractor.extract_file(config.stylesheet)
    else:
        logger.debug("No stylesheet configured; style class will be empty")

    return model


def generate_bindings(
    config: GeneratorConfig,
    language: str = "csharp",
    write: bool = True,
    model: Optional[SourceModel] = None,
) -> GenerationResult:
    """
    Run the whole pipeline for one configuration.

    Args:
        config: Generation settings
        language: Registered target language name or alias
        write: Write the result to ``config.output_file`` when one is set
        model: Pre-built IR; scanned from ``config`` when omitted

    Raises:
        GeneratorError: On fatal input or output failures
    """
    if model is None:
        model = build_source_model(config)

    generator = get_generator(language, config)
    result = generate_code(generator, model)

    if result.success and write and config.output_file:
        code = result.code
        if config.line_ending != "\n":
            code = code.replace("\n", config.line_ending)
        output_path = write_output(code, Path(config.output_file))
        result.metadata["output_file"] = str(output_path)

    return result
