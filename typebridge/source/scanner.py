"""
Directory scanner feeding source files to the declaration parser.
"""

from pathlib import Path
from typing import Optional, Union

from ..codegen.core.generator import GeneratorError
from ..codegen.core.ir import SourceModel
from ..logging_config import get_logger
from .parser import DeclarationParser, SourceParseError
from .selection import TypeRegistry

logger = get_logger(__name__)


class SourceScanner:
    """Walks one directory (non-recursively) and accumulates the IR."""

    def __init__(
        self,
        parser: Optional[DeclarationParser] = None,
        extension: str = ".rs",
    ):
        self.parser = parser or DeclarationParser(TypeRegistry())
        self.extension = extension

    def scan(self, directory: Union[str, Path, None], required: bool = False) -> SourceModel:
        """
        Parse every matching file in a directory.

        Files are visited in sorted name order so the "last definition wins"
        rule is deterministic. Files that fail to parse are recorded in
        ``diagnostics`` and skipped.

        Raises:
            GeneratorError: If ``required`` is set and the directory is missing
        """
        model = SourceModel()

        if directory is None:
            if required:
                raise GeneratorError("A source directory is required but none was given")
            return model

        directory = Path(directory)
        if not directory.is_dir():
            if required:
                raise GeneratorError(f"Source directory not found: {directory}")
            logger.warning("Source directory %s not found; no declarations read", directory)
            return model

        files = sorted(
            path for path in directory.iterdir()
            if path.is_file() and path.suffix == self.extension
        )
        logger.debug("Scanning %d %s files in %s", len(files), self.extension, directory)

        for path in files:
            try:
                parsed = self.parser.parse(path.read_bytes(), source_name=str(path))
            except SourceParseError as e:
                model.diagnostics.append(f"Skipped {e}")
                logger.warning("Skipping %s", e)
                continue
            except OSError as e:
                model.diagnostics.append(f"Skipped {path}: {e}")
                logger.warning("Skipping unreadable file %s: %s", path, e)
                continue

            for name in parsed.structs:
                if name in model.structs:
                    logger.debug("Struct %s redefined in %s", name, path)
            model.merge(parsed)

        logger.info(
            "Scanned %s: %d structs, %d enums, %d files skipped",
            directory,
            len(model.structs),
            len(model.enums),
            len(model.diagnostics),
        )
        return model
