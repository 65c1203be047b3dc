"""
Command-line interface for typebridge.

Provides the ``generate`` and ``targets`` subcommands.
"""

import argparse
import sys
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.syntax import Syntax
from rich.table import Table

from . import __version__
from .codegen.core.config import ConfigError, GeneratorConfig, get_config_manager, load_config, load_manifest
from .codegen.core.generator import GeneratorError
from .codegen.registry import (
    RegistryError,
    get_language_info,
    is_language_supported,
    list_supported_languages,
)
from .logging_config import configure_logging, get_logger
from .pipeline import build_source_model, generate_bindings

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog="typebridge",
        description="Generate C# serialization models from Rust declarations",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command")
    create_generate_subparser(subparsers)

    subparsers.add_parser("targets", help="List supported target languages")
    return parser


def create_generate_subparser(subparsers) -> argparse.ArgumentParser:
    """
    Create the ``generate`` subcommand parser.

    Args:
        subparsers: Subparser group from main parser

    Returns:
        Configured subparser for the generate command
    """
    parser = subparsers.add_parser(
        "generate",
        help="Generate bindings from Rust sources",
        description="Scan Rust declarations and emit one C# model file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  typebridge generate --source-dir src/layout/node --stylesheet src/layout/style/properties.rs -o Models.g.cs
  typebridge generate --config typebridge.json --verbose
  typebridge generate --source-dir src --manifest types.json --no-suffix-convention
        """.strip(),
    )

    input_group = parser.add_argument_group("inputs")
    input_group.add_argument("--source-dir", metavar="DIR", help="Directory of Rust sources")
    input_group.add_argument("--stylesheet", metavar="FILE", help="File holding the style macro")
    input_group.add_argument("--config", metavar="FILE", help="JSON configuration file")
    input_group.add_argument(
        "--manifest", metavar="FILE", help="JSON manifest listing node/union types"
    )

    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "--output", "-o", metavar="FILE", help="Output file (default: print to console)"
    )
    output_group.add_argument("--namespace", metavar="NAME", help="C# namespace")
    output_group.add_argument(
        "--language", "-l", default="csharp", help="Target language (default: csharp)"
    )
    output_group.add_argument(
        "--no-comments", action="store_true", help="Don't add doc comments to generated code"
    )

    selection_group = parser.add_argument_group("selection")
    selection_group.add_argument(
        "--require-source-dir",
        action="store_true",
        help="Fail when the source directory is missing",
    )
    selection_group.add_argument(
        "--no-suffix-convention",
        action="store_true",
        help="Select only through the manifest and marker attributes",
    )

    parser.add_argument(
        "--verbose", action="store_true", help="Show generation result metadata"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=argparse.SUPPRESS,
        help="Logging level",
    )
    return parser


def handle_generate_command(args: argparse.Namespace) -> int:
    """
    Handle the ``generate`` subcommand.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    language = args.language.lower()
    _validate_language(language)

    config = _build_config(args, language)
    for warning in get_config_manager().validate_config(config):
        logger.warning("Configuration: %s", warning)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        scan_task = progress.add_task("[cyan]Scanning Rust sources...", total=None)
        model = build_source_model(config)
        progress.remove_task(scan_task)

        gen_task = progress.add_task(f"[green]Generating {language} code...", total=None)
        result = generate_bindings(config, language, model=model)
        progress.remove_task(gen_task)

    if not result.success:
        console.print(f"[red]✗ Code generation failed:[/red] {result.error_message}")
        return 1

    if config.output_file:
        console.print(
            f"[green]✓[/green] Generated {language} code saved to "
            f"[cyan]{result.metadata.get('output_file', config.output_file)}[/cyan]"
        )
    else:
        console.print(Syntax(result.code, "csharp", theme="monokai"))

    if args.verbose and result.metadata:
        _print_metadata(result.metadata)

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {escape(warning)}")
        console.print()

    return 0


def _print_metadata(metadata: dict):
    metadata_table = Table(
        title="📊 Generation Metadata",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    metadata_table.add_column("Property", style="bold")
    metadata_table.add_column("Value", style="green")

    for key, value in metadata.items():
        metadata_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(metadata_table)


def handle_targets_command() -> int:
    """List supported target languages in a table."""
    table = Table(
        title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan"
    )
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for language in list_supported_languages():
        info = get_language_info(language)
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(info["name"], info["file_extension"], info["class"], aliases)

    console.print(table)
    console.print(
        Panel(
            "[bold]Usage:[/bold] typebridge generate --source-dir [dim]DIR[/dim] "
            "--stylesheet [dim]FILE[/dim] -o [cyan]Models.g.cs[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0


def _validate_language(language: str):
    """
    Validate that a language is supported.

    Raises:
        CLIError: If no generator is registered for the language
    """
    if not is_language_supported(language):
        supported = ", ".join(list_supported_languages())
        raise CLIError(f"Unsupported language '{language}' (supported: {supported})")


def _build_config(args: argparse.Namespace, language: str) -> GeneratorConfig:
    """
    Build configuration: defaults, then the config file, then the manifest,
    then command-line flags. Manifest names extend the config file's lists.
    """
    config_language = language if language in get_config_manager().list_languages() else "csharp"
    overrides = {}

    if args.manifest:
        base = load_config(config_language, config_file=args.config)
        for key, names in load_manifest(args.manifest).items():
            existing = list(getattr(base, key))
            overrides[key] = existing + [name for name in names if name not in existing]

    if args.source_dir:
        overrides["source_dir"] = args.source_dir
    if args.stylesheet:
        overrides["stylesheet"] = args.stylesheet
    if args.output:
        overrides["output_file"] = args.output
    if args.namespace:
        overrides["namespace"] = args.namespace
    if args.no_comments:
        overrides["add_comments"] = False
    if args.require_source_dir:
        overrides["require_source_dir"] = True
    if args.no_suffix_convention:
        overrides["use_suffix_convention"] = False

    return load_config(config_language, custom_config=overrides, config_file=args.config)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``typebridge`` console script."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        if args.command == "targets":
            return handle_targets_command()
        return handle_generate_command(args)
    except (GeneratorError, ConfigError, RegistryError, CLIError) as e:
        logger.debug("Fatal error", exc_info=True)
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
