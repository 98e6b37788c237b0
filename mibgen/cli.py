"""
Command line interface for mibgen.

Usage:
  mibgen generate IF-MIB SNMPv2-MIB -M +~/mibs -o mibs.go
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .codegen import (
    GenerationResult,
    GeneratorConfig,
    generate_from_modules,
    list_supported_languages,
)
from .codegen.core.config import FORMATTER_MODES, ConfigError, get_config_manager
from .codegen.core.generator import GeneratorError
from .codegen.registry import RegistryError, get_registry, is_language_supported
from .logging_config import get_logger, setup_logging
from .paths import SearchPath, apply_path_options
from .smi import LoadError, Module, SchemaLoader

logger = get_logger(__name__)

# Generated code may go to stdout, so everything else goes to stderr
console = Console(stderr=True)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


PATH_OPTIONS = ("-M", "--path")


def join_path_values(argv: Sequence[str]) -> List[str]:
    """
    Glue each search path option to its value as ``--path=VALUE``.

    A prepend value such as ``-/opt/mibs`` looks like an option to argparse
    when it is a separate token.
    """
    joined = []
    tokens = iter(argv)
    for token in tokens:
        if token == "--":
            joined.append(token)
            joined.extend(tokens)
            break
        if token in PATH_OPTIONS:
            value = next(tokens, None)
            joined.append(token if value is None else f"--path={value}")
        else:
            joined.append(token)
    return joined


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that accepts ``-M -PATH``."""

    def parse_known_args(self, args=None, namespace=None):
        if args is None:
            args = sys.argv[1:]
        return super().parse_known_args(join_path_values(args), namespace)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with its subcommands."""
    parser = ArgumentParser(
        prog="mibgen",
        description="Generate Go model declarations from MIB modules",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command")
    create_generate_subparser(subparsers)
    return parser


def create_generate_subparser(subparsers) -> argparse.ArgumentParser:
    """Create the ``generate`` subcommand parser."""
    parser = subparsers.add_parser(
        "generate",
        help="Generate code for MIB modules",
        description="Load MIB modules and generate model declarations for them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mibgen generate IF-MIB
  mibgen generate IF-MIB -o - -p snmp
  mibgen generate IF-MIB SNMPv2-MIB -d ./mibs -M +~/compiled-mibs
        """.strip(),
    )

    parser.add_argument("modules", nargs="+", metavar="MODULE", help="Modules to load")

    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "--output",
        "-o",
        metavar="FILE",
        help="Write everything to one file ('-' for stdout) instead of one file per module",
    )
    output_group.add_argument(
        "--dir",
        "-d",
        dest="output_dir",
        metavar="DIR",
        help="Output directory for per-module files (default: .)",
    )
    output_group.add_argument(
        "--package",
        "-p",
        dest="package_name",
        metavar="NAME",
        help="Package name of the generated code (default: mibs)",
    )

    gen_group = parser.add_argument_group("generation")
    gen_group.add_argument(
        "--path",
        "-M",
        dest="paths",
        action="append",
        default=[],
        metavar="PATH",
        help="Module search path: +PATH appends, -PATH prepends, PATH replaces",
    )
    gen_group.add_argument("--config", metavar="FILE", help="JSON configuration file")
    gen_group.add_argument(
        "--language", "-l", help="Target language (default: go)"
    )
    gen_group.add_argument(
        "--formatter",
        choices=sorted(FORMATTER_MODES),
        help="Source formatter (default: auto)",
    )
    gen_group.add_argument(
        "--strict-types",
        action="store_true",
        default=None,
        help="Fail when two different types share a name",
    )

    log_group = parser.add_argument_group("logging")
    log_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log progress and print a summary",
    )
    log_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level (default: WARNING, INFO with --verbose)",
    )
    log_group.add_argument("--log-file", metavar="FILE", help="Also log to FILE")

    parser.set_defaults(func=_handle_generate_command)
    return parser


def _handle_generate_command(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    try:
        config = _build_config(args)
        search_path = _build_search_path(config, args.paths)
        modules = _load_modules(args.modules, search_path)

        result = generate_from_modules(modules, config)
        return _report_result(result, args.verbose)

    except (CLIError, LoadError, ConfigError, RegistryError, GeneratorError) as e:
        console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        return 1


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration from defaults, the config file and CLI arguments."""
    requested = args.language or "go"
    if not is_language_supported(requested):
        raise CLIError(
            f"Unsupported language '{requested}' "
            f"(supported: {', '.join(list_supported_languages())})"
        )
    language = get_registry().resolve(requested)

    overrides = {
        "output_file": args.output,
        "output_dir": args.output_dir,
        "package_name": args.package_name,
        "formatter": args.formatter,
        "strict_types": args.strict_types,
    }

    manager = get_config_manager()
    config = manager.get_config(language, overrides, args.config)

    for warning in manager.validate_config(config):
        console.print(f"[yellow]⚠ {escape(warning)}[/yellow]")

    if config.formatter not in FORMATTER_MODES:
        raise CLIError(f"Invalid formatter: {config.formatter}")

    return config


def _build_search_path(config: GeneratorConfig, values: List[str]) -> SearchPath:
    if config.search_path:
        search_path = SearchPath(config.search_path)
    else:
        search_path = SearchPath.from_environment()
    return apply_path_options(search_path, values)


def _load_modules(names: List[str], search_path: SearchPath) -> List[Module]:
    """Load the requested modules, returning everything loaded in load order."""
    loader = SchemaLoader(search_path)
    for name in names:
        loader.load_module(name)
    return loader.loaded_modules()


def _report_result(result: GenerationResult, verbose: bool) -> int:
    for warning in result.warnings:
        logger.warning(warning)

    if not result.success:
        console.print(f"[red]✗ Error:[/red] {escape(result.error_message)}")
        return 1

    if verbose:
        _print_summary(result)
    return 0


def _print_summary(result: GenerationResult):
    metadata = result.metadata

    table = Table(title="Generation Summary", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Item", style="bold")
    table.add_column("Value", style="green")

    table.add_row("Language", metadata.get("language", ""))
    table.add_row("Modules written", ", ".join(metadata.get("modules_written", [])))
    table.add_row(
        "Modules skipped",
        ", ".join(metadata.get("modules_skipped", [])) or "[dim]none[/dim]",
    )
    table.add_row("Shared types", str(metadata.get("type_count", 0)))
    table.add_row("Destinations", "\n".join(dict.fromkeys(result.destinations)))
    if result.warnings:
        table.add_row("Warnings", str(len(result.warnings)))

    console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``mibgen`` command."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    level = args.log_level or ("INFO" if args.verbose else "WARNING")
    try:
        setup_logging(getattr(logging, level), args.log_file)
    except OSError as e:
        console.print(f"[red]✗ Error:[/red] Cannot open log file: {escape(str(e))}")
        return 1
    logger.debug("Arguments: %s", args)

    return args.func(args)
