#!/usr/bin/env python3
"""Command-line interface for the OAS Generator."""

from __future__ import annotations

import argparse
import contextlib
import logging
import shutil
import sys
import tempfile
import traceback
from collections.abc import Generator
from pathlib import Path

from oas_generator.config import GeneratorConfig
from oas_generator.constants import DEFAULT_MAX_LINE_WIDTH, NamingConvention
from oas_generator.driver import GeneratorDriver
from oas_generator.errors import EXIT_GENERATION_ERROR, EXIT_SUCCESS, FileSystemWriteError, GeneratorError

logger = logging.getLogger(__name__)


def _language_list(value: str) -> list[str]:
    languages = [item.strip() for item in value.split(",") if item.strip()]
    if not languages:
        msg = "at least one language is required"
        raise argparse.ArgumentTypeError(msg)
    return languages


def parse_command_line_args(args: list[str] | None = None) -> argparse.Namespace:
    """Create and configure the command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="oas-generator",
        description="Generate typed API clients from an OpenAPI 3.1 specification",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate --input spec.yaml --output ./client --languages typescript
  %(prog)s generate -i spec.json -o ./out --languages typescript,rust --package --scope acme
  %(prog)s generate -i spec.json -o ./client --naming snake --max-line-width 100 --verbose
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate client code")
    generate.add_argument(
        "--input",
        "-i",
        type=Path,
        required=True,
        help="Path to OpenAPI specification file (JSON or YAML)",
        dest="input_path",
    )
    generate.add_argument(
        "--output",
        "-o",
        type=Path,
        required=True,
        help="Output directory for generated files",
        dest="output_dir",
    )
    generate.add_argument(
        "--languages",
        "-l",
        type=_language_list,
        default=["typescript"],
        help="Comma-separated target languages (default: typescript)",
    )
    generate.add_argument(
        "--package",
        action="store_true",
        help="Also emit package.json, tsconfig files and README.md",
    )
    generate.add_argument(
        "--package-name",
        help="Package name (default: derived from the document title)",
        dest="package_name",
    )
    generate.add_argument(
        "--scope",
        help="npm scope for the package name, e.g. acme for @acme/<name>",
    )
    generate.add_argument(
        "--esm",
        action="store_true",
        help="Also emit tsconfig.esm.json and an ESM build script",
    )
    generate.add_argument(
        "--naming",
        choices=[convention.value for convention in NamingConvention],
        default=NamingConvention.KEBAB.value,
        help="Model filename convention (default: %(default)s)",
    )
    generate.add_argument(
        "--max-line-width",
        type=int,
        default=DEFAULT_MAX_LINE_WIDTH,
        help="Maximum line width for pretty-printed declarations (default: %(default)s)",
        dest="max_line_width",
    )
    generate.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    parsed_args = parser.parse_args(args)
    if parsed_args.max_line_width <= 0:
        generate.error(f"--max-line-width must be positive, got {parsed_args.max_line_width}")
    return parsed_args


def configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def print_generation_summary(*, files: dict[Path, bytes], output_dir: Path) -> None:
    """Print summary of generated files."""
    print(f"Generated {len(files)} files:")
    for file_path in sorted(files):
        print(f"  {file_path}")
    print(f"\nClient generated successfully in {output_dir}")


@contextlib.contextmanager
def backup_output_dir(output_dir: Path) -> Generator[None, None, None]:
    """Back up a non-empty output directory and restore it if generation fails.

    Raises:
        FileSystemWriteError: If the backup cannot be made or restored.
    """
    backup_dir = None
    try:
        if output_dir.is_dir() and any(output_dir.iterdir()):
            backup_dir = Path(tempfile.mkdtemp())
            shutil.copytree(output_dir, backup_dir, dirs_exist_ok=True)
    except OSError as e:
        if backup_dir:
            shutil.rmtree(backup_dir, ignore_errors=True)
        msg = f"cannot back up output directory: {e}"
        raise FileSystemWriteError(msg, element=str(output_dir)) from e

    try:
        yield
    except Exception:
        if backup_dir:
            print(
                "Error: Generation failed. Restoring original content.",
                file=sys.stderr,
            )
            try:
                if output_dir.exists():
                    shutil.rmtree(output_dir)
                shutil.copytree(backup_dir, output_dir, dirs_exist_ok=True)
            except OSError as e:
                msg = f"cannot restore output directory: {e}"
                raise FileSystemWriteError(msg, element=str(output_dir)) from e
        raise
    finally:
        if backup_dir:
            shutil.rmtree(backup_dir, ignore_errors=True)


def run_generate(parsed_args: argparse.Namespace) -> dict[Path, bytes]:
    driver = GeneratorDriver(config=GeneratorConfig.from_cli(parsed_args))
    with backup_output_dir(parsed_args.output_dir):
        return driver.generate(parsed_args.input_path, parsed_args.output_dir, parsed_args.languages)


def main(args: list[str] | None = None) -> int:
    """Generate client code from an OpenAPI specification."""
    parsed_args = parse_command_line_args(args)
    configure_logging(verbose=parsed_args.verbose)

    try:
        generated_files = run_generate(parsed_args)
    except GeneratorError as e:
        print(f"Error: {e.describe()}", file=sys.stderr)
        if parsed_args.verbose:
            traceback.print_exc()
        return e.exit_code
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if parsed_args.verbose:
            traceback.print_exc()
        return EXIT_GENERATION_ERROR

    if parsed_args.verbose:
        print_generation_summary(files=generated_files, output_dir=parsed_args.output_dir)
    else:
        print(f"Client generated successfully in {parsed_args.output_dir}")
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
