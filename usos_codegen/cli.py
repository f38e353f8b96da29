#!/usr/bin/env python3
"""Command-line interface for the USOS API client generator."""

from __future__ import annotations

import argparse
import contextlib
import json
import logging
import shutil
import sys
import tempfile
import traceback
from collections.abc import Generator
from pathlib import Path

from dotenv import load_dotenv

from usos_codegen.generator.template_engine import (
    DEFAULT_PACKAGE_NAME,
    GeneratedItems,
    PythonCodeGenerator,
    PythonTemplateEngine,
)
from usos_codegen.reference import InvalidReferenceError, MethodReference
from usos_codegen.traversal import REQUEST_DELAY, ReferenceTraversal
from usos_codegen.utils.file_utils import write_files_to_disk
from usos_core.client import UsosClient, UsosUri
from usos_core.errors import UsosClientError

# Exit codes for better error reporting
EXIT_SUCCESS = 0
EXIT_API_ERROR = 1
EXIT_INVALID_REFERENCE = 2
EXIT_GENERATION_ERROR = 3


def parse_command_line_args(args: list[str] | None = None) -> argparse.Namespace:
    """Create and configure the command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Generate a Python client from the USOS API reference",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s services/apisrv
  %(prog)s services/apisrv services/courses/user --output ./client --items functions
  %(prog)s --reference-file method.json --verbose
        """,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Module or method paths to generate, e.g. services/apisrv/now",
        metavar="PATH",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path("./generated"),
        help="Output directory for generated files (default: %(default)s)",
        dest="output_dir",
    )
    parser.add_argument(
        "--package-name",
        "-p",
        default=DEFAULT_PACKAGE_NAME,
        help="Name for the generated Python package (default: %(default)s)",
        dest="package_name",
    )
    parser.add_argument(
        "--items",
        "-i",
        type=GeneratedItems,
        choices=list(GeneratedItems),
        default=GeneratedItems.BOTH,
        help="Generate output classes, functions or both (default: %(default)s)",
    )
    parser.add_argument(
        "--base-url",
        "-b",
        default=UsosUri.origin(),
        help="Origin of the USOS installation (default: %(default)s)",
        dest="base_url",
    )
    parser.add_argument(
        "--reference-file",
        "-r",
        type=Path,
        action="append",
        default=[],
        help="JSON file with saved method references, instead of fetching them (repeatable)",
        dest="reference_files",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=REQUEST_DELAY,
        help="Seconds to wait between method reference requests (default: %(default)s)",
    )
    parser.add_argument(
        "--template-dir",
        "-t",
        type=Path,
        help="Custom template directory (optional)",
        dest="template_dir",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    parsed_args = parser.parse_args(args)

    if not parsed_args.paths and not parsed_args.reference_files:
        parser.error("at least one PATH or --reference-file is required")

    # Validate reference files exist
    for reference_file in parsed_args.reference_files:
        if not reference_file.exists():
            parser.error(f"Reference file not found: {reference_file}")

    return parsed_args


def print_generation_summary(*, files: dict[Path, str], output_dir: Path) -> None:
    """Print summary of generated files."""
    print(f"Generated {len(files)} files:")
    for file_path in sorted(files.keys()):
        print(f"  {file_path}")
    print(f"\nPython client generated successfully in {output_dir}")


@contextlib.contextmanager
def backup_and_clean_output_dir(output_dir: Path) -> Generator[None, None, None]:
    """Back up and clean the output directory, restoring it if generation fails."""
    backup_dir = None
    if output_dir.exists() and any(output_dir.iterdir()):
        backup_dir = Path(tempfile.mkdtemp())
        shutil.copytree(output_dir, backup_dir, dirs_exist_ok=True)

    if output_dir.exists():
        shutil.rmtree(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    try:
        yield
    except Exception:
        if backup_dir:
            print("Error: Generation failed. Restoring original content.", file=sys.stderr)
            if output_dir.exists():
                shutil.rmtree(output_dir)
            shutil.copytree(backup_dir, output_dir, dirs_exist_ok=True)
        raise
    finally:
        if backup_dir:
            shutil.rmtree(backup_dir)


def collect_references(
    *,
    paths: list[str],
    reference_files: list[Path],
    base_url: str,
    delay: float,
    verbose: bool,
) -> list[MethodReference]:
    """Load saved references and fetch the ones below ``paths`` from the API."""
    references: list[MethodReference] = []
    for reference_file in reference_files:
        references.extend(MethodReference.from_file(reference_file))

    if paths:
        with UsosClient(base_url) as client:
            traversal = ReferenceTraversal(client, request_delay=delay)
            for reference in traversal.collect(paths):
                if verbose:
                    print(f"{reference.name}: success")
                references.append(reference)
            if verbose:
                print(f"Visited {len(traversal.modules_seen)} modules")

    return references


def main(args: list[str] | None = None) -> int:
    """Generate a Python client from the USOS API reference."""
    parsed_args = parse_command_line_args(args)
    if parsed_args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    load_dotenv()

    try:
        with backup_and_clean_output_dir(parsed_args.output_dir):
            references = collect_references(
                paths=parsed_args.paths,
                reference_files=parsed_args.reference_files,
                base_url=parsed_args.base_url,
                delay=parsed_args.delay,
                verbose=parsed_args.verbose,
            )

            generator = PythonCodeGenerator(
                PythonTemplateEngine(parsed_args.template_dir) if parsed_args.template_dir else None
            )
            generated_files = generator.generate_client(
                references,
                parsed_args.output_dir,
                parsed_args.package_name,
                parsed_args.items,
            )

            write_files_to_disk(generated_files)

            if parsed_args.verbose:
                print_generation_summary(files=generated_files, output_dir=parsed_args.output_dir)
            else:
                print(f"Python client generated successfully in {parsed_args.output_dir}")

        return EXIT_SUCCESS

    except (InvalidReferenceError, json.JSONDecodeError) as e:
        print(f"Error: Invalid method reference: {e}", file=sys.stderr)
        return EXIT_INVALID_REFERENCE
    except UsosClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_API_ERROR
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if parsed_args.verbose:
            traceback.print_exc()
        return EXIT_GENERATION_ERROR


if __name__ == "__main__":
    sys.exit(main())
