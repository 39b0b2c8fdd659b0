# scripts/generate_types.py
from __future__ import annotations

import argparse
import logging
import os
import sys
import traceback
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path

from schemagen.documents.annotations import ModuleLoader, collect_type_annotations
from schemagen.documents.discovery import find_spec_files, is_openapi_v3, read_document
from schemagen.documents.types import WritableFile
from schemagen.documents.writer import types_document, types_file_name, write_document
from schemagen.errors import DocumentError, SchemagenError
from schemagen.schemas.models import GeneratorConfig


def _setup_logging(verbose: bool = False) -> None:
    """
    @brief
    Initializes global logging configuration.

    @details
    Sets the default logging level to INFO (DEBUG with --verbose) and
    defines a simple console format.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO, format="[%(levelname)s] %(message)s"
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="schemagen",
        description=(
            "Generate OpenAPI schemas for the types annotated in an OpenAPI document "
            "and in every document it references."
        ),
    )
    parser.add_argument("openapi_file", type=str, help="Path to the main OpenAPI YAML file")
    parser.add_argument(
        "--annotation-key",
        type=str,
        default=None,
        help="Mapping key holding '<module>#<TypeName>' annotations (default: x-schemagen-type)",
    )
    parser.add_argument(
        "--base-path",
        type=str,
        default=None,
        help="Location of the schemas in the types documents (default: components/schemas)",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum number of documents processed in parallel (default: 10)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log discovery details")
    return parser.parse_args(argv)


def _config_from_args(args: argparse.Namespace) -> GeneratorConfig:
    return GeneratorConfig.from_overrides(
        {
            "annotation_key": args.annotation_key,
            "base_path": args.base_path,
            "concurrency": args.concurrency,
        }
    )


def process_file(file: Path, config: GeneratorConfig, loader: ModuleLoader) -> list[WritableFile]:
    """
    @brief
    Collect the annotated types of one document and generate their schemas.

    @details
    (1) Parses the document without resolving references, so that it can be
        written back as close to the original as possible.
    (2) Collects annotations, patching the annotated nodes with `$ref`s.
    (3) Returns the patched document and its types document, or nothing
        when the document holds no annotations.

    @raises
        SchemagenError
            On unsupported documents, bad annotations, or generation failures.
    """
    # (1) Parse
    api = read_document(file)
    if not is_openapi_v3(api):
        raise DocumentError(
            message=f"only supports OpenAPI v3.0: {file}",
            source="scripts.generate_types",
        )

    # (2) Collect
    types = collect_type_annotations(api, file, config, loader)
    if not types:
        return []
    logging.info("found %d schemas in %s", len(types), file)

    # (3) Outputs
    return [
        WritableFile(file=file, contents=api),
        WritableFile(
            file=file.with_name(types_file_name(file.name)),
            contents=types_document(api, types, config),
        ),
    ]


def run_pipeline(openapi_file: Path, config: GeneratorConfig) -> list[Path]:
    """
    @brief
    Generate and write the types documents of a document tree.

    @details
    All documents are processed before anything is written, so that a
    failure in any of them leaves every file on disk untouched.

    @returns
        Paths of the written documents.
    """
    if not os.access(openapi_file, os.R_OK):
        raise DocumentError(
            message=f"Cannot read {openapi_file}",
            source="scripts.generate_types",
            suggested_action="Supply the path to an OpenAPI yaml file as first argument.",
        )

    # (1) Discover referenced documents
    files = find_spec_files(openapi_file)
    loader = ModuleLoader()

    # (2) Process every document; collect the writes
    with ThreadPoolExecutor(max_workers=config.concurrency) as pool:
        pending = list(pool.map(partial(process_file, config=config, loader=loader), files))

    # (3) Safe to write now that every document was processed
    writes = [writable for per_file in pending for writable in per_file]
    with ThreadPoolExecutor(max_workers=config.concurrency) as pool:
        return list(pool.map(partial(write_document, line_width=config.line_width), writes))


def main(argv: list[str] | None = None) -> int:
    """
    @brief
    CLI entry point.

    @details
    Returns numeric exit codes suitable for shell integration:
      0 – success
      1 – controlled failure (config/document/annotation/generation)
      2 – unexpected crash
    """
    args = _parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = _config_from_args(args)
        written = run_pipeline(Path(args.openapi_file), config)
        logging.info("Generated %d file(s)", len(written))
        return 0

    except SchemagenError as e:
        logging.error(str(e))
        return 1
    except Exception:
        logging.error("Unexpected error occurred:")
        traceback.print_exc()
        return 2


if __name__ == "__main__":
    sys.exit(main())
