# src/schemagen/documents/discovery.py
from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml

from schemagen.documents.yaml_rules import load_document_text
from schemagen.errors import DocumentError

logger = logging.getLogger(__name__)


def read_document(path: Path) -> dict[str, Any]:
    """
    @brief
    Parse a host document (YAML or JSON) without resolving references.

    @details
    The parsed tree is the one that gets patched and written back, so
    `$ref` values are kept exactly as found and plain scalars follow the
    YAML 1.2 core rules (`yes` stays a string).

    @raises
        DocumentError
            Raised when the file is missing, unreadable, malformed, or not a mapping.
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            data = load_document_text(f)
    except yaml.YAMLError as e:
        raise DocumentError(
            message=f"Unable to parse {path}: {e}",
            source="discovery.read_document",
            suggested_action="Fix the YAML/JSON syntax of the document.",
        ) from e
    except OSError as e:
        raise DocumentError(
            message=f"Unable to read {path}: {e}",
            source="discovery.read_document",
            suggested_action="Check that the file exists and is readable.",
        ) from e

    if not isinstance(data, Mapping):
        raise DocumentError(
            message=f"Document root must be a mapping: {path}",
            source="discovery.read_document",
        )
    return dict(data)


def is_openapi_v3(document: Mapping[str, Any]) -> bool:
    version = document.get("openapi")
    return isinstance(version, str) and (version == "3.0" or version.startswith("3.0."))


def iter_refs(node: Any) -> Iterator[str]:
    """Yield every string `$ref` value in a document tree."""
    if isinstance(node, list):
        for item in node:
            yield from iter_refs(item)
    elif isinstance(node, Mapping):
        for key, value in node.items():
            if key == "$ref" and isinstance(value, str):
                yield value
            else:
                yield from iter_refs(value)


def local_ref_target(document_path: Path, ref: str) -> Path | None:
    """File a `$ref` points at, or None for internal refs and URLs."""
    file_part = ref.split("#", 1)[0]
    if not file_part or "://" in file_part:
        return None
    return (document_path.parent / file_part).resolve()


def find_spec_files(main: Path) -> list[Path]:
    """
    @brief
    Absolute paths of the main document and every document it references.

    @details
    (1) Starts from the main document.
    (2) Follows every `$ref` with a file part, relative to the referencing
        document; references over http(s) are not followed.
    (3) Visits each file once and returns them in discovery order.

    @raises
        DocumentError
            Raised when a referenced document cannot be read.
    """
    # (1) Queue seeded with the main document
    main = main.resolve()
    queue: deque[Path] = deque([main])
    seen: set[Path] = set()
    files: list[Path] = []

    # (2) Breadth-first walk over referenced files
    while queue:
        path = queue.popleft()
        if path in seen:
            continue
        seen.add(path)
        files.append(path)
        for ref in iter_refs(read_document(path)):
            target = local_ref_target(path, ref)
            if target is not None and target not in seen:
                logger.debug("%s references %s", path, target)
                queue.append(target)

    # (3) Discovery order, main document first
    return files


__all__ = ["find_spec_files", "is_openapi_v3", "iter_refs", "local_ref_target", "read_document"]
