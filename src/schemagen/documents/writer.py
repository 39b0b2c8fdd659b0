# src/schemagen/documents/writer.py
from __future__ import annotations

import logging
import os
import re
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from schemagen.documents.types import WritableFile
from schemagen.documents.yaml_rules import DocumentDumper
from schemagen.errors import DocumentError
from schemagen.generator.openapi_generator import generate_schemas
from schemagen.schemas.models import GeneratorConfig
from schemagen.typemodel.descriptors import BaseType

logger = logging.getLogger(__name__)

_YAML_SUFFIX = re.compile(r"\.(yaml|yml)$")


def types_file_name(filename: str) -> str:
    """
    @brief
    Name of the types document generated next to a host document.

    @details
    `api.yaml` becomes `api.types.yaml` and `api.yml` becomes `api.types.yml`.

    @raises
        DocumentError
            Raised for other extensions, which would make the types document
            overwrite its host.
    """
    if not _YAML_SUFFIX.search(filename):
        raise DocumentError(
            message=f"Cannot derive a types file name for {filename}",
            source="writer.types_file_name",
            suggested_action="Keep annotated documents in .yaml or .yml files.",
        )
    return _YAML_SUFFIX.sub(r".types.\1", filename)


def types_document(
    api: Mapping[str, Any], types: Mapping[str, BaseType], config: GeneratorConfig
) -> dict[str, Any]:
    """
    @brief
    Schema-only document holding the generated schemas of a host document.

    @details
    Keeps the host `info` block with a prefixed title, declares no paths,
    and places the schemas under `config.base_path`.

    @raises
        GenerationError
            Raised when a type cannot be converted.
    """
    info = dict(api.get("info") or {})
    info["title"] = f"{config.title_prefix}{info.get('title', '')}"
    return {
        "openapi": config.openapi_version,
        "info": info,
        "paths": {},
        **generate_schemas(config.base_path, types),
    }


def dump_yaml(contents: Mapping[str, Any], line_width: int = 140) -> str:
    return yaml.dump(
        contents,
        Dumper=DocumentDumper,
        sort_keys=False,
        width=line_width,
        allow_unicode=True,
        default_flow_style=False,
    )


def write_document(writable: WritableFile, line_width: int = 140) -> Path:
    """
    @brief
    Serialize a document as YAML and replace its file atomically.

    @returns
        Path of the written file.

    @raises
        DocumentError
            On serialization, write, or rename failure.
    """
    path = writable.file
    try:
        text = dump_yaml(writable.contents, line_width)
    except yaml.YAMLError as e:
        raise DocumentError(
            message=f"Unable to serialize {path}: {e}",
            source="writer.write_document",
        ) from e

    path.parent.mkdir(parents=True, exist_ok=True)

    # (1) Temporary file next to the target for atomicity
    fd, tmp_path = tempfile.mkstemp(prefix=path.name + ".", dir=str(path.parent))
    try:
        with open(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except OSError as e:
        # (2) Clean up temp file on error
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise DocumentError(
            message=f"atomic write failed for {path}: {e}",
            source="writer.write_document",
            suggested_action="Check output directory permissions and disk space.",
        ) from e

    logger.info("wrote %s", path)
    return path


__all__ = ["dump_yaml", "types_document", "types_file_name", "write_document"]
