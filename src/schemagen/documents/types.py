# src/schemagen/documents/types.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class WritableFile:
    """
    Document produced by the pipeline, written only after every document
    was processed successfully.

    Fields:
        file: Absolute destination path.
        contents: Document tree to serialize as YAML.
    """

    file: Path
    contents: dict[str, Any]
