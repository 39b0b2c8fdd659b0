# src/schemagen/schemas/models.py
"""
@brief
Pydantic configuration model for the schemagen document pipeline.

@details
Defines `GeneratorConfig`, the runtime configuration of one pipeline run.
Every field has a default; the CLI overrides individual fields through
its flags and `GeneratorConfig.from_overrides()` turns validation failures
into `ConfigError`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from schemagen.errors import ConfigError

# One JSON pointer segment of the schema table location.
_POINTER_SEGMENT = re.compile(r"[A-Za-z0-9_-]+")
_BASE_PATH_SEPARATORS = re.compile(r"[./]")


class GeneratorConfig(BaseModel):
    """
    @brief
    Runtime configuration of the document pipeline.

    @details
    Controls how annotations are recognized in host documents, where the
    generated schemas are placed, and how output documents are written.
    Unknown fields are rejected so that misspelled options fail loudly.
    """

    model_config = {"extra": "forbid"}

    annotation_key: str = Field(
        "x-schemagen-type",
        min_length=1,
        description="Mapping key marking a node as '<module>#<TypeName>' annotation",
    )
    base_path: str = Field(
        "components/schemas",
        description="Location of generated schemas inside the types document",
    )
    openapi_version: str = Field(
        "3.0.0", pattern=r"^3\.0(\.\d+)?$", description="Version of the types document"
    )
    title_prefix: str = Field(
        "Types for ", description="Prefix added to the host title in the types document"
    )
    concurrency: int = Field(
        10, ge=1, le=64, description="Maximum number of documents processed in parallel"
    )
    line_width: int = Field(140, ge=40, description="Preferred line width of written YAML")

    @field_validator("annotation_key")
    @classmethod
    def _not_a_reference(cls, value: str) -> str:
        # annotated nodes receive a `$ref`; the annotation must not be overwritten by it
        if value == "$ref":
            raise ValueError("annotation_key cannot be '$ref'")
        return value

    @field_validator("base_path")
    @classmethod
    def _pointer_segments(cls, value: str) -> str:
        """
        @brief
        Require a base path that is both a nesting path and a `$ref` pointer.

        @details
        The same parts nest the generated table in the types document and
        form the `#/...` pointer written into host documents, so each part
        must be a plain pointer segment (no `~`, `#`, spaces or escapes).
        """
        parts = [part for part in _BASE_PATH_SEPARATORS.split(value) if part]
        if not parts:
            raise ValueError("base_path needs at least one segment, e.g. components/schemas")
        for part in parts:
            if not _POINTER_SEGMENT.fullmatch(part):
                raise ValueError(f"base_path segment {part!r} is not a plain JSON pointer segment")
        return value

    @property
    def ref_path(self) -> str:
        """Base path as a JSON pointer, e.g. `/components/schemas`."""
        return "/" + "/".join(part for part in _BASE_PATH_SEPARATORS.split(self.base_path) if part)

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Any]) -> GeneratorConfig:
        """
        @brief
        Defaults updated with the options given on the command line.

        @details
        `None` values mean "not given" and keep the default.

        @raises
            ConfigError
                Raised when an option is unknown or out of bounds.
        """
        given = {key: value for key, value in overrides.items() if value is not None}
        try:
            return cls(**given)
        except ValidationError as e:
            raise ConfigError(
                message=f"Invalid configuration: {e}",
                source="GeneratorConfig.from_overrides",
                suggested_action="Check the command line options against --help.",
            ) from e


__all__ = ["GeneratorConfig"]
