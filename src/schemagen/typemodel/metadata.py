# src/schemagen/typemodel/metadata.py
"""
@brief
OpenAPI metadata overlay for type descriptors.

@details
`openapi_metadata()` attaches descriptive fields to a descriptor without
changing its shape. Schema generators overlay these fields onto the
schema they synthesize, with the metadata winning on conflict.
Property overrides are applied one level down, to the schemas of the
named properties of an object type.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ValidationError

from schemagen.errors import MetadataError
from schemagen.typemodel.descriptors import BaseType, ObjectType


class SchemaMetadata(BaseModel):
    """
    @brief
    Descriptive schema fields that may be attached to a type.

    @details
    Only fields that do not alter the validated shape are accepted.
    Fields never set by the caller are left out of the overlay.
    """

    model_config = {"extra": "forbid"}

    description: str | None = None
    deprecated: bool | None = None
    format: str | None = None
    xml: dict[str, Any] | None = None
    example: Any = None


@dataclass(frozen=True)
class OpenApiMetadata:
    """Overlay stored on a descriptor: top-level fields and per-property fields."""

    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, dict[str, Any]] = field(default_factory=dict)


def _validated(payload: Mapping[str, Any], source: str) -> dict[str, Any]:
    try:
        return SchemaMetadata(**payload).model_dump(exclude_unset=True)
    except ValidationError as e:
        raise MetadataError(
            message=f"Invalid OpenAPI metadata: {e}",
            source=source,
            suggested_action="Use only description, deprecated, format, xml and example.",
        ) from e


def openapi_metadata(
    type: BaseType,
    metadata: Mapping[str, Any],
    properties: Mapping[str, Mapping[str, Any]] | None = None,
) -> BaseType:
    """
    @brief
    Add or override OpenAPI fields of a type.

    @details
    (1) Validates the top-level fields.
    (2) Validates the per-property fields, which are only allowed on object
        types and only for properties the type declares.
    (3) Stores the overlay on the descriptor, replacing any earlier one.

    @returns
        The same descriptor, for use in assignments.

    @raises
        MetadataError
            Raised on unknown fields or property overrides that do not fit the type.
    """
    # (1) Top-level metadata
    top = _validated(metadata, "openapi_metadata")

    # (2) Property metadata
    props: dict[str, dict[str, Any]] = {}
    if properties:
        if not isinstance(type, ObjectType):
            raise MetadataError(
                message=f"Property metadata requires an object type, got {type.name}",
                source="openapi_metadata",
            )
        for prop, payload in properties.items():
            if prop not in type.props:
                raise MetadataError(
                    message=f"Type {type.name} has no property {prop}",
                    source="openapi_metadata",
                    suggested_action=f"Use one of: {', '.join(type.props)}",
                )
            props[prop] = _validated(payload, f"openapi_metadata[{prop}]")

    # (3) Attach
    type.openapi_metadata = OpenApiMetadata(metadata=top, properties=props)
    return type


__all__ = ["OpenApiMetadata", "SchemaMetadata", "openapi_metadata"]
