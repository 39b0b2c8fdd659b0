"""Type descriptor model consumed by the schema generator."""

from schemagen.typemodel.builders import (
    array,
    boolean,
    custom,
    int_,
    keyof,
    literal,
    null,
    nullable,
    number,
    object_,
    partial,
    record,
    string,
    union,
    unknown,
    unknown_array,
    unknown_record,
)
from schemagen.typemodel.descriptors import BaseType, is_identifier
from schemagen.typemodel.metadata import openapi_metadata

__all__ = [
    "BaseType",
    "array",
    "boolean",
    "custom",
    "int_",
    "is_identifier",
    "keyof",
    "literal",
    "null",
    "nullable",
    "number",
    "object_",
    "openapi_metadata",
    "partial",
    "record",
    "string",
    "union",
    "unknown",
    "unknown_array",
    "unknown_record",
]
