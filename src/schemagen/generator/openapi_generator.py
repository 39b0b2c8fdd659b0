# src/schemagen/generator/openapi_generator.py
"""
@brief
Conversion of type descriptors to OpenAPI 3.0 schema objects.

@details
`generate_schemas()` runs one `OpenApiDefinitionsGenerator` over a set of
named top-level types. The generator visits every reachable descriptor
once, hoists descriptors with identifier-like names into a table of named
schemas referenced through `$ref`, and inlines anonymous shapes.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

from schemagen.errors import (
    GenerationError,
    MetadataConflictError,
    UnrepresentableConstraintError,
    UnsupportedTypeError,
)
from schemagen.typemodel.descriptors import (
    ArrayType,
    BaseType,
    BooleanType,
    CustomType,
    KeyofType,
    LiteralType,
    NumberType,
    ObjectType,
    PropInfo,
    RecordType,
    StringType,
    UnionType,
    UnknownArrayType,
    UnknownRecordType,
    UnknownType,
    is_identifier,
    same_literal,
)

logger = logging.getLogger(__name__)

Schema = dict[str, Any]
TypeDefs = Mapping[str, BaseType | None]

SEP = re.compile(r"[./]")

# Compiled str patterns always carry re.UNICODE.
_IMPLICIT_FLAGS = re.UNICODE


def generate_schemas(base_path: str, types: TypeDefs) -> dict[str, Any]:
    """
    @brief
    Convert named types to OpenAPI schemas nested under `base_path`.

    @details
    (1) Splits the base path on `.` and `/`; the parts form both the
        `$ref` prefix (`#/components/schemas`) and the nesting of the result.
    (2) Converts all types with a single generator so that shared types
        are emitted once and names stay unique across the whole set.
    (3) Nests the schema table under the base path parts.

    @params
        base_path : str
            Location of the schema table in the target document, e.g.
            `components/schemas`. An empty path returns the bare table.
        types : Mapping[str, BaseType | None]
            Top-level types by the name they must be published under.

    @returns
        `{"components": {"schemas": {name: schema}}}` for the example path.

    @raises
        GenerationError
            Raised when any reachable type cannot be converted.
    """
    # (1) Reference prefix from base path
    parts = [part for part in SEP.split(base_path) if part]
    generator = OpenApiDefinitionsGenerator("/".join(["#", *parts]), types)

    # (2) Single run over all top-level types
    generator.process_types()

    # (3) Nest the table under the path
    result: dict[str, Any] = generator.schemas
    for part in reversed(parts):
        result = {part: result}
    return result


class OpenApiDefinitionsGenerator:
    """
    @brief
    Visitor converting type descriptors to OpenAPI schema objects.

    @details
    Holds the state of one generation run:
        - `schemas`: the named schemas produced so far
        - a memo from descriptor identity to its schema or `$ref` stub
        - the stack of descriptors being converted, for error reporting
    An instance must not be reused for a second run.
    """

    def __init__(self, base_path: str, top_level_types: TypeDefs) -> None:
        self.base_path = base_path
        self.schemas: dict[str, Schema] = {}
        self._top_level_names: dict[BaseType, str] = {}
        self._top_level_types: dict[str, BaseType] = {}
        self._type_stack: list[BaseType] = []
        self._available_definitions: dict[BaseType, Schema] = {}
        self._reserved_names: dict[BaseType, str] = {}
        for name, type in top_level_types.items():
            if type is not None:
                self._top_level_names[type] = name
                self._top_level_types[name] = type

    # ------------------------------
    # Category visitors
    # ------------------------------
    def visit_array_type(self, type: ArrayType) -> Schema:
        return self.with_metadata(
            type,
            {
                "title": self.custom_name(type),
                "type": "array",
                "items": self.process_type(type.element_type),
                "minItems": type.config.min_length,
                "maxItems": type.config.max_length,
            },
        )

    def visit_boolean_type(self, type: BooleanType) -> Schema:
        return self.with_metadata(type, {"title": self.custom_name(type), "type": "boolean"})

    def visit_object_like_type(self, type: ObjectType) -> Schema:
        """
        @brief
        Object schema with one property schema per declared property.

        @details
        Property metadata is merged into the property schema. A property
        whose schema is a `$ref` cannot take extra fields, so metadata for
        it is rejected rather than dropped.

        @raises
            MetadataConflictError
                Raised when property metadata targets a `$ref` schema.
        """
        overrides = type.openapi_metadata.properties if type.openapi_metadata else {}
        properties: dict[str, Schema] = {}
        required: list[str] = []
        for prop, prop_type in type.props.items():
            schema = self.process_type(prop_type)
            metadata = overrides.get(prop)
            if metadata:
                if "$ref" in schema:
                    raise MetadataConflictError(
                        message=(
                            f"Metadata cannot be added to a $ref property {prop}, "
                            f"add it to the referenced schema instead: {metadata!r}"
                        ),
                        source="OpenApiDefinitionsGenerator.visit_object_like_type",
                        suggested_action=f"Attach the metadata to type {prop_type.name}.",
                    )
                schema = {**schema, **metadata}
            properties[prop] = schema
            if type.props_info.get(prop, PropInfo(partial=True)).partial is False:
                required.append(prop)

        return self.with_metadata(
            type,
            {
                "title": self.custom_name(type),
                "type": "object",
                "properties": properties,
                "required": required or None,
            },
        )

    def visit_keyof_type(self, type: KeyofType) -> Schema:
        return self.with_metadata(
            type,
            {"title": self.custom_name(type), "type": "string", "enum": list(type.keys)},
        )

    def visit_literal_type(self, type: LiteralType) -> Schema:
        if type.basic_type in ("number", "string", "boolean"):
            return self.with_metadata(
                type,
                {
                    "title": self.custom_name(type),
                    "type": "integer" if _is_whole_number(type.value) else type.basic_type,
                    "enum": [type.value],
                },
            )
        # null literals are only representable as the nullable member of a union
        raise UnsupportedTypeError(
            message=f"{type.basic_type} literal not supported yet",
            source="OpenApiDefinitionsGenerator.visit_literal_type",
        )

    def visit_number_type(self, type: NumberType) -> Schema:
        config = type.config
        return self.with_metadata(
            type,
            {
                "title": self.custom_name(type),
                "type": "integer" if _is_whole_number(config.multiple_of) else "number",
                "minimum": _first_set(config.min_exclusive, config.min),
                "exclusiveMinimum": True if config.min_exclusive is not None else None,
                "maximum": _first_set(config.max_exclusive, config.max),
                "exclusiveMaximum": True if config.max_exclusive is not None else None,
                "multipleOf": None if config.multiple_of == 1 else config.multiple_of,
            },
        )

    def visit_record_type(self, type: RecordType) -> Schema:
        # TODO: map records to `additionalProperties` once key constraints have a rendition
        raise UnsupportedTypeError(
            message=f"Record types are not supported: {type.name}",
            source="OpenApiDefinitionsGenerator.visit_record_type",
            suggested_action="Use an object type with explicit properties.",
        )

    def visit_string_type(self, type: StringType) -> Schema:
        config = type.config
        pattern = config.pattern
        if pattern is not None and pattern.flags & ~_IMPLICIT_FLAGS:
            raise UnrepresentableConstraintError(
                message="Regular expression flags are not supported in OpenAPI",
                source="OpenApiDefinitionsGenerator.visit_string_type",
                suggested_action=f"Rewrite /{pattern.pattern}/ without flags.",
            )
        return self.with_metadata(
            type,
            {
                "title": self.custom_name(type),
                "type": "string",
                "pattern": pattern.pattern if pattern is not None else None,
                "minLength": config.min_length,
                "maxLength": config.max_length,
                "format": get_format(type),
            },
        )

    def visit_union_type(self, type: UnionType) -> Schema:
        """
        @brief
        Union schema: nullable wrapper, plain boolean, or `oneOf`.

        @details
        (1) A union of `null` and one other type becomes an `allOf` wrapper
            with `nullable: true`; OpenAPI 3.0 cannot mark a `$ref` nullable.
        (2) A union of booleans collapses to `type: boolean`.
        (3) Any other union becomes `oneOf`, with a `discriminator` when
            every discriminating value maps to a referenced member.
        """
        # (1) Nullable wrapper
        null_index = next(
            (
                i
                for i, subtype in enumerate(type.types)
                if isinstance(subtype, LiteralType) and subtype.value is None
            ),
            -1,
        )
        if null_index >= 0 and len(type.types) == 2:
            nulled_type = type.types[1 - null_index]
            return {
                "description": f"Nullable {self.custom_name(nulled_type) or nulled_type.name}",
                "allOf": [self.process_type(nulled_type)],
                "nullable": True,
            }

        # (2) Boolean union
        if type.basic_type == "boolean":
            return self.with_metadata(type, {"title": self.custom_name(type), "type": "boolean"})

        # (3) oneOf, optionally discriminated
        one_of = self.with_metadata(
            type,
            {
                "title": self.custom_name(type),
                "oneOf": [self.process_type(subtype) for subtype in type.types],
            },
        )
        discriminators = type.possible_discriminators
        if len(discriminators) != 1 or len(discriminators[0].path) != 1:
            return one_of

        discriminator = discriminators[0]
        property_name = discriminator.path[0]
        mapping: dict[str, str] = {}
        for value in discriminator.values:
            ref = self._discriminated_ref(type, property_name, value)
            if ref is None:
                return one_of
            mapping[_mapping_key(value)] = ref
        return {
            **one_of,
            "discriminator": {"propertyName": property_name, "mapping": mapping},
        }

    def visit_unknown_type(self, type: UnknownType) -> Schema:
        return self.with_metadata(type, {"title": self.custom_name(type)})

    def visit_unknown_record_type(self, type: UnknownRecordType) -> Schema:
        return self.with_metadata(type, {"title": self.custom_name(type), "type": "object"})

    def visit_unknown_array_type(self, type: UnknownArrayType) -> Schema:
        return self.with_metadata(
            type, {"title": self.custom_name(type), "type": "array", "items": {}}
        )

    def visit_custom_type(self, type: CustomType) -> Schema:
        raise UnsupportedTypeError(
            message=f"Custom types are not supported: {type.name}",
            source="OpenApiDefinitionsGenerator.visit_custom_type",
        )

    # ------------------------------
    # Registry
    # ------------------------------
    def process_type(self, type: BaseType) -> Schema:
        """
        @brief
        Schema for a descriptor, converting it on first use.

        @details
        (1) Returns the memoized schema or `$ref` stub if the type was seen.
        (2) A type re-entered while being converted is recursive; it gets its
            name reserved and is referenced through `$ref`.
        (3) Converts the type, reporting the path of types involved on failure.
        (4) Named types are stored in `schemas` under a unique name and
            memoized as a `$ref` stub; anonymous types are memoized inline.
        """
        # (1) Memo
        result = self._available_definitions.get(type)
        if result is not None:
            return result

        # (2) Recursion
        if type in self._type_stack:
            return self._reserve(type)

        # (3) Conversion
        self._type_stack.append(type)
        try:
            result = type.accept(self)
        except GenerationError:
            raise
        except Exception as e:
            path = [t.name for t in self._type_stack]
            logger.error("Problem with %s:", " / ".join(path))
            raise GenerationError(
                message=f"Problem with {' / '.join(path)}: {e}",
                path=path,
                source="OpenApiDefinitionsGenerator.process_type",
            ) from e
        finally:
            self._type_stack.pop()

        # (4) Registration
        name = self._reserved_names.pop(type, None)
        if name is not None:
            self.schemas[name] = result
            return self._available_definitions[type]

        name = self.custom_name(type)
        if name:
            name = self._unique_name(name, type)
            self.schemas[name] = result
            result = self._ref(name)
        self._available_definitions[type] = result
        return result

    def process_types(self) -> None:
        for type in self._top_level_names:
            self.process_type(type)

    def custom_name(self, type: BaseType) -> str | None:
        """Name to publish a type under, or None for types to inline."""
        name = self._top_level_names.get(type)
        if name:
            return name
        name = type.name
        if not is_identifier(name) or name == type.basic_type or isinstance(type, LiteralType):
            return None
        return name

    def with_metadata(self, type: BaseType, schema: Schema) -> Schema:
        """Drop unset fields and overlay the metadata attached to the type."""
        schema = {key: value for key, value in schema.items() if value is not None}
        if type.openapi_metadata:
            schema.update(type.openapi_metadata.metadata)
        return schema

    def _unique_name(self, name: str, type: BaseType) -> str:
        # top-level names stay with the types published under them
        candidate, i = name, 2
        while candidate in self.schemas or self._top_level_types.get(candidate, type) is not type:
            candidate = f"{name}{i}"
            i += 1
        return candidate

    def _ref(self, name: str) -> Schema:
        return {"$ref": f"{self.base_path}/{name}"}

    def _reserve(self, type: BaseType) -> Schema:
        name = self.custom_name(type)
        if not name:
            raise UnsupportedTypeError(
                message=f"Recursive type {type.name} has no name and cannot be inlined",
                source="OpenApiDefinitionsGenerator.process_type",
                suggested_action="Give the recursive type an identifier-like name.",
            )
        name = self._unique_name(name, type)
        self.schemas[name] = {}
        self._reserved_names[type] = name
        self._available_definitions[type] = self._ref(name)
        return self._available_definitions[type]

    def _discriminated_ref(self, union: UnionType, property_name: str, value: Any) -> str | None:
        for subtype in union.types:
            if not isinstance(subtype, ObjectType):
                continue
            prop = subtype.props.get(property_name)
            if isinstance(prop, LiteralType) and same_literal(prop.value, value):
                return self.process_type(subtype).get("$ref")
        return None


def get_format(type: BaseType) -> str | None:
    """OpenAPI `format` for well-known string types; none are registered yet."""
    return None


def _is_whole_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _first_set(*values: Any) -> Any:
    return next((v for v in values if v is not None), None)


def _mapping_key(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


__all__ = ["OpenApiDefinitionsGenerator", "Schema", "TypeDefs", "generate_schemas"]
