# src/schemagen/typemodel/builders.py
"""
@brief
Declarative constructors for type descriptors.

@details
Module-level instances cover the primitive types (`string`, `number`,
`int_`, `boolean`, `unknown`, ...). Composite constructors derive a
display name from their parts unless one is given, so that anonymous
shapes (`string[]`, `"a" | "b"`, `{ id: int }`) stay recognizable in
error messages while never being mistaken for identifiers.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from schemagen.typemodel.configs import LengthConfig, NumberConfig
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
)

string = StringType(name="string")
number = NumberType(name="number")
int_ = NumberType(name="int", config=NumberConfig(multiple_of=1))
boolean = BooleanType(name="boolean")
unknown = UnknownType(name="unknown")
unknown_record = UnknownRecordType(name="Record<string, unknown>")
unknown_array = UnknownArrayType(name="unknown[]")


def _object_name(props: Mapping[str, BaseType], partial: bool) -> str:
    marker = "?" if partial else ""
    return "{ " + ", ".join(f"{k}{marker}: {v.name}" for k, v in props.items()) + " }"


def object_(name: str | None, props: Mapping[str, BaseType]) -> ObjectType:
    """Object type whose properties are all mandatory."""
    return ObjectType(
        name=name or _object_name(props, partial=False),
        props=dict(props),
        props_info={k: PropInfo(partial=False) for k in props},
    )


def partial(name: str | None, props: Mapping[str, BaseType]) -> ObjectType:
    """Object type whose properties are all optional."""
    return ObjectType(
        name=name or _object_name(props, partial=True),
        props=dict(props),
        props_info={k: PropInfo(partial=True) for k in props},
    )


def array(
    element_type: BaseType,
    name: str | None = None,
    min_length: int | None = None,
    max_length: int | None = None,
) -> ArrayType:
    return ArrayType(
        name=name or f"{element_type.name}[]",
        element_type=element_type,
        config=LengthConfig(min_length=min_length, max_length=max_length),
    )


def literal_name(value: Any) -> str:
    return json.dumps(value)


def literal(value: Any, name: str | None = None) -> LiteralType:
    return LiteralType(name=name or literal_name(value), value=value)


null = literal(None)


def keyof(keys: Mapping[str, Any] | Iterable[str], name: str | None = None) -> KeyofType:
    """String type accepting the keys of `keys`."""
    key_map = dict(keys) if isinstance(keys, Mapping) else dict.fromkeys(keys)
    return KeyofType(
        name=name or " | ".join(literal_name(k) for k in key_map),
        keys=key_map,
    )


def union(*types: BaseType, name: str | None = None) -> UnionType:
    if not types:
        raise ValueError("a union needs at least one member type")
    return UnionType(name=name or " | ".join(t.name for t in types), types=tuple(types))


def nullable(type: BaseType) -> UnionType:
    """Union of `type` and the `null` literal."""
    return union(type, null)


def record(key_type: BaseType, value_type: BaseType, name: str | None = None) -> RecordType:
    return RecordType(
        name=name or f"Record<{key_type.name}, {value_type.name}>",
        key_type=key_type,
        value_type=value_type,
    )


def custom(name: str, predicate: Any = None, basic_type: str = "mixed") -> CustomType:
    return CustomType(name=name, predicate=predicate, custom_basic_type=basic_type)


__all__ = [
    "array",
    "boolean",
    "custom",
    "int_",
    "keyof",
    "literal",
    "null",
    "nullable",
    "number",
    "object_",
    "partial",
    "record",
    "string",
    "union",
    "unknown",
    "unknown_array",
    "unknown_record",
]
