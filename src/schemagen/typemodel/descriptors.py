# src/schemagen/typemodel/descriptors.py
"""
@brief
Type descriptor model: the closed set of type categories and their visitor.

@details
A descriptor describes the shape and constraints of a value. Descriptors
compose into a graph that may share sub-types and may contain cycles
(an object property can be mutated to point back at its owner).

Descriptors compare and hash by identity: two structurally identical
descriptors are two different types. Consumers walk the graph through
`accept()`, which calls the category-specific method of a `Visitor`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Protocol, TypeVar

from schemagen.typemodel.configs import LengthConfig, NumberConfig, StringConfig

if TYPE_CHECKING:
    from schemagen.typemodel.metadata import OpenApiMetadata

R = TypeVar("R", covariant=True)

IDENTIFIER = re.compile(r"\w+", re.ASCII)


class Visitor(Protocol, Generic[R]):
    """Category callbacks invoked by `BaseType.accept()`."""

    def visit_array_type(self, type: ArrayType) -> R: ...

    def visit_boolean_type(self, type: BooleanType) -> R: ...

    def visit_object_like_type(self, type: ObjectType) -> R: ...

    def visit_keyof_type(self, type: KeyofType) -> R: ...

    def visit_literal_type(self, type: LiteralType) -> R: ...

    def visit_number_type(self, type: NumberType) -> R: ...

    def visit_record_type(self, type: RecordType) -> R: ...

    def visit_string_type(self, type: StringType) -> R: ...

    def visit_union_type(self, type: UnionType) -> R: ...

    def visit_unknown_type(self, type: UnknownType) -> R: ...

    def visit_unknown_record_type(self, type: UnknownRecordType) -> R: ...

    def visit_unknown_array_type(self, type: UnknownArrayType) -> R: ...

    def visit_custom_type(self, type: CustomType) -> R: ...


@dataclass(eq=False, kw_only=True)
class BaseType:
    """
    @brief
    Common part of every type descriptor.

    @details
    `name` is a display name. Only names made of word characters are
    treated as identifiers by schema generators; names such as
    `string[]` or `"a" | "b"` describe anonymous shapes.
    `openapi_metadata` holds the overlay attached with `openapi_metadata()`.
    """

    BASIC_TYPE: ClassVar[str] = "mixed"

    name: str
    openapi_metadata: OpenApiMetadata | None = field(default=None, repr=False)

    @property
    def basic_type(self) -> str:
        return self.BASIC_TYPE

    def accept(self, visitor: Visitor[R]) -> R:
        raise NotImplementedError(f"{type(self).__name__} does not implement accept()")


@dataclass(eq=False, kw_only=True)
class ArrayType(BaseType):
    BASIC_TYPE: ClassVar[str] = "array"

    element_type: BaseType
    config: LengthConfig = field(default_factory=LengthConfig)

    def accept(self, visitor: Visitor[R]) -> R:
        return visitor.visit_array_type(self)

    def with_config(self, name: str, **config: Any) -> ArrayType:
        """Return a named copy with additional length bounds."""
        merged = LengthConfig(**{**dict(self.config), **config})
        return ArrayType(name=name, element_type=self.element_type, config=merged)


@dataclass(eq=False, kw_only=True)
class BooleanType(BaseType):
    BASIC_TYPE: ClassVar[str] = "boolean"

    def accept(self, visitor: Visitor[R]) -> R:
        return visitor.visit_boolean_type(self)


@dataclass(frozen=True)
class PropInfo:
    """Per-property flags of an object type."""

    partial: bool


@dataclass(eq=False, kw_only=True)
class ObjectType(BaseType):
    """
    @brief
    Object-like type with a fixed set of properties.

    @details
    `props` maps property names to their descriptors, `props_info` marks
    which of them may be omitted. Both mappings keep definition order.
    """

    BASIC_TYPE: ClassVar[str] = "object"

    props: dict[str, BaseType] = field(default_factory=dict)
    props_info: dict[str, PropInfo] = field(default_factory=dict)

    def accept(self, visitor: Visitor[R]) -> R:
        return visitor.visit_object_like_type(self)

    def with_optional(self, props: Mapping[str, BaseType], name: str | None = None) -> ObjectType:
        """Return a copy extended with optional properties."""
        return ObjectType(
            name=name or self.name,
            props={**self.props, **props},
            props_info={**self.props_info, **{k: PropInfo(partial=True) for k in props}},
        )

    def with_required(self, props: Mapping[str, BaseType], name: str | None = None) -> ObjectType:
        """Return a copy extended with mandatory properties."""
        return ObjectType(
            name=name or self.name,
            props={**self.props, **props},
            props_info={**self.props_info, **{k: PropInfo(partial=False) for k in props}},
        )


@dataclass(eq=False, kw_only=True)
class KeyofType(BaseType):
    """String type restricted to the keys of a mapping."""

    BASIC_TYPE: ClassVar[str] = "string"

    keys: dict[str, Any]

    def accept(self, visitor: Visitor[R]) -> R:
        return visitor.visit_keyof_type(self)


@dataclass(eq=False, kw_only=True)
class LiteralType(BaseType):
    value: Any

    @property
    def basic_type(self) -> str:
        return basic_type_of(self.value)

    def accept(self, visitor: Visitor[R]) -> R:
        return visitor.visit_literal_type(self)


@dataclass(eq=False, kw_only=True)
class NumberType(BaseType):
    BASIC_TYPE: ClassVar[str] = "number"

    config: NumberConfig = field(default_factory=NumberConfig)

    def accept(self, visitor: Visitor[R]) -> R:
        return visitor.visit_number_type(self)

    def with_config(self, name: str, **config: Any) -> NumberType:
        """Return a named copy with additional numeric constraints."""
        merged = NumberConfig(**{**dict(self.config), **config})
        return NumberType(name=name, config=merged)


@dataclass(eq=False, kw_only=True)
class RecordType(BaseType):
    """Open-ended mapping from keys of one type to values of another."""

    BASIC_TYPE: ClassVar[str] = "object"

    key_type: BaseType
    value_type: BaseType

    def accept(self, visitor: Visitor[R]) -> R:
        return visitor.visit_record_type(self)


@dataclass(eq=False, kw_only=True)
class StringType(BaseType):
    BASIC_TYPE: ClassVar[str] = "string"

    config: StringConfig = field(default_factory=StringConfig)

    def accept(self, visitor: Visitor[R]) -> R:
        return visitor.visit_string_type(self)

    def with_config(self, name: str, **config: Any) -> StringType:
        """Return a named copy with additional string constraints."""
        merged = StringConfig(**{**dict(self.config), **config})
        return StringType(name=name, config=merged)


@dataclass(frozen=True)
class PossibleDiscriminator:
    """Property path whose literal values tell the members of a union apart."""

    path: tuple[str, ...]
    values: tuple[Any, ...]


@dataclass(eq=False, kw_only=True)
class UnionType(BaseType):
    """
    @brief
    Union of member types.

    @details
    The basic type is shared by all members, or `mixed` when they differ.
    `possible_discriminators` lists every property path at which all
    members are object types holding literals with pairwise distinct values.
    """

    types: tuple[BaseType, ...]

    @property
    def basic_type(self) -> str:
        basic_types = {t.basic_type for t in self.types}
        return basic_types.pop() if len(basic_types) == 1 else "mixed"

    @property
    def possible_discriminators(self) -> list[PossibleDiscriminator]:
        return _find_discriminators(self.types, ())

    def accept(self, visitor: Visitor[R]) -> R:
        return visitor.visit_union_type(self)


@dataclass(eq=False, kw_only=True)
class UnknownType(BaseType):
    def accept(self, visitor: Visitor[R]) -> R:
        return visitor.visit_unknown_type(self)


@dataclass(eq=False, kw_only=True)
class UnknownRecordType(BaseType):
    BASIC_TYPE: ClassVar[str] = "object"

    def accept(self, visitor: Visitor[R]) -> R:
        return visitor.visit_unknown_record_type(self)


@dataclass(eq=False, kw_only=True)
class UnknownArrayType(BaseType):
    BASIC_TYPE: ClassVar[str] = "array"

    def accept(self, visitor: Visitor[R]) -> R:
        return visitor.visit_unknown_array_type(self)


@dataclass(eq=False, kw_only=True)
class CustomType(BaseType):
    """Consumer-defined type category, validated by its own `predicate`."""

    predicate: Any = None
    custom_basic_type: str = "mixed"

    @property
    def basic_type(self) -> str:
        return self.custom_basic_type

    def accept(self, visitor: Visitor[R]) -> R:
        return visitor.visit_custom_type(self)


def basic_type_of(value: Any) -> str:
    """Basic type of a literal value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def is_identifier(name: str) -> bool:
    return IDENTIFIER.fullmatch(name) is not None


def same_literal(a: Any, b: Any) -> bool:
    """Literal equality that keeps `True`, `1` and `1.0` apart by basic type."""
    return basic_type_of(a) == basic_type_of(b) and a == b


def _literal_values(type: BaseType) -> list[Any] | None:
    if isinstance(type, LiteralType):
        return [type.value]
    if isinstance(type, UnionType) and all(isinstance(t, LiteralType) for t in type.types):
        return [t.value for t in type.types]  # type: ignore[attr-defined]
    return None


def _all_distinct(values: Iterable[Any]) -> bool:
    seen: list[Any] = []
    for value in values:
        if any(same_literal(value, other) for other in seen):
            return False
        seen.append(value)
    return True


def _find_discriminators(
    types: Sequence[BaseType], path: tuple[str, ...]
) -> list[PossibleDiscriminator]:
    """
    @brief
    Collect discriminating property paths of a set of union members.

    @details
    (1) Only object members can be discriminated; any other member ends the search.
    (2) A property shared by all members whose types are literals with
        distinct values is a discriminator.
    (3) A property shared by all members whose types are objects is
        searched recursively, producing nested paths.
    """
    if len(types) < 2 or not all(isinstance(t, ObjectType) for t in types):
        return []
    objects: list[ObjectType] = list(types)  # type: ignore[arg-type]

    found: list[PossibleDiscriminator] = []
    for key in objects[0].props:
        if not all(key in t.props for t in objects[1:]):
            continue
        prop_types = [t.props[key] for t in objects]
        member_values = [_literal_values(p) for p in prop_types]
        if all(v is not None for v in member_values):
            flat = [value for values in member_values for value in values]  # type: ignore[union-attr]
            if _all_distinct(flat):
                found.append(PossibleDiscriminator(path=path + (key,), values=tuple(flat)))
        else:
            found.extend(_find_discriminators(prop_types, path + (key,)))
    return found


__all__ = [
    "ArrayType",
    "BaseType",
    "BooleanType",
    "CustomType",
    "KeyofType",
    "LiteralType",
    "NumberType",
    "ObjectType",
    "PossibleDiscriminator",
    "PropInfo",
    "RecordType",
    "StringType",
    "UnionType",
    "UnknownArrayType",
    "UnknownRecordType",
    "UnknownType",
    "Visitor",
    "basic_type_of",
    "is_identifier",
    "same_literal",
]
