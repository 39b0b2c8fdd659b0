import pytest

from schemagen.errors import GenerationError, UnsupportedTypeError
from schemagen.generator.openapi_generator import generate_schemas
from schemagen.typemodel import (
    boolean,
    int_,
    literal,
    null,
    nullable,
    object_,
    openapi_metadata,
    string,
    union,
)

REF = "#/components/schemas"


def _schemas(types):
    return generate_schemas("components/schemas", types)["components"]["schemas"]


def _animals():
    Cat = object_("Cat", {"kind": literal("cat"), "meows": boolean})
    Dog = object_("Dog", {"kind": literal("dog"), "barks": boolean})
    return Cat, Dog


# --------------------------
# nullable
# --------------------------


@pytest.mark.parametrize("null_first", [False, True])
def test_nullable_named_type_wraps_ref(null_first):
    """
    @brief
    `Foo | null` becomes an `allOf` wrapper around the `$ref`, marked nullable.

    @details
    OpenAPI 3.0 ignores siblings of `$ref`, so `nullable` cannot sit next
    to the reference itself. Member order does not matter.
    """
    # --- Arrange ---
    Foo = object_("Foo", {"a": string})
    maybe_foo = union(null, Foo) if null_first else nullable(Foo)
    Holder = object_("Holder", {"foo": maybe_foo})

    # --- Act ---
    schemas = _schemas({"Holder": Holder})

    # --- Assert ---
    assert schemas["Holder"]["properties"]["foo"] == {
        "description": "Nullable Foo",
        "allOf": [{"$ref": f"{REF}/Foo"}],
        "nullable": True,
    }
    assert "oneOf" not in schemas["Holder"]["properties"]["foo"]


def test_nullable_anonymous_type_inlines_schema():
    Holder = object_("Holder", {"nick": nullable(string)})

    assert _schemas({"Holder": Holder})["Holder"]["properties"]["nick"] == {
        "description": "Nullable string",
        "allOf": [{"type": "string"}],
        "nullable": True,
    }


def test_nullable_with_two_other_members_is_not_collapsed():
    """
    @brief
    Only two-member unions collapse; a wider union keeps the bare `null`
    member, which has no rendition.
    """
    Holder = object_("Holder", {"v": union(null, string, int_)})

    with pytest.raises(GenerationError) as e:
        _schemas({"Holder": Holder})

    assert isinstance(e.value.__cause__, UnsupportedTypeError)


def test_named_nullable_union_is_hoisted():
    Foo = object_("Foo", {"a": string})

    schemas = _schemas({"MaybeFoo": nullable(Foo)})

    assert list(schemas) == ["Foo", "MaybeFoo"]
    assert schemas["MaybeFoo"]["nullable"] is True


# --------------------------
# boolean and plain unions
# --------------------------


def test_boolean_union_collapses():
    Holder = object_("Holder", {"flag": union(literal(True), literal(False))})

    assert _schemas({"Holder": Holder})["Holder"]["properties"]["flag"] == {"type": "boolean"}


def test_named_boolean_union_keeps_title_and_metadata():
    Toggle = union(literal(True), literal(False), name="Toggle")
    openapi_metadata(Toggle, {"description": "On or off"})

    assert _schemas({"Toggle": Toggle})["Toggle"] == {
        "title": "Toggle",
        "type": "boolean",
        "description": "On or off",
    }


def test_plain_union_becomes_one_of():
    Holder = object_("Holder", {"id": union(string, int_)})

    assert _schemas({"Holder": Holder})["Holder"]["properties"]["id"] == {
        "oneOf": [{"type": "string"}, {"$ref": f"{REF}/int"}]
    }


# --------------------------
# discriminators
# --------------------------


def test_discriminated_union_gets_mapping():
    """
    @brief
    A union of named objects tagged by a literal property gets a discriminator.
    """
    # --- Arrange ---
    Cat, Dog = _animals()
    Animal = union(Cat, Dog, name="Animal")

    # --- Act ---
    schemas = _schemas({"Animal": Animal})

    # --- Assert ---
    assert list(schemas) == ["Cat", "Dog", "Animal"]
    assert schemas["Animal"] == {
        "title": "Animal",
        "oneOf": [{"$ref": f"{REF}/Cat"}, {"$ref": f"{REF}/Dog"}],
        "discriminator": {
            "propertyName": "kind",
            "mapping": {"cat": f"{REF}/Cat", "dog": f"{REF}/Dog"},
        },
    }
    assert schemas["Cat"]["properties"]["kind"] == {"type": "string", "enum": ["cat"]}


def test_discriminator_mapping_keys_are_strings():
    One = object_("One", {"version": literal(1)})
    Two = object_("Two", {"version": literal(2)})

    schema = _schemas({"Versioned": union(One, Two)})["Versioned"]

    assert schema["discriminator"]["mapping"] == {"1": f"{REF}/One", "2": f"{REF}/Two"}


def test_partial_discriminator_mapping_is_dropped():
    """
    @brief
    If any discriminator value maps to an inlined member, no discriminator is emitted.
    """
    # --- Arrange ---
    Cat, _ = _animals()
    anonymous_dog = object_(None, {"kind": literal("dog"), "barks": boolean})
    Animal = union(Cat, anonymous_dog, name="Animal")

    # --- Act ---
    schema = _schemas({"Animal": Animal})["Animal"]

    # --- Assert ---
    assert "discriminator" not in schema
    assert schema["oneOf"][0] == {"$ref": f"{REF}/Cat"}
    assert schema["oneOf"][1]["type"] == "object"


def test_multiple_discriminators_are_ambiguous():
    A = object_("A", {"kind": literal("a"), "code": literal(1)})
    B = object_("B", {"kind": literal("b"), "code": literal(2)})

    schema = _schemas({"AB": union(A, B)})["AB"]

    assert "discriminator" not in schema


def test_nested_discriminator_is_not_used():
    A = object_("A", {"meta": object_(None, {"kind": literal("a")})})
    B = object_("B", {"meta": object_(None, {"kind": literal("b")})})

    schema = _schemas({"AB": union(A, B)})["AB"]

    assert "discriminator" not in schema
    assert len(schema["oneOf"]) == 2


def test_discriminator_value_claimed_by_literal_union_is_dropped():
    """
    @brief
    Values carried by a union of literals cannot be mapped to a member.
    """
    A = object_("A", {"type": union(literal("a1"), literal("a2"))})
    B = object_("B", {"type": literal("b")})

    schema = _schemas({"AB": union(A, B)})["AB"]

    assert "discriminator" not in schema


def test_metadata_on_nullable_union_is_not_applied():
    """
    @brief
    The nullable wrapper has a fixed shape; metadata goes on the wrapped type.

    @details
    Metadata attached to the union itself does not replace the generated
    `Nullable <name>` description.
    """
    # --- Arrange ---
    Foo = object_("Foo", {"a": string})
    openapi_metadata(Foo, {"description": "A foo"})
    maybe_foo = openapi_metadata(nullable(Foo), {"description": "my desc"})

    # --- Act ---
    schemas = _schemas({"Holder": object_("Holder", {"foo": maybe_foo})})

    # --- Assert ---
    assert schemas["Holder"]["properties"]["foo"] == {
        "description": "Nullable Foo",
        "allOf": [{"$ref": f"{REF}/Foo"}],
        "nullable": True,
    }
    assert schemas["Foo"]["description"] == "A foo"
