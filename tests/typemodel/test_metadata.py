import pytest

from schemagen.errors import MetadataError
from schemagen.typemodel import array, int_, object_, openapi_metadata, string
from schemagen.typemodel.metadata import OpenApiMetadata


def test_openapi_metadata_attaches_only_set_fields():
    """
    @brief
    The overlay holds exactly the fields the caller supplied.

    @details
    Fields left out are not stored as `None`, so they cannot blank out
    synthesized schema fields when the overlay is merged.
    """
    # --- Arrange ---
    Pet = object_("Pet", {"name": string, "id": int_})

    # --- Act ---
    returned = openapi_metadata(
        Pet, {"description": "A Pet", "example": None}, {"name": {"example": "doggie"}}
    )

    # --- Assert ---
    assert returned is Pet
    assert Pet.openapi_metadata == OpenApiMetadata(
        metadata={"description": "A Pet", "example": None},
        properties={"name": {"example": "doggie"}},
    )


def test_openapi_metadata_replaces_previous_overlay():
    Tag = object_("Tag", {"name": string})

    openapi_metadata(Tag, {"description": "first"})
    openapi_metadata(Tag, {"deprecated": True})

    assert Tag.openapi_metadata.metadata == {"deprecated": True}
    assert Tag.openapi_metadata.properties == {}


@pytest.mark.parametrize("field", ["type", "properties", "$ref", "nullable"])
def test_openapi_metadata_rejects_shape_fields(field):
    """
    @brief
    Only descriptive fields are accepted; shape-changing fields fail.
    """
    with pytest.raises(MetadataError) as e:
        openapi_metadata(object_("Foo", {}), {field: "x"})

    assert "Invalid OpenAPI metadata" in str(e.value)


def test_openapi_metadata_rejects_properties_on_non_object():
    with pytest.raises(MetadataError) as e:
        openapi_metadata(string.with_config("Name", min_length=1), {}, {"x": {"example": "y"}})

    assert "requires an object type" in str(e.value)


def test_openapi_metadata_rejects_unknown_property():
    Pet = object_("Pet", {"name": string})

    with pytest.raises(MetadataError) as e:
        openapi_metadata(Pet, {}, {"nmae": {"example": "doggie"}})

    # --- Assert ---
    msg = str(e.value)
    assert "has no property nmae" in msg
    assert "name" in msg


def test_openapi_metadata_validates_property_payloads():
    Pet = object_("Pet", {"name": string})

    with pytest.raises(MetadataError) as e:
        openapi_metadata(Pet, {}, {"name": {"deprecated": "maybe"}})

    assert "openapi_metadata[name]" in str(e.value)


def test_openapi_metadata_rejects_items_override():
    """
    @brief
    Array item schemas cannot be replaced through metadata.

    @details
    `items` would change the validated shape of an array; element
    metadata belongs on the element type.
    """
    Tags = array(string, name="Tags")

    with pytest.raises(MetadataError) as e:
        openapi_metadata(Tags, {"items": {"type": "integer"}})

    assert "items" in str(e.value)
    assert Tags.openapi_metadata is None
