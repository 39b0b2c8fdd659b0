from schemagen.typemodel import array, int_, keyof, object_, openapi_metadata, partial, string

Category = partial("Category", {"id": int_, "name": string})
openapi_metadata(Category, {"description": "The Category"}, {"name": {"example": "Dogs"}})

Tag = partial("Tag", {"id": int_, "name": string})

Pet = object_("Pet", {"name": string, "photoUrls": array(string)}).with_optional(
    {
        "id": int_,
        "category": Category,
        "tags": array(Tag),
        "status": keyof(["available", "pending", "sold"]),
    }
)
openapi_metadata(
    Pet,
    {"description": "A Pet"},
    {
        "name": {"example": "doggie"},
        "status": {"description": "pet status in the store"},
    },
)

User = partial(
    "User",
    {
        "id": int_,
        "username": string,
        "firstName": string,
        "lastName": string,
        "email": string,
        "password": string,
        "phone": string,
        "userStatus": int_,
    },
)
openapi_metadata(
    User,
    {"deprecated": True},
    {
        "username": {"example": "theUser"},
        "firstName": {"example": "John"},
        "lastName": {"example": "James"},
        "email": {"example": "john@email.com"},
        "password": {"example": "12345"},
    },
)
