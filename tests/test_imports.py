def test_imports():
    """
    @brief
    Verifies that all core schemagen modules are importable.

    @details
    Ensures package structure integrity and confirms that the type model,
    the generator and the document pipeline are accessible without import
    errors (including the absence of circular imports between them).
    """
    import schemagen
    import schemagen.documents.annotations
    import schemagen.documents.discovery
    import schemagen.documents.writer
    import schemagen.generator
    import schemagen.typemodel

    # --- Assert ---
    assert all([schemagen, schemagen.generator, schemagen.typemodel])
    assert schemagen.generate_schemas is schemagen.generator.generate_schemas
