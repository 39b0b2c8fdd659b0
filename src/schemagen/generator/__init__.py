from schemagen.generator.openapi_generator import OpenApiDefinitionsGenerator, generate_schemas

__all__ = ["OpenApiDefinitionsGenerator", "generate_schemas"]
