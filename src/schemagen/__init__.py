"""Generate OpenAPI 3.0 schemas from type descriptors."""

from schemagen.generator.openapi_generator import OpenApiDefinitionsGenerator, generate_schemas

__version__ = "0.1.0"

__all__ = ["OpenApiDefinitionsGenerator", "generate_schemas"]
