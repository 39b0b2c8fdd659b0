# src/schemagen/errors.py
from __future__ import annotations

from datetime import datetime, timezone


class SchemagenError(Exception):
    """Base class for all structured schemagen exceptions."""

    def __init__(
        self, message: str, source: str | None = None, suggested_action: str | None = None
    ):
        super().__init__(message)
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.error_type = self.__class__.__name__
        self.source = source or "unknown"
        self.suggested_action = suggested_action

    def __str__(self) -> str:
        base = f"[{self.error_type}] {self.args[0]}"
        if self.source:
            base += f" (source={self.source})"
        if self.suggested_action:
            base += f" | action: {self.suggested_action}"
        return base


class ConfigError(SchemagenError):
    """Invalid or missing generator configuration"""


class DocumentError(SchemagenError):
    """Unreadable or unsupported host document"""


class AnnotationError(SchemagenError):
    """Unresolvable or conflicting type annotation in a host document"""


class UnsupportedTypeError(SchemagenError):
    """Type category or literal value without an OpenAPI 3.0 rendition"""


class UnrepresentableConstraintError(SchemagenError):
    """Type constraint that cannot be expressed in an OpenAPI schema"""


class MetadataError(SchemagenError):
    """Invalid OpenAPI metadata attached to a type"""


class MetadataConflictError(MetadataError):
    """Metadata targeting a $ref schema"""


class GenerationError(SchemagenError):
    """
    Failure while converting a type graph, prefixed with the traversal path.

    `path` lists the names of the types being converted, outermost first.
    The original exception is chained as `__cause__`.
    """

    def __init__(
        self,
        message: str,
        path: list[str],
        source: str | None = None,
        suggested_action: str | None = None,
    ):
        super().__init__(message, source=source, suggested_action=suggested_action)
        self.path = path
