# src/schemagen/documents/annotations.py
"""
@brief
Collection of type annotations from host documents.

@details
An annotation is a mapping entry `<annotation_key>: <module>#<TypeName>`.
`<module>` is either a Python file, relative to the annotated document
(`./types.py`), or an importable dotted module name (`petstore.types`).
Each annotated node is patched with a `$ref` to the schema that will be
generated for the type in the document's companion types file.
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import logging
import re
import sys
import threading
from pathlib import Path
from types import ModuleType
from typing import Any

from schemagen.documents.writer import types_file_name
from schemagen.errors import AnnotationError
from schemagen.schemas.models import GeneratorConfig
from schemagen.typemodel.descriptors import BaseType

logger = logging.getLogger(__name__)


def _is_file_reference(lib: str) -> bool:
    return lib.endswith(".py") or lib.startswith(".") or "/" in lib or "\\" in lib


class ModuleLoader:
    """
    @brief
    Loads the modules named by annotations, once per module.

    @details
    Type identity matters to schema generation: a module file loaded twice
    would produce two distinct sets of descriptors. Loaded file modules are
    therefore cached by absolute path (and registered in `sys.modules`),
    and loading is serialized so that concurrent documents share them.
    """

    def __init__(self) -> None:
        self._modules: dict[Path, ModuleType] = {}
        self._lock = threading.Lock()

    def load(self, lib: str, base_dir: Path) -> ModuleType:
        """
        @raises
            AnnotationError
                Raised when the module cannot be found or fails to import.
        """
        with self._lock:
            try:
                if _is_file_reference(lib):
                    return self._load_file((base_dir / lib).resolve())
                return importlib.import_module(lib)
            except AnnotationError:
                raise
            except Exception as e:
                raise AnnotationError(
                    message=f"Could not load lib: {lib} ({e})",
                    source="ModuleLoader.load",
                    suggested_action="Check the module path and that the module imports cleanly.",
                ) from e

    def _load_file(self, path: Path) -> ModuleType:
        module = self._modules.get(path)
        if module is not None:
            return module
        if not path.is_file():
            raise AnnotationError(
                message=f"Could not load lib: {path} does not exist",
                source="ModuleLoader._load_file",
                suggested_action="Paths are resolved relative to the annotated document.",
            )

        digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
        stem = re.sub(r"\W", "_", path.stem)
        name = f"_schemagen_{stem}_{digest}"
        spec = importlib.util.spec_from_file_location(name, path)
        if spec is None or spec.loader is None:
            raise AnnotationError(
                message=f"Could not load lib: {path} is not a Python module",
                source="ModuleLoader._load_file",
            )
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            del sys.modules[name]
            raise
        logger.debug("Loaded type module %s", path)
        self._modules[path] = module
        return module


def resolve_annotation(annotation: str, base_dir: Path, loader: ModuleLoader) -> tuple[str, BaseType]:
    """
    @brief
    Resolve `<module>#<TypeName>` to the name and descriptor it denotes.

    @raises
        AnnotationError
            Raised on malformed annotations, unloadable modules, and names
            that do not refer to a type descriptor.
    """
    lib, _, type_name = annotation.partition("#")
    if not lib or not type_name:
        raise AnnotationError(
            message=f"Invalid annotation {annotation!r}",
            source="annotations.resolve_annotation",
            suggested_action="Annotations should be in format <module>#<type>, for example ./types.py#User",
        )
    module = loader.load(lib, base_dir)
    type = getattr(module, type_name, None)
    if not isinstance(type, BaseType):
        raise AnnotationError(
            message=f"Library {lib} does not export a type with name {type_name}, got: {type!r}",
            source="annotations.resolve_annotation",
        )
    return type_name, type


def collect_type_annotations(
    document: dict[str, Any], file: Path, config: GeneratorConfig, loader: ModuleLoader
) -> dict[str, BaseType]:
    """
    @brief
    Collect annotated types and point the annotated nodes at their schemas.

    @details
    (1) Walks the document depth-first, children before their parent.
    (2) Resolves every annotation to a descriptor.
    (3) Rejects two different descriptors published under the same name.
    (4) Adds `$ref: ./<types file>#/components/schemas/<TypeName>` to the
        annotated node; the annotation itself is kept.

    @params
        document : dict[str, Any]
            Parsed host document; patched in place.
        file : Path
            Location of the document, used to resolve module paths and to
            derive the types file name.

    @returns
        Descriptors by type name, in the order they were found.

    @raises
        AnnotationError
            Raised on unresolvable annotations or duplicate names.
    """
    types: dict[str, BaseType] = {}

    def visit(node: Any) -> None:
        # (1) Children first
        if isinstance(node, list):
            for item in node:
                visit(item)
            return
        if not isinstance(node, dict):
            return
        for value in list(node.values()):
            visit(value)

        annotation = node.get(config.annotation_key)
        if not isinstance(annotation, str):
            return

        # (2) Resolution
        type_name, type = resolve_annotation(annotation, file.parent, loader)

        # (3) Duplicate names
        existing = types.get(type_name)
        if existing is not None and existing is not type:
            raise AnnotationError(
                message=f'duplicate types named "{type_name}"',
                source=str(file),
                suggested_action="Publish different types under different names.",
            )
        types[type_name] = type

        # (4) Patch
        node["$ref"] = f"./{types_file_name(file.name)}#{config.ref_path}/{type_name}"

    visit(document)
    return types


__all__ = ["ModuleLoader", "collect_type_annotations", "resolve_annotation"]
