# src/schemagen/documents/yaml_rules.py
"""
@brief
YAML 1.2 core schema resolution for host documents.

@details
PyYAML resolves plain scalars with YAML 1.1 rules: `yes`, `no`, `on` and
`off` load as booleans, `12:30` as a base-60 integer, `2024-01-01` as a date.
Host documents are written back after patching, so every unannotated
scalar has to survive a load/dump cycle unchanged. The loader and dumper
here share the YAML 1.2 core rules:
    - null: `null`, `Null`, `NULL`, `~`, empty
    - bool: `true`/`false` in lower, title or upper case
    - int: decimal, `0o` octal, `0x` hexadecimal
    - float: decimal with fraction or exponent, `.inf`, `.nan`
Everything else is a string.
"""

from __future__ import annotations

import re
from typing import Any

import yaml

_BOOL = "tag:yaml.org,2002:bool"
_INT = "tag:yaml.org,2002:int"
_FLOAT = "tag:yaml.org,2002:float"
_KEPT_TAGS = {"tag:yaml.org,2002:null", "tag:yaml.org,2002:merge"}

_CORE_RESOLVERS = [
    (_BOOL, re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"), list("tTfF")),
    (_INT, re.compile(r"^(?:[-+]?[0-9]+|0o[0-7]+|0x[0-9a-fA-F]+)$"), list("-+0123456789")),
    (
        _FLOAT,
        re.compile(
            r"^(?:[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?"
            r"|[-+]?\.(?:inf|Inf|INF)|\.(?:nan|NaN|NAN))$"
        ),
        list("-+0123456789."),
    ),
]


def _core_resolvers(base: type[yaml.resolver.BaseResolver]) -> dict[str, list[tuple[str, Any]]]:
    # (1) Keep only the 1.1 resolvers that agree with the core schema
    resolvers: dict[str, list[tuple[str, Any]]] = {
        first: [(tag, regexp) for tag, regexp in entries if tag in _KEPT_TAGS]
        for first, entries in base.yaml_implicit_resolvers.items()
    }
    # (2) Core schema bool, int and float, in that order of precedence
    for tag, regexp, first_chars in _CORE_RESOLVERS:
        for first in first_chars:
            resolvers.setdefault(first, []).append((tag, regexp))
    return resolvers


def _construct_int(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> int:
    value = loader.construct_scalar(node)
    if value.startswith(("0o", "0x")):
        return int(value, 0)
    return int(value)


class DocumentLoader(yaml.SafeLoader):
    """Safe loader resolving plain scalars with YAML 1.2 core rules."""


DocumentLoader.yaml_implicit_resolvers = _core_resolvers(yaml.SafeLoader)
DocumentLoader.add_constructor(_INT, _construct_int)


class DocumentDumper(yaml.SafeDumper):
    """
    Safe dumper using the same rules as `DocumentLoader`, so strings are
    quoted exactly when they would otherwise load as another type.
    Shared subtrees are written in full instead of as anchors.
    """

    def ignore_aliases(self, data: Any) -> bool:
        return True


DocumentDumper.yaml_implicit_resolvers = _core_resolvers(yaml.SafeDumper)


def load_document_text(stream: Any) -> Any:
    return yaml.load(stream, Loader=DocumentLoader)


__all__ = ["DocumentDumper", "DocumentLoader", "load_document_text"]
