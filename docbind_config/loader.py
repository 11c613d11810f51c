"""
Model schema loader (``docbind_config.loader``).

Responsibility
--------------
Loads YAML model files and parses them into frozen
``docbind_kernel.domain.types`` instances: one ``ModelSchema`` per entry
under the top-level ``models`` key.

Architecture position
---------------------
**Config layer** -- definition-time tooling. Depends on the kernel's domain
types; the kernel never imports from here.

File shape
----------
::

    models:
      - name: ComplexItem
        attributes:
          - {name: title, type: string, default: Default Title}
          - {name: tags, type: string, collection: true}
          - {name: category, type: string, default_factory: "pkg.mod:func"}
          - name: content
            type: string
            hook: {from: "pkg.mod:parse_content", to: "pkg.mod:dump_content"}
        mappings:
          - {element: title, to: title}
          - {attribute: id, to: ident}

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Bad reference string or mapping kind  -> ``ValueError``.
* Unimportable reference  -> ``ImportError`` / ``AttributeError`` propagate.
* Duplicate attribute names  -> ``DuplicateAttributeError``.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

from docbind_kernel.domain.schema_registry import SchemaRegistry
from docbind_kernel.domain.types import (
    Arity,
    AttributeDefinition,
    CustomHook,
    LazyDefault,
    MappingRule,
    ModelSchema,
    StaticDefault,
)
from docbind_kernel.logging_config import get_logger

logger = get_logger("config.loader")

_MAPPING_KINDS = ("element", "attribute", "key")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def resolve_reference(ref: str) -> Callable[..., Any]:
    """
    Import the object named by a ``"package.module:attribute"`` reference.

    Raises:
        ValueError: if ``ref`` is not of the form ``module:attribute``.
    """
    module_name, sep, attr_path = ref.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Invalid reference {ref!r}; expected 'module:attribute'")
    obj: Any = importlib.import_module(module_name)
    for part in attr_path.split("."):
        obj = getattr(obj, part)
    return obj


def parse_hook(data: dict[str, Any]) -> CustomHook:
    """Parse a CustomHook from ``{from: ref, to: ref}``; either side optional."""
    return CustomHook(
        serializer=resolve_reference(data["to"]) if data.get("to") else None,
        deserializer=resolve_reference(data["from"]) if data.get("from") else None,
    )


def parse_attribute(data: dict[str, Any]) -> AttributeDefinition:
    """
    Parse an AttributeDefinition from a dict.

    ``type`` goes through SemanticType.from_tag, so unknown tags load as
    UNRECOGNIZED rather than failing. ``default`` and ``default_factory``
    are mutually exclusive.
    """
    if "default" in data and "default_factory" in data:
        raise ValueError(
            f"Attribute {data['name']!r}: 'default' and 'default_factory' are mutually exclusive"
        )
    default = None
    if "default_factory" in data:
        default = LazyDefault(resolve_reference(data["default_factory"]))
    elif "default" in data:
        default = StaticDefault(data["default"])

    return AttributeDefinition(
        name=data["name"],
        semantic_type=data.get("type", "string"),
        arity=Arity.COLLECTION if data.get("collection", False) else Arity.SCALAR,
        default=default,
        custom_hook=parse_hook(data["hook"]) if data.get("hook") else None,
    )


def parse_mapping(data: dict[str, Any]) -> MappingRule:
    """
    Parse a MappingRule. The source is given under its kind:
    ``element`` / ``key`` (same thing for dict documents) or ``attribute``.
    """
    kinds = [k for k in _MAPPING_KINDS if k in data]
    if len(kinds) != 1:
        raise ValueError(
            f"Mapping to {data.get('to')!r} must name exactly one of {_MAPPING_KINDS}"
        )
    kind = kinds[0]
    return MappingRule(
        to=data["to"],
        source=data[kind],
        kind="attribute" if kind == "attribute" else "element",
    )


def parse_model(data: dict[str, Any]) -> ModelSchema:
    return ModelSchema(
        name=data["name"],
        attributes=tuple(parse_attribute(a) for a in data.get("attributes", ())),
        mappings=tuple(parse_mapping(m) for m in data.get("mappings", ())),
    )


def load_model_schemas(path: Path) -> tuple[ModelSchema, ...]:
    """Load every model declared in one YAML file, in file order."""
    raw = load_yaml_file(Path(path))
    schemas = tuple(parse_model(m) for m in raw.get("models", ()))
    logger.info(
        "model_file_loaded",
        extra={"path": str(path), "model_count": len(schemas)},
    )
    return schemas


def register_models_from_file(path: Path, *, freeze: bool = False) -> tuple[ModelSchema, ...]:
    """Load a YAML model file into SchemaRegistry; optionally freeze it after."""
    schemas = load_model_schemas(path)
    for schema in schemas:
        SchemaRegistry.register(schema)
    if freeze:
        SchemaRegistry.freeze()
    return schemas
