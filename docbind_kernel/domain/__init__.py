"""
docbind_kernel.domain -- Pure types, coercion, cardinality and resolution.

ZERO I/O.
"""

from docbind_kernel.domain.cardinality import validate_cardinality
from docbind_kernel.domain.coercion import coerce, to_document_value
from docbind_kernel.domain.resolver import hook_context, resolve, serialize
from docbind_kernel.domain.schema_registry import SchemaRegistry, register_model
from docbind_kernel.domain.types import (
    Accepted,
    Arity,
    AttributeDefinition,
    CustomHook,
    LazyDefault,
    MappingRule,
    ModelSchema,
    RawMatch,
    SemanticType,
    StaticDefault,
)

__all__ = [
    "Accepted",
    "Arity",
    "AttributeDefinition",
    "CustomHook",
    "LazyDefault",
    "MappingRule",
    "ModelSchema",
    "RawMatch",
    "SchemaRegistry",
    "SemanticType",
    "StaticDefault",
    "coerce",
    "hook_context",
    "register_model",
    "resolve",
    "serialize",
    "to_document_value",
    "validate_cardinality",
]
