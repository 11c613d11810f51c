"""
Mapping engine: gathers raw matches from a parsed document and binds them.

Documents arrive already parsed: a JSON-like dict, or an
xml.etree.ElementTree.Element. This module walks one level of the tree per
model; nested model values stay raw for the caller to bind separately.
ZERO I/O.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from xml.etree.ElementTree import Element

from docbind_kernel.domain.resolver import hook_context, resolve, serialize
from docbind_kernel.domain.schema_registry import SchemaRegistry
from docbind_kernel.domain.types import (
    AttributeDefinition,
    MappingRule,
    ModelSchema,
    RawMatch,
    SemanticType,
)
from docbind_kernel.exceptions import DocbindError, SchemaError
from docbind_kernel.logging_config import LogContext, get_logger

logger = get_logger("ingestion.mapping")

# Scalar attributes of these types take a JSON array as one raw value.
_LIST_VALUED_TYPES = frozenset({SemanticType.ARRAY, SemanticType.JSON})


# -----------------------------------------------------------------------------
# Result types
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class BindingResult:
    """Result of binding one document node to a model schema."""

    success: bool
    values: dict[str, Any] = field(default_factory=dict)
    errors: tuple[DocbindError, ...] = ()


# -----------------------------------------------------------------------------
# Gathering (pure)
# -----------------------------------------------------------------------------


def element_value(element: Element) -> Any:
    """
    Raw value of one XML element.

    Leaf -> its text ("" when empty). Element with children -> dict of child
    tag to value; repeated tags collapse into a list in document order.
    """
    children = list(element)
    if not children:
        return element.text or ""
    out: dict[str, Any] = {}
    for child in children:
        val = element_value(child)
        if child.tag in out:
            existing = out[child.tag]
            if isinstance(existing, list):
                existing.append(val)
            else:
                out[child.tag] = [existing, val]
        else:
            out[child.tag] = val
    return out


def _matched_nodes(document: Any, rule: MappingRule, attribute: AttributeDefinition) -> RawMatch:
    if isinstance(document, Element):
        if rule.kind == "attribute":
            val = document.get(rule.source)
            return () if val is None else (val,)
        return tuple(document.findall(rule.source))

    if isinstance(document, Mapping):
        if rule.kind == "attribute":
            raise SchemaError(
                f"Mapping for {rule.to!r} uses kind 'attribute', which needs an XML element"
            )
        val = document.get(rule.source)
        if val is None:
            return ()
        if isinstance(val, list) and (
            attribute.is_collection or attribute.semantic_type not in _LIST_VALUED_TYPES
        ):
            return tuple(val)
        return (val,)

    raise TypeError(f"Unsupported document node: {type(document).__name__}")


def gather_raw_values(document: Any, rule: MappingRule, attribute: AttributeDefinition) -> RawMatch:
    """Raw values matched by one mapping rule, in document order."""
    nodes = _matched_nodes(document, rule, attribute)
    if isinstance(document, Element) and rule.kind == "element":
        return tuple(element_value(n) for n in nodes)
    return nodes


# -----------------------------------------------------------------------------
# Binding
# -----------------------------------------------------------------------------


def bind_record(
    schema: ModelSchema,
    document: Any,
    *,
    collect_errors: bool = False,
    document_id: str | None = None,
    parse_id: str | None = None,
) -> BindingResult:
    """
    Resolve every mapped attribute of `schema` against one document node.

    With collect_errors=False the first DocbindError propagates; with True,
    errors are collected and failed attributes are left out of `values`.
    Attributes with a deserializer hook receive the matched nodes (Element
    nodes for XML) as document context; a scalar attribute with no match
    passes None. document_id and parse_id are bound into LogContext for
    every line logged while binding.
    """
    errors: list[DocbindError] = []
    values: dict[str, Any] = {}

    with LogContext.bind(model=schema.name, document_id=document_id, parse_id=parse_id):
        for rule in schema.mappings:
            attribute = schema.attribute(rule.to)
            try:
                with LogContext.bind(attribute=attribute.name):
                    raw = gather_raw_values(document, rule, attribute)
                    if attribute.has_deserializer:
                        nodes = _matched_nodes(document, rule, attribute)
                        context = hook_context(attribute, nodes)
                        values[attribute.name] = resolve(attribute, raw, context)
                    else:
                        values[attribute.name] = resolve(attribute, raw)
            except DocbindError as exc:
                if not collect_errors:
                    raise
                logger.info(
                    "attribute_failed",
                    extra={"attribute_name": attribute.name, "error_code": exc.code},
                )
                errors.append(exc)

        logger.debug(
            "record_bound",
            extra={"bound_count": len(values), "error_count": len(errors)},
        )

    return BindingResult(
        success=not errors,
        values=values,
        errors=tuple(errors),
    )


def bind_model(model_name: str, document: Any, **kwargs: Any) -> BindingResult:
    """Look up a registered schema by name and bind `document` to it."""
    return bind_record(SchemaRegistry.get(model_name), document, **kwargs)


def dump_record(schema: ModelSchema, values: Mapping[str, Any]) -> dict[str, Any]:
    """
    Write typed values back into a JSON-like dict, keyed by mapping source.

    Serializer hooks replace the generic writer; None values are skipped.
    XML-attribute mappings are written under their source key as well.
    """
    out: dict[str, Any] = {}
    for rule in schema.mappings:
        value = values.get(rule.to)
        if value is None:
            continue
        out[rule.source] = serialize(schema.attribute(rule.to), value)
    return out
