"""
Default/hook resolver: per-attribute orchestration of cardinality and coercion.

Decision order for one attribute:
    1. Deserializer hook present -> hook owns the value (no cardinality,
       no coercion, regardless of arity).
    2. Cardinality check.
    3. Zero values -> default (pre-typed, not coerced), else None / [].
    4. Coerce each value; document order preserved for collections.

Errors propagate. A failed coercion never falls back to the default.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from docbind_kernel.domain.cardinality import validate_cardinality
from docbind_kernel.domain.coercion import coerce, to_document_value
from docbind_kernel.domain.types import AttributeDefinition
from docbind_kernel.exceptions import CoercionError
from docbind_kernel.logging_config import get_logger

logger = get_logger("domain.resolver")

_NO_CONTEXT = object()


def hook_context(attribute: AttributeDefinition, raw_values: Sequence[Any]) -> Any:
    """What a deserializer hook receives for `raw_values` (values or matched nodes)."""
    values = tuple(raw_values)
    if len(values) == 1:
        return values[0]
    if not values and not attribute.is_collection:
        return None
    return values


def resolve(
    attribute: AttributeDefinition,
    raw_values: Sequence[Any],
    document_context: Any = _NO_CONTEXT,
) -> Any:
    """
    Produce the typed value of one attribute from its raw matches.

    Args:
        attribute: The attribute definition.
        raw_values: Values matched in the document, in document order.
        document_context: What a deserializer hook receives. When omitted,
            the hook gets the single raw value, None when a scalar
            attribute matched nothing, or else the tuple of raw values.

    Returns:
        A single typed value (scalar) or a list of typed values (collection).

    Raises:
        CardinalityError: scalar attribute matched more than one value.
        CoercionError: a raw value failed to coerce (attribute name attached).
    """
    if attribute.has_deserializer:
        context = document_context
        if context is _NO_CONTEXT:
            context = hook_context(attribute, raw_values)
        value = attribute.custom_hook.deserializer(context)
        _log_resolved(attribute, "hook", len(raw_values))
        return value

    accepted = validate_cardinality(attribute.name, attribute.arity, raw_values)

    if accepted.is_empty:
        if attribute.has_default:
            _log_resolved(attribute, "default", 0)
            return attribute.default.evaluate()
        _log_resolved(attribute, "empty", 0)
        return [] if attribute.is_collection else None

    try:
        if attribute.is_collection:
            value = [coerce(v, attribute.semantic_type) for v in accepted.values]
        else:
            value = coerce(accepted.single, attribute.semantic_type)
    except CoercionError as exc:
        raise exc.for_attribute(attribute.name) from exc

    _log_resolved(attribute, "coerced", accepted.count)
    return value


def serialize(attribute: AttributeDefinition, value: Any) -> Any:
    """
    Produce the document value of one attribute.

    The serializer hook, when present, replaces the generic writer.
    """
    hook = attribute.custom_hook
    if hook is not None and hook.serializer is not None:
        return hook.serializer(value)
    if attribute.is_collection and isinstance(value, list | tuple):
        return [to_document_value(v, attribute.semantic_type) for v in value]
    return to_document_value(value, attribute.semantic_type)


def _log_resolved(attribute: AttributeDefinition, path: str, raw_count: int) -> None:
    logger.debug(
        "attribute_resolved",
        extra={
            "attribute_name": attribute.name,
            "semantic_type": attribute.semantic_type.value,
            "arity": attribute.arity.value,
            "resolution_path": path,
            "raw_count": raw_count,
        },
    )
