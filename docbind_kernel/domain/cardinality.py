"""Cardinality validator: checks a raw match count against declared arity."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from docbind_kernel.domain.types import Accepted, Arity
from docbind_kernel.exceptions import CardinalityError

SCALAR_EXPECTED_COUNT = 1


def validate_cardinality(
    attribute_name: str,
    arity: Arity | str,
    raw_values: Sequence[Any],
) -> Accepted:
    """
    Accept or reject the raw values matched for one attribute.

    A scalar attribute accepts zero or one value; more than one raises
    CardinalityError instead of truncating. A collection accepts any count,
    order preserved.
    """
    arity = Arity(arity)
    values = tuple(raw_values)
    count = len(values)
    if arity is Arity.SCALAR and count > SCALAR_EXPECTED_COUNT:
        raise CardinalityError(attribute_name, SCALAR_EXPECTED_COUNT, count)
    return Accepted(attribute_name=attribute_name, arity=arity, values=values)
