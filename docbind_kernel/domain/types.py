"""
docbind_kernel.domain.types -- Pure frozen dataclasses for attribute binding.

ZERO I/O. Attribute definitions are built once at model-definition time and
are read-only afterwards; raw matches and coerced values live for one call.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from docbind_kernel.exceptions import (
    DuplicateAttributeError,
    SchemaError,
    UnknownAttributeError,
)

# An ordered sequence of untyped values for one attribute; length is the
# arity signal.
RawMatch = tuple[Any, ...]


# =============================================================================
# Semantic type catalog
# =============================================================================


class SemanticType(str, Enum):
    """Closed catalog of target types an attribute value may hold."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DATE = "date"
    DATE_TIME = "date_time"
    TIME = "time"
    BOOLEAN = "boolean"
    DECIMAL = "decimal"
    ARRAY = "array"
    HASH = "hash"
    UUID = "uuid"
    SYMBOL = "symbol"
    BIG_INTEGER = "big_integer"
    BINARY = "binary"
    URL = "url"
    EMAIL = "email"
    IP_ADDRESS = "ip_address"
    JSON = "json"
    ENUM = "enum"
    # Fallback for tags outside the catalog; coerces by identity.
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def from_tag(cls, tag: SemanticType | str | None) -> SemanticType:
        """
        Normalize a type tag into a catalog member.

        Accepts members, snake-case values ("date_time"), CamelCase names
        ("DateTime") and a few aliases. Never raises: unknown tags map to
        UNRECOGNIZED.
        """
        if isinstance(tag, SemanticType):
            return tag
        if not isinstance(tag, str):
            return cls.UNRECOGNIZED
        return _TAG_LOOKUP.get(_normalize_tag(tag), cls.UNRECOGNIZED)


def _normalize_tag(tag: str) -> str:
    return re.sub(r"[\s_\-:]", "", tag).lower()


_TAG_LOOKUP: dict[str, SemanticType] = {
    _normalize_tag(member.value): member
    for member in SemanticType
    if member is not SemanticType.UNRECOGNIZED
}
_TAG_LOOKUP.update(
    {
        "str": SemanticType.STRING,
        "text": SemanticType.STRING,
        "int": SemanticType.INTEGER,
        "double": SemanticType.FLOAT,
        "bool": SemanticType.BOOLEAN,
        "list": SemanticType.ARRAY,
        "dict": SemanticType.HASH,
        "bigint": SemanticType.BIG_INTEGER,
        "bytes": SemanticType.BINARY,
        "uri": SemanticType.URL,
        "ip": SemanticType.IP_ADDRESS,
        "ipaddr": SemanticType.IP_ADDRESS,
    }
)


class Arity(str, Enum):
    """Whether an attribute binds one value or an ordered sequence."""

    SCALAR = "scalar"
    COLLECTION = "collection"


# =============================================================================
# Defaults and hooks
# =============================================================================


@dataclass(frozen=True)
class StaticDefault:
    """A pre-typed default value used as-is."""

    value: Any

    def evaluate(self) -> Any:
        return self.value


@dataclass(frozen=True)
class LazyDefault:
    """A zero-argument supplier, invoked only when a default is needed."""

    supplier: Callable[[], Any]

    def evaluate(self) -> Any:
        return self.supplier()


Default = StaticDefault | LazyDefault


@dataclass(frozen=True)
class CustomHook:
    """
    Author-supplied (serializer, deserializer) pair for one attribute.

    A present deserializer owns value production entirely: it receives the
    raw document context and its return value is final. That context is the
    single matched node, None when a scalar attribute matched nothing, or a
    tuple of nodes otherwise.
    """

    serializer: Callable[[Any], Any] | None = None
    deserializer: Callable[[Any], Any] | None = None


# =============================================================================
# Attribute and model definitions
# =============================================================================


@dataclass(frozen=True)
class AttributeDefinition:
    """One declared attribute of a model."""

    name: str
    semantic_type: SemanticType = SemanticType.STRING
    arity: Arity = Arity.SCALAR
    default: Default | None = None
    custom_hook: CustomHook | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.isidentifier():
            raise SchemaError(f"Invalid attribute name: {self.name!r}")
        # Frozen: normalize through object.__setattr__
        object.__setattr__(self, "semantic_type", SemanticType.from_tag(self.semantic_type))
        object.__setattr__(self, "arity", Arity(self.arity))
        if self.default is not None and not isinstance(self.default, StaticDefault | LazyDefault):
            wrapped = (
                LazyDefault(self.default) if callable(self.default)
                else StaticDefault(self.default)
            )
            object.__setattr__(self, "default", wrapped)

    @property
    def is_collection(self) -> bool:
        return self.arity is Arity.COLLECTION

    @property
    def has_default(self) -> bool:
        return self.default is not None

    @property
    def has_deserializer(self) -> bool:
        return self.custom_hook is not None and self.custom_hook.deserializer is not None


@dataclass(frozen=True)
class MappingRule:
    """Document key / XML element or XML attribute -> attribute name."""

    to: str
    source: str | None = None
    kind: str = "element"  # "element" | "attribute"

    def __post_init__(self) -> None:
        if self.kind not in ("element", "attribute"):
            raise SchemaError(f"Unknown mapping kind: {self.kind!r}")
        if self.source is None:
            object.__setattr__(self, "source", self.to)


@dataclass(frozen=True)
class ModelSchema:
    """Finalized attribute set of one model type plus its mapping rules."""

    name: str
    attributes: tuple[AttributeDefinition, ...]
    mappings: tuple[MappingRule, ...] = ()
    _by_name: dict[str, AttributeDefinition] = field(
        default_factory=dict, init=False, compare=False, hash=False, repr=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", tuple(self.attributes))
        by_name: dict[str, AttributeDefinition] = {}
        for attr in self.attributes:
            if attr.name in by_name:
                raise DuplicateAttributeError(self.name, attr.name)
            by_name[attr.name] = attr
        object.__setattr__(self, "_by_name", by_name)

        mappings = tuple(self.mappings) or tuple(MappingRule(to=a.name) for a in self.attributes)
        for rule in mappings:
            if rule.to not in by_name:
                raise UnknownAttributeError(self.name, rule.to)
        object.__setattr__(self, "mappings", mappings)

    def attribute(self, name: str) -> AttributeDefinition:
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownAttributeError(self.name, name) from None

    @property
    def attribute_names(self) -> tuple[str, ...]:
        return tuple(a.name for a in self.attributes)


@dataclass(frozen=True)
class Accepted:
    """Raw values that passed the cardinality check."""

    attribute_name: str
    arity: Arity
    values: RawMatch = ()

    @property
    def count(self) -> int:
        return len(self.values)

    @property
    def is_empty(self) -> bool:
        return not self.values

    @property
    def single(self) -> Any:
        """The one accepted value of a scalar attribute (None when empty)."""
        return self.values[0] if self.values else None
