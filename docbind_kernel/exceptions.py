"""
Typed exception hierarchy for the docbind kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from DocbindError:

    DocbindError (base)
    |
    +-- CardinalityError
    |
    +-- CoercionError
    |   +-- ParseError
    |   +-- InvalidArgument
    |
    +-- SchemaError
        +-- DuplicateAttributeError
        +-- UnknownAttributeError
        +-- DuplicateModelError
        +-- ModelNotRegisteredError
        +-- RegistryFrozenError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Cardinality     | CARDINALITY_ERROR           | Scalar attribute matched > 1 raw value
----------------|-----------------------------|-----------------------------------------
Coercion        | PARSE_ERROR                 | Malformed date/URL/IP/JSON/decimal text
                | INVALID_ARGUMENT            | Value outside a type's accepted domain
----------------|-----------------------------|-----------------------------------------
Schema          | DUPLICATE_ATTRIBUTE         | Two attributes share a name in a model
                | UNKNOWN_ATTRIBUTE           | Mapping rule targets undeclared attribute
                | DUPLICATE_MODEL             | Model name registered twice
                | MODEL_NOT_REGISTERED        | Lookup of unknown model name
                | REGISTRY_FROZEN             | Registration after freeze()

===============================================================================
HANDLING PATTERNS
===============================================================================

Catch by type, read structured attributes:

    try:
        value = resolve(attribute, raw_values)
    except CardinalityError as e:
        report(e.attribute_name, e.expected_count, e.actual_count)
    except CoercionError as e:
        report(e.attribute_name, e.code, e.reason)

Both error kinds propagate to the caller. Whether one failed attribute
aborts the whole document or is collected is the caller's decision
(see ``docbind_ingestion.mapping.bind_record``).
"""

from typing import Any


class DocbindError(Exception):
    """
    Base exception for all docbind errors.

    All subclasses carry a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "DOCBIND_ERROR"


# Cardinality


class CardinalityError(DocbindError):
    """A scalar attribute matched more raw values than it can hold."""

    code: str = "CARDINALITY_ERROR"

    def __init__(self, attribute_name: str, expected_count: int, actual_count: int):
        self.attribute_name = attribute_name
        self.expected_count = expected_count
        self.actual_count = actual_count
        super().__init__(
            f"Value cardinality Error: attribute value of {attribute_name} "
            f"was expected to have {expected_count} elements but had {actual_count}"
        )


# Coercion


class CoercionError(DocbindError):
    """
    A raw value could not be converted to its semantic type.

    The engine raises without an attribute name; the resolver attaches one
    via `for_attribute()` before the error leaves the kernel.
    """

    code: str = "COERCION_ERROR"

    def __init__(
        self,
        semantic_type: str,
        value: Any,
        reason: str,
        attribute_name: str | None = None,
    ):
        self.semantic_type = semantic_type
        self.value = value
        self.reason = reason
        self.attribute_name = attribute_name
        prefix = f"attribute {attribute_name}: " if attribute_name else ""
        super().__init__(
            f"{prefix}cannot coerce {value!r} to {semantic_type}: {reason}"
        )

    def for_attribute(self, attribute_name: str) -> "CoercionError":
        """Return a copy of this error bound to an attribute name."""
        return type(self)(
            self.semantic_type, self.value, self.reason, attribute_name=attribute_name
        )


class ParseError(CoercionError):
    """Text did not match the grammar of the target type."""

    code: str = "PARSE_ERROR"


class InvalidArgument(CoercionError):
    """Value lies outside the accepted domain of the target type."""

    code: str = "INVALID_ARGUMENT"


# Schema


class SchemaError(DocbindError):
    """Base exception for schema definition and registry errors."""

    code: str = "SCHEMA_ERROR"


class DuplicateAttributeError(SchemaError):
    code: str = "DUPLICATE_ATTRIBUTE"

    def __init__(self, model_name: str, attribute_name: str):
        self.model_name = model_name
        self.attribute_name = attribute_name
        super().__init__(
            f"Attribute {attribute_name!r} declared more than once in model {model_name}"
        )


class UnknownAttributeError(SchemaError):
    code: str = "UNKNOWN_ATTRIBUTE"

    def __init__(self, model_name: str, attribute_name: str):
        self.model_name = model_name
        self.attribute_name = attribute_name
        super().__init__(
            f"Model {model_name} has no attribute {attribute_name!r}"
        )


class DuplicateModelError(SchemaError):
    code: str = "DUPLICATE_MODEL"

    def __init__(self, model_name: str):
        self.model_name = model_name
        super().__init__(f"Model already registered: {model_name}")


class ModelNotRegisteredError(SchemaError):
    code: str = "MODEL_NOT_REGISTERED"

    def __init__(self, model_name: str):
        self.model_name = model_name
        super().__init__(f"Model not registered: {model_name}")


class RegistryFrozenError(SchemaError):
    """The schema registry was finalized; no further registration allowed."""

    code: str = "REGISTRY_FROZEN"

    def __init__(self, model_name: str):
        self.model_name = model_name
        super().__init__(
            f"Cannot register {model_name}: schema registry is frozen"
        )
