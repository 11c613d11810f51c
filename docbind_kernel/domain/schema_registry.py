"""SchemaRegistry -- process-wide, freeze-once registry of model schemas."""

import threading
from typing import ClassVar

from docbind_kernel.domain.types import ModelSchema
from docbind_kernel.exceptions import (
    DuplicateModelError,
    ModelNotRegisteredError,
    RegistryFrozenError,
)
from docbind_kernel.logging_config import get_logger

logger = get_logger("domain.schema_registry")


class SchemaRegistry:
    """
    Registry of ModelSchema keyed by model name.

    Schemas are registered during model definition, then the registry is
    frozen; afterwards it is only read, so concurrent parses need no locking.
    """

    _schemas: ClassVar[dict[str, ModelSchema]] = {}
    _frozen: ClassVar[bool] = False
    _lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def register(cls, schema: ModelSchema) -> None:
        with cls._lock:
            if cls._frozen:
                raise RegistryFrozenError(schema.name)
            if schema.name in cls._schemas:
                raise DuplicateModelError(schema.name)
            cls._schemas[schema.name] = schema
        logger.debug(
            "model_registered",
            extra={"model_name": schema.name, "attribute_count": len(schema.attributes)},
        )

    @classmethod
    def get(cls, name: str) -> ModelSchema:
        try:
            return cls._schemas[name]
        except KeyError:
            raise ModelNotRegisteredError(name) from None

    @classmethod
    def has(cls, name: str) -> bool:
        return name in cls._schemas

    @classmethod
    def list_models(cls) -> list[str]:
        return sorted(cls._schemas)

    @classmethod
    def freeze(cls) -> None:
        """Finalize the registry. Idempotent."""
        with cls._lock:
            cls._frozen = True
        logger.info("schema_registry_frozen", extra={"model_count": len(cls._schemas)})

    @classmethod
    def is_frozen(cls) -> bool:
        return cls._frozen

    @classmethod
    def clear(cls) -> None:
        """Remove all schemas and unfreeze. FOR TESTING ONLY."""
        with cls._lock:
            cls._schemas.clear()
            cls._frozen = False


def register_model(schema: ModelSchema) -> ModelSchema:
    """Register a schema and return it, for module-level declarations."""
    SchemaRegistry.register(schema)
    return schema
