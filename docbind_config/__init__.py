"""
docbind_config -- YAML-declared model schemas.

Responsibility:
    Turns declarative model files into registered ``ModelSchema`` objects.
    Loading happens once at model-definition time; callers then freeze
    ``SchemaRegistry`` and bind documents against the frozen schemas.
"""

from docbind_config.loader import (
    load_model_schemas,
    load_yaml_file,
    parse_attribute,
    parse_mapping,
    parse_model,
    register_models_from_file,
    resolve_reference,
)

__all__ = [
    "load_model_schemas",
    "load_yaml_file",
    "parse_attribute",
    "parse_mapping",
    "parse_model",
    "register_models_from_file",
    "resolve_reference",
]
