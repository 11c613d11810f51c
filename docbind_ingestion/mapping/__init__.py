"""Mapping engine: raw-match gathering and per-record attribute binding."""

from docbind_ingestion.mapping.engine import (
    BindingResult,
    bind_model,
    bind_record,
    dump_record,
    element_value,
    gather_raw_values,
)

__all__ = [
    "bind_model",
    "bind_record",
    "dump_record",
    "element_value",
    "gather_raw_values",
    "BindingResult",
]
