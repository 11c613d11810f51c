"""
docbind_kernel -- Coercion and cardinality core of document-to-object binding.

Turns raw values extracted from a parsed document into typed attribute
values and enforces how many raw values each attribute may bind to.

Architecture:
    docbind_kernel/ imports nothing from docbind_config or docbind_ingestion.
    Document gathering lives in docbind_ingestion; YAML model loading in
    docbind_config.
"""
