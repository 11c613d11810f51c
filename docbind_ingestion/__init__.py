"""
docbind_ingestion -- Binding parsed documents to declared models.

Gathers raw matches per attribute from JSON-like dicts or XML element trees
and hands them to the kernel resolver; writes typed values back for the
reverse direction.

Architecture:
    docbind_ingestion/ is a top-level package. Nothing in docbind_kernel
    imports from ingestion.
"""
