"""doc-reconcile: positional patches and three-way merges for documents."""

__version__ = "1.0.0"
