"""Allow ``python -m doc_reconcile``."""

from .cli import run

run()
