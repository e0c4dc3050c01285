"""Document storage adapters."""

from .local import LocalDocumentStore

__all__ = ["LocalDocumentStore"]
