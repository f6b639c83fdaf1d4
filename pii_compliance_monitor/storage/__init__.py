"""
Storage backends for monitored documents, policies and violations.
"""

from .interface import DocumentStoreInterface, SearchHit
from .local import LocalDocumentStore

__all__ = ["DocumentStoreInterface", "SearchHit", "LocalDocumentStore"]
