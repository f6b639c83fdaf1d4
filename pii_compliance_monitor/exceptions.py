"""
Exception hierarchy for the PII compliance monitor.
"""

from typing import Optional


class ComplianceMonitorException(Exception):
    """Base exception for compliance monitor operations."""

    def __init__(self, message: str, correlation_id: Optional[str] = None):
        super().__init__(message)
        self.correlation_id = correlation_id


class ConfigurationException(ComplianceMonitorException):
    """Raised when configuration is invalid."""
    pass


class StoreException(ComplianceMonitorException):
    """Raised when document store operations fail."""
    pass


class DocumentNotFoundException(StoreException):
    """Raised when a document id does not exist in an index."""

    def __init__(self, index: str, doc_id: str, correlation_id: Optional[str] = None):
        super().__init__(
            f"Document '{doc_id}' not found in index '{index}'",
            correlation_id=correlation_id
        )
        self.index = index
        self.doc_id = doc_id


class PolicyLookupException(StoreException):
    """Raised when the policy search against the store fails."""
    pass


class InvalidDocumentException(ComplianceMonitorException):
    """Raised when a raw document payload cannot be turned into a record."""
    pass
