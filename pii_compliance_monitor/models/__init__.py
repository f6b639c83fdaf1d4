"""
Data models and configuration classes for the compliance monitor.
"""

from .config import MonitorConfig, StoreConfig, ObservabilityConfig
from .document import MonitoredDocument, Violation, ViolationStatus
from .health import HealthStatus
from .pii import PIIKind, PIIMatch, AnalysisResult
from .policy import PolicyClause, PolicyMatch

__all__ = [
    "MonitorConfig",
    "StoreConfig",
    "ObservabilityConfig",
    "MonitoredDocument",
    "Violation",
    "ViolationStatus",
    "HealthStatus",
    "PIIKind",
    "PIIMatch",
    "AnalysisResult",
    "PolicyClause",
    "PolicyMatch",
]
