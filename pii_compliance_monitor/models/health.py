"""
Health monitoring data models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional


@dataclass
class HealthStatus:
    """Health status information."""

    status: str  # "healthy", "degraded", "unhealthy"
    timestamp: datetime
    components: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    overall_health: bool = True

    def add_component(
        self,
        name: str,
        healthy: bool,
        message: str = "",
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add a component health status."""
        self.components[name] = {
            "healthy": healthy,
            "message": message,
            "details": details or {},
        }

        if not healthy:
            self.overall_health = False
            if self.status == "healthy":
                self.status = "degraded"

    def is_healthy(self) -> bool:
        """Check if every component is healthy."""
        return self.status == "healthy"

    def to_dict(self) -> Dict[str, Any]:
        """Convert health status to dictionary."""
        return {
            "status": self.status,
            "timestamp": self.timestamp.isoformat(),
            "overall_health": self.overall_health,
            "components": self.components
        }
