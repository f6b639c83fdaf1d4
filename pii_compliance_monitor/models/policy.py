"""
Compliance policy data models.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional


@dataclass
class PolicyClause:
    """A unit of regulatory or internal-policy text (e.g. one GDPR article)."""

    title: str
    content: str
    framework: str  # "GDPR", "HIPAA", "INTERNAL", ...
    article: str
    category: str  # "DATA_PROTECTION", "BREACH_NOTIFICATION", ...
    section: Optional[str] = None
    effective_date: Optional[str] = None
    version: Optional[str] = None
    keywords: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert policy clause to a store document."""
        return {
            "title": self.title,
            "content": self.content,
            "framework": self.framework,
            "section": self.section,
            "article": self.article,
            "category": self.category,
            "effective_date": self.effective_date,
            "version": self.version,
            "keywords": list(self.keywords),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PolicyClause":
        """Create a policy clause from a store document."""
        return cls(
            title=data.get("title", ""),
            content=data.get("content", ""),
            framework=data.get("framework", ""),
            article=data.get("article", ""),
            category=data.get("category", ""),
            section=data.get("section"),
            effective_date=data.get("effective_date"),
            version=data.get("version"),
            keywords=list(data.get("keywords") or []),
        )


@dataclass(frozen=True)
class PolicyMatch:
    """A policy clause returned for a document's detected PII."""

    id: str
    title: str
    framework: str
    article: str
    relevance_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "framework": self.framework,
            "article": self.article,
            "score": self.relevance_score,
        }
