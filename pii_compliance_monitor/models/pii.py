"""
PII (Personally Identifiable Information) detection data models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Tuple


class PIIKind(str, Enum):
    """Categories of PII recognized by the detector."""
    EMAIL = "EMAIL"
    SSN = "SSN"
    PHONE = "PHONE"
    CREDIT_CARD = "CREDIT_CARD"
    DATE_OF_BIRTH = "DATE_OF_BIRTH"
    IP_ADDRESS = "IP_ADDRESS"


# Stand-in carried instead of the matched text for the most sensitive kinds
WITHHELD_VALUE = "[REDACTED]"
WITHHELD_KINDS = frozenset({PIIKind.SSN, PIIKind.CREDIT_CARD})


@dataclass(frozen=True)
class PIIMatch:
    """Represents a detected PII match in text."""

    kind: PIIKind
    raw_value: str  # Exact matched text, text[start:end]
    redacted_value: str  # Display-safe masked form
    start: int  # Start position in the source text
    end: int  # End position in the source text (exclusive)
    confidence: float  # Fixed per kind (0.0 to 1.0]

    @property
    def value(self) -> str:
        """Value safe to carry forward: the placeholder for SSNs and cards."""
        if self.kind in WITHHELD_KINDS:
            return WITHHELD_VALUE
        return self.raw_value

    @property
    def length(self) -> int:
        """Number of characters covered in the source text."""
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        """Convert PII match to the document store's field layout."""
        return {
            "type": self.kind.value,
            "value": self.value,
            "redacted": self.redacted_value,
            "start_pos": self.start,
            "end_pos": self.end,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Detection outcome for a single document.

    ``matches`` keeps recognizer order (all emails, then SSNs, then phones and
    so on), not text position. ``kinds`` is deduplicated in first-seen order.
    """

    matches: Tuple[PIIMatch, ...] = field(default_factory=tuple)
    kinds: Tuple[PIIKind, ...] = field(default_factory=tuple)
    risk_score: float = 0.0
    flagged: bool = False

    @classmethod
    def empty(cls) -> "AnalysisResult":
        """Zero-finding result used for clean or missing content."""
        return cls()

    @property
    def count(self) -> int:
        return len(self.matches)

    @property
    def has_pii(self) -> bool:
        return bool(self.matches)

    def matches_by_position(self) -> List[PIIMatch]:
        """Matches ordered by start offset instead of scan order."""
        return sorted(self.matches, key=lambda m: (m.start, m.end))

    def type_counts(self) -> Dict[str, int]:
        """Number of matches per kind."""
        counts: Dict[str, int] = {}
        for match in self.matches:
            counts[match.kind.value] = counts.get(match.kind.value, 0) + 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        """Flat field layout merged into monitored document records."""
        return {
            "pii_detected": [match.to_dict() for match in self.matches],
            "pii_types": [kind.value for kind in self.kinds],
            "pii_count": self.count,
            "risk_score": self.risk_score,
            "flagged": self.flagged,
        }
