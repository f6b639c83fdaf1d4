"""
Monitored document and violation records.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional

from ..exceptions import InvalidDocumentException
from .pii import AnalysisResult


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ingestion timestamp into a naive UTC datetime.

    Accepts datetimes and ISO 8601 strings, including the trailing "Z" form.

    Raises:
        InvalidDocumentException: If the value is not a recognizable timestamp
    """
    if value is None or isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidDocumentException(f"Invalid timestamp: {value!r}")
    else:
        raise InvalidDocumentException(f"Invalid timestamp: {value!r}")

    if parsed is not None and parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


@dataclass
class MonitoredDocument:
    """
    A chat message, email or review comment scanned for PII.

    The analysis fields are spread into the stored record; ``reviewed`` belongs
    to the review workflow, not to the detection engine.
    """

    content: str
    source: str = "manual"  # "slack", "email", "github", "manual"
    channel: Optional[str] = None
    author: Optional[str] = None
    author_email: Optional[str] = None
    timestamp: Optional[datetime] = None
    doc_id: Optional[str] = None
    analysis: AnalysisResult = field(default_factory=AnalysisResult.empty)
    reviewed: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Initialize document with auto-generated fields."""
        if self.doc_id is None:
            self.doc_id = str(uuid.uuid4())

        if self.timestamp is None:
            self.timestamp = datetime.utcnow()

    def to_dict(self) -> Dict[str, Any]:
        """Convert document to the store's flat record layout."""
        record = {
            "content": self.content,
            "source": self.source,
            "channel": self.channel,
            "author": self.author,
            "author_email": self.author_email,
            "timestamp": self.timestamp.isoformat(),
            "ingested_at": datetime.utcnow().isoformat(),
            "reviewed": self.reviewed,
            "metadata": self.metadata,
        }
        record.update(self.analysis.to_dict())
        return record

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], analysis: AnalysisResult) -> "MonitoredDocument":
        """
        Build a document from an ingestion payload and its analysis.

        Raises:
            InvalidDocumentException: If the payload or its timestamp is malformed
        """
        if not isinstance(raw, dict):
            raise InvalidDocumentException(f"Document must be an object, got {type(raw).__name__}")
        timestamp = parse_timestamp(raw.get("timestamp"))

        known = {"content", "source", "channel", "author", "author_email", "timestamp", "id"}
        return cls(
            content=raw.get("content") or "",
            source=raw.get("source", "manual"),
            channel=raw.get("channel"),
            author=raw.get("author"),
            author_email=raw.get("author_email"),
            timestamp=timestamp,
            doc_id=raw.get("id"),
            analysis=analysis,
            metadata={k: v for k, v in raw.items() if k not in known},
        )


class ViolationStatus(str, Enum):
    """Review states of a flagged violation."""
    PENDING = "PENDING"
    IN_REVIEW = "IN_REVIEW"
    REVIEWED = "REVIEWED"
    REMEDIATED = "REMEDIATED"
    DISMISSED = "DISMISSED"


# Transitions into these states stamp reviewed_at
REVIEW_COMPLETE_STATUSES = (ViolationStatus.REVIEWED, ViolationStatus.REMEDIATED)


@dataclass
class Violation:
    """A compliance violation raised against a monitored document."""

    document_id: Optional[str] = None
    violation_type: str = "PII_EXPOSURE"
    severity: str = "MEDIUM"
    status: ViolationStatus = ViolationStatus.PENDING
    flagged_at: Optional[datetime] = None
    flagged_by: str = "agent"
    reviewed_at: Optional[datetime] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.status, str):
            self.status = ViolationStatus(self.status)

        if self.flagged_at is None:
            self.flagged_at = datetime.utcnow()

    @classmethod
    def from_request(cls, fields: Dict[str, Any]) -> "Violation":
        """
        Create a new violation from caller-supplied fields.

        Status, flag time and flagging agent are always set by the system.
        """
        fields = dict(fields)
        for owned in ("status", "flagged_at", "flagged_by", "reviewed_at"):
            fields.pop(owned, None)

        return cls(
            document_id=fields.pop("document_id", None),
            violation_type=fields.pop("violation_type", "PII_EXPOSURE"),
            severity=fields.pop("severity", "MEDIUM"),
            details=fields,
        )

    def to_dict(self) -> Dict[str, Any]:
        record = {
            **self.details,
            "document_id": self.document_id,
            "violation_type": self.violation_type,
            "severity": self.severity,
            "status": self.status.value,
            "flagged_at": self.flagged_at.isoformat(),
            "flagged_by": self.flagged_by,
        }
        if self.reviewed_at is not None:
            record["reviewed_at"] = self.reviewed_at.isoformat()
        return record


def apply_violation_update(updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize a partial violation update.

    Raises:
        ValueError: If the status is not a known ViolationStatus
    """
    updates = dict(updates)
    if "status" in updates:
        status = ViolationStatus(updates["status"])
        updates["status"] = status.value
        if status in REVIEW_COMPLETE_STATUSES:
            updates["reviewed_at"] = datetime.utcnow().isoformat()
    return updates
