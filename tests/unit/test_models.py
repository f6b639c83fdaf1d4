"""
Unit tests for document, violation, policy and health models.
"""

from datetime import datetime, timezone

import pytest

from pii_compliance_monitor.exceptions import InvalidDocumentException
from pii_compliance_monitor.models.document import (
    MonitoredDocument, Violation, ViolationStatus, apply_violation_update, parse_timestamp
)
from pii_compliance_monitor.models.health import HealthStatus
from pii_compliance_monitor.models.pii import AnalysisResult, PIIKind, PIIMatch
from pii_compliance_monitor.models.policy import PolicyClause


class TestMonitoredDocument:
    """Test cases for MonitoredDocument."""

    def test_generated_fields(self):
        """Test id and timestamp are generated."""
        document = MonitoredDocument(content="hello")

        assert document.doc_id
        assert isinstance(document.timestamp, datetime)
        assert document.reviewed is False

    def test_to_dict_spreads_analysis(self):
        """Test analysis fields are flattened into the record."""
        match = PIIMatch(PIIKind.SSN, "123-45-6789", "XXX-XX-6789", 4, 15, 0.99)
        analysis = AnalysisResult(
            matches=(match,), kinds=(PIIKind.SSN,), risk_score=0.5, flagged=False
        )
        document = MonitoredDocument(content="SSN 123-45-6789", source="slack", analysis=analysis)

        record = document.to_dict()

        assert record["source"] == "slack"
        assert record["pii_types"] == ["SSN"]
        assert record["pii_count"] == 1
        assert record["risk_score"] == 0.5
        assert record["pii_detected"][0]["redacted"] == "XXX-XX-6789"
        assert "ingested_at" in record

    def test_from_raw(self):
        """Test ingestion payloads are parsed."""
        raw = {
            "id": "msg-1",
            "content": "hi",
            "source": "email",
            "author": "ann",
            "timestamp": "2024-01-15T10:30:00",
            "thread": "t-9",
        }

        document = MonitoredDocument.from_raw(raw, AnalysisResult.empty())

        assert document.doc_id == "msg-1"
        assert document.timestamp == datetime(2024, 1, 15, 10, 30)
        assert document.metadata == {"thread": "t-9"}

    def test_from_raw_missing_content(self):
        """Test absent content becomes an empty string."""
        document = MonitoredDocument.from_raw({"source": "slack"}, AnalysisResult.empty())

        assert document.content == ""
        assert document.source == "slack"

    def test_from_raw_rejects_non_object(self):
        """Test payloads that are not mappings are rejected."""
        with pytest.raises(InvalidDocumentException):
            MonitoredDocument.from_raw(["not", "a", "document"], AnalysisResult.empty())

    def test_from_raw_rejects_bad_timestamp(self):
        """Test an unparseable timestamp raises a domain error."""
        with pytest.raises(InvalidDocumentException, match="yesterday"):
            MonitoredDocument.from_raw({"content": "x", "timestamp": "yesterday"}, AnalysisResult.empty())


class TestParseTimestamp:
    """Test cases for parse_timestamp."""

    @pytest.mark.parametrize("value", [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00.000Z",
        "2024-01-15T10:30:00+00:00",
        "2024-01-15T12:30:00+02:00",
        "2024-01-15T10:30:00",
    ])
    def test_iso_formats(self, value):
        """Test ISO 8601 strings normalize to naive UTC."""
        assert parse_timestamp(value) == datetime(2024, 1, 15, 10, 30)

    def test_aware_datetime(self):
        """Test aware datetimes are converted to naive UTC."""
        value = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

        assert parse_timestamp(value) == datetime(2024, 1, 15, 10, 30)

    def test_missing(self):
        """Test a missing timestamp stays missing."""
        assert parse_timestamp(None) is None

    @pytest.mark.parametrize("value", ["yesterday", "", 1705314600, ["2024-01-15"]])
    def test_invalid(self, value):
        """Test unrecognizable values are rejected."""
        with pytest.raises(InvalidDocumentException):
            parse_timestamp(value)


class TestViolation:
    """Test cases for Violation."""

    def test_from_request_ignores_system_fields(self):
        """Test callers cannot set status or flag metadata."""
        violation = Violation.from_request({
            "document_id": "d1",
            "severity": "HIGH",
            "status": "REMEDIATED",
            "flagged_by": "someone",
            "notes": "SSN in chat",
        })

        assert violation.status == ViolationStatus.PENDING
        assert violation.flagged_by == "agent"
        assert violation.severity == "HIGH"
        assert violation.details == {"notes": "SSN in chat"}

    def test_to_dict(self):
        """Test the stored record layout."""
        violation = Violation(document_id="d1", details={"notes": "x"})

        record = violation.to_dict()

        assert record["status"] == "PENDING"
        assert record["violation_type"] == "PII_EXPOSURE"
        assert record["notes"] == "x"
        assert "reviewed_at" not in record

    @pytest.mark.parametrize("status", ["REVIEWED", "REMEDIATED"])
    def test_update_stamps_review_time(self, status):
        """Test completing a review records when it happened."""
        updates = apply_violation_update({"status": status, "reviewer": "bob"})

        assert updates["status"] == status
        assert "reviewed_at" in updates
        assert updates["reviewer"] == "bob"

    def test_update_in_review(self):
        """Test intermediate states do not stamp a review time."""
        updates = apply_violation_update({"status": "IN_REVIEW"})

        assert "reviewed_at" not in updates

    def test_update_invalid_status(self):
        """Test unknown states are rejected."""
        with pytest.raises(ValueError):
            apply_violation_update({"status": "CLOSED"})


class TestPolicyClause:
    """Test cases for PolicyClause."""

    def test_round_trip(self):
        """Test store documents convert back to clauses."""
        clause = PolicyClause(
            title="Lawfulness of processing",
            content="Processing shall be lawful.",
            framework="GDPR",
            article="Article 6",
            category="DATA_PROTECTION",
            keywords=["lawful", "consent"],
        )

        assert PolicyClause.from_dict(clause.to_dict()) == clause


class TestHealthStatus:
    """Test cases for HealthStatus."""

    def test_unhealthy_component_degrades(self):
        """Test one failing component degrades the status."""
        health = HealthStatus(status="healthy", timestamp=datetime.utcnow())
        health.add_component("store", True)
        health.add_component("pii_detector", False, "patterns failed")

        assert health.is_healthy() is False
        assert health.status == "degraded"
        assert health.to_dict()["components"]["pii_detector"]["message"] == "patterns failed"
