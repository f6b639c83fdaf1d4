"""
Integration tests for the HTTP API.
"""

from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from pii_compliance_monitor.api import create_app
from pii_compliance_monitor.exceptions import StoreException
from pii_compliance_monitor.manager import ComplianceMonitor
from pii_compliance_monitor.models.config import MonitorConfig, StoreConfig
from pii_compliance_monitor.models.policy import PolicyClause


class TestComplianceAPI:
    """Test cases for the FastAPI routes."""

    def setup_method(self):
        """Set up test fixtures."""
        self.monitor = ComplianceMonitor(
            config=MonitorConfig(store=StoreConfig(store_type="memory")),
            logger=Mock()
        )
        self.monitor.ingest_policies([
            PolicyClause(
                title="Security of processing",
                content="Appropriate measures to protect personal data.",
                framework="GDPR",
                article="Article 32",
                category="DATA_SECURITY",
            ),
            PolicyClause(
                title="Minimum necessary",
                content="Limit use of protected health information.",
                framework="HIPAA",
                article="164.502(b)",
                category="PHI_DISCLOSURE",
            ),
        ])
        self.client = TestClient(create_app(self.monitor))

    def test_analyze(self):
        """Test the analysis response layout."""
        response = self.client.post("/api/analyze", json={
            "content": "SSN 123-45-6789, card 4532-1234-5678-9012",
            "author": "ann",
        })

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {
            "documentId", "content", "piiDetected", "piiCount", "piiTypes", "riskScore",
            "riskLevel", "flagged", "matchedPolicies", "recommendations",
        }
        assert body["piiTypes"] == ["SSN", "CREDIT_CARD"]
        assert body["riskLevel"] == "HIGH"
        assert body["flagged"] is True
        assert body["riskScore"] == pytest.approx(0.95)
        assert body["piiDetected"][0]["redacted"] == "XXX-XX-6789"
        assert body["piiDetected"][0]["value"] == "[REDACTED]"
        assert len(body["matchedPolicies"]) == 2

    @pytest.mark.parametrize("payload", [{}, {"content": ""}, {"content": None}])
    def test_analyze_requires_content(self, payload):
        """Test empty content is a client error."""
        response = self.client.post("/api/analyze", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Content is required"}

    def test_analyze_store_failure(self):
        """Test store errors become a 500 with an error body."""
        with patch.object(self.monitor.store, "index_document", side_effect=StoreException("disk full")):
            response = self.client.post("/api/analyze", json={"content": "hello"})

        assert response.status_code == 500
        assert response.json() == {"error": "disk full"}

    def test_unexpected_failure(self):
        """Test unexpected errors become a 500 with an error body."""
        client = TestClient(create_app(self.monitor), raise_server_exceptions=False)

        with patch.object(self.monitor, "get_stats", side_effect=RuntimeError("boom")):
            response = client.get("/api/stats")

        assert response.status_code == 500
        assert response.json() == {"error": "boom"}

    def test_stats(self):
        """Test dashboard counters."""
        self.client.post("/api/analyze", json={"content": "mail jane@example.com"})

        response = self.client.get("/api/stats")

        assert response.json() == {
            "totalDocuments": 1,
            "flaggedDocuments": 0,
            "highRiskDocuments": 0,
            "totalPolicies": 2,
        }

    def test_documents(self):
        """Test document listing and the flagged view."""
        self.client.post("/api/analyze", json={"content": "mail jane@example.com", "source": "email"})
        self.client.post("/api/analyze", json={"content": "SSN 123-45-6789, card 4532123456789012"})

        all_documents = self.client.get("/api/documents").json()
        email_documents = self.client.get("/api/documents", params={"source": "email"}).json()
        flagged = self.client.get("/api/documents/flagged").json()

        assert all_documents["total"] == 2
        assert email_documents["total"] == 1
        assert email_documents["documents"][0]["source"] == "email"
        assert flagged["total"] == 1
        assert flagged["documents"][0]["flagged"] is True

    def test_documents_dashboard_filters(self):
        """Test minimum risk and flagged-only filters."""
        self.client.post("/api/analyze", json={"content": "mail jane@example.com"})
        self.client.post("/api/analyze", json={"content": "SSN 123-45-6789, born 03/15/1985"})
        self.client.post("/api/analyze", json={"content": "SSN 987-65-4321"})

        medium = self.client.get("/api/documents", params={"minRisk": 0.3}).json()
        flagged_only = self.client.get("/api/documents", params={"flaggedOnly": "true"}).json()
        combined = self.client.get(
            "/api/documents", params={"minRisk": 0.3, "flaggedOnly": "true"}
        ).json()

        assert medium["total"] == 2
        assert flagged_only["total"] == 1
        assert combined["documents"][0]["risk_score"] == pytest.approx(0.8)
        assert combined["total"] == 1

    def test_documents_min_risk_out_of_range(self):
        """Test minimum risk outside [0, 1] is rejected."""
        response = self.client.get("/api/documents", params={"minRisk": 1.5})

        assert response.status_code == 422

    def test_policies(self):
        """Test policy listing by framework."""
        response = self.client.get("/api/policies", params={"framework": "HIPAA"})

        body = response.json()
        assert body["total"] == 1
        assert body["policies"][0]["title"] == "Minimum necessary"

    def test_policy_search(self):
        """Test free-text policy search."""
        response = self.client.post("/api/policies/search", json={"query": "health information"})

        body = response.json()
        assert [p["title"] for p in body["policies"]] == ["Minimum necessary"]

    def test_policy_search_by_framework(self):
        """Test the framework restricts search results."""
        self.monitor.ingest_policies([PolicyClause(
            title="Health data", content="Protected health information handling.",
            framework="GDPR", article="Article 9", category="DATA_PROTECTION",
        )])

        unfiltered = self.client.post("/api/policies/search", json={"query": "health"}).json()
        hipaa = self.client.post(
            "/api/policies/search", json={"query": "health", "framework": "HIPAA"}
        ).json()

        assert unfiltered["total"] == 2
        assert [p["title"] for p in hipaa["policies"]] == ["Minimum necessary"]

    def test_violation_lifecycle(self):
        """Test creating, updating and listing violations."""
        created = self.client.post("/api/violations", json={
            "document_id": "d1", "severity": "HIGH", "status": "DISMISSED",
        }).json()

        assert created["status"] == "PENDING"

        updated = self.client.patch(f"/api/violations/{created['id']}", json={"status": "REMEDIATED"})

        assert updated.status_code == 200
        assert updated.json()["status"] == "REMEDIATED"
        assert "reviewed_at" in updated.json()

        listed = self.client.get("/api/violations", params={"status": "REMEDIATED"}).json()
        assert listed["total"] == 1

    def test_update_unknown_violation(self):
        """Test updating a missing violation is a 404."""
        response = self.client.patch("/api/violations/missing", json={"status": "REVIEWED"})

        assert response.status_code == 404
        assert "missing" in response.json()["error"]

    def test_update_invalid_status(self):
        """Test invalid states are a 400."""
        created = self.client.post("/api/violations", json={"document_id": "d1"}).json()

        response = self.client.patch(f"/api/violations/{created['id']}", json={"status": "CLOSED"})

        assert response.status_code == 400

    def test_health(self):
        """Test the health endpoint."""
        response = self.client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health_unhealthy(self):
        """Test an unhealthy store yields 503."""
        with patch.object(self.monitor.store, "health_check", return_value=False):
            response = self.client.get("/api/health")

        assert response.status_code == 503
        assert response.json()["components"]["store"]["healthy"] is False
