#!/usr/bin/env python3
"""
Basic usage example for the PII Compliance Monitor.

This example demonstrates:
- Configuration
- Policy and document ingestion
- Analyzing a new document
- Reviewing flagged documents
"""

from pii_compliance_monitor import ComplianceMonitor, MonitorConfig, StoreConfig


POLICIES = [
    {
        "title": "GDPR Article 32 - Security of Processing",
        "content": "The controller and the processor shall implement appropriate technical "
                   "and organisational measures to ensure a level of security appropriate to "
                   "the risk, including the pseudonymisation and encryption of personal data.",
        "framework": "GDPR",
        "section": "Chapter IV",
        "article": "Article 32",
        "category": "DATA_SECURITY",
    },
    {
        "title": "HIPAA Privacy Rule - PHI Disclosure",
        "content": "A covered entity may not use or disclose protected health information, "
                   "except as the Privacy Rule permits or requires.",
        "framework": "HIPAA",
        "article": "164.502",
        "category": "PHI_DISCLOSURE",
    },
    {
        "title": "Internal Policy - Communication Channel Rules",
        "content": "Personal data disclosure over chat channels is prohibited. PII protection "
                   "requires sharing customer details only through the ticketing system.",
        "framework": "INTERNAL",
        "article": "COM-002",
        "category": "COMMUNICATION_SECURITY",
    },
]

DOCUMENTS = [
    {
        "content": "Their SSN is 123-45-6789. The customer email is john.doe@example.com "
                   "and phone is 555-123-4567.",
        "source": "slack",
        "channel": "#customer-support",
        "author": "sarah.jones",
    },
    {
        "content": "The new feature deployment is scheduled for next Tuesday at 2 AM UTC.",
        "source": "slack",
        "channel": "#announcements",
        "author": "devops.lead",
    },
]


def main():
    """Demonstrate basic compliance monitor usage."""
    config = MonitorConfig(store=StoreConfig(store_type="memory"))

    with ComplianceMonitor(config) as monitor:
        monitor.ingest_policies(POLICIES)

        summary = monitor.ingest_documents(DOCUMENTS)
        print(f"Ingested {summary.successful}/{summary.total} documents, "
              f"{summary.high_risk} high risk")

        report = monitor.analyze_document(
            "SSN 123-45-6789, card 4532-1234-5678-9012",
            source="email",
            author="payments.team"
        )
        print(f"Risk: {report['riskScore']:.2f} ({report['riskLevel']})")
        for match in report["piiDetected"]:
            print(f"  {match['type']}: {match['redacted']}")
        for policy in report["matchedPolicies"]:
            print(f"  Policy: {policy['title']} ({policy['framework']} {policy['article']})")
        for recommendation in report["recommendations"]:
            print(f"  - {recommendation}")

        print(f"Flagged documents: {len(monitor.flagged_documents())}")
        print(monitor.get_stats())


if __name__ == "__main__":
    main()
