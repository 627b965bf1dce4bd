"""Shared pytest fixtures for the ClauseLens test suite."""

from datetime import datetime, timezone

import pytest
import structlog

from clauselens.config import Settings, get_settings
from clauselens.models.analysis import AnalysisMetadata, ContractAnalysis
from clauselens.models.contract import Contract, ContractStatus
from clauselens.models.risk import ClauseExplanation, RiskFlag
from clauselens.services.normalizer import AnalysisNormalizer


FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Singleton and logging reset (autouse)
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def clear_singletons():
    """Clear cached settings and structlog configuration between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def make_analysis(severities=(), clauses=0, **extra):
    """ContractAnalysis with one risk flag per severity given."""
    flags = [
        RiskFlag(id=f"risk-{i + 1}", severity=severity,
                 title=f"Risk {i + 1}", description="Description")
        for i, severity in enumerate(severities)
    ]
    explanations = [
        ClauseExplanation(clause_title=f"Clause {i + 1}", explanation="Explained")
        for i in range(clauses)
    ]
    return ContractAnalysis(
        summary=extra.pop("summary", "A services agreement."),
        risk_flags=flags,
        clause_explanations=explanations,
        metadata=AnalysisMetadata(
            total_clauses=len(explanations), analyzed_at=FIXED_NOW, model="gpt-4o",
        ),
        **extra,
    )


def make_contract(contract_id, analysis=None, status=None, created_at=None,
                  file_name=None):
    """Contract in the given status; completed when an analysis is passed."""
    if status is None:
        status = ContractStatus.COMPLETED if analysis is not None else ContractStatus.PROCESSING
    return Contract(
        id=contract_id,
        file_name=file_name or f"{contract_id}.pdf",
        file_type="pdf",
        status=status,
        analysis=analysis,
        created_at=created_at or FIXED_NOW,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def normalizer(settings):
    """AnalysisNormalizer with a fixed clock."""
    return AnalysisNormalizer(settings=settings, clock=lambda: FIXED_NOW)


@pytest.fixture
def raw_analysis():
    """A complete raw AI payload in the camelCase wire shape."""
    return {
        "summary": "Acme provides hosting services to Beta for two years.",
        "keyParties": {"party1": "Acme Hosting Inc.", "party2": "Beta Retail LLC"},
        "duration": "24 months",
        "paymentTerms": "Net 30",
        "obligations": [
            "Acme maintains 99.9% uptime",
            "Beta pays monthly invoices",
        ],
        "riskFlags": [
            {
                "type": "auto-renewal",
                "severity": "high",
                "title": "Automatic renewal",
                "description": "Renews for 12 months unless cancelled 90 days prior.",
                "clauseText": "This Agreement shall automatically renew...",
                "suggestion": "Negotiate a 30 day notice window.",
            },
            {
                "type": "liability",
                "severity": "medium",
                "title": "Liability cap",
                "description": "Liability capped at fees paid in prior 3 months.",
            },
            {
                "type": "payment",
                "severity": "low",
                "title": "Late fee",
                "description": "1.5% monthly late fee.",
            },
        ],
        "clauseExplanations": [
            {
                "clauseTitle": "Term",
                "clauseText": "The term of this Agreement is 24 months.",
                "explanation": "The contract lasts two years.",
                "importance": "important",
            },
            {
                "clauseTitle": "Governing Law",
                "clauseText": "Governed by the laws of Delaware.",
                "explanation": "Delaware law applies to disputes.",
                "importance": "standard",
            },
        ],
        "financialDetails": {
            "totalValue": "$120,000",
            "currency": "USD",
            "paymentAmounts": [
                {"amount": "$5,000", "schedule": "monthly", "dueDate": "1st of month"},
            ],
        },
        "dates": {"startDate": "2024-01-01", "endDate": "2025-12-31"},
        "legalInfo": {
            "governingLaw": "Delaware",
            "jurisdiction": "New Castle County",
            "disputeResolution": "Arbitration",
        },
        "contractMetadata": {
            "contractType": "Services Agreement",
            "signatories": [
                {"name": "Jane Roe", "title": "CEO", "party": "Acme Hosting Inc."},
            ],
        },
        "structuredTerms": {
            "renewal": {"autoRenewal": True, "noticePeriod": "90 days"},
            "termination": {"noticePeriod": "60 days", "conditions": ["Material breach"]},
        },
        "metadata": {"totalClauses": 7, "model": "gpt-4o"},
    }


@pytest.fixture
def analysis_factory():
    return make_analysis


@pytest.fixture
def contract_factory():
    return make_contract


@pytest.fixture
def fixed_now():
    return FIXED_NOW
