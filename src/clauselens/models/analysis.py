"""
Contract analysis aggregate.

The full structured result for one analyzed document. Instances are
immutable; a re-analysis produces a new instance.
"""

from datetime import datetime

from pydantic import Field, model_validator

from clauselens.models.base import CamelModel
from clauselens.models.risk import ClauseExplanation, RiskFlag, RiskSeverity


# =============================================================================
# Parties, Financials, Dates, Legal
# =============================================================================


class KeyParties(CamelModel):
    """The two principal parties to the contract."""

    party1: str
    party2: str


class PaymentAmount(CamelModel):
    amount: str
    schedule: str
    due_date: str | None = None


class FinancialDetails(CamelModel):
    total_value: str | None = None
    currency: str | None = None
    payment_amounts: list[PaymentAmount] = Field(default_factory=list)


class ContractDates(CamelModel):
    start_date: str | None = None
    end_date: str | None = None
    signing_date: str | None = None
    effective_date: str | None = None


class LegalInfo(CamelModel):
    governing_law: str | None = None
    jurisdiction: str | None = None
    dispute_resolution: str | None = None
    venue: str | None = None


class Signatory(CamelModel):
    name: str
    party: str
    title: str | None = None
    role: str | None = None


class ContractMetadata(CamelModel):
    contract_type: str | None = None
    category: str | None = None
    signatories: list[Signatory] = Field(default_factory=list)


# =============================================================================
# Structured Terms
# =============================================================================


class RenewalTerms(CamelModel):
    auto_renewal: bool | None = None
    notice_period: str | None = None
    renewal_term: str | None = None
    conditions: str | None = None


class TerminationTerms(CamelModel):
    notice_period: str | None = None
    termination_fees: str | None = None
    conditions: list[str] = Field(default_factory=list)


class IntellectualPropertyTerms(CamelModel):
    ownership: str | None = None
    licensing: str | None = None
    restrictions: str | None = None


class ConfidentialityTerms(CamelModel):
    scope: str | None = None
    duration: str | None = None
    exceptions: list[str] = Field(default_factory=list)


class ForceMajeureTerms(CamelModel):
    definition: str | None = None
    consequences: str | None = None


class InsuranceTerms(CamelModel):
    requirements: list[str] = Field(default_factory=list)
    minimum_coverage: str | None = None


class StructuredTerms(CamelModel):
    """Clause-family specific terms, each subsection optional."""

    renewal: RenewalTerms | None = None
    termination: TerminationTerms | None = None
    intellectual_property: IntellectualPropertyTerms | None = None
    confidentiality: ConfidentialityTerms | None = None
    force_majeure: ForceMajeureTerms | None = None
    insurance: InsuranceTerms | None = None


# =============================================================================
# Performance Metrics
# =============================================================================


class Milestone(CamelModel):
    name: str
    date: str | None = None
    description: str | None = None


class PerformanceMetrics(CamelModel):
    slas: list[str] = Field(default_factory=list)
    kpis: list[str] = Field(default_factory=list)
    deliverables: list[str] = Field(default_factory=list)
    milestones: list[Milestone] = Field(default_factory=list)


# =============================================================================
# Aggregate
# =============================================================================


class AnalysisMetadata(CamelModel):
    """Derived bookkeeping for an analysis, never sourced from the AI."""

    total_clauses: int = Field(..., ge=0)
    analyzed_at: datetime
    model: str


class ContractAnalysis(CamelModel):
    """
    Structured analysis of one contract document.

    `metadata.total_clauses` always equals the number of clause
    explanations; construction fails otherwise.
    """

    summary: str = Field(..., min_length=1)
    key_parties: KeyParties | None = None
    duration: str | None = None
    payment_terms: str | None = None
    obligations: tuple[str, ...] = ()
    risk_flags: tuple[RiskFlag, ...] = ()
    clause_explanations: tuple[ClauseExplanation, ...] = ()

    financial_details: FinancialDetails | None = None
    dates: ContractDates | None = None
    legal_info: LegalInfo | None = None
    contract_metadata: ContractMetadata | None = None
    structured_terms: StructuredTerms | None = None
    performance_metrics: PerformanceMetrics | None = None

    metadata: AnalysisMetadata

    @model_validator(mode="after")
    def check_total_clauses(self) -> "ContractAnalysis":
        if self.metadata.total_clauses != len(self.clause_explanations):
            raise ValueError(
                f"metadata.totalClauses ({self.metadata.total_clauses}) does not match "
                f"clauseExplanations ({len(self.clause_explanations)})"
            )
        return self

    @model_validator(mode="after")
    def check_unique_risk_ids(self) -> "ContractAnalysis":
        ids = [flag.id for flag in self.risk_flags]
        if len(ids) != len(set(ids)):
            raise ValueError("riskFlags ids must be unique within an analysis")
        return self

    def severity_counts(self) -> dict[RiskSeverity, int]:
        """Count risk flags at each severity, every severity present."""
        counts = {severity: 0 for severity in RiskSeverity}
        for flag in self.risk_flags:
            counts[flag.severity] += 1
        return counts

    @property
    def has_high_risk(self) -> bool:
        return any(flag.severity == RiskSeverity.HIGH for flag in self.risk_flags)

    def to_json(self, indent: int | None = None) -> str:
        """Serialize to the persisted camelCase JSON shape."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)

    @classmethod
    def from_json(cls, data: str | bytes) -> "ContractAnalysis":
        """Load a previously persisted analysis."""
        return cls.model_validate_json(data)
