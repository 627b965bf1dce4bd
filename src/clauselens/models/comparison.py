"""
Cross-contract comparison result models.

Every insight table holds exactly one row per compared contract, in input
order; absent data shows up as empty fields, never as a missing row.
"""

from pydantic import Field

from clauselens.models.analysis import (
    ConfidentialityTerms,
    IntellectualPropertyTerms,
    KeyParties,
    PaymentAmount,
    RenewalTerms,
    TerminationTerms,
)
from clauselens.models.base import CamelModel


class ComparedContract(CamelModel):
    """Header row describing one compared contract."""

    id: str
    file_name: str
    summary: str | None = None
    risk_count: int = 0
    key_parties: KeyParties | None = None


class RiskLevelRow(CamelModel):
    """Per-contract risk rollup with max-highlighting flags."""

    contract_id: str
    file_name: str
    high_risks: int = Field(default=0, ge=0)
    medium_risks: int = Field(default=0, ge=0)
    low_risks: int = Field(default=0, ge=0)
    total_risks: int = Field(default=0, ge=0)
    risk_share: float = Field(default=0.0, description="Percent of all compared flags")
    is_max_high: bool = False
    is_max_medium: bool = False
    is_max_low: bool = False


class FinancialInsight(CamelModel):
    contract_id: str
    file_name: str
    total_value: str | None = None
    currency: str | None = None
    payment_amounts: list[PaymentAmount] = Field(default_factory=list)


class DateInsight(CamelModel):
    contract_id: str
    file_name: str
    start_date: str | None = None
    end_date: str | None = None
    duration: str | None = None


class LegalInsight(CamelModel):
    contract_id: str
    file_name: str
    governing_law: str | None = None
    jurisdiction: str | None = None
    dispute_resolution: str | None = None
    venue: str | None = None


class TermsInsight(CamelModel):
    contract_id: str
    file_name: str
    renewal: RenewalTerms | None = None
    termination: TerminationTerms | None = None
    intellectual_property: IntellectualPropertyTerms | None = None
    confidentiality: ConfidentialityTerms | None = None


class RiskDifferences(CamelModel):
    """Sums and maxima of risk counts across the compared set."""

    total_high_risks: int = 0
    total_medium_risks: int = 0
    total_low_risks: int = 0
    max_high_risks: int = 0
    max_medium_risks: int = 0
    max_low_risks: int = 0


class ComparisonResult(CamelModel):
    """Side-by-side comparison of two or more analyzed contracts."""

    contracts: list[ComparedContract]
    risk_levels: list[RiskLevelRow]
    financial: list[FinancialInsight]
    dates: list[DateInsight]
    legal: list[LegalInsight]
    terms: list[TermsInsight]
    differences: RiskDifferences

    @property
    def contract_count(self) -> int:
        return len(self.contracts)

    def max_high_risk_contracts(self) -> list[str]:
        """Ids of every contract tied at the highest high-risk count."""
        return [row.contract_id for row in self.risk_levels if row.is_max_high]
