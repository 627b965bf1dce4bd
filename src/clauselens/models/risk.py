"""
Risk flag and clause explanation models.

Defines the closed enumerations the rest of the system aggregates over:
risk type, risk severity and clause importance.
"""

from enum import Enum

from pydantic import Field

from clauselens.models.base import CamelModel


class RiskType(str, Enum):
    """Category of a detected contractual issue."""

    NON_COMPETE = "non-compete"
    AUTO_RENEWAL = "auto-renewal"
    TERMINATION = "termination"
    LIABILITY = "liability"
    PAYMENT = "payment"
    OTHER = "other"


class RiskSeverity(str, Enum):
    """Risk severity levels."""

    HIGH = "high"      # Significant risk exposure
    MEDIUM = "medium"  # Moderate concern
    LOW = "low"        # Minor issue


class ClauseImportance(str, Enum):
    """How much attention a clause deserves."""

    CRITICAL = "critical"
    IMPORTANT = "important"
    STANDARD = "standard"


DEFAULT_RISK_TYPE = RiskType.OTHER
DEFAULT_SEVERITY = RiskSeverity.LOW
DEFAULT_IMPORTANCE = ClauseImportance.STANDARD


class RiskFlag(CamelModel):
    """A single detected issue within one contract analysis."""

    id: str = Field(..., min_length=1, description="Unique within one analysis")
    type: RiskType = DEFAULT_RISK_TYPE
    severity: RiskSeverity = DEFAULT_SEVERITY
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    clause_text: str | None = Field(
        default=None, description="Verbatim excerpt, stored untruncated"
    )
    suggestion: str | None = None

    def display_clause_text(self, limit: int = 200) -> str | None:
        """Clause excerpt shortened for display; storage keeps the full text."""
        if self.clause_text and len(self.clause_text) > limit:
            return self.clause_text[:limit] + "..."
        return self.clause_text


class ClauseExplanation(CamelModel):
    """Plain-language explanation of one contract clause."""

    clause_title: str = ""
    clause_text: str = ""
    explanation: str = Field(..., min_length=1)
    importance: ClauseImportance = DEFAULT_IMPORTANCE
