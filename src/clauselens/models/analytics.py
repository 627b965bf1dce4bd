"""
Portfolio analytics models.
"""

from enum import Enum

from pydantic import Field

from clauselens.models.base import CamelModel


class TimePeriod(str, Enum):
    """Dashboard time windows over the monthly contract counts."""

    ALL = "all"
    THREE_MONTHS = "3months"
    SIX_MONTHS = "6months"
    TWELVE_MONTHS = "12months"

    @property
    def months(self) -> int | None:
        """Number of calendar months covered, None for all time."""
        return {
            TimePeriod.ALL: None,
            TimePeriod.THREE_MONTHS: 3,
            TimePeriod.SIX_MONTHS: 6,
            TimePeriod.TWELVE_MONTHS: 12,
        }[self]


class RiskDistribution(CamelModel):
    high: int = 0
    medium: int = 0
    low: int = 0

    @property
    def total(self) -> int:
        return self.high + self.medium + self.low


class PortfolioAnalytics(CamelModel):
    """Aggregate statistics over a user's whole contract collection."""

    total_contracts: int = Field(default=0, ge=0)
    completed_contracts: int = Field(default=0, ge=0)
    total_risk_flags: int = Field(default=0, ge=0)
    high_risk_contracts: int = Field(default=0, ge=0)
    risk_distribution: RiskDistribution = Field(default_factory=RiskDistribution)
    contracts_by_month: dict[str, int] = Field(
        default_factory=dict, description="Sparse YYYY-MM -> count"
    )


class PortfolioMetrics(CamelModel):
    """Derived dashboard metrics for one time window."""

    period: TimePeriod = TimePeriod.ALL
    avg_risk_per_contract: float = 0.0
    success_rate: float = 0.0
    high_risk_percentage: float = 0.0
    filtered_months: list[tuple[str, int]] = Field(default_factory=list)
    total_in_period: int = 0
    avg_per_month: float = 0.0
