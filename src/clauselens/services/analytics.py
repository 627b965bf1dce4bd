"""
Portfolio analytics aggregation.

Computes dashboard metrics over a user's whole contract collection. The
aggregator never raises: an empty collection yields zero-valued metrics.
Time-window filtering is a separate pass over the monthly counts.
"""

from collections import Counter
from datetime import date, datetime, timezone
from typing import Iterable

import structlog

from clauselens.models.analytics import (
    PortfolioAnalytics,
    PortfolioMetrics,
    RiskDistribution,
    TimePeriod,
)
from clauselens.models.contract import Contract
from clauselens.models.risk import RiskSeverity
from clauselens.services.metrics import safe_percentage, safe_ratio

logger = structlog.get_logger(__name__)


def month_key(timestamp: datetime) -> str:
    """`YYYY-MM` bucket for a timestamp, aware timestamps taken in UTC."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)
    return timestamp.strftime("%Y-%m")


def subtract_months(day: date, months: int) -> date:
    """First day of the month `months` calendar months before `day`'s month."""
    index = day.year * 12 + (day.month - 1) - months
    return date(index // 12, index % 12 + 1, 1)


def _parse_month(key: str) -> date | None:
    try:
        return datetime.strptime(key, "%Y-%m").date()
    except ValueError:
        return None


class AnalyticsAggregator:
    """Aggregates portfolio metrics from a collection of contracts."""

    def aggregate(self, contracts: Iterable[Contract]) -> PortfolioAnalytics:
        total = 0
        completed = 0
        high_risk_contracts = 0
        severities: Counter = Counter()
        by_month: Counter = Counter()

        for contract in contracts:
            total += 1
            by_month[month_key(contract.created_at)] += 1

            if not contract.is_completed or contract.analysis is None:
                continue
            completed += 1
            counts = contract.analysis.severity_counts()
            severities.update(counts)
            if counts[RiskSeverity.HIGH] > 0:
                high_risk_contracts += 1

        distribution = RiskDistribution(
            high=severities[RiskSeverity.HIGH],
            medium=severities[RiskSeverity.MEDIUM],
            low=severities[RiskSeverity.LOW],
        )
        analytics = PortfolioAnalytics(
            total_contracts=total,
            completed_contracts=completed,
            total_risk_flags=distribution.total,
            high_risk_contracts=high_risk_contracts,
            risk_distribution=distribution,
            contracts_by_month=dict(sorted(by_month.items())),
        )

        logger.debug(
            "portfolio_aggregated",
            total_contracts=total,
            completed_contracts=completed,
            months=len(analytics.contracts_by_month),
        )
        return analytics

    def filter_months(
        self,
        contracts_by_month: dict[str, int],
        period: TimePeriod = TimePeriod.ALL,
        now: datetime | None = None,
    ) -> list[tuple[str, int]]:
        """
        Month/count pairs inside the time window, sorted by month.

        The window starts on the first day of the month `period.months`
        calendar months before the current month.
        """
        months = sorted(contracts_by_month.items())
        if period.months is None:
            return months

        now = now or datetime.now(timezone.utc)
        cutoff = subtract_months(now.date(), period.months)

        filtered = []
        for key, count in months:
            month = _parse_month(key)
            if month is None:
                logger.warning("month_key_skipped", key=key)
                continue
            if month >= cutoff:
                filtered.append((key, count))
        return filtered

    def compute_metrics(
        self,
        analytics: PortfolioAnalytics,
        period: TimePeriod = TimePeriod.ALL,
        now: datetime | None = None,
    ) -> PortfolioMetrics:
        """Derived dashboard metrics, every division zero-safe."""
        filtered = self.filter_months(analytics.contracts_by_month, period, now)
        total_in_period = sum(count for _, count in filtered)

        return PortfolioMetrics(
            period=period,
            avg_risk_per_contract=safe_ratio(
                analytics.total_risk_flags, analytics.total_contracts, digits=2
            ),
            success_rate=safe_percentage(
                analytics.completed_contracts, analytics.total_contracts
            ),
            high_risk_percentage=safe_percentage(
                analytics.high_risk_contracts, analytics.total_contracts
            ),
            filtered_months=filtered,
            total_in_period=total_in_period,
            avg_per_month=safe_ratio(total_in_period, len(filtered), digits=1),
        )


def aggregate(contracts: Iterable[Contract]) -> PortfolioAnalytics:
    """Aggregate portfolio analytics with the default aggregator."""
    return AnalyticsAggregator().aggregate(contracts)
