"""
Cross-contract comparison engine.

Aligns two or more analyzed contracts along risk, financial, date, legal
and terms dimensions. Every insight table is total over the compared set:
a contract with no data for a dimension still gets a row with empty fields.
Source analyses are read, never mutated; nested values are deep-copied.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

import structlog

from clauselens.exceptions import InsufficientContractsError
from clauselens.models.analysis import ContractAnalysis
from clauselens.models.comparison import (
    ComparedContract,
    ComparisonResult,
    DateInsight,
    FinancialInsight,
    LegalInsight,
    RiskDifferences,
    RiskLevelRow,
    TermsInsight,
)
from clauselens.models.contract import Contract
from clauselens.models.risk import RiskSeverity
from clauselens.services.metrics import safe_percentage

logger = structlog.get_logger(__name__)

MIN_CONTRACTS = 2


@dataclass(frozen=True)
class ComparableAnalysis:
    """An analysis paired with the identity of the contract it belongs to."""
    contract_id: str
    file_name: str
    analysis: ContractAnalysis


def _copy(value):
    return value.model_copy(deep=True) if value is not None else None


class ComparisonEngine:
    """Builds side-by-side comparisons of analyzed contracts."""

    def __init__(self, min_contracts: int = MIN_CONTRACTS):
        self.min_contracts = min_contracts

    def compare(self, contracts: Iterable[Contract]) -> ComparisonResult:
        """
        Compare analyzed contracts.

        Contracts without an analysis are skipped; fewer than two remaining
        raises InsufficientContractsError.
        """
        entries = []
        for contract in contracts:
            if contract.analysis is None:
                logger.info(
                    "comparison_contract_skipped",
                    contract_id=contract.id,
                    status=contract.status.value,
                )
                continue
            entries.append(
                ComparableAnalysis(
                    contract_id=contract.id,
                    file_name=contract.file_name,
                    analysis=contract.analysis,
                )
            )
        return self.compare_analyses(entries)

    def compare_analyses(self, entries: Sequence[ComparableAnalysis]) -> ComparisonResult:
        """Compare analyses that already carry their contract identity."""
        if len(entries) < self.min_contracts:
            raise InsufficientContractsError(len(entries), self.min_contracts)

        risk_levels = self._risk_levels(entries)
        result = ComparisonResult(
            contracts=[self._header(entry) for entry in entries],
            risk_levels=risk_levels,
            financial=[self._financial(entry) for entry in entries],
            dates=[self._dates(entry) for entry in entries],
            legal=[self._legal(entry) for entry in entries],
            terms=[self._terms(entry) for entry in entries],
            differences=self._differences(risk_levels),
        )

        logger.info(
            "contracts_compared",
            contracts=len(entries),
            total_high_risks=result.differences.total_high_risks,
        )
        return result

    # =========================================================================
    # Risk rollup
    # =========================================================================

    def _risk_levels(self, entries: Sequence[ComparableAnalysis]) -> list[RiskLevelRow]:
        counts = [entry.analysis.severity_counts() for entry in entries]
        all_flags = sum(sum(c.values()) for c in counts)
        max_high = max(c[RiskSeverity.HIGH] for c in counts)
        max_medium = max(c[RiskSeverity.MEDIUM] for c in counts)
        max_low = max(c[RiskSeverity.LOW] for c in counts)

        rows = []
        for entry, c in zip(entries, counts):
            total = sum(c.values())
            # Ties all highlight; a zero maximum highlights nobody.
            rows.append(
                RiskLevelRow(
                    contract_id=entry.contract_id,
                    file_name=entry.file_name,
                    high_risks=c[RiskSeverity.HIGH],
                    medium_risks=c[RiskSeverity.MEDIUM],
                    low_risks=c[RiskSeverity.LOW],
                    total_risks=total,
                    risk_share=safe_percentage(total, all_flags),
                    is_max_high=max_high > 0 and c[RiskSeverity.HIGH] == max_high,
                    is_max_medium=max_medium > 0 and c[RiskSeverity.MEDIUM] == max_medium,
                    is_max_low=max_low > 0 and c[RiskSeverity.LOW] == max_low,
                )
            )
        return rows

    def _differences(self, rows: list[RiskLevelRow]) -> RiskDifferences:
        return RiskDifferences(
            total_high_risks=sum(r.high_risks for r in rows),
            total_medium_risks=sum(r.medium_risks for r in rows),
            total_low_risks=sum(r.low_risks for r in rows),
            max_high_risks=max(r.high_risks for r in rows),
            max_medium_risks=max(r.medium_risks for r in rows),
            max_low_risks=max(r.low_risks for r in rows),
        )

    # =========================================================================
    # Dimension insights
    # =========================================================================

    def _header(self, entry: ComparableAnalysis) -> ComparedContract:
        return ComparedContract(
            id=entry.contract_id,
            file_name=entry.file_name,
            summary=entry.analysis.summary,
            risk_count=len(entry.analysis.risk_flags),
            key_parties=_copy(entry.analysis.key_parties),
        )

    def _financial(self, entry: ComparableAnalysis) -> FinancialInsight:
        details = entry.analysis.financial_details
        if details is None:
            return FinancialInsight(contract_id=entry.contract_id, file_name=entry.file_name)
        return FinancialInsight(
            contract_id=entry.contract_id,
            file_name=entry.file_name,
            total_value=details.total_value,
            currency=details.currency,
            payment_amounts=[_copy(p) for p in details.payment_amounts],
        )

    def _dates(self, entry: ComparableAnalysis) -> DateInsight:
        dates = entry.analysis.dates
        return DateInsight(
            contract_id=entry.contract_id,
            file_name=entry.file_name,
            start_date=dates.start_date if dates else None,
            end_date=dates.end_date if dates else None,
            duration=entry.analysis.duration,
        )

    def _legal(self, entry: ComparableAnalysis) -> LegalInsight:
        legal = entry.analysis.legal_info
        if legal is None:
            return LegalInsight(contract_id=entry.contract_id, file_name=entry.file_name)
        return LegalInsight(
            contract_id=entry.contract_id,
            file_name=entry.file_name,
            governing_law=legal.governing_law,
            jurisdiction=legal.jurisdiction,
            dispute_resolution=legal.dispute_resolution,
            venue=legal.venue,
        )

    def _terms(self, entry: ComparableAnalysis) -> TermsInsight:
        terms = entry.analysis.structured_terms
        if terms is None:
            return TermsInsight(contract_id=entry.contract_id, file_name=entry.file_name)
        return TermsInsight(
            contract_id=entry.contract_id,
            file_name=entry.file_name,
            renewal=_copy(terms.renewal),
            termination=_copy(terms.termination),
            intellectual_property=_copy(terms.intellectual_property),
            confidentiality=_copy(terms.confidentiality),
        )


def compare(contracts: Iterable[Contract]) -> ComparisonResult:
    """Compare analyzed contracts with the default engine."""
    return ComparisonEngine().compare(contracts)
