"""
Contract processing.

Drives one contract through analysis: calls the external analyzer on the
extracted text, normalizes its output, and records the outcome on the
contract. The analysis is attached only once normalization succeeds.
"""

from typing import Any, Callable

import structlog

from clauselens.exceptions import MalformedAnalysisError
from clauselens.models.contract import Contract
from clauselens.services.normalizer import AnalysisNormalizer

logger = structlog.get_logger(__name__)

Analyzer = Callable[[str], Any]

ANALYSIS_FAILED_MESSAGE = "Failed to analyze contract"


class ContractProcessor:
    """Runs analyze -> normalize -> complete for a single contract."""

    def __init__(self, analyzer: Analyzer, normalizer: AnalysisNormalizer | None = None):
        self.analyzer = analyzer
        self.normalizer = normalizer or AnalysisNormalizer()

    def process(self, contract: Contract, text: str) -> Contract:
        """
        Analyze the contract text and update the contract in place.

        Ends with the contract `completed` and carrying its analysis, or
        `failed` with an error message and no analysis.
        """
        contract.start_processing()
        logger.info("contract_processing_started", contract_id=contract.id)

        try:
            raw = self.analyzer(text)
        except Exception as e:
            logger.error(
                "contract_analysis_failed",
                contract_id=contract.id,
                error=str(e),
            )
            contract.fail(ANALYSIS_FAILED_MESSAGE)
            return contract

        try:
            analysis = self.normalizer.normalize(raw)
        except MalformedAnalysisError as e:
            logger.error(
                "contract_analysis_malformed",
                contract_id=contract.id,
                error=str(e),
            )
            contract.fail(str(e))
            return contract
        except Exception as e:
            logger.error(
                "contract_normalization_failed",
                contract_id=contract.id,
                error=str(e),
            )
            contract.fail(ANALYSIS_FAILED_MESSAGE)
            return contract

        contract.complete(analysis)
        logger.info(
            "contract_processing_completed",
            contract_id=contract.id,
            risk_flags=len(analysis.risk_flags),
            clauses=analysis.metadata.total_clauses,
        )
        return contract
