"""Tests for clauselens/services/processor.py — analyze, normalize, record outcome."""

import json
from unittest.mock import MagicMock

import pytest

from clauselens.exceptions import ContractStateError
from clauselens.models.contract import Contract, ContractStatus
from clauselens.services.processor import ANALYSIS_FAILED_MESSAGE, ContractProcessor


@pytest.fixture
def uploaded():
    return Contract(id="c1", file_name="msa.pdf", file_type="pdf")


class TestContractProcessor:

    def test_success(self, uploaded, normalizer, raw_analysis):
        calls = []

        def analyzer(text):
            calls.append(text)
            return raw_analysis

        processor = ContractProcessor(analyzer, normalizer=normalizer)
        contract = processor.process(uploaded, "contract text")

        assert calls == ["contract text"]
        assert contract is uploaded
        assert contract.status == ContractStatus.COMPLETED
        assert contract.analysis.summary.startswith("Acme provides hosting")
        assert len(contract.analysis.risk_flags) == 3
        assert contract.error_message is None

    def test_analyzer_error(self, uploaded, normalizer):
        analyzer = MagicMock(side_effect=RuntimeError("upstream timeout"))

        contract = ContractProcessor(analyzer, normalizer=normalizer).process(uploaded, "x")
        analyzer.assert_called_once_with("x")
        assert contract.status == ContractStatus.FAILED
        assert contract.error_message == ANALYSIS_FAILED_MESSAGE
        assert contract.analysis is None

    def test_malformed_output(self, uploaded, normalizer):
        contract = ContractProcessor(lambda text: {"riskFlags": []}, normalizer=normalizer).process(
            uploaded, "x"
        )
        assert contract.status == ContractStatus.FAILED
        assert "summary" in contract.error_message
        assert contract.analysis is None

    def test_unexpected_normalizer_error(self, uploaded, raw_analysis):
        normalizer = MagicMock()
        normalizer.normalize.side_effect = RecursionError("maximum recursion depth exceeded")

        contract = ContractProcessor(lambda text: raw_analysis, normalizer=normalizer).process(
            uploaded, "x"
        )
        assert contract.status == ContractStatus.FAILED
        assert contract.error_message == ANALYSIS_FAILED_MESSAGE
        assert contract.analysis is None

    def test_oversized_number_never_left_processing(self, uploaded, normalizer):
        payload = '{"summary": "x", "financialDetails": {"totalValue": ' + "9" * 5000 + "}}"
        contract = ContractProcessor(lambda text: payload, normalizer=normalizer).process(
            uploaded, "x"
        )
        assert contract.status in (ContractStatus.COMPLETED, ContractStatus.FAILED)

    def test_json_string_output(self, uploaded, normalizer, raw_analysis):
        payload = "```json\n" + json.dumps(raw_analysis) + "\n```"
        contract = ContractProcessor(lambda text: payload, normalizer=normalizer).process(
            uploaded, "x"
        )
        assert contract.is_completed

    def test_reanalysis_replaces_analysis(self, normalizer, raw_analysis, contract_factory,
                                          analysis_factory):
        previous = analysis_factory(["low"], summary="Old summary")
        contract = contract_factory("c1", previous)

        ContractProcessor(lambda text: raw_analysis, normalizer=normalizer).process(contract, "x")
        assert contract.is_completed
        assert contract.analysis is not previous
        assert contract.analysis.summary != "Old summary"

    def test_retry_after_failure(self, uploaded, normalizer, raw_analysis):
        def broken(text):
            raise RuntimeError("boom")

        ContractProcessor(broken, normalizer=normalizer).process(uploaded, "x")
        assert uploaded.is_failed

        ContractProcessor(lambda text: raw_analysis, normalizer=normalizer).process(uploaded, "x")
        assert uploaded.is_completed
        assert uploaded.error_message is None

    def test_processing_contract_rejected(self, normalizer, raw_analysis, contract_factory):
        contract = contract_factory("c1", status=ContractStatus.PROCESSING)
        processor = ContractProcessor(lambda text: raw_analysis, normalizer=normalizer)
        with pytest.raises(ContractStateError):
            processor.process(contract, "x")
