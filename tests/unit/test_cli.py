"""Tests for clauselens/cli.py — commands, output files, error exits."""

import json

import pytest
from click.testing import CliRunner

from clauselens.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


class TestNormalizeCommand:

    def test_writes_normalized_analysis(self, runner, tmp_path, raw_analysis):
        raw = _write(tmp_path / "raw.json", raw_analysis)
        out = tmp_path / "analysis.json"

        result = runner.invoke(cli, ["normalize", raw, "--output", str(out)])

        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text())
        assert data["summary"].startswith("Acme provides hosting")
        assert [f["id"] for f in data["riskFlags"]] == ["risk-1", "risk-2", "risk-3"]
        assert data["metadata"]["totalClauses"] == 2

    def test_missing_summary_fails(self, runner, tmp_path):
        raw = _write(tmp_path / "raw.json", {"riskFlags": []})
        result = runner.invoke(cli, ["normalize", raw, "-o", str(tmp_path / "out.json")])
        assert result.exit_code == 1
        assert "no summary" in result.output
        assert not (tmp_path / "out.json").exists()

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["normalize", str(tmp_path / "absent.json")])
        assert result.exit_code == 2


class TestCompareCommand:

    def test_compare_two_files(self, runner, tmp_path, contract_factory, analysis_factory):
        first = _write(tmp_path / "a.json",
                       contract_factory("a", analysis_factory(["high", "high"])).to_dict())
        second = _write(tmp_path / "b.json",
                        contract_factory("b", analysis_factory(["low"])).to_dict())
        out = tmp_path / "comparison.json"

        result = runner.invoke(cli, ["compare", first, second, "-o", str(out)])

        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text())
        assert [row["contractId"] for row in data["riskLevels"]] == ["a", "b"]
        assert data["riskLevels"][0]["isMaxHigh"] is True
        assert data["differences"]["totalHighRisks"] == 2

    def test_compare_list_file(self, runner, tmp_path, contract_factory, analysis_factory):
        records = [
            contract_factory("a", analysis_factory()).to_dict(),
            contract_factory("b", analysis_factory()).to_dict(),
        ]
        path = _write(tmp_path / "contracts.json", records)
        out = tmp_path / "comparison.json"

        result = runner.invoke(cli, ["compare", path, "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert len(json.loads(out.read_text())["contracts"]) == 2

    def test_compare_needs_two_analyzed(self, runner, tmp_path, contract_factory,
                                        analysis_factory):
        path = _write(tmp_path / "a.json", contract_factory("a", analysis_factory()).to_dict())
        result = runner.invoke(cli, ["compare", path])
        assert result.exit_code == 1
        assert "at least 2" in result.output

    def test_invalid_json(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        result = runner.invoke(cli, ["compare", str(path)])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_invalid_record(self, runner, tmp_path):
        path = _write(tmp_path / "bad.json", {"fileName": "x.pdf"})
        result = runner.invoke(cli, ["compare", path])
        assert result.exit_code == 1
        assert "Invalid contract record" in result.output


class TestAnalyticsCommand:

    def test_analytics(self, runner, tmp_path, contract_factory, analysis_factory):
        records = [
            contract_factory("a", analysis_factory(["high"])).to_dict(),
            contract_factory("b").to_dict(),
        ]
        path = _write(tmp_path / "contracts.json", records)
        out = tmp_path / "analytics.json"

        result = runner.invoke(cli, ["analytics", path, "--period", "all", "-o", str(out)])

        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text())
        assert data["analytics"]["totalContracts"] == 2
        assert data["analytics"]["completedContracts"] == 1
        assert data["analytics"]["contractsByMonth"] == {"2024-06": 2}
        assert data["metrics"]["successRate"] == 50.0
        assert data["metrics"]["period"] == "all"

    def test_invalid_period(self, runner, tmp_path, contract_factory):
        path = _write(tmp_path / "c.json", contract_factory("a").to_dict())
        result = runner.invoke(cli, ["analytics", path, "--period", "2weeks"])
        assert result.exit_code == 2


class TestConfigCommand:

    def test_config(self, runner):
        result = runner.invoke(cli, ["config"])
        assert result.exit_code == 0
        assert "ClauseLens Configuration" in result.output
        assert "Analysis Model:" in result.output
