"""Tests for the vantage CLI."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from vantage.cli.main import cli


class TestValidate:
    def test_valid_template(self, template_file):
        result = CliRunner().invoke(cli, ["validate", str(template_file)])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_json_output(self, template_file):
        result = CliRunner().invoke(cli, ["--format", "json", "validate", str(template_file)])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [s["weight"] for s in data["sections"]] == [0.4, 0.6]

    def test_bad_weights_exit_3(self, tmp_path: Path, template_data):
        template_data["sections"][1]["weight"] = 0.7
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump(template_data), encoding="utf-8")
        result = CliRunner().invoke(cli, ["validate", str(path)])
        assert result.exit_code == 3

    def test_missing_file_usage_error(self):
        result = CliRunner().invoke(cli, ["validate", "does-not-exist.yaml"])
        assert result.exit_code == 2


class TestScore:
    def test_json(self, workspace_file):
        result = CliRunner().invoke(cli, ["-f", "json", "score", "asmt-1", "-d", str(workspace_file)])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["overallScore"] == 59.33
        assert data["riskLevel"] == "HIGH"
        assert data["confidenceLevel"] == "MEDIUM"

    def test_table(self, workspace_file):
        result = CliRunner().invoke(cli, ["score", "asmt-1", "-d", str(workspace_file)])
        assert result.exit_code == 0
        assert "59.33" in result.output
        assert "Governance" in result.output

    def test_not_found_exit_1(self, workspace_file):
        result = CliRunner().invoke(cli, ["score", "missing", "-d", str(workspace_file)])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_config_file(self, workspace_file, tmp_path: Path):
        config = tmp_path / "vantage.yaml"
        config.write_text("output:\n  format: json\n", encoding="utf-8")
        result = CliRunner().invoke(cli, ["--config", str(config), "score", "asmt-1", "-d", str(workspace_file)])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["assessmentId"] == "asmt-1"

    def test_invalid_config_exit_3(self, workspace_file, tmp_path: Path):
        config = tmp_path / "vantage.yaml"
        config.write_text("- not\n- a mapping\n", encoding="utf-8")
        result = CliRunner().invoke(cli, ["--config", str(config), "score", "asmt-1", "-d", str(workspace_file)])
        assert result.exit_code == 3

    def test_duplicate_template_exit_3(self, tmp_path: Path, workspace_data):
        workspace_data["templates"].append(dict(workspace_data["templates"][0]))
        path = tmp_path / "dup.yaml"
        path.write_text(yaml.safe_dump(workspace_data), encoding="utf-8")
        result = CliRunner().invoke(cli, ["score", "asmt-1", "-d", str(path)])
        assert result.exit_code == 3
        assert "already published" in result.output

    def test_invalid_workspace_record_exit_3(self, tmp_path: Path, workspace_data):
        workspace_data["subscriptions"] = [{"organizationId": "org-x", "plan": "GOLD"}]
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump(workspace_data), encoding="utf-8")
        result = CliRunner().invoke(cli, ["score", "asmt-1", "-d", str(path)])
        assert result.exit_code == 3


class TestGaps:
    def test_free_restricted(self, workspace_file):
        result = CliRunner().invoke(cli, ["-f", "json", "gaps", "asmt-1", "-d", str(workspace_file), "-o", "org-free"])
        assert result.exit_code == 0
        gaps = json.loads(result.stdout)
        assert 3 <= len(gaps) <= 5
        assert all(g["isRestricted"] for g in gaps)
        assert all(g["category"] == "HIDDEN_ANALYSIS" for g in gaps)

    def test_enterprise_real(self, workspace_file):
        result = CliRunner().invoke(cli, ["-f", "json", "gaps", "asmt-1", "-d", str(workspace_file), "-o", "org-ent"])
        gaps = json.loads(result.stdout)
        assert [g["questionId"] for g in gaps] == ["ops-1", "ops-2", "gov-2"]
        assert gaps[0]["estimatedCost"] == "UNDER_10K"

    def test_requires_org(self, workspace_file):
        result = CliRunner().invoke(cli, ["gaps", "asmt-1", "-d", str(workspace_file)])
        assert result.exit_code == 2


class TestMatrix:
    def test_json(self, workspace_file):
        result = CliRunner().invoke(cli, ["-f", "json", "matrix", "asmt-1", "-d", str(workspace_file), "-o", "org-ent"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["strategic"]["gapCount"] == 0
        assert data["strategic"]["emptyState"] == "No gaps in this timeframe"
        assert data["immediate"]["topVendors"][0]["gapsCovered"] == 1

    def test_table(self, workspace_file):
        result = CliRunner().invoke(cli, ["matrix", "asmt-1", "-d", str(workspace_file), "-o", "org-free"])
        assert result.exit_code == 0
        assert "Upgrade" in result.output
        assert "months" in result.output


class TestReport:
    def test_free_not_entitled(self, workspace_file):
        result = CliRunner().invoke(cli, ["report", "asmt-1", "-d", str(workspace_file), "-o", "org-free"])
        assert result.exit_code == 4

    def test_writes_file(self, workspace_file, tmp_path: Path):
        out = tmp_path / "ASSESSMENT-REPORT.md"
        result = CliRunner().invoke(
            cli, ["report", "asmt-1", "-d", str(workspace_file), "-o", "org-premium", "--out", str(out)]
        )
        assert result.exit_code == 0
        content = out.read_text(encoding="utf-8")
        assert "# Compliance Assessment Report" in content
        assert "Security Baseline" in content

    def test_stdout(self, workspace_file):
        result = CliRunner().invoke(cli, ["report", "asmt-1", "-d", str(workspace_file), "-o", "org-ent"])
        assert result.exit_code == 0
        assert "## Remediation Roadmap" in result.stdout
