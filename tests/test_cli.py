"""Tests for the command line interface."""

import json

import pytest
import yaml
from click.testing import CliRunner

from cellpilot.cli.cli_main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def sheets_dir(tmp_path):
    """Directory with two exported sheets."""
    sheets = tmp_path / "sheets"
    sheets.mkdir()
    (sheets / "orders.csv").write_text(
        "Order ID,Customer ID,Amount\n"
        "ORD-1001,CUST-1,120.50\n"
        "ORD-1002,CUST-2,80.00\n"
    )
    (sheets / "customers.csv").write_text(
        "Customer ID,Email,Name\n"
        "CUST-1,ann@example.com,Ann\n"
        "CUST-2,bo@example.com,Bo\n"
    )
    return sheets


def invoke(runner, *args):
    return runner.invoke(cli, ["--log-level", "ERROR", *args], obj={})


def test_analyze(runner, sheets_dir, tmp_path):
    output = tmp_path / "structure.json"

    result = invoke(runner, "analyze", str(sheets_dir), "--output", str(output))

    assert result.exit_code == 0, result.output
    assert "Tables: 2" in result.output
    assert "Relationships: 1" in result.output
    assert "Order ID: id" in result.output
    assert "Email: email" in result.output
    assert "customers.Customer ID ↔ orders.Customer ID (exact, high)" in result.output
    assert "Lookup Customer ID from customers in orders" in result.output
    assert "Structure saved to" in result.output

    saved = json.loads(output.read_text())
    assert [t["name"] for t in saved["tables"]] == ["customers", "orders"]
    assert saved["tables"][1]["column_types"]["Amount"] == "currency"


def test_analyze_empty_directory(runner, tmp_path):
    result = invoke(runner, "analyze", str(tmp_path))

    assert result.exit_code == 1
    assert "No CSV files found" in result.output


def test_analyze_missing_directory(runner, tmp_path):
    result = invoke(runner, "analyze", str(tmp_path / "nope"))
    assert result.exit_code == 2


def test_formula_with_tables(runner, sheets_dir, tmp_path):
    request_file = tmp_path / "lookup.yml"
    request_file.write_text(
        yaml.safe_dump(
            {
                "operation": "lookup",
                "sourceSheet": "orders",
                "sourceColumn": "Customer ID",
                "targetSheet": "customers",
                "targetColumn": "Customer ID",
                "returnColumn": "Name",
            }
        )
    )
    output = tmp_path / "result.json"

    result = invoke(
        runner,
        "formula",
        str(request_file),
        "--tables-dir",
        str(sheets_dir),
        "--output",
        str(output),
    )

    assert result.exit_code == 0, result.output
    assert "=VLOOKUP(B2, 'customers'!A:C, 3, FALSE)" in result.output
    assert "No issues found" in result.output
    assert "Consider using INDEX/MATCH" in result.output

    saved = json.loads(output.read_text())
    assert saved["formula"] == "=VLOOKUP(B2, 'customers'!A:C, 3, FALSE)"
    assert saved["validation"]["valid"] is True


def test_formula_reports_missing_sheet(runner, sheets_dir, tmp_path):
    request_file = tmp_path / "sum.json"
    request_file.write_text(
        json.dumps(
            {
                "operation": "aggregate",
                "aggregation": "sum",
                "targetSheet": "Sales",
                "sumColumn": "D",
                "criteriaRanges": ["B"],
                "criteriaValues": ["East"],
            }
        )
    )

    result = invoke(runner, "formula", str(request_file), "--tables-dir", str(sheets_dir))

    assert result.exit_code == 0, result.output
    assert "=SUMIFS('Sales'!D:D, 'Sales'!B:B, \"East\")" in result.output
    assert 'Error: Sheet "Sales" not found' in result.output


def test_formula_rejects_non_mapping(runner, tmp_path):
    request_file = tmp_path / "bad.yml"
    request_file.write_text("- lookup\n- filter\n")

    result = invoke(runner, "formula", str(request_file))

    assert result.exit_code == 1
    assert "must contain a mapping" in result.output


def test_access_denied_after_beta(runner):
    result = invoke(runner, "access", "automation", "--at", "2026-01-01")

    assert result.exit_code == 0, result.output
    assert "automation: denied (upgrade_required)" in result.output
    assert "Beta period has ended" in result.output
    assert "Upgrade Now" in result.output


def test_access_during_beta(runner):
    result = invoke(runner, "access", "team_features", "--at", "2025-09-21")

    assert result.exit_code == 0, result.output
    assert "team_features: allowed (beta_unlimited_access)" in result.output
    assert "10 days remaining" in result.output


def test_access_with_config_file(runner, tmp_path):
    config_file = tmp_path / "config.yml"
    config_file.write_text(
        yaml.safe_dump({"feature_gate": {"feature_access": {"automation": ["free"]}}})
    )

    result = runner.invoke(
        cli,
        [
            "--log-level",
            "ERROR",
            "--config",
            str(config_file),
            "access",
            "automation",
            "--at",
            "2026-01-01",
        ],
        obj={},
    )

    assert result.exit_code == 0, result.output
    assert "automation: allowed (tier_access)" in result.output


def test_serve_uses_config_defaults(runner, monkeypatch):
    import uvicorn

    calls = {}
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.update(kwargs))

    result = invoke(runner, "serve", "--port", "9001")

    assert result.exit_code == 0, result.output
    assert calls["host"] == "0.0.0.0"
    assert calls["port"] == 9001


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
