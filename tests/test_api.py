"""Tests for the REST API."""

import pytest
from fastapi.testclient import TestClient

from cellpilot import __version__
from cellpilot.api.server import create_app


@pytest.fixture
def client():
    return TestClient(create_app())


TABLES = [
    {
        "name": "Orders",
        "headers": ["Order ID", "Customer ID", "Amount"],
        "rows": [["ORD-1", "CUST-1", "$120.50"], ["ORD-2", "CUST-2", "$80.00"]],
        "row_count": 250,
    },
    {
        "name": "Customers",
        "headers": ["Customer ID", "Email", "Name"],
        "rows": [["CUST-1", "ann@example.com", "Ann"]],
        "named_ranges": [{"name": "CustomerIds", "range": "A2:A500"}],
    },
]


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__}


def test_root_lists_endpoints(client):
    data = client.get("/").json()
    assert data["endpoints"]["formula"] == "/api/v1/formula"


def test_analyze(client):
    response = client.post("/api/v1/analyze", json={"tables": TABLES})

    assert response.status_code == 200
    data = response.json()

    orders, customers = data["tables"]
    assert orders["row_count"] == 250
    assert orders["column_types"] == {
        "Order ID": "id",
        "Customer ID": "id",
        "Amount": "currency",
    }
    assert customers["named_ranges"] == [{"name": "CustomerIds", "range": "A2:A500"}]

    (rel,) = data["relationships"]
    assert rel["kind"] == "exact"
    assert rel["confidence"] == "high"
    assert list(data["common_columns"]) == ["customer id"]
    assert data["suggested_joins"][0]["formula"] == (
        "=VLOOKUP(A2, 'Customers'!A:Z, COLUMN_INDEX, FALSE)"
    )


def test_analyze_rejects_unnamed_table(client):
    response = client.post("/api/v1/analyze", json={"tables": [{"name": ""}]})
    assert response.status_code == 422


def test_formula_resolves_columns_from_tables(client):
    body = {
        "request": {
            "operation": "lookup",
            "sourceSheet": "Orders",
            "sourceColumn": "Customer ID",
            "targetSheet": "Customers",
            "targetColumn": "Customer ID",
            "returnColumn": "Email",
        },
        "tables": TABLES,
    }

    response = client.post("/api/v1/formula", json=body)

    assert response.status_code == 200
    data = response.json()
    assert data["formula"] == "=VLOOKUP(B2, 'Customers'!A:B, 2, FALSE)"
    assert data["validation"]["valid"] is True


def test_formula_missing_table(client):
    body = {
        "request": {
            "operation": "aggregate",
            "aggregation": "count",
            "targetSheet": "Sales",
            "criteriaRanges": ["B"],
            "criteriaValues": ["East"],
        },
        "table_names": ["Orders"],
    }

    data = client.post("/api/v1/formula", json=body).json()

    assert data["formula"] == "=COUNTIFS('Sales'!B:B, \"East\")"
    assert data["validation"]["valid"] is False
    assert data["validation"]["issues"] == ['Error: Sheet "Sales" not found']


def test_formula_unknown_operation_is_not_http_error(client):
    response = client.post("/api/v1/formula", json={"request": {"operation": "transpose"}})

    assert response.status_code == 200
    assert response.json()["formula"] == '=ERROR("Unknown operation")'


def test_formula_malformed_condition_is_not_http_error(client):
    body = {
        "request": {
            "operation": "filter",
            "sourceSheet": "Orders",
            "sourceRange": "A:D",
            "conditions": [{"operator": ">", "value": 1}],
        }
    }

    response = client.post("/api/v1/formula", json=body)

    assert response.status_code == 200
    data = response.json()
    assert data["formula"] == '=ERROR("Invalid filter request")'
    assert data["validation"]["valid"] is False


def test_access_after_beta(client):
    response = client.get("/api/v1/access/team_features", params={"tier": "professional"})

    assert response.status_code == 200
    data = response.json()
    assert data["allowed"] is False
    assert data["reason"] == "upgrade_required"
    assert data["required_tiers"] == ["business"]
    assert data["upgrade_prompt"]["cta"] == "Upgrade Now"


def test_access_for_grandfathered_beta_user(client):
    response = client.get(
        "/api/v1/access/formula_builder", params={"beta_join_date": "2025-06-01"}
    )

    data = response.json()
    assert data["allowed"] is True
    assert data["reason"] == "beta_user_benefit"
    assert data["upgrade_prompt"] is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
