"""
Tests for compliance balance and banking endpoints.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


class TestComplianceBalance:
    def test_surplus(self, client: TestClient) -> None:
        response = client.get("/compliance/cb", params={"route_id": "R002"})

        assert response.status_code == 200
        data = response.json()
        assert data["route_id"] == "R002"
        assert data["year"] == 2024
        assert data["status"] == "Surplus"
        assert data["balance"] == pytest.approx(1.3368 * 4800 * 41000)

    def test_deficit(self, client: TestClient) -> None:
        data = client.get("/compliance/cb", params={"route_id": "R001"}).json()
        assert data["status"] == "Deficit"

    def test_unknown_route(self, client: TestClient) -> None:
        response = client.get("/compliance/cb", params={"route_id": "NOPE"})
        assert response.status_code == 404

    def test_missing_query(self, client: TestClient) -> None:
        assert client.get("/compliance/cb").status_code == 422


class TestBankRecords:
    def test_list(self, client: TestClient) -> None:
        response = client.get("/banking/records", params={"route_id": "R002"})

        assert response.status_code == 200
        data = response.json()
        assert data["available"] == 10_000_000
        assert [e["id"] for e in data["entries"]] == ["BANK-SEED-R002-2024"]

    def test_filter_by_year(self, client: TestClient) -> None:
        data = client.get("/banking/records", params={"route_id": "R002", "year": 2023}).json()
        assert data["entries"] == []


class TestBank:
    def test_bank_success(self, client: TestClient) -> None:
        response = client.post("/banking/bank", json={"route_id": "R002", "amount": 1_000_000})

        assert response.status_code == 200
        data = response.json()
        assert data["entry"]["amount"] == 1_000_000
        assert data["entry"]["applied_year"] is None
        assert data["available_after"] == 11_000_000

    def test_bank_from_deficit(self, client: TestClient) -> None:
        response = client.post("/banking/bank", json={"route_id": "R001", "amount": 10})
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "cb_not_positive"

    def test_bank_exceeds_surplus(self, client: TestClient) -> None:
        response = client.post("/banking/bank", json={"route_id": "R002", "amount": 1e12})
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "exceeds_surplus"

        records = client.get("/banking/records", params={"route_id": "R002"}).json()
        assert len(records["entries"]) == 1

    @pytest.mark.parametrize("amount", [0, -5, "abc"])
    def test_bank_invalid_amount(self, client: TestClient, amount) -> None:
        response = client.post("/banking/bank", json={"route_id": "R002", "amount": amount})
        assert response.status_code == 422

    def test_bank_unknown_route(self, client: TestClient) -> None:
        response = client.post("/banking/bank", json={"route_id": "NOPE", "amount": 10})
        assert response.status_code == 404


class TestApply:
    def test_apply_consumes_whole_entry(self, client: TestClient) -> None:
        response = client.post(
            "/banking/apply",
            json={"route_id": "R002", "apply_year": 2025, "amount": 3_000_000},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["consumed_total"] == 10_000_000
        assert data["available_after"] == 0
        assert data["consumed"][0]["applied_year"] == 2025

    def test_apply_exceeds_available(self, client: TestClient) -> None:
        response = client.post(
            "/banking/apply",
            json={"route_id": "R002", "apply_year": 2025, "amount": 20_000_000},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "exceeds_available"

    def test_apply_missing_year(self, client: TestClient) -> None:
        response = client.post("/banking/apply", json={"route_id": "R002", "amount": 1})
        assert response.status_code == 422
