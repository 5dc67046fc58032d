"""
Tests for the /splits HTTP routes.
"""
import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from splitter.core.config import Settings, get_settings
from splitter.main import app


@pytest.fixture
def client():
    app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def permissive_client():
    app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None, allow_unlisted_payers=True)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def amounts(mapping):
    return {name: Decimal(str(value)) for name, value in mapping.items()}


DINNER = {
    "participants": ["Alice", "Bob", "Carol"],
    "expenses": [{"payer": "Alice", "amount": 90, "description": "Dinner"}],
}


@pytest.mark.api
class TestRoot:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["version"] == "1.0.0"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


@pytest.mark.api
class TestBalancesRoute:

    def test_balances(self, client):
        response = client.post("/splits/balances", json=DINNER)
        assert response.status_code == 200
        assert amounts(response.json()["balances"]) == {
            "Alice": Decimal("60"),
            "Bob": Decimal("-30"),
            "Carol": Decimal("-30"),
        }

    def test_balances_rounded_for_display(self, client):
        response = client.post("/splits/balances", json={
            "participants": ["A", "B", "C"],
            "expenses": [{"payer": "A", "amount": 100}],
        })
        assert response.status_code == 200
        assert amounts(response.json()["balances"]) == {
            "A": Decimal("66.67"),
            "B": Decimal("-33.33"),
            "C": Decimal("-33.33"),
        }

    def test_empty_participants(self, client):
        response = client.post("/splits/balances", json={"participants": [], "expenses": []})
        assert response.status_code == 400
        assert "at least one participant" in response.json()["detail"]

    def test_duplicate_participants(self, client):
        response = client.post("/splits/balances", json={"participants": ["A", "A"], "expenses": []})
        assert response.status_code == 400

    def test_unknown_payer(self, client):
        response = client.post("/splits/balances", json={
            "participants": ["Alice"],
            "expenses": [{"payer": "Mallory", "amount": 10}],
        })
        assert response.status_code == 400
        assert "Mallory" in response.json()["detail"]

    def test_unknown_payer_allowed(self, permissive_client):
        response = permissive_client.post("/splits/balances", json={
            "participants": ["Alice"],
            "expenses": [{"payer": "Mallory", "amount": 10}],
        })
        assert response.status_code == 200
        assert amounts(response.json()["balances"]) == {"Alice": Decimal("-10"), "Mallory": Decimal("10")}

    def test_negative_amount_rejected(self, client):
        response = client.post("/splits/balances", json={
            "participants": ["Alice"],
            "expenses": [{"payer": "Alice", "amount": -10}],
        })
        assert response.status_code == 422

    def test_large_amount(self, client):
        response = client.post("/splits/balances", json={
            "participants": ["A", "B"],
            "expenses": [{"payer": "A", "amount": 1e27}],
        })
        assert response.status_code == 200
        balances = amounts(response.json()["balances"])
        assert balances["A"] == -balances["B"]
        assert abs(balances["A"] - Decimal("5e26")) < Decimal("1e12")


@pytest.mark.api
class TestSettlementsRoute:

    def test_settlements(self, client):
        response = client.post("/splits/settlements", json={"balances": {"Alice": 60, "Bob": -30, "Carol": -30}})
        assert response.status_code == 200
        body = response.json()
        assert [(s["from"], s["to"]) for s in body] == [("Bob", "Alice"), ("Carol", "Alice")]
        assert [Decimal(str(s["amount"])) for s in body] == [Decimal("30"), Decimal("30")]

    def test_already_balanced(self, client):
        response = client.post("/splits/settlements", json={"balances": {"Alice": 0, "Bob": 0}})
        assert response.status_code == 200
        assert response.json() == []

    def test_unbalanced(self, client):
        response = client.post("/splits/settlements", json={"balances": {"Alice": 50, "Bob": -49}})
        assert response.status_code == 400
        assert "zero-sum" in response.json()["detail"]

    def test_sub_cent_transfers_hidden(self, client):
        response = client.post("/splits/settlements", json={"balances": {"A": "0.001", "B": "-0.001"}})
        assert response.status_code == 200
        assert response.json() == []


@pytest.mark.api
class TestSummaryRoute:

    def test_summary(self, client):
        response = client.post("/splits/summary", json=DINNER)
        assert response.status_code == 200
        body = response.json()
        assert Decimal(str(body["total"])) == Decimal("90")
        assert Decimal(str(body["fair_share"])) == Decimal("30")
        assert amounts(body["balances"])["Alice"] == Decimal("60")
        assert [(s["from"], s["to"]) for s in body["settlements"]] == [("Bob", "Alice"), ("Carol", "Alice")]

    def test_summary_even(self, client):
        response = client.post("/splits/summary", json={
            "participants": ["Alice", "Bob"],
            "expenses": [{"payer": "Alice", "amount": 50}, {"payer": "Bob", "amount": 50}],
        })
        assert response.status_code == 200
        assert response.json()["settlements"] == []

    def test_summary_empty_participants(self, client):
        response = client.post("/splits/summary", json={"participants": [], "expenses": []})
        assert response.status_code == 400

    def test_summary_large_amount(self, client):
        response = client.post("/splits/summary", json={
            "participants": ["A", "B", "C"],
            "expenses": [{"payer": "A", "amount": "1000000000000000000000000000"}],
        })
        assert response.status_code == 200
        body = response.json()
        assert Decimal(str(body["total"])) == Decimal("1e27")
        assert [(s["from"], s["to"]) for s in body["settlements"]] == [("B", "A"), ("C", "A")]
