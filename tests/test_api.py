import random
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from src.app_layer.dependencies import get_learning_manager
from src.app_layer.main import app
from src.data_layer.customer_store import InMemoryCustomerStore
from src.simulation_layer.clock import ManualClock
from src.simulation_layer.learning_manager import CustomerLearningManager


@pytest.fixture
def client():
    manager = CustomerLearningManager(
        store=InMemoryCustomerStore(),
        rng=random.Random(5),
        clock=ManualClock(datetime(2025, 2, 3, 9, 0)),
    )
    app.dependency_overrides[get_learning_manager] = lambda: manager
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_simulate_roast(client):
    response = client.post("/api/v1/roasting/simulate", json={"temperature": 205, "time_seconds": 720})
    assert response.status_code == 200

    body = response.json()
    assert body["archetype"] == "arabica"
    assert body["phase_name"] == "Development Phase"
    assert 0 <= body["quality_score"] <= 100
    assert len(body["compounds"]) == 7
    assert body["analysis"] is None


def test_simulate_roast_with_analysis(client):
    response = client.post(
        "/api/v1/roasting/simulate",
        json={"temperature": 250, "time_seconds": 200, "archetype": "robusta", "include_analysis": True},
    )
    body = response.json()
    assert body["phase_name"] is None
    assert "Current Phase: Unknown" in body["analysis"]


def test_simulate_roast_validation(client):
    response = client.post("/api/v1/roasting/simulate", json={"temperature": "hot"})
    assert response.status_code == 422


def test_phases(client):
    phases = client.get("/api/v1/roasting/phases").json()
    assert [p["name"] for p in phases] == ["Drying Phase", "Maillard Phase", "Development Phase"]


def test_unknown_customer_is_404(client):
    assert client.get("/api/v1/customers/ghost").status_code == 404


def test_interaction_then_lookup(client):
    response = client.post(
        "/api/v1/customers/c1/interactions",
        json={
            "type": "coffee_served",
            "coffee_quality": 90,
            "response_time": 20,
            "served": {"roast": "dark", "flavor": "bitter", "quality": 90},
            "remembered_order": True,
        },
    )
    assert response.status_code == 200
    outcome = response.json()
    assert outcome["satisfaction"] == 100
    assert outcome["mood"] == "delighted"
    assert outcome["triggers"] == ["perfect_memory_service"]

    customer = client.get("/api/v1/customers/c1").json()
    assert customer["visit_count"] == 1
    assert customer["loyalty"] == pytest.approx(55)
    assert "loyal" in customer["traits"]


def test_interaction_with_flavor_profile(client):
    profile = {
        "acidity": 6, "sweetness": 6, "body": 5, "bitterness": 5,
        "aroma": 6, "aftertaste": 6, "balance": 8, "complexity": 4,
    }
    response = client.post(
        "/api/v1/customers/c2/interactions",
        json={"type": "coffee_served", "coffee_quality": 70, "flavor_profile": profile},
    )
    assert response.status_code == 200
    assert 0 <= response.json()["satisfaction"] <= 100


def test_interaction_validation(client):
    bad_type = client.post("/api/v1/customers/c1/interactions", json={"type": "coffee_thrown"})
    bad_roast = client.post(
        "/api/v1/customers/c1/interactions",
        json={"type": "coffee_served", "served": {"roast": "burnt", "flavor": "sweet", "quality": 50}},
    )
    assert bad_type.status_code == 422
    assert bad_roast.status_code == 422


def test_insights(client):
    client.post("/api/v1/customers/c1/interactions", json={"type": "recommendation_given", "response_time": 10})
    insights = client.get("/api/v1/customers/insights").json()

    assert set(insights) == {"strengths", "improvements", "loyal_customers", "recommendations", "metrics"}
    assert insights["metrics"]["total_customers_served"] == 1
