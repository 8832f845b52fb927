from __future__ import annotations

from flask.testing import FlaskClient

from bdinvest.app import create_app


def investment_payload() -> dict:
    return {
        "id": "1",
        "name": "5-Year Sanchayapatra",
        "type": "sanchayapatra",
        "amount": 100000,
        "currentValue": 108500,
        "expectedReturn": 8.5,
        "startDate": "2023-01-01",
        "maturityDate": "2028-01-01",
    }


def test_investment_crud(client: FlaskClient):
    created = client.post("/api/investments", json=investment_payload())
    assert created.status_code == 201
    assert created.get_json()["startDate"] == "2023-01-01"

    assert client.post("/api/investments", json=investment_payload()).status_code == 409

    listed = client.get("/api/investments").get_json()
    assert [inv["id"] for inv in listed] == ["1"]

    patched = client.patch("/api/investments/1", json={"currentValue": 110000, "status": "matured"})
    assert patched.status_code == 200
    assert patched.get_json()["currentValue"] == 110000
    assert patched.get_json()["status"] == "matured"

    assert client.patch("/api/investments/1", json={"id": "2"}).status_code == 400
    assert client.delete("/api/investments/1").status_code == 204
    assert client.get("/api/investments/1").status_code == 404


def test_new_investment_gets_an_id(client: FlaskClient):
    payload = investment_payload()
    del payload["id"]

    resp = client.post("/api/investments", json=payload)

    assert resp.status_code == 201
    assert resp.get_json()["id"]


def test_invalid_investment_returns_400(client: FlaskClient):
    resp = client.post("/api/investments", json={**investment_payload(), "amount": -1})

    assert resp.status_code == 400
    assert resp.get_json()["detail"][0]["loc"] == ["amount"]


def test_summary_and_growth(client: FlaskClient):
    client.post("/api/investments", json=investment_payload())
    client.post(
        "/api/investments",
        json={
            **investment_payload(),
            "id": "2",
            "name": "Monthly DPS",
            "type": "dps",
            "amount": 60000,
            "currentValue": 65000,
            "expectedReturn": 7.2,
        },
    )

    body = client.get("/api/portfolio/summary").get_json()
    assert body["summary"]["totalValue"] == 173500
    assert body["summary"]["totalGain"] == 13500
    assert [s["type"] for s in body["allocation"]] == ["sanchayapatra", "dps"]

    growth = client.get("/api/portfolio/growth?months=6").get_json()
    assert len(growth) == 6
    assert growth[0]["total"] == 161068
    assert client.get("/api/portfolio/growth?months=0").status_code == 400


def test_profile_round_trip(client: FlaskClient):
    assert client.get("/api/profile").status_code == 404

    resp = client.put("/api/profile", json={"monthlyIncome": 50000, "monthlyExpenses": 35000})
    assert resp.status_code == 200
    assert resp.get_json()["monthlySavings"] == 15000

    assert client.get("/api/profile").get_json()["monthlyIncome"] == 50000
    assert client.put("/api/profile", json={"monthlyIncome": -1, "monthlyExpenses": 0}).status_code == 400


def test_goals(client: FlaskClient):
    created = client.post(
        "/api/goals",
        json={"title": "Child's education", "targetAmount": 1000000, "targetDate": "2035-06-30"},
    )
    assert created.status_code == 201
    goal = created.get_json()
    assert goal["progress"] == 0

    updated = client.patch(f"/api/goals/{goal['id']}", json={"currentAmount": 100000})
    assert updated.get_json()["progress"] == 10.0

    assert client.delete(f"/api/goals/{goal['id']}").status_code == 204
    assert client.delete(f"/api/goals/{goal['id']}").status_code == 404


def test_state_survives_restart_when_persisted(tmp_path):
    config = {"TESTING": True, "DB_PATH": str(tmp_path / "portfolio.db")}

    with create_app(config).test_client() as client:
        client.post("/api/investments", json=investment_payload())
        client.put("/api/profile", json={"monthlyIncome": 50000, "monthlyExpenses": 35000})

    with create_app(config).test_client() as client:
        assert [inv["id"] for inv in client.get("/api/investments").get_json()] == ["1"]
        assert client.get("/api/profile").get_json()["monthlySavings"] == 15000


def test_performance_endpoint(client: FlaskClient):
    client.post("/api/investments", json=investment_payload())
    client.post(
        "/api/investments",
        json={**investment_payload(), "id": "2", "type": "stock", "amount": 20000, "currentValue": 18000},
    )

    body = client.get("/api/portfolio/performance").get_json()

    assert body == [
        {"id": "1", "type": "sanchayapatra", "returnPercent": 8.5},
        {"id": "2", "type": "stock", "returnPercent": -10.0},
    ]


def test_rejected_update_does_not_echo_the_record(client: FlaskClient):
    client.post("/api/investments", json=investment_payload())

    resp = client.patch("/api/investments/1", json={"maturityDate": "2020-01-01"})

    assert resp.status_code == 400
    errors = resp.get_json()["detail"]
    assert errors
    assert all("input" not in error for error in errors)
    assert client.get("/api/investments/1").get_json()["maturityDate"] == "2028-01-01"
