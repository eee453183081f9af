from datetime import date, timedelta

import pytest


@pytest.fixture
def office_data(client, auth_headers, create_client):
    create_client(auth_headers, payment_plan={"total_agreed": 10000, "initial_payment": 2000,
                                              "initial_payment_status": "paid", "num_installments": 4})
    create_client(auth_headers, name="Beatriz Alves", case_type="labor", case_number="222",
                  payment_plan={"total_agreed": 30000})
    create_client(auth_headers, name="Carlos Souza", origin="public_defender", case_type="criminal",
                  case_number="333", status="closed", payment_plan={"total_agreed": 1000})

    today = date.today()
    for offset, kind in [(-3, "deadline"), (1, "deadline"), (2, "hearing"), (4, "notification")]:
        response = client.post(
            "/movements/",
            json={"date": (today + timedelta(days=offset)).isoformat(), "type": kind, "description": kind},
            headers=auth_headers,
        )
        assert response.status_code == 201


def test_dashboard(client, auth_headers, office_data):
    body = client.get("/dashboard", headers=auth_headers).json()

    assert body["active_clients"] == 2
    assert body["upcoming_deadlines"] == 1
    assert body["hearings"] == 1
    assert body["private_billing_estimate"] == pytest.approx(40000)
    assert body["private_billing_label"] == "R$ 40.000"
    assert [m["type"] for m in body["next_movements"]] == ["deadline", "notification"]
    assert [c["name"] for c in body["recent_clients"]] == ["Carlos Souza", "Beatriz Alves", "João da Silva"]
    assert body["recent_clients"][0]["initials"] == "CS"


def test_report_summary(client, auth_headers, office_data):
    body = client.get("/reports/summary", headers=auth_headers).json()

    assert body["total_clients"] == 3
    assert {o["origin"]: o["clients"] for o in body["by_origin"]} == {"private": 2, "public_defender": 1}
    assert body["financial"]["total_agreed"] == pytest.approx(41000)
    assert body["financial"]["total_initial"] == pytest.approx(2000)
    assert body["financial"]["total_pending_installments"] == pytest.approx(8000)
    labor = next(s for s in body["by_case_type"] if s["case_type"] == "labor")
    assert labor["average_ticket"] == pytest.approx(30000)


def test_report_summary_origin_filter(client, auth_headers, office_data):
    body = client.get("/reports/summary", params={"origin": "public_defender"}, headers=auth_headers).json()

    assert body["total_clients"] == 1
    assert body["origin"] == "public_defender"
    assert {o["origin"]: o["clients"] for o in body["by_origin"]} == {"private": 0, "public_defender": 1}
    assert body["ledger"]["pending_by_institution"] == pytest.approx(700)


def test_empty_dashboard(client, auth_headers):
    body = client.get("/dashboard", headers=auth_headers).json()

    assert body["active_clients"] == 0
    assert body["next_movements"] == []
    assert body["private_billing_label"] == "R$ 0"
