import pytest


def ledger(client, headers, **params):
    response = client.get("/finances/ledger", params=params, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def private_client(auth_headers, create_client):
    return create_client(
        auth_headers,
        payment_plan={
            "total_agreed": 10000,
            "initial_payment": 2000,
            "initial_payment_status": "paid",
            "plan": "installments",
            "num_installments": 3,
        },
    )


@pytest.fixture
def defender_client(auth_headers, create_client):
    return create_client(
        auth_headers,
        name="Carlos Souza",
        origin="public_defender",
        case_type="criminal",
        case_number="0001111-22.2026.8.26.0597",
        payment_plan={"total_agreed": 1000, "has_recourse": True},
    )


def test_ledger_totals_and_groups(client, auth_headers, private_client, defender_client):
    body = ledger(client, auth_headers)

    assert body["tab"] == "general"
    assert body["totals"]["received"] == pytest.approx(2000)
    assert body["totals"]["receivable"] == pytest.approx(8000)
    assert body["totals"]["pending_by_institution"] == pytest.approx(1000)
    assert {g["client_id"] for g in body["groups"]} == {private_client["id"], defender_client["id"]}


def test_ledger_tabs_and_search(client, auth_headers, private_client, defender_client):
    private = ledger(client, auth_headers, tab="private")
    assert [g["client_id"] for g in private["groups"]] == [private_client["id"]]
    assert private["totals"]["pending_by_institution"] == 0

    defender = ledger(client, auth_headers, tab="public_defender")
    labels = [i["label"] for i in defender["groups"][0]["items"]]
    assert sorted(labels) == ["CERTIFICATE (30%)", "CERTIFICATE (70%)"]

    searched = ledger(client, auth_headers, search="carlos")
    assert [g["client_name"] for g in searched["groups"]] == ["Carlos Souza"]


def test_toggle_installment_round_trip(client, auth_headers, private_client):
    installment_id = private_client["financials"]["installments"][0]["id"]
    url = f"/finances/{private_client['id']}/toggle"

    response = client.post(url, json={"item_id": installment_id}, headers=auth_headers)
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["status"] == "paid"
    assert body["notification"]["type"] == "success"
    assert body["financials"]["installments"][0]["paid_at"] is not None
    assert ledger(client, auth_headers)["totals"]["received"] == pytest.approx(2000 + 8000 / 3)

    response = client.post(url, json={"item_id": installment_id, "current_status": "paid"}, headers=auth_headers)
    body = response.json()
    assert body["status"] == "pending"
    assert body["notification"]["title"] == "Pagamento Estornado"
    assert body["financials"]["installments"][0]["paid_at"] is None
    assert ledger(client, auth_headers)["totals"]["received"] == pytest.approx(2000)


def test_toggle_rejects_certificates_and_unknown_items(client, auth_headers, defender_client, private_client):
    response = client.post(
        f"/finances/{defender_client['id']}/toggle",
        json={"item_id": f"def70-{defender_client['id']}", "current_status": "pending"},
        headers=auth_headers,
    )
    assert response.status_code == 400

    response = client.post(
        f"/finances/{private_client['id']}/toggle",
        json={"item_id": "inst_missing"},
        headers=auth_headers,
    )
    assert response.status_code == 404


def test_toggle_client_without_financials(client, auth_headers, create_client):
    bare = create_client(auth_headers)

    response = client.post(f"/finances/{bare['id']}/toggle", json={"item_id": "in-x"}, headers=auth_headers)
    assert response.status_code == 400


def test_save_payment_plan_keeps_paid_installments(client, auth_headers, private_client):
    installment_id = private_client["financials"]["installments"][0]["id"]
    client.post(f"/finances/{private_client['id']}/toggle", json={"item_id": installment_id}, headers=auth_headers)

    response = client.put(
        f"/finances/{private_client['id']}/plan",
        json={"total_agreed": 14000, "initial_payment": 2000, "plan": "installments", "num_installments": 4},
        headers=auth_headers,
    )

    assert response.status_code == 200, response.text
    installments = response.json()["installments"]
    assert len(installments) == 4
    assert installments[0]["id"] == installment_id
    assert installments[0]["status"] == "paid"
    assert installments[3]["value"] == pytest.approx(3000)


def test_plan_for_unknown_client(client, auth_headers):
    response = client.put("/finances/missing/plan", json={"total_agreed": 100}, headers=auth_headers)
    assert response.status_code == 404


def test_financial_report_pdf(client, auth_headers, private_client, defender_client):
    response = client.get("/finances/report", headers=auth_headers)

    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")
    assert "Relatorio_Financeiro_" in response.headers["content-disposition"]


def test_toggle_rejects_defender_entry_and_success_fee(client, auth_headers, defender_client):
    url = f"/finances/{defender_client['id']}/toggle"

    for item_id in (f"in-{defender_client['id']}", f"success-{defender_client['id']}"):
        response = client.post(url, json={"item_id": item_id, "current_status": "pending"}, headers=auth_headers)
        assert response.status_code == 400

    financials = client.get(f"/clients/{defender_client['id']}", headers=auth_headers).json()["financials"]
    assert financials["initial_payment_status"] is None
    assert financials["success_fee_status"] is None


def test_toggle_absent_entry_payment(client, auth_headers, create_client):
    created = create_client(
        auth_headers,
        payment_plan={"total_agreed": 3000, "plan": "installments", "num_installments": 3},
    )

    response = client.post(
        f"/finances/{created['id']}/toggle",
        json={"item_id": f"in-{created['id']}", "current_status": "pending"},
        headers=auth_headers,
    )

    assert response.status_code == 404


def test_plan_rejects_out_of_range_payment_month(client, auth_headers, defender_client):
    url = f"/finances/{defender_client['id']}/plan"

    for month in ("2026-13", "2026-00"):
        response = client.put(
            url, json={"total_agreed": 1000, "defensoria_payment_month_70": month}, headers=auth_headers
        )
        assert response.status_code == 422

    response = client.put(
        url, json={"total_agreed": 1000, "defensoria_payment_month_70": "2026-12"}, headers=auth_headers
    )
    assert response.status_code == 200
    ledger(client, auth_headers)
