def test_requires_authentication(client):
    response = client.get("/clients/")
    assert response.status_code in (401, 403)


def test_create_and_get_client(client, auth_headers, create_client):
    created = create_client(auth_headers)

    assert created["name"] == "João da Silva"
    assert created["financials"] is None

    response = client.get(f"/clients/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["case_number"] == "1001234-56.2026.8.26.0597"


def test_create_client_with_payment_plan(client, auth_headers, create_client):
    created = create_client(
        auth_headers,
        payment_plan={"total_agreed": 9000, "initial_payment": 0, "plan": "installments", "num_installments": 3},
    )

    financials = created["financials"]
    assert financials["plan"] == "installments"
    assert len(financials["installments"]) == 3
    assert financials["installments"][0]["value"] == 3000


def test_list_filters_by_search_and_origin(client, auth_headers, create_client):
    create_client(auth_headers)
    create_client(auth_headers, name="Carla Mendes", origin="public_defender", case_number="999")

    names = [c["name"] for c in client.get("/clients/", headers=auth_headers).json()]
    assert sorted(names) == ["Carla Mendes", "João da Silva"]

    response = client.get("/clients/", params={"search": "carla"}, headers=auth_headers)
    assert [c["name"] for c in response.json()] == ["Carla Mendes"]

    response = client.get("/clients/", params={"origin": "private"}, headers=auth_headers)
    assert [c["name"] for c in response.json()] == ["João da Silva"]


def test_clients_are_scoped_to_their_owner(client, auth_headers, other_headers, create_client):
    created = create_client(auth_headers)

    assert client.get(f"/clients/{created['id']}", headers=other_headers).status_code == 404
    assert client.get("/clients/", headers=other_headers).json() == []
    assert client.delete(f"/clients/{created['id']}", headers=other_headers).status_code == 404


def test_update_client(client, auth_headers, create_client):
    created = create_client(auth_headers)

    response = client.put(
        f"/clients/{created['id']}",
        json={"status": "closed", "phone": "(16) 3333-0000"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "closed"
    assert body["phone"] == "(16) 3333-0000"
    assert body["name"] == "João da Silva"



def test_changing_origin_rebuilds_financial_scheme(client, auth_headers, create_client):
    created = create_client(
        auth_headers,
        payment_plan={"total_agreed": 9000, "plan": "installments", "num_installments": 3},
    )

    response = client.put(
        f"/clients/{created['id']}",
        json={"origin": "public_defender"},
        headers=auth_headers,
    )

    assert response.status_code == 200, response.text
    financials = response.json()["financials"]
    assert financials["plan"] == "defender_standard"
    assert financials["installments"] == []
    assert financials["total_agreed"] == 9000

    items = client.get("/finances/ledger", headers=auth_headers).json()["groups"][0]["items"]
    assert [i["label"] for i in items] == ["FULL CERTIFICATE"]


def test_changing_case_type_to_labor_moves_to_success_fee(client, auth_headers, create_client):
    created = create_client(
        auth_headers,
        payment_plan={"total_agreed": 9000, "plan": "installments", "num_installments": 3},
    )

    response = client.put(f"/clients/{created['id']}", json={"case_type": "labor"}, headers=auth_headers)

    financials = response.json()["financials"]
    assert financials["plan"] == "on_success"
    assert financials["installments"] == []
    assert financials["success_fee_percentage"] == 30

def test_delete_client_logs_activity(client, auth_headers, create_client):
    created = create_client(auth_headers)

    response = client.delete(f"/clients/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert client.get(f"/clients/{created['id']}", headers=auth_headers).status_code == 404

    activity = client.get("/activity/", headers=auth_headers).json()
    assert activity[0]["action_type"] == "delete"
    assert activity[0]["entity_id"] == created["id"]
    assert activity[1]["action_type"] == "create"


def test_generate_documents(client, auth_headers, create_client):
    created = create_client(auth_headers)

    for kind, prefix in [("procuration", "PROCURACAO"), ("contract", "CONTRATO_HONORARIOS"), ("declaration", "DECLARACAO")]:
        response = client.get(f"/clients/{created['id']}/documents/{kind}", headers=auth_headers)
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")
        assert f'filename="{prefix}_Joao_da_Silva.pdf"' in response.headers["content-disposition"]


def test_unknown_document_kind(client, auth_headers, create_client):
    created = create_client(auth_headers)

    response = client.get(f"/clients/{created['id']}/documents/invoice", headers=auth_headers)
    assert response.status_code == 400
