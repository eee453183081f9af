from datetime import date, timedelta

import pytest

from lexai.services.calendar_service import GoogleCalendarService


def create_movement(client, headers, **overrides):
    payload = {
        "case_number": "1001234-56.2026.8.26.0597",
        "date": (date.today() + timedelta(days=2)).isoformat(),
        "time": "14:00",
        "description": "Prazo para contestação",
        "type": "deadline",
        "source": "TJSP",
    }
    payload.update(overrides)
    response = client.post("/movements/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def google_connected(client, auth_headers):
    response = client.post(
        "/settings/google",
        json={"access_token": "ya29.token", "email": "ana@gmail.com"},
        headers=auth_headers,
    )
    assert response.status_code == 200


def test_create_links_client_by_unique_case_number(client, auth_headers, create_client):
    owner = create_client(auth_headers)

    body = create_movement(client, auth_headers)

    assert body["calendar_synced"] is False
    assert body["movement"]["client_id"] == owner["id"]
    assert body["movement"]["client_name"] == "João da Silva"


def test_ambiguous_case_number_is_not_linked(client, auth_headers, create_client):
    create_client(auth_headers)
    create_client(auth_headers, name="Outro Cliente")

    body = create_movement(client, auth_headers)

    assert body["movement"]["client_id"] is None
    # display fallback still resolves a name
    assert body["movement"]["client_name"] is not None


def test_create_rejects_foreign_client(client, auth_headers, other_headers, create_client):
    foreign = create_client(other_headers)

    response = client.post(
        "/movements/",
        json={"client_id": foreign["id"], "date": date.today().isoformat(), "description": "x"},
        headers=auth_headers,
    )
    assert response.status_code == 404


def test_invalid_time_is_rejected(client, auth_headers):
    response = client.post(
        "/movements/",
        json={"date": date.today().isoformat(), "time": "25:00", "description": "x"},
        headers=auth_headers,
    )
    assert response.status_code == 422


def test_list_update_and_delete(client, auth_headers):
    created = create_movement(client, auth_headers)["movement"]

    listed = client.get("/movements/", headers=auth_headers).json()
    assert [m["id"] for m in listed] == [created["id"]]

    response = client.put(
        f"/movements/{created['id']}",
        json={"type": "hearing", "modality": "online"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["movement"]["type"] == "hearing"

    response = client.delete(f"/movements/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["calendar_synced"] is False
    assert client.get(f"/movements/{created['id']}", headers=auth_headers).status_code == 404



def test_editing_case_number_keeps_client_link(client, auth_headers, create_client):
    owner = create_client(auth_headers)
    created = create_movement(client, auth_headers, client_id=owner["id"])["movement"]

    response = client.put(
        f"/movements/{created['id']}",
        json={"case_number": "1001234-56.2026.8.26.0598"},
        headers=auth_headers,
    )

    movement = response.json()["movement"]
    assert movement["case_number"] == "1001234-56.2026.8.26.0598"
    assert movement["client_id"] == owner["id"]
    assert movement["client_name"] == "João da Silva"


def test_editing_case_number_links_unlinked_movement(client, auth_headers, create_client):
    created = create_movement(client, auth_headers, case_number="0000000-00.2026.8.26.0001")["movement"]
    assert created["client_id"] is None
    owner = create_client(auth_headers)

    response = client.put(
        f"/movements/{created['id']}",
        json={"case_number": owner["case_number"]},
        headers=auth_headers,
    )

    assert response.json()["movement"]["client_id"] == owner["id"]

def test_critical_pages(client, auth_headers):
    today = date.today()
    create_movement(client, auth_headers, date=(today - timedelta(days=1)).isoformat(), description="ontem")
    create_movement(client, auth_headers, date=(today + timedelta(days=5)).isoformat(), description="d5")
    create_movement(client, auth_headers, date=today.isoformat(), description="hoje")
    create_movement(client, auth_headers, date=(today + timedelta(days=1)).isoformat(), description="amanha",
                    type="notification")
    create_movement(client, auth_headers, date=(today + timedelta(days=2)).isoformat(), description="audiencia",
                    type="hearing")

    first = client.get("/movements/critical", headers=auth_headers).json()
    assert first["total"] == 3
    assert first["total_pages"] == 1
    assert [m["description"] for m in first["items"]] == ["hoje", "amanha", "d5"]

    second = client.get("/movements/critical", params={"page": 1}, headers=auth_headers).json()
    assert second["items"] == []


def test_month_calendar(client, auth_headers):
    today = date.today()
    create_movement(client, auth_headers, date=today.isoformat(), description="hoje")

    body = client.get(
        "/movements/calendar", params={"year": today.year, "month": today.month}, headers=auth_headers
    ).json()

    days = [d for week in body["weeks"] for d in week]
    assert all(len(week) == 7 for week in body["weeks"])
    assert date.fromisoformat(days[0]["date"]).weekday() == 6
    todays = next(d for d in days if d["date"] == today.isoformat())
    assert todays["is_today"] and todays["in_month"]
    assert [m["description"] for m in todays["movements"]] == ["hoje"]


def test_sync_requires_connected_calendar(client, auth_headers):
    created = create_movement(client, auth_headers)["movement"]

    response = client.post(f"/movements/{created['id']}/sync", headers=auth_headers)
    assert response.status_code == 400


def test_sync_marks_movement(client, auth_headers, google_connected, monkeypatch):
    monkeypatch.setattr(GoogleCalendarService, "create_event", lambda self, movement: "evt_123")
    created = create_movement(client, auth_headers)["movement"]

    response = client.post(f"/movements/{created['id']}/sync", headers=auth_headers)

    body = response.json()
    assert body["calendar_synced"] is True
    assert body["movement"]["synced_to_google"] is True
    assert body["movement"]["google_event_id"] == "evt_123"


def test_sync_failure_is_soft(client, auth_headers, google_connected, monkeypatch):
    monkeypatch.setattr(GoogleCalendarService, "create_event", lambda self, movement: None)

    body = create_movement(client, auth_headers, sync_to_calendar=True)

    assert body["calendar_synced"] is False
    assert body["movement"]["synced_to_google"] is False
    assert "Google Agenda" in body["message"]


def test_delete_proceeds_when_calendar_delete_fails(client, auth_headers, google_connected, monkeypatch):
    monkeypatch.setattr(GoogleCalendarService, "create_event", lambda self, movement: "evt_9")
    deleted = []
    monkeypatch.setattr(GoogleCalendarService, "delete_event", lambda self, event_id: deleted.append(event_id) or False)
    created = create_movement(client, auth_headers, sync_to_calendar=True)["movement"]

    response = client.delete(f"/movements/{created['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert deleted == ["evt_9"]
    assert response.json()["calendar_synced"] is False
    assert client.get("/movements/", headers=auth_headers).json() == []


def test_deleting_client_keeps_movement(client, auth_headers, create_client):
    owner = create_client(auth_headers)
    created = create_movement(client, auth_headers)["movement"]

    client.delete(f"/clients/{owner['id']}", headers=auth_headers)

    movement = client.get(f"/movements/{created['id']}", headers=auth_headers).json()
    assert movement["client_id"] is None
    assert movement["client_name"] is None
