import os

# Must be set before the application modules read their configuration
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret"

from types import SimpleNamespace
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from main import app
from lexai.database import engine, Base


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def _register_and_login(client, email, name="Dra. Ana Souza", password="secret123"):
    response = client.post("/auth/register", json={"email": email, "password": password, "name": name})
    assert response.status_code == 200, response.text
    response = client.post("/auth/login", data={"username": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return _register_and_login(client, "ana@lexai.com.br")


@pytest.fixture
def other_headers(client):
    return _register_and_login(client, "bruno@lexai.com.br", name="Dr. Bruno Lima")


@pytest.fixture
def make_client():
    """In-memory stand-in for a client row, as the ledger functions only read attributes."""
    def factory(financials, origin="private", case_type="civil", client_id="c1", name="Maria Silva",
                created_at=datetime(2026, 1, 5, 10, 0)):
        return SimpleNamespace(
            id=client_id,
            name=name,
            origin=origin,
            case_type=case_type,
            created_at=created_at,
            financials=financials,
        )
    return factory


CLIENT_PAYLOAD = {
    "name": "João da Silva",
    "email": "joao@example.com",
    "phone": "(16) 99999-0000",
    "cpf_cnpj": "123.456.789-00",
    "rg": "12.345.678-9",
    "rg_issuing_body": "SSP/SP",
    "marital_status": "casado",
    "profession": "motorista",
    "monthly_income": 2100.0,
    "address": "Rua das Flores",
    "address_number": "120",
    "neighborhood": "Centro",
    "city": "Sertãozinho",
    "state": "SP",
    "zip_code": "14160-000",
    "origin": "private",
    "case_number": "1001234-56.2026.8.26.0597",
    "case_type": "civil",
    "case_description": "Ação de cobrança",
}


@pytest.fixture
def create_client(client):
    def factory(headers, **overrides):
        response = client.post("/clients/", json={**CLIENT_PAYLOAD, **overrides}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()
    return factory
