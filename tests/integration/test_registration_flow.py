"""
Integration tests for the registration flow.

Tests the three registration steps through the API with a real database
and documents written to a temporary directory.
"""

import logging
from base64 import b64encode
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from psycopg_pool import ConnectionPool

from bank_onboarding.adapters.repository.postgres import PostgresProfileRecordStore
from bank_onboarding.adapters.storage.local import LocalDocumentStore
from bank_onboarding.api.dependencies import get_document_store
from bank_onboarding.api.main import app

pytestmark = [pytest.mark.integration, pytest.mark.usefixtures("clean_database")]

BASIC_INFO = {
    "full_name": "Mr. A",
    "email": "a@bank.com",
    "phone_number": "+2348012345678",
    "password": "secret1",
    "confirm_password": "secret1",
}

DETAILS = {
    "bank_name": "First Example Bank",
    "registration_number": "RC123456",
    "head_office_address": "24, Awolowo, Ibadan",
    "num_agents": "72",
}


def basic_auth_header(email: str, password: str) -> dict:
    """Create HTTP BASIC AUTH header for testing."""
    credentials = f"{email}:{password}"
    encoded = b64encode(credentials.encode()).decode()
    return {"Authorization": f"Basic {encoded}"}


@pytest.fixture
def document_root(tmp_path: Path) -> Path:
    return tmp_path / "documents"


@pytest.fixture
def client(pool: ConnectionPool, document_root: Path) -> TestClient:
    """Create test client with real database connection."""
    app.state.pool = pool
    app.dependency_overrides[get_document_store] = lambda: LocalDocumentStore(
        document_root, "http://testserver/documents"
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def record_store(pool: ConnectionPool) -> PostgresProfileRecordStore:
    return PostgresProfileRecordStore(pool)


class TestRegistrationFlow:
    def test_three_steps_create_profile(
        self,
        client: TestClient,
        record_store: PostgresProfileRecordStore,
        document_root: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        assert client.post("/v1/registration/basic-info", json=BASIC_INFO).status_code == 201

        details = client.post(
            "/v1/registration/details",
            data=DETAILS,
            files={"supporting_document": ("licence.pdf", b"%PDF-1.4", "application/pdf")},
        )
        assert details.status_code == 200
        assert details.json()["state"] == "DETAILS_COLLECTED"

        with caplog.at_level(logging.INFO):
            verified = client.post("/v1/registration/verification", json={"code": "123456"})

        assert verified.status_code == 200
        uid = verified.json()["identity_id"]
        profile = record_store.get(uid)
        assert profile["bank_name"] == "First Example Bank"
        assert profile["num_agents"] == 72
        assert profile["role"] == "bank"
        assert profile["email_verified"] is True
        assert profile["registration_completed"] is True
        assert "password" not in profile
        assert profile["supporting_document_url"].startswith(
            "http://testserver/documents/bank_documents/a%40bank.com/"
        )
        assert len(list(document_root.rglob("*_licence.pdf"))) == 1
        assert "[VERIFICATION]" in caplog.text
        assert client.get("/v1/registration").json()["state"] == "START"

    def test_duplicate_email_rejected(self, client: TestClient) -> None:
        client.post("/v1/registration/basic-info", json=BASIC_INFO)

        response = TestClient(app).post("/v1/registration/basic-info", json=BASIC_INFO)

        assert response.status_code == 400
        assert "already in use" in response.json()["detail"]

    def test_authenticated_details_complete_registration(
        self, client: TestClient, record_store: PostgresProfileRecordStore
    ) -> None:
        client.post("/v1/registration/basic-info", json=BASIC_INFO)

        response = TestClient(app).post(
            "/v1/registration/details",
            data=DETAILS,
            headers=basic_auth_header("a@bank.com", "secret1"),
        )

        assert response.status_code == 200
        assert response.json()["state"] == "VERIFIED"
        profile = record_store.get(response.json()["identity_id"])
        assert profile["registration_completed"] is True
        assert "supporting_document_url" not in profile

    def test_authenticated_update_without_agent_count_keeps_stored_count(
        self, client: TestClient, record_store: PostgresProfileRecordStore
    ) -> None:
        client.post("/v1/registration/basic-info", json=BASIC_INFO)
        client.post("/v1/registration/details", data=DETAILS)
        uid = client.post("/v1/registration/verification", json={"code": "123456"}).json()[
            "identity_id"
        ]

        update = {key: value for key, value in DETAILS.items() if key != "num_agents"}
        response = TestClient(app).post(
            "/v1/registration/details",
            data={**update, "bank_name": "Renamed Bank"},
            headers=basic_auth_header("a@bank.com", "secret1"),
        )

        assert response.status_code == 200
        profile = record_store.get(uid)
        assert profile["bank_name"] == "Renamed Bank"
        assert profile["num_agents"] == 72

    def test_wrong_credentials_return_401(self, client: TestClient) -> None:
        client.post("/v1/registration/basic-info", json=BASIC_INFO)

        response = client.get("/v1/registration", headers=basic_auth_header("a@bank.com", "nope12"))

        assert response.status_code == 401

    def test_state_survives_new_client_with_same_cookie(self, client: TestClient) -> None:
        client.post("/v1/registration/basic-info", json=BASIC_INFO)
        scope = client.cookies["registration_scope"]

        resumed = TestClient(app, cookies={"registration_scope": scope})

        assert resumed.get("/v1/registration").json()["state"] == "BASIC_INFO_COLLECTED"


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
