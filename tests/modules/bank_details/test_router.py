"""
API tests for the bank details router.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from app.core.database import get_db
from app.core.security import create_access_token
from app.main import app
from app.modules.bank_details.schemas import BankDetails


@pytest.fixture
def client(mock_db):
    async def override_get_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _auth_header(user_id: int, role: str) -> dict[str, str]:
    token = create_access_token(str(user_id), {"email": f"{role}@example.com", "role": role})
    return {"Authorization": f"Bearer {token}"}


class TestBankDetailsApi:
    def test_teacher_reads_own_details(self, client):
        with patch(
            "app.modules.bank_details.router.service.get_own_bank_details",
            new_callable=AsyncMock,
            return_value=BankDetails(iban="FR76 3000 6000 0112 3456 7890 189"),
        ):
            response = client.get("/api/v1/bank-details", headers=_auth_header(20, "teacher"))

        assert response.status_code == 200
        assert response.json()["iban"] == "FR76 3000 6000 0112 3456 7890 189"

    def test_student_cannot_update(self, client):
        response = client.put(
            "/api/v1/bank-details",
            json={"bic": "BNPAFRPP"},
            headers=_auth_header(1, "student"),
        )

        assert response.status_code == 403

    def test_invalid_iban(self, client):
        response = client.put(
            "/api/v1/bank-details",
            json={"iban": "FR7630006000011234567890188"},
            headers=_auth_header(20, "teacher"),
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "INVALID_IBAN"

    def test_teacher_cannot_export(self, client):
        response = client.get("/api/v1/bank-details/teachers", headers=_auth_header(20, "teacher"))

        assert response.status_code == 403

    def test_admin_view_passes_client_ip(self, client):
        with patch(
            "app.modules.bank_details.router.service.get_teacher_bank_details",
            new_callable=AsyncMock,
            return_value={
                "teacher": {
                    "user_id": 20,
                    "first_name": "Paul",
                    "last_name": "Martin",
                    "email": "prof@example.com",
                },
                "bank_details": {},
            },
        ) as mock_view:
            response = client.get(
                "/api/v1/bank-details/teachers/20", headers=_auth_header(100, "admin")
            )

        assert response.status_code == 200
        _db, admin, teacher_id, ip_address = mock_view.await_args.args
        assert admin.id == 100
        assert teacher_id == 20
        assert ip_address == "testclient"
