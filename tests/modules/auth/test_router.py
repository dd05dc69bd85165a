"""
API tests for the authentication router.

Service calls are patched; the database dependency is overridden.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from app.core.database import get_db
from app.core.exceptions import (
    AlreadyUsedError,
    ExpiredTokenError,
    InvalidTokenError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from app.core.security import create_access_token, decode_token
from app.main import app
from app.modules.auth.router import FORGOT_PASSWORD_MESSAGE, RESEND_ACTIVATION_MESSAGE

TOKEN_ERROR_BODY = {
    "error": "TOKEN_INVALID_OR_EXPIRED",
    "message": "This link is invalid or has expired.",
}


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


class TestLogin:
    def test_login_success(self, client, make_user):
        user = make_user(id=12, is_account_active=True)

        with patch(
            "app.modules.auth.router.service.authenticate",
            new_callable=AsyncMock,
            return_value=user,
        ):
            response = client.post(
                "/api/v1/auth/login",
                json={"email": user.email, "password": "Ruche2026!"},
            )

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["id"] == 12
        assert body["token_type"] == "bearer"

        claims = decode_token(body["access_token"])
        assert claims["sub"] == "12"
        assert claims["role"] == "student"

    def test_login_invalid_credentials(self, client):
        from app.core.exceptions import AuthenticationError

        with patch(
            "app.modules.auth.router.service.authenticate",
            new_callable=AsyncMock,
            side_effect=AuthenticationError("Invalid email or password."),
        ):
            response = client.post(
                "/api/v1/auth/login",
                json={"email": "a@example.com", "password": "nope"},
            )

        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "AUTHENTICATION_FAILED"


class TestForgotPassword:
    def test_known_email(self, client):
        with patch(
            "app.modules.auth.router.request_password_reset", new_callable=AsyncMock
        ) as mock_request:
            response = client.post(
                "/api/v1/auth/forgot-password", json={"email": "a@example.com"}
            )

        assert response.status_code == 200
        assert response.json() == {"message": FORGOT_PASSWORD_MESSAGE}
        mock_request.assert_awaited_once()

    def test_unknown_email_gets_same_answer(self, client):
        with patch(
            "app.modules.auth.router.request_password_reset",
            new_callable=AsyncMock,
            side_effect=NotFoundError("No account found for this email."),
        ):
            response = client.post(
                "/api/v1/auth/forgot-password", json={"email": "nobody@example.com"}
            )

        assert response.status_code == 200
        assert response.json() == {"message": FORGOT_PASSWORD_MESSAGE}

    def test_mail_failure(self, client):
        with patch(
            "app.modules.auth.router.request_password_reset",
            new_callable=AsyncMock,
            side_effect=TransportError(),
        ):
            response = client.post(
                "/api/v1/auth/forgot-password", json={"email": "a@example.com"}
            )

        assert response.status_code == 503

    def test_rate_limited(self, client):
        with patch("app.modules.auth.router.request_password_reset", new_callable=AsyncMock):
            statuses = [
                client.post(
                    "/api/v1/auth/forgot-password", json={"email": "a@example.com"}
                ).status_code
                for _ in range(6)
            ]

        assert statuses[:5] == [200] * 5
        assert statuses[5] == 429


class TestTokenEndpoints:
    """Token failures collapse into one generic error."""

    @pytest.mark.parametrize("error", [InvalidTokenError, ExpiredTokenError, AlreadyUsedError])
    def test_reset_password_token_errors(self, client, error):
        with patch(
            "app.modules.auth.router.service.reset_password",
            new_callable=AsyncMock,
            side_effect=error(),
        ):
            response = client.post(
                "/api/v1/auth/reset-password",
                json={"token": "abc", "new_password": "Ruche2026!"},
            )

        assert response.status_code == 400
        assert response.json()["detail"] == TOKEN_ERROR_BODY

    @pytest.mark.parametrize("error", [InvalidTokenError, ExpiredTokenError])
    def test_activate_token_errors(self, client, error):
        with patch(
            "app.modules.auth.router.service.activate_account",
            new_callable=AsyncMock,
            side_effect=error(),
        ):
            response = client.post(
                "/api/v1/auth/activate", json={"token": "abc", "password": "Ruche2026!"}
            )

        assert response.status_code == 400
        assert response.json()["detail"] == TOKEN_ERROR_BODY

    def test_activate_weak_password(self, client):
        with patch(
            "app.modules.auth.router.service.activate_account",
            new_callable=AsyncMock,
            side_effect=ValidationError("Too weak.", error_code="WEAK_PASSWORD"),
        ):
            response = client.post(
                "/api/v1/auth/activate", json={"token": "abc", "password": "weak"}
            )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "WEAK_PASSWORD"

    def test_activate_success(self, client, make_user):
        with patch(
            "app.modules.auth.router.service.activate_account",
            new_callable=AsyncMock,
            return_value=make_user(is_account_active=True),
        ):
            response = client.post(
                "/api/v1/auth/activate", json={"token": "abc", "password": "Ruche2026!"}
            )

        assert response.status_code == 200


class TestActivationEmails:
    def test_resend_is_generic(self, client):
        with patch(
            "app.modules.auth.router.service.resend_activation", new_callable=AsyncMock
        ):
            response = client.post(
                "/api/v1/auth/activation/resend", json={"email": "a@example.com"}
            )

        assert response.status_code == 200
        assert response.json() == {"message": RESEND_ACTIVATION_MESSAGE}

    def test_admin_send_activation(self, client, make_user):
        with patch(
            "app.modules.auth.router.service.send_activation_email",
            new_callable=AsyncMock,
            return_value=make_user(id=5),
        ) as mock_send:
            response = client.post(
                "/api/v1/auth/users/5/send-activation", headers=_auth_header(100, "admin")
            )

        assert response.status_code == 200
        assert mock_send.await_args.args[1] == 5

    def test_send_activation_requires_admin(self, client):
        response = client.post(
            "/api/v1/auth/users/5/send-activation", headers=_auth_header(1, "student")
        )

        assert response.status_code == 403

    def test_send_activation_requires_token(self, client):
        response = client.post("/api/v1/auth/users/5/send-activation")

        assert response.status_code in (401, 403)
