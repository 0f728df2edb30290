"""
Unit tests for API routes.

Tests endpoint responses with a mocked AuthService.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.dependencies import get_auth_service
from src.api.errors import register_exception_handlers
from src.api.routes import router
from src.domain.auth import AuthService
from src.domain.exceptions import (
    AlreadyExists,
    BadRequest,
    InternalError,
    MailDeliveryError,
    NotFound,
    RepositoryError,
    Unauthorized,
    ValidationError,
)
from src.domain.ports import CredentialType
from src.domain.user import User

REGISTER_BODY = {
    "first_name": "John",
    "last_name": "Doe",
    "username": "jdoe",
    "email": "john@x.io",
    "password": "Secret123",
}


@pytest.fixture
def mock_service() -> MagicMock:
    return MagicMock(spec=AuthService)


@pytest.fixture
def app(mock_service: MagicMock) -> FastAPI:
    """Create test FastAPI application with the service mocked out."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(router)
    test_app.dependency_overrides[get_auth_service] = lambda: mock_service
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


def make_user() -> User:
    user = MagicMock(spec=User)
    user.full_name = "John Doe"
    user.email = "john@x.io"
    return user


class TestRegisterEndpoint:
    """Tests for POST /register."""

    def test_success_returns_201_envelope(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.register.return_value = make_user()

        response = client.post("/register", json=REGISTER_BODY)

        assert response.status_code == 201
        assert response.json() == {
            "status": "success",
            "message": "Welcome John Doe!. An email has been sent to john@x.io. "
            "Please verify your account.",
        }
        request = mock_service.register.call_args[0][0]
        assert request.username == "jdoe"
        assert request.password == "Secret123"

    @pytest.mark.parametrize("field", list(REGISTER_BODY))
    def test_missing_field_returns_400(self, client: TestClient, field: str) -> None:
        body = {k: v for k, v in REGISTER_BODY.items() if k != field}
        response = client.post("/register", json=body)
        assert response.status_code == 400

    def test_invalid_email_returns_400(self, client: TestClient, mock_service: MagicMock) -> None:
        response = client.post("/register", json={**REGISTER_BODY, "email": "invalid-email"})

        assert response.status_code == 400
        mock_service.register.assert_not_called()

    def test_field_too_long_returns_400(self, client: TestClient) -> None:
        response = client.post("/register", json={**REGISTER_BODY, "first_name": "x" * 129})
        assert response.status_code == 400

    def test_malformed_json_returns_400(self, client: TestClient) -> None:
        response = client.post(
            "/register", content="{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400

    def test_domain_validation_error_returns_400(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        mock_service.register.side_effect = ValidationError({"email": "must be a valid email address"})

        response = client.post("/register", json=REGISTER_BODY)

        assert response.status_code == 400
        assert response.json() == {"detail": "email: must be a valid email address"}

    @pytest.mark.parametrize("field", ["email", "username"])
    def test_duplicate_returns_400_naming_field(
        self, client: TestClient, mock_service: MagicMock, field: str
    ) -> None:
        mock_service.register.side_effect = AlreadyExists(field)

        response = client.post("/register", json=REGISTER_BODY)

        assert response.status_code == 400
        assert response.json() == {"detail": f"{field} already exists"}

    def test_mail_failure_returns_500(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.register.side_effect = MailDeliveryError("smtp down")

        response = client.post("/register", json=REGISTER_BODY)

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}

    def test_persistence_failure_returns_500(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        mock_service.register.side_effect = InternalError("could not persist user")

        response = client.post("/register", json=REGISTER_BODY)

        assert response.status_code == 500


class TestVerifyEndpoint:
    """Tests for GET /verify."""

    def test_success_returns_200(self, client: TestClient, mock_service: MagicMock) -> None:
        response = client.get("/verify", params={"id": "u1", "sig": "abc", "exp": "100"})

        assert response.status_code == 200
        assert response.json() == {
            "status": "success",
            "message": "Your account has been verified. You can now login.",
        }
        mock_service.verify.assert_called_once_with("u1", "abc", "100")

    @pytest.mark.parametrize("missing", ["id", "sig", "exp"])
    def test_missing_parameter_returns_400(
        self, client: TestClient, mock_service: MagicMock, missing: str
    ) -> None:
        params = {k: v for k, v in {"id": "u1", "sig": "abc", "exp": "100"}.items() if k != missing}

        response = client.get("/verify", params=params)

        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid request"}
        mock_service.verify.assert_not_called()

    def test_empty_parameter_returns_400(self, client: TestClient, mock_service: MagicMock) -> None:
        response = client.get("/verify", params={"id": "u1", "sig": "", "exp": "100"})

        assert response.status_code == 400
        mock_service.verify.assert_not_called()

    @pytest.mark.parametrize("message", ["invalid verification link", "user already verified"])
    def test_bad_request_returns_400(
        self, client: TestClient, mock_service: MagicMock, message: str
    ) -> None:
        mock_service.verify.side_effect = BadRequest(message)

        response = client.get("/verify", params={"id": "u1", "sig": "abc", "exp": "100"})

        assert response.status_code == 400
        assert response.json() == {"detail": message}

    def test_unknown_user_returns_404(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.verify.side_effect = NotFound("user not found")

        response = client.get("/verify", params={"id": "u1", "sig": "abc", "exp": "100"})

        assert response.status_code == 404

    def test_repository_failure_returns_500(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        mock_service.verify.side_effect = RepositoryError("connection reset")

        response = client.get("/verify", params={"id": "u1", "sig": "abc", "exp": "100"})

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}


class TestLoginEndpoint:
    """Tests for POST /login."""

    def test_username_login_returns_token(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        mock_service.login.return_value = "token-value"

        response = client.post("/login", json={"username": "jdoe", "password": "Secret123"})

        assert response.status_code == 200
        assert response.json() == {
            "status": "success",
            "message": "You have been successfully logged in.",
            "data": {"token": "token-value"},
        }
        mock_service.login.assert_called_once_with("jdoe", CredentialType.USERNAME, "Secret123")

    def test_email_login(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.login.return_value = "token-value"

        response = client.post("/login", json={"email": "john@x.io", "password": "Secret123"})

        assert response.status_code == 200
        mock_service.login.assert_called_once_with("john@x.io", CredentialType.EMAIL, "Secret123")

    def test_neither_credential_returns_400(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        response = client.post("/login", json={"password": "Secret123"})

        assert response.status_code == 400
        mock_service.login.assert_not_called()

    def test_both_credentials_returns_400(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        response = client.post(
            "/login", json={"username": "jdoe", "email": "john@x.io", "password": "Secret123"}
        )

        assert response.status_code == 400
        mock_service.login.assert_not_called()

    def test_missing_password_returns_400(self, client: TestClient) -> None:
        response = client.post("/login", json={"username": "jdoe"})
        assert response.status_code == 400

    def test_malformed_body_returns_400(self, client: TestClient) -> None:
        response = client.post(
            "/login", content="username=jdoe", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400

    def test_unauthorized_returns_generic_401(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        mock_service.login.side_effect = Unauthorized()

        response = client.post("/login", json={"username": "jdoe", "password": "wrong"})

        assert response.status_code == 401
        assert response.json() == {"detail": "invalid credentials"}
