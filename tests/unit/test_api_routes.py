"""
Unit tests for API v1 routes.

Tests endpoint responses with mocked dependencies.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.dependencies import get_registration_service
from src.api.v1.routes import router
from src.domain.exceptions import StoreUnavailable, ValidationFailed
from src.domain.ports import FailureReason, PublicAccount
from src.domain.registration import AvailabilityResult, RegistrationResult, RegistrationService

SIGNUP_BODY = {
    "email": "user@example.com",
    "password": "secure123",
    "password_confirmation": "secure123",
}


@pytest.fixture
def mock_service() -> MagicMock:
    """Mocked registration service."""
    return MagicMock(spec=RegistrationService)


@pytest.fixture
def client(mock_service: MagicMock) -> TestClient:
    """Create test client with the registration service overridden."""
    test_app = FastAPI()
    test_app.include_router(router, prefix="/v1")
    test_app.dependency_overrides[get_registration_service] = lambda: mock_service
    return TestClient(test_app)


class TestSignupEndpoint:
    """Tests for POST /v1/signup endpoint."""

    def test_signup_success_returns_201(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        """Successful signup returns 201 with the public account."""
        mock_service.register.return_value = RegistrationResult.succeeded(
            PublicAccount(
                id=1,
                email="user@example.com",
                created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            )
        )

        response = client.post("/v1/signup", json=SIGNUP_BODY)

        assert response.status_code == 201
        assert response.json() == {
            "success": True,
            "message": "User created successfully",
            "account": {
                "id": 1,
                "email": "user@example.com",
                "created_at": "2024-01-01T00:00:00Z",
            },
        }
        mock_service.register.assert_called_once_with(
            "user@example.com", "secure123", "secure123"
        )

    def test_signup_accepts_confirm_password_alias(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        """confirmPassword is forwarded as the confirmation."""
        mock_service.register.return_value = RegistrationResult.failed(
            FailureReason.EMAIL_TAKEN, "Email address is already in use"
        )

        client.post(
            "/v1/signup",
            json={"email": "a@b.com", "password": "secure123", "confirmPassword": "other123"},
        )

        mock_service.register.assert_called_once_with("a@b.com", "secure123", "other123")

    def test_email_taken_returns_409(self, client: TestClient, mock_service: MagicMock) -> None:
        """EMAIL_TAKEN maps to 409 with the signup body shape."""
        mock_service.register.return_value = RegistrationResult.failed(
            FailureReason.EMAIL_TAKEN, "Email address is already in use"
        )

        response = client.post("/v1/signup", json=SIGNUP_BODY)

        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "message": "Email address is already in use",
        }

    def test_validation_failure_returns_422_with_field(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        """VALIDATION_FAILED maps to 422 and names the field."""
        mock_service.register.return_value = RegistrationResult.failed(
            FailureReason.VALIDATION_FAILED,
            "Passwords don't match",
            field="password_confirmation",
        )

        response = client.post("/v1/signup", json=SIGNUP_BODY)

        assert response.status_code == 422
        assert response.json() == {
            "success": False,
            "message": "Passwords don't match",
            "field": "password_confirmation",
        }

    def test_store_unavailable_returns_503(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        """STORE_UNAVAILABLE maps to 503, distinct from 409."""
        mock_service.register.return_value = RegistrationResult.failed(
            FailureReason.STORE_UNAVAILABLE, "An error occurred during signup"
        )

        response = client.post("/v1/signup", json=SIGNUP_BODY)

        assert response.status_code == 503
        assert response.json()["success"] is False
        assert response.json()["message"] == "An error occurred during signup"

    def test_signup_requires_all_fields(self, client: TestClient) -> None:
        """Missing confirmation is rejected by request parsing."""
        response = client.post(
            "/v1/signup", json={"email": "user@example.com", "password": "secure123"}
        )
        assert response.status_code == 422

    def test_password_not_echoed(self, client: TestClient, mock_service: MagicMock) -> None:
        """Responses never echo the password."""
        mock_service.register.return_value = RegistrationResult.failed(
            FailureReason.EMAIL_TAKEN, "Email address is already in use"
        )

        response = client.post("/v1/signup", json=SIGNUP_BODY)

        assert "secure123" not in response.text


class TestEmailAvailabilityEndpoint:
    """Tests for GET /v1/email-availability endpoint."""

    def test_available_email(self, client: TestClient, mock_service: MagicMock) -> None:
        """Available email returns 200 with available true."""
        mock_service.check_availability.return_value = AvailabilityResult(
            available=True, message="Email is available"
        )

        response = client.get("/v1/email-availability", params={"email": "new@example.com"})

        assert response.status_code == 200
        assert response.json() == {"available": True, "message": "Email is available"}
        mock_service.check_availability.assert_called_once_with("new@example.com")

    def test_taken_email(self, client: TestClient, mock_service: MagicMock) -> None:
        """Registered email returns 200 with available false."""
        mock_service.check_availability.return_value = AvailabilityResult(
            available=False, message="Email is already registered"
        )

        response = client.get("/v1/email-availability", params={"email": "old@example.com"})

        assert response.status_code == 200
        assert response.json() == {"available": False, "message": "Email is already registered"}

    def test_malformed_email_returns_422(
        self, client: TestClient, mock_service: MagicMock
    ) -> None:
        """ValidationFailed maps to 422 with the message as detail."""
        mock_service.check_availability.side_effect = ValidationFailed(
            "email", "Please enter a valid email address"
        )

        response = client.get("/v1/email-availability", params={"email": "nope"})

        assert response.status_code == 422
        assert response.json() == {"detail": "Please enter a valid email address"}

    def test_store_outage_returns_503(self, client: TestClient, mock_service: MagicMock) -> None:
        """StoreUnavailable maps to 503."""
        mock_service.check_availability.side_effect = StoreUnavailable("down")

        response = client.get("/v1/email-availability", params={"email": "u@d.com"})

        assert response.status_code == 503
        assert response.json() == {"detail": "Unable to check email availability"}

    def test_email_query_param_required(self, client: TestClient) -> None:
        """Missing email parameter is rejected."""
        response = client.get("/v1/email-availability")
        assert response.status_code == 422
