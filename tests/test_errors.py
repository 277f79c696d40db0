"""Tests for error handling and custom exceptions."""

import pytest
from flask import Flask

from neighborfit.config import settings
from neighborfit.exceptions import (
    AuthenticationError,
    DatabaseError,
    DuplicateUserError,
    InvalidCredentialsError,
    NeighborFitError,
    ResourceNotFound,
    ValidationError,
)
from neighborfit.main import (
    handle_authentication_error,
    handle_database_error,
    handle_duplicate_user,
    handle_internal_error,
    handle_invalid_credentials,
    handle_neighborfit_error,
    handle_not_found,
    handle_validation_error,
)


@pytest.fixture
def error_client():
    """Create a test app with error testing routes."""
    test_app = Flask(__name__)
    test_app.config["TESTING"] = True

    test_app.errorhandler(ValidationError)(handle_validation_error)
    test_app.errorhandler(DuplicateUserError)(handle_duplicate_user)
    test_app.errorhandler(InvalidCredentialsError)(handle_invalid_credentials)
    test_app.errorhandler(AuthenticationError)(handle_authentication_error)
    test_app.errorhandler(ResourceNotFound)(handle_not_found)
    test_app.errorhandler(DatabaseError)(handle_database_error)
    test_app.errorhandler(NeighborFitError)(handle_neighborfit_error)
    test_app.errorhandler(Exception)(handle_internal_error)

    @test_app.route("/test/validation")
    def raise_validation():
        raise ValidationError("Please provide all required fields", {"missing": ["name"]})

    @test_app.route("/test/duplicate")
    def raise_duplicate():
        raise DuplicateUserError("User already exists with this email", {"email": "ana@x.com"})

    @test_app.route("/test/credentials")
    def raise_credentials():
        raise InvalidCredentialsError("Invalid credentials", {"email": "ana@x.com"})

    @test_app.route("/test/unauthenticated")
    def raise_unauthenticated():
        raise AuthenticationError("Token has expired", {"code": "token_expired"})

    @test_app.route("/test/not-found")
    def raise_not_found():
        raise ResourceNotFound("User not found")

    @test_app.route("/test/database")
    def raise_database():
        raise DatabaseError("Server error during registration", {"reason": "disk I/O error"})

    @test_app.route("/test/internal")
    def raise_internal():
        raise RuntimeError("Something went wrong")

    return test_app.test_client()


@pytest.fixture
def production():
    original = settings.environment
    settings.environment = "production"
    yield
    settings.environment = original


class TestExceptionClasses:
    """Test custom exception classes."""

    def test_base_error_with_message(self):
        error = NeighborFitError("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.details == {}

    def test_base_error_with_details(self):
        error = NeighborFitError("Not found", details={"user_id": "123"})
        assert error.details == {"user_id": "123"}

    @pytest.mark.parametrize("cls", [
        ValidationError,
        DuplicateUserError,
        InvalidCredentialsError,
        AuthenticationError,
        ResourceNotFound,
        DatabaseError,
    ])
    def test_inherits_base(self, cls):
        assert issubclass(cls, NeighborFitError)


class TestErrorHandlers:
    """Test Flask error handlers."""

    @pytest.mark.parametrize("path,status,error_type", [
        ("/test/validation", 400, "ValidationError"),
        ("/test/duplicate", 400, "DuplicateUserError"),
        ("/test/credentials", 400, "InvalidCredentialsError"),
        ("/test/unauthenticated", 401, "AuthenticationError"),
        ("/test/not-found", 404, "ResourceNotFound"),
        ("/test/database", 500, "DatabaseError"),
    ])
    def test_status_and_type(self, error_client, path, status, error_type):
        response = error_client.get(path)

        assert response.status_code == status
        assert response.get_json()["error"]["type"] == error_type

    def test_details_included(self, error_client):
        data = error_client.get("/test/validation").get_json()
        assert data["error"]["details"] == {"missing": ["name"]}

    def test_error_without_details(self, error_client):
        data = error_client.get("/test/not-found").get_json()
        assert "details" not in data["error"]

    def test_invalid_credentials_never_has_details(self, error_client):
        data = error_client.get("/test/credentials").get_json()
        assert data["error"] == {"type": "InvalidCredentialsError", "message": "Invalid credentials"}

    def test_database_error_details_in_development(self, error_client):
        data = error_client.get("/test/database").get_json()
        assert data["error"]["details"] == {"reason": "disk I/O error"}

    def test_database_error_details_hidden_in_production(self, error_client, production):
        data = error_client.get("/test/database").get_json()
        assert "details" not in data["error"]
        assert "disk I/O" not in str(data)

    def test_internal_server_error_handler(self, error_client):
        response = error_client.get("/test/internal")
        data = response.get_json()

        assert response.status_code == 500
        assert data["error"]["type"] == "InternalServerError"
        assert data["error"]["message"] == "An internal error occurred"
