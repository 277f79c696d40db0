"""Tests for the @validate_request decorator."""

import pytest
from flask import Flask, jsonify
from pydantic import BaseModel, Field

from neighborfit.api.validation import validate_request
from neighborfit.exceptions import ValidationError
from neighborfit.main import handle_validation_error


class MockCreateRequest(BaseModel):
    """Test schema for request body validation."""
    name: str = Field(..., min_length=1)
    amount: float
    category: str | None = None


class MockSecretRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=8)


@pytest.fixture
def validation_client():
    """Create test client with validation test routes."""
    test_app = Flask(__name__)
    test_app.config["TESTING"] = True
    test_app.errorhandler(ValidationError)(handle_validation_error)

    @test_app.post("/test/valid")
    @validate_request
    def route_valid(data: MockCreateRequest):
        return jsonify(data.model_dump()), 200

    @test_app.put("/test/combined/<item_id>")
    @validate_request
    def route_combined(item_id: str, data: MockCreateRequest):
        return jsonify({"item_id": item_id, "name": data.name}), 200

    @test_app.post("/test/secret")
    @validate_request
    def route_secret(data: MockSecretRequest):
        return jsonify({"status": "ok"}), 200

    return test_app.test_client()


def test_valid_request_body(validation_client):
    response = validation_client.post(
        "/test/valid",
        json={"name": "Riverside", "amount": 3.5, "category": "parks"}
    )

    assert response.status_code == 200
    assert response.get_json() == {"name": "Riverside", "amount": 3.5, "category": "parks"}


def test_optional_field_omitted(validation_client):
    response = validation_client.post("/test/valid", json={"name": "Riverside", "amount": 1})

    assert response.status_code == 200
    assert response.get_json()["category"] is None


def test_missing_required_field(validation_client):
    response = validation_client.post("/test/valid", json={"name": "Riverside"})

    assert response.status_code == 400
    data = response.get_json()
    assert data["error"]["type"] == "ValidationError"
    fields = [e["field"] for e in data["error"]["details"]["errors"]]
    assert "amount" in fields


def test_error_entries_have_field_message_type(validation_client):
    response = validation_client.post("/test/valid", json={"amount": "not_a_number"})

    errors = response.get_json()["error"]["details"]["errors"]
    assert errors
    for error in errors:
        assert set(error) == {"field", "message", "expected_type"}


def test_empty_body_reports_model_and_received(validation_client):
    response = validation_client.post("/test/valid", json={})

    details = response.get_json()["error"]["details"]
    assert details["model"] == "MockCreateRequest"
    assert details["received"] == {}
    assert {"name", "amount"} <= {e["field"] for e in details["errors"]}


def test_non_object_json_treated_as_empty(validation_client):
    response = validation_client.post("/test/valid", json=[1, 2, 3])

    assert response.status_code == 400
    assert response.get_json()["error"]["details"]["received"] == {}


def test_path_parameters_pass_through(validation_client):
    response = validation_client.put(
        "/test/combined/abc-123",
        json={"name": "Riverside", "amount": 1}
    )

    assert response.status_code == 200
    assert response.get_json() == {"item_id": "abc-123", "name": "Riverside"}


def test_password_is_redacted(validation_client):
    response = validation_client.post(
        "/test/secret",
        json={"email": "ana@x.com", "password": "pw1"}
    )

    assert response.status_code == 400
    details = response.get_json()["error"]["details"]
    assert details["received"] == {"email": "ana@x.com", "password": "***"}
    assert b"pw1" not in response.data
