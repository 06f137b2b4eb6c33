"""Tests for the app shell: health, root route and error envelopes."""

from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from storefront.db.database import get_db
from storefront.main import app, validation_message
from storefront.services.category_service import CategoryService


class TestHealth:
    def test_health_reports_database(self, client, db_session):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "service": "storefront-service",
            "version": "1.0.0",
            "database": "ok",
        }

    def test_health_degraded_when_database_unreachable(self, client, db_session):
        broken = MagicMock()
        broken.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
        app.dependency_overrides[get_db] = lambda: broken

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "degraded",
            "service": "storefront-service",
            "version": "1.0.0",
            "database": "unreachable",
        }

    def test_root(self, client, db_session):
        response = client.get("/")
        assert response.json() == {"service": "storefront-service", "version": "1.0.0"}


class TestErrorEnvelope:
    def test_unknown_route_uses_envelope(self, client, db_session):
        response = client.get("/api/v1/nowhere")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Not Found"}

    def test_wrong_method_uses_envelope(self, client, db_session):
        response = client.delete("/api/v1/category/get-category")

        assert response.status_code == 405
        assert response.json()["success"] is False

    def test_unhandled_exception_uses_envelope(self, client, db_session):
        failing_client = TestClient(app, raise_server_exceptions=False)
        with patch.object(CategoryService, "list_categories", side_effect=RuntimeError("boom")):
            response = failing_client.get("/api/v1/category/get-category")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "Internal server error",
            "error": "RuntimeError",
        }

    def test_validation_errors_are_bad_requests(self, client, db_session):
        response = client.post("/api/v1/auth/login", json={})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Email is Required"
        assert isinstance(body["errors"], list)


class TestValidationMessage:
    def test_missing_field(self):
        errors = [{"type": "missing", "loc": ("body", "email"), "msg": "Field required"}]
        assert validation_message(errors) == "Email is Required"

    def test_snake_case_label(self):
        errors = [{"type": "missing", "loc": ("body", "new_password"), "msg": "Field required"}]
        assert validation_message(errors) == "New Password is Required"

    def test_value_error_uses_raised_message(self):
        errors = [{
            "type": "value_error",
            "loc": ("body", "radio"),
            "msg": "Value error, Price range must be [min, max]",
            "ctx": {"error": ValueError("Price range must be [min, max]")},
        }]
        assert validation_message(errors) == "Price range must be [min, max]"

    def test_other_errors_are_prefixed_with_field(self):
        errors = [{"type": "greater_than", "loc": ("body", "price"), "msg": "Input should be greater than 0"}]
        assert validation_message(errors) == "Price: Input should be greater than 0"

    def test_whole_body_error(self):
        errors = [{"type": "model_attributes_type", "loc": ("body",), "msg": "Input should be a valid dictionary"}]
        assert validation_message(errors) == "Input should be a valid dictionary"

    def test_no_errors(self):
        assert validation_message([]) == "Invalid request"
