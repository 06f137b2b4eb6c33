"""Integration tests for registration, login, password reset and profile routes."""

from unittest.mock import patch

import pytest

from storefront.auth.jwt_validator import jwt_validator
from storefront.auth.passwords import compare_password
from storefront.models import User
from storefront.services.user_service import UserService

from conftest import make_user

REGISTER_URL = "/api/v1/auth/register"
LOGIN_URL = "/api/v1/auth/login"


@pytest.fixture
def registration():
    return {
        "name": "John Doe",
        "email": "john@example.com",
        "password": "password123",
        "phone": "1234567890",
        "address": "123 Street",
        "answer": "Football",
    }


class TestRegister:
    def test_register_creates_regular_user(self, client, db_session, registration):
        response = client.post(REGISTER_URL, json=registration)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User Registered Successfully"
        assert body["user"]["email"] == "john@example.com"
        assert body["user"]["role"] == 0
        assert "password" not in body["user"]
        assert "answer" not in body["user"]

        stored = db_session.query(User).filter(User.email == "john@example.com").one()
        assert stored.password != "password123"
        assert compare_password("password123", stored.password)

    def test_register_accepts_structured_address(self, client, db_session, registration):
        registration["address"] = {"street": "1 Main St", "city": "Springfield"}
        response = client.post(REGISTER_URL, json=registration)

        assert response.status_code == 201
        assert response.json()["user"]["address"] == {"street": "1 Main St", "city": "Springfield"}

    def test_register_duplicate_email_conflicts(self, client, db_session, registration):
        client.post(REGISTER_URL, json=registration)
        response = client.post(REGISTER_URL, json=registration)

        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "message": "Email is already registered, please log in",
        }

    @pytest.mark.parametrize("field,message", [
        ("name", "Name is Required"),
        ("email", "Email is Required"),
        ("password", "Password is Required"),
        ("phone", "Phone is Required"),
        ("address", "Address is Required"),
        ("answer", "Answer is Required"),
    ])
    def test_register_missing_field(self, client, db_session, registration, field, message):
        del registration[field]
        response = client.post(REGISTER_URL, json=registration)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == message

    def test_register_blank_name(self, client, db_session, registration):
        registration["name"] = "   "
        response = client.post(REGISTER_URL, json=registration)

        assert response.status_code == 400
        assert response.json()["message"] == "Name is Required"

    def test_register_blank_address(self, client, db_session, registration):
        registration["address"] = "  "
        response = client.post(REGISTER_URL, json=registration)

        assert response.status_code == 400
        assert response.json()["message"] == "Address is Required"

    def test_register_rejects_non_numeric_phone(self, client, db_session, registration):
        registration["phone"] = "555-CALL"
        response = client.post(REGISTER_URL, json=registration)

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_register_rejects_invalid_email(self, client, db_session, registration):
        registration["email"] = "not-an-email"
        response = client.post(REGISTER_URL, json=registration)

        assert response.status_code == 400

    def test_register_racing_duplicate_email_conflicts(self, client, db_session, registration):
        client.post(REGISTER_URL, json=registration)

        # A concurrent registration can pass the lookup before the other commits
        with patch.object(UserService, "_find_by_email", return_value=None):
            response = client.post(REGISTER_URL, json=registration)

        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "message": "Email is already registered, please log in",
        }
        assert db_session.query(User).filter(User.email == "john@example.com").count() == 1


class TestLogin:
    def test_login_returns_user_and_token(self, client, user):
        response = client.post(LOGIN_URL, json={"email": "jane@example.com", "password": "secret123"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Logged in successfully"
        assert body["user"]["id"] == str(user.id)
        assert jwt_validator.extract_user_id(body["token"]) == str(user.id)

    def test_login_token_opens_protected_routes(self, client, user):
        token = client.post(LOGIN_URL, json={"email": "jane@example.com", "password": "secret123"}).json()["token"]

        response = client.get("/api/v1/auth/user-auth", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200

    def test_login_unknown_email(self, client, db_session):
        response = client.post(LOGIN_URL, json={"email": "ghost@example.com", "password": "secret123"})

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Email is not registered"}

    def test_login_wrong_password(self, client, user):
        response = client.post(LOGIN_URL, json={"email": "jane@example.com", "password": "wrong"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid Password"}

    def test_login_missing_password(self, client, db_session):
        response = client.post(LOGIN_URL, json={"email": "jane@example.com"})

        assert response.status_code == 400
        assert response.json()["message"] == "Password is Required"


class TestForgotPassword:
    URL = "/api/v1/auth/forgot-password"

    def test_reset_with_correct_answer(self, client, user):
        response = client.post(self.URL, json={
            "email": "jane@example.com",
            "answer": "Blue",
            "new_password": "brand-new-pass",
        })

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Password Reset Successfully"}

        login = client.post(LOGIN_URL, json={"email": "jane@example.com", "password": "brand-new-pass"})
        assert login.status_code == 200
        old_login = client.post(LOGIN_URL, json={"email": "jane@example.com", "password": "secret123"})
        assert old_login.status_code == 401

    def test_reset_with_wrong_answer(self, client, user):
        response = client.post(self.URL, json={
            "email": "jane@example.com",
            "answer": "Red",
            "new_password": "brand-new-pass",
        })

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Wrong Email Or Answer"}

    def test_reset_requires_new_password(self, client, db_session):
        response = client.post(self.URL, json={"email": "jane@example.com", "answer": "Blue"})

        assert response.status_code == 400
        assert response.json()["message"] == "New Password is Required"


class TestProfile:
    URL = "/api/v1/auth/profile"

    def test_partial_update_keeps_other_fields(self, client, user, user_headers):
        response = client.put(self.URL, json={"name": "Jane Smith"}, headers=user_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Profile Updated Successfully"
        assert body["updated_user"]["name"] == "Jane Smith"
        assert body["updated_user"]["phone"] == "5551234567"
        assert body["updated_user"]["address"] == "1 Main Street"
        assert body["updated_user"]["email"] == "jane@example.com"

    def test_password_change(self, client, user, user_headers):
        response = client.put(self.URL, json={"password": "longer-password"}, headers=user_headers)
        assert response.status_code == 200

        login = client.post(LOGIN_URL, json={"email": "jane@example.com", "password": "longer-password"})
        assert login.status_code == 200

    def test_short_password_rejected(self, client, user, user_headers):
        response = client.put(self.URL, json={"password": "abc"}, headers=user_headers)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Password is required and 6 character long",
        }

    def test_email_is_not_updatable(self, client, user, user_headers):
        response = client.put(self.URL, json={"email": "other@example.com"}, headers=user_headers)

        assert response.status_code == 200
        assert response.json()["updated_user"]["email"] == "jane@example.com"

    def test_requires_sign_in(self, client, db_session):
        response = client.put(self.URL, json={"name": "Nobody"})
        assert response.status_code == 401


class TestListUsers:
    URL = "/api/v1/auth/users"

    def test_admin_sees_regular_users_only(self, client, db_session, user, admin_headers):
        make_user(db_session, "bob@example.com")

        response = client.get(self.URL, headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "All Users"
        emails = {u["email"] for u in body["users"]}
        assert emails == {"jane@example.com", "bob@example.com"}

    def test_regular_user_forbidden(self, client, user_headers):
        response = client.get(self.URL, headers=user_headers)
        assert response.status_code == 403
        assert response.json()["message"] == "UnAuthorized Access"
