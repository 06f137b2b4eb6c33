"""Unit tests for password hashing, token handling and request authentication."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from storefront.auth.jwt_validator import JWTValidator, jwt_validator
from storefront.auth.passwords import compare_password, hash_password
from storefront.core.errors import UnauthorizedError


class TestPasswords:
    def test_hash_is_not_plain_text(self):
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert hashed.startswith("$2")

    def test_compare_matches_original(self):
        hashed = hash_password("secret123")
        assert compare_password("secret123", hashed) is True
        assert compare_password("wrong-password", hashed) is False

    def test_compare_rejects_empty_input(self):
        assert compare_password("", hash_password("secret123")) is False
        assert compare_password("secret123", "") is False

    def test_compare_rejects_non_bcrypt_hash(self):
        assert compare_password("secret123", "not-a-hash") is False


class TestJWTValidator:
    def test_token_round_trip(self):
        user_id = str(uuid4())
        token = jwt_validator.create_token(user_id)
        assert jwt_validator.extract_user_id(token) == user_id

    def test_token_expires_after_seven_days(self):
        payload = jwt_validator.verify_token(jwt_validator.create_token("abc"))
        lifetime = payload["exp"] - payload["iat"]
        assert lifetime == int(timedelta(days=7).total_seconds())

    def test_expired_token_is_rejected(self):
        past = datetime.now(timezone.utc) - timedelta(days=1)
        token = jwt.encode({"sub": "abc", "exp": past}, jwt_validator.secret, algorithm="HS256")

        with pytest.raises(UnauthorizedError) as exc_info:
            jwt_validator.verify_token(token)
        assert exc_info.value.message == "Token has expired"
        assert exc_info.value.status_code == 401

    def test_token_signed_with_other_secret_is_rejected(self):
        token = JWTValidator(secret="another-secret").create_token("abc")

        with pytest.raises(UnauthorizedError) as exc_info:
            jwt_validator.verify_token(token)
        assert exc_info.value.message == "Invalid authentication credentials"

    def test_token_without_subject_is_rejected(self):
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        token = jwt.encode({"exp": exp}, jwt_validator.secret, algorithm="HS256")

        with pytest.raises(UnauthorizedError):
            jwt_validator.verify_token(token)

    def test_garbage_token_is_rejected(self):
        with pytest.raises(UnauthorizedError):
            jwt_validator.verify_token("not.a.token")


class TestRequestAuthentication:
    """Authorization header handling on protected routes."""

    def test_bearer_token_accepted(self, client, user_headers):
        response = client.get("/api/v1/auth/user-auth", headers=user_headers)
        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_bare_token_accepted(self, client, user):
        token = jwt_validator.create_token(str(user.id))
        response = client.get("/api/v1/auth/user-auth", headers={"Authorization": token})
        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_missing_header_is_unauthorized(self, client, db_session):
        response = client.get("/api/v1/auth/user-auth")
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Authorization header missing"}

    def test_invalid_token_is_unauthorized(self, client, db_session):
        response = client.get("/api/v1/auth/user-auth", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_token_for_deleted_user_is_unauthorized(self, client, db_session):
        token = jwt_validator.create_token(str(uuid4()))
        response = client.get("/api/v1/auth/user-auth", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["message"] == "User no longer exists"

    def test_token_with_non_uuid_subject_is_unauthorized(self, client, db_session):
        token = jwt_validator.create_token("not-a-uuid")
        response = client.get("/api/v1/auth/user-auth", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_admin_check_rejects_regular_user(self, client, user_headers):
        response = client.get("/api/v1/auth/admin-auth", headers=user_headers)
        assert response.status_code == 403
        assert response.json() == {"success": False, "message": "UnAuthorized Access"}

    def test_admin_check_accepts_admin(self, client, admin_headers):
        response = client.get("/api/v1/auth/admin-auth", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"ok": True}
