"""
Tests for core security utilities.

Tests:
- Actor role helpers and role checks
- Password hashing and verification
- Token verification
"""

import pytest
from datetime import timedelta
import jwt as pyjwt

from conftest import make_token
from core.exceptions import Unauthorized
from core.security import (
    Actor,
    hash_password,
    require_role,
    require_staff,
    verify_jwt_token,
    verify_password,
)
from core.config import settings
from database.models.users import UserRole


class TestActor:
    @pytest.mark.parametrize("role,is_staff,is_admin", [
        (UserRole.ADMIN, True, True),
        (UserRole.HR, True, False),
        (UserRole.EMPLOYEE, False, False),
    ])
    def test_role_flags(self, role, is_staff, is_admin):
        actor = Actor(id="u1", role=role)
        assert actor.is_staff is is_staff
        assert actor.is_admin is is_admin

    def test_require_role_returns_actor(self):
        actor = Actor(id="u1", role=UserRole.HR)
        assert require_role(actor, {UserRole.HR}, "do things") is actor

    def test_require_role_rejects_anonymous(self):
        with pytest.raises(Unauthorized, match="Authentication required"):
            require_role(None, {UserRole.HR}, "do things")

    def test_require_staff_rejects_employee(self):
        with pytest.raises(Unauthorized):
            require_staff(Actor(id="u1", role=UserRole.EMPLOYEE), "approve candidates")


class TestPasswordHashing:
    """Test password hashing and verification."""

    def test_hash_password(self):
        hashed = hash_password("Abcdefghij1k")
        assert hashed != "Abcdefghij1k"
        assert hashed.startswith("$2b$")  # bcrypt format

    def test_verify_password(self):
        hashed = hash_password("Abcdefghij1k")
        assert verify_password("Abcdefghij1k", hashed)
        assert not verify_password("wrong", hashed)

    def test_verify_against_garbage_hash(self):
        assert verify_password("anything", "not-a-hash") is False


class TestVerifyJwtToken:
    def test_valid_token(self):
        payload = verify_jwt_token(
            make_token("user-1"), settings.auth_jwt_secret, audience="authenticated"
        )
        assert payload["sub"] == "user-1"

    def test_expired_token(self):
        token = make_token("user-1", expires_in=timedelta(seconds=-10))
        with pytest.raises(pyjwt.ExpiredSignatureError):
            verify_jwt_token(token, settings.auth_jwt_secret, audience="authenticated")

    def test_wrong_secret(self):
        token = make_token("user-1", secret="another-secret-that-is-long-enough-32")
        with pytest.raises(pyjwt.InvalidTokenError):
            verify_jwt_token(token, settings.auth_jwt_secret, audience="authenticated")

    def test_wrong_audience(self):
        token = make_token("user-1", audience="someone-else")
        with pytest.raises(pyjwt.InvalidTokenError):
            verify_jwt_token(token, settings.auth_jwt_secret, audience="authenticated")

    def test_missing_subject(self):
        token = pyjwt.encode({"aud": "authenticated"}, settings.auth_jwt_secret, algorithm="HS256")
        with pytest.raises(pyjwt.InvalidTokenError):
            verify_jwt_token(token, settings.auth_jwt_secret, audience="authenticated")
