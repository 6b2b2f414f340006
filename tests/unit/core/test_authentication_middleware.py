"""
Tests for authentication middleware.

Tests:
- Anonymous requests pass through without an actor
- Token validation from Authorization header
- Unknown and disabled accounts
- Public endpoint exemptions
"""

from datetime import timedelta
from typing import Optional

import httpx
import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI

from api.dependencies import get_actor, require_actor
from conftest import make_token
from core.config import settings
from core.middleware.authentication import AuthenticationMiddleware
from core.middleware.error_handling import setup_error_handlers
from core.security import Actor
from database.models.users import User, UserRole, UserStatus


@pytest_asyncio.fixture
async def client(store):
    app = FastAPI()
    app.state.store = store
    setup_error_handlers(app)
    app.add_middleware(
        AuthenticationMiddleware,
        jwt_secret=settings.auth_jwt_secret,
        jwt_algorithm="HS256",
        audience="authenticated",
    )

    @app.get("/whoami")
    async def whoami(actor: Optional[Actor] = Depends(get_actor)):
        if actor is None:
            return {"actor": None}
        return {"actor": actor.id, "role": actor.role.value}

    @app.get("/protected")
    async def protected(actor: Actor = Depends(require_actor)):
        return {"actor": actor.id}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestAuthenticationMiddleware:
    @pytest.mark.asyncio
    async def test_anonymous_request_has_no_actor(self, client):
        response = await client.get("/whoami")

        assert response.status_code == 200
        assert response.json() == {"actor": None}

    @pytest.mark.asyncio
    async def test_anonymous_request_to_protected_route(self, client):
        response = await client.get("/protected")

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Authentication required"

    @pytest.mark.asyncio
    async def test_valid_token_resolves_actor(self, client, hr_user):
        response = await client.get(
            "/whoami", headers={"Authorization": f"Bearer {make_token(hr_user.id)}"}
        )

        assert response.status_code == 200
        assert response.json() == {"actor": hr_user.id, "role": UserRole.HR.value}

    @pytest.mark.asyncio
    async def test_expired_token(self, client, hr_user):
        token = make_token(hr_user.id, expires_in=timedelta(seconds=-30))
        response = await client.get("/whoami", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_EXPIRED"

    @pytest.mark.asyncio
    async def test_tampered_token(self, client, hr_user):
        token = make_token(hr_user.id, secret="not-the-server-secret-but-long-enough")
        response = await client.get("/whoami", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_INVALID"

    @pytest.mark.asyncio
    async def test_unknown_user(self, client):
        response = await client.get(
            "/whoami", headers={"Authorization": f"Bearer {make_token('no-such-user')}"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_disabled_user(self, client, store):
        user = await store.insert(
            User,
            {
                "username": "leaver",
                "email": "leaver@company.vn",
                "phone": "0901234567",
                "full_name": "Le Aver",
                "role": UserRole.EMPLOYEE,
                "status": UserStatus.DISABLED,
            },
        )
        response = await client.get(
            "/whoami", headers={"Authorization": f"Bearer {make_token(user.id)}"}
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "USER_INACTIVE"

    @pytest.mark.asyncio
    async def test_public_endpoint_ignores_bad_token(self, client):
        response = await client.get("/health", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_non_bearer_scheme_is_anonymous(self, client):
        response = await client.get("/whoami", headers={"Authorization": "Basic dXNlcjpwYXNz"})

        assert response.json() == {"actor": None}
