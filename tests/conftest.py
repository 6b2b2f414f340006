"""Shared fixtures and utilities for tests."""

import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

# Settings are read at import time, so the environment is prepared first
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AUTH_JWT_SECRET", "test-jwt-secret-key-min-32-chars-long-for-security")
os.environ.setdefault("AUTH_JWT_ALGORITHM", "HS256")
os.environ.setdefault("AUTH_JWT_AUDIENCE", "authenticated")
os.environ.setdefault("JSON_LOGS", "false")

import jwt as pyjwt
import pytest
import pytest_asyncio

from api.services.audit import AuditRecorder, StoreAuditRecorder
from core.exceptions import StoreUnavailable
from core.config import settings
from core.security import Actor
from database.engine import build_engine, build_session_factory, close_db, init_db
from database.models.candidates import Candidate, CandidateStatus
from database.models.positions import Position
from database.models.users import User, UserRole, UserStatus
from database.store import SQLAlchemyEntityStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class RecordingAuditRecorder(AuditRecorder):
    """Keeps audit events in memory for assertions."""

    def __init__(self):
        self.events: List[Dict[str, Any]] = []

    async def record(self, action, target_type, target_id, payload=None, actor_id=None):
        self.events.append(
            {
                "action": getattr(action, "value", action),
                "target_type": target_type,
                "target_id": target_id,
                "payload": payload or {},
                "actor_id": actor_id,
            }
        )

    def actions(self) -> List[str]:
        return [event["action"] for event in self.events]


class UnavailableAuditStore:
    """Stands in for a store whose audit table cannot be written."""

    async def insert(self, model, values):
        raise StoreUnavailable()


def failing_audit_recorder() -> StoreAuditRecorder:
    return StoreAuditRecorder(UnavailableAuditStore())


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = build_engine(TEST_DATABASE_URL)
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest_asyncio.fixture
async def store(engine):
    return SQLAlchemyEntityStore(build_session_factory(engine))


@pytest.fixture
def audit():
    return RecordingAuditRecorder()


async def _make_user(
    store,
    username: str,
    role: UserRole,
    status: UserStatus = UserStatus.ACTIVE,
) -> User:
    return await store.insert(
        User,
        {
            "username": username,
            "email": f"{username}@company.vn",
            "phone": "0901234567",
            "full_name": username.title(),
            "role": role,
            "status": status,
        },
    )


@pytest_asyncio.fixture
async def admin_user(store):
    return await _make_user(store, "admin", UserRole.ADMIN)


@pytest_asyncio.fixture
async def hr_user(store):
    return await _make_user(store, "hrstaff", UserRole.HR)


@pytest_asyncio.fixture
async def interviewers(store):
    """Three active employees who can interview."""
    return [
        await _make_user(store, f"interviewer{n}", UserRole.EMPLOYEE)
        for n in range(1, 4)
    ]


@pytest.fixture
def admin(admin_user):
    return Actor(id=admin_user.id, role=UserRole.ADMIN)


@pytest.fixture
def hr(hr_user):
    return Actor(id=hr_user.id, role=UserRole.HR)


@pytest.fixture
def employee(interviewers):
    return Actor(id=interviewers[0].id, role=UserRole.EMPLOYEE)


@pytest_asyncio.fixture
async def position(store):
    return await store.insert(
        Position,
        {"title": "Backend Engineer", "department": "Engineering", "description": "Python services"},
    )


@pytest_asyncio.fixture
async def closed_position(store):
    return await store.insert(
        Position,
        {"title": "Data Analyst", "department": "Data", "description": "", "is_open": False},
    )


@pytest.fixture
def make_candidate(store, position):
    """Insert a candidate directly in the given status."""

    async def _make(
        status: CandidateStatus = CandidateStatus.SUBMITTED,
        email: Optional[str] = None,
    ) -> Candidate:
        return await store.insert(
            Candidate,
            {
                "full_name": "Nguyen Van An",
                "email": email or f"candidate-{status.value.lower()}@example.com",
                "phone": "0912345678",
                "applied_position_id": position.id,
                "status": status,
            },
        )

    return _make


def make_token(
    user_id: str,
    secret: Optional[str] = None,
    expires_in: timedelta = timedelta(hours=1),
    audience: Optional[str] = "authenticated",
) -> str:
    """Issue a token the way the hosted auth provider does."""
    payload = {
        "sub": user_id,
        "exp": datetime.now(timezone.utc) + expires_in,
        "iat": datetime.now(timezone.utc),
    }
    if audience:
        payload["aud"] = audience
    return pyjwt.encode(payload, secret or settings.auth_jwt_secret, algorithm="HS256")


def auth_headers(user_id: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}
