"""FastAPI dependencies for dependency injection."""

from typing import Optional
from fastapi import Depends, HTTPException, Request, status

from api.services.audit import AuditRecorder
from core.middleware.authentication import get_current_actor
from core.security import Actor
from database.store import EntityStore


def get_store(request: Request) -> EntityStore:
    """The entity store built by the application lifespan."""
    return request.app.state.store


def get_audit(request: Request) -> AuditRecorder:
    """The audit recorder built by the application lifespan."""
    return request.app.state.audit


async def get_actor(request: Request) -> Optional[Actor]:
    """
    Get the acting user resolved by the authentication middleware.
    This is optional - returns None for anonymous requests.
    """
    return get_current_actor(request)


async def require_actor(actor: Optional[Actor] = Depends(get_actor)) -> Actor:
    """Require an authenticated, active user."""
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return actor
