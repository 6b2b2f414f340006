"""Health check endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_store
from database.models.users import User
from database.store import EntityStore

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version="0.1.0")


@router.get("/ready")
async def readiness_check(store: EntityStore = Depends(get_store)):
    """Readiness check for load balancers. Fails with 503 when the database is unreachable."""
    await store.count(User)
    return {"status": "ready"}
