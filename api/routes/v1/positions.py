"""
Position endpoints.

Open positions are public so the application form can list them; managing
positions is reserved for administrators.
"""

from fastapi import APIRouter, Depends, Path, status

from api.dependencies import get_audit, get_store, require_actor
from api.schemas.positions import PositionCreate, PositionResponse, PositionUpdate
from api.services import positions as position_service
from api.services.audit import AuditRecorder
from core.security import Actor
from database.store import EntityStore

router = APIRouter()


@router.get(
    "/open",
    response_model=list[PositionResponse],
    summary="List Open Positions",
    description="Positions currently accepting applications. No login required.",
)
async def list_open_positions(store: EntityStore = Depends(get_store)):
    return await position_service.list_open_positions(store)


@router.get(
    "",
    response_model=list[PositionResponse],
    summary="List Positions",
    description="All positions, open or closed. HR/Admin only.",
)
async def list_positions(
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    return await position_service.list_positions(store, actor)


@router.post(
    "",
    response_model=PositionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Position",
    description="Open a new position. Admin only.",
)
async def create_position(
    request: PositionCreate,
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Actor = Depends(require_actor),
):
    return await position_service.create_position(
        store,
        audit,
        title=request.title,
        department=request.department,
        description=request.description,
        actor=actor,
        is_open=request.is_open,
    )


@router.patch(
    "/{position_id}",
    response_model=PositionResponse,
    summary="Update Position",
    description="Edit, open or close a position. Admin only.",
)
async def update_position(
    request: PositionUpdate,
    position_id: str = Path(..., description="Position ID"),
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Actor = Depends(require_actor),
):
    return await position_service.update_position(
        store, audit, position_id, request.model_dump(exclude_unset=True), actor
    )
