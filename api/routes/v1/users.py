"""User account endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from api.dependencies import get_audit, get_store, require_actor
from api.schemas.users import (
    ProvisionedUserResponse,
    UserCreate,
    UserResponse,
    UserStatusUpdate,
    UserUpdate,
)
from api.services import users as user_service
from api.services.audit import AuditRecorder
from core.security import Actor
from database.store import EntityStore

router = APIRouter()


@router.post(
    "",
    response_model=ProvisionedUserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Provision an account with a generated username and one-time password. HR/Admin only.",
)
async def create_user(
    request: UserCreate,
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Actor = Depends(require_actor),
):
    provisioned = await user_service.create_user(
        store,
        audit,
        full_name=request.full_name,
        email=request.email,
        phone=request.phone,
        role=request.role,
        actor=actor,
    )
    return ProvisionedUserResponse(
        user=UserResponse.model_validate(provisioned.user),
        password=provisioned.password,
    )


@router.get("", response_model=list[UserResponse], summary="List Users")
async def list_users(
    role: Optional[str] = Query(None, description="Filter by role"),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    return await user_service.list_users(store, actor, role=role, status=status_filter)


@router.get("/me", response_model=UserResponse, summary="Current User")
async def get_me(
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    return await user_service.get_user(store, actor.id, actor)


@router.get("/{user_id}", response_model=UserResponse, summary="Get User")
async def get_user(
    user_id: str = Path(..., description="User ID"),
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    return await user_service.get_user(store, user_id, actor)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update User",
    description="Admins may change any field; users may change their own name and phone.",
)
async def update_user(
    request: UserUpdate,
    user_id: str = Path(..., description="User ID"),
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Actor = Depends(require_actor),
):
    return await user_service.update_user(
        store, audit, user_id, request.model_dump(exclude_unset=True), actor
    )


@router.post(
    "/{user_id}/status",
    response_model=UserResponse,
    summary="Enable or Disable User",
)
async def set_user_status(
    request: UserStatusUpdate,
    user_id: str = Path(..., description="User ID"),
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Actor = Depends(require_actor),
):
    return await user_service.set_user_status(store, audit, user_id, request.status, actor)
