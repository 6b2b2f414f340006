"""Employee record endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, status

from api.dependencies import get_audit, get_store, require_actor
from api.schemas.employees import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from api.services import employees as employee_service
from api.services.audit import AuditRecorder
from core.security import Actor
from database.store import EntityStore

router = APIRouter()


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Employee Record",
)
async def create_employee(
    request: EmployeeCreate,
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Actor = Depends(require_actor),
):
    return await employee_service.create_employee(
        store,
        audit,
        place_of_residence=request.place_of_residence,
        hometown=request.hometown,
        national_id=request.national_id,
        actor=actor,
        user_id=request.user_id,
        candidate_id=request.candidate_id,
    )


@router.get("", response_model=list[EmployeeResponse], summary="List Employees")
async def list_employees(
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    return await employee_service.list_employees(store, actor)


@router.get(
    "/me",
    response_model=Optional[EmployeeResponse],
    summary="My Employee Record",
    description="The caller's employee record, or null if none has been created yet.",
)
async def get_my_employee_record(
    store: EntityStore = Depends(get_store),
    actor: Actor = Depends(require_actor),
):
    return await employee_service.get_employee_by_user(store, actor.id, actor)


@router.patch("/{employee_id}", response_model=EmployeeResponse, summary="Update Employee Record")
async def update_employee(
    request: EmployeeUpdate,
    employee_id: str = Path(..., description="Employee ID"),
    store: EntityStore = Depends(get_store),
    audit: AuditRecorder = Depends(get_audit),
    actor: Actor = Depends(require_actor),
):
    return await employee_service.update_employee(
        store, audit, employee_id, request.model_dump(exclude_unset=True), actor
    )
