"""Employee record service functions."""

from typing import Any, Dict, List, Optional
import logging

from core.exceptions import Unauthorized, ValidationFailed
from core.security import Actor, require_staff
from core.utils.validators import (
    MIN_ADDRESS_LENGTH,
    ensure_valid,
    validate_min_length,
    validate_national_id,
)
from database.models.audit import AuditAction
from database.models.candidates import Candidate
from database.models.employees import Employee
from database.models.users import User
from database.store import EntityStore
from api.services.audit import AuditRecorder

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"place_of_residence", "hometown", "national_id"}


def _validated_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    if "place_of_residence" in data:
        ensure_valid(
            "place_of_residence",
            validate_min_length(data["place_of_residence"], MIN_ADDRESS_LENGTH, "Place of residence"),
        )
        fields["place_of_residence"] = data["place_of_residence"].strip()
    if "hometown" in data:
        ensure_valid(
            "hometown",
            validate_min_length(data["hometown"], MIN_ADDRESS_LENGTH, "Hometown"),
        )
        fields["hometown"] = data["hometown"].strip()
    if "national_id" in data:
        national_id = (data["national_id"] or "").strip()
        ensure_valid("national_id", validate_national_id(national_id))
        fields["national_id"] = national_id
    return fields


async def create_employee(
    store: EntityStore,
    audit: AuditRecorder,
    place_of_residence: str,
    hometown: str,
    national_id: str,
    actor: Optional[Actor],
    user_id: Optional[str] = None,
    candidate_id: Optional[str] = None,
) -> Employee:
    """
    Create an employee record.

    HR/Admin may create a record for any account or hired candidate; any
    other user may only create their own (``user_id`` defaults to theirs).

    Raises:
        UniqueConstraintViolation: If the national ID or account already has a record
    """
    if actor is None:
        raise Unauthorized("Authentication required to create employee records")
    if not actor.is_staff:
        if user_id not in (None, actor.id) or candidate_id is not None:
            raise Unauthorized("Employees may only create their own record")
        user_id = actor.id

    fields = _validated_fields(
        {
            "place_of_residence": place_of_residence,
            "hometown": hometown,
            "national_id": national_id,
        }
    )
    if user_id is None and candidate_id is None:
        raise ValidationFailed("user_id", "An employee record needs an account or a candidate")
    if user_id is not None:
        await store.get(User, user_id)
    if candidate_id is not None:
        await store.get(Candidate, candidate_id)

    employee = await store.insert(
        Employee, {"user_id": user_id, "candidate_id": candidate_id, **fields}
    )
    logger.info(f"Employee record {employee.id} created")

    await audit.record(
        AuditAction.EMPLOYEE_CREATED,
        "employee",
        employee.id,
        {"user_id": user_id, "candidate_id": candidate_id},
        actor_id=actor.id,
    )
    return employee


async def update_employee(
    store: EntityStore,
    audit: AuditRecorder,
    employee_id: str,
    changes: Dict[str, Any],
    actor: Optional[Actor],
) -> Employee:
    """Update an employee record. The owning user or HR/Admin."""
    if actor is None:
        raise Unauthorized("Authentication required to update employee records")

    employee = await store.get(Employee, employee_id)
    if not actor.is_staff and employee.user_id != actor.id:
        raise Unauthorized("Not allowed to update this employee record")

    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValidationFailed(sorted(unknown)[0], "Field cannot be changed")

    updated = await store.update(Employee, employee_id, _validated_fields(changes))
    await audit.record(
        AuditAction.EMPLOYEE_UPDATED,
        "employee",
        employee_id,
        {"fields": sorted(changes)},
        actor_id=actor.id,
    )
    return updated


async def get_employee_by_user(
    store: EntityStore,
    user_id: str,
    actor: Optional[Actor],
) -> Optional[Employee]:
    """The employee record owned by ``user_id``, if any."""
    if actor is None or (actor.id != user_id and not actor.is_staff):
        raise Unauthorized("Not allowed to view this employee record")
    records = await store.select(Employee, user_id=user_id, limit=1)
    return records[0] if records else None


async def list_employees(store: EntityStore, actor: Optional[Actor]) -> List[Employee]:
    """All employee records, newest first."""
    require_staff(actor, "list employees")
    return await store.select(Employee, order_by=["-created_at"])
