"""Position service functions."""

from typing import Any, Dict, List, Optional
import logging

from core.exceptions import ValidationFailed
from core.security import Actor, require_role, require_staff
from core.utils.validators import ensure_valid, validate_min_length
from database.models.audit import AuditAction
from database.models.positions import Position
from database.models.users import UserRole
from database.store import EntityStore
from api.services.audit import AuditRecorder

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"title", "department", "description", "is_open"}


async def create_position(
    store: EntityStore,
    audit: AuditRecorder,
    title: str,
    department: str,
    description: str,
    actor: Optional[Actor],
    is_open: bool = True,
) -> Position:
    """Open a new position. Admin only."""
    require_role(actor, {UserRole.ADMIN}, "create positions")
    ensure_valid("title", validate_min_length(title, 2, "Title"))
    ensure_valid("department", validate_min_length(department, 2, "Department"))

    position = await store.insert(
        Position,
        {
            "title": title.strip(),
            "department": department.strip(),
            "description": (description or "").strip(),
            "is_open": is_open,
        },
    )
    await audit.record(
        AuditAction.POSITION_CREATED,
        "position",
        position.id,
        {"title": position.title, "is_open": is_open},
        actor_id=actor.id,
    )
    return position


async def update_position(
    store: EntityStore,
    audit: AuditRecorder,
    position_id: str,
    changes: Dict[str, Any],
    actor: Optional[Actor],
) -> Position:
    """Edit, open or close a position. Admin only."""
    require_role(actor, {UserRole.ADMIN}, "update positions")
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValidationFailed(sorted(unknown)[0], "Field cannot be changed")

    position = await store.update(Position, position_id, changes)
    await audit.record(
        AuditAction.POSITION_UPDATED,
        "position",
        position_id,
        {"changes": changes},
        actor_id=actor.id,
    )
    return position


async def list_open_positions(store: EntityStore) -> List[Position]:
    """Positions accepting applications. Public."""
    return await store.select(Position, order_by=["title"], is_open=True)


async def list_positions(store: EntityStore, actor: Optional[Actor]) -> List[Position]:
    """All positions, open or closed."""
    require_staff(actor, "list all positions")
    return await store.select(Position, order_by=["-created_at"])
