"""Audit recording and audit log queries."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional
import logging

from core.security import Actor, require_role
from database.models.audit import AuditLog
from database.models.users import UserRole
from database.store import EntityStore

logger = logging.getLogger(__name__)


class AuditRecorder(ABC):
    """Receives one structured event for every mutating action."""

    @abstractmethod
    async def record(
        self,
        action: str,
        target_type: str,
        target_id: str,
        payload: Optional[Dict[str, Any]] = None,
        actor_id: Optional[str] = None,
    ) -> None:
        """Record an event. Implementations must never raise."""


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(v) for v in value]
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


class StoreAuditRecorder(AuditRecorder):
    """
    Writes audit events to the ``audit_logs`` table through the entity store.

    Failures are logged and swallowed: an audit problem never fails the
    operation being audited. Callers record after their transaction commits
    so a failed audit insert cannot poison the primary write.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    async def record(
        self,
        action: str,
        target_type: str,
        target_id: str,
        payload: Optional[Dict[str, Any]] = None,
        actor_id: Optional[str] = None,
    ) -> None:
        action_name = action.value if isinstance(action, Enum) else action
        try:
            await self.store.insert(
                AuditLog,
                {
                    "actor_id": actor_id,
                    "action": action_name,
                    "target_type": target_type,
                    "target_id": target_id,
                    "payload": _jsonable(payload or {}),
                },
            )
        except Exception:
            logger.error(
                f"Failed to record audit event {action_name} for {target_type} {target_id}",
                exc_info=True,
            )


async def list_audit_logs(
    store: EntityStore,
    actor: Optional[Actor],
    target_type: Optional[str] = None,
    target_id: Optional[str] = None,
    limit: int = 100,
) -> List[AuditLog]:
    """List audit events, newest first. Admin only."""
    require_role(actor, {UserRole.ADMIN}, "read audit logs")

    filters: Dict[str, Any] = {}
    if target_type:
        filters["target_type"] = target_type
    if target_id:
        filters["target_id"] = target_id
    return await store.select(AuditLog, order_by=["-created_at"], limit=limit, **filters)
