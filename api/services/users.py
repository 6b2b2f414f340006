"""User account service functions."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union
import logging

from core.exceptions import Unauthorized, ValidationFailed
from core.security import Actor, hash_password, require_role, require_staff
from core.utils.credentials import generate_password, generate_username
from core.utils.validators import (
    ensure_valid,
    validate_email,
    validate_full_name,
    validate_phone,
)
from database.models.audit import AuditAction
from database.models.users import User, UserRole, UserStatus
from database.store import EntityStore
from api.services.audit import AuditRecorder

logger = logging.getLogger(__name__)

# Fields an account owner may change on their own account
SELF_EDITABLE_FIELDS = {"phone", "full_name"}
ADMIN_EDITABLE_FIELDS = {"phone", "full_name", "email", "role", "status"}


@dataclass
class ProvisionedUser:
    """A newly created account and its one-time plain password."""

    user: User
    password: str


def _parse_role(role: Union[UserRole, str]) -> UserRole:
    try:
        return UserRole(role.value if isinstance(role, UserRole) else str(role).upper())
    except ValueError:
        raise ValidationFailed("role", f"Unknown role: {role}")


def _parse_status(status: Union[UserStatus, str]) -> UserStatus:
    try:
        return UserStatus(status.value if isinstance(status, UserStatus) else str(status).upper())
    except ValueError:
        raise ValidationFailed("status", f"Unknown status: {status}")


async def create_user(
    store: EntityStore,
    audit: AuditRecorder,
    full_name: str,
    email: str,
    phone: str,
    role: Union[UserRole, str],
    actor: Optional[Actor],
) -> ProvisionedUser:
    """
    Provision a staff account with a generated username and password.

    The plain password is returned once for the administrator to hand over;
    only its bcrypt hash is stored.

    Raises:
        Unauthorized: If the actor is not HR/Admin, or HR creates an ADMIN
        ValidationFailed: If a field is malformed
        UniqueConstraintViolation: If the email (or username) is taken
    """
    require_staff(actor, "create user accounts")
    parsed_role = _parse_role(role)
    if parsed_role == UserRole.ADMIN and not actor.is_admin:
        raise Unauthorized("Only administrators may create administrator accounts")

    ensure_valid("full_name", validate_full_name(full_name))
    normalized_email = ensure_valid("email", validate_email(email))
    ensure_valid("phone", validate_phone(phone))

    existing = [u.username for u in await store.select(User)]
    username = generate_username(full_name, existing)
    password = generate_password()

    user = await store.insert(
        User,
        {
            "username": username,
            "email": normalized_email,
            "phone": phone.strip(),
            "full_name": full_name.strip(),
            "role": parsed_role,
            "status": UserStatus.ACTIVE,
            "password_hash": hash_password(password),
        },
    )
    logger.info(f"User {user.id} created with username {username}")

    await audit.record(
        AuditAction.USER_CREATED,
        "user",
        user.id,
        {"username": username, "role": parsed_role},
        actor_id=actor.id,
    )
    return ProvisionedUser(user=user, password=password)


async def get_user(store: EntityStore, user_id: str, actor: Optional[Actor]) -> User:
    """Get a user. Staff, or the user themself."""
    if actor is None or (actor.id != user_id and not actor.is_staff):
        raise Unauthorized("Not allowed to view this user")
    return await store.get(User, user_id)


async def list_users(
    store: EntityStore,
    actor: Optional[Actor],
    role: Optional[Union[UserRole, str]] = None,
    status: Optional[Union[UserStatus, str]] = None,
) -> List[User]:
    """List user accounts, newest first."""
    require_staff(actor, "list users")

    filters: Dict[str, Any] = {}
    if role:
        filters["role"] = _parse_role(role)
    if status:
        filters["status"] = _parse_status(status)
    return await store.select(User, order_by=["-created_at"], **filters)


async def update_user(
    store: EntityStore,
    audit: AuditRecorder,
    user_id: str,
    changes: Dict[str, Any],
    actor: Optional[Actor],
) -> User:
    """
    Update account fields. Administrators may change any editable field;
    other users may change their own phone and name.
    """
    if actor is None:
        raise Unauthorized("Authentication required to update users")

    allowed = ADMIN_EDITABLE_FIELDS if actor.is_admin else (
        SELF_EDITABLE_FIELDS if actor.id == user_id else set()
    )
    if not allowed:
        raise Unauthorized("Not allowed to update this user")
    forbidden = set(changes) - allowed
    if forbidden:
        raise Unauthorized(f"Not allowed to change: {', '.join(sorted(forbidden))}")

    patch: Dict[str, Any] = {}
    if "full_name" in changes:
        ensure_valid("full_name", validate_full_name(changes["full_name"]))
        patch["full_name"] = changes["full_name"].strip()
    if "email" in changes:
        patch["email"] = ensure_valid("email", validate_email(changes["email"]))
    if "phone" in changes:
        ensure_valid("phone", validate_phone(changes["phone"]))
        patch["phone"] = changes["phone"].strip()
    if "role" in changes:
        patch["role"] = _parse_role(changes["role"])
    if "status" in changes:
        if actor.id == user_id:
            raise ValidationFailed("status", "Administrators cannot change their own status")
        patch["status"] = _parse_status(changes["status"])

    user = await store.update(User, user_id, patch)
    await audit.record(
        AuditAction.USER_UPDATED,
        "user",
        user_id,
        {"fields": sorted(patch)},
        actor_id=actor.id,
    )
    return user


async def set_user_status(
    store: EntityStore,
    audit: AuditRecorder,
    user_id: str,
    status: Union[UserStatus, str],
    actor: Optional[Actor],
) -> User:
    """Enable or disable an account. Admin only; accounts are never hard-deleted."""
    require_role(actor, {UserRole.ADMIN}, "change account status")
    if actor.id == user_id:
        raise ValidationFailed("status", "Administrators cannot change their own status")
    return await update_user(store, audit, user_id, {"status": status}, actor)
