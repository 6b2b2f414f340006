"""
Security utilities: acting-user context, role checks, password hashing and
verification of tokens issued by the hosted auth provider.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

import bcrypt
import jwt

from core.exceptions import Unauthorized
from database.models.users import UserRole

logger = logging.getLogger(__name__)

STAFF_ROLES = frozenset({UserRole.ADMIN, UserRole.HR})
INTERVIEWER_ROLES = frozenset({UserRole.ADMIN, UserRole.HR, UserRole.EMPLOYEE})


@dataclass(frozen=True)
class Actor:
    """The authenticated user performing an operation."""

    id: str
    role: UserRole

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def require_role(actor: Optional[Actor], roles: Iterable[UserRole], action: str) -> Actor:
    """
    Ensure an actor is present and holds one of ``roles``.

    Args:
        actor: Acting user, or None for anonymous callers
        roles: Roles allowed to perform the action
        action: Human-readable action name used in the error message

    Returns:
        The actor, for chaining

    Raises:
        Unauthorized: If the actor is anonymous or lacks the role
    """
    allowed = frozenset(roles)
    if actor is None:
        raise Unauthorized(f"Authentication required to {action}")
    if actor.role not in allowed:
        logger.warning(
            f"Actor {actor.id} with role {actor.role.value} denied: {action}"
        )
        raise Unauthorized(f"Role {actor.role.value} may not {action}")
    return actor


def require_staff(actor: Optional[Actor], action: str) -> Actor:
    """Ensure the actor is HR or ADMIN."""
    return require_role(actor, STAFF_ROLES, action)


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def verify_jwt_token(
    token: str,
    secret: str,
    algorithm: str = "HS256",
    audience: Optional[str] = None,
) -> dict[str, Any]:
    """
    Decode and verify a JWT.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the token is otherwise invalid
    """
    options = {"require": ["sub", "exp"], "verify_aud": audience is not None}
    return jwt.decode(
        token,
        secret,
        algorithms=[algorithm],
        audience=audience,
        options=options,
    )
