"""
Authentication middleware for tokens issued by the hosted auth provider.

This middleware:
1. Validates the JWT from the Authorization header
2. Loads the user row through the entity store
3. Rejects unknown or disabled accounts
4. Puts an ``Actor`` into the request scope

Requests without a token continue anonymously; routes that need a user
depend on ``require_actor``.
"""

import logging
from typing import Callable, Optional
from datetime import datetime, timezone
import jwt
from fastapi import Request, status
from fastapi.responses import JSONResponse

from core.exceptions import NotFound, StoreUnavailable
from core.security import Actor, verify_jwt_token
from database.models.users import User
from database.store import EntityStore

logger = logging.getLogger(__name__)

# Paths where the token is never inspected
PUBLIC_PREFIXES = ["/health", "/ready", "/docs", "/redoc", "/openapi"]


class AuthenticationError(Exception):
    """Base exception for authentication errors."""


class TokenExpiredError(AuthenticationError):
    """Raised when JWT token has expired."""


class TokenInvalidError(AuthenticationError):
    """Raised when JWT token is invalid."""


class UserNotFoundError(AuthenticationError):
    """Raised when the token subject has no user row."""


class UserInactiveError(AuthenticationError):
    """Raised when the user account is disabled."""


class AuthenticationMiddleware:
    """
    Raw ASGI middleware resolving the acting user.

    The store is looked up on ``app.state.store`` at request time so the
    middleware can be installed before the lifespan has built it.
    """

    def __init__(
        self,
        app: Callable,
        jwt_secret: str,
        jwt_algorithm: str = "HS256",
        audience: Optional[str] = None,
    ):
        self.app = app
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm
        self.audience = audience

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        scope["actor"] = None

        if self._is_public_endpoint(request.url.path):
            await self.app(scope, receive, send)
            return

        token = self._extract_token(request)
        if token is None:
            await self.app(scope, receive, send)
            return

        try:
            try:
                payload = verify_jwt_token(
                    token, self.jwt_secret, self.jwt_algorithm, audience=self.audience
                )
            except jwt.ExpiredSignatureError:
                raise TokenExpiredError("Token has expired")
            except jwt.InvalidTokenError as e:
                raise TokenInvalidError(f"Invalid token: {str(e)}")

            user = await self._load_user(scope, payload["sub"])
        except TokenExpiredError:
            await self._send_error_response(
                scope, receive, send,
                status_code=status.HTTP_401_UNAUTHORIZED,
                code="TOKEN_EXPIRED",
                message="Authentication token has expired. Please sign in again.",
            )
            return
        except TokenInvalidError as e:
            logger.warning(f"Invalid token: {str(e)}")
            await self._send_error_response(
                scope, receive, send,
                status_code=status.HTTP_401_UNAUTHORIZED,
                code="TOKEN_INVALID",
                message="Invalid authentication token.",
            )
            return
        except UserNotFoundError:
            logger.warning("User not found for valid token")
            await self._send_error_response(
                scope, receive, send,
                status_code=status.HTTP_401_UNAUTHORIZED,
                code="USER_NOT_FOUND",
                message="User account not found.",
            )
            return
        except UserInactiveError:
            logger.warning("Disabled user attempted access")
            await self._send_error_response(
                scope, receive, send,
                status_code=status.HTTP_403_FORBIDDEN,
                code="USER_INACTIVE",
                message="User account is disabled. Please contact HR.",
            )
            return
        except StoreUnavailable as e:
            await self._send_error_response(
                scope, receive, send,
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                code=e.code,
                message=e.message,
            )
            return

        scope["user"] = user
        scope["actor"] = Actor(id=user.id, role=user.role)
        await self.app(scope, receive, send)

    def _is_public_endpoint(self, path: str) -> bool:
        return path == "/" or any(path.startswith(prefix) for prefix in PUBLIC_PREFIXES)

    def _extract_token(self, request: Request) -> Optional[str]:
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            return auth_header[7:]  # Remove "Bearer " prefix
        return None

    async def _load_user(self, scope: dict, user_id: str) -> User:
        store: EntityStore = scope["app"].state.store
        try:
            user = await store.get(User, user_id)
        except NotFound:
            raise UserNotFoundError(f"User {user_id} not found")
        if not user.is_active:
            raise UserInactiveError(f"User {user_id} is disabled")
        return user

    async def _send_error_response(
        self,
        scope: dict,
        receive: Callable,
        send: Callable,
        status_code: int,
        code: str,
        message: str,
    ) -> None:
        error_response = {
            "error": {
                "code": code,
                "message": message,
                "path": scope.get("path", "unknown"),
                "method": scope.get("method", "unknown"),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        }
        response = JSONResponse(
            status_code=status_code,
            content=error_response,
            headers={"WWW-Authenticate": "Bearer"} if status_code == 401 else None,
        )
        await response(scope, receive, send)


def get_current_actor(request: Request) -> Optional[Actor]:
    """The actor resolved by ``AuthenticationMiddleware``, or None."""
    return request.scope.get("actor")
