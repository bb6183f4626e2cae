"""Bearer token authentication.

Tokens are issued by the account service and have the form
``<user_id>.<role>.<signature>``, where the signature is the hex
HMAC-SHA256 of ``<user_id>.<role>`` keyed by ``settings.auth_secret``.
"""

import hashlib
import hmac
from dataclasses import dataclass
from typing import Annotated

import structlog
from fastapi import Depends, Header, HTTPException, status

from storefront.infrastructure.config import settings

logger = structlog.get_logger()

ADMIN_ROLE = "admin"


@dataclass
class CurrentUser:
    """Authenticated caller."""

    id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def _signature(payload: str, secret: str) -> str:
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


def sign_token(user_id: str, role: str = "user", secret: str | None = None) -> str:
    """Issue a token for a user.

    Args:
        user_id: User identifier.
        role: User role, ``"admin"`` for catalog administrators.
        secret: Signing key. Defaults to ``settings.auth_secret``.

    Returns:
        Signed bearer token.
    """
    payload = f"{user_id}.{role}"
    return f"{payload}.{_signature(payload, secret or settings.auth_secret)}"


def verify_token(token: str, secret: str | None = None) -> CurrentUser | None:
    """Check a token's signature.

    Returns:
        The user the token was issued for, or None if it is invalid.
    """
    parts = token.rsplit(".", 2)
    if len(parts) != 3 or not parts[0] or not parts[1]:
        return None

    user_id, role, signature = parts
    expected = _signature(f"{user_id}.{role}", secret or settings.auth_secret)
    if not hmac.compare_digest(expected, signature):
        return None
    return CurrentUser(id=user_id, role=role)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error_code": "UNAUTHORIZED", "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_sign_in(
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentUser:
    """Resolve the signed-in user from the Authorization header.

    Raises:
        HTTPException: 401 if the header is missing or the token is invalid.
    """
    if not authorization:
        raise _unauthorized("Missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise _unauthorized("Invalid Authorization header format. Use 'Bearer <token>'")

    user = verify_token(parts[1])
    if user is None:
        logger.warning("Invalid bearer token")
        raise _unauthorized("Invalid token")
    return user


async def require_admin(
    user: Annotated[CurrentUser, Depends(require_sign_in)],
) -> CurrentUser:
    """Resolve the signed-in user and require the admin role.

    Raises:
        HTTPException: 403 if the user is not an admin.
    """
    if not user.is_admin:
        logger.warning("Admin access denied", user_id=user.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error_code": "FORBIDDEN", "message": "Admin access required"},
        )
    return user


SignedInUser = Annotated[CurrentUser, Depends(require_sign_in)]
AdminUser = Annotated[CurrentUser, Depends(require_admin)]
