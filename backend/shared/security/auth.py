"""
Staff JWT verification (HS256, PyJWT).

Tokens come from the platform's auth service; this API only verifies them.
The ordering API reads these claims:

    sub            staff user id, an integer encoded as a string
    tenant_id      restaurant the staff member works for
    roles          list of role names (ADMIN, MANAGER, KITCHEN, WAITER)
    is_superadmin  optional, grants every tenant
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Iterable

import jwt
from fastapi import Header

from shared.config.constants import ErrorMessages
from shared.config.settings import JWT_AUDIENCE, JWT_ISSUER, JWT_SECRET, settings
from shared.utils.exceptions import InsufficientRoleError, UnauthorizedError

ALGORITHM = "HS256"


def sign_jwt(payload: dict[str, Any], ttl_seconds: int | None = None) -> str:
    """
    Mint a staff token. Production tokens are issued elsewhere; the CLI
    and the tests use this.
    """
    issued_at = int(time.time())
    lifetime = ttl_seconds if ttl_seconds is not None else settings.jwt_access_token_expire_minutes * 60
    claims = dict(payload)
    claims.update(
        iss=JWT_ISSUER,
        aud=JWT_AUDIENCE,
        iat=issued_at,
        exp=issued_at + lifetime,
        jti=str(uuid.uuid4()),
    )
    return jwt.encode(claims, JWT_SECRET, algorithm=ALGORITHM)


def _check_claims(claims: dict[str, Any]) -> None:
    sub = claims.get("sub")
    if sub is None:
        raise UnauthorizedError("Token inválido: falta el sujeto")
    if not str(sub).isdigit():
        raise UnauthorizedError("Token inválido: sujeto mal formado")

    tenant_id = claims.get("tenant_id")
    if tenant_id is not None and (isinstance(tenant_id, bool) or not isinstance(tenant_id, int)):
        raise UnauthorizedError("Token inválido: tenant_id mal formado")

    if not isinstance(claims.get("roles", []), list):
        raise UnauthorizedError("Token inválido: roles mal formados")


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Decode a staff token and check the claims this API relies on.

    Raises:
        UnauthorizedError: Bad signature, wrong issuer or audience, expired,
            or malformed claims.
    """
    try:
        claims = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[ALGORITHM],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError(ErrorMessages.TOKEN_EXPIRED)
    except jwt.InvalidTokenError as e:
        # The PyJWT reason goes to the log only
        raise UnauthorizedError(ErrorMessages.INVALID_TOKEN, error=str(e))

    _check_claims(claims)
    return claims


def get_bearer_token(authorization: str | None) -> str:
    scheme, _, token = (authorization or "").partition(" ")
    if not authorization:
        raise UnauthorizedError(ErrorMessages.NOT_AUTHENTICATED)
    if scheme != "Bearer":
        raise UnauthorizedError("Formato de Authorization inválido. Esperado: Bearer <token>")
    if not token.strip():
        raise UnauthorizedError(ErrorMessages.NOT_AUTHENTICATED)
    return token.strip()


def current_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any]:
    """FastAPI dependency returning the verified claims of the caller."""
    return verify_jwt(get_bearer_token(authorization))


def require_roles(claims: dict[str, Any], allowed: Iterable[str]) -> None:
    """
    Raises:
        InsufficientRoleError: The token holds none of the allowed roles.
    """
    allowed = frozenset(allowed)
    if allowed.isdisjoint(claims.get("roles", [])):
        raise InsufficientRoleError(sorted(allowed), user_id=claims.get("sub"))
