"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract and
validate the current user from the request. The header must be exactly
``Authorization: Bearer <token>``; anything else is a 401.

The resolved user id lives on ``request.state`` and in structlog's
contextvars for this request only. Nothing is cached across requests.
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Depends, Header, Request

from todoapp.auth.jwt import TokenError, TokenService
from todoapp.errors import UnauthorizedError

logger = structlog.get_logger()


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated user making the request."""

    user_id: int


def get_token_service(request: Request) -> TokenService:
    """The app-wide TokenService built in create_app()."""
    return request.app.state.tokens


def parse_bearer(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise UnauthorizedError("empty auth header")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise UnauthorizedError("invalid auth header")
    if not parts[1]:
        raise UnauthorizedError("token is empty")
    return parts[1]


def authenticate(authorization: Optional[str], tokens: TokenService) -> int:
    """Resolve an Authorization header to a user id.

    Every token failure (bad signature, expiry, garbage) collapses to
    UnauthorizedError.
    """
    token = parse_bearer(authorization)
    try:
        return tokens.verify(token)
    except TokenError as e:
        logger.info("auth.token_rejected", reason=type(e).__name__)
        raise UnauthorizedError(str(e))


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> CurrentIdentity:
    """Extract the current user (required — 401 if missing or invalid)."""
    user_id = authenticate(authorization, tokens)
    request.state.user_id = user_id
    structlog.contextvars.bind_contextvars(user_id=user_id)
    return CurrentIdentity(user_id=user_id)
