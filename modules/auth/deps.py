"""
Auth Module - Dependencies
===========================
FastAPI dependencies for user authentication.
These are injected into route handlers via Depends().

The access token is read from the `accessToken` cookie, falling back to an
`Authorization: Bearer <token>` header. Every failure after a token is found
(bad signature, expired, malformed, deleted user) produces the same 401 so the
caller can't tell which case applied.
"""

import logging
from typing import Optional

from fastapi import Request, Depends
from sqlalchemy.orm import Session

from config.context import AppContext, get_context
from config.database import get_db
from common.exceptions import InvalidTokenError, UnauthenticatedError
from modules.user.models import User
from modules.user.service import user_service

logger = logging.getLogger("parushop.auth")

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

NO_TOKEN = "No token provided"
INVALID_ACCESS_TOKEN = "Invalid Access Token"


def extract_access_token(request: Request) -> Optional[str]:
    """Cookie first, then Bearer header. Returns None if neither carries a token."""
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token

    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def require_login(
    request: Request,
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
) -> User:
    """Require an authenticated user. Raises 401 if there is no valid access token."""
    token = extract_access_token(request)
    if not token:
        raise UnauthenticatedError(NO_TOKEN)

    try:
        payload = ctx.tokens.verify_access(token)
    except InvalidTokenError as e:
        logger.debug("Access token rejected: %s", e)
        raise UnauthenticatedError(INVALID_ACCESS_TOKEN)

    user = user_service.find_by_id(db, payload["id"], with_secrets=False)
    if not user:
        raise UnauthenticatedError(INVALID_ACCESS_TOKEN)

    request.state.user = user
    return user
