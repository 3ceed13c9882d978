"""
ParuShop - Security Utilities
==============================
Password hashing, JWT access/refresh tokens, and auth cookie settings.

NOTE: Two-tier sessions. Access tokens are stateless and short-lived;
refresh tokens are long-lived, signed with a separate secret, and stored
on the user row so they can be revoked by overwriting.
"""

import logging
import secrets
from datetime import timedelta

from jose import jwt, JWTError
from passlib.context import CryptContext

from config.settings import BCRYPT_ROUNDS
from common.exceptions import InvalidTokenError
from common.helpers import now_utc

logger = logging.getLogger("parushop.security")


# ==========================================
# Passwords
# ==========================================

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    """One-way bcrypt hash. The plaintext is never stored."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


# ==========================================
# JWT Tokens
# ==========================================

class TokenService:
    """Issues and verifies access and refresh tokens using the secrets/expiries in Settings."""

    def __init__(self, settings):
        self.settings = settings

    def issue_access_token(self, user) -> str:
        payload = {"id": user.id, "email": user.email, "name": user.name}
        return self._sign(payload, self.settings.access_token_secret, self.settings.access_token_expiry)

    def issue_refresh_token(self, user) -> str:
        """Caller is responsible for persisting the token onto the user."""
        payload = {"id": user.id}
        return self._sign(payload, self.settings.refresh_token_secret, self.settings.refresh_token_expiry)

    def verify(self, token: str, secret: str) -> dict:
        """Decode and validate a token. Raises InvalidTokenError on bad signature, bad payload, or expiry."""
        if not token:
            raise InvalidTokenError("empty token")
        try:
            payload = jwt.decode(token, secret, algorithms=[self.settings.jwt_algorithm])
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e

        user_id = payload.get("id")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidTokenError("token payload has no user id")
        return payload

    def verify_access(self, token: str) -> dict:
        return self.verify(token, self.settings.access_token_secret)

    def verify_refresh(self, token: str) -> dict:
        return self.verify(token, self.settings.refresh_token_secret)

    def _sign(self, payload: dict, secret: str, expires_in: timedelta) -> str:
        to_encode = payload.copy()
        issued = now_utc()
        to_encode["iat"] = issued
        to_encode["exp"] = issued + expires_in
        # unique per token so a rotated refresh token never equals its predecessor
        to_encode["jti"] = secrets.token_hex(8)
        return jwt.encode(to_encode, secret, algorithm=self.settings.jwt_algorithm)


# ==========================================
# Cookie Helpers
# ==========================================

def get_cookie_kwargs(settings, max_age: timedelta) -> dict:
    """Standard cookie settings for auth tokens."""
    return dict(
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        max_age=int(max_age.total_seconds()),
    )
