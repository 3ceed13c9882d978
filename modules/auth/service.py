"""
Auth Module - Service Layer
=============================
Registration, password login, refresh-token rotation, logout, profile updates.
"""

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from common.exceptions import (
    DuplicateError, InvalidArgumentError, InvalidTokenError, UnauthenticatedError,
)
from common.helpers import normalize_email
from common.security import TokenService
from modules.user.models import User
from modules.user.service import user_service

logger = logging.getLogger("parushop.auth")


class AuthService:
    """Handles all account logic: register, login, token refresh and logout."""

    def register(
        self, db: Session, name: str, email: str, password: str,
        phone_number: Optional[str] = None,
    ) -> User:
        """
        Create a new account.

        Raises:
            InvalidArgumentError if a required field is blank
            DuplicateError if the email is already registered
        """
        if not all(v and v.strip() for v in (name, email, password)):
            raise InvalidArgumentError("Name, email and password are required")

        user = user_service.create(db, name=name, email=email, password=password, phone_number=phone_number)
        logger.info("User registered: id=%s", user.id)
        return user

    def login(self, db: Session, tokens: TokenService, email: str, password: str) -> Tuple[User, str, str]:
        """
        Check credentials and start a session.

        Returns:
            (user, access_token, refresh_token)

        Raises:
            UnauthenticatedError with the same message for unknown email and wrong password
        """
        if not email or not password:
            raise InvalidArgumentError("Email and password are required")

        user = user_service.find_by_email(db, email)
        if not user or not user.check_password(password):
            logger.info("Failed login attempt")
            raise UnauthenticatedError("Invalid email or password")

        access, refresh = self._issue_pair(db, tokens, user)
        logger.info("User logged in: id=%s", user.id)
        return user, access, refresh

    def refresh(self, db: Session, tokens: TokenService, incoming: Optional[str]) -> Tuple[User, str, str]:
        """
        Exchange a refresh token for a new access/refresh pair.
        The stored refresh token is overwritten, so the incoming one can't be used again.
        """
        if not incoming:
            raise UnauthenticatedError("Unauthorized request")

        try:
            payload = tokens.verify_refresh(incoming)
        except InvalidTokenError:
            raise UnauthenticatedError("Invalid refresh token")

        user = user_service.find_by_id(db, payload["id"])
        if not user:
            raise UnauthenticatedError("Invalid refresh token")

        if incoming != user.refresh_token:
            logger.warning("Stale refresh token presented for user %s", user.id)
            raise UnauthenticatedError("Refresh token is expired or used")

        access, refresh = self._issue_pair(db, tokens, user)
        logger.info("Tokens rotated for user %s", user.id)
        return user, access, refresh

    def logout(self, db: Session, user: User):
        """Revoke the stored refresh token."""
        user.refresh_token = None
        user_service.save(db, user)
        logger.info("User logged out: id=%s", user.id)

    def update_profile(
        self, db: Session, user: User,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone_number: Optional[str] = None,
        fields: Optional[set] = None,
    ) -> User:
        """
        Update profile fields. `fields` names the fields present in the request;
        at least one is required.
        """
        fields = fields or set()
        if not fields:
            raise InvalidArgumentError("At least one field is required")

        if "name" in fields:
            if not name or not name.strip():
                raise InvalidArgumentError("Name cannot be empty")
            user.name = name.strip()

        if "email" in fields:
            email = normalize_email(email)
            if not email:
                raise InvalidArgumentError("Email cannot be empty")
            if email != user.email and user_service.email_taken_by_other(db, email, user.id):
                raise DuplicateError("User with this email already exists")
            user.email = email

        if "phone_number" in fields:
            user.phone_number = (phone_number or "").strip() or None

        try:
            user_service.save(db, user)
        except IntegrityError:
            db.rollback()
            # Race condition: another request took this email
            raise DuplicateError("User with this email already exists")
        return user

    # ==========================================
    # Private helpers
    # ==========================================

    def _issue_pair(self, db: Session, tokens: TokenService, user: User) -> Tuple[str, str]:
        access = tokens.issue_access_token(user)
        refresh = tokens.issue_refresh_token(user)
        user.refresh_token = refresh
        user_service.save(db, user)
        return access, refresh


# Singleton instance
auth_service = AuthService()
