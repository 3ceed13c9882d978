"""
User Module - Service Layer (Credential Store)
===============================================
Lookup, creation and persistence of user records.
Passwords are hashed before anything reaches the database.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session, defer
from sqlalchemy.exc import IntegrityError

from common.exceptions import DuplicateError
from common.helpers import normalize_email
from modules.user.models import User

logger = logging.getLogger("parushop.user")


class UserService:

    def find_by_id(self, db: Session, user_id: int, with_secrets: bool = True) -> Optional[User]:
        """
        Load a user by id. With with_secrets=False the password hash and
        refresh token columns are deferred (not loaded).
        """
        query = db.query(User)
        if not with_secrets:
            query = query.options(defer(User.password_hash), defer(User.refresh_token))
        return query.filter(User.id == user_id).first()

    def find_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == normalize_email(email)).first()

    def create(
        self, db: Session, name: str, email: str, password: str,
        phone_number: Optional[str] = None,
    ) -> User:
        """Create a user. Raises DuplicateError if the email is taken."""
        email = normalize_email(email)
        if self.find_by_email(db, email):
            raise DuplicateError("User with this email already exists")

        user = User(
            name=name.strip(),
            email=email,
            phone_number=(phone_number or "").strip() or None,
        )
        user.set_password(password)
        db.add(user)
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            # Race condition: another request registered this email
            raise DuplicateError("User with this email already exists")
        db.refresh(user)
        return user

    def save(self, db: Session, user: User) -> User:
        db.add(user)
        db.flush()
        return user

    def email_taken_by_other(self, db: Session, email: str, user_id: int) -> bool:
        return db.query(User.id).filter(
            User.email == normalize_email(email),
            User.id != user_id,
        ).first() is not None


def serialize_user(user: User) -> dict:
    """Public view of a user: never includes the password hash or refresh token."""
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "phoneNumber": user.phone_number,
        "createdAt": user.created_at,
        "updatedAt": user.updated_at,
    }


# Singleton instance
user_service = UserService()
