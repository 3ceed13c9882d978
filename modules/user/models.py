"""
User Module - Models
=====================
Account record: identity, bcrypt password hash, and the stored refresh token.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from config.database import Base
from common.security import hash_password, verify_password


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # === Identity ===
    name = Column(String(120), nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)  # stored lowercase
    phone_number = Column(String(32), nullable=True)

    # === Auth ===
    password_hash = Column(String, nullable=False)
    refresh_token = Column(Text, nullable=True)

    # === Audit ===
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # === Relationships ===
    cart = relationship("Cart", back_populates="user", uselist=False, passive_deletes=True)

    __table_args__ = (
        Index("ix_users_created", "created_at"),
    )

    def set_password(self, password: str):
        self.password_hash = hash_password(password)

    def check_password(self, password: str) -> bool:
        return verify_password(password, self.password_hash)

    def __repr__(self):
        return f"<User {self.email} ({self.name})>"
