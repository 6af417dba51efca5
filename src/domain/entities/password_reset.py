"""
PasswordReset Entity

One-time password reset requests for admins and members.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import PrincipalKind


class PasswordReset(SQLModel, table=True):
    """
    PasswordReset entity - a reset request and its token.

    Business Rules:
    - Expires 30 minutes after the request
    - Only bcrypt(token) is stored; token_selector finds the row
    - A row is written even for unknown emails (principal_id is then None),
      so requests never reveal whether an account exists
    - Single-use: consumed_at is set when the new password is applied
    """

    __tablename__ = "password_resets"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    principal_kind: PrincipalKind
    principal_id: Optional[UUID] = Field(default=None, index=True)
    email: str = Field(max_length=255)

    token_selector: str = Field(max_length=32, index=True)
    token_hash: str = Field(max_length=60)  # Bcrypt output

    # Timestamps
    requested_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))
    consumed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_password_reset_expires_at", "expires_at"),)

    def is_pending(self, now: datetime) -> bool:
        return self.consumed_at is None and self.expires_at > now
