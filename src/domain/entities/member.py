"""
Member Entity

Regular Todo user with email/password credentials.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import PrincipalStatus


class Member(SQLModel, table=True):
    """
    Member entity - a person who owns todos.

    Business Rules:
    - Email must be unique across members
    - Password stored as bcrypt hash (cost factor from config, 12 by default)
    - Suspended, deleted or soft-deleted members cannot authenticate,
      even with the right password
    """

    __tablename__ = "members"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)

    status: PrincipalStatus = Field(default=PrincipalStatus.active)
    email_verified: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    deleted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_member_status", "status"),)

    def is_usable(self) -> bool:
        return self.status == PrincipalStatus.active and self.deleted_at is None
