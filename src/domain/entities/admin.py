"""
Admin Entity

Administrative principal with email/password credentials.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow
from .enums import PrincipalStatus


class Admin(SQLModel, table=True):
    """
    Admin entity - operator of the Todo service.

    Business Rules:
    - Email must be unique across admins
    - Password stored as bcrypt hash
    - Only status=active and not soft-deleted admins can authenticate
    """

    __tablename__ = "admins"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)

    status: PrincipalStatus = Field(default=PrincipalStatus.active)
    email_verified: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    deleted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    def is_usable(self) -> bool:
        return self.status == PrincipalStatus.active and self.deleted_at is None
