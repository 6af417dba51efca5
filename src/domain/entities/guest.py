"""
Guest Entity

Credential-less visitor. Authenticates only through its session tokens.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow
from .enums import PrincipalStatus


class Guest(SQLModel, table=True):
    __tablename__ = "guests"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    nickname: Optional[str] = Field(default=None, max_length=64)

    status: PrincipalStatus = Field(default=PrincipalStatus.active)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    deleted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    def is_usable(self) -> bool:
        return self.status == PrincipalStatus.active and self.deleted_at is None
