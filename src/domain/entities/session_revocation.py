"""
SessionRevocation Entity

Read-model of revoked sessions, one row per session.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow


class SessionRevocation(SQLModel, table=True):
    """
    SessionRevocation entity - upserted whenever a session is revoked.

    Business Rules:
    - Unique per session_id
    - revoked_by is the role of the actor (admin/member/guest) or "system"
    """

    __tablename__ = "session_revocations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    session_id: UUID = Field(foreign_key="sessions.id", unique=True, index=True)

    revoked_by: str = Field(max_length=32)
    reason: Optional[str] = Field(default=None, max_length=255)

    revoked_at: datetime = Field(sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
