"""
LoginAttempt Entity

Record of every credential login, successful or not.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import LoginFailureReason, PrincipalKind


class LoginAttempt(SQLModel, table=True):
    __tablename__ = "login_attempts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    principal_kind: PrincipalKind
    principal_id: Optional[UUID] = Field(default=None, index=True)
    email: str = Field(max_length=255)

    success: bool
    failure_reason: Optional[LoginFailureReason] = None

    ip: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)

    occurred_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_login_attempt_email", "email"),)
