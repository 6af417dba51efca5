"""
EmailVerification Entity
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import PrincipalKind


class EmailVerification(SQLModel, table=True):
    """
    EmailVerification entity - proof-of-ownership token for an email.

    Business Rules:
    - Expires 24 hours after it is sent
    - Only bcrypt(token) is stored
    - Single-use; older rows stay behind for auditing
    """

    __tablename__ = "email_verifications"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    principal_kind: PrincipalKind
    principal_id: UUID = Field(index=True)
    target_email: str = Field(max_length=255)

    token_selector: str = Field(max_length=32, index=True)
    token_hash: str = Field(max_length=60)

    sent_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))
    consumed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_email_verification_expires_at", "expires_at"),)
