"""
AuditEvent Entity

Immutable log of all authentication events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.base import utcnow
from .enums import PrincipalKind


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of all authentication events.

    Business Rules:
    - Immutable (never updated or deleted)
    - actor_id nullable for anonymous sessions
    - Metadata stores additional context (session id, counts, reason)
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    actor_kind: PrincipalKind
    actor_id: Optional[UUID] = Field(default=None, index=True)

    action: str = Field(max_length=100)  # e.g., "login", "token_refresh"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_actor_action", "actor_kind", "action"),
    )
