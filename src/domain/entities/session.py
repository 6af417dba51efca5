"""
Session Entity

One authenticated client context and the hash of its current refresh secret.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import PrincipalKind
from .session_owner import SessionOwner

_OWNER_COLUMNS = {
    PrincipalKind.admin: "admin_id",
    PrincipalKind.member: "member_id",
    PrincipalKind.guest: "guest_id",
}


class Session(SQLModel, table=True):
    """
    Session entity - shared by admins, members and guests.

    Business Rules:
    - At most one owner column is set (none for anonymous sessions)
    - Only bcrypt(refresh token) is stored; token_selector is the
      non-secret prefix used to find the row
    - Tokens rotate on each refresh; the previous token never matches again
    - Revoked or expired sessions are terminal
    - Rows are never deleted, only revoked
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    admin_id: Optional[UUID] = Field(default=None, foreign_key="admins.id", index=True)
    member_id: Optional[UUID] = Field(default=None, foreign_key="members.id", index=True)
    guest_id: Optional[UUID] = Field(default=None, foreign_key="guests.id", index=True)

    token_selector: str = Field(max_length=32, index=True)
    session_token_hash: str = Field(max_length=60)  # Bcrypt output

    # Client context captured at issue time
    ip: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)

    # Lifetime of the refresh window, preserved across rotations
    refresh_window_seconds: int

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_accessed_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))
    rotated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_reason: Optional[str] = Field(default=None, max_length=255)

    __table_args__ = (
        CheckConstraint(
            "(CASE WHEN admin_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN member_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN guest_id IS NULL THEN 0 ELSE 1 END) <= 1",
            name="ck_session_single_owner",
        ),
        Index("idx_session_expires_at", "expires_at"),
        Index("idx_session_revoked_at", "revoked_at"),
    )

    @property
    def owner(self) -> SessionOwner:
        for kind, column in _OWNER_COLUMNS.items():
            principal_id = getattr(self, column)
            if principal_id is not None:
                return SessionOwner(kind=kind, principal_id=principal_id)
        return SessionOwner.anonymous()

    def assign_owner(self, owner: SessionOwner) -> None:
        for kind, column in _OWNER_COLUMNS.items():
            setattr(self, column, owner.principal_id if owner.kind == kind else None)

    def is_active(self, now: datetime) -> bool:
        return self.revoked_at is None and self.expires_at > now
