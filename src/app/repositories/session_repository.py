from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.domain.base import as_naive_utc
from src.domain.entities import Session, SessionOwner


class SessionFilter(BaseModel):
    """Optional narrowing of an owner's sessions; unset fields match everything"""

    ip: Optional[str] = None
    user_agent: Optional[str] = None  # substring match
    issued_before: Optional[datetime] = None
    expires_before: Optional[datetime] = None

    @field_validator("issued_before", "expires_before")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_naive_utc(value) if value is not None else None


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Create a new session"""
        pass

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def find_candidates(self, token_selector: str, now: datetime) -> List[Session]:
        """
        Get sessions that may hold the refresh token with this selector.

        Only non-revoked, non-expired sessions, most recently created first.
        """
        pass

    @abstractmethod
    async def rotate_token(
        self,
        session_id: UUID,
        expected_hash: str,
        token_selector: str,
        token_hash: str,
        now: datetime,
        expires_at: datetime,
    ) -> bool:
        """
        Replace the stored token hash if it still equals expected_hash and the
        session is not revoked. Returns False when another writer got there first.
        """
        pass

    @abstractmethod
    async def mark_revoked(
        self, session_id: UUID, now: datetime, reason: Optional[str]
    ) -> bool:
        """Revoke a session. Returns True only if this call revoked it."""
        pass

    @abstractmethod
    async def list_by_owner(
        self,
        owner: SessionOwner,
        now: datetime,
        active_only: bool = True,
        criteria: Optional[SessionFilter] = None,
    ) -> List[Session]:
        """Get sessions of an owner matching criteria, most recently created first"""
        pass

    @abstractmethod
    async def get_latest_by_owner(self, owner: SessionOwner) -> Optional[Session]:
        """Get the most recently created session of an owner, revoked or not"""
        pass
