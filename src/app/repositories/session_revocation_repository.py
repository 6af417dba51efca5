from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import SessionRevocation


class ISessionRevocationRepository(ABC):
    """SessionRevocation repository interface - application layer"""

    @abstractmethod
    async def get_by_session_id(self, session_id: UUID) -> Optional[SessionRevocation]:
        pass

    @abstractmethod
    async def upsert(
        self,
        session_id: UUID,
        revoked_at: datetime,
        revoked_by: str,
        reason: Optional[str],
    ) -> SessionRevocation:
        """Create or overwrite the revocation record of a session"""
        pass
