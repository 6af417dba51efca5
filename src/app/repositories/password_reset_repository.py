from abc import ABC, abstractmethod
from datetime import datetime
from typing import List
from uuid import UUID

from src.domain.entities import PasswordReset


class IPasswordResetRepository(ABC):
    """PasswordReset repository interface - application layer"""

    @abstractmethod
    async def create(self, reset: PasswordReset) -> PasswordReset:
        """Create a new password reset request"""
        pass

    @abstractmethod
    async def find_candidates(self, token_selector: str, now: datetime) -> List[PasswordReset]:
        """Get unconsumed, unexpired requests whose selector matches"""
        pass

    @abstractmethod
    async def consume(self, reset_id: UUID, now: datetime) -> bool:
        """Mark a request consumed. Returns True only if this call consumed it."""
        pass
