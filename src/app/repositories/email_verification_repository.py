from abc import ABC, abstractmethod
from datetime import datetime
from typing import List
from uuid import UUID

from src.domain.entities import EmailVerification


class IEmailVerificationRepository(ABC):
    """EmailVerification repository interface - application layer"""

    @abstractmethod
    async def create(self, verification: EmailVerification) -> EmailVerification:
        """Create a new email verification"""
        pass

    @abstractmethod
    async def find_candidates(
        self, token_selector: str, now: datetime
    ) -> List[EmailVerification]:
        """Get unconsumed, unexpired verifications whose selector matches"""
        pass

    @abstractmethod
    async def consume(self, verification_id: UUID, now: datetime) -> bool:
        """Mark a verification consumed. Returns True only if this call consumed it."""
        pass
