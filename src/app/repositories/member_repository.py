from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Member


class IMemberRepository(ABC):
    """Member repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Member]:
        """Get member by email address"""
        pass

    @abstractmethod
    async def get_by_id(self, member_id: UUID) -> Optional[Member]:
        """Get member by ID"""
        pass

    @abstractmethod
    async def create(self, member: Member) -> Member:
        """Create a new member"""
        pass

    @abstractmethod
    async def update(self, member: Member) -> Member:
        """Update existing member"""
        pass
