from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Guest


class IGuestRepository(ABC):
    """Guest repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, guest_id: UUID) -> Optional[Guest]:
        pass

    @abstractmethod
    async def create(self, guest: Guest) -> Guest:
        pass
