from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.guest_repository import IGuestRepository
from src.domain.entities import Guest


class GuestRepository(IGuestRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, guest_id: UUID) -> Optional[Guest]:
        stmt = select(Guest).where(Guest.id == guest_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, guest: Guest) -> Guest:
        self.session.add(guest)
        await self.session.flush()
        await self.session.refresh(guest)
        return guest
