from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.admin_repository import IAdminRepository
from src.domain.entities import Admin


class AdminRepository(IAdminRepository):
    """Admin repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[Admin]:
        stmt = select(Admin).where(Admin.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, admin_id: UUID) -> Optional[Admin]:
        stmt = select(Admin).where(Admin.id == admin_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, admin: Admin) -> Admin:
        self.session.add(admin)
        await self.session.flush()
        await self.session.refresh(admin)
        return admin

    async def update(self, admin: Admin) -> Admin:
        self.session.add(admin)
        await self.session.flush()
        await self.session.refresh(admin)
        return admin
