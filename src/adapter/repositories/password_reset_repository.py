from datetime import datetime
from typing import List
from uuid import UUID

from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.password_reset_repository import IPasswordResetRepository
from src.domain.entities import PasswordReset


class PasswordResetRepository(IPasswordResetRepository):
    """PasswordReset repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, reset: PasswordReset) -> PasswordReset:
        """Create a new password reset request"""
        self.session.add(reset)
        await self.session.flush()
        await self.session.refresh(reset)
        return reset

    async def find_candidates(self, token_selector: str, now: datetime) -> List[PasswordReset]:
        stmt = (
            select(PasswordReset)
            .where(
                PasswordReset.token_selector == token_selector,
                PasswordReset.consumed_at.is_(None),
                PasswordReset.expires_at > now,
            )
            .order_by(PasswordReset.requested_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def consume(self, reset_id: UUID, now: datetime) -> bool:
        """Conditional update so two confirmations of one token cannot both win"""
        stmt = (
            update(PasswordReset)
            .where(PasswordReset.id == reset_id, PasswordReset.consumed_at.is_(None))
            .values(consumed_at=now, updated_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1
