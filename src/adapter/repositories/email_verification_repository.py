from datetime import datetime
from typing import List
from uuid import UUID

from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.email_verification_repository import IEmailVerificationRepository
from src.domain.entities import EmailVerification


class EmailVerificationRepository(IEmailVerificationRepository):
    """EmailVerification repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, verification: EmailVerification) -> EmailVerification:
        self.session.add(verification)
        await self.session.flush()
        await self.session.refresh(verification)
        return verification

    async def find_candidates(
        self, token_selector: str, now: datetime
    ) -> List[EmailVerification]:
        stmt = (
            select(EmailVerification)
            .where(
                EmailVerification.token_selector == token_selector,
                EmailVerification.consumed_at.is_(None),
                EmailVerification.expires_at > now,
            )
            .order_by(EmailVerification.sent_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def consume(self, verification_id: UUID, now: datetime) -> bool:
        stmt = (
            update(EmailVerification)
            .where(
                EmailVerification.id == verification_id,
                EmailVerification.consumed_at.is_(None),
            )
            .values(consumed_at=now, updated_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1
