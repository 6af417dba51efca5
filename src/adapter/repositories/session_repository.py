from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.session_repository import ISessionRepository, SessionFilter
from src.domain.entities import PrincipalKind, Session, SessionOwner


def _owner_clause(owner: SessionOwner):
    if owner.kind == PrincipalKind.admin:
        return Session.admin_id == owner.principal_id
    if owner.kind == PrincipalKind.member:
        return Session.member_id == owner.principal_id
    if owner.kind == PrincipalKind.guest:
        return Session.guest_id == owner.principal_id
    # Anonymous sessions share no owner, so they are never grouped
    raise ValueError("anonymous sessions cannot be looked up by owner")


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, session_obj: Session) -> Session:
        """Create a new session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        stmt = select(Session).where(Session.id == session_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_candidates(self, token_selector: str, now: datetime) -> List[Session]:
        """
        Get live sessions whose stored selector matches.

        The selector is not secret, it only narrows the rows whose bcrypt hash
        has to be checked. Revoked and expired sessions are filtered here so a
        stale token can never reach hash verification.
        """
        stmt = (
            select(Session)
            .where(
                Session.token_selector == token_selector,
                Session.revoked_at.is_(None),
                Session.expires_at > now,
            )
            .order_by(Session.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def rotate_token(
        self,
        session_id: UUID,
        expected_hash: str,
        token_selector: str,
        token_hash: str,
        now: datetime,
        expires_at: datetime,
    ) -> bool:
        """Compare-and-swap on the stored hash so only one rotation wins"""
        stmt = (
            update(Session)
            .where(
                Session.id == session_id,
                Session.session_token_hash == expected_hash,
                Session.revoked_at.is_(None),
            )
            .values(
                token_selector=token_selector,
                session_token_hash=token_hash,
                last_accessed_at=now,
                rotated_at=now,
                updated_at=now,
                expires_at=expires_at,
            )
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def mark_revoked(
        self, session_id: UUID, now: datetime, reason: Optional[str]
    ) -> bool:
        """Revoke a specific session by ID"""
        stmt = (
            update(Session)
            .where(Session.id == session_id, Session.revoked_at.is_(None))
            .values(revoked_at=now, revoked_reason=reason, updated_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def list_by_owner(
        self,
        owner: SessionOwner,
        now: datetime,
        active_only: bool = True,
        criteria: Optional[SessionFilter] = None,
    ) -> List[Session]:
        stmt = select(Session).where(_owner_clause(owner))
        if active_only:
            stmt = stmt.where(Session.revoked_at.is_(None), Session.expires_at > now)
        if criteria is not None:
            if criteria.ip is not None:
                stmt = stmt.where(Session.ip == criteria.ip)
            if criteria.user_agent is not None:
                stmt = stmt.where(Session.user_agent.contains(criteria.user_agent))
            if criteria.issued_before is not None:
                stmt = stmt.where(Session.created_at < criteria.issued_before)
            if criteria.expires_before is not None:
                stmt = stmt.where(Session.expires_at < criteria.expires_before)
        stmt = stmt.order_by(Session.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_latest_by_owner(self, owner: SessionOwner) -> Optional[Session]:
        stmt = (
            select(Session)
            .where(_owner_clause(owner))
            .order_by(Session.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
