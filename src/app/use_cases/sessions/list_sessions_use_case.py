"""
List Sessions Use Case

Shows the caller's own sessions so they can decide what to revoke.
"""

from src.app.services.session_lifecycle import AuthContext
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import isoformat_z, utcnow
from src.libs.result import Result, Return
from .dtos import SessionInfo, SessionListResponse


class ListSessionsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, auth: AuthContext, include_inactive: bool = False
    ) -> Result[SessionListResponse]:
        async with self.uow:
            if auth.owner.is_anonymous:
                # Anonymous sessions have no siblings to list
                session = await self.uow.sessions.get_by_id(auth.session_id)
                sessions = [session] if session is not None else []
            else:
                sessions = await self.uow.sessions.list_by_owner(
                    auth.owner, utcnow(), active_only=not include_inactive
                )

            return Return.ok(
                SessionListResponse(
                    sessions=[
                        SessionInfo(
                            id=str(s.id),
                            current=s.id == auth.session_id,
                            ip=s.ip,
                            user_agent=s.user_agent,
                            created_at=isoformat_z(s.created_at),
                            last_accessed_at=isoformat_z(s.last_accessed_at),
                            expires_at=isoformat_z(s.expires_at),
                            revoked_at=isoformat_z(s.revoked_at) if s.revoked_at else None,
                            revoked_reason=s.revoked_reason,
                        )
                        for s in sessions
                    ]
                )
            )
