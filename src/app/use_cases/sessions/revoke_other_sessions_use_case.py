"""
Revoke Other Sessions Use Case

Logs the caller out everywhere except the current session.
"""

from typing import Optional

from src.app.repositories.session_repository import SessionFilter
from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_lifecycle import AuthContext, SessionLifecycleEngine
from src.app.services.session_policy import SessionPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent
from src.libs.result import Result, Return
from .dtos import RevokeOthersResponse

DEFAULT_REASON = "revoke_others"


class RevokeOtherSessionsUseCase:
    """
    Use case for "log out everywhere else".

    Business Rules:
    - The session bound to the caller's access token must be live, and is
      kept unless include_current is set
    - Optional ip / user_agent / issued_before / expires_before criteria narrow
      the sessions that are revoked
    - Only the caller's own sessions are affected
    - Idempotent: with nothing left to revoke the call succeeds with count 0
    """

    def __init__(self, uow: UnitOfWork, hasher: ISecretHasher, policy: SessionPolicy):
        self.uow = uow
        self.hasher = hasher
        self.policy = policy

    async def execute(
        self,
        auth: AuthContext,
        reason: Optional[str] = None,
        criteria: Optional[SessionFilter] = None,
        include_current: bool = False,
    ) -> Result[RevokeOthersResponse]:
        reason = reason or DEFAULT_REASON
        async with self.uow:
            engine = SessionLifecycleEngine(self.uow, self.hasher, self.policy)
            result = await engine.revoke_others(
                auth.owner,
                auth.session_id,
                revoked_by=auth.role.value,
                reason=reason,
                criteria=criteria,
                include_current=include_current,
            )
            if result.is_err():
                return result

            outcome = result.value
            await self.uow.audit_events.create(
                AuditEvent(
                    actor_kind=auth.role,
                    actor_id=auth.principal_id,
                    action="revoke_other_sessions",
                    event_metadata={
                        "current_session_id": str(auth.session_id),
                        "include_current": include_current,
                        "revoked_count": outcome.revoked_count,
                        "reason": reason,
                    },
                )
            )
            await self.uow.commit()

            return Return.ok(
                RevokeOthersResponse(
                    success=True,
                    revoked_sessions_count=outcome.revoked_count,
                    revoked_session_ids=[str(sid) for sid in outcome.revoked_session_ids],
                    message=f"Successfully revoked {outcome.revoked_count} session(s)",
                )
            )
