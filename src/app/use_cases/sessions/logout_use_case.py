"""
Logout Use Case

Revokes the session bound to the caller's access token.
"""

from typing import Optional

from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_lifecycle import AuthContext, SessionLifecycleEngine
from src.app.services.session_policy import SessionPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import isoformat_z
from src.domain.entities import AuditEvent
from src.libs.result import Result, Return
from .dtos import LogoutResponse


class LogoutUseCase:
    """
    Use case for self-logout.

    Business Rules:
    - Idempotent: logging out of an already revoked session succeeds and
      reports the original revocation
    - SESSION_NOT_FOUND only when the caller never had a session
    - Audit event is written only when a session was actually revoked
    """

    def __init__(self, uow: UnitOfWork, hasher: ISecretHasher, policy: SessionPolicy):
        self.uow = uow
        self.hasher = hasher
        self.policy = policy

    async def execute(
        self, auth: AuthContext, reason: Optional[str] = None
    ) -> Result[LogoutResponse]:
        async with self.uow:
            engine = SessionLifecycleEngine(self.uow, self.hasher, self.policy)
            result = await engine.revoke(
                auth.owner, auth.session_id, revoked_by=auth.role.value, reason=reason
            )
            if result.is_err():
                return result

            outcome = result.value
            if not outcome.already_revoked:
                await self.uow.audit_events.create(
                    AuditEvent(
                        actor_kind=auth.role,
                        actor_id=auth.principal_id,
                        action="logout",
                        event_metadata={
                            "session_id": str(outcome.session_id),
                            "reason": reason,
                        },
                    )
                )
                await self.uow.commit()

            return Return.ok(
                LogoutResponse(
                    session_id=str(outcome.session_id),
                    revoked_at=isoformat_z(outcome.revoked_at),
                    revoked_by=outcome.revoked_by,
                    reason=outcome.reason,
                    message=(
                        "Session already revoked"
                        if outcome.already_revoked
                        else "Session revoked successfully"
                    ),
                )
            )
