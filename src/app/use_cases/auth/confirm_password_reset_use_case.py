"""
Confirm Password Reset Use Case

Applies a new password with a reset token and ends every session.
"""

import logging

from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_lifecycle import SessionLifecycleEngine
from src.app.services.session_policy import SessionPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import isoformat_z, utcnow
from src.domain.entities import AuditEvent, PrincipalKind, SessionOwner
from src.libs.result import Error, Result, Return
from .credentials import CREDENTIAL_KINDS, credential_repository
from .dtos import PasswordResetConfirmed
from .one_time_tokens import match_token

logger = logging.getLogger(__name__)

REVOKE_REASON = "password_reset"
INVALID_RESET_TOKEN = Error("INVALID_RESET_TOKEN", "Invalid or expired password reset token")


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming a password reset.

    Business Rules:
    - New password must satisfy the length policy
    - Unknown, expired, consumed or foreign-kind tokens all fail with
      INVALID_RESET_TOKEN
    - The token is consumed with a conditional update, so it works once
    - Every session of the principal is revoked with reason password_reset
      and a session_revocations row written by "system"
    """

    def __init__(self, uow: UnitOfWork, hasher: ISecretHasher, policy: SessionPolicy):
        self.uow = uow
        self.hasher = hasher
        self.policy = policy

    async def execute(
        self, kind: PrincipalKind, token: str, new_password: str
    ) -> Result[PasswordResetConfirmed]:
        if kind not in CREDENTIAL_KINDS:
            return Return.err(INVALID_RESET_TOKEN)

        password_error = self.policy.password_error(new_password)
        if password_error:
            return Return.err(Error("INVALID_PASSWORD", password_error))

        async with self.uow:
            now = utcnow()
            reset = await match_token(self.uow.password_resets, self.hasher, token, now)
            if reset is None or reset.principal_kind != kind or reset.principal_id is None:
                return Return.err(INVALID_RESET_TOKEN)

            repository = credential_repository(self.uow, kind)
            principal = await repository.get_by_id(reset.principal_id)
            if principal is None or not principal.is_usable():
                return Return.err(INVALID_RESET_TOKEN)

            reset_id = reset.id
            if not await self.uow.password_resets.consume(reset_id, now):
                logger.warning(f"Password reset {reset_id} consumed concurrently")
                return Return.err(INVALID_RESET_TOKEN)

            principal.password_hash = self.hasher.hash(new_password)
            principal.updated_at = now
            await repository.update(principal)

            owner = SessionOwner(kind=kind, principal_id=principal.id)
            engine = SessionLifecycleEngine(self.uow, self.hasher, self.policy)
            outcome = await engine.revoke_all(owner, revoked_by="system", reason=REVOKE_REASON)

            await self.uow.audit_events.create(
                AuditEvent(
                    actor_kind=kind,
                    actor_id=principal.id,
                    action="password_reset",
                    event_metadata={
                        "reset_id": str(reset_id),
                        "revoked_count": outcome.revoked_count,
                    },
                )
            )
            await self.uow.commit()

            logger.info(
                f"{kind.value} {owner.principal_id} reset password, "
                f"revoked {outcome.revoked_count} session(s)"
            )
            return Return.ok(
                PasswordResetConfirmed(
                    success=True,
                    changed_at=isoformat_z(now),
                    revoked_sessions_count=outcome.revoked_count,
                    message="Password has been reset",
                )
            )
