"""
Change Password Use Case

Replaces the caller's password and logs out their other sessions.
"""

import logging

from pydantic import BaseModel

from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_lifecycle import AuthContext, SessionLifecycleEngine
from src.app.services.session_policy import SessionPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.credentials import CREDENTIAL_KINDS, credential_repository
from src.domain.base import isoformat_z, utcnow
from src.domain.entities import AuditEvent
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

REVOKE_REASON = "password_change"


class ChangePasswordResponse(BaseModel):
    success: bool
    changed_at: str
    revoked_sessions_count: int


class ChangePasswordUseCase:
    """
    Use case for password change.

    Business Rules:
    - Only admins and members have passwords
    - Current password must verify; failure is INVALID_CREDENTIALS
    - Account must still be usable
    - New password must satisfy the length policy
    - Every other session of the caller is revoked, the current one survives
    """

    def __init__(self, uow: UnitOfWork, hasher: ISecretHasher, policy: SessionPolicy):
        self.uow = uow
        self.hasher = hasher
        self.policy = policy

    async def execute(
        self, auth: AuthContext, current_password: str, new_password: str
    ) -> Result[ChangePasswordResponse]:
        if auth.role not in CREDENTIAL_KINDS:
            return Return.err(Error("FORBIDDEN", "This account has no password"))

        password_error = self.policy.password_error(new_password)
        if password_error:
            return Return.err(Error("INVALID_PASSWORD", password_error))

        async with self.uow:
            repository = credential_repository(self.uow, auth.role)
            principal = await repository.get_by_id(auth.principal_id)
            if principal is None:
                return Return.err(Error("PRINCIPAL_NOT_FOUND", "Account not found"))

            if not self.hasher.verify(current_password, principal.password_hash):
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Current password is incorrect")
                )

            if not principal.is_usable():
                return Return.err(Error("ACCOUNT_UNUSABLE", "Account is not active"))

            now = utcnow()
            principal.password_hash = self.hasher.hash(new_password)
            principal.updated_at = now
            await repository.update(principal)

            engine = SessionLifecycleEngine(self.uow, self.hasher, self.policy)
            result = await engine.revoke_others(
                auth.owner, auth.session_id, revoked_by=auth.role.value, reason=REVOKE_REASON
            )
            if result.is_err():
                return result
            revoked_count = result.value.revoked_count

            await self.uow.audit_events.create(
                AuditEvent(
                    actor_kind=auth.role,
                    actor_id=auth.principal_id,
                    action="password_change",
                    event_metadata={"revoked_count": revoked_count},
                )
            )
            await self.uow.commit()

            logger.info(
                f"{auth.role.value} {auth.principal_id} changed password, "
                f"revoked {revoked_count} session(s)"
            )
            return Return.ok(
                ChangePasswordResponse(
                    success=True,
                    changed_at=isoformat_z(now),
                    revoked_sessions_count=revoked_count,
                )
            )
