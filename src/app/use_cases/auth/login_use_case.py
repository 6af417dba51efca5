"""
Login Use Case

Verifies admin/member credentials and opens a new session.
"""

import logging
from typing import Optional

from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_lifecycle import SessionLifecycleEngine
from src.app.services.session_policy import SessionPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import (
    AuditEvent,
    LoginAttempt,
    LoginFailureReason,
    SessionOwner,
)
from src.libs.result import Error, Result, Return
from .credentials import CREDENTIAL_KINDS, credential_repository
from .dtos import AuthorizedPrincipal, LoginCommand, to_authorized_principal

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid email or password")
ACCOUNT_UNUSABLE = Error("ACCOUNT_UNUSABLE", "Account is not active")


class LoginUseCase:
    """
    Use case for login and token issuance.

    Business Rules:
    - Unknown email and wrong password fail identically (INVALID_CREDENTIALS)
    - Password hash is checked even when the email is unknown
    - Account status is only revealed after the password verified
    - Every attempt is recorded in login_attempts, failures included
    - keep_me_signed_in extends the refresh window of the new session
    """

    def __init__(self, uow: UnitOfWork, hasher: ISecretHasher, policy: SessionPolicy):
        self.uow = uow
        self.hasher = hasher
        self.policy = policy

    async def execute(self, command: LoginCommand) -> Result[AuthorizedPrincipal]:
        """
        Execute login use case.

        Args:
            command: LoginCommand with principal kind, email, password

        Returns:
            Result with AuthorizedPrincipal containing tokens, or Error
        """
        if command.kind not in CREDENTIAL_KINDS:
            return Return.err(INVALID_CREDENTIALS)

        async with self.uow:
            principal = await credential_repository(self.uow, command.kind).get_by_email(
                command.email
            )

            # Constant-time password verification (prevent timing attacks)
            if principal is None:
                self.hasher.dummy_verify()
                return await self._fail(command, None, LoginFailureReason.invalid_credentials)

            if not self.hasher.verify(command.password, principal.password_hash):
                return await self._fail(
                    command, principal.id, LoginFailureReason.invalid_credentials
                )

            if not principal.is_usable():
                return await self._fail(
                    command, principal.id, LoginFailureReason.account_unusable
                )

            owner = SessionOwner(kind=command.kind, principal_id=principal.id)
            refresh_ttl = (
                self.policy.extended_refresh_token_ttl
                if command.keep_me_signed_in
                else self.policy.refresh_token_ttl
            )
            engine = SessionLifecycleEngine(self.uow, self.hasher, self.policy)
            issued = await engine.issue(owner, client=command.client, refresh_ttl=refresh_ttl)

            now = utcnow()
            principal.last_login_at = now
            principal.updated_at = now
            await credential_repository(self.uow, command.kind).update(principal)

            await self._record_attempt(command, principal.id, None)
            await self.uow.audit_events.create(
                AuditEvent(
                    actor_kind=command.kind,
                    actor_id=principal.id,
                    action="login",
                    event_metadata={
                        "email": command.email,
                        "session_id": str(issued.session_id),
                        "keep_me_signed_in": command.keep_me_signed_in,
                    },
                )
            )

            await self.uow.commit()

            return Return.ok(to_authorized_principal(issued, principal))

    async def _fail(self, command: LoginCommand, principal_id, reason: LoginFailureReason):
        """Persist the failed attempt, then report the matching error"""
        await self._record_attempt(command, principal_id, reason)
        await self.uow.commit()

        logger.warning(f"Login failed for {command.kind.value}: {reason.value}")
        if reason == LoginFailureReason.account_unusable:
            return Return.err(ACCOUNT_UNUSABLE)
        return Return.err(INVALID_CREDENTIALS)

    async def _record_attempt(
        self, command: LoginCommand, principal_id, reason: Optional[LoginFailureReason]
    ):
        await self.uow.login_attempts.create(
            LoginAttempt(
                principal_kind=command.kind,
                principal_id=principal_id,
                email=command.email,
                success=reason is None,
                failure_reason=reason,
                ip=command.client.ip,
                user_agent=command.client.user_agent,
            )
        )
