"""
Request Password Reset Use Case

Records a reset request and hands the token to the notifier.
"""

import logging

from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_policy import SessionPolicy
from src.app.services.token_notifier import ITokenNotifier
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import isoformat_z, utcnow
from src.domain.entities import AuditEvent, PasswordReset, PrincipalKind
from src.libs.result import Error, Result, Return
from .credentials import CREDENTIAL_KINDS, credential_repository
from .dtos import PasswordResetRequested
from .one_time_tokens import issue_token

logger = logging.getLogger(__name__)

ACKNOWLEDGMENT = "If an account exists for this email, a password reset link has been sent"


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - Same response whether or not the email belongs to a usable account
    - A request row is stored either way; it only links to the principal
      (and the token is only delivered) when the account is usable
    - Token expires after policy.password_reset_ttl (30 minutes by default)
    - Only bcrypt(token) is stored
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: ISecretHasher,
        policy: SessionPolicy,
        notifier: ITokenNotifier,
    ):
        self.uow = uow
        self.hasher = hasher
        self.policy = policy
        self.notifier = notifier

    async def execute(self, kind: PrincipalKind, email: str) -> Result[PasswordResetRequested]:
        if kind not in CREDENTIAL_KINDS:
            return Return.err(
                Error("INVALID_PRINCIPAL_KIND", f"{kind.value} principals have no password")
            )

        async with self.uow:
            principal = await credential_repository(self.uow, kind).get_by_email(email)
            if principal is not None and not principal.is_usable():
                principal = None
            principal_id = principal.id if principal is not None else None

            now = utcnow()
            expires_at = now + self.policy.password_reset_ttl
            selector, token, token_hash = issue_token(self.hasher)
            reset = await self.uow.password_resets.create(
                PasswordReset(
                    principal_kind=kind,
                    principal_id=principal_id,
                    email=email,
                    token_selector=selector,
                    token_hash=token_hash,
                    requested_at=now,
                    expires_at=expires_at,
                    created_at=now,
                    updated_at=now,
                )
            )

            await self.uow.audit_events.create(
                AuditEvent(
                    actor_kind=kind,
                    actor_id=principal_id,
                    action="password_reset_requested",
                    event_metadata={"email": email, "reset_id": str(reset.id)},
                )
            )
            await self.uow.commit()

        if principal_id is not None:
            await self.notifier.send_password_reset(email, token, expires_at)
        else:
            logger.info(f"Password reset requested for unknown {kind.value} email")

        return Return.ok(
            PasswordResetRequested(
                email=email,
                requested_at=isoformat_z(now),
                expires_at=isoformat_z(expires_at),
                message=ACKNOWLEDGMENT,
            )
        )
