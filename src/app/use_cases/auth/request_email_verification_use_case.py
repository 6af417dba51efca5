"""
Request Email Verification Use Case

Sends (or re-sends) a verification link for an unverified account.
"""

from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_policy import SessionPolicy
from src.app.services.token_notifier import ITokenNotifier
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AuditEvent, EmailVerification, PrincipalKind
from src.libs.result import Error, Result, Return
from .credentials import CREDENTIAL_KINDS, credential_repository
from .dtos import EmailVerificationRequested
from .one_time_tokens import issue_token

ACKNOWLEDGMENT = "If this email needs verification, a verification link has been sent"


class RequestEmailVerificationUseCase:
    """
    Use case for requesting an email verification link.

    Business Rules:
    - Generic acknowledgment for unknown, unusable or already verified accounts
    - A new token is created per request; earlier tokens stay valid until
      they expire or one of them is used
    - Token expires after policy.email_verification_ttl (24 hours by default)
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

    async def execute(
        self, kind: PrincipalKind, email: str
    ) -> Result[EmailVerificationRequested]:
        if kind not in CREDENTIAL_KINDS:
            return Return.err(
                Error("INVALID_PRINCIPAL_KIND", f"{kind.value} principals have no email")
            )

        acknowledgment = EmailVerificationRequested(email=email, message=ACKNOWLEDGMENT)

        async with self.uow:
            principal = await credential_repository(self.uow, kind).get_by_email(email)
            if principal is None or not principal.is_usable() or principal.email_verified:
                return Return.ok(acknowledgment)

            principal_id = principal.id
            now = utcnow()
            expires_at = now + self.policy.email_verification_ttl
            selector, token, token_hash = issue_token(self.hasher)
            verification = await self.uow.email_verifications.create(
                EmailVerification(
                    principal_kind=kind,
                    principal_id=principal_id,
                    target_email=email,
                    token_selector=selector,
                    token_hash=token_hash,
                    sent_at=now,
                    expires_at=expires_at,
                    created_at=now,
                    updated_at=now,
                )
            )

            await self.uow.audit_events.create(
                AuditEvent(
                    actor_kind=kind,
                    actor_id=principal_id,
                    action="email_verification_requested",
                    event_metadata={"verification_id": str(verification.id)},
                )
            )
            await self.uow.commit()

        await self.notifier.send_email_verification(email, token, expires_at)
        return Return.ok(acknowledgment)
