"""
Verify Email Use Case

Handles email verification via a single-use token.
"""

import logging

from src.app.services.secret_hasher import ISecretHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import isoformat_z, utcnow
from src.domain.entities import AuditEvent, PrincipalKind
from src.libs.result import Error, Result, Return
from .credentials import CREDENTIAL_KINDS, credential_repository
from .dtos import EmailVerified
from .one_time_tokens import match_token

logger = logging.getLogger(__name__)

INVALID_VERIFICATION_TOKEN = Error(
    "INVALID_VERIFICATION_TOKEN", "Invalid or expired verification token"
)


class VerifyEmailUseCase:
    """
    Use case for email verification.

    Business Rules:
    - Token must be pending (not consumed, not expired) and issued for this
      kind of principal and its current email
    - Sets email_verified = True and consumes the token
    """

    def __init__(self, uow: UnitOfWork, hasher: ISecretHasher):
        self.uow = uow
        self.hasher = hasher

    async def execute(self, kind: PrincipalKind, token: str) -> Result[EmailVerified]:
        if kind not in CREDENTIAL_KINDS:
            return Return.err(INVALID_VERIFICATION_TOKEN)

        async with self.uow:
            now = utcnow()
            verification = await match_token(
                self.uow.email_verifications, self.hasher, token, now
            )
            if verification is None or verification.principal_kind != kind:
                return Return.err(INVALID_VERIFICATION_TOKEN)

            repository = credential_repository(self.uow, kind)
            principal = await repository.get_by_id(verification.principal_id)
            if principal is None or principal.email != verification.target_email:
                return Return.err(INVALID_VERIFICATION_TOKEN)

            verification_id = verification.id
            if not await self.uow.email_verifications.consume(verification_id, now):
                return Return.err(INVALID_VERIFICATION_TOKEN)

            principal.email_verified = True
            principal.updated_at = now
            principal = await repository.update(principal)

            await self.uow.audit_events.create(
                AuditEvent(
                    actor_kind=kind,
                    actor_id=principal.id,
                    action="email_verified",
                    event_metadata={
                        "email": principal.email,
                        "verification_id": str(verification_id),
                    },
                )
            )
            await self.uow.commit()

            logger.info(f"{kind.value} {principal.id} verified their email")
            return Return.ok(
                EmailVerified(
                    id=str(principal.id),
                    role=kind.value,
                    email=principal.email,
                    email_verified=True,
                    verified_at=isoformat_z(now),
                    message="Email successfully verified",
                )
            )
