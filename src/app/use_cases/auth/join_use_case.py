"""
Join Use Case

Registers an admin or member and opens their first session.
"""

import logging

from sqlalchemy.exc import IntegrityError

from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_lifecycle import SessionLifecycleEngine
from src.app.services.session_policy import SessionPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, SessionOwner
from src.libs.result import Error, Result, Return
from .credentials import CREDENTIAL_KINDS, credential_repository, new_credential_principal
from .dtos import AuthorizedPrincipal, JoinCommand, to_authorized_principal

logger = logging.getLogger(__name__)


class JoinUseCase:
    """
    Join Use Case

    Business Logic:
    1. Validate password length policy
    2. Check that the email is not registered for this kind of principal
    3. Hash password with bcrypt
    4. Create the principal with status=active, email_verified=False
    5. Issue a session (refresh token hashed, never stored in clear)
    6. Record AuditEvent with action=join
    7. Commit transaction atomically
    """

    def __init__(self, uow: UnitOfWork, hasher: ISecretHasher, policy: SessionPolicy):
        self.uow = uow
        self.hasher = hasher
        self.policy = policy

    async def execute(self, command: JoinCommand) -> Result[AuthorizedPrincipal]:
        if command.kind not in CREDENTIAL_KINDS:
            return Return.err(
                Error("INVALID_PRINCIPAL_KIND", f"Cannot join as {command.kind.value}")
            )

        password_error = self.policy.password_error(command.password)
        if password_error:
            return Return.err(Error("INVALID_PASSWORD", password_error))

        async with self.uow:
            repository = credential_repository(self.uow, command.kind)

            if await repository.get_by_email(command.email):
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "Email already registered")
                )

            principal = new_credential_principal(
                command.kind, command.email, self.hasher.hash(command.password)
            )
            try:
                principal = await repository.create(principal)
            except IntegrityError:
                # Lost a race with a concurrent join for the same email
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "Email already registered")
                )
            owner = SessionOwner(kind=command.kind, principal_id=principal.id)

            engine = SessionLifecycleEngine(self.uow, self.hasher, self.policy)
            issued = await engine.issue(owner, client=command.client)

            await self.uow.audit_events.create(
                AuditEvent(
                    actor_kind=command.kind,
                    actor_id=principal.id,
                    action="join",
                    event_metadata={
                        "email": command.email,
                        "session_id": str(issued.session_id),
                    },
                )
            )

            await self.uow.commit()

            logger.info(f"{command.kind.value} {principal.id} joined")
            return Return.ok(to_authorized_principal(issued, principal))
