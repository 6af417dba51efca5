"""
Guest Join Use Case

Creates a credential-less guest and opens its session.
"""

from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_lifecycle import SessionLifecycleEngine
from src.app.services.session_policy import SessionPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, Guest, PrincipalKind, SessionOwner
from src.libs.result import Result, Return
from .dtos import AuthorizedPrincipal, GuestJoinCommand, to_authorized_principal


class GuestJoinUseCase:
    def __init__(self, uow: UnitOfWork, hasher: ISecretHasher, policy: SessionPolicy):
        self.uow = uow
        self.hasher = hasher
        self.policy = policy

    async def execute(self, command: GuestJoinCommand) -> Result[AuthorizedPrincipal]:
        async with self.uow:
            guest = await self.uow.guests.create(Guest(nickname=command.nickname))

            engine = SessionLifecycleEngine(self.uow, self.hasher, self.policy)
            issued = await engine.issue(SessionOwner.guest(guest.id), client=command.client)

            await self.uow.audit_events.create(
                AuditEvent(
                    actor_kind=PrincipalKind.guest,
                    actor_id=guest.id,
                    action="join",
                    event_metadata={"session_id": str(issued.session_id)},
                )
            )
            await self.uow.commit()

            return Return.ok(to_authorized_principal(issued, guest))
