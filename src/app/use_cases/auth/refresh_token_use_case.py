"""
Refresh Token Use Case

Rotates a refresh token and issues a new access token.
"""

from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_lifecycle import SessionLifecycleEngine
from src.app.services.session_policy import SessionPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent
from src.libs.result import Result, Return
from .dtos import AuthorizedPrincipal, to_authorized_principal


class RefreshTokenUseCase:
    """
    Use case for refreshing access tokens.

    Business Rules:
    - Refresh token rotation: old token invalidated, new token issued
    - Revoked, expired, unknown or already-rotated tokens all fail with
      INVALID_REFRESH_TOKEN
    - Owner must still be active and not deleted
    """

    def __init__(self, uow: UnitOfWork, hasher: ISecretHasher, policy: SessionPolicy):
        self.uow = uow
        self.hasher = hasher
        self.policy = policy

    async def execute(self, refresh_token: str) -> Result[AuthorizedPrincipal]:
        async with self.uow:
            engine = SessionLifecycleEngine(self.uow, self.hasher, self.policy)
            result = await engine.rotate(refresh_token)
            if result.is_err():
                return result

            issued = result.value
            principal = None
            if not issued.owner.is_anonymous:
                principal = await engine.load_principal(issued.owner)

            await self.uow.audit_events.create(
                AuditEvent(
                    actor_kind=issued.owner.kind,
                    actor_id=issued.owner.principal_id,
                    action="token_refresh",
                    event_metadata={"session_id": str(issued.session_id)},
                )
            )

            await self.uow.commit()

            return Return.ok(to_authorized_principal(issued, principal))
