"""
Session Lifecycle Engine

Issues, rotates and revokes sessions. This is the only code that writes
session rows for authentication purposes. It runs inside the caller's unit of
work and never commits; the calling use case owns the transaction.

Session states: Active -> (rotate) Active, Active -> (revoke) Revoked,
Active -> (time) Expired. Revoked and Expired are terminal.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from src.api.utils.jwt import generate_access_token, verify_access_token
from src.app.repositories.session_repository import SessionFilter
from src.app.services.secret_hasher import ISecretHasher
from src.app.services.session_policy import SessionPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import PrincipalKind, Session, SessionOwner
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

SELECTOR_BYTES = 9
SELECTOR_LENGTH = 12  # token_urlsafe(9)
VERIFIER_BYTES = 32

INVALID_REFRESH_TOKEN = Error("INVALID_REFRESH_TOKEN", "Invalid refresh token")
INVALID_ACCESS_TOKEN = Error("INVALID_TOKEN", "Invalid or expired token")


class ClientContext(BaseModel):
    ip: Optional[str] = None
    user_agent: Optional[str] = None


class IssuedTokens(BaseModel):
    access: str
    refresh: str
    expired_at: datetime
    refreshable_until: datetime


class IssuedSession(BaseModel):
    session_id: UUID
    owner: SessionOwner
    tokens: IssuedTokens


class AuthContext(BaseModel):
    """Caller identity resolved from an access token"""

    principal_id: Optional[UUID] = None
    role: PrincipalKind
    session_id: UUID

    @property
    def owner(self) -> SessionOwner:
        return SessionOwner(kind=self.role, principal_id=self.principal_id)


class RevocationOutcome(BaseModel):
    session_id: UUID
    revoked_at: datetime
    revoked_by: str
    reason: Optional[str] = None
    already_revoked: bool = False


class RevokeOthersOutcome(BaseModel):
    revoked_session_ids: List[UUID]

    @property
    def revoked_count(self) -> int:
        return len(self.revoked_session_ids)


def new_selector_token() -> tuple[str, str]:
    """Return (selector, token). The token embeds the selector as its prefix."""
    selector = secrets.token_urlsafe(SELECTOR_BYTES)
    return selector, f"{selector}.{secrets.token_urlsafe(VERIFIER_BYTES)}"


def parse_selector(refresh_token: str) -> Optional[str]:
    selector, sep, verifier = refresh_token.partition(".")
    if not sep or not verifier or len(selector) != SELECTOR_LENGTH:
        return None
    return selector


class SessionLifecycleEngine:
    """
    Issue / Rotate / Revoke / Revoke-Others over the session table.

    Business Rules:
    - Only bcrypt(refresh token) is persisted
    - Rotation is a compare-and-swap on the stored hash: of two callers racing
      with the same token, at most one succeeds
    - Every rotation failure is reported as the same INVALID_REFRESH_TOKEN
    - Revocation is idempotent and recorded in session_revocations
    """

    def __init__(self, uow: UnitOfWork, hasher: ISecretHasher, policy: SessionPolicy):
        self.uow = uow
        self.hasher = hasher
        self.policy = policy

    async def issue(
        self,
        owner: SessionOwner,
        client: Optional[ClientContext] = None,
        refresh_ttl: Optional[timedelta] = None,
    ) -> IssuedSession:
        """Create a new session for an already authenticated owner"""
        client = client or ClientContext()
        refresh_ttl = refresh_ttl or self.policy.refresh_token_ttl
        now = utcnow()

        selector, refresh_token = new_selector_token()
        session = Session(
            token_selector=selector,
            session_token_hash=self.hasher.hash(refresh_token),
            ip=client.ip,
            user_agent=client.user_agent,
            refresh_window_seconds=int(refresh_ttl.total_seconds()),
            created_at=now,
            updated_at=now,
            last_accessed_at=now,
            expires_at=now + refresh_ttl,
        )
        session.assign_owner(owner)
        session = await self.uow.sessions.create(session)

        logger.info(f"Issued session {session.id} for {owner.kind.value}")
        return IssuedSession(
            session_id=session.id,
            owner=owner,
            tokens=self._tokens(owner, session.id, refresh_token, now, session.expires_at),
        )

    async def rotate(self, refresh_token: str) -> Result[IssuedSession]:
        """Exchange a live refresh token for a new token pair"""
        selector = parse_selector(refresh_token)
        if selector is None:
            return Return.err(INVALID_REFRESH_TOKEN)

        now = utcnow()
        candidates = await self.uow.sessions.find_candidates(selector, now)
        match = next(
            (s for s in candidates if self.hasher.verify(refresh_token, s.session_token_hash)),
            None,
        )
        if match is None:
            if not candidates:
                self.hasher.dummy_verify()
            logger.warning("Refresh rejected: no live session matches token")
            return Return.err(INVALID_REFRESH_TOKEN)

        owner = match.owner
        if not await self.owner_is_usable(owner):
            logger.warning(f"Refresh rejected: owner of session {match.id} is not usable")
            return Return.err(INVALID_REFRESH_TOKEN)

        session_id = match.id
        expected_hash = match.session_token_hash
        expires_at = now + timedelta(seconds=match.refresh_window_seconds)
        new_selector, new_token = new_selector_token()

        swapped = await self.uow.sessions.rotate_token(
            session_id,
            expected_hash=expected_hash,
            token_selector=new_selector,
            token_hash=self.hasher.hash(new_token),
            now=now,
            expires_at=expires_at,
        )
        if not swapped:
            logger.warning(f"Refresh rejected: session {session_id} changed concurrently")
            return Return.err(INVALID_REFRESH_TOKEN)

        logger.info(f"Rotated session {session_id}")
        return Return.ok(
            IssuedSession(
                session_id=session_id,
                owner=owner,
                tokens=self._tokens(owner, session_id, new_token, now, expires_at),
            )
        )

    async def revoke(
        self,
        owner: SessionOwner,
        session_id: Optional[UUID],
        revoked_by: str,
        reason: Optional[str] = None,
    ) -> Result[RevocationOutcome]:
        """
        Revoke the caller's session.

        Falls back to the owner's most recent session when session_id does not
        name one of theirs. Already revoked sessions are reported, not changed.
        """
        session = await self._owned_session(owner, session_id)
        if session is None and not owner.is_anonymous:
            session = await self.uow.sessions.get_latest_by_owner(owner)
        if session is None:
            return Return.err(Error("SESSION_NOT_FOUND", "No session to revoke"))

        if session.revoked_at is not None:
            return Return.ok(await self._existing_revocation(session, revoked_by))

        now = utcnow()
        if not await self.uow.sessions.mark_revoked(session.id, now, reason):
            # Revoked by a concurrent request between our read and write
            return Return.ok(await self._existing_revocation(session, revoked_by))

        await self.uow.session_revocations.upsert(session.id, now, revoked_by, reason)
        logger.info(f"Revoked session {session.id} ({reason or 'no reason'})")
        return Return.ok(
            RevocationOutcome(
                session_id=session.id,
                revoked_at=now,
                revoked_by=revoked_by,
                reason=reason,
            )
        )

    async def revoke_others(
        self,
        owner: SessionOwner,
        current_session_id: UUID,
        revoked_by: str,
        reason: Optional[str] = None,
        criteria: Optional[SessionFilter] = None,
        include_current: bool = False,
    ) -> Result[RevokeOthersOutcome]:
        """
        Revoke live sessions of the owner that match criteria.

        The current session must itself be live and is kept unless
        include_current is set.
        """
        now = utcnow()
        current = await self._owned_session(owner, current_session_id)
        if current is None or not current.is_active(now):
            return Return.err(Error("SESSION_NOT_FOUND", "Current session not found"))

        if owner.is_anonymous:
            targets = [current] if include_current else []
        else:
            targets = [
                session
                for session in await self.uow.sessions.list_by_owner(
                    owner, now, active_only=True, criteria=criteria
                )
                if include_current or session.id != current.id
            ]

        revoked_ids = await self._revoke_sessions(targets, now, revoked_by, reason)
        logger.info(
            f"Revoked {len(revoked_ids)} session(s) of {owner.kind.value}"
            + ("" if include_current else f", kept {current.id}")
        )
        return Return.ok(RevokeOthersOutcome(revoked_session_ids=revoked_ids))

    async def revoke_all(
        self, owner: SessionOwner, revoked_by: str, reason: Optional[str] = None
    ) -> RevokeOthersOutcome:
        """Revoke every live session of the owner, used after credential recovery"""
        if owner.is_anonymous:
            return RevokeOthersOutcome(revoked_session_ids=[])

        now = utcnow()
        sessions = await self.uow.sessions.list_by_owner(owner, now, active_only=True)
        revoked_ids = await self._revoke_sessions(sessions, now, revoked_by, reason)
        logger.info(f"Revoked all {len(revoked_ids)} session(s) of {owner.kind.value}")
        return RevokeOthersOutcome(revoked_session_ids=revoked_ids)

    async def _revoke_sessions(
        self, sessions: List[Session], now: datetime, revoked_by: str, reason: Optional[str]
    ) -> List[UUID]:
        revoked_ids = []
        for session in sessions:
            # Sessions revoked concurrently are skipped, not reported twice
            if await self.uow.sessions.mark_revoked(session.id, now, reason):
                await self.uow.session_revocations.upsert(session.id, now, revoked_by, reason)
                revoked_ids.append(session.id)
        return revoked_ids

    async def authenticate(self, access_token: str) -> Result[AuthContext]:
        """
        Resolve a bearer access token to the caller.

        Access tokens are stateless: signature and expiry decide. When
        enforce_session_on_access is set the backing session must also be live.
        """
        payload = verify_access_token(
            access_token,
            self.policy.jwt_secret,
            algorithm=self.policy.jwt_algorithm,
            issuer=self.policy.jwt_issuer,
        )
        if payload is None:
            return Return.err(INVALID_ACCESS_TOKEN)

        try:
            role = PrincipalKind(payload["role"])
            session_id = UUID(payload["sid"])
            principal_id = None if role == PrincipalKind.anonymous else UUID(payload["sub"])
            context = AuthContext(principal_id=principal_id, role=role, session_id=session_id)
        except (KeyError, TypeError, ValueError):
            return Return.err(INVALID_ACCESS_TOKEN)

        if self.policy.enforce_session_on_access:
            session = await self.uow.sessions.get_by_id(session_id)
            if (
                session is None
                or not session.is_active(utcnow())
                or session.owner != context.owner
            ):
                return Return.err(INVALID_ACCESS_TOKEN)

        return Return.ok(context)

    async def load_principal(self, owner: SessionOwner):
        if owner.kind == PrincipalKind.admin:
            return await self.uow.admins.get_by_id(owner.principal_id)
        if owner.kind == PrincipalKind.member:
            return await self.uow.members.get_by_id(owner.principal_id)
        if owner.kind == PrincipalKind.guest:
            return await self.uow.guests.get_by_id(owner.principal_id)
        return None

    async def owner_is_usable(self, owner: SessionOwner) -> bool:
        if owner.is_anonymous:
            return True
        principal = await self.load_principal(owner)
        return principal is not None and principal.is_usable()

    async def _owned_session(
        self, owner: SessionOwner, session_id: Optional[UUID]
    ) -> Optional[Session]:
        if session_id is None:
            return None
        session = await self.uow.sessions.get_by_id(session_id)
        if session is None or session.owner != owner:
            return None
        return session

    async def _existing_revocation(self, session: Session, revoked_by: str) -> RevocationOutcome:
        record = await self.uow.session_revocations.get_by_session_id(session.id)
        if record is not None:
            return RevocationOutcome(
                session_id=session.id,
                revoked_at=record.revoked_at,
                revoked_by=record.revoked_by,
                reason=record.reason,
                already_revoked=True,
            )
        return RevocationOutcome(
            session_id=session.id,
            revoked_at=session.revoked_at or utcnow(),
            revoked_by=revoked_by,
            reason=session.revoked_reason,
            already_revoked=True,
        )

    def _tokens(
        self,
        owner: SessionOwner,
        session_id: UUID,
        refresh_token: str,
        now: datetime,
        refreshable_until: datetime,
    ) -> IssuedTokens:
        subject = owner.principal_id if owner.principal_id is not None else session_id
        access = generate_access_token(
            subject=str(subject),
            role=owner.kind.value,
            session_id=str(session_id),
            secret=self.policy.jwt_secret,
            expires_delta=self.policy.access_token_ttl,
            algorithm=self.policy.jwt_algorithm,
            issuer=self.policy.jwt_issuer,
        )
        return IssuedTokens(
            access=access,
            refresh=refresh_token,
            expired_at=now + self.policy.access_token_ttl,
            refreshable_until=refreshable_until,
        )
