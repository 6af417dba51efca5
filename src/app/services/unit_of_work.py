from abc import ABC, abstractmethod

from src.app.repositories.admin_repository import IAdminRepository
from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.email_verification_repository import (
    IEmailVerificationRepository,
)
from src.app.repositories.guest_repository import IGuestRepository
from src.app.repositories.login_attempt_repository import ILoginAttemptRepository
from src.app.repositories.member_repository import IMemberRepository
from src.app.repositories.password_reset_repository import IPasswordResetRepository
from src.app.repositories.session_repository import ISessionRepository
from src.app.repositories.session_revocation_repository import (
    ISessionRevocationRepository,
)


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    admins: IAdminRepository
    members: IMemberRepository
    guests: IGuestRepository
    sessions: ISessionRepository
    session_revocations: ISessionRevocationRepository
    login_attempts: ILoginAttemptRepository
    audit_events: IAuditEventRepository
    password_resets: IPasswordResetRepository
    email_verifications: IEmailVerificationRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
