"""
Use Cases

Organized into domain folders:
- auth/: join, login, refresh, password reset, email verification
- sessions/: logout, revoke others, list sessions
- account/: password change
- audit/: audit logs
"""

from .auth import (
    ConfirmPasswordResetUseCase,
    GuestJoinUseCase,
    JoinUseCase,
    LoginUseCase,
    RefreshTokenUseCase,
    RequestEmailVerificationUseCase,
    RequestPasswordResetUseCase,
    VerifyEmailUseCase,
)
from .sessions import ListSessionsUseCase, LogoutUseCase, RevokeOtherSessionsUseCase
from .account import ChangePasswordUseCase
from .audit import GetAuditEventsUseCase

__all__ = [
    # Auth
    "JoinUseCase",
    "GuestJoinUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    "RequestEmailVerificationUseCase",
    "VerifyEmailUseCase",
    # Sessions
    "LogoutUseCase",
    "RevokeOtherSessionsUseCase",
    "ListSessionsUseCase",
    # Account
    "ChangePasswordUseCase",
    # Audit
    "GetAuditEventsUseCase",
]
