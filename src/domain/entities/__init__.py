"""
Todo Auth Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    LoginFailureReason,
    PrincipalKind,
    PrincipalStatus,
)

# Export all entities
from .admin import Admin
from .member import Member
from .guest import Guest
from .session_owner import SessionOwner
from .session import Session
from .session_revocation import SessionRevocation
from .login_attempt import LoginAttempt
from .audit_event import AuditEvent
from .password_reset import PasswordReset
from .email_verification import EmailVerification

__all__ = [
    # Enums
    "LoginFailureReason",
    "PrincipalKind",
    "PrincipalStatus",
    # Value objects
    "SessionOwner",
    # Entities
    "Admin",
    "Member",
    "Guest",
    "Session",
    "SessionRevocation",
    "LoginAttempt",
    "AuditEvent",
    "PasswordReset",
    "EmailVerification",
]
