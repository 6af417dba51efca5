"""
Authentication Use Cases

Join, login and refresh for admins, members and guests; password reset and
email verification for admins and members.
"""

from .join_use_case import JoinUseCase
from .guest_join_use_case import GuestJoinUseCase
from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .request_email_verification_use_case import RequestEmailVerificationUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .dtos import (
    AuthorizedPrincipal,
    EmailVerificationRequested,
    EmailVerified,
    GuestJoinCommand,
    JoinCommand,
    LoginCommand,
    PasswordResetConfirmed,
    PasswordResetRequested,
    TokenInfo,
)

__all__ = [
    # Use Cases
    "JoinUseCase",
    "GuestJoinUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    "RequestEmailVerificationUseCase",
    "VerifyEmailUseCase",
    # DTOs - Commands
    "JoinCommand",
    "GuestJoinCommand",
    "LoginCommand",
    # DTOs - Responses
    "AuthorizedPrincipal",
    "TokenInfo",
    "PasswordResetRequested",
    "PasswordResetConfirmed",
    "EmailVerificationRequested",
    "EmailVerified",
]
