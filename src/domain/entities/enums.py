"""
Todo Auth Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class PrincipalKind(str, Enum):
    """Kind of actor that owns a session"""

    admin = "admin"
    member = "member"
    guest = "guest"
    anonymous = "anonymous"


class PrincipalStatus(str, Enum):
    """Account status shared by admins, members and guests"""

    active = "active"
    suspended = "suspended"
    deleted = "deleted"


class LoginFailureReason(str, Enum):
    """Why a recorded login attempt failed"""

    invalid_credentials = "invalid_credentials"
    account_unusable = "account_unusable"
