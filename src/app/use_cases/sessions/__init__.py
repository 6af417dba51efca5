"""
Session Management Use Cases
"""

from .logout_use_case import LogoutUseCase
from .revoke_other_sessions_use_case import RevokeOtherSessionsUseCase
from .list_sessions_use_case import ListSessionsUseCase
from .dtos import LogoutResponse, RevokeOthersResponse, SessionInfo, SessionListResponse

__all__ = [
    "LogoutUseCase",
    "RevokeOtherSessionsUseCase",
    "ListSessionsUseCase",
    "LogoutResponse",
    "RevokeOthersResponse",
    "SessionInfo",
    "SessionListResponse",
]
