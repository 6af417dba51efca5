"""
Session Management DTOs
"""

from typing import List, Optional

from pydantic import BaseModel


class LogoutResponse(BaseModel):
    """Response for logout (revoke current session)"""

    session_id: str
    revoked_at: str
    revoked_by: str
    reason: Optional[str] = None
    message: str


class RevokeOthersResponse(BaseModel):
    success: bool
    revoked_sessions_count: int
    revoked_session_ids: List[str]
    message: str


class SessionInfo(BaseModel):
    """One session of the caller, without any token material"""

    id: str
    current: bool
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: str
    last_accessed_at: str
    expires_at: str
    revoked_at: Optional[str] = None
    revoked_reason: Optional[str] = None


class SessionListResponse(BaseModel):
    sessions: List[SessionInfo]
