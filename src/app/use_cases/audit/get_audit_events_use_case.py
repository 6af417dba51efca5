"""
Get Audit Events Use Case

Retrieves authentication audit events with pagination.
"""

from typing import Any, Dict, Optional

from src.app.services.session_lifecycle import AuthContext
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import isoformat_z
from src.domain.entities import PrincipalKind
from src.libs.result import Error, Result, Return


class GetAuditEventsUseCase:
    """
    Use case for retrieving audit events.

    Business Rules:
    - Caller must be an admin whose account is still usable
    - Results ordered by newest first
    - Supports cursor-based pagination and filtering by action
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        auth: AuthContext,
        limit: int = 50,
        cursor: Optional[str] = None,
        action: Optional[str] = None,
    ) -> Result[Dict[str, Any]]:
        """
        Execute get audit events use case.

        Args:
            auth: Caller resolved from the access token
            limit: Maximum number of events to return
            cursor: Pagination cursor (optional)
            action: Only return events with this action (optional)

        Returns:
            Result with events list and next_cursor, or Error
        """
        if auth.role != PrincipalKind.admin:
            return Return.err(
                Error("INSUFFICIENT_ROLE", "You do not have permission to view audit events")
            )

        async with self.uow:
            admin = await self.uow.admins.get_by_id(auth.principal_id)
            if admin is None or not admin.is_usable():
                return Return.err(Error("ACCOUNT_UNUSABLE", "Account is not active"))

            events, next_cursor = await self.uow.audit_events.get_paginated(
                limit=limit, cursor=cursor, action=action
            )

            events_list = [
                {
                    "action": event.action,
                    "actor_kind": event.actor_kind.value,
                    "actor_id": str(event.actor_id) if event.actor_id else None,
                    "timestamp": isoformat_z(event.created_at),
                    "metadata": event.event_metadata or {},
                }
                for event in events
            ]

            return Return.ok({"events": events_list, "next_cursor": next_cursor})
