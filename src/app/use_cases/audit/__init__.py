"""
Audit Use Cases

Audit log retrieval and management.
"""

from .get_audit_events_use_case import GetAuditEventsUseCase

__all__ = ["GetAuditEventsUseCase"]
