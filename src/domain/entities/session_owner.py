"""
SessionOwner Value Object

Tagged union over the principals a session can belong to:
Admin(id) | Member(id) | Guest(id) | Anonymous.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator

from .enums import PrincipalKind


class SessionOwner(BaseModel):
    """Owner of a session. Anonymous owners carry no principal id."""

    model_config = ConfigDict(frozen=True)

    kind: PrincipalKind
    principal_id: Optional[UUID] = None

    @model_validator(mode="after")
    def _check_id_matches_kind(self):
        if self.kind == PrincipalKind.anonymous and self.principal_id is not None:
            raise ValueError("anonymous owner cannot carry a principal id")
        if self.kind != PrincipalKind.anonymous and self.principal_id is None:
            raise ValueError(f"{self.kind.value} owner requires a principal id")
        return self

    @classmethod
    def admin(cls, principal_id: UUID) -> "SessionOwner":
        return cls(kind=PrincipalKind.admin, principal_id=principal_id)

    @classmethod
    def member(cls, principal_id: UUID) -> "SessionOwner":
        return cls(kind=PrincipalKind.member, principal_id=principal_id)

    @classmethod
    def guest(cls, principal_id: UUID) -> "SessionOwner":
        return cls(kind=PrincipalKind.guest, principal_id=principal_id)

    @classmethod
    def anonymous(cls) -> "SessionOwner":
        return cls(kind=PrincipalKind.anonymous)

    @property
    def is_anonymous(self) -> bool:
        return self.kind == PrincipalKind.anonymous
