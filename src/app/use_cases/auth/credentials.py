"""Credential-bearing principals (admins and members) share one lookup shape."""

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Admin, Member, PrincipalKind

CREDENTIAL_KINDS = (PrincipalKind.admin, PrincipalKind.member)


def credential_repository(uow: UnitOfWork, kind: PrincipalKind):
    if kind == PrincipalKind.admin:
        return uow.admins
    if kind == PrincipalKind.member:
        return uow.members
    raise ValueError(f"{kind.value} principals have no credentials")


def new_credential_principal(kind: PrincipalKind, email: str, password_hash: str):
    model = Admin if kind == PrincipalKind.admin else Member
    return model(email=email, password_hash=password_hash)
