"""Authenticated caller identity.

The core never checks credentials: an upstream gateway authenticates the
request and forwards the caller as trusted headers. Every service function
receives the resulting ``Principal`` explicitly.
"""
import enum
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from groupwork.errors import Forbidden
from groupwork.models.user import AdminRole


class PrincipalKind(str, enum.Enum):
    Student = "Student"
    Admin = "Admin"


@dataclass(frozen=True)
class Principal:
    id: int
    kind: PrincipalKind
    role: str

    @property
    def is_student(self) -> bool:
        return self.kind == PrincipalKind.Student

    @property
    def is_admin(self) -> bool:
        return self.kind == PrincipalKind.Admin

    @property
    def is_root_or_professor(self) -> bool:
        return self.is_admin and self.role in (AdminRole.Root.value, AdminRole.Professor.value)

    @property
    def is_coordinator(self) -> bool:
        return self.is_admin and self.role == AdminRole.Coordinator.value

    @classmethod
    def student(cls, student_id: int) -> "Principal":
        return cls(id=student_id, kind=PrincipalKind.Student, role="Student")

    @classmethod
    def admin(cls, admin_id: int, role: AdminRole) -> "Principal":
        return cls(id=admin_id, kind=PrincipalKind.Admin, role=AdminRole(role).value)


def require_student(principal: Principal) -> None:
    if not principal.is_student:
        raise Forbidden("This operation is reserved to students")


def require_admin(principal: Principal) -> None:
    if not principal.is_admin:
        raise Forbidden("This operation is reserved to administrators")


def get_principal(
    x_principal_id: Optional[int] = Header(None),
    x_principal_kind: Optional[str] = Header(None),
    x_principal_role: Optional[str] = Header(None),
) -> Principal:
    """Build the principal forwarded by the authentication gateway."""
    if x_principal_id is None or x_principal_kind is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    try:
        kind = PrincipalKind(x_principal_kind)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown principal kind")

    if kind == PrincipalKind.Student:
        return Principal.student(x_principal_id)
    try:
        return Principal.admin(x_principal_id, AdminRole(x_principal_role))
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown admin role")


def get_student(principal: Principal = Depends(get_principal)) -> Principal:
    require_student(principal)
    return principal


def get_admin(principal: Principal = Depends(get_principal)) -> Principal:
    require_admin(principal)
    return principal
