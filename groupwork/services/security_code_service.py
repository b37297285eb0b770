"""Security code gate: issues and validates project-scoped group creation codes.

Codes look like ``ABC-123``. They are never consumed: a code keeps seeding
groups until it expires.
"""
import logging
import secrets
import string
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from groupwork.config import settings
from groupwork.errors import Expired, InvalidInput, NotFound
from groupwork.models.project import Project
from groupwork.models.security_code import SecurityCode
from groupwork.principal import Principal, require_admin
from groupwork.services.common import commit_or_conflict, ensure_utc, utcnow
from groupwork.services.coordinator_service import ensure_project_scope
from groupwork.services.ports import CoordinatorQueries

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6


def generate_code() -> str:
    """Six random alphanumerics with a dash after the third."""
    chars = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
    return f"{chars[:3]}-{chars[3:]}"


def _code_exists(db: Session, code: str) -> bool:
    return db.query(SecurityCode).filter(SecurityCode.code == code).first() is not None


def _unique_code(db: Session) -> str:
    for _ in range(settings.SECURITY_CODE_MAX_ATTEMPTS):
        code = generate_code()
        if not _code_exists(db, code):
            return code
    raise RuntimeError("Unable to generate a unique security code")


def _check_expiration(expiration: datetime, now: Optional[datetime] = None) -> datetime:
    expiration = ensure_utc(expiration)
    earliest = ensure_utc(now or utcnow()) + timedelta(days=settings.SECURITY_CODE_MIN_LIFETIME_DAYS)
    if expiration < earliest:
        raise InvalidInput(
            f"Expiration must be at least {settings.SECURITY_CODE_MIN_LIFETIME_DAYS} day(s) in the future"
        )
    return expiration


def _get_code(db: Session, security_code_id: int) -> SecurityCode:
    row = db.query(SecurityCode).filter(SecurityCode.security_code_id == security_code_id).first()
    if not row:
        raise NotFound("Security code not found")
    return row


def issue(
    db: Session,
    principal: Principal,
    coordinators: CoordinatorQueries,
    project_id: int,
    expiration: datetime,
) -> SecurityCode:
    """Create a fresh code for a project."""
    require_admin(principal)
    if project_id is None or project_id <= 0:
        raise InvalidInput("Project id field is mandatory")
    expiration = _check_expiration(expiration)

    if not db.query(Project).filter(Project.project_id == project_id).first():
        raise NotFound("Project not found")
    ensure_project_scope(principal, coordinators, project_id)

    row = SecurityCode(project_id=project_id, code=_unique_code(db), expiration=expiration)
    db.add(row)
    commit_or_conflict(db, "Generated security code collided with an existing one, please retry")
    db.refresh(row)
    logger.info("Issued security code %s for project %s by admin %s", row.security_code_id, project_id, principal.id)
    return row


def validate(db: Session, code: str, now: Optional[datetime] = None) -> int:
    """Return the project id a code grants access to.

    Raises ``NotFound`` for unknown codes and ``Expired`` once
    ``expiration <= now``.
    """
    row = db.query(SecurityCode).filter(SecurityCode.code == code).first()
    if not row:
        raise NotFound("Invalid security code")
    if ensure_utc(row.expiration) <= ensure_utc(now or utcnow()):
        raise Expired("Security code has expired")
    return row.project_id


def check(db: Session, code: str) -> dict:
    """Non-raising validation used by students before creating a group."""
    try:
        project_id = validate(db, code)
    except Expired:
        return {"is_valid": False, "message": "Security code has expired", "project": None}
    except NotFound:
        return {"is_valid": False, "message": "Invalid security code", "project": None}
    project = db.query(Project).filter(Project.project_id == project_id).first()
    return {"is_valid": True, "message": "Valid security code", "project": project}


def list_active(db: Session, principal: Principal, coordinator_project_ids: list[int]) -> list[SecurityCode]:
    """Codes that have not expired yet; Coordinators only see their projects."""
    require_admin(principal)
    now = utcnow()
    query = db.query(SecurityCode).order_by(SecurityCode.security_code_id)
    if not principal.is_root_or_professor:
        query = query.filter(SecurityCode.project_id.in_(coordinator_project_ids))
    return [row for row in query.all() if ensure_utc(row.expiration) > now]


def update(
    db: Session,
    principal: Principal,
    coordinators: CoordinatorQueries,
    security_code_id: int,
    regenerate: bool = False,
    expiration: Optional[datetime] = None,
) -> SecurityCode:
    """Regenerate the code value and/or move its expiration."""
    row = _get_code(db, security_code_id)
    ensure_project_scope(principal, coordinators, row.project_id)

    if expiration is not None:
        row.expiration = _check_expiration(expiration)
    if regenerate:
        row.code = _unique_code(db)

    commit_or_conflict(db, "Generated security code collided with an existing one, please retry")
    db.refresh(row)
    logger.info("Updated security code %s (regenerated=%s)", security_code_id, regenerate)
    return row


def delete(db: Session, principal: Principal, coordinators: CoordinatorQueries, security_code_id: int) -> None:
    row = _get_code(db, security_code_id)
    ensure_project_scope(principal, coordinators, row.project_id)
    db.delete(row)
    db.commit()
    logger.info("Deleted security code %s by admin %s", security_code_id, principal.id)
