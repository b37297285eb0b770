"""Helpers shared by the service modules: clock, deadline rule, guarded commits."""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from groupwork.errors import Conflict
from groupwork.models.project import Project

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize to an aware UTC datetime (naive values are taken as UTC)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def selection_window_open(project: Project, now: Optional[datetime] = None) -> bool:
    """Deliverable selection is open until the project deadline, inclusive.

    A project without a deadline never closes.
    """
    deadline = ensure_utc(project.deliverable_selection_deadline)
    if deadline is None:
        return True
    return ensure_utc(now or utcnow()) <= deadline


def commit_or_conflict(db: Session, message: str) -> None:
    """Commit, translating a storage uniqueness violation into ``Conflict``.

    The application-level existence checks are only a fast path; concurrent
    writers racing past them are stopped here by the unique keys.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Integrity violation on commit: %s (%s)", message, exc.orig)
        raise Conflict(message)
