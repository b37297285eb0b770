"""Request-scoped query ports handed to the services."""
from fastapi import Depends
from sqlalchemy.orm import Session

from groupwork.database import get_db
from groupwork.services.coordinator_service import CoordinatorAssignments
from groupwork.services.group_service import GroupMembership


def get_membership(db: Session = Depends(get_db)) -> GroupMembership:
    return GroupMembership(db)


def get_coordinators(db: Session = Depends(get_db)) -> CoordinatorAssignments:
    return CoordinatorAssignments(db)
