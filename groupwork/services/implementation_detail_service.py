"""Per-component implementation details attached to a group's deliverable selection."""
import logging

from sqlalchemy.orm import Session

from groupwork.errors import Conflict, Forbidden, InvalidInput, NotFound
from groupwork.models.implementation_detail import GroupComponentImplementationDetail
from groupwork.models.project import GroupDeliverablesComponent
from groupwork.models.selection import GroupDeliverableSelection
from groupwork.principal import Principal, require_student
from groupwork.services.common import commit_or_conflict
from groupwork.services.ports import MembershipQueries
from groupwork.services.selection_service import find_group_selection

logger = logging.getLogger(__name__)

DUPLICATE = "Implementation details already exist for this component"


def _require_leader(principal: Principal, membership: MembershipQueries, group_id: int) -> None:
    require_student(principal)
    if not membership.is_group_leader(principal.id, group_id):
        logger.warning("Student %s is not the GroupLeader of group %s", principal.id, group_id)
        raise Forbidden("Only the group leader can manage implementation details")


def _require_text(markdown_description: str, repository_link: str) -> None:
    if not (markdown_description or "").strip() or not (repository_link or "").strip():
        raise InvalidInput("Markdown description and repository link are mandatory")


def _selection_for(db: Session, group_id: int) -> GroupDeliverableSelection:
    selection = find_group_selection(db, group_id)
    if not selection:
        raise NotFound("Group has not selected a deliverable yet")
    return selection


def _ensure_component_in_deliverable(db: Session, selection: GroupDeliverableSelection, component_id: int) -> None:
    link = (
        db.query(GroupDeliverablesComponent)
        .filter(
            GroupDeliverablesComponent.group_deliverable_id == selection.group_deliverable_id,
            GroupDeliverablesComponent.group_deliverable_component_id == component_id,
        )
        .first()
    )
    if not link:
        raise NotFound("Component is not part of the selected deliverable")


def _find(db: Session, selection_id: int, component_id: int):
    return (
        db.query(GroupComponentImplementationDetail)
        .filter(
            GroupComponentImplementationDetail.group_deliverable_selection_id == selection_id,
            GroupComponentImplementationDetail.group_deliverable_component_id == component_id,
        )
        .first()
    )


def _get(db: Session, selection_id: int, component_id: int) -> GroupComponentImplementationDetail:
    detail = _find(db, selection_id, component_id)
    if not detail:
        raise NotFound("Implementation details not found for this component")
    return detail


def create(
    db: Session,
    principal: Principal,
    membership: MembershipQueries,
    group_id: int,
    component_id: int,
    markdown_description: str,
    repository_link: str,
) -> GroupComponentImplementationDetail:
    _require_text(markdown_description, repository_link)
    _require_leader(principal, membership, group_id)
    selection = _selection_for(db, group_id)
    _ensure_component_in_deliverable(db, selection, component_id)

    if _find(db, selection.group_deliverable_selection_id, component_id):
        raise Conflict(DUPLICATE)

    detail = GroupComponentImplementationDetail(
        group_deliverable_selection_id=selection.group_deliverable_selection_id,
        group_deliverable_component_id=component_id,
        markdown_description=markdown_description,
        repository_link=repository_link.strip(),
    )
    db.add(detail)
    commit_or_conflict(db, DUPLICATE)
    db.refresh(detail)
    logger.info("Group %s documented component %s", group_id, component_id)
    return detail


def update(
    db: Session,
    principal: Principal,
    membership: MembershipQueries,
    group_id: int,
    component_id: int,
    markdown_description: str,
    repository_link: str,
) -> GroupComponentImplementationDetail:
    _require_text(markdown_description, repository_link)
    _require_leader(principal, membership, group_id)
    selection = _selection_for(db, group_id)
    _ensure_component_in_deliverable(db, selection, component_id)

    detail = _get(db, selection.group_deliverable_selection_id, component_id)
    detail.markdown_description = markdown_description
    detail.repository_link = repository_link.strip()
    db.commit()
    db.refresh(detail)
    logger.info("Group %s updated details of component %s", group_id, component_id)
    return detail


def delete(db: Session, principal: Principal, membership: MembershipQueries, group_id: int, component_id: int) -> None:
    _require_leader(principal, membership, group_id)
    selection = _selection_for(db, group_id)
    detail = _get(db, selection.group_deliverable_selection_id, component_id)
    db.delete(detail)
    db.commit()
    logger.info("Group %s deleted details of component %s", group_id, component_id)


def list_for_selection(db: Session, selection_id: int) -> list[GroupComponentImplementationDetail]:
    return (
        db.query(GroupComponentImplementationDetail)
        .filter(GroupComponentImplementationDetail.group_deliverable_selection_id == selection_id)
        .order_by(GroupComponentImplementationDetail.group_deliverable_component_id)
        .all()
    )


def list_for_group(db: Session, group_id: int) -> list[GroupComponentImplementationDetail]:
    """Details of a group's selection; empty while the group has not selected."""
    selection = find_group_selection(db, group_id)
    if not selection:
        return []
    return list_for_selection(db, selection.group_deliverable_selection_id)
