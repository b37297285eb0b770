"""Tests for administrative group management and leadership transfer."""
import pytest
from sqlalchemy.exc import OperationalError

from groupwork.errors import Conflict, NotFound
from groupwork.models.group import GroupMember, StudentRole
from groupwork.models.selection import StudentDeliverableSelection
from groupwork.models.user import AdminRole
from groupwork.principal import Principal
from groupwork.services import group_service, selection_service
from groupwork.services.coordinator_service import CoordinatorAssignments
from tests.conftest import (
    add_test_member,
    admin_headers,
    create_test_group,
    seed_admin,
    seed_project,
    seed_security_code,
    seed_student,
    seed_student_deliverable,
    student_headers,
)


@pytest.fixture
def setup(client, db):
    """A project with group Alpha led by Ada, with Bob as Member."""
    project = seed_project(db, max_group_size=3)
    seed_security_code(db, project)
    prof = seed_admin(db, "prof@uni.test")
    ada = seed_student(db, "ada@uni.test", first_name="Ada")
    bob = seed_student(db, "bob@uni.test", first_name="Bob")
    group = create_test_group(client, ada.student_id)
    add_test_member(client, ada.student_id, group["group_id"], "bob@uni.test")
    return {"project": project, "prof": prof, "ada": ada, "bob": bob, "group": group}


def leaders(db, group_id):
    db.expire_all()
    return (
        db.query(GroupMember)
        .filter(GroupMember.group_id == group_id, GroupMember.role == StudentRole.GroupLeader)
        .all()
    )


class TestAdminListing:

    def test_list_project_groups(self, client, setup):
        resp = client.get(f"/api/admin/groups/projects/{setup['project'].project_id}",
                          headers=admin_headers(setup["prof"].admin_id))
        assert resp.status_code == 200
        [group] = resp.json()
        assert len(group["members"]) == 2

    def test_unassigned_coordinator_denied(self, client, db, setup):
        coord = seed_admin(db, "coord@uni.test", role=AdminRole.Coordinator)
        resp = client.get(f"/api/admin/groups/projects/{setup['project'].project_id}",
                          headers=admin_headers(coord.admin_id, "Coordinator"))
        assert resp.status_code == 403


class TestAdminAddMember:

    def test_add_member(self, client, db, setup):
        seed_student(db, "cy@uni.test")
        resp = client.post(f"/api/admin/groups/{setup['group']['group_id']}/members",
                           json={"student_email": "cy@uni.test"}, headers=admin_headers(setup["prof"].admin_id))
        assert resp.status_code == 201
        assert resp.json()["role"] == "Member"

    def test_enforces_group_size(self, client, db, setup):
        seed_student(db, "cy@uni.test")
        seed_student(db, "dan@uni.test")
        url = f"/api/admin/groups/{setup['group']['group_id']}/members"
        headers = admin_headers(setup["prof"].admin_id)
        assert client.post(url, json={"student_email": "cy@uni.test"}, headers=headers).status_code == 201
        resp = client.post(url, json={"student_email": "dan@uni.test"}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["kind"] == "invalid_state"

    def test_rejects_second_leader(self, client, db, setup):
        seed_student(db, "cy@uni.test")
        resp = client.post(f"/api/admin/groups/{setup['group']['group_id']}/members",
                           json={"student_email": "cy@uni.test", "role": "GroupLeader"},
                           headers=admin_headers(setup["prof"].admin_id))
        assert resp.status_code == 409
        assert len(leaders(db, setup["group"]["group_id"])) == 1

    def test_rejects_student_of_other_group(self, client, db, setup):
        cy = seed_student(db, "cy@uni.test")
        create_test_group(client, cy.student_id, name="Beta")
        resp = client.post(f"/api/admin/groups/{setup['group']['group_id']}/members",
                           json={"student_email": "cy@uni.test"}, headers=admin_headers(setup["prof"].admin_id))
        assert resp.status_code == 409


class TestAdminRemoveMember:

    def test_remove_leader(self, client, db, setup):
        """Admins may remove the leader itself."""
        group_id = setup["group"]["group_id"]
        resp = client.delete(f"/api/admin/groups/{group_id}/members/{setup['ada'].student_id}",
                             headers=admin_headers(setup["prof"].admin_id))
        assert resp.json()["removed"] is True
        assert leaders(db, group_id) == []

    def test_remove_non_member(self, client, db, setup):
        cy = seed_student(db, "cy@uni.test")
        resp = client.delete(f"/api/admin/groups/{setup['group']['group_id']}/members/{cy.student_id}",
                             headers=admin_headers(setup["prof"].admin_id))
        assert resp.status_code == 200
        assert resp.json()["removed"] is False

    def test_remove_cascades_student_selection(self, client, db, setup):
        project = setup["project"]
        report = seed_student_deliverable(db, project)
        client.post("/api/deliverable-selection/", json={
            "student_deliverable_id": report.student_deliverable_id, "project_id": project.project_id,
        }, headers=student_headers(setup["bob"].student_id))

        client.delete(f"/api/admin/groups/{setup['group']['group_id']}/members/{setup['bob'].student_id}",
                      headers=admin_headers(setup["prof"].admin_id))
        db.expire_all()
        assert db.query(StudentDeliverableSelection).count() == 0

    def test_failed_cascade_does_not_block_removal(self, db, setup, monkeypatch, caplog):
        """A storage error while dropping the selection is logged, the member still goes."""

        def _boom(*args, **kwargs):
            raise OperationalError("DELETE", {}, Exception("disk I/O error"))

        monkeypatch.setattr(selection_service, "delete_student_selection_for", _boom)
        principal = Principal.admin(setup["prof"].admin_id, AdminRole.Professor)
        result = group_service.admin_remove_member(
            db, principal, CoordinatorAssignments(db), setup["group"]["group_id"], setup["bob"].student_id
        )
        assert result["removed"] is True
        assert "Failed to delete deliverable selection" in caplog.text

    def test_membership_committed_before_selection_cascade(self, db, setup, monkeypatch):
        """The selection cascade only runs once the membership row is gone."""
        still_member = []

        def _record(session, student_id, project_id):
            still_member.append(
                session.query(GroupMember).filter(GroupMember.student_id == student_id).first() is not None
            )
            return False

        monkeypatch.setattr(selection_service, "delete_student_selection_for", _record)
        principal = Principal.admin(setup["prof"].admin_id, AdminRole.Professor)
        group_service.admin_remove_member(
            db, principal, CoordinatorAssignments(db), setup["group"]["group_id"], setup["bob"].student_id
        )
        assert still_member == [False]


class TestTransferLeadership:

    def test_demote_old_leader(self, client, db, setup):
        group_id = setup["group"]["group_id"]
        resp = client.patch(f"/api/admin/groups/{group_id}/leader",
                            json={"new_leader_student_id": setup["bob"].student_id},
                            headers=admin_headers(setup["prof"].admin_id))
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["old_leader"]["status"] == "demoted_to_member"
        assert body["new_leader"]["student_id"] == setup["bob"].student_id

        [leader] = leaders(db, group_id)
        assert leader.student_id == setup["bob"].student_id
        assert db.query(GroupMember).filter(GroupMember.group_id == group_id).count() == 2

    def test_remove_old_leader(self, client, db, setup):
        group_id = setup["group"]["group_id"]
        resp = client.patch(f"/api/admin/groups/{group_id}/leader",
                            json={"new_leader_student_id": setup["bob"].student_id, "remove_old_leader": True},
                            headers=admin_headers(setup["prof"].admin_id))
        assert resp.json()["old_leader"]["status"] == "removed_from_group"
        [leader] = leaders(db, group_id)
        assert leader.student_id == setup["bob"].student_id
        assert db.query(GroupMember).filter(GroupMember.group_id == group_id).count() == 1

    def test_target_not_member(self, db, setup):
        cy = seed_student(db, "cy@uni.test")
        principal = Principal.admin(setup["prof"].admin_id, AdminRole.Professor)
        with pytest.raises(NotFound):
            group_service.transfer_leadership(
                db, principal, CoordinatorAssignments(db), setup["group"]["group_id"], cy.student_id
            )

    def test_target_already_leader(self, db, setup):
        principal = Principal.admin(setup["prof"].admin_id, AdminRole.Professor)
        with pytest.raises(Conflict):
            group_service.transfer_leadership(
                db, principal, CoordinatorAssignments(db), setup["group"]["group_id"], setup["ada"].student_id
            )

    def test_group_without_leader(self, client, db, setup):
        group_id = setup["group"]["group_id"]
        headers = admin_headers(setup["prof"].admin_id)
        client.delete(f"/api/admin/groups/{group_id}/members/{setup['ada'].student_id}", headers=headers)
        resp = client.patch(f"/api/admin/groups/{group_id}/leader",
                            json={"new_leader_student_id": setup["bob"].student_id}, headers=headers)
        assert resp.status_code == 409

    def test_student_cannot_transfer(self, client, setup):
        resp = client.patch(f"/api/admin/groups/{setup['group']['group_id']}/leader",
                            json={"new_leader_student_id": setup["bob"].student_id},
                            headers=student_headers(setup["ada"].student_id))
        assert resp.status_code == 403

    def test_new_leader_manages_group(self, client, db, setup):
        """After a transfer only the new leader can add members."""
        group_id = setup["group"]["group_id"]
        client.patch(f"/api/admin/groups/{group_id}/leader",
                     json={"new_leader_student_id": setup["bob"].student_id},
                     headers=admin_headers(setup["prof"].admin_id))
        seed_student(db, "cy@uni.test")
        resp = client.post(f"/api/groups/{group_id}/members", json={"student_email": "cy@uni.test"},
                           headers=student_headers(setup["ada"].student_id))
        assert resp.status_code == 403
        add_test_member(client, setup["bob"].student_id, group_id, "cy@uni.test")
