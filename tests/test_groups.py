"""Tests for student group creation and self-service membership."""
from groupwork.models.group import Group, GroupMember, StudentRole
from groupwork.models.selection import StudentDeliverableSelection
from tests.conftest import (
    add_test_member,
    create_test_group,
    seed_project,
    seed_security_code,
    seed_student,
    seed_student_deliverable,
    student_headers,
    utc_in,
)


class TestGroupCreate:
    """Group creation from a security code."""

    def test_create_group(self, client, db):
        project = seed_project(db)
        seed_security_code(db, project)
        ada = seed_student(db, "ada@uni.test")
        group = create_test_group(client, ada.student_id, name="Alpha")
        assert group["name"] == "Alpha"
        assert group["project_id"] == project.project_id
        # Creator is the leader
        assert len(group["members"]) == 1
        assert group["members"][0]["student_id"] == ada.student_id
        assert group["members"][0]["role"] == "GroupLeader"

    def test_blank_name(self, client, db):
        project = seed_project(db)
        seed_security_code(db, project)
        ada = seed_student(db, "ada@uni.test")
        resp = client.post("/api/groups/", json={"name": "   ", "security_code": "ABC-123"},
                           headers=student_headers(ada.student_id))
        assert resp.status_code == 400
        assert resp.json()["kind"] == "invalid_input"

    def test_unknown_code(self, client, db):
        ada = seed_student(db, "ada@uni.test")
        resp = client.post("/api/groups/", json={"name": "Alpha", "security_code": "NOP-000"},
                           headers=student_headers(ada.student_id))
        assert resp.status_code == 404

    def test_expired_code(self, client, db):
        project = seed_project(db)
        seed_security_code(db, project, expiration=utc_in(days=-1))
        ada = seed_student(db, "ada@uni.test")
        resp = client.post("/api/groups/", json={"name": "Alpha", "security_code": "ABC-123"},
                           headers=student_headers(ada.student_id))
        assert resp.status_code == 400
        assert resp.json()["kind"] == "expired"

    def test_second_group_in_project_conflicts(self, client, db):
        project = seed_project(db)
        seed_security_code(db, project)
        ada = seed_student(db, "ada@uni.test")
        create_test_group(client, ada.student_id, name="Alpha")
        resp = client.post("/api/groups/", json={"name": "Beta", "security_code": "ABC-123"},
                           headers=student_headers(ada.student_id))
        assert resp.status_code == 409
        db.expire_all()
        assert db.query(Group).count() == 1

    def test_duplicate_name_in_project(self, client, db):
        project = seed_project(db)
        seed_security_code(db, project)
        ada = seed_student(db, "ada@uni.test")
        bob = seed_student(db, "bob@uni.test")
        create_test_group(client, ada.student_id, name="Alpha")
        resp = client.post("/api/groups/", json={"name": "Alpha", "security_code": "ABC-123"},
                           headers=student_headers(bob.student_id))
        assert resp.status_code == 409

    def test_code_is_reusable(self, client, db):
        """One code seeds several groups while it is valid."""
        project = seed_project(db)
        seed_security_code(db, project)
        ada = seed_student(db, "ada@uni.test")
        bob = seed_student(db, "bob@uni.test")
        create_test_group(client, ada.student_id, name="Alpha")
        create_test_group(client, bob.student_id, name="Beta")
        db.expire_all()
        assert db.query(Group).filter(Group.project_id == project.project_id).count() == 2

    def test_admin_cannot_create(self, client, db):
        project = seed_project(db)
        seed_security_code(db, project)
        resp = client.post("/api/groups/", json={"name": "Alpha", "security_code": "ABC-123"},
                           headers={"X-Principal-Id": "1", "X-Principal-Kind": "Admin",
                                    "X-Principal-Role": "Professor"})
        assert resp.status_code == 403

    def test_check_name(self, client, db):
        project = seed_project(db)
        seed_security_code(db, project)
        ada = seed_student(db, "ada@uni.test")
        create_test_group(client, ada.student_id, name="Alpha")
        resp = client.post("/api/groups/check-name", json={"project_id": project.project_id, "name": "Alpha"},
                           headers=student_headers(ada.student_id))
        assert resp.json() == {"exists": True}
        resp = client.post("/api/groups/check-name", json={"project_id": project.project_id, "name": "Beta"},
                           headers=student_headers(ada.student_id))
        assert resp.json() == {"exists": False}

    def test_my_groups(self, client, db):
        project = seed_project(db, name="Compilers")
        seed_security_code(db, project)
        ada = seed_student(db, "ada@uni.test")
        create_test_group(client, ada.student_id, name="Alpha")
        resp = client.get("/api/groups/", headers=student_headers(ada.student_id))
        assert resp.status_code == 200
        [entry] = resp.json()
        assert entry["group"]["name"] == "Alpha"
        assert entry["project"]["name"] == "Compilers"
        assert entry["role"] == "GroupLeader"


class TestGroupMembership:
    """Leader-driven membership management."""

    def _setup(self, client, db, max_group_size=3):
        project = seed_project(db, max_group_size=max_group_size)
        seed_security_code(db, project)
        ada = seed_student(db, "ada@uni.test")
        bob = seed_student(db, "bob@uni.test", first_name="Bob")
        group = create_test_group(client, ada.student_id)
        return project, ada, bob, group

    def test_add_member(self, client, db):
        _, ada, bob, group = self._setup(client, db)
        member = add_test_member(client, ada.student_id, group["group_id"], "bob@uni.test")
        assert member["student_id"] == bob.student_id
        assert member["role"] == "Member"

        resp = client.get(f"/api/groups/{group['group_id']}/members", headers=student_headers(bob.student_id))
        assert [m["role"] for m in resp.json()] == ["GroupLeader", "Member"]

    def test_only_leader_adds(self, client, db):
        _, ada, bob, group = self._setup(client, db)
        add_test_member(client, ada.student_id, group["group_id"], "bob@uni.test")
        seed_student(db, "cy@uni.test")
        resp = client.post(f"/api/groups/{group['group_id']}/members", json={"student_email": "cy@uni.test"},
                           headers=student_headers(bob.student_id))
        assert resp.status_code == 403

    def test_unknown_email(self, client, db):
        _, ada, _, group = self._setup(client, db)
        resp = client.post(f"/api/groups/{group['group_id']}/members", json={"student_email": "ghost@uni.test"},
                           headers=student_headers(ada.student_id))
        assert resp.status_code == 404

    def test_pending_student_rejected(self, client, db):
        _, ada, _, group = self._setup(client, db)
        seed_student(db, "new@uni.test", is_pending=True)
        resp = client.post(f"/api/groups/{group['group_id']}/members", json={"student_email": "new@uni.test"},
                           headers=student_headers(ada.student_id))
        assert resp.status_code == 400
        assert resp.json()["kind"] == "invalid_state"

    def test_student_already_grouped_in_project(self, client, db):
        _, ada, bob, group = self._setup(client, db)
        create_test_group(client, bob.student_id, name="Beta")
        resp = client.post(f"/api/groups/{group['group_id']}/members", json={"student_email": "bob@uni.test"},
                           headers=student_headers(ada.student_id))
        assert resp.status_code == 409

    def test_group_size_limit(self, client, db):
        _, ada, _, group = self._setup(client, db, max_group_size=2)
        add_test_member(client, ada.student_id, group["group_id"], "bob@uni.test")
        seed_student(db, "cy@uni.test")
        resp = client.post(f"/api/groups/{group['group_id']}/members", json={"student_email": "cy@uni.test"},
                           headers=student_headers(ada.student_id))
        assert resp.status_code == 400
        assert resp.json()["kind"] == "invalid_state"

    def test_remove_member(self, client, db):
        _, ada, bob, group = self._setup(client, db)
        add_test_member(client, ada.student_id, group["group_id"], "bob@uni.test")
        resp = client.delete(f"/api/groups/{group['group_id']}/members/{bob.student_id}",
                             headers=student_headers(ada.student_id))
        assert resp.status_code == 200
        assert resp.json()["removed"] is True
        assert resp.json()["member"]["email"] == "bob@uni.test"
        db.expire_all()
        assert db.query(GroupMember).filter(GroupMember.student_id == bob.student_id).count() == 0

    def test_remove_leader_is_refused(self, client, db):
        """Targeting the leader answers removed=false rather than an error."""
        _, ada, _, group = self._setup(client, db)
        resp = client.delete(f"/api/groups/{group['group_id']}/members/{ada.student_id}",
                             headers=student_headers(ada.student_id))
        assert resp.status_code == 200
        assert resp.json()["removed"] is False
        db.expire_all()
        assert db.query(GroupMember).filter(GroupMember.role == StudentRole.GroupLeader).count() == 1

    def test_remove_non_member(self, client, db):
        _, ada, bob, group = self._setup(client, db)
        resp = client.delete(f"/api/groups/{group['group_id']}/members/{bob.student_id}",
                             headers=student_headers(ada.student_id))
        assert resp.status_code == 404

    def test_remove_drops_student_selection(self, client, db):
        project, ada, bob, group = self._setup(client, db)
        report = seed_student_deliverable(db, project)
        add_test_member(client, ada.student_id, group["group_id"], "bob@uni.test")
        resp = client.post("/api/deliverable-selection/", json={
            "student_deliverable_id": report.student_deliverable_id, "project_id": project.project_id,
        }, headers=student_headers(bob.student_id))
        assert resp.status_code == 201

        client.delete(f"/api/groups/{group['group_id']}/members/{bob.student_id}",
                      headers=student_headers(ada.student_id))
        db.expire_all()
        assert db.query(StudentDeliverableSelection).count() == 0

    def test_member_leaves(self, client, db):
        _, ada, bob, group = self._setup(client, db)
        add_test_member(client, ada.student_id, group["group_id"], "bob@uni.test")
        resp = client.post(f"/api/groups/{group['group_id']}/leave", headers=student_headers(bob.student_id))
        assert resp.json()["removed"] is True

        # Bob is unaffiliated again and can start his own group
        resp = create_test_group(client, bob.student_id, name="Beta")
        assert resp["members"][0]["role"] == "GroupLeader"

    def test_leader_cannot_leave(self, client, db):
        _, ada, _, group = self._setup(client, db)
        resp = client.post(f"/api/groups/{group['group_id']}/leave", headers=student_headers(ada.student_id))
        assert resp.status_code == 200
        assert resp.json()["removed"] is False

    def test_leader_deletes_group(self, client, db):
        _, ada, bob, group = self._setup(client, db)
        add_test_member(client, ada.student_id, group["group_id"], "bob@uni.test")
        resp = client.delete(f"/api/groups/{group['group_id']}", headers=student_headers(bob.student_id))
        assert resp.status_code == 403

        resp = client.delete(f"/api/groups/{group['group_id']}", headers=student_headers(ada.student_id))
        assert resp.status_code == 204
        db.expire_all()
        assert db.query(Group).count() == 0
        assert db.query(GroupMember).count() == 0
