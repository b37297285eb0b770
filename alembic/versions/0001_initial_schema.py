"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Creates the catalog tables read by the service (students, admins, projects,
deliverables and components) and the tables it owns: security_codes,
coordinator_projects, groups, group_members, the two deliverable selection
tables and group_component_implementation_details.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

admin_role = sa.Enum("Root", "Professor", "Coordinator", name="adminrole")
student_role = sa.Enum("GroupLeader", "Member", name="studentrole")


def upgrade() -> None:
    # --- catalog ---
    op.create_table(
        "students",
        sa.Column("student_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("is_pending", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "admins",
        sa.Column("admin_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("role", admin_role, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "projects",
        sa.Column("project_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("max_group_size", sa.Integer, nullable=False),
        sa.Column("deliverable_selection_deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
    )
    op.create_table(
        "group_deliverables",
        sa.Column("group_deliverable_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.project_id"), nullable=False),
        sa.Column("name", sa.String(150), nullable=False),
    )
    op.create_table(
        "group_deliverable_components",
        sa.Column("group_deliverable_component_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.project_id"), nullable=False),
        sa.Column("name", sa.String(150), nullable=False),
    )
    op.create_table(
        "group_deliverables_components",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "group_deliverable_id", sa.Integer,
            sa.ForeignKey("group_deliverables.group_deliverable_id"), nullable=False,
        ),
        sa.Column(
            "group_deliverable_component_id", sa.Integer,
            sa.ForeignKey("group_deliverable_components.group_deliverable_component_id"), nullable=False,
        ),
        sa.UniqueConstraint("group_deliverable_id", "group_deliverable_component_id"),
    )
    op.create_table(
        "student_deliverables",
        sa.Column("student_deliverable_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.project_id"), nullable=False),
        sa.Column("name", sa.String(150), nullable=False),
    )

    # --- security_codes ---
    op.create_table(
        "security_codes",
        sa.Column("security_code_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.project_id"), nullable=False),
        sa.Column("code", sa.String(7), nullable=False, unique=True),
        sa.Column("expiration", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- coordinator_projects ---
    op.create_table(
        "coordinator_projects",
        sa.Column("coordinator_project_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("admin_id", sa.Integer, sa.ForeignKey("admins.admin_id"), nullable=False, index=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.project_id"), nullable=False, unique=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- groups ---
    op.create_table(
        "groups",
        sa.Column("group_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.project_id"), nullable=False, index=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("project_id", "name", name="uq_groups_project_name"),
    )

    # --- group_members ---
    op.create_table(
        "group_members",
        sa.Column("group_id", sa.Integer, sa.ForeignKey("groups.group_id"), primary_key=True),
        sa.Column("student_id", sa.Integer, sa.ForeignKey("students.student_id"), primary_key=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.project_id"), nullable=False),
        sa.Column("role", student_role, nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("student_id", "project_id", name="uq_group_members_student_project"),
    )
    op.create_index(
        "uq_group_members_one_leader",
        "group_members",
        ["group_id"],
        unique=True,
        sqlite_where=sa.text("role = 'GroupLeader'"),
        postgresql_where=sa.text("role = 'GroupLeader'"),
    )

    # --- deliverable selections ---
    op.create_table(
        "group_deliverable_selections",
        sa.Column("group_deliverable_selection_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("group_id", sa.Integer, sa.ForeignKey("groups.group_id"), nullable=False, unique=True),
        sa.Column(
            "group_deliverable_id", sa.Integer,
            sa.ForeignKey("group_deliverables.group_deliverable_id"), nullable=False,
        ),
        sa.Column("link", sa.String(500), nullable=True, unique=True),
        sa.Column("markdown_text", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "student_deliverable_selections",
        sa.Column("student_deliverable_selection_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("student_id", sa.Integer, sa.ForeignKey("students.student_id"), nullable=False),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.project_id"), nullable=False),
        sa.Column(
            "student_deliverable_id", sa.Integer,
            sa.ForeignKey("student_deliverables.student_deliverable_id"), nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("student_id", "project_id", name="uq_student_selections_student_project"),
    )

    # --- group_component_implementation_details ---
    op.create_table(
        "group_component_implementation_details",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "group_deliverable_selection_id", sa.Integer,
            sa.ForeignKey("group_deliverable_selections.group_deliverable_selection_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "group_deliverable_component_id", sa.Integer,
            sa.ForeignKey("group_deliverable_components.group_deliverable_component_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("markdown_description", sa.Text, nullable=False),
        sa.Column("repository_link", sa.String(500), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint(
            "group_deliverable_selection_id",
            "group_deliverable_component_id",
            name="uq_implementation_details_selection_component",
        ),
    )


def downgrade() -> None:
    op.drop_table("group_component_implementation_details")
    op.drop_table("student_deliverable_selections")
    op.drop_table("group_deliverable_selections")
    op.drop_index("uq_group_members_one_leader", table_name="group_members")
    op.drop_table("group_members")
    op.drop_table("groups")
    op.drop_table("coordinator_projects")
    op.drop_table("security_codes")
    op.drop_table("student_deliverables")
    op.drop_table("group_deliverables_components")
    op.drop_table("group_deliverable_components")
    op.drop_table("group_deliverables")
    op.drop_table("projects")
    op.drop_table("admins")
    op.drop_table("students")
    student_role.drop(op.get_bind(), checkfirst=True)
    admin_role.drop(op.get_bind(), checkfirst=True)
