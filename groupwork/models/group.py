"""Group and GroupMember ORM models."""
import enum
from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Index, UniqueConstraint, Enum as SAEnum, text,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from groupwork.database import Base


class StudentRole(str, enum.Enum):
    GroupLeader = "GroupLeader"
    Member = "Member"


class Group(Base):
    __tablename__ = "groups"
    __table_args__ = (UniqueConstraint("project_id", "name", name="uq_groups_project_name"),)

    group_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    project = relationship("Project")
    members = relationship("GroupMember", back_populates="group", cascade="all, delete-orphan")
    selection = relationship(
        "GroupDeliverableSelection", uselist=False, back_populates="group", cascade="all, delete-orphan"
    )


class GroupMember(Base):
    __tablename__ = "group_members"
    __table_args__ = (
        # a student belongs to at most one group per project
        UniqueConstraint("student_id", "project_id", name="uq_group_members_student_project"),
        Index(
            "uq_group_members_one_leader",
            "group_id",
            unique=True,
            sqlite_where=text("role = 'GroupLeader'"),
            postgresql_where=text("role = 'GroupLeader'"),
        ),
    )

    group_id = Column(Integer, ForeignKey("groups.group_id"), primary_key=True)
    student_id = Column(Integer, ForeignKey("students.student_id"), primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.project_id"), nullable=False)
    role = Column(SAEnum(StudentRole), nullable=False, default=StudentRole.Member)
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    group = relationship("Group", back_populates="members")
    student = relationship("Student")

    @property
    def email(self):
        return self.student.email if self.student else None

    @property
    def first_name(self):
        return self.student.first_name if self.student else None

    @property
    def last_name(self):
        return self.student.last_name if self.student else None
