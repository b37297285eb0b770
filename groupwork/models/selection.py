"""Group and student deliverable selection ORM models."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from groupwork.database import Base


class GroupDeliverableSelection(Base):
    __tablename__ = "group_deliverable_selections"

    group_deliverable_selection_id = Column(Integer, primary_key=True, autoincrement=True)
    # unique: a group selects exactly once
    group_id = Column(Integer, ForeignKey("groups.group_id"), nullable=False, unique=True)
    group_deliverable_id = Column(
        Integer, ForeignKey("group_deliverables.group_deliverable_id"), nullable=False
    )
    link = Column(String(500), nullable=True, unique=True)
    markdown_text = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    group = relationship("Group", back_populates="selection")
    deliverable = relationship("GroupDeliverable")
    implementation_details = relationship(
        "GroupComponentImplementationDetail",
        back_populates="selection",
        cascade="all, delete-orphan",
    )

    @property
    def group_deliverable_name(self) -> str:
        if self.deliverable is None:
            return f"Unknown Deliverable {self.group_deliverable_id}"
        return self.deliverable.name

    @property
    def group_name(self) -> str:
        return self.group.name if self.group else ""


class StudentDeliverableSelection(Base):
    __tablename__ = "student_deliverable_selections"
    __table_args__ = (
        UniqueConstraint("student_id", "project_id", name="uq_student_selections_student_project"),
    )

    student_deliverable_selection_id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.student_id"), nullable=False)
    project_id = Column(Integer, ForeignKey("projects.project_id"), nullable=False)
    student_deliverable_id = Column(
        Integer, ForeignKey("student_deliverables.student_deliverable_id"), nullable=False
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    deliverable = relationship("StudentDeliverable")
    student = relationship("Student")

    @property
    def student_deliverable_name(self) -> str:
        if self.deliverable is None:
            return f"Unknown Deliverable {self.student_deliverable_id}"
        return self.deliverable.name

