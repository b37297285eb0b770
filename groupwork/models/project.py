"""Project and deliverable catalog ORM models."""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from groupwork.database import Base


class Project(Base):
    __tablename__ = "projects"

    project_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    year = Column(Integer, nullable=False)
    max_group_size = Column(Integer, nullable=False)
    deliverable_selection_deadline = Column(DateTime(timezone=True), nullable=True)
    active = Column(Boolean, nullable=False, default=True)


class GroupDeliverable(Base):
    __tablename__ = "group_deliverables"

    group_deliverable_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id"), nullable=False)
    name = Column(String(150), nullable=False)

    components = relationship("GroupDeliverablesComponent", cascade="all, delete-orphan")


class GroupDeliverableComponent(Base):
    __tablename__ = "group_deliverable_components"

    group_deliverable_component_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id"), nullable=False)
    name = Column(String(150), nullable=False)


class GroupDeliverablesComponent(Base):
    """Links a deliverable to the components it is made of."""

    __tablename__ = "group_deliverables_components"
    __table_args__ = (
        UniqueConstraint("group_deliverable_id", "group_deliverable_component_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_deliverable_id = Column(
        Integer, ForeignKey("group_deliverables.group_deliverable_id"), nullable=False
    )
    group_deliverable_component_id = Column(
        Integer,
        ForeignKey("group_deliverable_components.group_deliverable_component_id"),
        nullable=False,
    )


class StudentDeliverable(Base):
    __tablename__ = "student_deliverables"

    student_deliverable_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id"), nullable=False)
    name = Column(String(150), nullable=False)
