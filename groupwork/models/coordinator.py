"""CoordinatorProject ORM model: at most one coordinator per project."""
from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from groupwork.database import Base


class CoordinatorProject(Base):
    __tablename__ = "coordinator_projects"

    coordinator_project_id = Column(Integer, primary_key=True, autoincrement=True)
    admin_id = Column(Integer, ForeignKey("admins.admin_id"), nullable=False, index=True)
    # unique: one coordinator per project at any time
    project_id = Column(Integer, ForeignKey("projects.project_id"), nullable=False, unique=True)
    assigned_at = Column(DateTime(timezone=True), server_default=func.now())

    admin = relationship("Admin")
