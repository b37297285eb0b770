"""SecurityCode ORM model: project-scoped group creation codes."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from groupwork.database import Base


class SecurityCode(Base):
    __tablename__ = "security_codes"

    security_code_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id"), nullable=False)
    code = Column(String(7), nullable=False, unique=True)
    expiration = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    project = relationship("Project")

    @property
    def project_name(self):
        return self.project.name if self.project else None
