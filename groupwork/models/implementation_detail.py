"""GroupComponentImplementationDetail ORM model."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from groupwork.database import Base


class GroupComponentImplementationDetail(Base):
    __tablename__ = "group_component_implementation_details"
    __table_args__ = (
        UniqueConstraint(
            "group_deliverable_selection_id",
            "group_deliverable_component_id",
            name="uq_implementation_details_selection_component",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_deliverable_selection_id = Column(
        Integer,
        ForeignKey("group_deliverable_selections.group_deliverable_selection_id", ondelete="CASCADE"),
        nullable=False,
    )
    group_deliverable_component_id = Column(
        Integer,
        ForeignKey("group_deliverable_components.group_deliverable_component_id", ondelete="CASCADE"),
        nullable=False,
    )
    markdown_description = Column(Text, nullable=False)
    repository_link = Column(String(500), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    selection = relationship("GroupDeliverableSelection", back_populates="implementation_details")
    component = relationship("GroupDeliverableComponent")

    @property
    def component_name(self) -> str:
        # components can be dropped from the catalog after the detail was written
        if self.component is None:
            return f"Unknown Component {self.group_deliverable_component_id}"
        return self.component.name
