# Import all models so Base.metadata and relationship() resolution know about them
from groupwork.models.user import Admin, AdminRole, Student  # noqa: F401
from groupwork.models.project import (  # noqa: F401
    GroupDeliverable,
    GroupDeliverableComponent,
    GroupDeliverablesComponent,
    Project,
    StudentDeliverable,
)
from groupwork.models.security_code import SecurityCode  # noqa: F401
from groupwork.models.coordinator import CoordinatorProject  # noqa: F401
from groupwork.models.group import Group, GroupMember, StudentRole  # noqa: F401
from groupwork.models.selection import (  # noqa: F401
    GroupDeliverableSelection,
    StudentDeliverableSelection,
)
from groupwork.models.implementation_detail import GroupComponentImplementationDetail  # noqa: F401
