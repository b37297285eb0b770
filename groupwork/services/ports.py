"""Read-only query ports shared between services.

Services that need another component's knowledge (is this student the
leader? is this coordinator assigned?) receive one of these narrow
interfaces instead of reaching into the other component's tables.
"""
from typing import Protocol


class MembershipQueries(Protocol):
    def is_group_leader(self, student_id: int, group_id: int) -> bool: ...

    def is_student_in_project(self, student_id: int, project_id: int) -> bool: ...


class CoordinatorQueries(Protocol):
    def is_assigned(self, admin_id: int, project_id: int) -> bool: ...
