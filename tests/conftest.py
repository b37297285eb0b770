"""Pytest fixtures: a fresh SQLite database per test, plus catalog seeding helpers."""
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from fastapi.testclient import TestClient

from groupwork.database import Base, get_db
from groupwork.main import app

# Import all models so they register with Base.metadata
from groupwork.models.user import Admin, AdminRole, Student
from groupwork.models.project import (
    GroupDeliverable,
    GroupDeliverableComponent,
    GroupDeliverablesComponent,
    Project,
    StudentDeliverable,
)
from groupwork.models.security_code import SecurityCode
import groupwork.models  # noqa: F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session bound to the test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Principal headers forwarded by the authentication gateway
# ---------------------------------------------------------------------------
def student_headers(student_id: int) -> dict:
    return {"X-Principal-Id": str(student_id), "X-Principal-Kind": "Student"}


def admin_headers(admin_id: int, role: str = "Professor") -> dict:
    return {"X-Principal-Id": str(admin_id), "X-Principal-Kind": "Admin", "X-Principal-Role": role}


# ---------------------------------------------------------------------------
# Catalog seeding helpers (the catalog is owned elsewhere, tests write it directly)
# ---------------------------------------------------------------------------
def utc_in(**delta) -> datetime:
    return datetime.now(timezone.utc) + timedelta(**delta)


def seed_project(
    db: Session,
    name: str = "Capstone",
    max_group_size: int = 3,
    deadline: Optional[datetime] = None,
) -> Project:
    """Helper: insert a project; no deadline unless one is given."""
    project = Project(
        name=name, year=2026, max_group_size=max_group_size,
        deliverable_selection_deadline=deadline, active=True,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


def seed_student(db: Session, email: str, first_name: str = "Ada", last_name: str = "Lovelace",
                 is_pending: bool = False) -> Student:
    student = Student(email=email, first_name=first_name, last_name=last_name, is_pending=is_pending)
    db.add(student)
    db.commit()
    db.refresh(student)
    return student


def seed_admin(db: Session, email: str, role: AdminRole = AdminRole.Professor) -> Admin:
    admin = Admin(email=email, first_name="Grace", last_name="Hopper", role=role)
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


def seed_group_deliverable(db: Session, project: Project, name: str = "Web App",
                           components: tuple = ("Frontend", "Backend")) -> GroupDeliverable:
    """Helper: insert a group deliverable linked to freshly created components."""
    deliverable = GroupDeliverable(project_id=project.project_id, name=name)
    db.add(deliverable)
    db.flush()
    for component_name in components:
        component = GroupDeliverableComponent(project_id=project.project_id, name=component_name)
        db.add(component)
        db.flush()
        db.add(GroupDeliverablesComponent(
            group_deliverable_id=deliverable.group_deliverable_id,
            group_deliverable_component_id=component.group_deliverable_component_id,
        ))
    db.commit()
    db.refresh(deliverable)
    return deliverable


def component_ids(db: Session, deliverable: GroupDeliverable) -> list[int]:
    rows = (
        db.query(GroupDeliverablesComponent)
        .filter(GroupDeliverablesComponent.group_deliverable_id == deliverable.group_deliverable_id)
        .order_by(GroupDeliverablesComponent.id)
        .all()
    )
    return [row.group_deliverable_component_id for row in rows]


def seed_student_deliverable(db: Session, project: Project, name: str = "Report") -> StudentDeliverable:
    deliverable = StudentDeliverable(project_id=project.project_id, name=name)
    db.add(deliverable)
    db.commit()
    db.refresh(deliverable)
    return deliverable


def seed_security_code(db: Session, project: Project, code: str = "ABC-123",
                       expiration: Optional[datetime] = None) -> SecurityCode:
    """Helper: insert a code directly, bypassing the minimum lifetime rule."""
    row = SecurityCode(project_id=project.project_id, code=code, expiration=expiration or utc_in(days=7))
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def create_test_group(client: TestClient, student_id: int, code: str = "ABC-123", name: str = "Alpha") -> dict:
    """Helper: POST /api/groups as a student and return response JSON."""
    resp = client.post("/api/groups/", json={"name": name, "security_code": code},
                       headers=student_headers(student_id))
    assert resp.status_code == 201, resp.text
    return resp.json()


def add_test_member(client: TestClient, leader_id: int, group_id: int, email: str) -> dict:
    resp = client.post(f"/api/groups/{group_id}/members", json={"student_email": email},
                       headers=student_headers(leader_id))
    assert resp.status_code == 201, resp.text
    return resp.json()
