"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from groupwork.config import settings
from groupwork.database import Base, engine
from groupwork.exception_handlers import setup_exception_handlers

# Import routers
from groupwork.routers import (
    admin_groups, coordinators, groups, implementation_details, security_codes, selections,
)

# Import all models so Base.metadata knows about them
import groupwork.models  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Group Work",
    description="Course project group formation and deliverable selection",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Register routers
app.include_router(security_codes.router, prefix="/api/admin/security-codes", tags=["SecurityCodes"])
app.include_router(security_codes.validate_router, prefix="/api/security-codes", tags=["SecurityCodes"])
app.include_router(coordinators.router, prefix="/api/admin/projects", tags=["Coordinators"])
app.include_router(groups.router, prefix="/api/groups", tags=["Groups"])
app.include_router(admin_groups.router, prefix="/api/admin/groups", tags=["AdminGroups"])
app.include_router(selections.group_router, prefix="/api/groups", tags=["DeliverableSelections"])
app.include_router(selections.student_router, prefix="/api/deliverable-selection", tags=["DeliverableSelections"])
app.include_router(selections.admin_router, prefix="/api/admin/projects", tags=["DeliverableSelections"])
app.include_router(implementation_details.router, prefix="/api/groups", tags=["ImplementationDetails"])
app.include_router(
    implementation_details.selection_router, prefix="/api/deliverable-selections", tags=["ImplementationDetails"]
)


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("groupwork.main:app", host="0.0.0.0", port=8000, reload=True)
