from datetime import datetime, timezone

from fastapi import APIRouter

from ..routers import auth as auth_router
from ..routers import tasks as tasks_router

api_router = APIRouter(prefix="/api")

# Endpoints end up at /api/auth/... and /api/tasks/...
api_router.include_router(auth_router.router)
api_router.include_router(tasks_router.router)


@api_router.get("", tags=["meta"])  # lightweight meta endpoint
def api_info():
    return {
        "success": True,
        "name": "Taskboard API",
        "version": "1.0.0",
        "docs": "/docs",
        "auth": {
            "signup": "/api/auth/signup",
            "login": "/api/auth/login",
            "me": "/api/auth/me",
            "profile": "/api/auth/profile",
        },
        "tasks": "/api/tasks",
        "stats": "/api/tasks/stats",
    }


@api_router.get("/health", tags=["meta"])
def health():
    """Simple healthcheck endpoint."""
    return {
        "success": True,
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
