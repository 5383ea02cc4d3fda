"""
API Router configuration.

Aggregates all v1 API endpoints with proper tagging and prefixes.
"""

from fastapi import APIRouter

from spms.api.v1.endpoints import (
    auth,
    dashboard,
    documents,
    groups,
    meetings,
    profile,
)

api_router = APIRouter()

# Authentication (no session required)
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["authentication"]
)

# Own profile and password
api_router.include_router(
    profile.router,
    prefix="/profile",
    tags=["profile"]
)

# Project groups (shared, staff and student views)
api_router.include_router(
    groups.router,
    tags=["project-groups"]
)

# Meetings and attendance
api_router.include_router(
    meetings.router,
    tags=["meetings"]
)

# Student project documents
api_router.include_router(
    documents.router,
    prefix="/student/documents",
    tags=["documents"]
)

# Dashboards and evaluations
api_router.include_router(
    dashboard.router,
    tags=["dashboard"]
)
