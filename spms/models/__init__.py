"""
SPMS Database Models

This module exports all SQLAlchemy models for the application.
"""

from spms.models.role import Role
from spms.models.principal import Student, Staff, PRINCIPAL_MODELS, principal_model
from spms.models.project import (
    MeetingStatus,
    ProjectType,
    ProjectGroup,
    ProjectGroupMember,
    ProjectMeeting,
    MeetingAttendance,
    ProjectDocument,
)

__all__ = [
    # Principals
    "Role",
    "Student",
    "Staff",
    "PRINCIPAL_MODELS",
    "principal_model",
    # Projects
    "MeetingStatus",
    "ProjectType",
    "ProjectGroup",
    "ProjectGroupMember",
    "ProjectMeeting",
    "MeetingAttendance",
    "ProjectDocument",
]
