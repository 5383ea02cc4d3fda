"""
Project group schemas and the helpers that build them from ORM rows.

The builders expect the relationships they read (members and their
students, supervising staff, project type) to be eagerly loaded.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from spms.models.project import ProjectGroup, ProjectGroupMember
from spms.schemas.common import CamelModel

NOT_ASSIGNED = "Not Assigned"


class GroupSummary(CamelModel):
    """One row of a project group listing."""

    id: int
    group_name: str
    project_title: Optional[str] = None
    project_area: Optional[str] = None
    type: str
    guide: str
    convener: str
    expert: str
    average_cpi: Optional[float] = Field(default=None, alias="averageCPI")
    grade: Optional[str] = None
    leader_name: str
    leader_email: str
    total_members: int
    member_names: List[str] = Field(default_factory=list)
    status: str
    created_at: Optional[datetime] = None


class ApprovalMember(CamelModel):
    id: int
    name: str
    email: str
    is_leader: bool


class ApprovalGroup(CamelModel):
    id: int
    group_name: str
    project_title: str
    project_area: str
    type: str
    status: str
    guide: str
    convener: str
    expert: str
    total_members: int
    leader_name: str
    leader_email: Optional[str] = None
    members: List[ApprovalMember] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class ApprovalsResponse(CamelModel):
    groups: List[ApprovalGroup]
    pending: List[ApprovalGroup]
    active: List[ApprovalGroup]


class StudentProject(CamelModel):
    group_id: int
    group_name: str
    title: str
    area: Optional[str] = None
    description: Optional[str] = None
    type: str
    guide: str
    convener: str
    expert: str
    average_cpi: Optional[float] = Field(default=None, alias="averageCPI")
    grade: Optional[str] = None
    status: str
    is_leader: bool


class StudentProjectResponse(CamelModel):
    project: Optional[StudentProject] = None


class GroupMemberEntry(CamelModel):
    id: int
    name: str
    email: str
    phone: str
    is_leader: bool
    cgpa: Optional[float] = None
    is_current_user: bool


class GroupMembersResponse(CamelModel):
    group_name: Optional[str] = None
    project_title: Optional[str] = None
    members: List[GroupMemberEntry] = Field(default_factory=list)


class GradeRequest(CamelModel):
    """Grade a group; a null grade clears it."""

    group_id: int
    grade: Optional[str] = Field(default=None, max_length=16)


# =============================================================================
# Builders
# =============================================================================

def _staff_name(staff) -> str:
    return staff.name if staff is not None else NOT_ASSIGNED


def group_status(group: ProjectGroup) -> str:
    return "Active" if group.has_title else "Draft"


def group_to_summary(group: ProjectGroup) -> GroupSummary:
    leader = group.leader
    return GroupSummary(
        id=group.id,
        group_name=group.name,
        project_title=group.project_title,
        project_area=group.project_area,
        type=group.project_type.name if group.project_type else "Unassigned",
        guide=_staff_name(group.guide),
        convener=_staff_name(group.convener),
        expert=_staff_name(group.expert),
        average_cpi=group.average_cpi,
        grade=group.grade,
        leader_name=leader.student.name if leader else "No Leader",
        leader_email=leader.student.email if leader else "",
        total_members=len(group.members),
        member_names=[m.student.name for m in group.members if m is not leader],
        status=group_status(group),
        created_at=group.created_at,
    )


def group_to_approval(group: ProjectGroup) -> ApprovalGroup:
    leader = group.leader
    return ApprovalGroup(
        id=group.id,
        group_name=group.name,
        project_title=group.project_title if group.has_title else "Not Submitted",
        project_area=group.project_area or "N/A",
        type=group.project_type.name if group.project_type else "N/A",
        status="Active" if group.has_title else "Pending",
        guide=_staff_name(group.guide),
        convener=_staff_name(group.convener),
        expert=_staff_name(group.expert),
        total_members=len(group.members),
        leader_name=leader.student.name if leader else "No Leader",
        leader_email=leader.student.email if leader else None,
        members=[
            ApprovalMember(
                id=m.student.id,
                name=m.student.name,
                email=m.student.email,
                is_leader=m.is_group_leader,
            )
            for m in group.members
        ],
        created_at=group.created_at,
    )


def membership_to_project(membership: ProjectGroupMember) -> StudentProject:
    group = membership.group
    return StudentProject(
        group_id=group.id,
        group_name=group.name,
        title=group.project_title or "Untitled Project",
        area=group.project_area,
        description=group.project_description,
        type=group.project_type.name if group.project_type else "N/A",
        guide=_staff_name(group.guide),
        convener=_staff_name(group.convener),
        expert=_staff_name(group.expert),
        average_cpi=group.average_cpi,
        grade=group.grade,
        status=group_status(group),
        is_leader=membership.is_group_leader,
    )
