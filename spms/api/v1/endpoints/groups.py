"""
Project group endpoints.

Staff see the groups they are associated with (as guide, convener or
expert); students see the single group they belong to.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from spms.auth.dependencies import get_current_staff, get_current_student, require_principal
from spms.auth.jwt import TokenPayload
from spms.core.database import get_db
from spms.models.principal import Staff, Student
from spms.models.project import ProjectGroup, ProjectGroupMember
from spms.models.queries import find_membership, group_load_options, list_associated_groups
from spms.schemas.project import (
    ApprovalsResponse,
    GroupMemberEntry,
    GroupMembersResponse,
    GroupSummary,
    StudentProjectResponse,
    group_to_approval,
    group_to_summary,
    membership_to_project,
)

router = APIRouter()


@router.get("/project-groups", response_model=List[GroupSummary])
async def list_project_groups(
    principal: TokenPayload = Depends(require_principal),
    db: AsyncSession = Depends(get_db),
):
    """All project groups, newest first."""
    result = await db.execute(
        select(ProjectGroup)
        .options(*group_load_options())
        .order_by(ProjectGroup.created_at.desc(), ProjectGroup.id.desc())
    )
    return [group_to_summary(g) for g in result.scalars().all()]


@router.get("/staff/project-groups", response_model=List[GroupSummary])
async def list_staff_project_groups(
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    """Groups the caller guides, convenes or examines."""
    groups = await list_associated_groups(db, staff.id)
    return [group_to_summary(g) for g in groups]


@router.get("/staff/approvals", response_model=ApprovalsResponse)
async def list_approvals(
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    """
    The caller's groups split by whether a project title has been submitted.
    """
    groups = [group_to_approval(g) for g in await list_associated_groups(db, staff.id)]
    return ApprovalsResponse(
        groups=groups,
        pending=[g for g in groups if g.status == "Pending"],
        active=[g for g in groups if g.status == "Active"],
    )


@router.get("/student/project", response_model=StudentProjectResponse)
async def get_student_project(
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
):
    membership = await find_membership(db, student.id, with_group=True)
    if membership is None:
        return StudentProjectResponse(project=None)
    return StudentProjectResponse(project=membership_to_project(membership))


@router.get("/student/group-members", response_model=GroupMembersResponse)
async def list_group_members(
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
):
    membership = await find_membership(db, student.id)
    if membership is None:
        return GroupMembersResponse(group_name=None, project_title=None, members=[])

    result = await db.execute(
        select(ProjectGroupMember)
        .where(ProjectGroupMember.group_id == membership.group_id)
        .options(selectinload(ProjectGroupMember.student), selectinload(ProjectGroupMember.group))
        .order_by(ProjectGroupMember.id)
    )
    members = result.scalars().all()
    group = members[0].group if members else None

    return GroupMembersResponse(
        group_name=group.name if group else None,
        project_title=group.project_title if group else None,
        members=[
            GroupMemberEntry(
                id=m.student.id,
                name=m.student.name,
                email=m.student.email,
                phone=m.student.phone,
                is_leader=m.is_group_leader,
                cgpa=m.student_cgpa,
                is_current_user=m.student_id == student.id,
            )
            for m in members
        ],
    )
