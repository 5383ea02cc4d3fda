"""
Query helpers shared by several endpoints.

Async sessions cannot lazy-load, so everything a response builder reads
is eagerly loaded here.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from spms.models.project import ProjectGroup, ProjectGroupMember


def group_load_options():
    return (
        selectinload(ProjectGroup.project_type),
        selectinload(ProjectGroup.guide),
        selectinload(ProjectGroup.convener),
        selectinload(ProjectGroup.expert),
        selectinload(ProjectGroup.members).selectinload(ProjectGroupMember.student),
    )


async def find_membership(
    db: AsyncSession,
    student_id: int,
    with_group: bool = False,
) -> Optional[ProjectGroupMember]:
    """The student's group membership (a student belongs to at most one group)."""
    query = (
        select(ProjectGroupMember)
        .where(ProjectGroupMember.student_id == student_id)
        .order_by(ProjectGroupMember.id)
        .limit(1)
    )
    if with_group:
        query = query.options(
            selectinload(ProjectGroupMember.group).options(*group_load_options())
        )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_group(db: AsyncSession, group_id: int) -> Optional[ProjectGroup]:
    result = await db.execute(
        select(ProjectGroup)
        .where(ProjectGroup.id == group_id)
        .options(*group_load_options())
    )
    return result.scalar_one_or_none()


async def list_associated_groups(db: AsyncSession, staff_id: int) -> list[ProjectGroup]:
    result = await db.execute(
        select(ProjectGroup)
        .where(ProjectGroup.associated_with(staff_id))
        .options(*group_load_options())
        .order_by(ProjectGroup.created_at.desc(), ProjectGroup.id.desc())
    )
    return list(result.scalars().all())
