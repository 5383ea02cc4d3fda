"""
Dashboard statistics and evaluation endpoints.
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from spms.auth.dependencies import get_current_staff, get_current_student
from spms.core.database import get_db
from spms.core.errors import AuthorizationError, NotFoundError
from spms.models.principal import Staff, Student
from spms.models.project import (
    MeetingAttendance,
    MeetingStatus,
    ProjectDocument,
    ProjectGroup,
    ProjectGroupMember,
    ProjectMeeting,
)
from spms.models.queries import find_membership, get_group, list_associated_groups
from spms.schemas.dashboard import (
    DashboardMeeting,
    DashboardMember,
    DashboardProject,
    EvaluationAttendee,
    EvaluationMeeting,
    EvaluationsResponse,
    GroupEvaluationSummary,
    MemberAttendance,
    StaffDashboardStats,
    StudentDashboardResponse,
    StudentStats,
    percentage,
)
from spms.schemas.project import GradeRequest, GroupSummary, group_status, group_to_summary

logger = logging.getLogger(__name__)

router = APIRouter()

UPCOMING_ON_DASHBOARD = 3


async def _count(db: AsyncSession, query) -> int:
    result = await db.execute(query)
    return result.scalar() or 0


# =============================================================================
# Student
# =============================================================================

@router.get("/student/dashboard/stats", response_model=StudentDashboardResponse)
async def student_dashboard(
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
):
    membership = await find_membership(db, student.id, with_group=True)
    if membership is None:
        return StudentDashboardResponse()

    group = membership.group

    meetings_done = await _count(
        db,
        select(func.count(ProjectMeeting.id)).where(
            ProjectMeeting.group_id == group.id,
            ProjectMeeting.status == MeetingStatus.COMPLETED,
        ),
    )
    documents = await _count(
        db,
        select(func.count(ProjectDocument.id)).where(ProjectDocument.group_id == group.id),
    )

    # Attendance is measured over the meetings where it was actually taken
    result = await db.execute(
        select(MeetingAttendance.is_present).where(MeetingAttendance.student_id == student.id)
    )
    records = result.scalars().all()
    attendance = percentage(sum(1 for present in records if present), len(records))

    result = await db.execute(
        select(ProjectMeeting)
        .where(
            ProjectMeeting.group_id == group.id,
            ProjectMeeting.meeting_datetime > datetime.now(timezone.utc),
        )
        .order_by(ProjectMeeting.meeting_datetime.asc())
        .limit(UPCOMING_ON_DASHBOARD)
    )
    upcoming = result.scalars().all()

    return StudentDashboardResponse(
        stats=StudentStats(
            attendance=attendance,
            tasks_pending=0,
            meetings_done=meetings_done,
            documents=documents,
        ),
        project=DashboardProject(
            title=group.project_title or "Untitled Project",
            type=group.project_type.name if group.project_type else "N/A",
            guide=group.guide.name if group.guide else "Not Assigned",
            status=group_status(group),
            description=group.project_description,
            grade=group.grade,
        ),
        upcoming_meetings=[
            DashboardMeeting(
                id=m.id,
                title=m.purpose or "Meeting",
                date=m.meeting_datetime,
                status=m.status,
                location=m.location,
            )
            for m in upcoming
        ],
        members=[
            DashboardMember(
                id=m.student_id,
                name=m.student.name,
                role="Leader" if m.is_group_leader else "Member",
            )
            for m in group.members
        ],
    )


# =============================================================================
# Staff
# =============================================================================

@router.get("/staff/dashboard/stats", response_model=StaffDashboardStats)
async def staff_dashboard(
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    groups = await list_associated_groups(db, staff.id)
    student_ids = {m.student_id for g in groups for m in g.members}

    total_meetings = await _count(
        db,
        select(func.count(ProjectMeeting.id)).where(ProjectMeeting.guide_staff_id == staff.id),
    )
    upcoming_meetings = await _count(
        db,
        select(func.count(ProjectMeeting.id)).where(
            ProjectMeeting.guide_staff_id == staff.id,
            ProjectMeeting.status == MeetingStatus.SCHEDULED,
        ),
    )

    return StaffDashboardStats(
        groups_supervised=len(groups),
        total_meetings=total_meetings,
        total_students=len(student_ids),
        upcoming_meetings=upcoming_meetings,
    )


@router.get("/staff/evaluations", response_model=EvaluationsResponse)
async def staff_evaluations(
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    """
    Meetings the caller guided with per-meeting attendance rates, and per
    group a member-by-member attendance summary over completed meetings.
    """
    result = await db.execute(
        select(ProjectMeeting)
        .where(ProjectMeeting.guide_staff_id == staff.id)
        .options(
            selectinload(ProjectMeeting.group).selectinload(ProjectGroup.project_type),
            selectinload(ProjectMeeting.group)
            .selectinload(ProjectGroup.members)
            .selectinload(ProjectGroupMember.student),
            selectinload(ProjectMeeting.attendance).selectinload(MeetingAttendance.student),
        )
        .order_by(ProjectMeeting.meeting_datetime.desc())
    )
    meetings = result.scalars().all()

    evaluated = []
    by_group: dict[int, list[ProjectMeeting]] = defaultdict(list)
    for m in meetings:
        present = sum(1 for a in m.attendance if a.is_present)
        total = len(m.attendance)
        group = m.group
        evaluated.append(EvaluationMeeting(
            id=m.id,
            group_name=group.name if group else "N/A",
            project_title=(group.project_title if group else None) or "N/A",
            project_type=group.project_type.name if group and group.project_type else "N/A",
            purpose=m.purpose or "Meeting",
            location=m.location or "N/A",
            notes=m.notes,
            status=m.status,
            date_time=m.meeting_datetime,
            attendance_rate=percentage(present, total) if total else None,
            present_count=present,
            total_count=total,
            attendance=[
                EvaluationAttendee(
                    student_id=a.student_id,
                    student_name=a.student.name if a.student else "Unknown",
                    email=a.student.email if a.student else None,
                    is_present=a.is_present,
                    remarks=a.remarks,
                )
                for a in m.attendance
            ],
        ))
        by_group[m.group_id].append(m)

    summaries = []
    for group_meetings in by_group.values():
        group = group_meetings[0].group
        completed = [m for m in group_meetings if m.status == MeetingStatus.COMPLETED]
        member_attendance = []
        for member in group.members:
            attended = sum(
                1 for m in completed
                if any(a.student_id == member.student_id and a.is_present for a in m.attendance)
            )
            member_attendance.append(MemberAttendance(
                student_id=member.student_id,
                student_name=member.student.name if member.student else "Unknown",
                attended=attended,
                total=len(completed),
                percentage=percentage(attended, len(completed)),
            ))
        summaries.append(GroupEvaluationSummary(
            group_id=group.id,
            group_name=group.name,
            project_title=group.project_title or "N/A",
            type=group.project_type.name if group.project_type else "N/A",
            total_meetings=len(group_meetings),
            completed_meetings=len(completed),
            member_attendance=member_attendance,
        ))

    return EvaluationsResponse(meetings=evaluated, group_summaries=summaries)


@router.post("/staff/evaluations/grade", response_model=GroupSummary)
async def grade_group(
    grade_data: GradeRequest,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    group = await get_group(db, grade_data.group_id)
    if group is None:
        raise NotFoundError("Project group not found")

    if not group.is_associated_with(staff.id):
        raise AuthorizationError("You are not authorized to grade this group")

    group.grade = grade_data.grade
    await db.commit()

    logger.info("Group %s graded %r by staff %s", group.id, group.grade, staff.id)
    return group_to_summary(group)
