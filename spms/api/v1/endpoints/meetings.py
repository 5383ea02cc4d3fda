"""
Meeting scheduling and attendance endpoints.

Staff schedule meetings for groups they are associated with and record
attendance for meetings they guide. Students read their group's meetings
along with their own attendance.
"""

import logging
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from spms.auth.dependencies import get_current_staff, get_current_student, require_principal
from spms.auth.jwt import TokenPayload
from spms.core.database import get_db
from spms.core.errors import AuthorizationError, NotFoundError, ValidationError
from spms.models.principal import Staff, Student
from spms.models.project import (
    MeetingAttendance,
    MeetingStatus,
    ProjectGroup,
    ProjectGroupMember,
    ProjectMeeting,
)
from spms.models.queries import find_membership
from spms.schemas.common import MessageResponse
from spms.schemas.meeting import (
    AttendanceUpdateRequest,
    MeetingCreateRequest,
    MeetingRecord,
    StaffMeeting,
    StudentMeeting,
    StudentMeetingsResponse,
    meeting_to_record,
    meeting_to_staff_view,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _staff_meeting_options():
    return (
        selectinload(ProjectMeeting.group),
        selectinload(ProjectMeeting.attendance).selectinload(MeetingAttendance.student),
    )


async def _load_staff_meeting(db: AsyncSession, meeting_id: int) -> ProjectMeeting:
    result = await db.execute(
        select(ProjectMeeting)
        .where(ProjectMeeting.id == meeting_id)
        .options(*_staff_meeting_options())
        .execution_options(populate_existing=True)
    )
    meeting = result.scalar_one_or_none()
    if meeting is None:
        raise NotFoundError("Meeting not found")
    return meeting


# =============================================================================
# Shared listings
# =============================================================================

@router.get("/meetings", response_model=List[MeetingRecord])
async def list_meetings(
    principal: TokenPayload = Depends(require_principal),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(ProjectMeeting).order_by(ProjectMeeting.meeting_datetime.desc()))
    return [meeting_to_record(m) for m in result.scalars().all()]


@router.get("/meetings/{staff_id}", response_model=List[MeetingRecord])
async def list_meetings_by_guide(
    staff_id: int,
    principal: TokenPayload = Depends(require_principal),
    db: AsyncSession = Depends(get_db),
):
    """Meetings guided by the given staff member."""
    result = await db.execute(
        select(ProjectMeeting)
        .where(ProjectMeeting.guide_staff_id == staff_id)
        .order_by(ProjectMeeting.meeting_datetime.desc())
    )
    return [meeting_to_record(m) for m in result.scalars().all()]


# =============================================================================
# Staff
# =============================================================================

@router.get("/staff/meetings", response_model=List[StaffMeeting])
async def list_staff_meetings(
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(ProjectMeeting)
        .where(ProjectMeeting.guide_staff_id == staff.id)
        .options(*_staff_meeting_options())
        .order_by(ProjectMeeting.meeting_datetime.desc())
    )
    return [meeting_to_staff_view(m) for m in result.scalars().all()]


@router.post("/staff/meetings", response_model=StaffMeeting, status_code=status.HTTP_201_CREATED)
async def schedule_meeting(
    meeting_data: MeetingCreateRequest,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    """Schedule a meeting guided by the caller."""
    group = await db.get(ProjectGroup, meeting_data.group_id)
    if group is None:
        raise NotFoundError("Project group not found")

    if not group.is_associated_with(staff.id):
        raise AuthorizationError("You are not authorized to schedule meetings for this project group")

    meeting = ProjectMeeting(
        group_id=group.id,
        guide_staff_id=staff.id,
        meeting_datetime=meeting_data.date_time,
        purpose=meeting_data.purpose,
        location=meeting_data.location,
        notes=meeting_data.notes,
        status=MeetingStatus.SCHEDULED,
    )
    db.add(meeting)
    await db.commit()

    logger.info("Meeting %s scheduled for group %s by staff %s", meeting.id, group.id, staff.id)
    return meeting_to_staff_view(await _load_staff_meeting(db, meeting.id))


@router.put("/staff/meetings/{meeting_id}/attendance", response_model=StaffMeeting)
async def record_attendance(
    meeting_id: int,
    attendance_data: AttendanceUpdateRequest,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    """
    Record attendance for a meeting the caller guides.

    Entries replace any earlier record for the same student.
    """
    meeting = await _load_staff_meeting(db, meeting_id)

    if meeting.guide_staff_id != staff.id:
        raise AuthorizationError("Only the meeting's guide can record attendance")

    result = await db.execute(
        select(ProjectGroupMember.student_id).where(ProjectGroupMember.group_id == meeting.group_id)
    )
    member_ids = set(result.scalars().all())

    outsiders = sorted({e.student_id for e in attendance_data.attendance} - member_ids)
    if outsiders:
        raise ValidationError(f"Students {outsiders} are not members of this project group")

    existing = {a.student_id: a for a in meeting.attendance}
    for entry in attendance_data.attendance:
        record = existing.get(entry.student_id)
        if record is None:
            record = MeetingAttendance(student_id=entry.student_id)
            meeting.attendance.append(record)
            existing[entry.student_id] = record
        record.is_present = entry.is_present
        record.remarks = entry.remarks

    meeting.status = attendance_data.status
    if attendance_data.notes is not None:
        meeting.notes = attendance_data.notes

    await db.commit()

    # Reload so new rows come back with their students
    return meeting_to_staff_view(await _load_staff_meeting(db, meeting_id))


@router.delete("/staff/meetings/{meeting_id}", response_model=MessageResponse)
async def delete_meeting(
    meeting_id: int,
    staff: Staff = Depends(get_current_staff),
    db: AsyncSession = Depends(get_db),
):
    meeting = await db.get(ProjectMeeting, meeting_id)
    if meeting is None:
        raise NotFoundError("Meeting not found")

    group = await db.get(ProjectGroup, meeting.group_id)
    if group is None or not group.is_associated_with(staff.id):
        raise AuthorizationError("You are not authorized to delete meetings for this project group")

    await db.delete(meeting)
    await db.commit()

    logger.info("Meeting %s deleted by staff %s", meeting_id, staff.id)
    return MessageResponse(message="Meeting deleted successfully")


# =============================================================================
# Student
# =============================================================================

def _attendance_label(records: list[MeetingAttendance]) -> str:
    if not records:
        return "Not Recorded"
    return "Present" if records[0].is_present else "Absent"


def _student_meeting(meeting: ProjectMeeting, records: list[MeetingAttendance] | None = None) -> StudentMeeting:
    return StudentMeeting(
        id=meeting.id,
        purpose=meeting.purpose or "Meeting",
        location=meeting.location or "TBD",
        notes=meeting.notes,
        status=meeting.status,
        date_time=meeting.meeting_datetime,
        guide=meeting.guide.name if meeting.guide else "Not Assigned",
        attendance=_attendance_label(records) if records is not None else None,
        attendance_remarks=records[0].remarks if records else None,
    )


@router.get("/student/meetings", response_model=StudentMeetingsResponse)
async def list_student_meetings(
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
):
    """
    All of the group's meetings (newest first) with the caller's attendance,
    plus the scheduled meetings still ahead (soonest first).
    """
    membership = await find_membership(db, student.id)
    if membership is None:
        return StudentMeetingsResponse()

    result = await db.execute(
        select(ProjectMeeting)
        .where(ProjectMeeting.group_id == membership.group_id)
        .options(selectinload(ProjectMeeting.guide), selectinload(ProjectMeeting.attendance))
        .order_by(ProjectMeeting.meeting_datetime.desc())
    )
    meetings = result.scalars().all()

    now = datetime.now(timezone.utc)
    upcoming = sorted(
        (
            m for m in meetings
            if m.status == MeetingStatus.SCHEDULED and m.meeting_datetime > now
        ),
        key=lambda m: m.meeting_datetime,
    )

    return StudentMeetingsResponse(
        all_meetings=[
            _student_meeting(m, [a for a in m.attendance if a.student_id == student.id])
            for m in meetings
        ],
        upcoming_meetings=[_student_meeting(m) for m in upcoming],
    )