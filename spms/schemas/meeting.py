"""
Meeting and attendance schemas.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import Field, field_validator

from spms.models.project import MeetingStatus, ProjectMeeting
from spms.schemas.common import CamelModel


def as_utc(v: datetime) -> datetime:
    """Normalise to UTC; naive values are taken to already be UTC."""
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class MeetingRecord(CamelModel):
    """A meeting row as stored."""

    id: int
    group_id: int
    guide_staff_id: Optional[int] = None
    date_time: datetime
    purpose: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    status: MeetingStatus
    status_description: Optional[str] = None
    created_at: Optional[datetime] = None


class Attendee(CamelModel):
    student_id: int
    student_name: str
    is_present: bool
    remarks: Optional[str] = None


class StaffMeeting(CamelModel):
    id: int
    group_name: str
    project_title: str
    date_time: datetime
    purpose: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    status: MeetingStatus
    status_description: Optional[str] = None
    attendees: List[Attendee] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class MeetingCreateRequest(CamelModel):
    """Schedule a meeting with one of the caller's groups."""

    group_id: int
    date_time: datetime
    purpose: str = Field(min_length=1, max_length=255)
    location: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = None

    @field_validator("date_time")
    @classmethod
    def normalise_date_time(cls, v: datetime) -> datetime:
        return as_utc(v)


class AttendanceEntry(CamelModel):
    student_id: int
    is_present: bool
    remarks: Optional[str] = None


class AttendanceUpdateRequest(CamelModel):
    """Record who attended; marks the meeting Completed unless told otherwise."""

    attendance: List[AttendanceEntry]
    status: MeetingStatus = MeetingStatus.COMPLETED
    notes: Optional[str] = None


class StudentMeeting(CamelModel):
    id: int
    purpose: str
    location: str
    notes: Optional[str] = None
    status: MeetingStatus
    date_time: datetime
    guide: str
    attendance: Optional[str] = None
    attendance_remarks: Optional[str] = None


class StudentMeetingsResponse(CamelModel):
    all_meetings: List[StudentMeeting] = Field(default_factory=list)
    upcoming_meetings: List[StudentMeeting] = Field(default_factory=list)


def meeting_to_record(meeting: ProjectMeeting) -> MeetingRecord:
    return MeetingRecord(
        id=meeting.id,
        group_id=meeting.group_id,
        guide_staff_id=meeting.guide_staff_id,
        date_time=meeting.meeting_datetime,
        purpose=meeting.purpose,
        location=meeting.location,
        notes=meeting.notes,
        status=meeting.status,
        status_description=meeting.status_description,
        created_at=meeting.created_at,
    )


def meeting_to_staff_view(meeting: ProjectMeeting) -> StaffMeeting:
    """Requires ``group`` and ``attendance.student`` to be loaded."""
    return StaffMeeting(
        id=meeting.id,
        group_name=meeting.group.name if meeting.group else "Unknown Group",
        project_title=(meeting.group.project_title if meeting.group else None) or "Untitled",
        date_time=meeting.meeting_datetime,
        purpose=meeting.purpose,
        location=meeting.location,
        notes=meeting.notes,
        status=meeting.status,
        status_description=meeting.status_description,
        attendees=[
            Attendee(
                student_id=a.student_id,
                student_name=a.student.name if a.student else "Unknown",
                is_present=a.is_present,
                remarks=a.remarks,
            )
            for a in meeting.attendance
        ],
        created_at=meeting.created_at,
    )
