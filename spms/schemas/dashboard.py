"""
Dashboard and evaluation schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from spms.models.project import MeetingStatus
from spms.schemas.common import CamelModel


class StudentStats(CamelModel):
    attendance: int = 0
    tasks_pending: int = 0
    meetings_done: int = 0
    documents: int = 0


class DashboardProject(CamelModel):
    title: str
    type: str
    guide: str
    status: str
    description: Optional[str] = None
    grade: Optional[str] = None


class DashboardMeeting(CamelModel):
    id: int
    title: str
    date: datetime
    status: MeetingStatus
    location: Optional[str] = None


class DashboardMember(CamelModel):
    id: int
    name: str
    role: str


class StudentDashboardResponse(CamelModel):
    stats: StudentStats = Field(default_factory=StudentStats)
    project: Optional[DashboardProject] = None
    upcoming_meetings: List[DashboardMeeting] = Field(default_factory=list)
    members: List[DashboardMember] = Field(default_factory=list)


class StaffDashboardStats(CamelModel):
    groups_supervised: int
    total_meetings: int
    total_students: int
    upcoming_meetings: int


class EvaluationAttendee(CamelModel):
    student_id: int
    student_name: str
    email: Optional[str] = None
    is_present: bool
    remarks: Optional[str] = None


class EvaluationMeeting(CamelModel):
    id: int
    group_name: str
    project_title: str
    project_type: str
    purpose: str
    location: str
    notes: Optional[str] = None
    status: MeetingStatus
    date_time: datetime
    attendance_rate: Optional[int] = None
    present_count: int
    total_count: int
    attendance: List[EvaluationAttendee] = Field(default_factory=list)


class MemberAttendance(CamelModel):
    student_id: int
    student_name: str
    attended: int
    total: int
    percentage: int


class GroupEvaluationSummary(CamelModel):
    group_id: int
    group_name: str
    project_title: str
    type: str
    total_meetings: int
    completed_meetings: int
    member_attendance: List[MemberAttendance] = Field(default_factory=list)


class EvaluationsResponse(CamelModel):
    meetings: List[EvaluationMeeting] = Field(default_factory=list)
    group_summaries: List[GroupEvaluationSummary] = Field(default_factory=list)


def percentage(part: int, whole: int) -> int:
    """Percentage rounded half up, 0 when there is nothing to divide by."""
    if whole <= 0:
        return 0
    return (part * 200 + whole) // (2 * whole)
