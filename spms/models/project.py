"""
Project group, meeting, attendance and document models.

A staff member takes part in a group in up to three capacities (guide,
convener, expert); any of them counts as being associated with the group.
"""

from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import List, Optional

from sqlalchemy import (
    Boolean, Enum, Float, ForeignKey, String, Text, UniqueConstraint, or_
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spms.core.database import Base, UTCDateTime
from spms.models.principal import Staff, Student


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MeetingStatus(str, PyEnum):
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class ProjectType(Base):
    __tablename__ = "project_types"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<ProjectType {self.name}>"


class ProjectGroup(Base):
    __tablename__ = "project_groups"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Project details (filled in by the group once the topic is agreed)
    project_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    project_area: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    project_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    project_type_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("project_types.id", ondelete="SET NULL"), nullable=True
    )

    # Supervising staff
    guide_staff_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("staff.id", ondelete="SET NULL"), nullable=True, index=True
    )
    convener_staff_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("staff.id", ondelete="SET NULL"), nullable=True, index=True
    )
    expert_staff_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("staff.id", ondelete="SET NULL"), nullable=True, index=True
    )

    average_cpi: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    grade: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(timezone=True), default=utcnow)

    # Relationships
    project_type: Mapped[Optional["ProjectType"]] = relationship("ProjectType")
    guide: Mapped[Optional["Staff"]] = relationship("Staff", foreign_keys=[guide_staff_id])
    convener: Mapped[Optional["Staff"]] = relationship("Staff", foreign_keys=[convener_staff_id])
    expert: Mapped[Optional["Staff"]] = relationship("Staff", foreign_keys=[expert_staff_id])
    members: Mapped[List["ProjectGroupMember"]] = relationship(
        "ProjectGroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    meetings: Mapped[List["ProjectMeeting"]] = relationship(
        "ProjectMeeting",
        back_populates="group",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    documents: Mapped[List["ProjectDocument"]] = relationship(
        "ProjectDocument",
        back_populates="group",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<ProjectGroup {self.name}>"

    @classmethod
    def associated_with(cls, staff_id: int):
        """SQL filter: groups the staff member guides, convenes or examines."""
        return or_(
            cls.guide_staff_id == staff_id,
            cls.convener_staff_id == staff_id,
            cls.expert_staff_id == staff_id,
        )

    def is_associated_with(self, staff_id: int) -> bool:
        return staff_id in (self.guide_staff_id, self.convener_staff_id, self.expert_staff_id)

    @property
    def leader(self) -> Optional["ProjectGroupMember"]:
        return next((m for m in self.members if m.is_group_leader), None)

    @property
    def has_title(self) -> bool:
        return bool(self.project_title and self.project_title.strip())


class ProjectGroupMember(Base):
    __tablename__ = "project_group_members"
    __table_args__ = (UniqueConstraint("group_id", "student_id"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    group_id: Mapped[int] = mapped_column(
        ForeignKey("project_groups.id", ondelete="CASCADE"), nullable=False, index=True
    )
    student_id: Mapped[int] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_group_leader: Mapped[bool] = mapped_column(Boolean, default=False)
    student_cgpa: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    group: Mapped["ProjectGroup"] = relationship("ProjectGroup", back_populates="members")
    student: Mapped["Student"] = relationship("Student", back_populates="memberships")


class ProjectMeeting(Base):
    __tablename__ = "project_meetings"

    id: Mapped[int] = mapped_column(primary_key=True)
    group_id: Mapped[int] = mapped_column(
        ForeignKey("project_groups.id", ondelete="CASCADE"), nullable=False, index=True
    )
    guide_staff_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("staff.id", ondelete="SET NULL"), nullable=True, index=True
    )
    meeting_datetime: Mapped[datetime] = mapped_column(UTCDateTime(timezone=True), nullable=False)
    purpose: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[MeetingStatus] = mapped_column(
        Enum(MeetingStatus), default=MeetingStatus.SCHEDULED, nullable=False
    )
    status_description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(timezone=True), default=utcnow)

    group: Mapped["ProjectGroup"] = relationship("ProjectGroup", back_populates="meetings")
    guide: Mapped[Optional["Staff"]] = relationship("Staff")
    attendance: Mapped[List["MeetingAttendance"]] = relationship(
        "MeetingAttendance",
        back_populates="meeting",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<ProjectMeeting {self.id} {self.status.value}>"


class MeetingAttendance(Base):
    __tablename__ = "meeting_attendance"
    __table_args__ = (UniqueConstraint("meeting_id", "student_id"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    meeting_id: Mapped[int] = mapped_column(
        ForeignKey("project_meetings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    student_id: Mapped[int] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_present: Mapped[bool] = mapped_column(Boolean, default=False)
    remarks: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    meeting: Mapped["ProjectMeeting"] = relationship("ProjectMeeting", back_populates="attendance")
    student: Mapped["Student"] = relationship("Student")


class ProjectDocument(Base):
    __tablename__ = "project_documents"

    id: Mapped[int] = mapped_column(primary_key=True)
    group_id: Mapped[int] = mapped_column(
        ForeignKey("project_groups.id", ondelete="CASCADE"), nullable=False, index=True
    )
    student_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("students.id", ondelete="SET NULL"), nullable=True
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    filepath: Mapped[str] = mapped_column(String(500), nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(UTCDateTime(timezone=True), default=utcnow)

    group: Mapped["ProjectGroup"] = relationship("ProjectGroup", back_populates="documents")
    student: Mapped[Optional["Student"]] = relationship("Student")
