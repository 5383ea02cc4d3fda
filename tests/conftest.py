import asyncio
import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Add project root to sys.path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Set up environment variables before importing app
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret-for-session-tokens-0123456789"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

from fastapi.testclient import TestClient
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import spms.models  # noqa: F401
from spms.core.database import Base, enable_sqlite_foreign_keys, get_db
from spms.main import app
from spms.models import (
    MeetingAttendance,
    MeetingStatus,
    ProjectDocument,
    ProjectGroup,
    ProjectGroupMember,
    ProjectMeeting,
    ProjectType,
    Staff,
    Student,
)

PASSWORD = "secret123"


class SeededDatabase:
    """A throwaway SQLite file plus helpers to put rows in it."""

    def __init__(self, url: str):
        self.engine = create_async_engine(url, poolclass=NullPool)
        event.listen(self.engine.sync_engine, "connect", enable_sqlite_foreign_keys)
        self.session_maker = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    def run(self, fn):
        async def _go():
            async with self.session_maker() as session:
                return await fn(session)
        return asyncio.run(_go())

    def create_all(self):
        async def _create():
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        asyncio.run(_create())

    def dispose(self):
        asyncio.run(self.engine.dispose())

    def _add(self, row):
        async def _insert(session):
            session.add(row)
            await session.commit()
            return row.id
        return self.run(_insert)

    def add_student(self, name="Asha Patel", email="asha@example.com", password=PASSWORD, phone="9000000001"):
        student = Student(name=name, email=email, phone=phone)
        student.set_password(password)
        return self._add(student)

    def add_staff(self, name="Dr. Rao", email="rao@example.com", password=PASSWORD, phone="9000000100"):
        staff = Staff(name=name, email=email, phone=phone)
        staff.set_password(password)
        return self._add(staff)

    def add_project_type(self, name="Major Project"):
        return self._add(ProjectType(name=name))

    def add_group(self, name="Group 1", members=(), project_title=None, guide_id=None,
                  convener_id=None, expert_id=None, project_type_id=None, created_at=None):
        """``members`` is a sequence of ``(student_id, is_leader)`` pairs."""
        group = ProjectGroup(
            name=name,
            project_title=project_title,
            guide_staff_id=guide_id,
            convener_staff_id=convener_id,
            expert_staff_id=expert_id,
            project_type_id=project_type_id,
        )
        if created_at is not None:
            group.created_at = created_at
        group.members = [
            ProjectGroupMember(student_id=student_id, is_group_leader=is_leader, student_cgpa=8.0)
            for student_id, is_leader in members
        ]
        return self._add(group)

    def add_meeting(self, group_id, guide_id, when=None, status=MeetingStatus.SCHEDULED,
                    purpose="Progress review", attendance=None):
        """``attendance`` maps student id to presence."""
        meeting = ProjectMeeting(
            group_id=group_id,
            guide_staff_id=guide_id,
            meeting_datetime=when or datetime.now(timezone.utc) + timedelta(days=1),
            purpose=purpose,
            location="Lab 3",
            status=status,
        )
        meeting.attendance = [
            MeetingAttendance(student_id=student_id, is_present=present)
            for student_id, present in (attendance or {}).items()
        ]
        return self._add(meeting)

    def add_document(self, group_id, student_id, filename="report.pdf"):
        return self._add(ProjectDocument(
            group_id=group_id,
            student_id=student_id,
            filename=filename,
            filepath=f"/uploads/documents/1700000000000-{filename}",
        ))

    def get(self, model, row_id):
        async def _get(session):
            return await session.get(model, row_id)
        return self.run(_get)

    def count(self, model):
        async def _count(session):
            result = await session.execute(select(func.count()).select_from(model))
            return result.scalar()
        return self.run(_count)


@pytest.fixture
def db(tmp_path):
    database = SeededDatabase(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    database.create_all()

    async def override_get_db():
        async with database.session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield database
    app.dependency_overrides.clear()
    database.dispose()


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def login(client):
    """Log the shared client in; returns the response."""
    def _login(email, role, password=PASSWORD):
        response = client.post(
            "/api/auth/login",
            json={"email": email, "password": password, "role": role},
        )
        assert response.status_code == 200, response.text
        return response
    return _login
