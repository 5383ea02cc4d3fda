from datetime import datetime, timedelta, timezone

import pytest

from spms.models import MeetingStatus, ProjectGroup
from spms.schemas.dashboard import percentage


@pytest.fixture
def semester(db):
    """
    Group A (guided by Rao): three completed meetings, one cancelled and
    four scheduled ahead. Group B is convened by Rao, guided by Iyer.
    """
    rao = db.add_staff()
    iyer = db.add_staff(name="Dr. Iyer", email="iyer@example.com")
    asha = db.add_student()
    ben = db.add_student(name="Ben Thomas", email="ben@example.com")
    cara = db.add_student(name="Cara Singh", email="cara@example.com")
    major = db.add_project_type("Major Project")

    group_a = db.add_group(
        name="Group A", project_title="Smart Irrigation", project_type_id=major,
        members=[(asha, True), (ben, False)], guide_id=rao,
    )
    group_b = db.add_group(name="Group B", members=[(cara, True), (ben, False)],
                           guide_id=iyer, convener_id=rao)

    now = datetime.now(timezone.utc)
    done = MeetingStatus.COMPLETED
    db.add_meeting(group_a, rao, now - timedelta(days=30), done, "Kickoff", {asha: True, ben: True})
    db.add_meeting(group_a, rao, now - timedelta(days=20), done, "Review 1", {asha: True, ben: False})
    db.add_meeting(group_a, rao, now - timedelta(days=10), done, "Review 2", {asha: False, ben: False})
    db.add_meeting(group_a, rao, now - timedelta(days=5), MeetingStatus.CANCELLED, "Dropped")
    for days in (1, 2, 3, 4):
        db.add_meeting(group_a, rao, now + timedelta(days=days), purpose=f"Upcoming {days}")
    db.add_meeting(group_b, iyer, now + timedelta(days=1), purpose="Other group")

    db.add_document(group_a, asha, "proposal.pdf")
    db.add_document(group_a, ben, "slides.pdf")

    return {"rao": rao, "iyer": iyer, "asha": asha, "ben": ben, "cara": cara,
            "a": group_a, "b": group_b}


@pytest.mark.parametrize("part,whole,expected", [
    (2, 3, 67),
    (1, 3, 33),
    (1, 2, 50),
    (1, 8, 13),   # 12.5 rounds up
    (0, 0, 0),
    (5, 5, 100),
])
def test_percentage(part, whole, expected):
    assert percentage(part, whole) == expected


# =============================================================================
# Student dashboard
# =============================================================================

def test_student_dashboard(client, semester, login):
    login("asha@example.com", "student")

    response = client.get("/api/student/dashboard/stats")
    assert response.status_code == 200
    body = response.json()

    assert body["stats"] == {
        "attendance": 67,
        "tasksPending": 0,
        "meetingsDone": 3,
        "documents": 2,
    }
    assert body["project"]["title"] == "Smart Irrigation"
    assert body["project"]["type"] == "Major Project"
    assert body["project"]["guide"] == "Dr. Rao"
    assert body["project"]["status"] == "Active"

    assert [m["title"] for m in body["upcomingMeetings"]] == ["Upcoming 1", "Upcoming 2", "Upcoming 3"]
    assert {m["name"]: m["role"] for m in body["members"]} == {
        "Asha Patel": "Leader",
        "Ben Thomas": "Member",
    }


def test_student_dashboard_without_group(client, db, login):
    db.add_student()
    login("asha@example.com", "student")

    body = client.get("/api/student/dashboard/stats").json()
    assert body["stats"] == {"attendance": 0, "tasksPending": 0, "meetingsDone": 0, "documents": 0}
    assert body["project"] is None
    assert body["upcomingMeetings"] == []
    assert body["members"] == []


def test_student_dashboard_forbidden_for_staff(client, semester, login):
    login("rao@example.com", "staff")
    assert client.get("/api/student/dashboard/stats").status_code == 403


# =============================================================================
# Staff dashboard
# =============================================================================

def test_staff_dashboard(client, semester, login):
    login("rao@example.com", "staff")

    response = client.get("/api/staff/dashboard/stats")
    assert response.status_code == 200
    assert response.json() == {
        "groupsSupervised": 2,
        "totalMeetings": 8,
        "totalStudents": 3,
        "upcomingMeetings": 4,
    }


def test_staff_dashboard_forbidden_for_students(client, semester, login):
    login("asha@example.com", "student")
    assert client.get("/api/staff/dashboard/stats").status_code == 403


# =============================================================================
# Evaluations
# =============================================================================

def test_evaluations(client, semester, login):
    login("rao@example.com", "staff")

    response = client.get("/api/staff/evaluations")
    assert response.status_code == 200
    body = response.json()

    meetings = {m["purpose"]: m for m in body["meetings"]}
    assert len(meetings) == 8
    assert meetings["Kickoff"]["attendanceRate"] == 100
    assert meetings["Review 1"]["attendanceRate"] == 50
    assert meetings["Review 1"]["presentCount"] == 1
    assert meetings["Review 1"]["totalCount"] == 2
    assert meetings["Review 2"]["attendanceRate"] == 0
    assert meetings["Dropped"]["attendanceRate"] is None
    assert meetings["Kickoff"]["groupName"] == "Group A"
    assert meetings["Kickoff"]["projectType"] == "Major Project"

    assert len(body["groupSummaries"]) == 1
    summary = body["groupSummaries"][0]
    assert summary["groupName"] == "Group A"
    assert summary["totalMeetings"] == 8
    assert summary["completedMeetings"] == 3

    attendance = {m["studentName"]: m for m in summary["memberAttendance"]}
    assert attendance["Asha Patel"] == {
        "studentId": semester["asha"],
        "studentName": "Asha Patel",
        "attended": 2,
        "total": 3,
        "percentage": 67,
    }
    assert attendance["Ben Thomas"]["attended"] == 1
    assert attendance["Ben Thomas"]["percentage"] == 33


def test_grade_group(client, db, semester, login):
    login("rao@example.com", "staff")

    response = client.post("/api/staff/evaluations/grade", json={"groupId": semester["b"], "grade": "A"})
    assert response.status_code == 200
    assert response.json()["groupName"] == "Group B"
    assert response.json()["grade"] == "A"
    assert db.get(ProjectGroup, semester["b"]).grade == "A"

    response = client.post("/api/staff/evaluations/grade", json={"groupId": semester["b"], "grade": None})
    assert response.status_code == 200
    assert db.get(ProjectGroup, semester["b"]).grade is None


def test_grade_requires_group_id(client, semester, login):
    login("rao@example.com", "staff")
    response = client.post("/api/staff/evaluations/grade", json={"grade": "A"})
    assert response.status_code == 400


def test_grade_unknown_group(client, semester, login):
    login("rao@example.com", "staff")
    response = client.post("/api/staff/evaluations/grade", json={"groupId": 999, "grade": "A"})
    assert response.status_code == 404


def test_grade_unassociated_group(client, db, semester, login):
    db.add_staff(name="Dr. Khan", email="khan@example.com")
    login("khan@example.com", "staff")
    response = client.post("/api/staff/evaluations/grade", json={"groupId": semester["a"], "grade": "B"})
    assert response.status_code == 403
    assert db.get(ProjectGroup, semester["a"]).grade is None
