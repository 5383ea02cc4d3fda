from spms.models import Staff


def test_profile_requires_session(client):
    assert client.get("/api/profile").status_code == 401


def test_get_profile(client, db, login):
    db.add_staff()
    login("rao@example.com", "staff")

    response = client.get("/api/profile")
    assert response.status_code == 200
    assert response.json() == {
        "name": "Dr. Rao",
        "email": "rao@example.com",
        "phone": "9000000100",
        "description": "",
        "role": "staff",
    }


def test_change_password(client, db, login):
    staff_id = db.add_staff()
    login("rao@example.com", "staff")

    response = client.patch(
        "/api/profile",
        json={"currentPassword": "secret123", "newPassword": "better-secret"},
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Password updated successfully"}
    assert db.get(Staff, staff_id).verify_password("better-secret")

    # The old password no longer logs in
    response = client.post(
        "/api/auth/login",
        json={"email": "rao@example.com", "password": "secret123", "role": "staff"},
    )
    assert response.status_code == 401


def test_change_password_requires_both(client, db, login):
    db.add_student()
    login("asha@example.com", "student")

    response = client.patch("/api/profile", json={"currentPassword": "secret123"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Both current and new password are required"


def test_change_password_too_short(client, db, login):
    db.add_student()
    login("asha@example.com", "student")

    response = client.patch("/api/profile", json={"currentPassword": "secret123", "newPassword": "abc"})
    assert response.status_code == 400
    assert response.json()["detail"] == "New password must be at least 6 characters"


def test_change_password_wrong_current(client, db, login):
    staff_id = db.add_staff()
    login("rao@example.com", "staff")
    original_hash = db.get(Staff, staff_id).password_hash

    response = client.patch("/api/profile", json={"currentPassword": "nope", "newPassword": "better-secret"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Current password is incorrect"
    assert db.get(Staff, staff_id).password_hash == original_hash
