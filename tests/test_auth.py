import pytest

PASSWORD = "correct-horse"


def test_login_returns_a_session_token(client, admin_headers):
    response = client.post("/api/auth/login", json={"email": "ADMIN@school.test", "password": PASSWORD})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["account"]["role"] == "admin"
    assert len(body["access_token"]) == 64


def test_wrong_password_is_unauthorized(client, admin_headers):
    response = client.post("/api/auth/login", json={"email": "admin@school.test", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_second_login_ends_the_first_session(client, admin_headers):
    assert client.get("/api/auth/me", headers=admin_headers).status_code == 200

    client.post("/api/auth/login", json={"email": "admin@school.test", "password": PASSWORD})

    response = client.get("/api/auth/me", headers=admin_headers)
    assert response.status_code == 401


def test_logout_invalidates_the_token(client, admin_headers):
    assert client.post("/api/auth/logout", headers=admin_headers).status_code == 204
    assert client.get("/api/auth/me", headers=admin_headers).status_code == 401


def test_missing_bearer_token(client, db):
    response = client.get("/api/auth/me")
    assert response.status_code == 401


def test_admin_session_carries_pending_badge(client, admin_headers):
    body = client.get("/api/auth/me", headers=admin_headers).json()
    assert body["role"] == "admin"
    assert body["pending_enrollments"] == 0


def test_student_cannot_reach_admin_routes(client, student_headers):
    assert client.get("/api/students", headers=student_headers).status_code == 403
    assert client.get("/api/logs", headers=student_headers).status_code == 403


def test_admin_creates_accounts(client, admin_headers, teacher):
    response = client.post("/api/auth/accounts", headers=admin_headers, json={
        "email": "maria@school.test",
        "password": PASSWORD,
        "role": "teacher",
        "teacher_id": "emp-100",
    })
    assert response.status_code == 201
    assert response.json()["teacher_id"] == "EMP-100"
    assert response.json()["display_name"] == "Maria Reyes"

    duplicate = client.post("/api/auth/accounts", headers=admin_headers, json={
        "email": "maria@school.test",
        "password": PASSWORD,
        "role": "admin",
    })
    assert duplicate.status_code == 409


def test_student_account_needs_an_existing_student(client, admin_headers):
    response = client.post("/api/auth/accounts", headers=admin_headers, json={
        "email": "ghost@school.test",
        "password": PASSWORD,
        "role": "student",
        "student_id": "NOPE-1",
    })
    assert response.status_code == 404


NEW_PASSWORD = "Registrar2026"


def signup_payload(**overrides):
    payload = {
        "email": "Juan.Signup@School.test",
        "password": NEW_PASSWORD,
        "confirm_password": NEW_PASSWORD,
        "role": "student",
        "student_id": "stu-001",
    }
    payload.update(overrides)
    return payload


def test_student_signs_up_against_an_existing_record(client, student):
    response = client.post("/api/auth/signup", json=signup_payload())
    assert response.status_code == 201
    assert response.json()["email"] == "juan.signup@school.test"
    assert response.json()["student_id"] == "STU-001"

    login = client.post("/api/auth/login", json={"email": "juan.signup@school.test", "password": NEW_PASSWORD})
    assert login.status_code == 200


def test_teacher_signs_up_with_employee_id(client, teacher):
    response = client.post("/api/auth/signup", json=signup_payload(
        email="maria.reyes@school.test", role="teacher", student_id=None, teacher_id="emp-100",
    ))
    assert response.status_code == 201
    assert response.json()["display_name"] == "Maria Reyes"


def test_second_signup_for_the_same_student_is_a_conflict(client, student, student_headers):
    same_student = client.post("/api/auth/signup", json=signup_payload(email="other@school.test"))
    assert same_student.status_code == 409
    assert "already registered" in same_student.json()["detail"]


def test_signup_unknown_student_is_not_found(client, db):
    response = client.post("/api/auth/signup", json=signup_payload(student_id="NOPE-9"))
    assert response.status_code == 404


def test_duplicate_signup_email_is_a_conflict(client, student, make_student):
    make_student("STU-002")
    assert client.post("/api/auth/signup", json=signup_payload()).status_code == 201
    response = client.post("/api/auth/signup", json=signup_payload(student_id="STU-002"))
    assert response.status_code == 409
    assert response.json()["detail"] == "An account with this email already exists"


@pytest.mark.parametrize("password, confirmation, message", [
    ("Short1", "Short1", "at least 8 characters"),
    ("alllowercase1", "alllowercase1", "uppercase letter"),
    (NEW_PASSWORD, "Registrar2027", "do not match"),
])
def test_signup_password_rules(client, student, password, confirmation, message):
    response = client.post("/api/auth/signup", json=signup_payload(password=password, confirm_password=confirmation))
    assert response.status_code == 400
    assert message in response.json()["detail"]


def test_signup_rejects_malformed_email(client, student):
    response = client.post("/api/auth/signup", json=signup_payload(email="not-an-email"))
    assert response.status_code == 400


def test_change_password_rotates_the_session(client, admin_headers):
    response = client.post("/api/auth/change-password", headers=admin_headers, json={
        "current_password": PASSWORD,
        "new_password": NEW_PASSWORD,
        "confirm_password": NEW_PASSWORD,
    })
    assert response.status_code == 200
    new_headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

    assert client.get("/api/auth/me", headers=admin_headers).status_code == 401
    assert client.get("/api/auth/me", headers=new_headers).status_code == 200

    assert client.post("/api/auth/login", json={"email": "admin@school.test", "password": PASSWORD}).status_code == 401
    assert client.post("/api/auth/login", json={"email": "admin@school.test", "password": NEW_PASSWORD}).status_code == 200


def test_change_password_checks_the_current_password(client, admin_headers):
    response = client.post("/api/auth/change-password", headers=admin_headers, json={
        "current_password": "wrong",
        "new_password": NEW_PASSWORD,
        "confirm_password": NEW_PASSWORD,
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Current password is incorrect"
    assert client.get("/api/auth/me", headers=admin_headers).status_code == 200


def test_change_password_requires_a_session(client, db):
    response = client.post("/api/auth/change-password", json={
        "current_password": PASSWORD,
        "new_password": NEW_PASSWORD,
        "confirm_password": NEW_PASSWORD,
    })
    assert response.status_code == 401
