import pytest

from registrar.errors import DuplicateError
from registrar.models import SubjectRecord
from registrar.students.schemas import classify_status
from registrar.students.service import student_service

NEW_STUDENT = {
    "student_id": "stu-777",
    "first_name": "Ana",
    "middle_name": "Lopez",
    "last_name": "Garcia",
    "sex": "Female",
    "birth_date": "2008-01-02",
    "address": "Makati",
}


@pytest.mark.parametrize("status, expected", [
    (None, "not-set"),
    ("", "not-set"),
    ("unknown", "not-set"),
    ("enrolled", "enrolled"),
    ("transfer-out", "transfer-out"),
])
def test_missing_or_unknown_status_reads_as_not_set(status, expected):
    assert classify_status(status) == expected


def test_create_stores_the_id_uppercase(client, admin_headers):
    response = client.post("/api/students", headers=admin_headers, json=NEW_STUDENT)
    assert response.status_code == 201
    body = response.json()
    assert body["student_id"] == "STU-777"
    assert body["status_label"] == "not-set"


@pytest.mark.parametrize("student_id, message", [
    ("STU 777", "must not contain spaces"),
    ("S1", "at least 3 characters"),
    ("   ", "is required"),
])
def test_create_rejects_bad_ids(client, admin_headers, student_id, message):
    response = client.post("/api/students", headers=admin_headers, json={**NEW_STUDENT, "student_id": student_id})
    assert response.status_code == 400
    assert message in response.json()["detail"]


def test_create_requires_every_field(client, admin_headers):
    response = client.post("/api/students", headers=admin_headers, json={**NEW_STUDENT, "address": " "})
    assert response.status_code == 400
    assert "address" in response.json()["detail"]


def test_admin_edit_requires_the_same_fields_as_create(client, admin_headers, student):
    response = client.put("/api/students/STU-001", headers=admin_headers, json={"first_name": "", "last_name": None})
    assert response.status_code == 400
    assert "first_name" in response.json()["detail"]
    assert "last_name" in response.json()["detail"]

    unchanged = client.get("/api/students/STU-001", headers=admin_headers).json()
    assert unchanged["last_name"] == "Dela Cruz"


def test_admin_edit_keeps_unsent_fields(client, admin_headers, student):
    response = client.put("/api/students/stu-001", headers=admin_headers, json={"address": "Pasig"})
    assert response.status_code == 200
    assert response.json()["address"] == "Pasig"
    assert response.json()["first_name"] == "Juan"


def test_duplicate_id_is_a_conflict(client, admin_headers, student):
    response = client.post("/api/students", headers=admin_headers, json={**NEW_STUDENT, "student_id": "stu-001"})
    assert response.status_code == 409
    assert response.json()["detail"] == "Student ID already exists"


def test_duplicate_id_in_the_service(db, make_student):
    make_student("DUP-1")
    with pytest.raises(DuplicateError):
        make_student("dup-1")


def test_search_by_id_is_a_case_insensitive_prefix(client, admin_headers, make_student):
    make_student("ABC-002")
    make_student("ABC-001")
    make_student("XYZ-001")

    response = client.get("/api/students", headers=admin_headers, params={"search": "abc", "field": "student_id"})
    body = response.json()
    assert response.status_code == 200
    assert [s["student_id"] for s in body["items"]] == ["ABC-001", "ABC-002"]
    assert body["total"] == 2
    assert body["search"] == "abc"
    assert body["field"] == "student_id"


def test_search_by_last_name(client, admin_headers, make_student):
    make_student("AAA-001", last_name="Santos")
    make_student("AAA-002", last_name="Salazar")
    make_student("AAA-003", last_name="Reyes")

    body = client.get("/api/students", headers=admin_headers, params={"search": "SA", "field": "last_name"}).json()
    assert [s["last_name"] for s in body["items"]] == ["Salazar", "Santos"]


def test_status_filter_counts_the_whole_collection(db, client, admin_headers, make_student):
    for n in range(12):
        make_student(f"BULK-{n:02d}")
    student_service.set_status(db, "BULK-00", "graduated")

    not_set = client.get("/api/students", headers=admin_headers, params={"status": "not-set", "page_size": 5}).json()
    assert not_set["total"] == 11
    assert not_set["total_pages"] == 3
    assert len(not_set["items"]) == 5

    graduated = client.get("/api/students", headers=admin_headers, params={"status": "graduated"}).json()
    assert [s["student_id"] for s in graduated["items"]] == ["BULK-00"]


def test_unsearched_list_is_newest_first(client, admin_headers, make_student):
    make_student("OLD-001")
    make_student("NEW-001")
    body = client.get("/api/students", headers=admin_headers).json()
    assert body["items"][0]["student_id"] == "NEW-001"


def test_delete_matches_the_exact_id_only(db, client, admin_headers, make_student):
    make_student("ABC")
    make_student("ABC1")

    response = client.delete("/api/students/abc", headers=admin_headers)
    assert response.status_code == 204

    assert student_service.get_by_student_id(db, "ABC") is None
    assert student_service.get_by_student_id(db, "ABC1") is not None


def test_delete_unknown_student(client, admin_headers):
    assert client.delete("/api/students/NOPE-9", headers=admin_headers).status_code == 404


def test_delete_removes_the_student_from_rosters(db, client, admin_headers, make_student, section):
    make_student("ROS-001")
    make_student("ROS-002")
    db.add(SubjectRecord(
        section_id=section.id,
        subject_id="subject",
        semester="1st",
        school_year="2026-2027",
        student_list=["ROS-001", "ROS-002"],
        student_grades=[{"student_id": "ROS-001", "final_grade": 90}, {"student_id": "ROS-002", "final_grade": 85}],
    ))
    db.commit()

    client.delete("/api/students/ROS-001", headers=admin_headers)

    db.expire_all()
    record = db.query(SubjectRecord).one()
    assert record.student_list == ["ROS-002"]
    assert [g["student_id"] for g in record.student_grades] == ["ROS-002"]


def test_delete_writes_an_audit_entry(client, admin_headers, make_student):
    make_student("LOG-001")
    client.delete("/api/students/LOG-001", headers=admin_headers)

    logs = client.get("/api/logs", headers=admin_headers).json()["items"]
    assert logs[0]["name"] == "Student Deleted"
    assert logs[0]["student_id"] == "LOG-001"
    assert logs[0]["logs_by"] == "Registrar Admin"


def test_student_self_update_only_touches_contact_fields(client, student_headers):
    response = client.put("/api/students/me", headers=student_headers, json={
        "contact_number": "09171234567",
        "first_name": "Hacker",
    })
    assert response.status_code == 200
    body = response.json()
    assert body["contact_number"] == "09171234567"
    assert body["first_name"] == "Juan"
    assert body["profile_complete"] is True


def test_teacher_sets_student_status(client, teacher_headers, student):
    response = client.patch(f"/api/students/{student.student_id}/status", headers=teacher_headers, json={"status": "incomplete"})
    assert response.status_code == 200
    assert response.json()["status_label"] == "incomplete"


def test_teacher_cannot_set_an_unknown_status(client, teacher_headers, student):
    response = client.patch(f"/api/students/{student.student_id}/status", headers=teacher_headers, json={"status": "expelled"})
    assert response.status_code == 422


def test_teacher_cannot_delete_students(client, teacher_headers, student):
    assert client.delete(f"/api/students/{student.student_id}", headers=teacher_headers).status_code == 403
