import pytest

from registrar.subject_records.schemas import GradeInput
from registrar.subject_records.service import average_grade, check_quarter_grade, final_grade, honor_rating, merge_grade


@pytest.mark.parametrize("first, second, expected", [
    (90, 91, 91),
    (89, 90, 90),
    (75, 75, 75),
    (90, 0, 0),
    (0, 0, 0),
])
def test_final_grade_rounds_halves_up(first, second, expected):
    assert final_grade(first, second) == expected


@pytest.mark.parametrize("grade, rating", [
    (100, "With Highest Honors"),
    (98, "With Highest Honors"),
    (97, "With High Honors"),
    (95, "With High Honors"),
    (94.99, "With Honors"),
    (90, "With Honors"),
    (89, ""),
])
def test_honor_rating_thresholds(grade, rating):
    assert honor_rating(grade) == rating


@pytest.mark.parametrize("value", [59, 101])
def test_quarter_grades_outside_60_to_100(value):
    with pytest.raises(ValueError):
        check_quarter_grade(value, "First quarter grade")


def test_average_grade_two_decimals():
    assert average_grade([90, 91, 91]) == 90.67
    assert average_grade([]) == 0.0


def test_submitted_quarter_grade_is_locked():
    existing = {"student_id": "S-1", "first_quarter_grade": 88, "second_quarter_grade": 0, "remarks": ""}
    merged = merge_grade(existing, GradeInput(student_id="S-1", second_quarter_grade=92), "Juan")
    assert merged["final_grade"] == 90
    assert merged["rating"] == "With Honors"

    with pytest.raises(ValueError):
        merge_grade(existing, GradeInput(student_id="S-1", first_quarter_grade=95), "Juan")


@pytest.fixture()
def subject(client, admin_headers, strand):
    return client.post("/api/subjects", headers=admin_headers, json={"subject_name": "Pre-Calculus", "strand_ids": [strand.id]}).json()


@pytest.fixture()
def record(client, admin_headers, section, subject, teacher, student):
    created = client.post("/api/subject-records", headers=admin_headers, json={
        "section_id": section.id,
        "subject_id": subject["id"],
        "semester": "1st",
        "school_year": "2026-2027",
        "teacher_id": teacher.employee_id,
    }).json()
    return client.post(f"/api/subject-records/{created['id']}/students", headers=admin_headers, json={"student_ids": ["stu-001", "STU-001"]}).json()


def test_record_copies_display_names(record, teacher):
    assert record["subject_name"] == "Pre-Calculus"
    assert record["section_name"] == "STEM-A"
    assert record["teacher_name"] == "Maria Reyes"
    assert record["student_list"] == ["STU-001"]


def test_teacher_saves_grades(client, teacher_headers, record):
    response = client.put(f"/api/subject-records/{record['id']}/grades", headers=teacher_headers, json={
        "grades": [{"student_id": "STU-001", "first_quarter_grade": 96, "second_quarter_grade": 99}],
        "expected_version": record["version"],
    })
    assert response.status_code == 200
    grade = response.json()["student_grades"][0]
    assert grade["final_grade"] == 98
    assert grade["rating"] == "With Highest Honors"
    assert grade["student_name"] == "Juan Dela Cruz"


def test_stale_version_is_a_conflict(client, teacher_headers, record):
    url = f"/api/subject-records/{record['id']}/grades"
    first = client.put(url, headers=teacher_headers, json={
        "grades": [{"student_id": "STU-001", "first_quarter_grade": 80}],
        "expected_version": record["version"],
    })
    assert first.status_code == 200

    second = client.put(url, headers=teacher_headers, json={
        "grades": [{"student_id": "STU-001", "second_quarter_grade": 85}],
        "expected_version": record["version"],
    })
    assert second.status_code == 409


def test_overwriting_a_submitted_grade_is_rejected(client, teacher_headers, record):
    url = f"/api/subject-records/{record['id']}/grades"
    client.put(url, headers=teacher_headers, json={"grades": [{"student_id": "STU-001", "first_quarter_grade": 80}]})
    response = client.put(url, headers=teacher_headers, json={"grades": [{"student_id": "STU-001", "first_quarter_grade": 95}]})
    assert response.status_code == 400


def test_grades_only_for_students_on_the_roster(client, teacher_headers, record, make_student):
    make_student("OUT-001")
    response = client.put(f"/api/subject-records/{record['id']}/grades", headers=teacher_headers, json={
        "grades": [{"student_id": "OUT-001", "first_quarter_grade": 90}],
    })
    assert response.status_code == 400


def test_grade_changes_are_logged(client, admin_headers, teacher_headers, record):
    url = f"/api/subject-records/{record['id']}/grades"
    client.put(url, headers=teacher_headers, json={"grades": [{"student_id": "STU-001", "first_quarter_grade": 90, "second_quarter_grade": 92}]})

    logs = client.get("/api/logs", headers=admin_headers, params={"student_id": "STU-001"}).json()["items"]
    assert logs[0]["name"] == "Grade Added"
    assert logs[0]["logs_by"] == "Maria Reyes"


def test_other_teachers_cannot_grade(client, admin_headers, record, db):
    from registrar.auth.schemas import AccountCreate
    from registrar.auth.service import auth_service
    from registrar.teachers.schemas import TeacherCreate
    from registrar.teachers.service import teacher_service

    teacher_service.create_teacher(db, TeacherCreate(employee_id="EMP-200", first_name="Jose", last_name="Rizal", email="jose@school.test"))
    auth_service.create_account(db, AccountCreate(email="jose@school.test", password="correct-horse", role="teacher", teacher_id="EMP-200"))
    _, token = auth_service.login(db, "jose@school.test", "correct-horse")

    response = client.put(
        f"/api/subject-records/{record['id']}/grades",
        headers={"Authorization": f"Bearer {token}"},
        json={"grades": [{"student_id": "STU-001", "first_quarter_grade": 90}]},
    )
    assert response.status_code == 403


def test_removing_a_student_drops_the_grade_row(client, teacher_headers, record):
    client.put(f"/api/subject-records/{record['id']}/grades", headers=teacher_headers, json={
        "grades": [{"student_id": "STU-001", "first_quarter_grade": 90}],
    })
    response = client.post(f"/api/subject-records/{record['id']}/students/remove", headers=teacher_headers, json={"student_ids": ["STU-001"]})
    assert response.json()["student_list"] == []
    assert response.json()["student_grades"] == []


def test_teacher_list_is_limited_to_own_classes(client, teacher_headers, record):
    body = client.get("/api/subject-records", headers=teacher_headers, params={"teacher_id": "someone-else"}).json()
    assert [r["id"] for r in body["items"]] == [record["id"]]


def test_student_sees_own_grades(client, teacher_headers, student_headers, record):
    client.put(f"/api/subject-records/{record['id']}/grades", headers=teacher_headers, json={
        "grades": [{"student_id": "STU-001", "first_quarter_grade": 85, "second_quarter_grade": 86}],
    })
    grades = client.get("/api/students/me/grades", headers=student_headers).json()
    assert len(grades) == 1
    assert grades[0]["subject_name"] == "Pre-Calculus"
    assert grades[0]["final_grade"] == 86


def test_honor_roll(db, client, admin_headers, teacher_headers, student_headers, record, section, strand):
    enrollment = client.post("/api/enrollments", headers=student_headers, json={
        "strand_id": strand.id, "semester": "1st", "school_year": "2026-2027",
    }).json()
    client.post(f"/api/enrollments/{enrollment['id']}/approve", headers=admin_headers, json={"section_id": section.id})
    client.put(f"/api/subject-records/{record['id']}/grades", headers=teacher_headers, json={
        "grades": [{"student_id": "STU-001", "first_quarter_grade": 94, "second_quarter_grade": 96}],
    })

    honor_roll = client.get("/api/subject-records/honor-roll", headers=admin_headers, params={
        "section_id": section.id, "school_year": "2026-2027", "semester": "1st",
    }).json()
    assert honor_roll == [{
        "student_id": "STU-001",
        "student_name": "Dela Cruz, Juan",
        "average_grade": 95.0,
        "total_subjects": 1,
        "honor_distinction": "With High Honors",
    }]


@pytest.mark.parametrize("missing", ["section_id", "subject_id"])
def test_create_needs_section_and_subject(client, admin_headers, section, subject, missing):
    payload = {"section_id": section.id, "subject_id": subject["id"], "semester": "1st"}
    payload[missing] = " "
    response = client.post("/api/subject-records", headers=admin_headers, json=payload)
    assert response.status_code == 400
    assert missing in response.json()["detail"]


def test_delete_after_a_concurrent_edit_is_a_conflict(db, record):
    from sqlalchemy import text

    from registrar.errors import StaleRecordError
    from registrar.subject_records.service import subject_record_service

    loaded = subject_record_service.get_or_raise(db, record["id"])
    db.execute(text('UPDATE "subject-record" SET version = version + 1 WHERE id = :id'), {"id": loaded.id})

    with pytest.raises(StaleRecordError):
        subject_record_service.delete_record(db, record["id"])
    assert subject_record_service.get_or_raise(db, record["id"]).subject_name == "Pre-Calculus"


def test_student_grades_lookup_ignores_id_casing(db, client, teacher_headers, record):
    from registrar.subject_records.service import subject_record_service

    client.put(f"/api/subject-records/{record['id']}/grades", headers=teacher_headers, json={
        "grades": [{"student_id": "STU-001", "first_quarter_grade": 90, "second_quarter_grade": 92}],
    })
    views = subject_record_service.grades_for_student(db, " stu-001 ")
    assert len(views) == 1
    assert views[0].student_id == "STU-001"
    assert views[0].final_grade == 91
