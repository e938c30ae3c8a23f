def test_summary_counts(client, admin_headers, student, teacher, section, make_student):
    make_student("NEW-002")
    client.patch(f"/api/students/{student.student_id}/status", headers=admin_headers, json={"status": "enrolled"})

    body = client.get("/api/dashboard/summary", headers=admin_headers).json()
    assert body == {
        "students": 2,
        "teachers": 1,
        "strands": 1,
        "sections": 1,
        "pending_enrollments": 0,
        "students_without_status": 1,
    }


def test_enrollment_report(client, admin_headers, student_headers, strand, section):
    enrollment = client.post("/api/enrollments", headers=student_headers, json={
        "strand_id": strand.id, "semester": "1st", "school_year": "2026-2027",
    }).json()
    client.post(f"/api/enrollments/{enrollment['id']}/approve", headers=admin_headers, json={"section_id": section.id})

    report = client.get("/api/dashboard/enrollment-report", headers=admin_headers, params={"school_year": "2026-2027"}).json()
    assert report["enrolled_students"] == 1
    assert report["approved_enrollments"] == 1
    assert report["by_strand"] == [{"strand_id": strand.id, "strand_name": "STEM", "approved": 1}]
    assert report["by_semester"] == {"1st": 1}


def test_health(client):
    body = client.get("/api/health").json()
    assert body["status"] == "healthy"
    assert body["environment"] == "development"


def test_database_health(client, db):
    assert client.get("/api/health/database").json() == {"status": "healthy", "connected": True}
