def test_create_teacher_uppercases_the_employee_id(client, admin_headers):
    response = client.post("/api/teachers", headers=admin_headers, json={
        "employee_id": "emp-300",
        "first_name": "Andres",
        "last_name": "Bonifacio",
        "email": "andres@school.test",
    })
    assert response.status_code == 201
    assert response.json()["employee_id"] == "EMP-300"
    assert response.json()["is_active"] is True


def test_teacher_requires_email(client, admin_headers):
    response = client.post("/api/teachers", headers=admin_headers, json={
        "employee_id": "EMP-301", "first_name": "A", "last_name": "B",
    })
    assert response.status_code == 400


def test_designated_section_must_exist(client, admin_headers):
    response = client.post("/api/teachers", headers=admin_headers, json={
        "employee_id": "EMP-302",
        "first_name": "Gabriela",
        "last_name": "Silang",
        "email": "gabriela@school.test",
        "designated_section_id": "missing",
    })
    assert response.status_code == 404


def test_active_filter_treats_unset_as_active(db, client, admin_headers, teacher):
    from registrar.models import Teacher

    db.add(Teacher(employee_id="EMP-400", first_name="Old", last_name="Timer", active_status=False))
    db.add(Teacher(employee_id="EMP-401", first_name="Never", last_name="Set", active_status=None))
    db.commit()

    active = client.get("/api/teachers", headers=admin_headers, params={"active": "true"}).json()
    assert sorted(t["employee_id"] for t in active["items"]) == ["EMP-100", "EMP-401"]

    inactive = client.get("/api/teachers", headers=admin_headers, params={"active": "false"}).json()
    assert [t["employee_id"] for t in inactive["items"]] == ["EMP-400"]


def test_teacher_updates_own_settings(client, teacher_headers):
    response = client.put("/api/teachers/me", headers=teacher_headers, json={"contact_number": "0918", "last_name": "Changed"})
    assert response.status_code == 200
    assert response.json()["contact_number"] == "0918"
    assert response.json()["last_name"] == "Reyes"


def test_delete_teacher_by_exact_id(client, admin_headers, teacher):
    assert client.delete("/api/teachers/EMP-10", headers=admin_headers).status_code == 404
    assert client.delete("/api/teachers/emp-100", headers=admin_headers).status_code == 204

    logs = client.get("/api/logs", headers=admin_headers).json()["items"]
    assert logs[0]["name"] == "Teacher Deleted"


def test_admin_edit_rejects_blank_required_fields(client, admin_headers, teacher):
    response = client.put("/api/teachers/EMP-100", headers=admin_headers, json={"email": " "})
    assert response.status_code == 400
    assert "email" in response.json()["detail"]

    response = client.put("/api/teachers/EMP-100", headers=admin_headers, json={"first_name": "Mariana"})
    assert response.status_code == 200
    assert response.json()["email"] == "maria@school.test"
