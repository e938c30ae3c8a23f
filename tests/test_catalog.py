def test_duplicate_section_name_in_the_same_strand(client, admin_headers, section, strand):
    response = client.post("/api/sections", headers=admin_headers, json={"section_name": "STEM-A", "strand_id": strand.id})
    assert response.status_code == 409
    assert response.json()["detail"] == "A section with this name already exists in this strand"


def test_same_section_name_in_another_strand(client, admin_headers, section):
    other = client.post("/api/strands", headers=admin_headers, json={"strand_name": "ABM", "strand_description": "Accountancy"}).json()
    response = client.post("/api/sections", headers=admin_headers, json={"section_name": "STEM-A", "strand_id": other["id"]})
    assert response.status_code == 201


def test_renaming_onto_an_existing_section(client, admin_headers, section, strand):
    second = client.post("/api/sections", headers=admin_headers, json={"section_name": "STEM-B", "strand_id": strand.id}).json()
    response = client.put(f"/api/sections/{second['id']}", headers=admin_headers, json={"section_name": "STEM-A"})
    assert response.status_code == 409


def test_section_needs_an_existing_strand(client, admin_headers):
    response = client.post("/api/sections", headers=admin_headers, json={"section_name": "X-1", "strand_id": "missing"})
    assert response.status_code == 404


def test_sections_filtered_by_strand(client, student_headers, section, strand):
    response = client.get("/api/sections", headers=student_headers, params={"strand_id": strand.id})
    assert [s["section_name"] for s in response.json()] == ["STEM-A"]


def test_strand_name_needs_two_characters(client, admin_headers):
    response = client.post("/api/strands", headers=admin_headers, json={"strand_name": "S", "strand_description": "Too short"})
    assert response.status_code == 400


def test_strand_changes_are_logged(client, admin_headers):
    client.post("/api/strands", headers=admin_headers, json={"strand_name": "HUMSS", "strand_description": "Humanities"})
    logs = client.get("/api/logs", headers=admin_headers).json()["items"]
    assert logs[0]["name"] == "Strand Created"
    assert logs[0]["student_id"] == "SYSTEM"


def test_subject_needs_at_least_one_strand(client, admin_headers):
    response = client.post("/api/subjects", headers=admin_headers, json={"subject_name": "General Math", "strand_ids": []})
    assert response.status_code == 400


def test_subjects_listed_by_strand(client, admin_headers, strand):
    client.post("/api/subjects", headers=admin_headers, json={"subject_name": "Pre-Calculus", "strand_ids": [strand.id]})
    other = client.post("/api/strands", headers=admin_headers, json={"strand_name": "ABM", "strand_description": "Accountancy"}).json()
    client.post("/api/subjects", headers=admin_headers, json={"subject_name": "Business Math", "strand_ids": [other["id"]]})

    response = client.get("/api/subjects", headers=admin_headers, params={"strand_id": strand.id})
    assert [s["subject_name"] for s in response.json()] == ["Pre-Calculus"]


def test_only_admins_change_the_catalog(client, teacher_headers):
    response = client.post("/api/strands", headers=teacher_headers, json={"strand_name": "TVL", "strand_description": "Tech-Voc"})
    assert response.status_code == 403
