import boto3
import pytest
from botocore.stub import ANY, Stubber
from datetime import datetime, timezone

from registrar.storage.service import StorageService, document_key, get_storage_service, validate_document


def test_document_key_layout():
    now = datetime(2026, 10, 17, 8, 30, tzinfo=timezone.utc)
    assert document_key("clearance", "STU-001", "pdf", now) == f"enrollment/clearance/STU-001_{int(now.timestamp() * 1000)}.pdf"


@pytest.mark.parametrize("kind, content_type, size", [
    ("diploma", "application/pdf", 10),
    ("clearance", "text/plain", 10),
    ("clearance", "application/pdf", 0),
    ("clearance", "image/png", 11 * 1024 * 1024),
])
def test_rejected_documents(kind, content_type, size):
    with pytest.raises(ValueError):
        validate_document(kind, content_type, size)


def test_accepted_document_extension():
    assert validate_document("copy_of_grades", "image/jpeg", 2048) == "jpg"


def test_upload_without_a_bucket(client, student_headers):
    response = client.post(
        "/api/enrollments/documents",
        headers=student_headers,
        data={"kind": "clearance"},
        files={"file": ("clearance.pdf", b"%PDF-1.4", "application/pdf")},
    )
    assert response.status_code == 503


def test_upload_rejects_unsupported_files(client, student_headers):
    response = client.post(
        "/api/enrollments/documents",
        headers=student_headers,
        data={"kind": "clearance"},
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 400


def test_upload_puts_the_object_in_s3(app, client, student_headers):
    storage = StorageService()
    storage.bucket = "registrar-documents"
    storage.s3 = boto3.client("s3", region_name="ap-southeast-1", aws_access_key_id="test", aws_secret_access_key="test")
    app.dependency_overrides[get_storage_service] = lambda: storage

    with Stubber(storage.s3) as stubber:
        stubber.add_response("put_object", {}, {
            "Bucket": "registrar-documents",
            "Key": ANY,
            "Body": b"%PDF-1.4",
            "ContentType": "application/pdf",
        })
        response = client.post(
            "/api/enrollments/documents",
            headers=student_headers,
            data={"kind": "clearance"},
            files={"file": ("clearance.pdf", b"%PDF-1.4", "application/pdf")},
        )
        stubber.assert_no_pending_responses()

    assert response.status_code == 201
    url = response.json()["url"]
    assert url.startswith("https://registrar-documents.s3.ap-southeast-1.amazonaws.com/enrollment/clearance/STU-001_")
    assert url.endswith(".pdf")
