"""API tests over an app backed by in-memory SQLite."""

import logging
from logging.handlers import TimedRotatingFileHandler

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from api.settings import Settings

PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="


@pytest.fixture
def client():
    settings = Settings(storage_backend="sqlalchemy", database_url="sqlite://")
    with TestClient(create_app(settings)) as c:
        yield c


def _create_contact(client, **overrides) -> int:
    body = {"name": "Alice", "email": "alice@example.com", "phone": "+12025551234", "type": "Customer"}
    body.update(overrides)
    r = client.post("/api/contacts", json=body)
    assert r.status_code == 201, r.json()
    return r.json()["data"]["id"]


def _upload(client, contact_id: int, **overrides):
    body = {"imageData": PNG_B64, "fileName": "dot.png", "contentType": "image/png"}
    body.update(overrides)
    return client.post(f"/api/contacts/{contact_id}/images", json=body)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "Healthy"
    assert "timestamp" in body


def test_create_contact_envelope_is_camel_case(client):
    r = client.post("/api/contacts", json={"name": "Bob", "type": 1})
    assert r.status_code == 201
    body = r.json()
    assert set(body) == {"success", "message", "data", "errors", "timestamp"}
    assert body["success"] is True
    assert body["message"] == "Contact created successfully"
    assert body["errors"] == []
    assert body["data"] == {
        "id": body["data"]["id"],
        "name": "Bob",
        "email": None,
        "phone": None,
        "type": "Lead",
        "imageCount": 0,
    }


def test_create_contact_validation_failure_is_400(client):
    r = client.post("/api/contacts", json={"name": "x" * 101, "email": "nope", "type": "Customer"})
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert body["errors"] == ["Name cannot exceed 100 characters", "Invalid email format"]
    assert client.get("/api/contacts").json()["data"] == []


def test_list_contacts_reports_image_counts(client):
    alice = _create_contact(client, name="Alice")
    _create_contact(client, name="Bob")
    _upload(client, alice)
    _upload(client, alice)

    r = client.get("/api/contacts")
    assert r.status_code == 200
    counts = {c["name"]: c["imageCount"] for c in r.json()["data"]}
    assert counts == {"Alice": 2, "Bob": 0}


def test_get_contact_with_images(client):
    contact_id = _create_contact(client)
    _upload(client, contact_id)

    r = client.get(f"/api/contacts/{contact_id}")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["imageCount"] == 1
    assert data["images"][0]["imageData"] == PNG_B64
    assert data["images"][0]["contactId"] == contact_id


def test_get_missing_contact_is_404(client):
    r = client.get("/api/contacts/12345")
    assert r.status_code == 404
    assert r.json()["message"] == "Contact with ID 12345 not found"


def test_non_integer_id_is_400_envelope(client):
    r = client.get("/api/contacts/abc")
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Invalid argument"
    assert body["errors"]


def test_update_contact_ignores_type(client):
    contact_id = _create_contact(client, type="Lead")
    r = client.put(
        f"/api/contacts/{contact_id}",
        json={"name": "Alice Updated", "phone": "+390612345678", "type": "Customer"},
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["name"] == "Alice Updated"
    assert data["email"] is None
    assert data["type"] == "Lead"

    assert client.put("/api/contacts/999", json={"name": "X"}).status_code == 404


def test_delete_contact_cascades_images(client):
    contact_id = _create_contact(client)
    image_id = _upload(client, contact_id).json()["data"]["id"]

    r = client.delete(f"/api/contacts/{contact_id}")
    assert r.status_code == 200
    assert r.json()["data"] is None
    assert client.get(f"/api/contacts/{contact_id}/images/{image_id}").status_code == 404
    assert client.delete(f"/api/contacts/{contact_id}").status_code == 404


def test_upload_round_trip(client):
    contact_id = _create_contact(client)
    r = _upload(client, contact_id)
    assert r.status_code == 201
    image = r.json()["data"]
    assert image["contentType"] == "image/png"
    assert image["uploadedAt"]

    fetched = client.get(f"/api/contacts/{contact_id}/images/{image['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["data"]["imageData"] == PNG_B64


def test_upload_invalid_base64_is_400_and_inserts_nothing(client):
    contact_id = _create_contact(client)
    r = _upload(client, contact_id, imageData="***")
    assert r.status_code == 400
    assert r.json()["errors"] == ["Invalid base64 image data"]
    assert client.get(f"/api/contacts/{contact_id}/images").json()["data"] == []


def test_upload_to_missing_contact_is_404(client):
    assert _upload(client, 555).status_code == 404


def test_image_cap_over_http(client):
    contact_id = _create_contact(client)
    batch = [{"imageData": PNG_B64} for _ in range(9)]
    r = client.post(f"/api/contacts/{contact_id}/images/batch", json=batch)
    assert r.status_code == 200
    assert len(r.json()["data"]) == 9

    r = client.post(f"/api/contacts/{contact_id}/images/batch", json=batch[:2])
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot upload 2 images. Maximum allowed is 1 more images"
    assert len(client.get(f"/api/contacts/{contact_id}/images").json()["data"]) == 9

    assert _upload(client, contact_id).status_code == 201
    r = _upload(client, contact_id)
    assert r.status_code == 400
    assert r.json()["message"] == "Maximum number of images (10) reached for this contact"


def test_empty_batch_is_400(client):
    contact_id = _create_contact(client)
    r = client.post(f"/api/contacts/{contact_id}/images/batch", json=[])
    assert r.status_code == 400
    assert r.json()["message"] == "No images provided"


def test_limit_checks(client):
    contact_id = _create_contact(client)
    client.post(
        f"/api/contacts/{contact_id}/images/batch",
        json=[{"imageData": PNG_B64} for _ in range(6)],
    )

    r = client.get(f"/api/contacts/{contact_id}/images/validate-limit", params={"additionalImages": 5})
    assert r.status_code == 200
    assert r.json()["data"] is False

    r = client.get(f"/api/contacts/{contact_id}/images/validate-limit", params={"additionalImages": 4})
    assert r.json()["data"] is True

    r = client.get(f"/api/contacts/{contact_id}/can-add-images")
    assert r.json()["data"] is True

    r = client.get(f"/api/contacts/{contact_id}/can-add-images", params={"additionalImages": 0})
    assert r.status_code == 400

    assert client.get("/api/contacts/999/can-add-images").status_code == 404


def test_delete_image(client):
    contact_id = _create_contact(client)
    image_id = _upload(client, contact_id).json()["data"]["id"]

    r = client.delete(f"/api/contacts/{contact_id}/images/{image_id}")
    assert r.status_code == 200
    assert r.json()["message"] == "Image deleted successfully"
    assert client.delete(f"/api/contacts/{contact_id}/images/{image_id}").status_code == 404


def test_unknown_route_uses_envelope(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.json()["success"] is False


def test_cors_is_open(client):
    r = client.options(
        "/api/contacts",
        headers={"Origin": "http://localhost:4200", "Access-Control-Request-Method": "POST"},
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] in ("*", "http://localhost:4200")


def test_created_responses_carry_location(client):
    r = client.post("/api/contacts", json={"name": "Dana", "type": "Lead"})
    contact_id = r.json()["data"]["id"]
    assert r.headers["location"] == f"/api/contacts/{contact_id}"
    assert client.get(r.headers["location"]).status_code == 200

    r = _upload(client, contact_id)
    image_id = r.json()["data"]["id"]
    assert r.headers["location"] == f"/api/contacts/{contact_id}/images/{image_id}"
    assert client.get(r.headers["location"]).json()["data"]["imageData"] == PNG_B64

    assert "location" not in client.post("/api/contacts", json={"type": "Lead"}).headers


def test_lifespan_closes_log_file(tmp_path):
    log_path = tmp_path / "logs" / "leadbook.log"
    settings = Settings(storage_backend="memory", log_file=str(log_path))
    root = logging.getLogger()

    with TestClient(create_app(settings)) as c:
        assert c.get("/health").status_code == 200
        file_handlers = [h for h in root.handlers if isinstance(h, TimedRotatingFileHandler)]
        assert len(file_handlers) == 1
        logging.getLogger("leadbook.contacts").warning("contact 7 not found")

    assert file_handlers[0] not in root.handlers
    assert file_handlers[0].stream is None
    assert "leadbook.contacts - WARNING - contact 7 not found" in log_path.read_text()
