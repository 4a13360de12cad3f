import pytest
from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from core.config import ADMIN_NAME
from core.security import verify_admin_key
import services.pin_allocation_service as pin_allocation_service
from repositories.student_pin_repository import StudentPINRepository

RANGE_BODY = {
    "joining_year": 2024,
    "branch": "CME",
    "year": 1,
    "section": "A",
    "start_sequence": 1,
    "end_sequence": 3,
}


def _register(client, pin_number, email):
    response = client.post("/api/v1/registration", json={
        "pin_number": pin_number,
        "full_name": "Test Student",
        "email": email,
        "phone_number": "9876543210",
    })
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/admin/pins"),
        ("get", "/api/admin/pins/statistics"),
        ("get", "/api/admin/students"),
        ("get", "/api/admin/stats/dashboard"),
        ("delete", "/api/admin/pins/24030-CME-001"),
    ],
)
def test_admin_routes_require_key(client, method, path) -> None:
    assert getattr(client, method)(path).status_code in (403, 422)
    assert getattr(client, method)(path, headers={"X-Admin-Key": "wrong"}).status_code == 403


def test_create_range(client, admin_headers) -> None:
    response = client.post("/api/admin/pins/range", json=RANGE_BODY, headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 3
    assert body["pin_numbers"] == ["24030-CME-001", "24030-CME-002", "24030-CME-003"]


def test_create_range_validation_error(client, admin_headers) -> None:
    body = dict(RANGE_BODY, start_sequence=9, end_sequence=2)
    response = client.post("/api/admin/pins/range", json=body, headers=admin_headers)
    assert response.status_code == 422


def test_create_range_conflict(client, admin_headers) -> None:
    client.post("/api/admin/pins/range", json=RANGE_BODY, headers=admin_headers)

    response = client.post(
        "/api/admin/pins/range", json=dict(RANGE_BODY, start_sequence=3, end_sequence=6), headers=admin_headers,
    )

    assert response.status_code == 409
    listed = client.get("/api/admin/pins", headers=admin_headers).json()
    assert len(listed) == 3


def test_create_individual(client, admin_headers) -> None:
    body = {k: v for k, v in RANGE_BODY.items() if not k.endswith("_sequence")}
    body["pin_sequences"] = ["1", "abc", "3"]

    response = client.post("/api/admin/pins/individual", json=body, headers=admin_headers)

    assert response.status_code == 201
    assert response.json()["count"] == 2


def test_create_individual_nothing_valid(client, admin_headers) -> None:
    body = {k: v for k, v in RANGE_BODY.items() if not k.endswith("_sequence")}
    body["pin_sequences"] = ["abc"]

    response = client.post("/api/admin/pins/individual", json=body, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "No valid PIN numbers provided"


def test_get_and_update_pin(client, admin_headers) -> None:
    client.post("/api/admin/pins/range", json=RANGE_BODY, headers=admin_headers)

    assert client.get("/api/admin/pins/24030-CME-002", headers=admin_headers).json()["status"] == "available"
    assert client.get("/api/admin/pins/24030-CME-009", headers=admin_headers).status_code == 404

    response = client.patch(
        "/api/admin/pins/24030-CME-002/status", json={"status": "blocked"}, headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "blocked"

    blocked = client.get("/api/admin/pins", params={"status": "blocked"}, headers=admin_headers).json()
    assert [p["pin_number"] for p in blocked] == ["24030-CME-002"]


def test_manual_registered_status_is_rejected(client, admin_headers) -> None:
    client.post("/api/admin/pins/range", json=RANGE_BODY, headers=admin_headers)
    response = client.patch(
        "/api/admin/pins/24030-CME-001/status", json={"status": "registered"}, headers=admin_headers,
    )
    assert response.status_code == 400


def test_delete_pin_cascades(client, admin_headers) -> None:
    client.post("/api/admin/pins/range", json=RANGE_BODY, headers=admin_headers)
    _register(client, "24030-CME-001", "one@campus.edu")

    response = client.delete("/api/admin/pins/24030-CME-001", headers=admin_headers)

    assert response.status_code == 200
    deleted = response.json()["deleted"]
    assert deleted == {"pin_number": "24030-CME-001", "pin_deleted": True, "student": True, "products_count": 0}
    assert client.get("/api/admin/students", headers=admin_headers).json() == []


def test_delete_partial_failure_is_reported(client, admin_headers, monkeypatch) -> None:
    client.post("/api/admin/pins/range", json=RANGE_BODY, headers=admin_headers)
    _register(client, "24030-CME-001", "one@campus.edu")

    def fail(db, pin):
        raise OperationalError("DELETE FROM student_pins", {}, Exception("database is locked"))

    monkeypatch.setattr(pin_allocation_service, "CASCADE_DELETE_MODE", "stepwise")
    monkeypatch.setattr(StudentPINRepository, "delete_pin", staticmethod(fail))

    response = client.delete("/api/admin/pins/24030-CME-001", headers=admin_headers)

    assert response.status_code == 500
    detail = response.json()["detail"]
    assert detail["partial_failure"] is True
    assert detail["error_type"] == "partial_failure"
    assert detail["failed_step"] == "pin"
    assert detail["deleted"]["student"] is True


def test_bulk_delete(client, admin_headers) -> None:
    client.post("/api/admin/pins/range", json=RANGE_BODY, headers=admin_headers)

    response = client.post(
        "/api/admin/pins/bulk-delete",
        json={"pin_numbers": ["24030-CME-001", "24030-CME-002", "24030-CME-001"]},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert (body["total"], body["succeeded"], body["failed"]) == (2, 2, 0)
    remaining = client.get("/api/admin/pins", headers=admin_headers).json()
    assert [p["pin_number"] for p in remaining] == ["24030-CME-003"]


def test_statistics_and_dashboard(client, admin_headers) -> None:
    client.post("/api/admin/pins/range", json=RANGE_BODY, headers=admin_headers)
    student = _register(client, "24030-CME-001", "one@campus.edu")
    client.post(f"/api/v1/registration/{student['id']}/confirm-email")

    stats = client.get("/api/admin/pins/statistics", headers=admin_headers).json()
    assert (stats["total_pins"], stats["available_pins"], stats["registered_pins"]) == (3, 2, 1)

    dashboard = client.get("/api/admin/stats/dashboard", headers=admin_headers).json()
    assert dashboard["students"] == {"total": 1, "pending": 0, "active": 1}
    assert dashboard["products"] == {"total": 0, "active": 0, "inactive": 0}
    assert dashboard["pins"]["total_pins"] == 3


def test_student_and_product_moderation(client, admin_headers) -> None:
    client.post("/api/admin/pins/range", json=RANGE_BODY, headers=admin_headers)
    student = _register(client, "24030-CME-001", "one@campus.edu")
    client.post(f"/api/v1/registration/{student['id']}/confirm-email")
    product = client.post("/api/v1/products", json={
        "seller_id": student["id"],
        "title": "Drafter",
        "description": "Barely used",
        "price": 200,
        "category": "stationary",
        "image_urls": ["https://img.campus.edu/d.jpg"],
    }).json()

    hidden = client.patch(
        f"/api/admin/products/{product['id']}/status", json={"status": "inactive"}, headers=admin_headers,
    )
    assert hidden.status_code == 200
    assert client.get("/api/v1/products").json()["total"] == 0

    demoted = client.patch(
        f"/api/admin/students/{student['id']}/status", json={"status": "pending"}, headers=admin_headers,
    )
    assert demoted.status_code == 200
    assert demoted.json()["status"] == "pending"

    pending = client.get("/api/admin/students", params={"status": "pending"}, headers=admin_headers).json()
    assert [s["id"] for s in pending] == [student["id"]]

    missing = client.patch("/api/admin/students/999/status", json={"status": "active"}, headers=admin_headers)
    assert missing.status_code == 404


def test_admin_context_is_immutable() -> None:
    context = verify_admin_key(x_admin_key="test-admin-key", x_admin_name="Registrar")

    assert context.admin_name == "Registrar"
    assert context.authenticated_at.tzinfo is not None
    with pytest.raises(ValidationError):
        context.admin_name = "someone else"


def test_admin_context_falls_back_to_configured_name() -> None:
    assert verify_admin_key(x_admin_key="test-admin-key", x_admin_name=None).admin_name == ADMIN_NAME

    with pytest.raises(HTTPException) as exc:
        verify_admin_key(x_admin_key="wrong", x_admin_name=None)
    assert exc.value.status_code == 403
