from decimal import Decimal

from fastapi.testclient import TestClient

from app.application.interfaces.payment_gateway import GatewayCallStatus
from app.domain.entities.photo_check import REQUIRED_SIDES

SIDES = [side.value for side in REQUIRED_SIDES]


def _window_payload(**overrides):
    payload = {
        "trailer_id": "trailer-1",
        "start_time": "2026-02-01T10:00:00Z",
        "end_time": "2026-02-01T12:00:00Z",
        "rental_type": "HOURLY",
    }
    payload.update(overrides)
    return payload


def _create_booking(client: TestClient, headers: dict, **overrides) -> dict:
    response = client.post("/api/v1/bookings", json=_window_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _pay(client: TestClient, gateway, headers: dict, booking_id: str, payment_type: str) -> dict:
    response = client.post(
        "/api/v1/payments/create",
        json={"booking_id": booking_id, "payment_type": payment_type},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    created = response.json()
    gateway.set_status(created["gateway_payment_id"], "CONFIRMED")
    webhook = client.post(
        "/api/v1/payments/webhook",
        json=gateway.build_notification(created["gateway_payment_id"], "CONFIRMED"),
    )
    assert webhook.status_code == 200, webhook.text
    assert webhook.json() == {"success": True}
    return created


def _upload_phase(client: TestClient, photo_storage, headers: dict, booking_id: str, phase: str) -> dict:
    body = None
    for side in SIDES:
        ref = photo_storage.put(f"{booking_id}/{phase}/{side}.jpg")
        response = client.put(
            f"/api/v1/bookings/{booking_id}/photos/{phase}/{side}",
            json={"photo_ref": ref},
            headers=headers,
        )
        assert response.status_code == 200, response.text
        body = response.json()
    return body


def test_quote_does_not_require_user(client: TestClient):
    response = client.post(
        "/api/v1/bookings/quote",
        json=_window_payload(rental_type="DAILY", end_time="2026-02-02T10:00:00Z", add_ons=["PICKUP"]),
    )

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["base_cost"]) == Decimal("900")
    assert Decimal(data["add_on_cost"]) == Decimal("500")
    assert Decimal(data["deposit"]) == Decimal("5000")
    assert data["duration_days"] == 1


def test_full_lifecycle_closes_with_full_refund(client: TestClient, gateway, photo_storage, auth_headers):
    booking = _create_booking(client, auth_headers)
    booking_id = booking["booking_id"]
    assert booking["status"] == "PENDING_PAYMENT"
    assert Decimal(booking["total_amount"]) == Decimal("500")

    _pay(client, gateway, auth_headers, booking_id, "rental")
    assert client.get(f"/api/v1/bookings/{booking_id}", headers=auth_headers).json()["status"] == "PAID"

    _pay(client, gateway, auth_headers, booking_id, "deposit")
    assert client.get(f"/api/v1/bookings/{booking_id}", headers=auth_headers).json()["status"] == "ACTIVE"

    check_in = _upload_phase(client, photo_storage, auth_headers, booking_id, "CHECK_IN")
    assert check_in["status"] == "COMPLETED"
    check_out = _upload_phase(client, photo_storage, auth_headers, booking_id, "CHECK_OUT")
    assert check_out["missing_sides"] == []

    final = client.get(f"/api/v1/bookings/{booking_id}", headers=auth_headers).json()
    assert final["status"] == "CLOSED"

    refund = client.get(f"/api/v1/bookings/{booking_id}/deposit-refund", headers=auth_headers).json()
    assert refund["refund_type"] == "FULL"
    assert refund["status"] == "COMPLETED"
    assert Decimal(refund["refund_amount"]) == Decimal("5000")

    verdicts = client.get(f"/api/v1/bookings/{booking_id}/damage-verdicts", headers=auth_headers).json()
    assert sorted(v["side"] for v in verdicts) == sorted(SIDES)
    assert not any(v["has_damage"] for v in verdicts)


def test_missing_user_header_is_unauthorized(client: TestClient):
    response = client.post("/api/v1/bookings", json=_window_payload())

    assert response.status_code == 401


def test_overlapping_booking_conflicts(client: TestClient, auth_headers):
    _create_booking(client, auth_headers)

    response = client.post(
        "/api/v1/bookings",
        json=_window_payload(start_time="2026-02-01T11:00:00Z", end_time="2026-02-01T13:00:00Z"),
        headers=auth_headers,
    )

    assert response.status_code == 409
    assert response.json()["code"] == "SLOT_UNAVAILABLE"


def test_invalid_window_is_bad_request(client: TestClient, auth_headers):
    response = client.post(
        "/api/v1/bookings",
        json=_window_payload(end_time="2026-02-01T09:00:00Z"),
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_WINDOW"


def test_booking_too_far_ahead_is_bad_request(client: TestClient, auth_headers):
    response = client.post(
        "/api/v1/bookings",
        json=_window_payload(start_time="2026-03-01T10:00:00Z", end_time="2026-03-01T12:00:00Z"),
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_WINDOW"


def test_unknown_booking_is_not_found(client: TestClient, auth_headers):
    response = client.get("/api/v1/bookings/does-not-exist", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["code"] == "BOOKING_NOT_FOUND"


def test_other_user_cannot_read_booking(client: TestClient, auth_headers):
    booking = _create_booking(client, auth_headers)

    response = client.get(f"/api/v1/bookings/{booking['booking_id']}", headers={"X-User-Id": "intruder"})

    assert response.status_code == 403
    assert response.json()["code"] == "ACCESS_DENIED"


def test_webhook_with_bad_signature_is_rejected(client: TestClient, gateway, auth_headers):
    booking = _create_booking(client, auth_headers)
    created = client.post(
        "/api/v1/payments/create",
        json={"booking_id": booking["booking_id"], "payment_type": "rental"},
        headers=auth_headers,
    ).json()
    notification = gateway.build_notification(created["gateway_payment_id"], "CONFIRMED")
    notification["Token"] = "0" * 64

    response = client.post("/api/v1/payments/webhook", json=notification)

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_SIGNATURE"


def test_webhook_with_invalid_json_is_rejected(client: TestClient):
    response = client.post(
        "/api/v1/payments/webhook",
        content=b"not-json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400


def test_unavailable_gateway_returns_accepted(client: TestClient, gateway, auth_headers):
    booking = _create_booking(client, auth_headers)
    gateway.fail_next("authorize", GatewayCallStatus.UNAVAILABLE)

    first = client.post(
        "/api/v1/payments/create",
        json={"booking_id": booking["booking_id"], "payment_type": "rental"},
        headers=auth_headers,
    )
    retry = client.post(
        "/api/v1/payments/create",
        json={"booking_id": booking["booking_id"], "payment_type": "rental"},
        headers=auth_headers,
    )

    assert first.status_code == 202
    assert first.json()["gateway_payment_id"] is None
    assert first.json()["message"]
    assert retry.status_code == 200
    assert retry.json()["payment_id"] == first.json()["payment_id"]


def test_payment_status_query(client: TestClient, gateway, auth_headers):
    booking = _create_booking(client, auth_headers)
    created = client.post(
        "/api/v1/payments/create",
        json={"booking_id": booking["booking_id"], "payment_type": "rental"},
        headers=auth_headers,
    ).json()
    gateway.set_status(created["gateway_payment_id"], "CONFIRMED")

    response = client.get(f"/api/v1/payments/{created['payment_id']}/status", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "COMPLETED"
    assert client.get(f"/api/v1/bookings/{booking['booking_id']}", headers=auth_headers).json()["status"] == "PAID"


def test_cancel_frees_the_slot(client: TestClient, auth_headers):
    booking = _create_booking(client, auth_headers)

    cancelled = client.post(f"/api/v1/bookings/{booking['booking_id']}/cancel", headers=auth_headers)

    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "CANCELLED"
    _create_booking(client, auth_headers)


def test_check_out_before_activation_is_conflict(client: TestClient, photo_storage, auth_headers):
    booking = _create_booking(client, auth_headers)
    ref = photo_storage.put(f"{booking['booking_id']}/CHECK_OUT/FRONT.jpg")

    response = client.put(
        f"/api/v1/bookings/{booking['booking_id']}/photos/CHECK_OUT/FRONT",
        json={"photo_ref": ref},
        headers=auth_headers,
    )

    assert response.status_code == 409
    assert response.json()["code"] == "PHOTO_PHASE_CLOSED"


def test_worker_reconciles_failed_settlement(client: TestClient, gateway, photo_storage, auth_headers):
    booking = _create_booking(client, auth_headers)
    booking_id = booking["booking_id"]
    _pay(client, gateway, auth_headers, booking_id, "rental")
    _pay(client, gateway, auth_headers, booking_id, "deposit")
    _upload_phase(client, photo_storage, auth_headers, booking_id, "CHECK_IN")

    gateway.fail_next("cancel", GatewayCallStatus.REJECTED)
    _upload_phase(client, photo_storage, auth_headers, booking_id, "CHECK_OUT")
    assert client.get(f"/api/v1/bookings/{booking_id}", headers=auth_headers).json()["status"] == "RETURNED"

    response = client.post(f"/api/v1/workers/settlements/{booking_id}/reconcile")

    assert response.status_code == 200
    assert response.json()["status"] == "COMPLETED"
    assert response.json()["attempts"] == 2
    assert client.get(f"/api/v1/bookings/{booking_id}", headers=auth_headers).json()["status"] == "CLOSED"

    sweep = client.post("/api/v1/workers/settlements/reconcile", params={"limit": 10})
    assert sweep.json() == {"completed": 0, "limit": 10}


def test_worker_reports_pending_refund_when_gateway_is_down(client: TestClient, gateway, photo_storage, auth_headers):
    booking = _create_booking(client, auth_headers)
    booking_id = booking["booking_id"]
    _pay(client, gateway, auth_headers, booking_id, "rental")
    _pay(client, gateway, auth_headers, booking_id, "deposit")
    _upload_phase(client, photo_storage, auth_headers, booking_id, "CHECK_IN")

    gateway.fail_next("cancel", GatewayCallStatus.UNAVAILABLE)
    gateway.fail_next("cancel", GatewayCallStatus.UNAVAILABLE)
    _upload_phase(client, photo_storage, auth_headers, booking_id, "CHECK_OUT")

    response = client.post(f"/api/v1/workers/settlements/{booking_id}/reconcile")

    assert response.status_code == 503
    assert response.json()["code"] == "GATEWAY_UNAVAILABLE"
    refund = client.get(f"/api/v1/bookings/{booking_id}/deposit-refund", headers=auth_headers).json()
    assert refund["status"] == "PROCESSING"
