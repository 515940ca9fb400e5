from decimal import Decimal

from conftest import OTHER_CUSTOMER_ID


def _confirmed_booking(client, admin_headers, customer_headers) -> int:
    vehicle = client.post(
        "/api/v1/vehicles", json={"name": "Toyota Vios", "daily_rate": "1000.00"}, headers=admin_headers
    ).json()
    booking = client.post(
        "/api/v1/bookings",
        json={
            "vehicle_id": vehicle["id"],
            "pickup_date": "2024-01-10T10:00:00Z",
            "return_date": "2024-01-15T10:00:00Z",
        },
        headers=customer_headers,
    ).json()
    client.post(
        f"/api/v1/bookings/{booking['id']}/transitions",
        json={"action": "approve"},
        headers=admin_headers,
    )
    return booking["id"]


def _request_extension(client, headers, booking_id, new_return_date="2024-01-17T10:00:00Z"):
    return client.post(
        "/api/v1/extensions",
        json={"booking_id": booking_id, "new_return_date": new_return_date},
        headers=headers,
    )


def test_request_and_approve_extension(client, admin_headers, customer_headers):
    booking_id = _confirmed_booking(client, admin_headers, customer_headers)

    requested = _request_extension(client, customer_headers, booking_id)
    assert requested.status_code == 201
    extension = requested.json()
    assert extension["status"] == "pending"
    assert extension["requested_extension_days"] == 2
    assert Decimal(extension["extension_fee"]) == Decimal("2000.00")

    approved = client.put(
        f"/api/v1/extensions/{extension['id']}",
        json={"decision": "approved", "admin_notes": "ok"},
        headers=admin_headers,
    )
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert approved.json()["reviewed_by"] == "admin-1"

    booking = client.get(f"/api/v1/bookings/{booking_id}").json()
    assert booking["return_date"].startswith("2024-01-17T10:00:00")
    assert Decimal(booking["total_price"]) == Decimal("7000.00")


def test_second_pending_extension_conflicts(client, admin_headers, customer_headers):
    booking_id = _confirmed_booking(client, admin_headers, customer_headers)
    _request_extension(client, customer_headers, booking_id)

    response = _request_extension(client, customer_headers, booking_id, "2024-01-18T10:00:00Z")

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "PENDING_EXTENSION_EXISTS"


def test_earlier_return_date_is_rejected(client, admin_headers, customer_headers):
    booking_id = _confirmed_booking(client, admin_headers, customer_headers)

    response = _request_extension(client, customer_headers, booking_id, "2024-01-14T10:00:00Z")

    assert response.status_code == 400
    assert response.json()["error"]["details"]["field"] == "new_return_date"


def test_only_requester_may_ask(client, admin_headers, customer_headers):
    booking_id = _confirmed_booking(client, admin_headers, customer_headers)

    response = _request_extension(client, {"X-Actor-Id": OTHER_CUSTOMER_ID}, booking_id)

    assert response.status_code == 403


def test_customers_cannot_review(client, admin_headers, customer_headers):
    booking_id = _confirmed_booking(client, admin_headers, customer_headers)
    extension_id = _request_extension(client, customer_headers, booking_id).json()["id"]

    response = client.put(
        f"/api/v1/extensions/{extension_id}",
        json={"decision": "approved"},
        headers=customer_headers,
    )

    assert response.status_code == 403


def test_rejected_extension_cannot_be_reviewed_again(client, admin_headers, customer_headers):
    booking_id = _confirmed_booking(client, admin_headers, customer_headers)
    extension_id = _request_extension(client, customer_headers, booking_id).json()["id"]
    client.put(
        f"/api/v1/extensions/{extension_id}",
        json={"decision": "rejected"},
        headers=admin_headers,
    )

    response = client.put(
        f"/api/v1/extensions/{extension_id}",
        json={"decision": "approved"},
        headers=admin_headers,
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "INVALID_EXTENSION_STATUS"


def test_list_extensions(client, admin_headers, customer_headers):
    booking_id = _confirmed_booking(client, admin_headers, customer_headers)
    extension_id = _request_extension(client, customer_headers, booking_id).json()["id"]

    listed = client.get("/api/v1/extensions", params={"booking_id": booking_id, "status": "pending"})

    assert [item["id"] for item in listed.json()] == [extension_id]
