from conftest import login


def test_services_catalog_lists_active_only(client, catalog):
    response = client.get("/api/v1/services")

    assert response.status_code == 200
    titles = [s["title"] for s in response.json()["services"]]
    assert titles == ["Lavage", "Détailing"]


def test_service_detail_and_missing(client, catalog):
    assert client.get(f"/api/v1/services/{catalog.wash}").json()["service"]["duration_minutes"] == 60

    response = client.get("/api/v1/services/999")
    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


def test_availability_endpoint(client, catalog):
    response = client.get(
        "/api/v1/availability",
        params={"date": "2030-01-07", "serviceId": catalog.wash, "step": 60}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["stepMinutes"] == 60
    assert body["slots"][0]["startAt"] == "2030-01-07T09:00:00+01:00"
    assert len(body["slots"]) == 9


def test_availability_validation_errors(client, catalog):
    bad_date = client.get("/api/v1/availability", params={"date": "07-01-2030", "serviceId": catalog.wash})
    week_date = client.get("/api/v1/availability", params={"date": "2030-W02-1", "serviceId": catalog.wash})
    no_service = client.get("/api/v1/availability", params={"date": "2030-01-07"})
    bad_resource = client.get(
        "/api/v1/availability",
        params={"date": "2030-01-07", "serviceId": catalog.wash, "resourceId": 999}
    )

    assert bad_date.status_code == 400
    assert bad_date.json()["code"] == "validation_error"
    assert week_date.status_code == 400
    assert no_service.status_code == 400
    assert bad_resource.status_code == 404


def test_booking_requires_authentication(client, catalog):
    response = client.post("/api/v1/bookings", json={"serviceId": catalog.wash, "startAt": "2030-01-07T10:00:00"})

    assert response.status_code == 401
    assert response.json()["code"] == "authentication_required"


def test_create_booking_then_conflict(client, catalog, users):
    alice = login(client, "alice@example.com")
    bob = login(client, "bob@example.com")
    body = {
        "serviceId": catalog.wash,
        "startAt": "2030-01-07T10:00:00",
        "vehicleType": "Berline",
        "license_plate": "AB-123-CD",
    }

    created = client.post("/api/v1/bookings", json=body, headers=alice)
    conflict = client.post("/api/v1/bookings", json=body, headers=bob)

    assert created.status_code == 201
    booking = created.json()["booking"]
    assert booking["status"] == "confirmed"
    assert booking["resource_id"] == catalog.bay
    assert booking["vehicleType"] == booking["vehicle_type"] == "Berline"
    assert booking["licensePlate"] == "AB-123-CD"
    assert booking["end_at"] == "2030-01-07T11:00:00+01:00"

    assert conflict.status_code == 409
    assert conflict.json()["code"] == "slot_unavailable"


def test_conflict_is_distinct_from_not_found(client, catalog, users):
    alice = login(client, "alice@example.com")

    missing = client.post(
        "/api/v1/bookings",
        json={"serviceId": 999, "startAt": "2030-01-07T10:00:00"},
        headers=alice
    )

    assert missing.status_code == 404
    assert missing.json()["code"] == "not_found"


def test_booking_with_missing_fields_is_400(client, catalog, users):
    alice = login(client, "alice@example.com")

    response = client.post("/api/v1/bookings", json={"serviceId": catalog.wash}, headers=alice)

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


def test_booked_slot_disappears_from_availability(client, catalog, users):
    alice = login(client, "alice@example.com")
    client.post("/api/v1/bookings", json={"serviceId": catalog.wash, "startAt": "2030-01-07T10:00:00"}, headers=alice)

    slots = client.get(
        "/api/v1/availability",
        params={"date": "2030-01-07", "serviceId": catalog.wash, "step": 60}
    ).json()["slots"]
    starts = [s["startAt"][11:16] for s in slots]

    assert "10:00" not in starts
    assert "11:00" in starts


def test_list_get_update_delete_flow(client, catalog, users):
    alice = login(client, "alice@example.com")
    bob = login(client, "bob@example.com")
    admin = login(client, "admin@example.com")

    booking_id = client.post(
        "/api/v1/bookings",
        json={"serviceId": catalog.wash, "startAt": "2030-01-07T10:00:00"},
        headers=alice
    ).json()["booking"]["id"]

    listed = client.get("/api/v1/bookings", headers=alice).json()["bookings"]
    assert [b["id"] for b in listed] == [booking_id]
    assert client.get("/api/v1/bookings", headers=bob).json()["bookings"] == []

    assert client.get(f"/api/v1/bookings/{booking_id}", headers=bob).status_code == 403
    assert client.get(f"/api/v1/bookings/{booking_id}", headers=admin).status_code == 200

    moved = client.put(
        f"/api/v1/bookings/{booking_id}",
        json={"startAt": "2030-01-07T14:00:00", "notes": "Après-midi"},
        headers=alice
    )
    assert moved.status_code == 200
    assert moved.json()["booking"]["start_at"] == "2030-01-07T14:00:00+01:00"
    assert moved.json()["booking"]["notes"] == "Après-midi"

    forbidden = client.put(f"/api/v1/bookings/{booking_id}", json={"status": "completed"}, headers=alice)
    assert forbidden.status_code == 403
    assert forbidden.json()["code"] == "forbidden"

    cancelled = client.put(f"/api/v1/bookings/{booking_id}", json={"status": "cancelled"}, headers=alice)
    assert cancelled.json()["booking"]["status"] == "cancelled"
    assert cancelled.json()["booking"]["canceled_by"] == users.alice

    assert client.delete(f"/api/v1/bookings/{booking_id}", headers=bob).status_code == 403
    assert client.delete(f"/api/v1/bookings/{booking_id}", headers=alice).status_code == 200
    assert client.get(f"/api/v1/bookings/{booking_id}", headers=alice).status_code == 404


def test_reschedule_conflict_over_http(client, catalog, users):
    alice = login(client, "alice@example.com")
    bob = login(client, "bob@example.com")
    client.post("/api/v1/bookings", json={"serviceId": catalog.wash, "startAt": "2030-01-07T10:00:00"}, headers=alice)
    bob_booking = client.post(
        "/api/v1/bookings",
        json={"serviceId": catalog.wash, "startAt": "2030-01-07T15:00:00"},
        headers=bob
    ).json()["booking"]

    response = client.put(
        f"/api/v1/bookings/{bob_booking['id']}",
        json={"startAt": "2030-01-07T10:30:00"},
        headers=bob
    )

    assert response.status_code == 409
    assert response.json()["code"] == "slot_unavailable"


def test_empty_update_is_400(client, catalog, users):
    alice = login(client, "alice@example.com")
    booking_id = client.post(
        "/api/v1/bookings",
        json={"serviceId": catalog.wash, "startAt": "2030-01-07T10:00:00"},
        headers=alice
    ).json()["booking"]["id"]

    response = client.put(f"/api/v1/bookings/{booking_id}", json={}, headers=alice)

    assert response.status_code == 400


def test_responses_carry_correlation_id(client):
    response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})

    assert response.status_code == 200
    assert response.headers["X-Correlation-ID"] == "abc-123"
