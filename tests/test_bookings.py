from datetime import date, timedelta
from urllib.parse import unquote

import pytest

from conftest import API, sign_up


def form(**overrides):
    data = {
        "booking_date": (date.today() + timedelta(days=1)).isoformat(),
        "start_time": "10:00",
        "customer_name": "سارة",
        "customer_phone": "0661234567",
        "customer_location": "باب الزوار",
        "notes": "الطابق الثاني",
    }
    data.update(overrides)
    return data


def book(client, service_id, headers, **overrides):
    return client.post(f"{API}/services/{service_id}/bookings", json=form(**overrides), headers=headers)


def test_create_booking_is_pending_and_notifies_provider(client, provider, customer, service):
    response = book(client, service["id"], customer["headers"])
    assert response.status_code == 201, response.text
    booking = response.json()
    assert booking["status"] == "pending"
    assert booking["status_label"] == "معلق"
    assert booking["provider_id"] == provider["user"]["id"]
    assert booking["customer_id"] == customer["user"]["id"]
    assert booking["service"]["price_label"] == "1500 د.ج"
    assert booking["provider"] == {"full_name": "أحمد الكهربائي", "phone": "0551234567"}
    assert booking["has_review"] is False

    notifications = client.get(f"{API}/notifications/", headers=provider["headers"]).json()
    assert len(notifications) == 1
    assert notifications[0]["kind"] == "booking_created"
    assert notifications[0]["title"] == "حجز جديد"
    assert notifications[0]["booking_id"] == booking["id"]


@pytest.mark.parametrize(
    "overrides, code",
    [
        ({"customer_name": "   "}, "required_fields"),
        ({"customer_location": ""}, "required_fields"),
        ({"start_time": None}, "required_fields"),
        ({"booking_date": None}, "required_fields"),
        ({"customer_phone": ""}, "required_fields"),
        ({"customer_phone": "0212345678"}, "invalid_phone"),
        ({"customer_phone": "055123456"}, "invalid_phone"),
        ({"start_time": "9am"}, "invalid_time"),
        ({"notes": "x" * 501}, "notes_too_long"),
        ({"booking_date": (date.today() - timedelta(days=1)).isoformat()}, "date_out_of_window"),
        ({"booking_date": (date.today() + timedelta(days=7)).isoformat()}, "date_out_of_window"),
    ],
)
def test_create_booking_validation(client, customer, service, overrides, code):
    response = book(client, service["id"], customer["headers"], **overrides)
    assert response.status_code == 400
    assert response.json()["code"] == code


def test_last_day_of_window_is_bookable(client, customer, service):
    last_day = (date.today() + timedelta(days=6)).isoformat()
    assert book(client, service["id"], customer["headers"], booking_date=last_day).status_code == 201


def test_phone_with_spaces_is_accepted(client, customer, service):
    response = book(client, service["id"], customer["headers"], customer_phone="07 71 23 45 67")
    assert response.status_code == 201
    assert response.json()["customer_phone"] == "0771234567"


def test_provider_cannot_book_own_service(client, provider, service):
    response = book(client, service["id"], provider["headers"])
    assert response.status_code == 403
    assert response.json()["code"] == "own_service"


def test_inactive_and_missing_services(client, provider, customer, service):
    assert book(client, 999, customer["headers"]).status_code == 404
    client.put(f"{API}/services/{service['id']}", json={"is_active": False}, headers=provider["headers"])
    response = book(client, service["id"], customer["headers"])
    assert response.status_code == 400
    assert response.json()["code"] == "service_inactive"


def test_double_booking_is_rejected_until_the_slot_is_released(client, customer, service):
    assert book(client, service["id"], customer["headers"]).status_code == 201
    other = sign_up(client, "other@example.com")
    response = book(client, service["id"], other["headers"])
    assert response.status_code == 409
    assert response.json()["code"] == "slot_taken"

    first = client.get(f"{API}/bookings/mine", headers=customer["headers"]).json()[0]
    assert client.post(f"{API}/bookings/{first['id']}/cancel", headers=customer["headers"]).status_code == 200
    assert book(client, service["id"], other["headers"]).status_code == 201


def test_start_time_must_match_a_configured_slot(client, provider, customer, service):
    tomorrow = date.today() + timedelta(days=1)
    client.put(
        f"{API}/services/{service['id']}/availability",
        json={"days": [{
            "day_of_week": (tomorrow.weekday() + 1) % 7,
            "is_available": True,
            "slots": [{"start_time": "09:00", "end_time": "11:00"}],
        }]},
        headers=provider["headers"],
    )
    response = book(client, service["id"], customer["headers"], start_time="10:00")
    assert response.status_code == 400
    assert response.json()["code"] == "slot_unavailable"

    response = book(client, service["id"], customer["headers"], start_time="09:00")
    assert response.status_code == 201
    assert response.json()["end_time"] == "11:00"

    day_after = (tomorrow + timedelta(days=1)).isoformat()
    response = book(client, service["id"], customer["headers"], booking_date=day_after, start_time="09:00")
    assert response.json()["code"] == "slot_unavailable"


def test_booking_cannot_stretch_past_its_slot(client, provider, customer, service):
    tomorrow = date.today() + timedelta(days=1)
    client.put(
        f"{API}/services/{service['id']}/availability",
        json={"days": [{
            "day_of_week": (tomorrow.weekday() + 1) % 7,
            "is_available": True,
            "slots": [
                {"start_time": "10:00", "end_time": "11:00"},
                {"start_time": "11:00", "end_time": "12:00"},
            ],
        }]},
        headers=provider["headers"],
    )
    response = book(client, service["id"], customer["headers"], start_time="10:00", end_time="12:00")
    assert response.status_code == 400
    assert response.json()["code"] == "slot_unavailable"

    response = book(client, service["id"], customer["headers"], start_time="10:00", end_time="11:00")
    assert response.status_code == 201
    other = sign_up(client, "other@example.com")
    assert book(client, service["id"], other["headers"], start_time="11:00").status_code == 201


def test_overlapping_bookings_without_schedule_are_rejected(client, customer, service):
    response = book(client, service["id"], customer["headers"], start_time="10:00", end_time="12:00")
    assert response.status_code == 201
    other = sign_up(client, "other@example.com")

    response = book(client, service["id"], other["headers"], start_time="11:00")
    assert response.status_code == 409
    assert response.json()["code"] == "slot_taken"
    response = book(client, service["id"], other["headers"], start_time="09:00", end_time="10:30")
    assert response.status_code == 409

    assert book(client, service["id"], other["headers"], start_time="12:00").status_code == 201
    assert book(client, service["id"], other["headers"], start_time="08:00", end_time="10:00").status_code == 201


def test_lifecycle(client, provider, customer, service):
    booking = book(client, service["id"], customer["headers"]).json()
    url = f"{API}/bookings/{booking['id']}"

    response = client.post(f"{url}/complete", headers=provider["headers"])
    assert response.status_code == 409
    assert response.json()["code"] == "invalid_transition"

    response = client.post(f"{url}/accept", headers=customer["headers"])
    assert response.status_code == 403

    response = client.post(f"{url}/accept", headers=provider["headers"])
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"
    assert response.json()["status_label"] == "مؤكد"

    # Confirmed bookings can no longer be cancelled by the customer.
    assert client.post(f"{url}/cancel", headers=customer["headers"]).status_code == 409

    response = client.post(f"{url}/complete", headers=provider["headers"])
    assert response.json()["status"] == "completed"

    kinds = [n["kind"] for n in client.get(f"{API}/notifications/", headers=customer["headers"]).json()]
    assert kinds == ["booking_completed", "booking_confirmed"]


def test_reject_and_cancel(client, provider, customer, service):
    first = book(client, service["id"], customer["headers"]).json()
    second = book(client, service["id"], customer["headers"], start_time="12:00").json()

    response = client.post(f"{API}/bookings/{first['id']}/reject", headers=provider["headers"])
    assert response.json()["status"] == "cancelled"
    response = client.post(f"{API}/bookings/{second['id']}/cancel", headers=provider["headers"])
    assert response.status_code == 403
    assert response.json()["code"] == "customer_only"
    response = client.post(f"{API}/bookings/{second['id']}/cancel", headers=customer["headers"])
    assert response.json()["status"] == "cancelled"

    kinds = [n["kind"] for n in client.get(f"{API}/notifications/", headers=provider["headers"]).json()]
    assert kinds == ["booking_cancelled", "booking_created", "booking_created"]


def test_list_my_bookings_depends_on_role(client, provider, customer, service):
    first = book(client, service["id"], customer["headers"]).json()
    second = book(client, service["id"], customer["headers"], start_time="12:00").json()
    client.post(f"{API}/bookings/{first['id']}/accept", headers=provider["headers"])

    mine = client.get(f"{API}/bookings/mine", headers=customer["headers"]).json()
    assert [b["id"] for b in mine] == [second["id"], first["id"]]
    received = client.get(f"{API}/bookings/mine", headers=provider["headers"]).json()
    assert len(received) == 2

    confirmed = client.get(f"{API}/bookings/mine", params={"status": "confirmed"}, headers=provider["headers"]).json()
    assert [b["id"] for b in confirmed] == [first["id"]]
    assert client.get(f"{API}/bookings/mine", params={"status": "lost"}, headers=provider["headers"]).status_code == 422

    other = sign_up(client, "other@example.com")
    assert client.get(f"{API}/bookings/mine", headers=other["headers"]).json() == []


def test_provider_sees_bookings_made_on_other_providers_services(client, provider, service):
    other_provider = sign_up(client, "plumber@example.com", role="provider", phone="0771234567")
    made = book(client, service["id"], other_provider["headers"]).json()

    mine = client.get(f"{API}/bookings/mine", headers=other_provider["headers"]).json()
    assert [b["id"] for b in mine] == [made["id"]]
    received = client.get(f"{API}/bookings/mine", headers=provider["headers"]).json()
    assert [b["id"] for b in received] == [made["id"]]

    response = client.post(f"{API}/bookings/{made['id']}/cancel", headers=other_provider["headers"])
    assert response.json()["status"] == "cancelled"


def test_get_booking_is_limited_to_participants(client, provider, customer, service):
    booking = book(client, service["id"], customer["headers"]).json()
    assert client.get(f"{API}/bookings/{booking['id']}", headers=provider["headers"]).status_code == 200
    other = sign_up(client, "other@example.com")
    response = client.get(f"{API}/bookings/{booking['id']}", headers=other["headers"])
    assert response.status_code == 403
    assert response.json()["code"] == "not_booking_participant"
    assert client.get(f"{API}/bookings/999", headers=other["headers"]).status_code == 404


def test_whatsapp_link_targets_the_other_party(client, provider, customer, service):
    booking = book(client, service["id"], customer["headers"]).json()

    link = client.get(f"{API}/bookings/{booking['id']}/whatsapp", headers=customer["headers"]).json()
    assert link["phone"] == "213551234567"
    assert link["url"].startswith("https://wa.me/213551234567?text=")
    text = unquote(link["url"].split("?text=", 1)[1])
    assert text == link["message"]
    assert "تمديدات كهربائية" in text
    assert "0661234567" in text
    assert "الطابق الثاني" in text

    link = client.get(f"{API}/bookings/{booking['id']}/whatsapp", headers=provider["headers"]).json()
    assert link["phone"] == "213661234567"


def test_whatsapp_link_without_provider_phone(client, customer):
    provider = sign_up(client, "nophone@example.com", role="provider")
    service = client.post(
        f"{API}/services/", json={"title": "حلاقة رجالية", "category": "barber"}, headers=provider["headers"]
    ).json()
    booking = book(client, service["id"], customer["headers"]).json()
    response = client.get(f"{API}/bookings/{booking['id']}/whatsapp", headers=customer["headers"])
    assert response.status_code == 404
    assert response.json()["code"] == "no_phone"
