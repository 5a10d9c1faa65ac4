from datetime import date, timedelta

import pytest

from conftest import API, sign_up


def completed_booking(client, provider, customer, service, start_time="10:00"):
    response = client.post(
        f"{API}/services/{service['id']}/bookings",
        json={
            "booking_date": (date.today() + timedelta(days=1)).isoformat(),
            "start_time": start_time,
            "customer_name": customer["user"]["full_name"],
            "customer_phone": "0661234567",
            "customer_location": "وهران",
        },
        headers=customer["headers"],
    )
    assert response.status_code == 201, response.text
    booking = response.json()
    client.post(f"{API}/bookings/{booking['id']}/accept", headers=provider["headers"])
    client.post(f"{API}/bookings/{booking['id']}/complete", headers=provider["headers"])
    return booking


def review(client, booking_id, headers, **payload):
    return client.post(f"{API}/bookings/{booking_id}/review", json=payload, headers=headers)


def test_review_completed_booking(client, provider, customer, service):
    booking = completed_booking(client, provider, customer, service)
    response = review(client, booking["id"], customer["headers"], rating=4, comment="  عمل ممتاز  ")
    assert response.status_code == 201
    body = response.json()
    assert body["rating"] == 4
    assert body["comment"] == "عمل ممتاز"
    assert body["customer"]["wilaya_name"] == "الجزائر"

    listed = client.get(f"{API}/bookings/mine", headers=customer["headers"]).json()
    assert listed[0]["has_review"] is True
    svc = client.get(f"{API}/services/{service['id']}").json()
    assert svc["average_rating"] == 4
    assert svc["reviews_count"] == 1

    kinds = [n["kind"] for n in client.get(f"{API}/notifications/", headers=provider["headers"]).json()]
    assert kinds[0] == "review_received"


def test_blank_comment_is_stored_as_null(client, provider, customer, service):
    booking = completed_booking(client, provider, customer, service)
    response = review(client, booking["id"], customer["headers"], rating=5, comment="   ")
    assert response.json()["comment"] is None


def test_one_review_per_booking(client, provider, customer, service):
    booking = completed_booking(client, provider, customer, service)
    assert review(client, booking["id"], customer["headers"], rating=5).status_code == 201
    response = review(client, booking["id"], customer["headers"], rating=3)
    assert response.status_code == 409
    assert response.json()["code"] == "review_exists"


def test_review_requires_completed_booking_and_its_customer(client, provider, customer, service):
    response = client.post(
        f"{API}/services/{service['id']}/bookings",
        json={
            "booking_date": (date.today() + timedelta(days=1)).isoformat(),
            "start_time": "08:00",
            "customer_name": "سارة",
            "customer_phone": "0661234567",
            "customer_location": "وهران",
        },
        headers=customer["headers"],
    )
    pending = response.json()
    response = review(client, pending["id"], customer["headers"], rating=5)
    assert response.status_code == 409
    assert response.json()["code"] == "review_not_allowed"

    booking = completed_booking(client, provider, customer, service)
    response = review(client, booking["id"], provider["headers"], rating=5)
    assert response.status_code == 403
    assert review(client, 999, customer["headers"], rating=5).status_code == 404


@pytest.mark.parametrize(
    "payload, code",
    [
        ({}, "rating_required"),
        ({"rating": 6}, "rating_required"),
        ({"rating": 3, "comment": "x" * 501}, "comment_too_long"),
    ],
)
def test_review_validation(client, provider, customer, service, payload, code):
    booking = completed_booking(client, provider, customer, service)
    response = review(client, booking["id"], customer["headers"], **payload)
    assert response.status_code == 400
    assert response.json()["code"] == code


def test_service_reviews_with_wilaya_stats(client, provider, customer, service):
    oran = sign_up(client, "oran@example.com", full_name="كريم", wilaya="31")
    first = completed_booking(client, provider, customer, service, start_time="10:00")
    second = completed_booking(client, provider, oran, service, start_time="11:00")
    third = completed_booking(client, provider, oran, service, start_time="12:00")
    review(client, first["id"], customer["headers"], rating=5)
    review(client, second["id"], oran["headers"], rating=2)
    review(client, third["id"], oran["headers"], rating=3)

    response = client.get(f"{API}/services/{service['id']}/reviews")
    assert response.status_code == 200
    body = response.json()
    assert body["total_reviews"] == 3
    assert body["average_rating"] == pytest.approx(3.33, abs=0.01)
    assert body["wilayas"] == [
        {"wilaya": "31", "name": "وهران", "count": 2, "avg_rating": 2.5},
        {"wilaya": "16", "name": "الجزائر", "count": 1, "avg_rating": 5.0},
    ]
    assert [r["rating"] for r in body["reviews"]] == [3, 2, 5]

    filtered = client.get(f"{API}/services/{service['id']}/reviews", params={"wilaya": "16"}).json()
    assert [r["rating"] for r in filtered["reviews"]] == [5]
    assert filtered["total_reviews"] == 3

    assert client.get(f"{API}/services/999/reviews").status_code == 404
