from datetime import date, timedelta

import pytest

from conftest import API, sign_up


def weekday(value: date) -> int:
    return (value.weekday() + 1) % 7


def save(client, service_id, headers, days):
    return client.put(f"{API}/services/{service_id}/availability", json={"days": days}, headers=headers)


def test_unset_week_defaults_to_closed_days(client, service):
    response = client.get(f"{API}/services/{service['id']}/availability")
    assert response.status_code == 200
    week = response.json()
    assert [d["day_of_week"] for d in week] == list(range(7))
    assert week[0]["label"] == "الأحد"
    assert week[6]["label"] == "السبت"
    assert all(not d["is_available"] for d in week)
    assert week[3]["slots"] == [{"start_time": "09:00", "end_time": "17:00"}]


def test_save_replaces_the_whole_week(client, provider, service):
    response = save(
        client,
        service["id"],
        provider["headers"],
        [
            {"day_of_week": 0, "is_available": True, "slots": [
                {"start_time": "14:00", "end_time": "16:00"},
                {"start_time": "08:00:00", "end_time": "12:00"},
            ]},
            {"day_of_week": 1, "is_available": False, "slots": [{"start_time": "09:00", "end_time": "10:00"}]},
        ],
    )
    assert response.status_code == 200
    week = response.json()
    assert week[0]["is_available"] is True
    assert week[0]["slots"] == [
        {"start_time": "08:00", "end_time": "12:00"},
        {"start_time": "14:00", "end_time": "16:00"},
    ]
    assert week[1]["is_available"] is False

    response = save(client, service["id"], provider["headers"], [
        {"day_of_week": 2, "is_available": True, "slots": [{"start_time": "10:00", "end_time": "11:00"}]},
    ])
    week = response.json()
    assert week[0]["is_available"] is False
    assert week[2]["slots"] == [{"start_time": "10:00", "end_time": "11:00"}]


@pytest.mark.parametrize(
    "days, code",
    [
        ([{"day_of_week": 0, "is_available": True, "slots": [{"start_time": "25:00", "end_time": "26:00"}]}], "invalid_time"),
        ([{"day_of_week": 0, "is_available": True, "slots": [{"start_time": "12:00", "end_time": "12:00"}]}], "invalid_slot"),
        (
            [{"day_of_week": 0, "is_available": True, "slots": [
                {"start_time": "09:00", "end_time": "12:00"},
                {"start_time": "11:00", "end_time": "13:00"},
            ]}],
            "overlapping_slots",
        ),
        ([{"day_of_week": 3, "is_available": True}, {"day_of_week": 3, "is_available": False}], "duplicate_day"),
    ],
)
def test_save_validation(client, provider, service, days, code):
    response = save(client, service["id"], provider["headers"], days)
    assert response.status_code == 400
    assert response.json()["code"] == code


def test_only_owner_can_edit_availability(client, service):
    other = sign_up(client, "other@example.com", role="provider")
    response = save(client, service["id"], other["headers"], [{"day_of_week": 0, "is_available": True}])
    assert response.status_code == 403
    assert response.json()["code"] == "not_service_owner"


def test_booking_dates_follow_the_schedule(client, provider, service):
    dates = client.get(f"{API}/services/{service['id']}/booking-dates").json()
    assert len(dates) == 7
    assert dates[0]["date"] == date.today().isoformat()
    assert all(d["is_available"] for d in dates)

    tomorrow = date.today() + timedelta(days=1)
    save(client, service["id"], provider["headers"], [
        {"day_of_week": weekday(tomorrow), "is_available": True, "slots": [{"start_time": "09:00", "end_time": "10:00"}]},
    ])
    dates = client.get(f"{API}/services/{service['id']}/booking-dates").json()
    available = [d["date"] for d in dates if d["is_available"]]
    assert available == [tomorrow.isoformat()]
    assert dates[1]["day_of_week"] == weekday(tomorrow)


def test_open_slots_exclude_held_bookings(client, provider, customer, service):
    tomorrow = date.today() + timedelta(days=1)
    save(client, service["id"], provider["headers"], [
        {"day_of_week": weekday(tomorrow), "is_available": True, "slots": [
            {"start_time": "09:00", "end_time": "10:00"},
            {"start_time": "10:00", "end_time": "11:00"},
        ]},
    ])
    url = f"{API}/services/{service['id']}/slots"
    assert [s["start_time"] for s in client.get(url, params={"date": tomorrow.isoformat()}).json()] == ["09:00", "10:00"]

    response = client.post(
        f"{API}/services/{service['id']}/bookings",
        json={
            "booking_date": tomorrow.isoformat(),
            "start_time": "09:00",
            "customer_name": "سارة",
            "customer_phone": "0661234567",
            "customer_location": "باب الزوار",
        },
        headers=customer["headers"],
    )
    assert response.status_code == 201, response.text
    assert [s["start_time"] for s in client.get(url, params={"date": tomorrow.isoformat()}).json()] == ["10:00"]

    other_day = tomorrow + timedelta(days=1)
    assert client.get(url, params={"date": other_day.isoformat()}).json() == []
