from datetime import date, timedelta

from conftest import API


def make_booking(client, service_id, headers, start_time):
    response = client.post(
        f"{API}/services/{service_id}/bookings",
        json={
            "booking_date": (date.today() + timedelta(days=2)).isoformat(),
            "start_time": start_time,
            "customer_name": "سارة",
            "customer_phone": "0661234567",
            "customer_location": "قسنطينة",
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_unread_count_and_mark_read(client, provider, customer, service):
    make_booking(client, service["id"], customer["headers"], "09:00")
    make_booking(client, service["id"], customer["headers"], "10:00")
    headers = provider["headers"]

    assert client.get(f"{API}/notifications/unread-count", headers=headers).json() == {"count": 2}
    items = client.get(f"{API}/notifications/", headers=headers).json()

    response = client.post(f"{API}/notifications/{items[0]['id']}/read", headers=headers)
    assert response.status_code == 200
    assert response.json()["is_read"] is True
    assert client.get(f"{API}/notifications/unread-count", headers=headers).json() == {"count": 1}

    unread = client.get(f"{API}/notifications/", params={"unread_only": True}, headers=headers).json()
    assert [n["id"] for n in unread] == [items[1]["id"]]

    assert client.post(f"{API}/notifications/read-all", headers=headers).json() == {"count": 0}
    assert client.get(f"{API}/notifications/unread-count", headers=headers).json() == {"count": 0}


def test_cannot_mark_someone_elses_notification(client, provider, customer, service):
    make_booking(client, service["id"], customer["headers"], "09:00")
    item = client.get(f"{API}/notifications/", headers=provider["headers"]).json()[0]
    response = client.post(f"{API}/notifications/{item['id']}/read", headers=customer["headers"])
    assert response.status_code == 404
    assert response.json()["code"] == "notification_not_found"


def test_notifications_require_authentication(client):
    assert client.get(f"{API}/notifications/").status_code == 401
