from conftest import API, auth_headers, sign_up


def test_sign_up_returns_token_and_profile(client):
    account = sign_up(client, "Provider@Example.com", role="provider", full_name="أحمد", wilaya="16")
    user = account["user"]
    assert user["email"] == "provider@example.com"
    assert user["role"] == "provider"
    assert user["wilaya_name"] == "الجزائر"

    response = client.get(f"{API}/profiles/me", headers=account["headers"])
    assert response.status_code == 200
    assert response.json()["full_name"] == "أحمد"


def test_sign_up_rejects_duplicate_email(client):
    sign_up(client, "dup@example.com")
    response = client.post(
        f"{API}/auth/signup",
        json={"email": "dup@example.com", "password": "secret123", "full_name": "x"},
    )
    assert response.status_code == 409
    assert response.json()["code"] == "email_registered"


def test_sign_up_rejects_short_password_and_bad_phone(client):
    response = client.post(
        f"{API}/auth/signup",
        json={"email": "a@example.com", "password": "123", "full_name": "x"},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "password_too_short"

    response = client.post(
        f"{API}/auth/signup",
        json={"email": "a@example.com", "password": "secret123", "full_name": "x", "phone": "0312345678"},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_phone"


def test_login_with_wrong_password_is_localized(client):
    sign_up(client, "user@example.com")
    response = client.post(f"{API}/auth/login", json={"email": "user@example.com", "password": "wrong-pass"})
    assert response.status_code == 401
    assert response.json()["detail"] == "البريد الإلكتروني أو كلمة المرور غير صحيحة"
    assert response.headers["www-authenticate"] == "Bearer"

    response = client.post(
        f"{API}/auth/login",
        json={"email": "user@example.com", "password": "wrong-pass"},
        headers={"Accept-Language": "en-US,en;q=0.9"},
    )
    assert response.json()["code"] == "invalid_login"
    assert "password" in response.json()["detail"].lower()


def test_login_then_logout_revokes_token(client):
    sign_up(client, "user@example.com")
    response = client.post(f"{API}/auth/login", json={"email": "user@example.com", "password": "secret123"})
    assert response.status_code == 200
    headers = auth_headers(response.json()["access_token"])

    assert client.post(f"{API}/auth/logout", headers=headers).status_code == 204
    response = client.get(f"{API}/profiles/me", headers=headers)
    assert response.status_code == 401
    assert response.json()["code"] == "invalid_token"


def test_missing_and_forged_tokens(client):
    response = client.get(f"{API}/profiles/me")
    assert response.status_code == 401
    assert response.json()["code"] == "not_authenticated"

    response = client.get(f"{API}/profiles/me", headers=auth_headers("abc.def.ghi"))
    assert response.status_code == 401
    assert response.json()["code"] == "invalid_token"


def test_info_endpoint(client):
    response = client.get(f"{API}/info/")
    assert response.status_code == 200
    assert response.json()["languages"] == ["ar", "en"]
