import reset_password
from khadmaty_api.app.core.db import get_database_path

from conftest import API, sign_up


def test_reset_password_updates_the_hash(client, capsys):
    sign_up(client, "provider@example.com", role="provider")

    code = reset_password.main(["--db", get_database_path(), "--email", "Provider@example.com", "--password", "brandnew1"])

    assert code == 0
    assert "Password updated" in capsys.readouterr().out
    response = client.post(f"{API}/auth/login", json={"email": "provider@example.com", "password": "brandnew1"})
    assert response.status_code == 200


def test_reset_password_uses_configured_database(client):
    sign_up(client, "user@example.com")
    assert reset_password.main(["--email", "user@example.com", "--password", "another1"]) == 0


def test_reset_password_errors(client, tmp_path, capsys):
    assert reset_password.main(["--db", str(tmp_path / "missing.db"), "--email", "x@example.com", "--password", "secret1"]) == 1
    assert reset_password.main(["--email", "ghost@example.com", "--password", "secret12"]) == 2
    assert reset_password.main(["--email", "ghost@example.com", "--password", "123"]) == 1
    assert "No user found" in capsys.readouterr().err
