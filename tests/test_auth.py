from datetime import timedelta

from auth import create_access_token, decode_token, hash_password, verify_password


def test_password_hashing():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("otra", hashed)


def test_token_round_trip():
    token = create_access_token("user-1", "a@dailychallenge.app")
    payload = decode_token(token)
    assert payload["sub"] == "user-1"
    assert payload["email"] == "a@dailychallenge.app"
    assert decode_token("basura") is None


def test_register_login_me(client):
    response = client.post(
        "/auth/register",
        json={"email": "carol@dailychallenge.app", "password": "secret123", "name": "Carol"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["tokenType"] == "bearer"
    assert body["name"] == "Carol"

    response = client.post(
        "/auth/login", json={"email": "carol@dailychallenge.app", "password": "secret123"}
    )
    assert response.status_code == 200
    token = response.json()["accessToken"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert me["id"] == body["userId"]
    assert me["email"] == "carol@dailychallenge.app"


def test_register_duplicate_email(client, alice):
    response = client.post(
        "/auth/register",
        json={"email": "alice@dailychallenge.app", "password": "secret123", "name": "Otra"},
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


def test_login_wrong_password(client, alice):
    response = client.post(
        "/auth/login", json={"email": "alice@dailychallenge.app", "password": "incorrecta"}
    )
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_invalid_or_expired_token_is_unauthenticated(client, alice):
    expired = create_access_token(alice.id, alice.email, expires_delta=timedelta(minutes=-5))
    for token in (expired, "no-es-un-jwt"):
        response = client.post(
            "/actions/listDefinitions", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    assert client.get("/auth/me").status_code == 401


def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
