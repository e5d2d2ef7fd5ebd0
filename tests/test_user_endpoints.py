"""Tests for /api/v1/users and /api/v1/auth/login."""

import uuid
from datetime import timedelta

from app.core.security import create_access_token, verify_password
from app.models.user import User


BASE = "/api/v1/users"
LOGIN = "/api/v1/auth/login"


def register(client, email="ana@example.com", password="s3cret-pass", name="Ana"):
    return client.post(BASE, json={"name": name, "email": email, "password": password})


class TestRegister:
    def test_register_is_open_and_hides_password(self, anon_client, db_session):
        resp = register(anon_client)

        assert resp.status_code == 201
        body = resp.json()
        assert body["email"] == "ana@example.com"
        assert "password" not in body
        assert "passwordHash" not in body

        stored = db_session.get(User, uuid.UUID(body["id"]))
        assert stored.password_hash != "s3cret-pass"
        assert verify_password("s3cret-pass", stored.password_hash)

    def test_duplicate_email_is_400(self, anon_client):
        register(anon_client)

        resp = register(anon_client, name="Other")

        assert resp.status_code == 400

    def test_invalid_email_is_422(self, anon_client):
        assert register(anon_client, email="not-an-email").status_code == 422

    def test_empty_name_is_422(self, anon_client):
        assert register(anon_client, name="").status_code == 422


class TestLogin:
    def test_login_returns_working_token(self, anon_client):
        user_id = register(anon_client).json()["id"]

        resp = anon_client.post(LOGIN, data={"username": "ana@example.com", "password": "s3cret-pass"})

        assert resp.status_code == 200
        token = resp.json()["access_token"]
        assert resp.json()["token_type"] == "bearer"

        me = anon_client.get(f"{BASE}/{user_id}", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "ana@example.com"

    def test_wrong_password_is_401(self, anon_client):
        register(anon_client)

        resp = anon_client.post(LOGIN, data={"username": "ana@example.com", "password": "wrong"})

        assert resp.status_code == 401

    def test_unknown_user_is_401(self, anon_client):
        resp = anon_client.post(LOGIN, data={"username": "ghost@example.com", "password": "x"})

        assert resp.status_code == 401

    def test_protected_route_without_token_is_401(self, anon_client):
        assert anon_client.get(BASE).status_code == 401

    def test_garbage_token_is_401(self, anon_client):
        resp = anon_client.get(BASE, headers={"Authorization": "Bearer not-a-jwt"})

        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid token"

    def test_expired_token_is_401(self, anon_client):
        token = create_access_token({"sub": str(uuid.uuid4())}, expires_delta=timedelta(minutes=-5))

        resp = anon_client.get(BASE, headers={"Authorization": f"Bearer {token}"})

        assert resp.status_code == 401
        assert resp.json()["detail"] == "Token has expired"


class TestUserCrud:
    def test_get_has_resource_links(self, client):
        user_id = register(client).json()["id"]

        body = client.get(f"{BASE}/{user_id}").json()

        assert [l["href"] for l in body["links"]] == [f"http://testserver{BASE}/{user_id}"] * 3

    def test_list_users(self, client):
        for i in range(3):
            register(client, email=f"user{i}@example.com")

        body = client.get(BASE, params={"pageSize": 2}).json()

        assert body["totalItems"] == 3
        assert len(body["items"]) == 2
        assert [l["rel"] for l in body["links"]] == ["next", "last"]
        assert body["links"][0]["href"] == f"http://testserver{BASE}?pageNumber=2&pageSize=2"

    def test_update_replaces_and_rehashes(self, client, db_session):
        user_id = register(client).json()["id"]
        payload = {"id": user_id, "name": "Ana Maria", "email": "ana.maria@example.com", "password": "new-pass"}

        resp = client.put(f"{BASE}/{user_id}", json=payload)

        assert resp.status_code == 204
        stored = db_session.get(User, uuid.UUID(user_id))
        assert stored.name == "Ana Maria"
        assert verify_password("new-pass", stored.password_hash)

    def test_update_to_taken_email_is_400(self, client):
        register(client, email="first@example.com")
        second_id = register(client, email="second@example.com").json()["id"]
        payload = {"id": second_id, "name": "B", "email": "first@example.com", "password": "x"}

        assert client.put(f"{BASE}/{second_id}", json=payload).status_code == 400

    def test_update_id_mismatch_is_400(self, client):
        user_id = register(client).json()["id"]
        payload = {"id": str(uuid.uuid4()), "name": "A", "email": "a@example.com", "password": "x"}

        assert client.put(f"{BASE}/{user_id}", json=payload).status_code == 400

    def test_delete(self, client):
        user_id = register(client).json()["id"]

        assert client.delete(f"{BASE}/{user_id}").status_code == 204
        assert client.get(f"{BASE}/{user_id}").status_code == 404
