"""
Tests de autenticación: registro, login JSON, token OAuth2 y usuarios.
"""
from jose import jwt

from app.core.config import settings


def test_ping(client):
    assert client.get("/api/auth/ping").json() == {"ok": True}


def test_register_and_login(client):
    response = client.post("/api/auth/register", json={
        "name": "Carla", "email": "carla@example.com", "password": "carla-password",
    })
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User registered"
    assert body["user"]["role"] == "user"
    assert "hashed_password" not in body["user"]

    response = client.post("/api/auth/login", json={"email": "carla@example.com", "password": "carla-password"})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == "carla@example.com"

    claims = jwt.decode(body["access_token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert claims["sub"] == "carla@example.com"
    assert claims["role"] == "user"


def test_register_rejects_duplicates_and_short_passwords(client, learner):
    response = client.post("/api/auth/register", json={
        "name": "Ana", "email": "ana@example.com", "password": "long-enough",
    })
    assert response.status_code == 400
    assert response.json() == {"message": "Email already exists"}

    response = client.post("/api/auth/register", json={
        "name": "Dan", "email": "dan@example.com", "password": "short",
    })
    assert response.status_code == 400


def test_login_errors(client, learner):
    response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "x"})
    assert response.status_code == 404

    response = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json() == {"message": "Invalid credentials"}


def test_token_form_login(client, admin):
    response = client.post("/api/auth/token", data={"username": "admin@example.com", "password": "admin-password"})
    assert response.status_code == 200
    token = response.json()["access_token"]

    response = client.get("/api/users", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_invalid_token(client):
    response = client.get("/api/skills", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json() == {"message": "Could not validate credentials"}


def test_users_listing_is_admin_only(client, learner_headers):
    response = client.get("/api/users", headers=learner_headers)
    assert response.status_code == 403


def test_user_can_update_self_but_not_role(client, learner, learner_headers):
    response = client.put(f"/api/users/{learner.id}", headers=learner_headers, json={"name": "Ana María"})
    assert response.status_code == 200
    assert response.json()["user"]["name"] == "Ana María"

    response = client.put(f"/api/users/{learner.id}", headers=learner_headers, json={"role": "admin"})
    assert response.status_code == 403


def test_admin_promotes_and_deletes_user(client, admin_headers, learner, other_learner):
    response = client.put(f"/api/users/{learner.id}", headers=admin_headers, json={"role": "admin"})
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "admin"

    response = client.put(f"/api/users/{learner.id}", headers=admin_headers, json={"email": "beto@example.com"})
    assert response.status_code == 409

    response = client.delete(f"/api/users/{other_learner.id}", headers=admin_headers)
    assert response.status_code == 200
    response = client.get(f"/api/users/{other_learner.id}", headers=admin_headers)
    assert response.status_code == 404
