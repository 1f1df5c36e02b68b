import uuid

from app.core.security import create_access_token, decode_token


def register(client, email="test@example.com", username="testuser", password="pass123"):
    return client.post("/api/auth/register", json={"username": username, "email": email, "password": password})


def test_register_success(client):
    """Test : créer un utilisateur avec succès"""
    response = register(client, email="Signup@Example.com")
    assert response.status_code == 201
    data = response.json()
    assert data["user"]["email"] == "signup@example.com"
    assert data["user"]["username"] == "testuser"
    assert "password_hash" not in data["user"]
    assert decode_token(data["token"]) == data["user"]["id"]


def test_register_duplicate_email(client):
    """Test : impossible de créer 2 users avec le même email"""
    register(client, username="user1")
    response = register(client, username="user2")
    assert response.status_code == 400
    assert response.json()["message"] == "Email already in use"


def test_register_duplicate_username(client):
    register(client, email="a@example.com")
    response = register(client, email="b@example.com")
    assert response.status_code == 400


def test_login_success(client):
    register(client)
    response = client.post("/api/auth/login", json={"email": "test@example.com", "password": "pass123"})
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["username"] == "testuser"
    assert "token" in data


def test_login_wrong_password(client):
    register(client)
    response = client.post("/api/auth/login", json={"email": "test@example.com", "password": "wrong"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_me(client):
    token = register(client).json()["token"]
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["email"] == "test@example.com"


def test_me_without_token(client):
    assert client.get("/api/auth/me").status_code == 401


def test_token_for_deleted_user(client):
    token = create_access_token(str(uuid.uuid4()), "ghost@example.com")
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_health(client):
    """Test : l'endpoint health fonctionne"""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"message": "Server is running!"}
