import os
import sys
import uuid
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

# DB SQLite de test AVANT d'importer app
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

import pytest
from fastapi.testclient import TestClient

from app.core.database import Base, SessionLocal, engine
from app.core.security import create_access_token
from app.main import app
from app.models.user import User


@pytest.fixture(autouse=True)
def setup_teardown():
    """Crée et nettoie la DB avant/après chaque test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """Client de test FastAPI"""
    return TestClient(app)


@pytest.fixture
def db():
    """Session DB pour les tests"""
    db = SessionLocal()
    yield db
    db.close()


@pytest.fixture
def make_user(db):
    """Factory: crée un utilisateur (sans passer par bcrypt)"""
    def _make_user(name=None):
        name = name or f"user_{uuid.uuid4().hex[:8]}"
        user = User(username=name, email=f"{name}@example.com", password_hash="unused")
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def headers_for():
    """Headers Authorization (JWT) pour un utilisateur"""
    def _headers_for(user):
        return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}
    return _headers_for
