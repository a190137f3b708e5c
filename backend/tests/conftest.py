import os
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

from dotenv import load_dotenv

# Must be set before eduforge.database / eduforge.core.config are imported.
os.environ.setdefault("PYTEST_RUN", "1")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="eduforge-uploads-"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Load environment variables for tests
load_dotenv(Path(__file__).resolve().parents[1] / ".env.test")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from eduforge.core.config import settings
from eduforge.models import Service, User, UserRole
from eduforge.models.base import BaseModel
from eduforge.services.policy import Actor
from eduforge.utils.auth import get_password_hash


def make_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    BaseModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def Session():
    return sessionmaker(bind=make_engine())


@pytest.fixture
def db(Session):
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def enforce_transitions(monkeypatch):
    """Each test starts with the strict transition policy."""
    monkeypatch.setattr(settings, "WORKFLOW_ENFORCE_TRANSITIONS", True)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    return tmp_path / "uploads"


def create_user(db, email, role=UserRole.STUDENT, name=None, password="secret123"):
    user = User(
        email=email,
        password=get_password_hash(password),
        name=name or email.split("@")[0].title(),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_service(db, slug="essay-writing", is_active=True):
    svc = Service(
        name=slug.replace("-", " ").title(),
        slug=slug,
        description="Help with " + slug,
        is_active=is_active,
    )
    db.add(svc)
    db.commit()
    db.refresh(svc)
    return svc


def in_days(n=7):
    return datetime.utcnow() + timedelta(days=n)


@pytest.fixture
def student(db):
    return create_user(db, "student@example.edu")


@pytest.fixture
def other_student(db):
    return create_user(db, "other@example.edu")


@pytest.fixture
def admin(db):
    return create_user(db, "admin@eduforge.com", role=UserRole.ADMIN, name="Admin User")


@pytest.fixture
def service(db):
    return create_service(db)


@pytest.fixture
def student_actor(student):
    return Actor.from_user(student)


@pytest.fixture
def admin_actor(admin):
    return Actor.from_user(admin)


@pytest.fixture
def client(Session):
    from fastapi.testclient import TestClient

    from eduforge.database import get_db
    from eduforge.main import app

    def override_db():
        session = Session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(user):
    from eduforge.api.auth import create_access_token

    token = create_access_token({"sub": user.email})
    return {"Authorization": f"Bearer {token}"}
