import os
import tempfile
from datetime import timedelta

# До импорта приложения: логи и данные во временную папку, БД в памяти
_tmp = tempfile.mkdtemp(prefix="meetups-tests-")
os.environ.setdefault("DATA_DIR", _tmp)
os.environ.setdefault("LOGS_DIR", _tmp)
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from meetups.core.database import Base, get_db
from meetups.core.models import User, Meetup, utcnow
from meetups.core.security import hash_password
from meetups.main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(email=None, name="Test User", password="secret1"):
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            password_hash=hash_password(password),
            name=name,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_meetup(db):
    def _make_meetup(organizer_id, days=1, title="Test Meetup"):
        # Прошедшие митапы кладём в БД напрямую, мимо валидации схемы
        meetup = Meetup(
            title=title,
            description="A meetup for testing",
            date=utcnow() + timedelta(days=days),
            time="10:00",
            location="Test Location",
            organizer_id=organizer_id,
        )
        db.add(meetup)
        db.commit()
        db.refresh(meetup)
        return meetup

    return _make_meetup

