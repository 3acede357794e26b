import os

# Settings are read at import time, so the environment has to be ready first
os.environ.setdefault("SESSION_HMAC_SECRET", "test-session-secret")
os.environ.setdefault("TURNSTILE_SECRET", "test-turnstile-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DB_AUTO_CREATE", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import database, models
from dependencies import get_db, get_human_verifier, get_now_ms

# 2026-10-18T10:00:30Z, thirty seconds into a 180s window
FIXED_NOW_MS = 1_792_317_630_000


class FakeVerifier:
    def __init__(self, result: bool = True):
        self.result = result
        self.calls = []

    def check(self, token: str, remote_ip: str) -> bool:
        self.calls.append((token, remote_ip))
        return self.result


class Clock:
    def __init__(self, now_ms: int = FIXED_NOW_MS):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms


@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database.Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        database.Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def verifier():
    return FakeVerifier()


@pytest.fixture()
def clock():
    return Clock()


@pytest.fixture()
def client(db_session, verifier, clock):
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_human_verifier] = lambda: verifier
    app.dependency_overrides[get_now_ms] = clock
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def game(db_session):
    g = models.Game(game_id=42)
    db_session.add(g)
    db_session.commit()
    return g
