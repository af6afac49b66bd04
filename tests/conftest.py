import os
from datetime import datetime, timedelta

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""
os.environ["LOG_LEVEL"] = "INFO"
os.environ["LOG_SQL"] = "false"
os.environ["AUTH_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.auth import create_access_token
from app.core.db import get_db, make_engine
from app.core.init_db import init_db
from app.main import app
from app.schemas.enums import Role
from app.services.accounts import create_user


@pytest.fixture
def engine():
    # one shared connection so every session sees the same in-memory db
    engine = make_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role=Role.STUDENT, name=None, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        return create_user(
            db,
            name or f"{role.value.title()} {n}",
            kwargs.pop("email", f"{role.value.lower()}{n}@school.test"),
            kwargs.pop("password", "secret123"),
            role=role,
            **kwargs,
        )

    return _make


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def student(make_user):
    return make_user(Role.STUDENT, name="Ana Cruz")


@pytest.fixture
def teacher(make_user):
    return make_user(Role.TEACHER, name="Ms. Reyes")


@pytest.fixture
def admin(make_user):
    return make_user(Role.ADMIN, name="Admin User")


@pytest.fixture
def auth():
    return auth_headers


# ------------------------------------------------------------------
# Scheduler double: records jobs, runs nothing on its own
# ------------------------------------------------------------------

class FakeJob:
    def __init__(self, scheduler, func, trigger, kwargs):
        self.scheduler = scheduler
        self.func = func
        self.trigger = trigger
        self.kwargs = kwargs

    def remove(self):
        self.scheduler.jobs.remove(self)


class FakeScheduler:
    def __init__(self):
        self.running = False
        self.jobs = []

    def start(self):
        self.running = True

    def add_job(self, func, trigger, **kwargs):
        job = FakeJob(self, func, trigger, kwargs)
        self.jobs.append(job)
        return job

    def tick(self):
        for job in list(self.jobs):
            job.func()


@pytest.fixture
def fake_scheduler():
    return FakeScheduler()


class Clock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **delta):
        self.now = self.now + timedelta(**delta)
        return self.now


@pytest.fixture
def clock():
    return Clock(datetime(2025, 9, 1, 8, 0, 0))
