import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from config import Settings
from main import create_app


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    # 10:00 on 2025-03-10 in Asia/Taipei
    return FakeClock(datetime(2025, 3, 10, 2, 0))


@pytest.fixture
def settings():
    return Settings(
        api_key="secret",
        web_domain="https://math.example.com",
        teacher_line_id="T-BOOT",
        timezone="Asia/Taipei",
    )


@pytest.fixture
def db():
    return AsyncMongoMockClient()["test_db"]


@pytest.fixture
def client(settings, db, clock):
    app = create_app(settings, db=db, clock=clock, run_sweeper=False)
    with TestClient(app) as test_client:
        yield test_client
