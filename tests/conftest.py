import fakeredis
import mongomock
import pytest
from fastapi.testclient import TestClient
from mongoengine import connect, disconnect

import app.connections.redis as redis_connection
from main import app


@pytest.fixture
def mongo():
    connect("exam_admin_test", alias="default", mongo_client_class=mongomock.MongoClient)
    try:
        yield
    finally:
        disconnect(alias="default")


@pytest.fixture
def redis_client(monkeypatch):
    client = fakeredis.FakeRedis(decode_responses=True)
    monkeypatch.setattr(redis_connection, "_redis_client", client)
    return client


@pytest.fixture
def client(mongo, redis_client):
    # Not entered as a context manager, so the real Mongo/Redis lifespan never runs
    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()
