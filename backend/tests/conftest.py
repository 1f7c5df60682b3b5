import pytest
from fastapi.testclient import TestClient

from config import SESSION_COOKIE_NAME
from database import ensure_indexes
from main import create_app
from mongo_fake import InterleavingMongoClient

PUSH_INTERVAL = 0.05


@pytest.fixture()
async def db():
    database = InterleavingMongoClient()["test_time_tracker"]
    await ensure_indexes(database)
    return database


@pytest.fixture()
def app():
    return create_app(client_factory=InterleavingMongoClient, push_interval_sec=PUSH_INTERVAL)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def signup(client, username="alice", password="secret"):
    return client.post("/signup", data={"username": username, "password": password}, follow_redirects=False)


def login(client, username="alice", password="secret"):
    return client.post("/login", data={"username": username, "password": password}, follow_redirects=False)


def use_session(client, session_id):
    """切换测试客户端的会话Cookie"""
    client.cookies.clear()
    if session_id:
        client.cookies.set(SESSION_COOKIE_NAME, session_id)
