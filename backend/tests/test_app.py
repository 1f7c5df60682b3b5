from fastapi.testclient import TestClient
from pymongo.errors import PyMongoError

from conftest import signup
from main import create_app
from mongo_fake import InterleavingMongoClient
from services import sessions


def test_lifespan_opens_and_closes_pool():
    clients = []

    def factory():
        clients.append(InterleavingMongoClient())
        return clients[-1]

    app = create_app(client_factory=factory)
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        assert len(clients) == 1
        assert not clients[0].closed
    assert clients[0].closed


def test_database_error_is_generic_500(client, monkeypatch):
    signup(client)

    async def broken(db, session_id):
        raise PyMongoError("connection reset by peer")

    monkeypatch.setattr(sessions, "resolve_session", broken)
    res = client.get("/api/timers")
    assert res.status_code == 500
    assert res.json() == {"detail": "Internal server error"}
