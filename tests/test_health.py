from sqlalchemy.exc import OperationalError

from app.services import announcements as announcement_service
from tests.helpers import auth_header, setup_admin_and_member


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

def test_db_ping(client):
    r = client.get("/db-ping")
    assert r.status_code == 200
    body = r.json()
    assert body["db"] == "ok"
    assert body["value"] == 1

def test_unexpected_db_error_is_hidden(client, db_session, monkeypatch):
    ctx = setup_admin_and_member(client, db_session)

    def broken(db):
        raise OperationalError("SELECT * FROM announcements", {}, Exception("connection reset"))

    monkeypatch.setattr(announcement_service, "list_announcements", broken)

    r = client.get("/announcements", headers=auth_header(ctx["member_token"]))
    assert r.status_code == 500
    assert r.json() == {"detail": "Database error"}
