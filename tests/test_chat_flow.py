"""

채팅 테스트.
- HTTP: 메시지 저장 + new_message 브로드캐스트, 빈 메시지 400,
  시간순 조회(limit / offset), 본인 / 관리자만 삭제 + message_deleted 브로드캐스트
- ChatRelay: join / typing / stop_typing / disconnect 이벤트 전달 규칙
- WebSocket: 토큰 없는 연결 거부(1008), join_chat → users_online,
  HTTP로 보낸 메시지가 소켓으로 전달되는지 확인

"""

import pytest
from starlette.websockets import WebSocketDisconnect

from app.core.deps import get_chat_relay
from app.main import app as fastapi_app
from app.services.chat import ChatRelay
from tests.helpers import auth_header, setup_admin_and_member


class RecordingRelay(ChatRelay):
    def __init__(self):
        super().__init__()
        self.events = []

    async def broadcast(self, event, data, *, exclude=None):
        self.events.append((event, data))
        await super().broadcast(event, data, exclude=exclude)


class FakeSocket:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def accept(self):
        pass

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)


@pytest.fixture()
def relay(client):
    recording = RecordingRelay()
    fastapi_app.dependency_overrides[get_chat_relay] = lambda: recording
    return recording


def test_post_message_broadcasts_to_everyone(client, db_session, relay):
    ctx = setup_admin_and_member(client, db_session)

    res = client.post("/chat/messages", headers=auth_header(ctx["member_token"]), json={"message": "  Sawubona  "})
    assert res.status_code == 201, res.text

    msg = res.json()["data"]
    assert msg["message"] == "Sawubona"
    assert msg["sender_id"] == ctx["member_id"]
    assert msg["sender_name"] == "Zanele Ndlovu"

    assert relay.events == [("new_message", msg)]


def test_empty_message_rejected_without_broadcast(client, db_session, relay):
    ctx = setup_admin_and_member(client, db_session)

    for text in ["", "   "]:
        res = client.post("/chat/messages", headers=auth_header(ctx["member_token"]), json={"message": text})
        assert res.status_code == 400
        assert res.json()["detail"] == "Message cannot be empty"

    assert relay.events == []


def test_history_is_chronological_with_limit_and_offset(client, db_session, relay):
    ctx = setup_admin_and_member(client, db_session)

    for n in range(5):
        client.post("/chat/messages", headers=auth_header(ctx["member_token"]), json={"message": f"msg {n}"})

    full = client.get("/chat/messages", headers=auth_header(ctx["admin_token"]))
    assert full.status_code == 200, full.text
    assert [m["message"] for m in full.json()["data"]] == [f"msg {n}" for n in range(5)]

    # 최신 2개를 시간순으로
    latest = client.get("/chat/messages?limit=2", headers=auth_header(ctx["admin_token"]))
    assert [m["message"] for m in latest.json()["data"]] == ["msg 3", "msg 4"]

    older = client.get("/chat/messages?limit=2&offset=2", headers=auth_header(ctx["admin_token"]))
    assert [m["message"] for m in older.json()["data"]] == ["msg 1", "msg 2"]


def test_delete_message_rules(client, db_session, relay):
    ctx = setup_admin_and_member(client, db_session)

    mine = client.post("/chat/messages", headers=auth_header(ctx["member_token"]), json={"message": "mine"}).json()["data"]
    admins = client.post("/chat/messages", headers=auth_header(ctx["admin_token"]), json={"message": "admin's"}).json()["data"]

    forbidden = client.delete(f"/chat/messages/{admins['id']}", headers=auth_header(ctx["member_token"]))
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"] == "You can only delete your own messages"

    own = client.delete(f"/chat/messages/{mine['id']}", headers=auth_header(ctx["member_token"]))
    assert own.status_code == 200, own.text

    moderated = client.delete(f"/chat/messages/{admins['id']}", headers=auth_header(ctx["admin_token"]))
    assert moderated.status_code == 200, moderated.text

    missing = client.delete(f"/chat/messages/{mine['id']}", headers=auth_header(ctx["admin_token"]))
    assert missing.status_code == 404

    deleted_events = [data for event, data in relay.events if event == "message_deleted"]
    assert deleted_events == [{"id": mine["id"]}, {"id": admins["id"]}]


@pytest.mark.anyio
async def test_relay_presence_and_typing():
    relay = ChatRelay()
    a, b = FakeSocket(), FakeSocket()
    conn_a = await relay.connect(a)
    conn_b = await relay.connect(b)

    await relay.join(conn_a, "PHSC2601001")
    await relay.join(conn_b, "PHSC2601002")
    assert relay.online_count == 2
    assert b.sent[-1] == {"event": "users_online", "data": {"count": 2}}

    await relay.typing(conn_a, "PHSC2601001", "Thabo")
    assert b.sent[-1] == {"event": "user_typing", "data": {"member_id": "PHSC2601001", "name": "Thabo"}}
    assert all(frame["event"] != "user_typing" for frame in a.sent)

    await relay.stop_typing(conn_a, "PHSC2601001")
    assert b.sent[-1] == {"event": "user_stop_typing", "data": {"member_id": "PHSC2601001"}}

    await relay.disconnect(conn_a)
    assert relay.online_count == 1
    assert b.sent[-1] == {"event": "users_online", "data": {"count": 1}}


@pytest.mark.anyio
async def test_relay_rejoin_keeps_newer_connection_and_drops_dead_sockets():
    relay = ChatRelay()
    old, new, dead = FakeSocket(), FakeSocket(), FakeSocket(fail=True)
    conn_old = await relay.connect(old)
    conn_new = await relay.connect(new)

    await relay.join(conn_old, "PHSC2601002")
    await relay.join(conn_new, "PHSC2601002")
    assert relay.online_count == 1

    # 이전 연결 종료는 새 연결의 presence를 지우지 않음
    await relay.disconnect(conn_old)
    assert relay.online_count == 1

    # 전송에 실패한 연결은 presence와 함께 정리됨
    conn_dead = await relay.connect(dead)
    await relay.join(conn_dead, "PHSC2601003")
    assert relay.online_count == 1

    await relay.broadcast("new_message", {"id": 1})
    assert new.sent[-1] == {"event": "new_message", "data": {"id": 1}}


def test_websocket_rejects_missing_or_invalid_token(client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/chat/ws"):
            pass
    assert exc.value.code == 1008

    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/chat/ws?token=not-a-jwt"):
            pass
    assert exc.value.code == 1008


def test_websocket_join_and_receive_new_message(client, db_session):
    ctx = setup_admin_and_member(client, db_session)

    with client.websocket_connect(f"/chat/ws?token={ctx['member_token']}") as ws:
        ws.send_json({"event": "join_chat", "data": {}})
        assert ws.receive_json() == {"event": "users_online", "data": {"count": 1}}

        res = client.post("/chat/messages", headers=auth_header(ctx["admin_token"]), json={"message": "Welcome!"})
        assert res.status_code == 201, res.text

        frame = ws.receive_json()
        assert frame["event"] == "new_message"
        assert frame["data"]["message"] == "Welcome!"
        assert frame["data"]["sender_id"] == ctx["admin_id"]


def test_websocket_ignores_bad_frames_and_uses_token_name_for_typing(client, db_session):
    ctx = setup_admin_and_member(client, db_session)

    with client.websocket_connect(f"/chat/ws?token={ctx['member_token']}") as member_ws:
        member_ws.send_json({"event": "join_chat", "data": {}})
        assert member_ws.receive_json() == {"event": "users_online", "data": {"count": 1}}

        with client.websocket_connect(f"/chat/ws?token={ctx['admin_token']}") as admin_ws:
            admin_ws.send_json({"event": "join_chat"})
            assert admin_ws.receive_json() == {"event": "users_online", "data": {"count": 2}}
            assert member_ws.receive_json() == {"event": "users_online", "data": {"count": 2}}

            # data가 객체가 아니어도 연결은 유지되고, 이름은 토큰 기준
            member_ws.send_json({"event": "typing", "data": "hello"})
            assert admin_ws.receive_json() == {
                "event": "user_typing",
                "data": {"member_id": ctx["member_id"], "name": "Zanele Ndlovu"},
            }

            # 다른 이름을 보내도 토큰의 이름으로 전달됨
            member_ws.send_json({"event": "typing", "data": {"name": "ADMIN"}})
            assert admin_ws.receive_json()["data"]["name"] == "Zanele Ndlovu"

            member_ws.send_text("not json")
            member_ws.send_json(["join_chat"])

            member_ws.send_json({"event": "join_chat", "data": {}})
            assert member_ws.receive_json() == {"event": "users_online", "data": {"count": 2}}
