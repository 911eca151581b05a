"""
chat.py

채팅 API 모음 (HTTP + WebSocket).

HTTP:
- GET    /chat/messages?limit&offset : 최근 메시지 (기본 100개), 시간순으로 반환
- POST   /chat/messages              : 메시지 저장 후 new_message 브로드캐스트
- DELETE /chat/messages/{id}         : 본인 또는 관리자, message_deleted 브로드캐스트

WebSocket (/chat/ws?token=<세션 토큰>):
- 클라이언트 → 서버 : join_chat, typing, stop_typing, disconnect
- 서버 → 클라이언트 : users_online, user_typing, user_stop_typing,
                      new_message, message_deleted
- 모든 프레임은 {"event": ..., "data": {...}} JSON

설계 원칙:
- 브로드캐스트 객체(ChatRelay)는 Depends(get_chat_relay)로 주입
- HTTP 핸들러는 스레드풀에서 실행되므로 anyio.from_thread로 이벤트 루프에 전달
- 브로드캐스트는 항상 DB 커밋 이후

관련 파일:
- app.services.chat      : ChatRelay / 메시지 로직
- app.schemas.chat       : 메시지 응답 스키마

"""

import json
import logging

import anyio
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_chat_relay, get_current_principal, get_db
from app.core.errors import ServiceError
from app.core.security import decode_access_token
from app.schemas.auth import Principal
from app.schemas.chat import ChatMessageCreateRequest
from app.services import chat as chat_service
from app.services.chat import ChatRelay

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/messages")
def list_messages(
    limit: int = Query(default=settings.CHAT_HISTORY_LIMIT, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    _: Principal = Depends(get_current_principal),
):
    messages = chat_service.list_messages(db, limit=limit, offset=offset)
    return {
        "data": messages,
        "meta": {"limit": limit, "offset": offset, "count": len(messages)},
    }


"""
메시지 전송 API

- 빈 메시지 / 공백만 있는 메시지는 400
- 저장 후 보낸 사람을 포함한 모든 연결에 new_message 전송

"""
@router.post("/messages", status_code=status.HTTP_201_CREATED)
def post_message(
    body: ChatMessageCreateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    relay: ChatRelay = Depends(get_chat_relay),
):
    try:
        message = chat_service.post_message(db, principal, body.message)
        db.commit()
    except ServiceError as e:
        db.rollback()
        raise e.to_http()

    payload = message.model_dump(mode="json")
    anyio.from_thread.run(relay.broadcast, "new_message", payload)
    return {"data": payload}


@router.delete("/messages/{message_id}")
def delete_message(
    message_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    relay: ChatRelay = Depends(get_chat_relay),
):
    try:
        deleted_id = chat_service.delete_message(db, principal, message_id)
        db.commit()
    except ServiceError as e:
        db.rollback()
        raise e.to_http()

    anyio.from_thread.run(relay.broadcast, "message_deleted", {"id": deleted_id})
    return {"message": "Message deleted", "data": {"id": deleted_id}}


"""
실시간 채널 WebSocket

- 토큰이 없거나 유효하지 않으면 accept 전에 1008(policy violation)로 종료
- join_chat  : 이 연결을 토큰의 회원 번호로 presence 등록
- typing     : 보낸 연결을 제외한 모두에게 user_typing (이름은 토큰의 회원 이름)
- stop_typing: 보낸 연결을 제외한 모두에게 user_stop_typing
- disconnect : 연결 종료 (presence 제거 + 접속자 수 재전송)
- 형식이 잘못된 프레임(JSON 오류, 객체가 아닌 data 등)은 무시하고 연결 유지

"""
@router.websocket("/ws")
async def chat_socket(
    websocket: WebSocket,
    token: str | None = Query(default=None),
    relay: ChatRelay = Depends(get_chat_relay),
):
    try:
        principal = decode_access_token(token)
    except ServiceError as e:
        logger.info("Rejected chat connection: %s", e.detail)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    connection_id = await relay.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
            except ValueError:
                logger.warning("Ignoring malformed chat frame from %s", connection_id)
                continue
            if not isinstance(frame, dict):
                continue

            # data 페이로드는 사용하지 않음 (회원 번호 / 이름은 토큰 기준)
            event = frame.get("event")

            if event == "join_chat":
                await relay.join(connection_id, principal.id)
            elif event == "typing":
                await relay.typing(connection_id, principal.id, principal.name)
            elif event == "stop_typing":
                await relay.stop_typing(connection_id, principal.id)
            elif event == "disconnect":
                await websocket.close()
                break
    except WebSocketDisconnect:
        pass
    finally:
        await relay.disconnect(connection_id)
