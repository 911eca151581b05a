"""
services/chat.py

실시간 채팅(Presence & Chat Relay) 로직.

구성:
- ChatRelay : 살아 있는 WebSocket 연결과 접속자(presence) 맵을 보관하고
              이벤트를 모든 연결에 전달(fan-out)하는 프로세스 단위 객체
- list_messages / post_message / delete_message : 메시지 저장소 로직

이벤트 (서버 → 클라이언트, {"event": ..., "data": ...} 형식):
- users_online     : 현재 접속자 수
- user_typing      : 입력 중 알림 (보낸 연결 제외)
- user_stop_typing : 입력 종료 알림 (보낸 연결 제외)
- new_message      : 새 메시지 (보낸 사람 포함 전체)
- message_deleted  : 삭제된 메시지 id

설계 원칙:
- ChatRelay는 앱 시작 시 한 번 생성(lifespan)되어 의존성 주입으로 전달
- presence 맵은 단일 프로세스 / 단일 이벤트 루프 전용 (다중 노드 공유 없음)
- 각 연결의 presence 항목은 그 연결의 이벤트로만 변경
- 전송은 best-effort (at-most-once), 끊긴 연결은 전송 실패 시 정리
- 브로드캐스트는 DB 커밋 이후에만 호출

관련 파일:
- app.models.chat        : ChatMessage 모델
- app.routers.chat       : 채팅 HTTP API + WebSocket 엔드포인트

"""

import logging
import uuid

from fastapi import WebSocket
from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, InvalidArgument, NotFound
from app.db.base import utcnow
from app.models.chat import ChatMessage
from app.models.member import Member
from app.schemas.auth import Principal
from app.schemas.chat import ChatMessageResponse

logger = logging.getLogger(__name__)


class ChatRelay:
    def __init__(self) -> None:
        # connection id -> websocket
        self._connections: dict[str, WebSocket] = {}
        # member id -> connection id
        self._presence: dict[str, str] = {}

    @property
    def online_count(self) -> int:
        return len(self._presence)

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        connection_id = uuid.uuid4().hex
        self._connections[connection_id] = websocket
        logger.info("Chat connection opened: %s", connection_id)
        return connection_id

    async def join(self, connection_id: str, member_id: str) -> None:
        self._presence[member_id] = connection_id
        await self.broadcast("users_online", {"count": self.online_count})

    async def typing(self, connection_id: str, member_id: str, name: str) -> None:
        await self.broadcast(
            "user_typing",
            {"member_id": member_id, "name": name},
            exclude=connection_id,
        )

    async def stop_typing(self, connection_id: str, member_id: str) -> None:
        await self.broadcast(
            "user_stop_typing",
            {"member_id": member_id},
            exclude=connection_id,
        )

    """
    연결 종료 처리

    - 연결 목록에서 제거
    - 이 연결에 등록된 presence 항목만 제거
      (같은 회원이 다른 연결로 다시 join한 경우 그 항목은 유지)
    - 변경된 접속자 수를 다시 브로드캐스트

    """
    async def disconnect(self, connection_id: str) -> None:
        self._connections.pop(connection_id, None)
        for member_id, conn_id in list(self._presence.items()):
            if conn_id == connection_id:
                del self._presence[member_id]
        logger.info("Chat connection closed: %s", connection_id)
        await self.broadcast("users_online", {"count": self.online_count})

    async def broadcast(self, event: str, data: dict, *, exclude: str | None = None) -> None:
        stale = []
        for connection_id, websocket in list(self._connections.items()):
            if connection_id == exclude:
                continue
            try:
                await websocket.send_json({"event": event, "data": data})
            except Exception:
                logger.warning("Dropping chat connection %s after failed send", connection_id, exc_info=True)
                stale.append(connection_id)

        for connection_id in stale:
            self._connections.pop(connection_id, None)
            for member_id, conn_id in list(self._presence.items()):
                if conn_id == connection_id:
                    del self._presence[member_id]

    def clear(self) -> None:
        self._connections.clear()
        self._presence.clear()


def _to_response(message: ChatMessage, sender: Member | None) -> ChatMessageResponse:
    return ChatMessageResponse(
        id=message.id,
        sender_id=message.sender_id,
        message=message.message,
        created_at=message.created_at,
        sender_name=sender.name if sender else None,
        sender_photo=sender.profile_photo_url if sender else None,
    )


"""
메시지 목록 조회

- 최신 메시지 기준으로 offset 만큼 건너뛰고 limit 개를 가져온 뒤
  오래된 순(시간순)으로 뒤집어서 반환
- 보낸 사람 이름 / 프로필 사진 포함

"""

def list_messages(db: Session, *, limit: int = 100, offset: int = 0) -> list[ChatMessageResponse]:
    limit = max(1, limit)
    offset = max(0, offset)

    rows = db.execute(
        select(ChatMessage, Member)
        .outerjoin(Member, Member.id == ChatMessage.sender_id)
        .order_by(desc(ChatMessage.created_at), desc(ChatMessage.id))
        .limit(limit)
        .offset(offset)
    ).all()

    return [_to_response(message, sender) for message, sender in reversed(rows)]


# NOTE: db.commit()은 호출 측(라우터)에서 수행, 브로드캐스트는 커밋 이후
def post_message(db: Session, principal: Principal, text: str) -> ChatMessageResponse:
    if not text or not text.strip():
        raise InvalidArgument("Message cannot be empty")

    message = ChatMessage(sender_id=principal.id, message=text.strip(), created_at=utcnow())
    db.add(message)
    db.flush()

    sender = db.get(Member, principal.id)
    return _to_response(message, sender)


# 보낸 사람 본인 또는 관리자만 삭제 가능
def delete_message(db: Session, principal: Principal, message_id: int) -> int:
    message = db.get(ChatMessage, message_id)
    if not message:
        raise NotFound("Message not found")

    if not principal.is_admin and message.sender_id != principal.id:
        raise Forbidden("You can only delete your own messages")

    db.delete(message)
    return message_id
