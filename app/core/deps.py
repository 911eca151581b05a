from typing import Generator

from fastapi import Depends, HTTPException
from fastapi.requests import HTTPConnection
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ServiceError
from app.core.security import decode_access_token
from app.db.session import SessionLocal
from app.schemas.auth import Principal
from app.services.auth import require_admin
from app.services.chat import ChatRelay
from app.services.storage import Storage, storage_from_settings

# Swagger Authorize에서 "Bearer 토큰" 입력받는 스키마
bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_principal(
    cred: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    try:
        return decode_access_token(cred.credentials if cred else None)
    except ServiceError as e:
        raise e.to_http()


def get_current_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    try:
        require_admin(principal)
    except ServiceError as e:
        raise e.to_http()
    return principal


_storage: Storage | None = None


def get_storage() -> Storage:
    global _storage
    if _storage is None:
        _storage = storage_from_settings(settings)
    return _storage


# 채팅 릴레이는 앱 수명주기(lifespan)에서 한 번 생성되어 app.state에 보관됨
def get_chat_relay(conn: HTTPConnection) -> ChatRelay:
    relay = getattr(conn.app.state, "chat_relay", None)
    if relay is None:
        raise HTTPException(status_code=503, detail="Chat relay not running")
    return relay
