"""
main.py

FastAPI 애플리케이션 진입점(Entry Point).

이 파일은 서버 실행 시 가장 먼저 로드되며,
애플리케이션 전반의 설정과 라우터 등록을 담당한다.

주요 역할:
- FastAPI 앱 인스턴스 생성 및 로깅 설정
- 앱 수명주기(lifespan)에 맞춰 채팅 릴레이(ChatRelay) 생성/정리
- CORS 미들웨어 설정
- 각 도메인별 라우터(auth, members, contributions, announcements, chat 등) 등록
- 로컬 저장소 사용 시 업로드 파일(/media) 정적 제공
- 헬스 체크 및 DB 연결 상태 확인용 엔드포인트 제공

설계 원칙:
- 비즈니스 로직은 포함하지 않고 설정/조립 역할만 수행
- 실제 기능은 routers / services 계층에 위임
- 처리되지 않은 DB 오류는 내부 정보 노출 없이 500으로 응답

관련 파일:
- app.core.config        : 환경 변수 및 설정 로드
- app.core.deps          : DB 세션 / 채팅 릴레이 의존성
- app.routers.*          : 기능별 API 라우터

"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_db
from app.routers import admin, announcements, auth, chat, contributions, members, profile, stats
from app.services.chat import ChatRelay

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.chat_relay = ChatRelay()
    logger.info("Chat relay started")
    yield
    app.state.chat_relay.clear()
    logger.info("Chat relay stopped")


app = FastAPI(title="Stokvel Backend", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(members.router)
app.include_router(profile.router)
app.include_router(contributions.router)
app.include_router(announcements.router)
app.include_router(stats.router)
app.include_router(chat.router)
app.include_router(admin.router)

# 로컬 저장소일 때만 업로드 파일을 직접 제공 (S3는 버킷 공개 URL 사용)
if settings.STORAGE_BACKEND == "local":
    media_root = Path(settings.MEDIA_ROOT)
    media_root.mkdir(parents=True, exist_ok=True)
    app.mount(settings.MEDIA_URL, StaticFiles(directory=media_root), name="media")


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Database error"})


"""
서버 헬스 체크 엔드포인트

- 애플리케이션 프로세스가 정상 동작 중인지 확인
- 로드밸런서 / 배포 환경에서 서버 상태 확인 용도

"""
@app.get("/health")
def health():
    return {"status": "ok"}

"""
데이터베이스 연결 상태 확인 엔드포인트

- 간단한 SELECT 1 쿼리를 통해 DB 연결 여부 확인
- 서버는 살아 있으나 DB가 죽은 상황을 분리해서 감지 가능

"""
@app.get("/db-ping")
def db_ping(db: Session = Depends(get_db)):
    value = db.execute(text("SELECT 1")).scalar_one()
    return {"db": "ok", "value": value}
