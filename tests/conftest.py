import os
import tempfile

# Settings()는 import 시점에 생성되므로 앱 import 전에 기본값 주입
_TMP_DIR = tempfile.mkdtemp(prefix="stokvel-test-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP_DIR}/app.db")
os.environ.setdefault("TEST_DATABASE_URL", f"sqlite:///{_TMP_DIR}/test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("MEDIA_ROOT", os.path.join(_TMP_DIR, "media"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.main import app as fastapi_app
from app.core.config import settings
from app.core.deps import get_db, get_storage
from app.db.base import Base
from app.db.session import build_engine
from app.services.storage import LocalStorage

# ✅ 모델 import (Base.metadata에 테이블 등록)
import app.models  # noqa: F401


TEST_DB_URL = settings.TEST_DATABASE_URL or os.getenv("TEST_DATABASE_URL")
if not TEST_DB_URL:
    raise RuntimeError("TEST_DATABASE_URL is not set. Add it to .env or env var for tests.")

engine = build_engine(TEST_DB_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """테스트 전체 시작/종료 때만 스키마 생성/삭제"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    """각 테스트마다 데이터 초기화 (테이블은 유지, row만 삭제)"""
    # FK 의존성 순서의 역순으로 삭제 (SQLite / PostgreSQL 공통)
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def db_session():
    """테스트에서 직접 DB 조작할 때 쓰는 세션"""
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def storage(tmp_path):
    return LocalStorage(root=tmp_path / "media", base_url="/media")


@pytest.fixture()
def client(storage):
    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def session_factory():
    """스레드마다 별도 세션이 필요한 테스트용 (동시성 테스트)"""
    return TestingSessionLocal
