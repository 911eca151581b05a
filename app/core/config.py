"""
config.py

애플리케이션 전역 설정(Configuration) 관리 파일.

이 파일은 .env 환경 변수들을 Pydantic BaseSettings를 통해 로드하여
애플리케이션 전반에서 공통으로 사용하는 설정 값을 제공한다.

주요 설정 항목:
- 데이터베이스 연결 정보
- JWT 인증 관련 시크릿 및 만료 정책 (24시간)
- 회원 번호(PHSC + YYMM + 3자리) 발급 규칙
- 업로드 저장소(local / s3) 및 업로드 용량 제한
- CORS 허용 도메인 목록, 로그 레벨

설계 원칙:
- 모든 환경 변수는 이 파일을 통해서만 접근
- 로컬 / 테스트 / 운영 환경을 .env로 분리하여 관리
- 설정 값은 런타임 중 변경되지 않는 불변 객체로 취급

관련 파일:
- app.main               : CORS, 로깅, 미디어 경로 설정 사용
- app.core.security      : JWT 시크릿 / 만료 설정 사용
- app.db.session         : DATABASE_URL 사용
- app.services.storage   : STORAGE_BACKEND / S3_* 사용

"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

# .env 파일에 정의된 환경 변수를 로드하는 설정 클래스
# extra="ignore" 옵션으로 정의되지 않은 환경 변수는 무시
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: str
    TEST_DATABASE_URL: str | None = None

    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    # 세션 토큰은 24시간 유지
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # 회원 번호 = PREFIX + PERIOD(YYMM) + 3자리 순번
    MEMBER_ID_PREFIX: str = "PHSC"
    MEMBER_ID_PERIOD: str = "2601"

    # 관리자가 비밀번호 없이 회원을 만들 때 쓰는 기본 비밀번호 (약한 기본값, 운영 시 주의)
    DEFAULT_MEMBER_PASSWORD: str = "member123"

    # 업로드 설정
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    STORAGE_BACKEND: str = "local"
    MEDIA_ROOT: str = "media"
    MEDIA_URL: str = "/media"

    S3_ENDPOINT: str = ""
    S3_REGION: str = ""
    S3_BUCKET: str = ""
    S3_ACCESS_KEY_ID: str = ""
    S3_SECRET_ACCESS_KEY: str = ""
    S3_PUBLIC_URL: str = ""

    CHAT_HISTORY_LIMIT: int = 100

    LOG_LEVEL: str = "INFO"

    # CORS 허용 도메인 (프론트엔드 주소)
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

# 애플리케이션 전역에서 import하여 사용하는 Settings 인스턴스
# 실행 시 한 번만 생성됨
settings = Settings()
