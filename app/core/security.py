"""
security.py

비밀번호 해싱 및 세션 토큰(JWT) 생성/검증을 담당하는 보안 유틸리티 모음.

이 파일은 인증(auth) 로직에서 사용하는
저수준(low-level) 보안 기능만을 제공하며,
라우터나 비즈니스 로직은 포함하지 않는다.

주요 기능:
- 비밀번호 해싱 및 검증 (bcrypt)
- 세션 토큰 생성 (회원 번호, 이메일, 권한, 이름, 프로필 사진 포함)
- 세션 토큰 디코딩 및 검증 → Principal

설계 원칙:
- 토큰 하나로 요청자 정보를 모두 표현 (DB 조회 없이 인가 판단)
- 시간 기반(exp) 만료는 UTC 기준으로 처리
- 형식 오류 / 만료 / 서명 불일치는 모두 같은 예외(Forbidden)로 처리

관련 파일:
- app.core.config        : JWT 시크릿 키 및 만료 설정
- app.core.deps          : 토큰을 실제로 검증하는 인증 의존성
- app.services.auth      : 로그인 / 비밀번호 변경

"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from app.core.config import settings
from app.core.errors import Forbidden, Unauthenticated
from app.schemas.auth import Principal


# bcrypt 기반 비밀번호 해싱 컨텍스트
# deprecated="auto"로 향후 알고리즘 교체 가능하도록 설정

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


"""
세션 토큰 생성 함수

- sub   : 회원 번호 (예: PHSC2601001)
- email / role / name / photo_url 을 함께 담아
  하위 핸들러가 DB 조회 없이 요청자 정보를 사용할 수 있게 함
- exp   : 만료 시각 (기본 24시간, UTC timestamp)

"""

def create_access_token(
    *,
    member_id: str,
    email: str,
    role: str,
    name: str,
    photo_url: str | None = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {
        "sub": member_id,
        "type": "access",
        "email": email,
        "role": role,
        "name": name,
        "photo_url": photo_url,
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


"""
세션 토큰 디코딩 함수

- 토큰이 없으면 Unauthenticated
- 서명 불일치 / 만료 / 필수 claim 누락이면 Forbidden

"""

def decode_access_token(token: str | None) -> Principal:
    if not token:
        raise Unauthenticated("Not authenticated")

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        if payload.get("type") != "access":
            raise JWTError("Not an access token")
        sub = payload.get("sub")
        if not sub:
            raise JWTError("Missing subject")
        return Principal(
            id=sub,
            email=payload.get("email") or "",
            role=payload.get("role") or "member",
            name=payload.get("name") or "",
            photo_url=payload.get("photo_url"),
        )
    except (JWTError, ValueError):
        raise Forbidden("Invalid or expired token")
