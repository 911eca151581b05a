"""
auth.py

인증(Authentication) API.

이 파일은 로그인(세션 토큰 발급)을 담당한다.
비밀번호 변경은 회원 API(app.routers.members)에 있다.

설계 원칙:
- 토큰은 응답 바디로 반환, 이후 요청은 Authorization: Bearer 헤더로 전달
- 토큰 유효 기간은 24시간, 재발급(refresh) 없음 → 만료 시 다시 로그인
- 없는 이메일 / 틀린 비밀번호는 동일한 401 응답 (계정 존재 여부 노출 방지)
- 응답의 회원 정보에서 비밀번호 해시 제거

관련 파일:
- app.services.auth        : 로그인 로직
- app.core.security        : 비밀번호 해시 / JWT 생성·검증
- app.schemas.auth         : 인증 관련 요청/응답

"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.core.errors import ServiceError
from app.schemas.auth import LoginRequest, LoginResponse
from app.schemas.member import MemberResponse
from app.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


"""
로그인 API

- 이메일 / 비밀번호 인증
- 세션 토큰(access_token)과 회원 정보를 함께 반환

"""

@router.post("/login")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    try:
        token, member = auth_service.login(db, email=data.email, password=data.password)
    except ServiceError as e:
        raise e.to_http()

    return {
        "data": LoginResponse(
            access_token=token,
            member=MemberResponse.model_validate(member),
        )
    }
