"""
services/auth.py

인증(Credential & Session) 관련 비즈니스 로직.

주요 기능:
- 로그인: 이메일/비밀번호 확인 후 세션 토큰 발급
- 관리자 권한 확인 (require_admin)
- 본인 확인 (require_self_or_admin)
- 비밀번호 변경: 현재 비밀번호 재확인 후 새 해시로 교체

설계 원칙:
- HTTP / FastAPI 의존성 없음 (app.core.errors 예외만 사용)
- 존재하지 않는 이메일과 틀린 비밀번호는 같은 오류로 응답 (계정 존재 여부 노출 방지)
- 비밀번호 해시는 반환 값에 포함하지 않음 (MemberResponse 스키마에서 제외)

관련 파일:
- app.core.security      : 해시 / 토큰 생성
- app.routers.auth       : 로그인 API
- app.routers.members    : 비밀번호 변경 API

"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, InvalidArgument, NotFound, Unauthenticated
from app.core.security import create_access_token, get_password_hash, verify_password
from app.db.base import utcnow
from app.models.member import Member
from app.schemas.auth import Principal

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def login(db: Session, *, email: str, password: str) -> tuple[str, Member]:
    member = db.scalar(select(Member).where(Member.email == email))

    if not member or not verify_password(password, member.password_hash):
        logger.info("Failed login attempt for email=%s", email)
        raise Unauthenticated("Invalid credentials")

    token = create_access_token(
        member_id=member.id,
        email=member.email,
        role=member.role,
        name=member.name,
        photo_url=member.profile_photo_url,
    )
    return token, member


def require_admin(principal: Principal) -> None:
    if not principal.is_admin:
        raise Forbidden("Admin access required")


# 일반 회원은 본인 데이터만, 관리자는 전체 조회 가능
def require_self_or_admin(principal: Principal, member_id: str) -> None:
    if not principal.is_admin and principal.id != member_id:
        raise Forbidden("Access denied")


"""
비밀번호 변경

- 현재 / 새 비밀번호 모두 필수
- 새 비밀번호는 8자 이상
- 현재 비밀번호가 틀리면 Unauthenticated
- 새 salt로 해시를 다시 생성하여 저장

NOTE:
- db.commit()은 호출 측(라우터)에서 수행

"""

def change_password(db: Session, principal: Principal, *, current_password: str, new_password: str) -> None:
    if not current_password or not new_password:
        raise InvalidArgument("Current and new password are required")

    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise InvalidArgument(f"New password must be at least {MIN_PASSWORD_LENGTH} characters")

    member = db.get(Member, principal.id)
    if not member:
        raise NotFound("Member not found")

    if not verify_password(current_password, member.password_hash):
        raise Unauthenticated("Current password is incorrect")

    member.password_hash = get_password_hash(new_password)
    member.updated_at = utcnow()
    logger.info("Password changed for member=%s", member.id)
