"""
members.py

회원 명부(Member Registry) API 모음.

주요 기능:
- 전체 회원 목록 조회 (관리자)
- 회원 단건 조회 (본인 또는 관리자)
- 회원 생성 / 수정 / 삭제 (관리자)
- 본인 비밀번호 변경

설계 원칙:
- 비즈니스 로직은 service 계층(app.services.members)에 위임
- 이 라우터는 요청/응답 처리와 트랜잭션 커밋/롤백에만 집중
- 응답에는 비밀번호 해시를 포함하지 않음 (MemberResponse)

관련 파일:
- app.services.members     : 회원 번호 발급 / CRUD 로직
- app.services.auth        : 비밀번호 변경
- app.schemas.member       : 요청/응답 스키마

"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.deps import get_current_principal, get_db
from app.core.errors import ServiceError
from app.schemas.auth import ChangePasswordRequest, Principal
from app.schemas.member import MemberCreateRequest, MemberResponse, MemberUpdateRequest
from app.services import auth as auth_service
from app.services import members as member_service

router = APIRouter(prefix="/members", tags=["members"])


# 전체 회원 목록 (관리자 전용, 회원 번호 오름차순)
@router.get("")
def list_members(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        members = member_service.list_members(db, principal)
    except ServiceError as e:
        raise e.to_http()

    return {
        "data": [MemberResponse.model_validate(m) for m in members],
        "meta": {"count": len(members)},
    }


"""
본인 비밀번호 변경 API

- 현재 비밀번호 확인 필수
- 새 비밀번호 8자 이상
- 경로 충돌을 피하기 위해 /members/{member_id} 보다 먼저 등록

"""

@router.post("/change-password")
def change_password(
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        auth_service.change_password(
            db,
            principal,
            current_password=data.current_password,
            new_password=data.new_password,
        )
        db.commit()
    except ServiceError as e:
        db.rollback()
        raise e.to_http()

    return {"message": "Password updated successfully"}


# 회원 단건 조회 - 일반 회원은 본인만
@router.get("/{member_id}")
def get_member(
    member_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        member = member_service.get_member(db, principal, member_id)
    except ServiceError as e:
        raise e.to_http()

    return {"data": MemberResponse.model_validate(member)}


"""
회원 생성 API (관리자 전용)

- 회원 번호는 서버에서 빈 번호 채우기 방식으로 발급
- 비밀번호 미입력 시 기본 비밀번호 사용
- 이메일 / 회원 번호 중복 시 409

"""

@router.post("", status_code=status.HTTP_201_CREATED)
def create_member(
    data: MemberCreateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        member = member_service.create_member(db, principal, data)
    except ServiceError as e:
        db.rollback()
        raise e.to_http()

    return {
        "message": "Member created successfully",
        "data": MemberResponse.model_validate(member),
    }


# 회원 수정 (관리자 전용) - 대상이 없어도 200 (기존 동작 유지)
@router.put("/{member_id}")
def update_member(
    member_id: str,
    data: MemberUpdateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        member_service.update_member(db, principal, member_id, data)
        db.commit()
    except ServiceError as e:
        db.rollback()
        raise e.to_http()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already exists")

    return {"message": "Member updated successfully"}


# 회원 삭제 (관리자 전용) - 납입금은 함께 삭제
@router.delete("/{member_id}")
def delete_member(
    member_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        member = member_service.delete_member(db, principal, member_id)
        snapshot = {"id": member.id, "name": member.name, "email": member.email}
        db.commit()
    except ServiceError as e:
        db.rollback()
        raise e.to_http()

    return {
        "message": "Member deleted successfully",
        "data": snapshot,
    }
