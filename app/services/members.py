"""
services/members.py

회원 명부(Member Registry) 비즈니스 로직 모음.

주요 기능:
- 회원 목록 / 단건 조회
- 회원 생성 (빈 번호 채우기 방식의 회원 번호 발급)
- 회원 정보 수정 / 삭제
- 프로필 사진 업로드 / 삭제

회원 번호 발급 규칙:
- 형식: MEMBER_ID_PREFIX + MEMBER_ID_PERIOD + 3자리 순번 (예: PHSC2601007)
- 순번은 1 ~ 999 범위에서 "사용되지 않은 가장 작은 수"
  (단순 증가가 아님 → 삭제된 회원의 번호는 다음 생성 때 다시 사용됨)
- 남은 번호가 없으면 ResourceExhausted

동시성:
- 번호 계산(scan)과 INSERT는 하나의 트랜잭션 안에서 수행
- 프로세스 내부에서는 threading.Lock, PostgreSQL에서는
  트랜잭션 범위 advisory lock으로 번호 공간을 직렬화
  → 동시에 생성 요청이 들어와도 같은 번호가 두 번 발급되지 않음

관련 파일:
- app.models.member      : Member 모델
- app.routers.members    : 회원 API
- app.routers.profile    : 프로필 사진 API

"""

import logging
import threading
import time

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import Conflict, Internal, NotFound, ResourceExhausted
from app.core.security import get_password_hash
from app.db.base import utcnow
from app.models.admin_log import AdminAction
from app.models.member import Member
from app.schemas.auth import Principal
from app.schemas.member import MemberCreateRequest, MemberUpdateRequest
from app.services.admin_log import write_admin_log
from app.services.auth import require_admin, require_self_or_admin
from app.services.storage import (
    PHOTO_CONTENT_TYPES,
    Storage,
    StorageError,
    delete_quietly,
    validate_upload,
)

logger = logging.getLogger(__name__)

MAX_SEQUENCE = 999

# pg_advisory_xact_lock 키 (회원 번호 공간 전용)
MEMBER_ID_LOCK_KEY = 26_01_001

_member_id_lock = threading.Lock()


def list_members(db: Session, principal: Principal) -> list[Member]:
    require_admin(principal)
    return db.scalars(select(Member).order_by(Member.id)).all()


def get_member(db: Session, principal: Principal, member_id: str) -> Member:
    require_self_or_admin(principal, member_id)
    member = db.get(Member, member_id)
    if not member:
        raise NotFound("Member not found")
    return member


"""
사용 중이지 않은 가장 작은 순번 계산

- 모든 회원 번호의 마지막 3자리를 정수로 모아 집합을 만들고
  1 ~ 999 중 집합에 없는 최솟값을 반환
- 모두 사용 중이면 None

"""

def next_free_sequence(existing_ids) -> int | None:
    used = set()
    for member_id in existing_ids:
        tail = member_id[-3:]
        if tail.isdigit():
            used.add(int(tail))

    for number in range(1, MAX_SEQUENCE + 1):
        if number not in used:
            return number
    return None


def compose_member_id(sequence: int) -> str:
    return f"{settings.MEMBER_ID_PREFIX}{settings.MEMBER_ID_PERIOD}{sequence:03d}"


def _lock_member_id_space(db: Session) -> None:
    if db.get_bind().dialect.name == "postgresql":
        db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": MEMBER_ID_LOCK_KEY})


# 위반된 unique 제약 이름 (PostgreSQL은 diag, 그 외는 오류 메시지로 판단)
def _violated_constraint(exc: IntegrityError) -> str:
    diag = getattr(exc.orig, "diag", None)
    name = getattr(diag, "constraint_name", None)
    return name or str(exc.orig)


"""
회원 생성 (관리자 전용, 단일 트랜잭션)

1) 번호 공간 잠금
2) 빈 번호 계산 → 없으면 롤백 후 ResourceExhausted
3) 회원 번호 조합, 비밀번호 해시 (미입력 시 기본 비밀번호)
4) 오늘 날짜를 가입일로 INSERT + 관리자 로그
5) 커밋 / unique 위반 시 롤백 후 Conflict (이메일 / 회원 번호 구분),
   그 외 DB 오류는 롤백 후 Internal

NOTE:
- 다른 서비스와 달리 번호 발급의 원자성을 위해 이 함수가 직접 commit 수행

"""

def create_member(db: Session, principal: Principal, data: MemberCreateRequest) -> Member:
    require_admin(principal)

    # bcrypt는 느리므로 잠금 밖에서 미리 계산
    password_hash = get_password_hash(data.password or settings.DEFAULT_MEMBER_PASSWORD)

    with _member_id_lock:
        try:
            _lock_member_id_space(db)

            sequence = next_free_sequence(db.scalars(select(Member.id)).all())
            if sequence is None:
                db.rollback()
                raise ResourceExhausted("No available member numbers")

            member_id = compose_member_id(sequence)
            now = utcnow()
            member = Member(
                id=member_id,
                name=data.name,
                id_number=data.id_number,
                phone=data.phone,
                email=data.email,
                password_hash=password_hash,
                status=data.status or "Active",
                role=data.role.value,
                join_date=now.date(),
                bank_name=data.bank_name,
                account_holder=data.account_holder,
                account_number=data.account_number,
                branch_code=data.branch_code,
                created_at=now,
                updated_at=now,
            )
            db.add(member)
            write_admin_log(
                db,
                actor_id=principal.id,
                action=AdminAction.CREATE_MEMBER,
                target_type="member",
                target_id=member_id,
            )
            db.commit()
        except IntegrityError as e:
            db.rollback()
            constraint = _violated_constraint(e)
            logger.warning("Member creation conflict: %s", constraint)
            if "email" in constraint:
                raise Conflict("Email already exists")
            raise Conflict("Member ID already exists")
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Member creation failed")
            raise Internal("Failed to create member")

    db.refresh(member)
    logger.info("Member created: id=%s by admin=%s", member.id, principal.id)
    return member


"""
회원 정보 수정 (관리자 전용)

- 변경 가능한 필드 전체를 덮어씀, updated_at 갱신
- 대상 회원이 없어도 오류 없이 통과 (기존 동작 유지, 테스트로 고정)

NOTE:
- db.commit()은 호출 측(라우터)에서 수행

"""

def update_member(db: Session, principal: Principal, member_id: str, data: MemberUpdateRequest) -> None:
    require_admin(principal)

    member = db.get(Member, member_id)
    if not member:
        logger.info("Update skipped, member not found: %s", member_id)
        return

    member.name = data.name
    member.id_number = data.id_number
    member.phone = data.phone
    member.email = data.email
    member.status = data.status
    member.bank_name = data.bank_name
    member.account_holder = data.account_holder
    member.account_number = data.account_number
    member.branch_code = data.branch_code
    member.updated_at = utcnow()

    write_admin_log(
        db,
        actor_id=principal.id,
        action=AdminAction.UPDATE_MEMBER,
        target_type="member",
        target_id=member_id,
    )


# 회원 삭제 (관리자 전용) - 납입금 / 채팅 메시지는 CASCADE 삭제
def delete_member(db: Session, principal: Principal, member_id: str) -> Member:
    require_admin(principal)

    member = db.get(Member, member_id)
    if not member:
        raise NotFound("Member not found")

    db.delete(member)
    write_admin_log(
        db,
        actor_id=principal.id if principal.id != member_id else None,
        action=AdminAction.DELETE_MEMBER,
        target_type="member",
        target_id=member_id,
    )
    return member


"""
프로필 사진 업로드

- JPEG / PNG, 최대 MAX_UPLOAD_BYTES
- 업로드 후 회원의 사진 URL / key 교체
- 이전 사진은 best-effort로 삭제

"""

def upload_profile_photo(
    db: Session,
    principal: Principal,
    storage: Storage,
    *,
    data: bytes,
    content_type: str | None,
) -> Member:
    ext = validate_upload(
        content_type, len(data), allowed=PHOTO_CONTENT_TYPES, max_bytes=settings.MAX_UPLOAD_BYTES
    )

    member = db.get(Member, principal.id)
    if not member:
        raise NotFound("Member not found")

    key = f"profiles/{member.id}_{int(time.time() * 1000)}{ext}"
    try:
        url = storage.put_bytes(key, data, content_type=content_type)
    except StorageError:
        logger.exception("Profile photo upload failed for member=%s", member.id)
        raise Internal("Upload failed")

    previous_key = member.profile_photo_key
    member.profile_photo_url = url
    member.profile_photo_key = key
    member.updated_at = utcnow()

    if previous_key and previous_key != key:
        delete_quietly(storage, previous_key)
    return member


# 프로필 사진 삭제 - 원격 삭제 실패와 관계없이 로컬 참조는 항상 정리
def delete_profile_photo(db: Session, principal: Principal, storage: Storage) -> Member:
    member = db.get(Member, principal.id)
    if not member:
        raise NotFound("Member not found")

    delete_quietly(storage, member.profile_photo_key)

    member.profile_photo_url = None
    member.profile_photo_key = None
    member.updated_at = utcnow()
    return member
