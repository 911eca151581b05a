"""
services/contributions.py

납입금 장부(Contribution Ledger) 비즈니스 로직 모음.

주요 기능:
- 납입금 목록 조회 (관리자: 전체 / 회원: 본인 것만, 최신 id 순)
- 납입금 등록 / 상태 변경 (관리자 전용)
- 납입 증빙 파일 첨부 (로그인한 누구나)
- 관리자용 납입 현황 내보내기 행 생성

상태 규칙:
- status가 Paid로 기록될 때 payment_date = 현재 시각
- 그 외 상태로 기록되면 payment_date = None
- 증빙이 새로 첨부되면 이전 상태와 관계없이 Pending으로 되돌림
  (관리자가 다시 확인해야 함)

설계 원칙:
- HTTP / FastAPI 의존성 없음
- 트랜잭션 제어(commit)는 라우터에서 수행
- 증빙 업로드는 납입금 존재 확인 → 업로드 → 기록 순서로 진행하고,
  업로드 후 레코드가 사라졌으면 업로드한 파일을 best-effort로 삭제

관련 파일:
- app.models.contribution  : Contribution 모델
- app.routers.contributions: 납입금 API
- app.services.storage     : 업로드 저장소

"""

import logging
import time

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import Internal, NotFound
from app.db.base import utcnow
from app.models.admin_log import AdminAction
from app.models.contribution import Contribution, ContributionStatus
from app.models.member import Member
from app.schemas.auth import Principal
from app.services.admin_log import write_admin_log
from app.services.auth import require_admin
from app.services.storage import (
    PROOF_CONTENT_TYPES,
    Storage,
    StorageError,
    delete_quietly,
    validate_upload,
)

logger = logging.getLogger(__name__)


def payment_date_for(status: str):
    return utcnow() if status == ContributionStatus.PAID.value else None


def list_contributions(db: Session, principal: Principal) -> list[Contribution]:
    stmt = select(Contribution)
    if not principal.is_admin:
        stmt = stmt.where(Contribution.member_id == principal.id)
    return db.scalars(stmt.order_by(desc(Contribution.id))).all()


"""
납입금 등록 (관리자 전용)

- 대상 회원이 존재해야 함
- status가 Paid면 payment_date를 현재 시각으로 기록

"""

def create_contribution(
    db: Session,
    principal: Principal,
    *,
    member_id: str,
    month: str,
    amount: int,
    status: str = ContributionStatus.PENDING.value,
) -> Contribution:
    require_admin(principal)

    if not db.get(Member, member_id):
        raise NotFound("Member not found")

    status = status or ContributionStatus.PENDING.value
    contribution = Contribution(
        member_id=member_id,
        month=month,
        amount=amount,
        status=status,
        payment_date=payment_date_for(status),
    )
    db.add(contribution)
    db.flush()

    write_admin_log(
        db,
        actor_id=principal.id,
        action=AdminAction.CREATE_CONTRIBUTION,
        target_type="contribution",
        target_id=contribution.id,
        detail=f"{member_id} {month} {amount} {status}",
    )
    return contribution


# 상태 변경 (관리자 전용) - payment_date는 등록 때와 같은 규칙으로 다시 계산
def update_contribution_status(db: Session, principal: Principal, contribution_id: int, status: str) -> Contribution:
    require_admin(principal)

    contribution = db.get(Contribution, contribution_id)
    if not contribution:
        raise NotFound("Contribution not found")

    before = contribution.status
    contribution.status = status
    contribution.payment_date = payment_date_for(status)
    contribution.updated_at = utcnow()

    write_admin_log(
        db,
        actor_id=principal.id,
        action=AdminAction.SET_CONTRIBUTION_STATUS,
        target_type="contribution",
        target_id=contribution.id,
        detail=f"{before} -> {status}",
    )
    logger.info("Contribution %s status %s -> %s", contribution.id, before, status)
    return contribution


"""
납입 증빙 첨부 (로그인한 누구나)

1) MIME 타입(JPEG/PNG/PDF) / 용량(5MB) 검증 → 실패 시 장부 변경 없이 InvalidArgument
2) 납입금 존재 확인 → 없으면 업로드 전에 NotFound
3) 저장소 업로드
4) proof_of_payment 덮어쓰기 + status를 Pending으로 되돌림
   (업로드 도중 레코드가 삭제됐으면 업로드 파일 삭제 후 NotFound)

"""

def attach_proof(
    db: Session,
    principal: Principal,
    storage: Storage,
    contribution_id: int,
    *,
    data: bytes,
    content_type: str | None,
    original_name: str | None,
    size: int | None = None,
) -> Contribution:
    size = len(data) if size is None else size
    ext = validate_upload(content_type, size, allowed=PROOF_CONTENT_TYPES, max_bytes=settings.MAX_UPLOAD_BYTES)

    if not db.get(Contribution, contribution_id):
        raise NotFound("Contribution not found")

    key = f"proofs/contribution_{contribution_id}_{int(time.time() * 1000)}{ext}"
    try:
        url = storage.put_bytes(key, data, content_type=content_type)
    except StorageError:
        logger.exception("Proof upload failed for contribution=%s", contribution_id)
        raise Internal("Upload failed")

    # 업로드하는 동안 다른 요청이 삭제했을 수 있으므로 다시 조회
    db.expire_all()
    contribution = db.get(Contribution, contribution_id)
    if not contribution:
        delete_quietly(storage, key)
        raise NotFound("Contribution not found")

    contribution.proof_of_payment = {
        "url": url,
        "name": original_name or key.rsplit("/", 1)[-1],
        "type": content_type,
        "size": size,
        "uploaded_at": utcnow().isoformat(),
    }
    contribution.status = ContributionStatus.PENDING.value
    contribution.payment_date = None
    contribution.updated_at = utcnow()

    logger.info("Proof attached to contribution=%s by member=%s", contribution_id, principal.id)
    return contribution


# 관리자용 내보내기 행 (회원 이름 포함, month 지정 시 해당 월만)
def export_rows(db: Session, principal: Principal, *, month: str | None = None):
    require_admin(principal)

    stmt = (
        select(Contribution, Member)
        .join(Member, Member.id == Contribution.member_id)
        .order_by(Contribution.member_id, Contribution.id)
    )
    if month:
        stmt = stmt.where(Contribution.month == month)
    return db.execute(stmt).all()
