"""
services/admin_log.py

관리자 행위 로그 기록 서비스.

이 파일은 관리자(Admin)가 수행한 주요 행위를
AdminActionLog 테이블에 기록하는 역할을 담당한다.

서비스 계층에서 호출되며,
로그 기록 자체는 DB에만 영향을 주고
비즈니스 흐름에는 개입하지 않는다.

설계 원칙:
- 로그는 원래 변경과 같은 세션/트랜잭션에 추가 (함께 커밋, 함께 롤백)
- 로그 데이터는 수정/삭제하지 않는 것을 전제로 설계

"""

from sqlalchemy import desc, select
from sqlalchemy.orm import Session, aliased

from app.models.admin_log import AdminActionLog, AdminAction
from app.models.member import Member


"""
관리자 행위 로그 기록 함수

- actor_id    : 행위를 수행한 관리자 회원 번호
- action      : 수행된 관리자 행위 유형
- target_type : 대상 종류 (member / contribution / announcement)
- target_id   : 대상 식별자
- detail      : 부가 설명 (선택)

NOTE:
- db.commit()은 호출 측(서비스/라우터)에서 수행

"""
def write_admin_log(
    db: Session,
    *,
    actor_id: str,
    action: AdminAction,
    target_type: str,
    target_id,
    detail: str | None = None,
) -> AdminActionLog:
    log = AdminActionLog(
        actor_id=actor_id,
        action=action.value,
        target_type=target_type,
        target_id=str(target_id),
        detail=detail,
    )
    db.add(log)
    return log


# 최근 로그 조회 (행위자 정보 포함, 행위자가 삭제된 경우 None)
def list_admin_logs(db: Session, *, limit: int = 50):
    limit = max(1, min(limit, 200))
    Actor = aliased(Member)

    rows = db.execute(
        select(AdminActionLog, Actor)
        .outerjoin(Actor, Actor.id == AdminActionLog.actor_id)
        .order_by(desc(AdminActionLog.created_at), desc(AdminActionLog.id))
        .limit(limit)
    ).all()
    return limit, rows
