"""
services/announcements.py

공지사항(Announcement Board) CRUD.

- 목록: 공지 날짜 최신순 (같은 날짜는 최근 등록순)
- 등록: 관리자 전용, 오늘 날짜로 기록, 기본 우선순위 normal
- 삭제: 관리자 전용

NOTE:
- db.commit()은 호출 측(라우터)에서 수행

"""

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.db.base import utcnow
from app.models.admin_log import AdminAction
from app.models.announcement import Announcement, Priority
from app.schemas.auth import Principal
from app.services.admin_log import write_admin_log
from app.services.auth import require_admin


def list_announcements(db: Session) -> list[Announcement]:
    return db.scalars(
        select(Announcement).order_by(desc(Announcement.announcement_date), desc(Announcement.id))
    ).all()


def create_announcement(
    db: Session,
    principal: Principal,
    *,
    title: str,
    message: str,
    priority: Priority | None = None,
) -> Announcement:
    require_admin(principal)

    now = utcnow()
    announcement = Announcement(
        title=title,
        message=message,
        announcement_date=now.date(),
        priority=(priority or Priority.NORMAL).value,
        created_at=now,
        updated_at=now,
    )
    db.add(announcement)
    db.flush()

    write_admin_log(
        db,
        actor_id=principal.id,
        action=AdminAction.CREATE_ANNOUNCEMENT,
        target_type="announcement",
        target_id=announcement.id,
    )
    return announcement


def delete_announcement(db: Session, principal: Principal, announcement_id: int) -> None:
    require_admin(principal)

    announcement = db.get(Announcement, announcement_id)
    if not announcement:
        raise NotFound("Announcement not found")

    db.delete(announcement)
    write_admin_log(
        db,
        actor_id=principal.id,
        action=AdminAction.DELETE_ANNOUNCEMENT,
        target_type="announcement",
        target_id=announcement_id,
    )
