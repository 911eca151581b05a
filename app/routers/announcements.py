"""
announcements.py

공지사항 API.

- GET    /announcements       : 로그인한 누구나, 공지 날짜 최신순
- POST   /announcements       : 관리자 전용, 오늘 날짜로 등록 (기본 우선순위 normal)
- DELETE /announcements/{id}  : 관리자 전용

"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.deps import get_current_principal, get_db
from app.core.errors import ServiceError
from app.schemas.announcement import AnnouncementCreateRequest, AnnouncementResponse
from app.schemas.auth import Principal
from app.services import announcements as announcement_service

router = APIRouter(prefix="/announcements", tags=["announcements"])


@router.get("")
def list_announcements(
    db: Session = Depends(get_db),
    _: Principal = Depends(get_current_principal),
):
    rows = announcement_service.list_announcements(db)
    return {
        "data": [AnnouncementResponse.model_validate(a) for a in rows],
        "meta": {"count": len(rows)},
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_announcement(
    body: AnnouncementCreateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        announcement = announcement_service.create_announcement(
            db,
            principal,
            title=body.title,
            message=body.message,
            priority=body.priority,
        )
        db.commit()
        db.refresh(announcement)
    except ServiceError as e:
        db.rollback()
        raise e.to_http()

    return {
        "message": "Announcement created successfully",
        "data": AnnouncementResponse.model_validate(announcement),
    }


@router.delete("/{announcement_id}")
def delete_announcement(
    announcement_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        announcement_service.delete_announcement(db, principal, announcement_id)
        db.commit()
    except ServiceError as e:
        db.rollback()
        raise e.to_http()

    return {"message": "Announcement deleted successfully"}
