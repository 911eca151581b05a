"""
stats.py

회원별 저축 통계 API.

- 본인 또는 관리자만 조회 가능
- Paid 납입금 기준 누적 납입액 / 납입 개월 수 / 예상 지급액

"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_current_principal, get_db
from app.core.errors import ServiceError
from app.schemas.auth import Principal
from app.services.stats import member_stats

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/{member_id}")
def get_stats(
    member_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        stats = member_stats(db, principal, member_id)
    except ServiceError as e:
        raise e.to_http()

    return {"data": stats}
