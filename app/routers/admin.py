from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_current_admin, get_db
from app.schemas.auth import Principal
from app.services.admin_log import list_admin_logs

router = APIRouter(prefix="/admin", tags=["admin"])


# 관리자 활동 로그 조회 엔드포인트 (최신순, 최대 200건)
@router.get("/logs")
def list_logs(
    limit: int = 50,
    db: Session = Depends(get_db),
    _: Principal = Depends(get_current_admin),
):
    limit, rows = list_admin_logs(db, limit=limit)

    result = []
    for log, actor in rows:
        result.append(
            {
                "id": log.id,
                "created_at": log.created_at.isoformat(),
                "action": log.action,
                "target_type": log.target_type,
                "target_id": log.target_id,
                "detail": log.detail,
                "actor": (
                    {
                        "id": actor.id,
                        "email": actor.email,
                        "name": actor.name,
                        "role": actor.role,
                    }
                    if actor
                    else None
                ),
            }
        )
    return {
        "data": result,
        "meta": {
            "limit": limit,
            "count": len(result),
        },
    }
