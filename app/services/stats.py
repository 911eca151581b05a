"""
services/stats.py

회원별 저축 통계 계산 (읽기 전용).

- 접근 권한은 회원 단건 조회와 동일 (본인 또는 관리자)
- Paid 상태의 납입금만 집계
- 예상 지급액은 누적 납입액과 동일 (이자/수수료 모델 없음)

"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.contribution import Contribution, ContributionStatus
from app.schemas.auth import Principal
from app.schemas.stats import MemberStatsResponse
from app.services.auth import require_self_or_admin


def member_stats(db: Session, principal: Principal, member_id: str) -> MemberStatsResponse:
    require_self_or_admin(principal, member_id)

    contributions = db.scalars(
        select(Contribution).where(Contribution.member_id == member_id)
    ).all()

    paid = [c for c in contributions if c.status == ContributionStatus.PAID.value]
    total_saved = sum(c.amount for c in paid)

    return MemberStatsResponse(
        total_saved=total_saved,
        months_contributed=len(paid),
        estimated_payout=total_saved,
    )
