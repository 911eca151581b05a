from pydantic import BaseModel


class MemberStatsResponse(BaseModel):
    total_saved: int = 0
    months_contributed: int = 0
    # 이자/수수료 모델 없음: 누적 납입액과 동일
    estimated_payout: int = 0
