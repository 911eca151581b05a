from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


ContributionStatusStr = Literal["Pending", "Paid"]


class ContributionCreateRequest(BaseModel):
    member_id: str
    month: str = Field(..., examples=["January 2026"])
    amount: int = Field(..., ge=0, examples=[500])
    status: ContributionStatusStr = "Pending"


class ContributionStatusUpdate(BaseModel):
    status: ContributionStatusStr


class ContributionResponse(BaseModel):
    id: int
    member_id: str
    month: str
    amount: int
    status: str
    payment_date: Optional[datetime]
    proof_of_payment: Optional[dict]  # {url, name, type, size, uploaded_at}
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
