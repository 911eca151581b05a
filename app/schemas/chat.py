from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ChatMessageCreateRequest(BaseModel):
    message: str = ""


# 발신자 이름 / 프로필 사진을 붙인 메시지 (HTTP 응답과 new_message 이벤트 공용)
class ChatMessageResponse(BaseModel):
    id: int
    sender_id: str
    message: str
    created_at: datetime
    sender_name: Optional[str] = None
    sender_photo: Optional[str] = None
