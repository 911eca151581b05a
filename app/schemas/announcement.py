import datetime

from pydantic import BaseModel, ConfigDict

from app.models.announcement import Priority


class AnnouncementCreateRequest(BaseModel):
    title: str
    message: str
    priority: Priority = Priority.NORMAL


class AnnouncementResponse(BaseModel):
    id: int
    title: str
    message: str
    announcement_date: datetime.date
    priority: str
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)
