import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr

from app.models.member import Role


class MemberCreateRequest(BaseModel):
    name: str
    id_number: str
    phone: Optional[str] = None
    email: EmailStr
    password: Optional[str] = None
    status: str = "Active"
    role: Role = Role.MEMBER
    bank_name: Optional[str] = None
    account_holder: Optional[str] = None
    account_number: Optional[str] = None
    branch_code: Optional[str] = None


# 수정은 전체 필드 덮어쓰기 (role / 비밀번호는 수정 대상 아님)
class MemberUpdateRequest(BaseModel):
    name: str
    id_number: str
    phone: Optional[str] = None
    email: EmailStr
    status: str = "Active"
    bank_name: Optional[str] = None
    account_holder: Optional[str] = None
    account_number: Optional[str] = None
    branch_code: Optional[str] = None


# 비밀번호 해시는 응답에 절대 포함하지 않음
class MemberResponse(BaseModel):
    id: str
    name: str
    id_number: str
    phone: Optional[str]
    email: str
    status: str
    role: str
    join_date: Optional[datetime.date]
    bank_name: Optional[str]
    account_holder: Optional[str]
    account_number: Optional[str]
    branch_code: Optional[str]
    profile_photo_url: Optional[str]
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)
