from pydantic import BaseModel, EmailStr

from app.schemas.member import MemberResponse


# 토큰에서 복원한 요청자 정보 (DB 조회 없이 사용)
class Principal(BaseModel):
    id: str
    email: str
    role: str
    name: str
    photo_url: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    member: MemberResponse

# 길이 검증은 서비스에서 수행 (400으로 응답하기 위해 스키마에서는 제한하지 않음)
class ChangePasswordRequest(BaseModel):
    current_password: str = ""
    new_password: str = ""
