"""
member.py

회원(Member) 및 권한(Role) 모델 정의 파일.

이 파일은 스토크벨(계모임) 회원의 기본 정보와
권한(Role), 상태, 은행 계좌 정보, 프로필 사진 정보를 관리한다.

모든 인증, 권한, 납입금, 채팅 기능의 기준이 되는 핵심 모델이다.

"""

import datetime
from enum import Enum

from sqlalchemy import Date, DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, utcnow


"""
회원 권한(Role) 정의

- ADMIN   : 관리자 (회원/납입금/공지 관리)
- MEMBER  : 일반 회원

"""

class Role(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


"""
회원(Member) 모델

- id    : PREFIX + YYMM + 3자리 순번 (예: PHSC2601001), 관리자 생성 시 발급
- email : 로그인 식별자 (unique)
- status: 'Active' 또는 그 외 문자열 (자유 형식)
- 회원 삭제 시 납입금 / 채팅 메시지는 CASCADE 삭제

"""

class Member(Base):
    __tablename__ = "members"
    __table_args__ = (
        UniqueConstraint("email", name="uq_members_email"),
    )

    id: Mapped[str] = mapped_column(String(20), primary_key=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    id_number: Mapped[str] = mapped_column(String(13), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Active")
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=Role.MEMBER.value)
    join_date: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)

    bank_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    account_holder: Mapped[str | None] = mapped_column(String(100), nullable=True)
    account_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    branch_code: Mapped[str | None] = mapped_column(String(10), nullable=True)

    profile_photo_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    profile_photo_key: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    contributions: Mapped[list["Contribution"]] = relationship(
        back_populates="member", cascade="all, delete-orphan", passive_deletes=True
    )
    chat_messages: Mapped[list["ChatMessage"]] = relationship(
        back_populates="sender", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value
