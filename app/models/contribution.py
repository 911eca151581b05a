import datetime
from enum import Enum

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, utcnow


class ContributionStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"


class Contribution(Base):
    """회원의 월 납입금 레코드.

    - month: 'January 2026' 같은 자유 형식 라벨 (날짜 타입 아님)
    - payment_date: status가 Paid로 기록될 때만 채워지고, 그 외에는 None
    - proof_of_payment: {url, name, type, size, uploaded_at} 형태의 증빙 파일 정보
    """

    __tablename__ = "contributions"
    __table_args__ = (
        Index("ix_contributions_member_id", "member_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    member_id: Mapped[str] = mapped_column(
        String(20), ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )
    month: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ContributionStatus.PENDING.value)
    payment_date: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    proof_of_payment: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    member: Mapped["Member"] = relationship(back_populates="contributions")
