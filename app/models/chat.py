import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, utcnow


class ChatMessage(Base):
    """채팅 메시지. 생성 후 수정하지 않으며 삭제만 가능."""

    __tablename__ = "chat_messages"
    __table_args__ = (
        Index("ix_chat_messages_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    sender_id: Mapped[str] = mapped_column(
        String(20), ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    sender: Mapped["Member"] = relationship(back_populates="chat_messages")
