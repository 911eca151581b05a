"""

admin_log.py

관리자(Admin) 행위 기록(Audit Log) 모델 정의 파일.

이 파일은 관리자에 의해 수행된 주요 관리 행위
(회원 생성/수정/삭제, 납입금 등록/상태 변경, 공지 등록/삭제)를
DB에 영구적으로 기록하기 위한 로그 테이블을 정의한다.

운영 중 발생할 수 있는 문제 추적,
권한 오남용 방지, 감사(Audit) 목적을 위한 모델이다.

설계 원칙:
- 실제 데이터 변경과 같은 트랜잭션에서 기록
- 로그 데이터는 수정/삭제하지 않는 것을 전제로 설계
- actor(행위자)와 target(대상)을 명확히 구분
- 행위자 회원이 삭제되어도 로그는 남도록 actor_id는 SET NULL

"""

import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, utcnow



#  관리자 행위 유형 Enum

class AdminAction(str, Enum):
    CREATE_MEMBER = "CREATE_MEMBER"
    UPDATE_MEMBER = "UPDATE_MEMBER"
    DELETE_MEMBER = "DELETE_MEMBER"
    CREATE_CONTRIBUTION = "CREATE_CONTRIBUTION"
    SET_CONTRIBUTION_STATUS = "SET_CONTRIBUTION_STATUS"
    CREATE_ANNOUNCEMENT = "CREATE_ANNOUNCEMENT"
    DELETE_ANNOUNCEMENT = "DELETE_ANNOUNCEMENT"


"""
관리자 행위 로그 모델

- actor_id    : 행위를 수행한 관리자 회원 번호
- action      : 수행된 관리자 행위 유형
- target_type : member / contribution / announcement
- target_id   : 대상 식별자 (회원 번호 또는 정수 id 문자열)
- detail      : 상태 변경 내용 등 짧은 설명
- created_at  : 행위 발생 시각 (UTC)

"""

class AdminActionLog(Base):
    __tablename__ = "admin_action_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    actor_id: Mapped[str | None] = mapped_column(
        String(20), ForeignKey("members.id", ondelete="SET NULL"), nullable=True
    )

    action: Mapped[str] = mapped_column(String(40), nullable=False)
    target_type: Mapped[str] = mapped_column(String(20), nullable=False)
    target_id: Mapped[str] = mapped_column(String(40), nullable=False)
    detail: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
