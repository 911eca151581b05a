"""

관리자(admin) 초기 계정 생성 스크립트.

- 서버 최초 세팅 시 단 한 번 실행하는 용도
- .env에 정의된 ADMIN_* 환경 변수를 읽어
  관리자 회원을 생성한다.
- 이미 관리자 회원이 존재하면 생성하지 않고 종료한다.

사용 목적:
- 회원 생성 / 납입금 관리 API에 접근할 수 있는
  첫 관리자 계정을 안전하게 초기화하기 위함
- 회원 번호는 API와 같은 규칙(빈 번호 채우기)으로 발급

사용 방법
- 가상환경 접속
- (.venv) ~\backend~$ python -m scripts.create_admin

"""

import os
from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import select
from app.db.base import utcnow
from app.db.session import SessionLocal
from app.models.member import Member, Role
from app.core.security import get_password_hash
from app.services.members import compose_member_id, next_free_sequence



def main():
    db = SessionLocal()
    try:
        exists = db.scalar(
            select(Member).where(Member.role == Role.ADMIN.value)
        )
        if exists:
            print(f"✅ Admin already exists ({exists.id}). Skip creation.")
            return

        email = os.environ["ADMIN_EMAIL"]
        password = os.environ["ADMIN_PASSWORD"]
        name = os.environ.get("ADMIN_NAME", "Stokvel Admin")
        id_number = os.environ.get("ADMIN_ID_NUMBER", "0000000000000")
        phone = os.environ.get("ADMIN_PHONE")

        email_exists = db.scalar(
            select(Member).where(Member.email == email)
        )
        if email_exists:
            raise RuntimeError("Email already exists but is not an admin")

        sequence = next_free_sequence(db.scalars(select(Member.id)).all())
        if sequence is None:
            raise RuntimeError("No available member numbers")

        now = utcnow()
        member = Member(
            id=compose_member_id(sequence),
            name=name,
            id_number=id_number,
            phone=phone,
            email=email,
            password_hash=get_password_hash(password),
            role=Role.ADMIN.value,
            join_date=now.date(),
            created_at=now,
            updated_at=now,
        )

        db.add(member)
        db.commit()

        print(f"🚀 Admin created: {member.id} ({email})")

    finally:
        db.close()


if __name__ == "__main__":
    main()
