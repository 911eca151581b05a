"""

로컬 개발용 DB 초기화 스크립트.

- 모든 테이블을 생성 (이미 있으면 유지)
- 회원 테이블이 비어 있을 때만 데모 데이터를 넣는다
  (관리자 1명 + 회원 2명, 납입금 6건, 공지 2건)

운영 DB 스키마는 alembic 마이그레이션으로 관리하고,
이 스크립트는 로컬 / 데모 환경에서만 사용한다.

사용 방법
- (.venv) ~\backend~$ python -m scripts.init_db

데모 계정:
- thabo@example.com  / admin123  (admin)
- zanele@example.com / member123
- sipho@example.com  / member123

"""

import datetime

from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import func, select
from app.core.security import get_password_hash
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.models import Announcement, Contribution, Member, Role



DEMO_MEMBERS = [
    ("PHSC2601001", "Thabo Mokoena", "8501155123089", "083 123 4567", "thabo@example.com", "admin123", Role.ADMIN,
     "FNB", "62851234890", "250655"),
    ("PHSC2601002", "Zanele Ndlovu", "9203128567089", "082 234 5678", "zanele@example.com", "member123", Role.MEMBER,
     "Standard Bank", "410789234", "051001"),
    ("PHSC2601003", "Sipho Dlamini", "8807122345089", "071 345 6789", "sipho@example.com", "member123", Role.MEMBER,
     "Capitec", "1498765567", "470010"),
]

DEMO_CONTRIBUTIONS = [
    ("PHSC2601001", "January 2026", 500, "Paid", datetime.datetime(2026, 1, 5, tzinfo=datetime.timezone.utc)),
    ("PHSC2601002", "January 2026", 500, "Paid", datetime.datetime(2026, 1, 6, tzinfo=datetime.timezone.utc)),
    ("PHSC2601003", "January 2026", 500, "Pending", None),
    ("PHSC2601001", "December 2025", 500, "Paid", datetime.datetime(2025, 12, 5, tzinfo=datetime.timezone.utc)),
    ("PHSC2601002", "December 2025", 500, "Paid", datetime.datetime(2025, 12, 4, tzinfo=datetime.timezone.utc)),
    ("PHSC2601003", "December 2025", 500, "Paid", datetime.datetime(2025, 12, 3, tzinfo=datetime.timezone.utc)),
]

DEMO_ANNOUNCEMENTS = [
    ("Monthly Meeting - January 2026",
     "Our next meeting is scheduled for Saturday, 18 January 2026 at 10:00 AM at the community hall.",
     datetime.date(2026, 1, 8), "high"),
    ("January Contributions Due",
     "Please ensure your R500 contribution is paid by 15 January 2026.",
     datetime.date(2026, 1, 8), "normal"),
]


def insert_demo_data(db) -> None:
    hashes = {}
    for member_id, name, id_number, phone, email, password, role, bank, account, branch in DEMO_MEMBERS:
        if password not in hashes:
            hashes[password] = get_password_hash(password)
        db.add(
            Member(
                id=member_id,
                name=name,
                id_number=id_number,
                phone=phone,
                email=email,
                password_hash=hashes[password],
                status="Active",
                role=role.value,
                join_date=datetime.date(2026, 1, 1),
                bank_name=bank,
                account_holder=name,
                account_number=account,
                branch_code=branch,
            )
        )
    db.flush()

    for member_id, month, amount, status, paid_at in DEMO_CONTRIBUTIONS:
        db.add(Contribution(member_id=member_id, month=month, amount=amount, status=status, payment_date=paid_at))

    for title, message, day, priority in DEMO_ANNOUNCEMENTS:
        db.add(Announcement(title=title, message=message, announcement_date=day, priority=priority))


def main():
    Base.metadata.create_all(bind=engine)
    print("✅ Tables ready")

    db = SessionLocal()
    try:
        count = db.scalar(select(func.count()).select_from(Member))
        if count:
            print("ℹ️  Database already has data, skipping demo data insertion")
            return

        insert_demo_data(db)
        db.commit()
        print("🚀 Demo data inserted")

    finally:
        db.close()


if __name__ == "__main__":
    main()
