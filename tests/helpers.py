# tests/helpers.py
import uuid
from sqlalchemy.orm import Session

from app.db.base import utcnow
from app.models.member import Member, Role
from app.core.security import get_password_hash
from app.schemas.auth import Principal

ADMIN_PASSWORD = "AdminPassw0rd!"
MEMBER_PASSWORD = "MemberPassw0rd!"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_member_in_db(
    db: Session,
    *,
    member_id: str,
    email: str | None = None,
    password: str = MEMBER_PASSWORD,
    role: Role = Role.MEMBER,
    name: str = "Test Member",
) -> Member:
    now = utcnow()
    member = Member(
        id=member_id,
        name=name,
        id_number="9001015009087",
        phone="082 000 0000",
        email=email or f"{member_id.lower()}_{uuid.uuid4().hex[:6]}@test.com",
        password_hash=get_password_hash(password),
        status="Active",
        role=role.value,
        join_date=now.date(),
        created_at=now,
        updated_at=now,
    )
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


def create_admin_in_db(db: Session, *, member_id: str = "PHSC2601001", email: str | None = None) -> Member:
    return create_member_in_db(
        db,
        member_id=member_id,
        email=email,
        password=ADMIN_PASSWORD,
        role=Role.ADMIN,
        name="ADMIN",
    )


def login(client, email: str, password: str) -> str:
    res = client.post("/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()["data"]["access_token"]


def principal_for(member: Member) -> Principal:
    return Principal(id=member.id, email=member.email, role=member.role, name=member.name)


def setup_admin_and_member(client, db: Session):
    """
    ADMIN 토큰 + 일반 MEMBER(member_id, token) 세팅
    """
    admin = create_admin_in_db(db)
    member = create_member_in_db(db, member_id="PHSC2601002", name="Zanele Ndlovu")

    admin_token = login(client, admin.email, ADMIN_PASSWORD)
    member_token = login(client, member.email, MEMBER_PASSWORD)

    return {
        "admin_id": admin.id,
        "admin_email": admin.email,
        "admin_token": admin_token,
        "member_id": member.id,
        "member_email": member.email,
        "member_token": member_token,
    }
