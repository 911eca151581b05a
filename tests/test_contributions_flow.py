"""

납입금 장부 통합 테스트.
- 관리자 등록(Paid → payment_date 기록, Pending → 없음),
  상태 변경 시 payment_date 재계산, 회원은 본인 납입금만 조회,
  일반 회원의 등록 / 상태 변경 금지, 존재하지 않는 대상(404)을 검증한다.

"""

from tests.helpers import auth_header, create_member_in_db, login, setup_admin_and_member, MEMBER_PASSWORD


def _create(client, token, member_id, month="January 2026", amount=500, status="Pending"):
    return client.post(
        "/contributions",
        headers=auth_header(token),
        json={"member_id": member_id, "month": month, "amount": amount, "status": status},
    )


def test_paid_sets_payment_date_and_pending_clears_it(client, db_session):
    ctx = setup_admin_and_member(client, db_session)
    admin_token = ctx["admin_token"]

    paid = _create(client, admin_token, ctx["member_id"], status="Paid")
    assert paid.status_code == 201, paid.text
    assert paid.json()["message"] == "Contribution created successfully"
    paid_row = paid.json()["data"]
    assert paid_row["status"] == "Paid"
    assert paid_row["payment_date"] is not None

    pending = _create(client, admin_token, ctx["member_id"], month="February 2026")
    assert pending.status_code == 201, pending.text
    assert pending.json()["data"]["status"] == "Pending"
    assert pending.json()["data"]["payment_date"] is None

    back = client.put(
        f"/contributions/{paid_row['id']}",
        headers=auth_header(admin_token),
        json={"status": "Pending"},
    )
    assert back.status_code == 200, back.text
    assert back.json()["data"]["status"] == "Pending"
    assert back.json()["data"]["payment_date"] is None

    again = client.put(
        f"/contributions/{paid_row['id']}",
        headers=auth_header(admin_token),
        json={"status": "Paid"},
    )
    assert again.json()["data"]["status"] == "Paid"
    assert again.json()["data"]["payment_date"] is not None


def test_member_sees_only_own_contributions(client, db_session):
    ctx = setup_admin_and_member(client, db_session)
    admin_token = ctx["admin_token"]

    other = create_member_in_db(db_session, member_id="PHSC2601003", name="Sipho Dlamini")
    other_token = login(client, other.email, MEMBER_PASSWORD)

    _create(client, admin_token, ctx["member_id"], month="December 2025", status="Paid")
    _create(client, admin_token, ctx["member_id"], month="January 2026")
    _create(client, admin_token, other.id, month="January 2026", status="Paid")

    mine = client.get("/contributions", headers=auth_header(ctx["member_token"]))
    assert mine.status_code == 200, mine.text
    rows = mine.json()["data"]
    assert mine.json()["meta"]["count"] == 2
    assert {r["member_id"] for r in rows} == {ctx["member_id"]}
    # 최신 id 순
    assert rows[0]["id"] > rows[1]["id"]

    theirs = client.get("/contributions", headers=auth_header(other_token))
    assert [r["member_id"] for r in theirs.json()["data"]] == [other.id]

    everything = client.get("/contributions", headers=auth_header(admin_token))
    assert everything.json()["meta"]["count"] == 3


def test_member_cannot_write_ledger(client, db_session):
    ctx = setup_admin_and_member(client, db_session)

    create = _create(client, ctx["member_token"], ctx["member_id"], status="Paid")
    assert create.status_code == 403
    assert create.json()["detail"] == "Admin access required"

    row = _create(client, ctx["admin_token"], ctx["member_id"]).json()["data"]
    update = client.put(
        f"/contributions/{row['id']}",
        headers=auth_header(ctx["member_token"]),
        json={"status": "Paid"},
    )
    assert update.status_code == 403


def test_unknown_targets_are_404_and_invalid_input_is_422(client, db_session):
    ctx = setup_admin_and_member(client, db_session)
    admin_token = ctx["admin_token"]

    no_member = _create(client, admin_token, "PHSC2601999")
    assert no_member.status_code == 404
    assert no_member.json()["detail"] == "Member not found"

    no_row = client.put("/contributions/99999", headers=auth_header(admin_token), json={"status": "Paid"})
    assert no_row.status_code == 404
    assert no_row.json()["detail"] == "Contribution not found"

    bad_status = _create(client, admin_token, ctx["member_id"], status="Refunded")
    assert bad_status.status_code == 422

    negative = _create(client, admin_token, ctx["member_id"], amount=-1)
    assert negative.status_code == 422
