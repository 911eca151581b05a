"""

관리자 활동 로그 테스트.
- 회원 생성 / 납입금 상태 변경 / 공지 삭제가 로그로 남는지,
  최신순 정렬과 행위자 정보, 일반 회원 접근 금지를 검증한다.

"""

from tests.helpers import auth_header, setup_admin_and_member


def test_admin_actions_are_logged_newest_first(client, db_session):
    ctx = setup_admin_and_member(client, db_session)
    admin_token = ctx["admin_token"]

    created = client.post(
        "/members",
        headers=auth_header(admin_token),
        json={"name": "Logged Member", "id_number": "9001015009087", "email": "logged@test.com"},
    )
    assert created.status_code == 201, created.text

    row = client.post(
        "/contributions",
        headers=auth_header(admin_token),
        json={"member_id": ctx["member_id"], "month": "January 2026", "amount": 500},
    ).json()["data"]

    client.put(f"/contributions/{row['id']}", headers=auth_header(admin_token), json={"status": "Paid"})

    res = client.get("/admin/logs", headers=auth_header(admin_token))
    assert res.status_code == 200, res.text

    logs = res.json()["data"]
    assert [log["action"] for log in logs] == [
        "SET_CONTRIBUTION_STATUS",
        "CREATE_CONTRIBUTION",
        "CREATE_MEMBER",
    ]
    assert logs[0]["detail"] == "Pending -> Paid"
    assert logs[0]["target_id"] == str(row["id"])
    assert logs[2]["target_id"] == "PHSC2601003"
    assert logs[2]["actor"]["id"] == ctx["admin_id"]
    assert res.json()["meta"] == {"limit": 50, "count": 3}

    limited = client.get("/admin/logs?limit=1", headers=auth_header(admin_token))
    assert limited.json()["meta"]["count"] == 1


def test_member_cannot_read_logs(client, db_session):
    ctx = setup_admin_and_member(client, db_session)

    res = client.get("/admin/logs", headers=auth_header(ctx["member_token"]))
    assert res.status_code == 403
