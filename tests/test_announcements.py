"""

공지사항 테스트.
- 관리자만 등록 / 삭제, 로그인한 누구나 조회,
  등록일은 서버 기준 오늘, 최신순 정렬, 우선순위 기본값(normal),
  존재하지 않는 공지 삭제(404)를 검증한다.

"""

import datetime

from tests.helpers import auth_header, setup_admin_and_member


def test_admin_posts_and_members_read_newest_first(client, db_session):
    ctx = setup_admin_and_member(client, db_session)
    admin_token = ctx["admin_token"]

    first = client.post(
        "/announcements",
        headers=auth_header(admin_token),
        json={"title": "Monthly Meeting", "message": "Saturday 10:00 at the community hall.", "priority": "high"},
    )
    assert first.status_code == 201, first.text
    assert first.json()["data"]["priority"] == "high"
    assert first.json()["data"]["announcement_date"] == datetime.datetime.now(datetime.timezone.utc).date().isoformat()

    second = client.post(
        "/announcements",
        headers=auth_header(admin_token),
        json={"title": "Contributions Due", "message": "Please pay R500 by the 15th."},
    )
    assert second.status_code == 201, second.text
    assert second.json()["data"]["priority"] == "normal"

    listing = client.get("/announcements", headers=auth_header(ctx["member_token"]))
    assert listing.status_code == 200, listing.text
    assert listing.json()["meta"]["count"] == 2
    assert [a["title"] for a in listing.json()["data"]] == ["Contributions Due", "Monthly Meeting"]


def test_member_cannot_post_or_delete(client, db_session):
    ctx = setup_admin_and_member(client, db_session)

    post = client.post(
        "/announcements",
        headers=auth_header(ctx["member_token"]),
        json={"title": "Hi", "message": "Not allowed"},
    )
    assert post.status_code == 403

    created = client.post(
        "/announcements",
        headers=auth_header(ctx["admin_token"]),
        json={"title": "Keep", "message": "Stays"},
    ).json()["data"]

    delete = client.delete(f"/announcements/{created['id']}", headers=auth_header(ctx["member_token"]))
    assert delete.status_code == 403


def test_delete_announcement(client, db_session):
    ctx = setup_admin_and_member(client, db_session)
    admin_token = ctx["admin_token"]

    created = client.post(
        "/announcements",
        headers=auth_header(admin_token),
        json={"title": "Temporary", "message": "Delete me"},
    ).json()["data"]

    res = client.delete(f"/announcements/{created['id']}", headers=auth_header(admin_token))
    assert res.status_code == 200, res.text
    assert res.json()["message"] == "Announcement deleted successfully"

    assert client.get("/announcements", headers=auth_header(admin_token)).json()["data"] == []

    missing = client.delete(f"/announcements/{created['id']}", headers=auth_header(admin_token))
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Announcement not found"

    bad_priority = client.post(
        "/announcements",
        headers=auth_header(admin_token),
        json={"title": "x", "message": "y", "priority": "urgent"},
    )
    assert bad_priority.status_code == 422
