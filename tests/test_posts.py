from datetime import datetime, timedelta

import pytest
from fastapi import HTTPException
from sqlalchemy import select, func

from community.core.config import settings
from community.models.post import Post
from community.models.user import User
from community.services import post_service


def _post_count(db):
    return db.scalar(select(func.count(Post.id)))


class TestSubmit:
    def test_submit_creates_post_with_author_snapshot(self, client, db, login):
        headers = login("alice")

        resp = client.post(
            "/api/submit",
            headers=headers,
            json={
                "title": "修路通知",
                "description": "村口小路周末修整",
                "department": "生活",
                "images": ["/uploads/a.png", "/uploads/b.png"],
            },
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        row = db.execute(
            select(Post.user_name, Post.user_avatar, Post.images).where(Post.id == body["postId"])
        ).one()
        assert row.user_name == "alice"
        assert "alice" in row.user_avatar
        assert row.images == '["/uploads/a.png", "/uploads/b.png"]'

    def test_submit_requires_token(self, client, db):
        before = _post_count(db)

        resp = client.post("/api/submit", json={"title": "t", "department": "生活"})

        assert resp.status_code == 401
        assert _post_count(db) == before

    def test_villager_cannot_post_to_reserved_department(self, client, db, login):
        headers = login("alice")
        before = _post_count(db)

        resp = client.post(
            "/api/submit", headers=headers, json={"title": "t", "department": "村务公开"}
        )

        assert resp.status_code == 403
        assert resp.json()["success"] is False
        assert _post_count(db) == before

    def test_admin_can_post_to_reserved_department(self, client, db, admin_headers):
        resp = client.post(
            "/api/submit", headers=admin_headers, json={"title": "公告", "department": "村务公开"}
        )

        assert resp.status_code == 200
        assert _post_count(db) == 1

    def test_missing_title_is_client_error(self, client, login):
        headers = login("alice")

        resp = client.post("/api/submit", headers=headers, json={"department": "生活"})

        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_snapshot_survives_avatar_change(self, client, db, login):
        headers = login("alice")
        post_id = client.post(
            "/api/submit", headers=headers, json={"title": "t", "department": "生活"}
        ).json()["postId"]
        original = db.scalar(select(Post.user_avatar).where(Post.id == post_id))

        db.query(User).filter(User.username == "alice").update({"avatar": "/new.png"})
        db.commit()

        detail = client.get(f"/api/post/{post_id}").json()
        assert detail["user_avatar"] == original


class TestFeed:
    def test_filter_by_department_is_exact(self, client, make_post):
        make_post(title="a", department="生活")
        make_post(title="b", department="生活服务")
        make_post(title="c", department="农业")

        feed = client.get("/api/feed", params={"tag": "生活"}).json()

        assert [p["title"] for p in feed] == ["a"]
        assert all(p["department"] == "生活" for p in feed)

    def test_all_tag_and_no_tag_return_everything(self, client, make_post):
        for dept in ("生活", "农业", "村务公开"):
            make_post(department=dept)

        assert len(client.get("/api/feed").json()) == 3
        assert len(client.get("/api/feed", params={"tag": "全部"}).json()) == 3

    def test_pinned_department_first_then_time_desc(self, client, make_post):
        now = datetime.now()
        make_post(title="old-notice", department="村务公开", created_at=now - timedelta(days=3))
        make_post(title="new-life", department="生活", created_at=now)
        make_post(title="mid-farm", department="农业", created_at=now - timedelta(days=1))
        make_post(title="new-notice", department="村务公开", created_at=now - timedelta(days=2))

        feed = client.get("/api/feed").json()

        assert [p["title"] for p in feed] == ["new-notice", "old-notice", "new-life", "mid-farm"]

    def test_empty_pinned_department_disables_pinning(self, client, make_post, monkeypatch):
        monkeypatch.setattr(settings, "PINNED_DEPARTMENT", "")
        now = datetime.now()
        make_post(title="old-notice", department="村务公开", created_at=now - timedelta(days=1))
        make_post(title="new", department="生活", created_at=now)

        feed = client.get("/api/feed").json()

        assert [p["title"] for p in feed] == ["new", "old-notice"]

    def test_search_matches_title_description_or_author(self, client, make_post):
        make_post(title="Tea Harvest", description="", user_name="bob")
        make_post(title="x", description="采茶节开始啦", user_name="bob")
        make_post(title="y", description="", user_name="TEAmaster")
        make_post(title="z", description="nothing", user_name="carol")

        by_case = client.get("/api/feed", params={"search": "tea"}).json()
        by_chinese = client.get("/api/feed", params={"search": "采茶"}).json()

        assert sorted(p["title"] for p in by_case) == ["Tea Harvest", "y"]
        assert [p["title"] for p in by_chinese] == ["x"]

    def test_search_treats_wildcards_literally(self, client, make_post):
        make_post(title="100% 纯茶")
        make_post(title="普通帖子")

        feed = client.get("/api/feed", params={"search": "%"}).json()

        assert [p["title"] for p in feed] == ["100% 纯茶"]

    def test_filter_by_user(self, client, make_post):
        make_post(title="mine", user_id=7)
        make_post(title="other", user_id=8)

        feed = client.get("/api/feed", params={"user_id": 7}).json()

        assert [p["title"] for p in feed] == ["mine"]

    def test_images_are_deserialized(self, client, make_post):
        make_post(images='["/uploads/1.png"]')
        make_post(images="not json")

        images = [p["images"] for p in client.get("/api/feed").json()]

        assert sorted(images, key=len) == [[], ["/uploads/1.png"]]


class TestPostDetail:
    def test_each_read_increments_views(self, client, db, make_post):
        post = make_post()

        first = client.get(f"/api/post/{post.id}").json()
        second = client.get(f"/api/post/{post.id}").json()

        assert first["views"] == 1
        assert second["views"] == 2
        assert db.scalar(select(Post.views).where(Post.id == post.id)) == 2

    def test_comments_embedded_newest_first(self, client, make_post, login):
        post = make_post()
        headers = login("alice")
        for text in ("一楼", "二楼", "三楼"):
            client.post(f"/api/post/{post.id}/comment", headers=headers, json={"content": text})

        detail = client.get(f"/api/post/{post.id}").json()

        assert [c["content"] for c in detail["comments"]] == ["三楼", "二楼", "一楼"]
        assert detail["comments_count"] == 3

    def test_unknown_post_is_not_found(self, client):
        resp = client.get("/api/post/999")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": "帖子不存在"}

    def test_post_deleted_after_view_update_is_not_found(self, db, make_post, monkeypatch):
        post = make_post()
        monkeypatch.setattr(db, "get", lambda *args, **kwargs: None)

        with pytest.raises(HTTPException) as exc:
            post_service.get_post_detail(db, post.id)

        assert exc.value.status_code == 404


class TestLike:
    def test_like_and_unlike(self, client, make_post):
        post = make_post()

        assert client.post(f"/api/post/{post.id}/like", json={"isLiked": True}).json()["likes"] == 1
        assert client.post(f"/api/post/{post.id}/like", json={"isLiked": True}).json()["likes"] == 2
        assert client.post(f"/api/post/{post.id}/like", json={"isLiked": False}).json()["likes"] == 1

    def test_unlike_never_goes_negative(self, client, make_post):
        post = make_post()

        resp = client.post(f"/api/post/{post.id}/like", json={"isLiked": False})

        assert resp.json() == {"success": True, "likes": 0}

    def test_like_unknown_post(self, client):
        resp = client.post("/api/post/999/like", json={"isLiked": True})
        assert resp.status_code == 404

    def test_post_deleted_after_like_update_is_not_found(self, db, make_post, monkeypatch):
        post = make_post()
        monkeypatch.setattr(db, "scalar", lambda *args, **kwargs: None)

        with pytest.raises(HTTPException) as exc:
            post_service.toggle_like(db, post.id, True)

        assert exc.value.status_code == 404

    def test_like_requires_flag(self, client, make_post):
        post = make_post()
        resp = client.post(f"/api/post/{post.id}/like", json={})
        assert resp.status_code == 400
