import logging
import os

from blogapi.db.models.comment import Comment
from blogapi.db.models.post import Post

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
MISSING_ID = "0d3c6a4e-8f1e-4c55-9d1c-1f2b3c4d5e6f"


def _post_form(**overrides):
    data = {"title": "Trip to the coast", "description": "A long enough description", "category": "travel"}
    data.update(overrides)
    return data


def test_create_post(client, gateway, make_user):
    alice = make_user("alice")
    r = client.post(
        "/api/posts",
        headers=alice.headers,
        data=_post_form(),
        files={"image": ("photo.png", PNG_BYTES, "image/png")},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["title"] == "Trip to the coast"
    assert body["user"]["id"] == alice.id
    assert body["user"]["username"] == "alice"
    assert body["likes"] == []
    assert body["image"]["public_id"] == "post_images/asset-1"
    assert body["image"]["url"].endswith("post_images/asset-1.png")
    assert "password" not in body["user"]


def test_staged_file_exists_during_upload_and_is_removed_after(client, gateway, make_user, make_post):
    alice = make_user("alice")
    make_post(alice)
    upload = gateway.uploads[0]
    assert upload["existed"] is True
    assert not os.path.exists(upload["path"])


def test_create_post_requires_an_image(client, gateway, make_user):
    alice = make_user("alice")
    r = client.post("/api/posts", headers=alice.headers, data=_post_form())
    assert r.status_code == 400
    assert r.json() == {"message": "no image provided"}
    assert gateway.uploads == []


def test_create_post_rejects_non_images(client, gateway, make_user):
    alice = make_user("alice")
    r = client.post(
        "/api/posts",
        headers=alice.headers,
        data=_post_form(),
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid image format"}
    assert gateway.uploads == []


def test_create_post_validates_fields_before_uploading(client, gateway, make_user):
    alice = make_user("alice")
    r = client.post(
        "/api/posts",
        headers=alice.headers,
        data=_post_form(description="too short"),
        files={"image": ("photo.png", PNG_BYTES, "image/png")},
    )
    assert r.status_code == 400
    assert "description" in r.json()["message"]

    r = client.post(
        "/api/posts",
        headers=alice.headers,
        data={"title": "Trip", "description": "A long enough description"},
        files={"image": ("photo.png", PNG_BYTES, "image/png")},
    )
    assert r.status_code == 400
    assert "category" in r.json()["message"]
    assert gateway.uploads == []


def test_create_post_surfaces_upload_failure(client, gateway, db, make_user):
    alice = make_user("alice")
    gateway.fail_upload = True
    r = client.post(
        "/api/posts",
        headers=alice.headers,
        data=_post_form(),
        files={"image": ("photo.png", PNG_BYTES, "image/png")},
    )
    assert r.status_code == 500
    assert r.json() == {"message": "image upload failed"}
    assert db.query(Post).count() == 0
    assert not os.path.exists(gateway.uploads[0]["path"])


def test_create_post_requires_authentication(client):
    r = client.post(
        "/api/posts",
        data=_post_form(),
        files={"image": ("photo.png", PNG_BYTES, "image/png")},
    )
    assert r.status_code == 401


def test_list_posts_newest_first_with_pagination(client, make_user, make_post):
    alice = make_user("alice")
    titles = [make_post(alice, title=f"Post {i}")["title"] for i in range(4)]

    r = client.get("/api/posts")
    assert r.status_code == 200
    assert [p["title"] for p in r.json()] == list(reversed(titles))

    first = client.get("/api/posts", params={"page_number": 1}).json()
    second = client.get("/api/posts", params={"page_number": 2}).json()
    assert [p["title"] for p in first] == ["Post 3", "Post 2", "Post 1"]
    assert [p["title"] for p in second] == ["Post 0"]

    r = client.get("/api/posts", params={"page_number": 0})
    assert r.status_code == 400


def test_list_posts_by_category(client, make_user, make_post):
    alice = make_user("alice")
    make_post(alice, category="travel")
    make_post(alice, category="food")
    make_post(alice, category="food")

    r = client.get("/api/posts", params={"category": "food"})
    assert r.status_code == 200
    assert {p["category"] for p in r.json()} == {"food"}
    assert len(r.json()) == 2


def test_count_posts(client, make_user, make_post):
    assert client.get("/api/posts/count").json() == 0
    alice = make_user("alice")
    make_post(alice)
    make_post(alice)
    assert client.get("/api/posts/count").json() == 2


def test_get_single_post_with_comments(client, make_user, make_post, make_comment):
    alice = make_user("alice")
    bob = make_user("bob")
    post = make_post(alice)
    make_comment(bob, post["id"], text="Lovely")

    r = client.get(f"/api/posts/{post['id']}")
    assert r.status_code == 200
    body = r.json()
    assert body["user"]["username"] == "alice"
    assert [(c["username"], c["text"]) for c in body["comments"]] == [("bob", "Lovely")]


def test_get_post_not_found_and_invalid_id(client):
    r = client.get(f"/api/posts/{MISSING_ID}")
    assert r.status_code == 404
    assert r.json() == {"message": "post not found"}

    r = client.get("/api/posts/not-an-id")
    assert r.status_code == 400
    assert r.json() == {"message": "invalid id"}


def test_missing_post_is_logged_with_its_id(client, caplog):
    caplog.set_level(logging.INFO, logger="blogapi.core.errors")
    r = client.get(f"/api/posts/{MISSING_ID}")
    assert r.status_code == 404
    assert f"post {MISSING_ID} not found" in caplog.text


def test_owner_updates_post_partially(client, make_user, make_post):
    alice = make_user("alice")
    post = make_post(alice, category="travel")

    r = client.put(f"/api/posts/{post['id']}", headers=alice.headers, json={"title": "New title"})
    assert r.status_code == 200
    assert r.json()["title"] == "New title"
    assert r.json()["category"] == "travel"


def test_non_owner_cannot_update_post(client, db, make_user, make_post):
    alice = make_user("alice")
    bob = make_user("bob")
    post = make_post(alice, title="Original")

    r = client.put(f"/api/posts/{post['id']}", headers=bob.headers, json={"title": "Hijacked"})
    assert r.status_code == 403
    assert r.json() == {"message": "access denied, forbidden"}
    assert db.query(Post).filter(Post.id == post["id"]).one().title == "Original"


def test_admin_cannot_update_someone_elses_post(client, make_user, make_admin, make_post):
    alice = make_user("alice")
    admin = make_admin()
    post = make_post(alice)

    r = client.put(f"/api/posts/{post['id']}", headers=admin.headers, json={"title": "Edited"})
    assert r.status_code == 403


def test_update_post_validates_fields(client, make_user, make_post):
    alice = make_user("alice")
    post = make_post(alice)
    r = client.put(f"/api/posts/{post['id']}", headers=alice.headers, json={"title": "x"})
    assert r.status_code == 400
    assert "title" in r.json()["message"]


def test_delete_post_removes_comments_and_image(client, gateway, db, make_user, make_post, make_comment):
    alice = make_user("alice")
    bob = make_user("bob")
    post = make_post(alice)
    other = make_post(alice)
    for i in range(3):
        make_comment(bob, post["id"], text=f"comment {i}")
    make_comment(bob, other["id"])
    client.put(f"/api/posts/like/{post['id']}", headers=bob.headers)

    r = client.delete(f"/api/posts/{post['id']}", headers=alice.headers)
    assert r.status_code == 200
    assert r.json() == {"message": "post has been deleted successfully", "post_id": post["id"]}

    assert db.query(Post).filter(Post.id == post["id"]).count() == 0
    assert db.query(Comment).filter(Comment.post_id == post["id"]).count() == 0
    assert db.query(Comment).filter(Comment.post_id == other["id"]).count() == 1
    assert gateway.removed == [post["image"]["public_id"]]


def test_admin_can_delete_any_post(client, db, make_user, make_admin, make_post):
    alice = make_user("alice")
    admin = make_admin()
    post = make_post(alice)

    r = client.delete(f"/api/posts/{post['id']}", headers=admin.headers)
    assert r.status_code == 200
    assert db.query(Post).count() == 0


def test_non_owner_cannot_delete_post(client, gateway, db, make_user, make_post):
    alice = make_user("alice")
    bob = make_user("bob")
    post = make_post(alice)

    r = client.delete(f"/api/posts/{post['id']}", headers=bob.headers)
    assert r.status_code == 403
    assert db.query(Post).count() == 1
    assert gateway.removed == []


def test_delete_post_succeeds_when_image_removal_fails(client, gateway, db, make_user, make_post, make_comment):
    alice = make_user("alice")
    post = make_post(alice)
    make_comment(alice, post["id"])
    gateway.fail_remove = True

    r = client.delete(f"/api/posts/{post['id']}", headers=alice.headers)
    assert r.status_code == 200
    assert gateway.removed == [post["image"]["public_id"]]
    assert db.query(Post).count() == 0
    assert db.query(Comment).count() == 0


def test_delete_missing_post(client, make_user):
    alice = make_user("alice")
    r = client.delete(f"/api/posts/{MISSING_ID}", headers=alice.headers)
    assert r.status_code == 404


def test_owner_replaces_post_image(client, gateway, make_user, make_post):
    alice = make_user("alice")
    post = make_post(alice)
    old_public_id = post["image"]["public_id"]

    r = client.put(
        f"/api/posts/update-image/{post['id']}",
        headers=alice.headers,
        files={"image": ("new.png", PNG_BYTES, "image/png")},
    )
    assert r.status_code == 200
    assert r.json()["image"]["public_id"] == "post_images/asset-2"
    assert gateway.removed == [old_public_id]


def test_failed_image_replacement_keeps_the_old_image(client, gateway, db, make_user, make_post):
    alice = make_user("alice")
    post = make_post(alice)
    gateway.fail_upload = True

    r = client.put(
        f"/api/posts/update-image/{post['id']}",
        headers=alice.headers,
        files={"image": ("new.png", PNG_BYTES, "image/png")},
    )
    assert r.status_code == 500
    assert gateway.removed == []
    stored = db.query(Post).filter(Post.id == post["id"]).one()
    assert stored.image_public_id == post["image"]["public_id"]


def test_replace_image_succeeds_when_old_image_removal_fails(client, gateway, make_user, make_post):
    alice = make_user("alice")
    post = make_post(alice)
    gateway.fail_remove = True

    r = client.put(
        f"/api/posts/update-image/{post['id']}",
        headers=alice.headers,
        files={"image": ("new.png", PNG_BYTES, "image/png")},
    )
    assert r.status_code == 200
    assert r.json()["image"]["public_id"] == "post_images/asset-2"


def test_only_owner_replaces_post_image(client, gateway, make_user, make_admin, make_post):
    alice = make_user("alice")
    admin = make_admin()
    post = make_post(alice)

    r = client.put(
        f"/api/posts/update-image/{post['id']}",
        headers=admin.headers,
        files={"image": ("new.png", PNG_BYTES, "image/png")},
    )
    assert r.status_code == 403
    assert len(gateway.uploads) == 1


def test_replace_image_requires_a_file(client, make_user, make_post):
    alice = make_user("alice")
    post = make_post(alice)
    r = client.put(f"/api/posts/update-image/{post['id']}", headers=alice.headers)
    assert r.status_code == 400
    assert r.json() == {"message": "no image provided"}


def test_toggle_like_twice_restores_like_set(client, make_user, make_post):
    alice = make_user("alice")
    bob = make_user("bob")
    post = make_post(alice)

    r = client.put(f"/api/posts/like/{post['id']}", headers=bob.headers)
    assert r.status_code == 200
    assert r.json()["likes"] == [bob.id]

    r = client.put(f"/api/posts/like/{post['id']}", headers=bob.headers)
    assert r.status_code == 200
    assert r.json()["likes"] == []


def test_likes_from_several_users(client, make_user, make_post):
    alice = make_user("alice")
    bob = make_user("bob")
    post = make_post(alice)

    client.put(f"/api/posts/like/{post['id']}", headers=alice.headers)
    r = client.put(f"/api/posts/like/{post['id']}", headers=bob.headers)
    assert sorted(r.json()["likes"]) == sorted([alice.id, bob.id])

    r = client.put(f"/api/posts/like/{post['id']}", headers=alice.headers)
    assert r.json()["likes"] == [bob.id]


def test_toggle_like_on_missing_post(client, make_user):
    alice = make_user("alice")
    r = client.put(f"/api/posts/like/{MISSING_ID}", headers=alice.headers)
    assert r.status_code == 404
