"""
Shared fixtures for the blog API tests.

Each test gets a fresh app on an in-memory SQLite store and a fake image
gateway that records every call and can be told to fail.
"""
import os
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from blogapi.application import create_app
from blogapi.core.config import Settings
from blogapi.core.errors import AssetGatewayError
from blogapi.db.models.image import ImageRef
from blogapi.db.models.user import User

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
PASSWORD = "password123"


class FakeAssetGateway:
    def __init__(self):
        self.uploads = []
        self.removed = []
        self.removed_many = []
        self.fail_upload = False
        self.fail_remove = False
        self._counter = 0

    def upload(self, path, folder):
        self.uploads.append({"path": path, "folder": folder, "existed": os.path.exists(path)})
        if self.fail_upload:
            raise AssetGatewayError("gateway unreachable")
        self._counter += 1
        public_id = f"{folder}/asset-{self._counter}"
        return ImageRef(url=f"https://images.test/{public_id}.png", public_id=public_id)

    def remove(self, public_id):
        self.removed.append(public_id)
        if self.fail_remove:
            raise AssetGatewayError("gateway unreachable")

    def remove_many(self, public_ids):
        self.removed_many.append(list(public_ids))
        if self.fail_remove:
            raise AssetGatewayError("gateway unreachable")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url="sqlite://",
        jwt_secret="test-secret",
        asset_backoff_base=0,
        upload_dir=str(tmp_path / "uploads"),
        log_level="WARNING",
    )


@pytest.fixture
def gateway():
    return FakeAssetGateway()


@pytest.fixture
def app(settings, gateway):
    return create_app(settings, asset_gateway=gateway)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(app, client):
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(client):
    counter = {"n": 0}

    def _make_user(username=None, password=PASSWORD):
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        email = f"{username}@example.com"
        r = client.post(
            "/api/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        assert r.status_code == 201, r.text
        r = client.post("/api/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        body = r.json()
        return SimpleNamespace(
            id=body["id"],
            username=username,
            email=email,
            token=body["token"],
            headers={"Authorization": f"Bearer {body['token']}"},
        )

    return _make_user


@pytest.fixture
def make_admin(app, make_user):
    def _make_admin(username="admin"):
        account = make_user(username)
        session = app.state.session_factory()
        try:
            session.query(User).filter(User.id == account.id).update({"is_admin": True})
            session.commit()
        finally:
            session.close()
        return account

    return _make_admin


@pytest.fixture
def make_post(client):
    counter = {"n": 0}

    def _make_post(owner, title=None, category="travel", description="A long enough description"):
        counter["n"] += 1
        r = client.post(
            "/api/posts",
            headers=owner.headers,
            data={
                "title": title or f"Post {counter['n']}",
                "description": description,
                "category": category,
            },
            files={"image": ("photo.png", PNG_BYTES, "image/png")},
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _make_post


@pytest.fixture
def make_comment(client):
    def _make_comment(author, post_id, text="Nice post"):
        r = client.post(
            "/api/comments",
            headers=author.headers,
            json={"post_id": post_id, "text": text},
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _make_comment
