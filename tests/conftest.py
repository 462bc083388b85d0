import pytest
import requests
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from sradha_notes import config
from sradha_notes.database import get_db
from sradha_notes.errors import UpstreamError
from sradha_notes.media import get_media
from sradha_notes.server import app

PNG_DATA_URI = "data:image/png;base64,iVBORw0KGgo="


class FakeMediaHost:
    """In-memory stand-in for the Cloudinary host."""

    def __init__(self):
        self.folder = "test-media"
        self.uploads = []
        self.deleted = []
        self.fail_uploads = False
        self.fail_deletes = False

    def _store(self, folder):
        if self.fail_uploads:
            raise UpstreamError("Failed to upload image 😿", detail="media host down")
        external_id = f"{folder or self.folder}/img{len(self.uploads) + 1}"
        image = {"url": f"https://media.test/{external_id}.png", "externalId": external_id}
        self.uploads.append(image)
        return image

    async def upload_raw(self, data, folder=None):
        return self._store(folder)

    async def upload_data_uri(self, data_uri, folder=None):
        return self._store(folder)

    async def delete(self, external_id):
        if self.fail_deletes:
            raise UpstreamError("Failed to delete image 😿", detail="media host down")
        self.deleted.append(external_id)
        return {"result": "ok"}


class FlakySession:
    """Routes client requests to the in-process app until switched off."""

    def __init__(self, app_client):
        self.app_client = app_client
        self.down = False

    def request(self, method, url, **kwargs):
        if self.down:
            raise requests.ConnectionError("server unreachable")
        return self.app_client.request(method, url, **kwargs)


@pytest.fixture
def db():
    return AsyncMongoMockClient()["sradha_notes_test"]


@pytest.fixture
def media():
    return FakeMediaHost()


@pytest.fixture
def anonymous(db, media, monkeypatch):
    """A client with no token; the lifespan (real MongoDB indexes) is not run."""
    monkeypatch.setattr(config, "AUTH_REQUIRED", True)
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_media] = lambda: media
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(anonymous):
    response = anonymous.post("/api/auth/login", json={"username": "sradha", "password": "iloveyou"})
    token = response.json()["data"]["token"]
    anonymous.headers["Authorization"] = f"Bearer {token}"
    return anonymous
