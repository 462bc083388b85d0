"""
HTTP client for the Sradha's Notes API, grouped by entity
"""
import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000/api"


class ApiError(Exception):
    """The server answered, but with success=false or a non-2xx status."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")

    @property
    def retryable(self) -> bool:
        """Session or server trouble; the same request may succeed later."""
        return self.status in (401, 403) or self.status >= 500


class NetworkError(Exception):
    """The server could not be reached."""


class ApiClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, session=None,
                 token: Optional[str] = None, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.token = token
        self.timeout = timeout

        self.auth = AuthApi(self)
        self.notes = NotesApi(self, "/notes")
        self.moods = MoodsApi(self, "/moods")
        self.letters = LettersApi(self, "/letters")
        self.memories = MemoriesApi(self, "/memories")
        self.todos = TodosApi(self, "/todos")
        self.events = EventsApi(self, "/events")
        self.study = StudyApi(self)
        self.upload = UploadApi(self)

    def call(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        """Send one request and return the decoded envelope"""
        headers = {}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        try:
            response = self.session.request(
                method, f"{self.base_url}{endpoint}", headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.warning(f"{method} {endpoint} unreachable: {e}")
            raise NetworkError(str(e)) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code >= 400 or not body.get("success", False):
            raise ApiError(response.status_code, body.get("message") or "Something went wrong 😿")
        return body


class Resource:
    """The CRUD routes every entity shares."""
    update_method = "PUT"

    def __init__(self, client: ApiClient, path: str):
        self.client = client
        self.path = path

    def list(self, **params) -> Dict[str, Any]:
        return self.client.call("GET", self.path, params=params or None)

    def get(self, record_id: str) -> Dict[str, Any]:
        return self.client.call("GET", f"{self.path}/{record_id}")

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.call("POST", self.path, json=data)

    def update(self, record_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.call(self.update_method, f"{self.path}/{record_id}", json=data)

    def delete(self, record_id: str) -> Dict[str, Any]:
        return self.client.call("DELETE", f"{self.path}/{record_id}")


class AuthApi:
    def __init__(self, client: ApiClient):
        self.client = client

    def login(self, username: str, password: str) -> Dict[str, Any]:
        body = self.client.call("POST", "/auth/login", json={"username": username, "password": password})
        self.client.token = body["data"]["token"]
        return body

    def verify(self) -> Dict[str, Any]:
        return self.client.call("GET", "/auth/verify")

    def logout(self) -> Dict[str, Any]:
        try:
            return self.client.call("POST", "/auth/logout")
        finally:
            self.client.token = None


class NotesApi(Resource):
    def toggle_love(self, note_id: str) -> Dict[str, Any]:
        return self.client.call("PATCH", f"{self.path}/{note_id}/love")

    def toggle_pin(self, note_id: str) -> Dict[str, Any]:
        return self.client.call("PATCH", f"{self.path}/{note_id}/pin")

    def toggle_archive(self, note_id: str) -> Dict[str, Any]:
        return self.client.call("PATCH", f"{self.path}/{note_id}/archive")

    def duplicate(self, note_id: str) -> Dict[str, Any]:
        return self.client.call("POST", f"{self.path}/{note_id}/duplicate")


class MoodsApi(Resource):
    def stats(self) -> Dict[str, Any]:
        return self.client.call("GET", f"{self.path}/stats")


class LettersApi(Resource):
    def mark_as_read(self, letter_id: str) -> Dict[str, Any]:
        return self.client.call("PATCH", f"{self.path}/{letter_id}/read")

    def add_heart(self, letter_id: str) -> Dict[str, Any]:
        return self.client.call("PATCH", f"{self.path}/{letter_id}/heart")


class MemoriesApi(Resource):
    def add_heart(self, memory_id: str) -> Dict[str, Any]:
        return self.client.call("PATCH", f"{self.path}/{memory_id}/heart")


class TodosApi(Resource):
    def toggle(self, todo_id: str) -> Dict[str, Any]:
        return self.client.call("PATCH", f"{self.path}/{todo_id}/toggle")

    def clear_completed(self) -> Dict[str, Any]:
        return self.client.call("DELETE", f"{self.path}/completed/clear")


class EventsApi(Resource):
    def for_date(self, day: str) -> Dict[str, Any]:
        return self.client.call("GET", f"{self.path}/date/{day}")


class PdfsApi(Resource):
    update_method = "PATCH"

    def toggle_favorite(self, pdf_id: str) -> Dict[str, Any]:
        return self.client.call("PATCH", f"{self.path}/{pdf_id}/favorite")


class StudyApi:
    def __init__(self, client: ApiClient):
        self.sections = Resource(client, "/study/sections")
        self.pdfs = PdfsApi(client, "/study/pdfs")


class UploadApi:
    def __init__(self, client: ApiClient):
        self.client = client

    def image(self, data: bytes, filename: str = "image.png", folder: Optional[str] = None) -> Dict[str, Any]:
        form = {"folder": folder} if folder else None
        return self.client.call("POST", "/upload/image", files={"image": (filename, data)}, data=form)

    def base64(self, image: str, folder: Optional[str] = None) -> Dict[str, Any]:
        return self.client.call("POST", "/upload/base64", json={"image": image, "folder": folder})

    def multiple(self, images: List[str], folder: Optional[str] = None) -> Dict[str, Any]:
        return self.client.call("POST", "/upload/multiple", json={"images": images, "folder": folder})

    def delete(self, external_id: str) -> Dict[str, Any]:
        return self.client.call("DELETE", f"/upload/{external_id}")
