"""
Root application state: persisted preferences, the API client and the synced collections
"""
import logging
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from .api import ApiClient, NetworkError
from .mirror import LocalMirror, SyncedCollection, SyncPolicy

logger = logging.getLogger(__name__)

THEMES = ("rose", "lavender", "ocean", "sunset")


class Preferences(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    theme: str = "rose"
    sidebar_collapsed: bool = False
    welcomed: bool = False
    is_logged_in: bool = False
    token: Optional[str] = None

    @classmethod
    def load(cls, path: Path) -> "Preferences":
        path = Path(path)
        if not path.exists():
            return cls()
        try:
            return cls.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(f"Preferences at {path} unreadable, using defaults: {e}")
            return cls()

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(by_alias=True, indent=2), encoding="utf-8")


class AppState:
    """Everything the client keeps between runs lives under ``data_dir``."""
    COLLECTIONS = ("notes", "moods", "letters", "memories", "todos", "events")

    def __init__(self, api: ApiClient, data_dir: Path, policy: SyncPolicy = SyncPolicy.QUEUE):
        self.api = api
        self.data_dir = Path(data_dir)
        self.preferences_path = self.data_dir / "preferences.json"
        self.preferences = Preferences.load(self.preferences_path)
        if self.preferences.token:
            self.api.token = self.preferences.token
        self.mirror = LocalMirror(self.data_dir / "mirror")
        self.collections: Dict[str, SyncedCollection] = {
            name: SyncedCollection(name, getattr(api, name), self.mirror, policy)
            for name in self.COLLECTIONS
        }
        self.collections["sections"] = SyncedCollection("sections", api.study.sections, self.mirror, policy)

    def __getitem__(self, name: str) -> SyncedCollection:
        return self.collections[name]

    def save_preferences(self) -> None:
        self.preferences.save(self.preferences_path)

    def login(self, username: str, password: str) -> Dict[str, str]:
        session = self.api.auth.login(username, password)["data"]
        self.preferences.is_logged_in = True
        self.preferences.token = session["token"]
        self.save_preferences()
        return session["user"]

    def logout(self) -> None:
        """Always logs out locally; the server side is only an acknowledgment."""
        try:
            self.api.auth.logout()
        except NetworkError as e:
            logger.warning(f"Logout not acknowledged by server: {e}")
        self.preferences.is_logged_in = False
        self.preferences.token = None
        self.save_preferences()

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme {theme!r}")
        self.preferences.theme = theme
        self.save_preferences()

    def toggle_sidebar(self) -> bool:
        self.preferences.sidebar_collapsed = not self.preferences.sidebar_collapsed
        self.save_preferences()
        return self.preferences.sidebar_collapsed

    def mark_welcomed(self) -> None:
        self.preferences.welcomed = True
        self.save_preferences()

    def sync_all(self) -> Dict[str, bool]:
        """Refresh every collection; returns which ones are running from the local mirror."""
        offline = {}
        for name, collection in self.collections.items():
            collection.refresh()
            offline[name] = collection.offline
        return offline
