import json

import pytest
import requests

from conftest import FlakySession
from sradha_notes.client import ApiClient, AppState, NetworkError, Preferences


class OfflineSession:
    def request(self, method, url, **kwargs):
        raise requests.ConnectionError("offline")


def test_defaults_when_file_missing(tmp_path):
    prefs = Preferences.load(tmp_path / "preferences.json")

    assert prefs == Preferences()
    assert (prefs.theme, prefs.sidebar_collapsed, prefs.is_logged_in) == ("rose", False, False)


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "preferences.json"
    Preferences(theme="ocean", sidebar_collapsed=True, token="abc").save(path)

    assert json.loads(path.read_text(encoding="utf-8"))["sidebarCollapsed"] is True
    assert Preferences.load(path).theme == "ocean"
    assert Preferences.load(path).token == "abc"


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "preferences.json"
    path.write_text("{not json", encoding="utf-8")

    assert Preferences.load(path) == Preferences()


def test_state_persists_ui_choices(tmp_path):
    state = AppState(ApiClient(session=OfflineSession()), tmp_path)

    state.set_theme("lavender")
    assert state.toggle_sidebar() is True
    state.mark_welcomed()

    reloaded = AppState(ApiClient(session=OfflineSession()), tmp_path).preferences
    assert (reloaded.theme, reloaded.sidebar_collapsed, reloaded.welcomed) == ("lavender", True, True)


def test_unknown_theme_is_refused(tmp_path):
    state = AppState(ApiClient(session=OfflineSession()), tmp_path)

    with pytest.raises(ValueError):
        state.set_theme("neon")

    assert state.preferences.theme == "rose"


def test_saved_token_is_restored(tmp_path):
    Preferences(is_logged_in=True, token="saved-token").save(tmp_path / "preferences.json")

    api = ApiClient(session=OfflineSession())
    AppState(api, tmp_path)

    assert api.token == "saved-token"


def test_logout_offline_still_clears_session(tmp_path):
    Preferences(is_logged_in=True, token="saved-token").save(tmp_path / "preferences.json")
    api = ApiClient(session=OfflineSession())
    state = AppState(api, tmp_path)

    state.logout()

    assert api.token is None
    assert Preferences.load(tmp_path / "preferences.json").is_logged_in is False


def test_login_offline_raises(tmp_path):
    state = AppState(ApiClient(session=OfflineSession()), tmp_path)

    with pytest.raises(NetworkError):
        state.login("sradha", "iloveyou")

    assert state.preferences.is_logged_in is False


def test_login_persists_session(anonymous, tmp_path):
    state = AppState(ApiClient("http://testserver/api", session=FlakySession(anonymous)), tmp_path)

    user = state.login("sradha", "iloveyou")

    assert user["name"] == "Sradha Priyadarshini"
    saved = Preferences.load(tmp_path / "preferences.json")
    assert saved.is_logged_in is True
    assert saved.token == state.api.token
