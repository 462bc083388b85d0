import pytest

from conftest import FlakySession
from sradha_notes.client import ApiClient, ApiError, AppState, NetworkError, SyncedCollection, SyncPolicy
from sradha_notes.client.mirror import LocalMirror, is_local

BASE_URL = "http://testserver/api"


@pytest.fixture
def session(anonymous):
    return FlakySession(anonymous)


@pytest.fixture
def api(session):
    api = ApiClient(BASE_URL, session=session)
    api.auth.login("sradha", "iloveyou")
    return api


def _notes(api, tmp_path, policy):
    return SyncedCollection("notes", api.notes, LocalMirror(tmp_path / "mirror"), policy)


def test_login_stores_token(session):
    api = ApiClient(BASE_URL, session=session)

    api.auth.login("Sradha", "iloveyou")

    assert api.token
    assert api.auth.verify()["data"]["user"]["username"] == "sradha"


def test_logout_clears_token(api):
    api.auth.logout()

    assert api.token is None
    with pytest.raises(ApiError) as excinfo:
        api.notes.list()
    assert excinfo.value.status == 401


def test_wrong_password_raises_api_error(session):
    api = ApiClient(BASE_URL, session=session)

    with pytest.raises(ApiError) as excinfo:
        api.auth.login("sradha", "nope")

    assert excinfo.value.status == 401
    assert api.token is None


def test_entity_helpers_round_trip(api):
    note = api.notes.create({"content": "hi"})["data"]
    assert api.notes.toggle_pin(note["id"])["data"]["isPinned"] is True
    assert api.notes.duplicate(note["id"])["data"]["content"] == "hi (Copy)"

    letter = api.letters.create({"content": "dear me"})["data"]
    api.letters.add_heart(letter["id"])
    assert api.letters.mark_as_read(letter["id"])["data"] == dict(
        api.letters.get(letter["id"])["data"], isRead=True
    )

    todo = api.todos.create({"text": "x"})["data"]
    api.todos.toggle(todo["id"])
    assert api.todos.clear_completed()["count"] == 1

    section = api.study.sections.create({"name": "Chem"})["data"]
    pdf = api.study.pdfs.create({"name": "a.pdf", "sectionId": section["id"], "fileData": "JVBER"})["data"]
    assert api.study.pdfs.update(pdf["id"], {"lastPage": 3})["data"]["lastPage"] == 3
    assert api.study.pdfs.toggle_favorite(pdf["id"])["data"] == {"isFavorite": True}

    api.events.create({"title": "Trip", "date": "2024-08-01", "time": "09:00"})
    assert api.events.for_date("2024-08-01")["count"] == 1

    api.moods.create({"mood": {"emoji": "😊", "name": "Happy", "color": "yellow"}})
    assert api.moods.stats()["data"][0]["name"] == "Happy"


def test_upload_helpers(api, media):
    assert api.upload.image(b"png-bytes", folder="pics")["data"] == media.uploads[0]
    assert api.upload.multiple(["data:image/png;base64,AA==", "data:image/png;base64,AA=="])["count"] == 2
    assert api.upload.delete("pics/img1")["success"] is True
    assert media.deleted == ["pics/img1"]


def test_unreachable_server_raises_network_error(api, session):
    session.down = True

    with pytest.raises(NetworkError):
        api.notes.list()


def test_refresh_mirrors_server_copy(api, session, tmp_path):
    api.notes.create({"content": "saved"})
    notes = _notes(api, tmp_path, SyncPolicy.QUEUE)
    notes.refresh()

    session.down = True
    offline = _notes(api, tmp_path, SyncPolicy.QUEUE)
    records = offline.refresh()

    assert offline.offline is True
    assert [r["content"] for r in records] == ["saved"]


def test_queue_policy_replays_offline_writes(api, session, tmp_path):
    notes = _notes(api, tmp_path, SyncPolicy.QUEUE)
    session.down = True

    draft = notes.create({"content": "typed offline"})
    notes.update(draft["id"], {"title": "Offline title"})

    assert is_local(draft["id"])
    assert len(notes.unsynced()) == 2

    session.down = False
    records = notes.refresh()

    assert notes.offline is False
    assert notes.unsynced() == []
    assert len(records) == 1
    assert not is_local(records[0]["id"])
    assert (records[0]["content"], records[0]["title"]) == ("typed offline", "Offline title")
    assert "_unsynced" not in records[0]


def test_queue_policy_deletes_replay(api, session, tmp_path):
    note = api.notes.create({"content": "bye"})["data"]
    notes = _notes(api, tmp_path, SyncPolicy.QUEUE)
    notes.refresh()
    session.down = True

    notes.delete(note["id"])

    session.down = False
    assert notes.refresh() == []
    assert api.notes.list()["count"] == 0


def test_discard_policy_drops_offline_writes(api, session, tmp_path):
    notes = _notes(api, tmp_path, SyncPolicy.DISCARD)
    session.down = True

    notes.create({"content": "lost"})
    assert [r["content"] for r in notes.records] == ["lost"]
    assert notes.unsynced() == []

    session.down = False
    assert notes.refresh() == []
    assert api.notes.list()["count"] == 0


def test_surface_policy_reports_until_pushed(api, session, tmp_path):
    notes = _notes(api, tmp_path, SyncPolicy.SURFACE)
    session.down = True
    notes.create({"content": "pending"})

    session.down = False
    records = notes.refresh()

    assert records[0]["_unsynced"] is True
    assert len(notes.unsynced()) == 1
    assert api.notes.list()["count"] == 0

    assert notes.push() == 1
    assert notes.unsynced() == []
    assert [r["content"] for r in notes.refresh()] == ["pending"]


def test_push_drops_rejected_operations(api, session, tmp_path):
    notes = _notes(api, tmp_path, SyncPolicy.SURFACE)
    session.down = True
    notes.create({"content": "   "})
    notes.create({"content": "fine"})

    session.down = False

    assert notes.push() == 2
    assert [n["content"] for n in api.notes.list()["data"]] == ["fine"]


def test_push_keeps_remaining_ops_when_network_drops(api, session, tmp_path):
    notes = _notes(api, tmp_path, SyncPolicy.SURFACE)
    session.down = True
    notes.create({"content": "one"})

    with pytest.raises(NetworkError):
        notes.push()

    assert len(notes.unsynced()) == 1
    reloaded = _notes(api, tmp_path, SyncPolicy.SURFACE)
    assert len(reloaded.unsynced()) == 1


def test_deleting_local_record_forgets_it(api, session, tmp_path):
    notes = _notes(api, tmp_path, SyncPolicy.QUEUE)
    session.down = True
    draft = notes.create({"content": "never mind"})

    notes.delete(draft["id"])

    assert notes.records == []
    assert notes.unsynced() == []


def test_app_state_sync_all(api, session, tmp_path):
    state = AppState(api, tmp_path)
    api.todos.create({"text": "from server"})

    assert set(state.sync_all().values()) == {False}
    assert [t["text"] for t in state["todos"].records] == ["from server"]

    session.down = True
    offline = state.sync_all()
    assert all(offline.values())
    assert set(offline) == {"notes", "moods", "letters", "memories", "todos", "events", "sections"}


def test_queue_keeps_offline_writes_when_session_expired(api, session, tmp_path):
    notes = _notes(api, tmp_path, SyncPolicy.QUEUE)
    session.down = True
    notes.create({"content": "typed offline"})

    session.down = False
    api.token = None
    records = notes.refresh()

    assert notes.offline is True
    assert [r["content"] for r in records] == ["typed offline"]
    assert len(notes.unsynced()) == 1

    api.auth.login("sradha", "iloveyou")
    records = notes.refresh()

    assert notes.unsynced() == []
    assert [r["content"] for r in records] == ["typed offline"]
    assert not is_local(records[0]["id"])


def test_push_stops_on_expired_session(api, session, tmp_path):
    notes = _notes(api, tmp_path, SyncPolicy.SURFACE)
    session.down = True
    notes.create({"content": "one"})
    notes.create({"content": "two"})

    session.down = False
    api.token = None
    with pytest.raises(ApiError) as excinfo:
        notes.push()

    assert excinfo.value.status == 401
    assert [op["data"]["content"] for op in notes.unsynced()] == ["one", "two"]


def test_write_with_expired_session_is_kept_locally(api, tmp_path):
    notes = _notes(api, tmp_path, SyncPolicy.QUEUE)
    api.token = None

    draft = notes.create({"content": "not lost"})

    assert is_local(draft["id"])
    assert len(notes.unsynced()) == 1


def test_invalid_write_is_not_queued(api, tmp_path):
    notes = _notes(api, tmp_path, SyncPolicy.QUEUE)

    with pytest.raises(ApiError) as excinfo:
        notes.create({"content": "   "})

    assert excinfo.value.status == 400
    assert notes.unsynced() == []
