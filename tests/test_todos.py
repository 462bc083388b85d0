def _add(client, text, **fields):
    response = client.post("/api/todos", json={"text": text, **fields})
    assert response.status_code == 201
    return response.json()["data"]


def test_create_defaults(client):
    todo = _add(client, "water plants")

    assert todo["priority"] == "normal"
    assert todo["completed"] is False
    assert client.get(f"/api/todos/{todo['id']}").json()["data"] == todo


def test_toggle_flips_completed(client):
    todo = _add(client, "read")

    done = client.patch(f"/api/todos/{todo['id']}/toggle").json()["data"]
    reopened = client.patch(f"/api/todos/{todo['id']}/toggle").json()["data"]

    assert done["completed"] is True
    assert reopened["completed"] is False


def test_filter_active_and_completed(client):
    active = _add(client, "active one")
    finished = _add(client, "finished one", priority="urgent")
    client.patch(f"/api/todos/{finished['id']}/toggle")

    assert [t["id"] for t in client.get("/api/todos", params={"filter": "active"}).json()["data"]] == [active["id"]]
    assert [t["id"] for t in client.get("/api/todos", params={"filter": "completed"}).json()["data"]] == [finished["id"]]
    assert client.get("/api/todos").json()["count"] == 2


def test_clear_completed_returns_deleted_count(client):
    keep = _add(client, "keep")
    for text in ("a", "b", "c"):
        todo = _add(client, text)
        client.patch(f"/api/todos/{todo['id']}/toggle")

    body = client.delete("/api/todos/completed/clear").json()

    assert body["data"] == {"deletedCount": 3}
    assert body["count"] == 3
    assert client.get("/api/todos", params={"filter": "completed"}).json()["count"] == 0
    assert [t["id"] for t in client.get("/api/todos").json()["data"]] == [keep["id"]]


def test_clear_completed_with_nothing_done(client):
    _add(client, "pending")

    body = client.delete("/api/todos/completed/clear").json()

    assert body["success"] is True
    assert body["data"] == {"deletedCount": 0}


def test_invalid_priority_is_rejected(client):
    response = client.post("/api/todos", json={"text": "x", "priority": "whenever"})

    assert response.status_code == 400
    assert response.json()["message"].startswith("priority")


def test_update_and_delete(client):
    todo = _add(client, "draft")

    updated = client.put(f"/api/todos/{todo['id']}", json={"priority": "high"}).json()["data"]
    assert (updated["text"], updated["priority"]) == ("draft", "high")

    assert client.delete(f"/api/todos/{todo['id']}").status_code == 200
    assert client.get(f"/api/todos/{todo['id']}").status_code == 404
