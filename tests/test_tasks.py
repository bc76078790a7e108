from fastapi.testclient import TestClient

from main import create_app


def create(client, **fields):
    res = client.post("/task", json=fields)
    assert res.status_code == 201
    return res.json()


def test_root(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.text == "Task Management API"


def test_task_lifecycle(client, sample_task):
    res = client.post("/task", json=sample_task)
    assert res.status_code == 201
    task = res.json()
    assert task["id"] == 1
    assert task["status"] == "Pending"
    assert task["dueDate"] == "2024-03-15"
    assert task["assignedTo"] == "alice"
    assert "creationDate" in task

    res = client.get("/task/1")
    assert res.status_code == 200
    assert res.json() == task

    res = client.put("/task/1", json={"status": "Completed"})
    assert res.status_code == 200
    assert res.json() == {**task, "status": "Completed"}

    res = client.delete("/task/1")
    assert res.status_code == 204
    assert res.content == b""

    res = client.get("/task/1")
    assert res.status_code == 404
    assert res.json() == {"message": "Task not found"}


def test_create_without_fields(client):
    task = create(client)
    assert task["title"] is None
    assert task["dueDate"] is None
    assert task["status"] == "Pending"


def test_create_ignores_status(client, sample_task):
    task = create(client, **sample_task, status="Completed")
    assert task["status"] == "Pending"


def test_ids_increase_and_are_never_reused(client):
    first = create(client, title="a")["id"]
    second = create(client, title="b")["id"]
    assert client.delete(f"/task/{second}").status_code == 204
    third = create(client, title="c")["id"]
    assert first < second < third


def test_update_changes_only_sent_fields(client, sample_task):
    task = create(client, **sample_task)
    res = client.put(f"/task/{task['id']}", json={"title": "Renamed"})
    assert res.status_code == 200
    assert res.json() == {**task, "title": "Renamed"}
    assert client.get(f"/task/{task['id']}").json() == {**task, "title": "Renamed"}


def test_update_with_empty_body_keeps_task(client, sample_task):
    task = create(client, **sample_task)
    res = client.put(f"/task/{task['id']}", json={})
    assert res.status_code == 200
    assert res.json() == task


def test_update_merges_unknown_fields(client, sample_task):
    task = create(client, **sample_task)
    res = client.put(f"/task/{task['id']}", json={"priority": "high"})
    assert res.status_code == 200
    assert res.json() == {**task, "priority": "high"}


def test_update_keeps_id_and_creation_date(client, sample_task):
    task = create(client, **sample_task)
    res = client.put(
        f"/task/{task['id']}",
        json={"id": 99, "creationDate": "2000-01-01T00:00:00Z", "category": "Home"},
    )
    assert res.status_code == 200
    assert res.json() == {**task, "category": "Home"}
    assert client.get("/task/99").status_code == 404


def test_update_rejects_unknown_status(client, sample_task):
    task = create(client, **sample_task)
    res = client.put(f"/task/{task['id']}", json={"status": "Archived"})
    assert res.status_code == 400
    assert client.get(f"/task/{task['id']}").json() == task


def test_due_date_with_time_is_kept_as_sent(client):
    res = client.post("/task", json={"title": "t", "dueDate": "2024-03-15T10:30:00.000Z"})
    assert res.status_code == 201
    task = res.json()
    assert task["dueDate"] == "2024-03-15T10:30:00.000Z"
    assert client.get(f"/task/{task['id']}").json() == task

    res = client.put(f"/task/{task['id']}", json={"dueDate": "next friday"})
    assert res.status_code == 200
    assert res.json() == {**task, "dueDate": "next friday"}


def test_create_accepts_numbers_for_text_fields(client):
    res = client.post("/task", json={"title": 5, "assignedTo": "alice", "category": 7})
    assert res.status_code == 201
    task = res.json()
    assert task["title"] == "5"
    assert task["category"] == "7"
    assert client.get("/tasks", params={"category": "7"}).json() == [task]


def test_update_missing_task(client):
    res = client.put("/task/42", json={"title": "x"})
    assert res.status_code == 404


def test_delete_twice(client):
    task = create(client, title="once")
    assert client.delete(f"/task/{task['id']}").status_code == 204
    res = client.delete(f"/task/{task['id']}")
    assert res.status_code == 404
    assert res.json() == {"message": "Task not found"}


def test_non_integer_id(client):
    assert client.get("/task/abc").status_code == 400


def test_list_and_filter(client):
    a = create(client, title="a", assignedTo="alice", category="Work")
    b = create(client, title="b", assignedTo="bob", category="Work")
    c = create(client, title="c", assignedTo="alice", category="Home")

    assert client.get("/tasks").json() == [a, b, c]
    assert client.get("/tasks", params={"assignedTo": "alice"}).json() == [a, c]
    assert client.get("/tasks", params={"category": "Work"}).json() == [a, b]
    assert client.get("/tasks", params={"assignedTo": "alice", "category": "Home"}).json() == [c]
    assert client.get("/tasks", params={"assignedTo": "carol"}).json() == []
    # Empty values do not filter
    assert client.get("/tasks", params={"assignedTo": "", "category": ""}).json() == [a, b, c]


def test_list_empty(client):
    res = client.get("/tasks")
    assert res.status_code == 200
    assert res.json() == []


def test_apps_do_not_share_tasks(client, users_file):
    create(client, title="only here")
    with TestClient(create_app(users_file=users_file, bcrypt_rounds=4)) as other:
        assert other.get("/tasks").json() == []


def test_unexpected_error_is_reported_as_500(app, monkeypatch):
    def boom(**kwargs):
        raise RuntimeError("secret detail")

    monkeypatch.setattr(app.state.tasks, "list", boom)
    with TestClient(app, raise_server_exceptions=False) as c:
        res = c.get("/tasks")
    assert res.status_code == 500
    assert res.json() == {"message": "Internal Server Error"}
    assert "secret detail" not in res.text


def test_api_docs_are_served(client):
    assert client.get("/api-docs").status_code == 200
    schema = client.get("/openapi.json").json()
    assert schema["info"]["title"] == "Task Management API"
    assert "/task/{task_id}" in schema["paths"]
