import json
import os
from datetime import datetime

from fastapi.testclient import TestClient

# Keep tests off the filesystem
os.environ.setdefault("SQLITE_DB_PATH", ":memory:")

from src.todos_api.db import open_database  # noqa: E402
from src.todos_api.generate_openapi import generate_openapi  # noqa: E402
from src.todos_api.main import app  # noqa: E402
from src.todos_api.services import TODOService, get_todo_service  # noqa: E402

service = TODOService(open_database(":memory:"))
app.dependency_overrides[get_todo_service] = lambda: service

client = TestClient(app)


def create_todo(subject="Test Task", description=""):
    res = client.post("/todos", json={"subject": subject, "description": description})
    assert res.status_code == 200
    return res.json()["TODO"]


def delete(payload):
    return client.request("DELETE", "/todos", json=payload)


def assert_todo_shape(todo: dict):
    for key in ["ID", "Subject", "Description", "CreatedAt", "UpdatedAt"]:
        assert key in todo
    assert isinstance(todo["ID"], int)
    assert isinstance(todo["Subject"], str)
    assert isinstance(todo["Description"], str)
    datetime.fromisoformat(todo["CreatedAt"])
    datetime.fromisoformat(todo["UpdatedAt"])


class TestHealth:
    def test_healthz(self):
        res = client.get("/healthz")
        assert res.status_code == 200
        assert res.json() == {"Message": "string"}


class TestCreate:
    def test_create_todo(self):
        res = client.post("/todos", json={"subject": "buy milk", "description": ""})
        assert res.status_code == 200
        todo = res.json()["TODO"]
        assert_todo_shape(todo)
        assert todo["ID"] > 0
        assert todo["Subject"] == "buy milk"
        assert todo["Description"] == ""

    def test_create_accepts_capitalized_keys(self):
        res = client.post("/todos", json={"Subject": "Capitalized", "Description": "D"})
        assert res.status_code == 200
        todo = res.json()["TODO"]
        assert todo["Subject"] == "Capitalized"
        assert todo["Description"] == "D"

    def test_create_without_description(self):
        res = client.post("/todos", json={"subject": "no description"})
        assert res.status_code == 200
        assert res.json()["TODO"]["Description"] == ""

    def test_create_empty_subject_is_400_with_empty_body(self):
        res = client.post("/todos", json={"subject": ""})
        assert res.status_code == 400
        assert res.content == b""

    def test_create_undecodable_body_is_400(self):
        res = client.post("/todos", content="{not json", headers={"Content-Type": "application/json"})
        assert res.status_code == 400
        assert res.content == b""


class TestRead:
    def test_list_newest_first_with_default_size(self):
        for i in range(6):
            create_todo(subject=f"Task {i}")
        res = client.get("/todos")
        assert res.status_code == 200
        todos = res.json()["TODOs"]
        assert len(todos) == 5
        ids = [t["ID"] for t in todos]
        assert ids == sorted(ids, reverse=True)
        for t in todos:
            assert_todo_shape(t)

    def test_keyset_pagination(self):
        for i in range(4):
            create_todo(subject=f"Page {i}")
        first = client.get("/todos?size=2").json()["TODOs"]
        assert len(first) == 2
        cursor = first[-1]["ID"]
        second = client.get(f"/todos?prev_id={cursor}&size=2").json()["TODOs"]
        assert len(second) == 2
        assert all(t["ID"] < cursor for t in second)
        assert second[0]["ID"] < first[-1]["ID"]

    def test_size_zero_returns_empty_list(self):
        create_todo()
        res = client.get("/todos?size=0")
        assert res.status_code == 200
        assert res.json() == {"TODOs": []}

    def test_unparseable_params_fall_back_to_defaults(self):
        for i in range(6):
            create_todo(subject=f"Fallback {i}")
        res = client.get("/todos?prev_id=abc&size=xyz")
        assert res.status_code == 200
        todos = res.json()["TODOs"]
        assert len(todos) == 5
        newest = client.get("/todos?size=1").json()["TODOs"][0]
        assert todos[0]["ID"] == newest["ID"]

    def test_out_of_range_params_fall_back_to_defaults(self):
        for i in range(6):
            create_todo(subject=f"Huge {i}")
        newest = client.get("/todos?size=1").json()["TODOs"][0]

        res_size = client.get("/todos?size=99999999999999999999")
        assert res_size.status_code == 200
        assert len(res_size.json()["TODOs"]) == 5

        res_prev = client.get("/todos?prev_id=99999999999999999999&size=2")
        assert res_prev.status_code == 200
        assert res_prev.json()["TODOs"][0]["ID"] == newest["ID"]

    def test_non_plain_digits_fall_back_to_defaults(self):
        for i in range(6):
            create_todo(subject=f"Digits {i}")
        for raw in ["1_000", " 2", "３", "2.0"]:
            res = client.get("/todos", params={"size": raw})
            assert res.status_code == 200
            assert len(res.json()["TODOs"]) == 5


class TestUpdate:
    def test_update_todo(self):
        todo = create_todo(subject="buy milk")
        res = client.put("/todos", json={"id": todo["ID"], "subject": "buy milk and eggs"})
        assert res.status_code == 200
        updated = res.json()["TODO"]
        assert updated["ID"] == todo["ID"]
        assert updated["Subject"] == "buy milk and eggs"
        assert updated["CreatedAt"] == todo["CreatedAt"]

    def test_update_not_found_is_404(self):
        res = client.put("/todos", json={"id": 999999, "subject": "x"})
        assert res.status_code == 404
        assert res.content == b""

    def test_update_rejects_zero_id_and_empty_subject(self):
        todo = create_todo()
        res_zero = client.put("/todos", json={"id": 0, "subject": "x"})
        assert res_zero.status_code == 400
        assert res_zero.content == b""
        res_empty = client.put("/todos", json={"id": todo["ID"], "subject": ""})
        assert res_empty.status_code == 400

    def test_update_undecodable_body_is_400(self):
        res = client.put("/todos", json={"id": "not-a-number", "subject": "x"})
        assert res.status_code == 400
        assert res.content == b""

    def test_update_id_beyond_64_bits_is_400(self):
        res = client.put("/todos", json={"id": 99999999999999999999, "subject": "x"})
        assert res.status_code == 400
        assert res.content == b""


class TestDelete:
    def test_delete_todos(self):
        todo = create_todo(subject="to delete")
        res = delete({"ids": [todo["ID"]]})
        assert res.status_code == 200
        assert res.json() == {}

        listed = client.get("/todos?size=100").json()["TODOs"]
        assert todo["ID"] not in [t["ID"] for t in listed]

        res_again = delete({"ids": [todo["ID"]]})
        assert res_again.status_code == 404
        assert res_again.content == b""

    def test_delete_empty_ids_is_400(self):
        res = delete({"ids": []})
        assert res.status_code == 400
        assert res.content == b""

    def test_delete_partial_match_succeeds(self):
        todo = create_todo(subject="partial")
        res = delete({"ids": [todo["ID"], 999999]})
        assert res.status_code == 200
        assert res.json() == {}

    def test_delete_id_beyond_64_bits_is_400(self):
        todo = create_todo(subject="kept")
        res = delete({"ids": [todo["ID"], 99999999999999999999]})
        assert res.status_code == 400
        assert res.content == b""
        listed = client.get("/todos?size=100").json()["TODOs"]
        assert todo["ID"] in [t["ID"] for t in listed]


class TestRouting:
    def test_unsupported_method_is_405(self):
        res = client.patch("/todos", json={})
        assert res.status_code == 405


class TestStoreErrors:
    def test_store_failure_is_500_with_empty_body(self):
        broken_conn = open_database(":memory:")
        broken_conn.close()
        app.dependency_overrides[get_todo_service] = lambda: TODOService(broken_conn)
        try:
            res = client.get("/todos")
            assert res.status_code == 500
            assert res.content == b""
            res_post = client.post("/todos", json={"subject": "x"})
            assert res_post.status_code == 500
            assert res_post.content == b""
            res_put = client.put("/todos", json={"id": 1, "subject": "x"})
            assert res_put.status_code == 500
            assert res_put.content == b""
            res_delete = delete({"ids": [1]})
            assert res_delete.status_code == 500
            assert res_delete.content == b""
        finally:
            app.dependency_overrides[get_todo_service] = lambda: service


class TestOpenAPI:
    def test_generate_openapi_writes_schema(self, tmp_path):
        out = generate_openapi(str(tmp_path / "interfaces" / "openapi.json"))
        with open(out, encoding="utf-8") as f:
            schema = json.load(f)
        assert set(schema["paths"]["/todos"]) == {"get", "post", "put", "delete"}
        assert "/healthz" in schema["paths"]
        assert {"todos", "health"} <= {t["name"] for t in schema["tags"]}
