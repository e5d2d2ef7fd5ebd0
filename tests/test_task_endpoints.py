"""
Tests for the /api/v1/tasks endpoints.

Covers CRUD, the cancel (end) transition, pagination envelopes and links.
"""

import uuid
from datetime import datetime, timedelta

from app.models.enums import TaskSituation
from tests.factories import TEST_USER_ID, make_task


BASE = "/api/v1/tasks"


def task_payload(**overrides) -> dict:
    payload = {
        "userId": str(TEST_USER_ID),
        "title": "Review pull requests",
        "priority": "HIGH",
        "estimateMinutes": 40,
        "description": "Two open reviews",
    }
    payload.update(overrides)
    return payload


class TestCreateTask:
    def test_create_returns_201_with_location(self, client):
        resp = client.post(BASE, json=task_payload())

        assert resp.status_code == 201
        body = resp.json()
        assert body["title"] == "Review pull requests"
        assert body["situation"] == "OPEN"
        assert body["spentMinutes"] == 0
        assert body["finalDate"] is None
        assert body["userId"] == str(TEST_USER_ID)
        assert resp.headers["location"].endswith(f"{BASE}/{body['id']}")

    def test_accepts_snake_case_fields(self, client):
        payload = task_payload()
        payload["user_id"] = payload.pop("userId")
        payload["estimate_minutes"] = payload.pop("estimateMinutes")

        assert client.post(BASE, json=payload).status_code == 201

    def test_rejects_nil_user_id(self, client):
        resp = client.post(BASE, json=task_payload(userId=str(uuid.UUID(int=0))))
        assert resp.status_code == 422

    def test_rejects_empty_title(self, client):
        assert client.post(BASE, json=task_payload(title="")).status_code == 422

    def test_rejects_unknown_priority(self, client):
        assert client.post(BASE, json=task_payload(priority="URGENT")).status_code == 422


class TestGetTask:
    def test_returns_task_with_resource_links(self, client, db_session):
        task = make_task(db_session)

        resp = client.get(f"{BASE}/{task.id}")

        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == str(task.id)
        assert [(l["rel"], l["method"]) for l in body["links"]] == [
            ("self", "GET"), ("update", "PUT"), ("delete", "DELETE"),
        ]
        assert body["links"][0]["href"] == f"http://testserver{BASE}/{task.id}"

    def test_missing_task_is_404_with_error_payload(self, client):
        missing = uuid.uuid4()

        resp = client.get(f"{BASE}/{missing}")

        assert resp.status_code == 404
        assert resp.json() == {"error": "Task not found", "id": str(missing)}


class TestListTasks:
    def test_envelope_shape(self, client, db_session):
        make_task(db_session)

        body = client.get(BASE).json()

        assert set(body) == {"items", "currentPage", "pageSize", "totalItems", "links"}
        assert body["currentPage"] == 1
        assert body["pageSize"] == 10
        assert body["totalItems"] == 1
        assert body["links"] == []

    def test_links_on_middle_page(self, client, db_session):
        for _ in range(5):
            make_task(db_session)

        body = client.get(BASE, params={"pageNumber": 2, "pageSize": 2}).json()

        assert len(body["items"]) == 2
        assert body["totalItems"] == 5
        links = {l["rel"]: l["href"] for l in body["links"]}
        assert list(links) == ["next", "last", "prev", "first"]
        assert links["next"] == f"http://testserver{BASE}?pageNumber=3&pageSize=2"
        assert links["last"] == f"http://testserver{BASE}?pageNumber=3&pageSize=2"
        assert links["prev"] == f"http://testserver{BASE}?pageNumber=1&pageSize=2"
        assert links["first"] == f"http://testserver{BASE}?pageNumber=1&pageSize=2"

    def test_rejects_page_number_zero(self, client):
        assert client.get(BASE, params={"pageNumber": 0}).status_code == 422

    def test_rejects_page_size_over_cap(self, client):
        assert client.get(BASE, params={"pageSize": 101}).status_code == 422


class TestUpdateTask:
    def test_full_replace(self, client, db_session):
        task = make_task(db_session)
        payload = task_payload(
            id=str(task.id),
            title="Renamed",
            situation="IN_PROGRESS",
            createdAt=task.created_at.isoformat(),
            spentMinutes=0,
        )

        resp = client.put(f"{BASE}/{task.id}", json=payload)

        assert resp.status_code == 204
        body = client.get(f"{BASE}/{task.id}").json()
        assert body["title"] == "Renamed"
        assert body["situation"] == "IN_PROGRESS"

    def test_id_mismatch_is_400(self, client, db_session):
        task = make_task(db_session)
        payload = task_payload(id=str(uuid.uuid4()), situation="OPEN", createdAt=task.created_at.isoformat())

        resp = client.put(f"{BASE}/{task.id}", json=payload)

        assert resp.status_code == 400
        assert resp.content == b""

    def test_missing_task_is_404(self, client):
        missing = uuid.uuid4()
        payload = task_payload(id=str(missing), situation="OPEN", createdAt=datetime.utcnow().isoformat())

        resp = client.put(f"{BASE}/{missing}", json=payload)

        assert resp.status_code == 404


class TestEndTask:
    def test_end_completes_task(self, client, db_session):
        task = make_task(db_session, created_at=datetime.utcnow() - timedelta(minutes=30))

        resp = client.put(f"{BASE}/cancel/{task.id}")

        assert resp.status_code == 204
        body = client.get(f"{BASE}/{task.id}").json()
        assert body["situation"] == TaskSituation.COMPLETED.value
        assert body["finalDate"] is not None
        assert body["spentMinutes"] >= 29

    def test_end_missing_task_is_404(self, client):
        resp = client.put(f"{BASE}/cancel/{uuid.uuid4()}")

        assert resp.status_code == 404
        assert resp.json()["error"] == "Task not found"


class TestDeleteTask:
    def test_delete_then_get_is_404(self, client, db_session):
        task = make_task(db_session)

        assert client.delete(f"{BASE}/{task.id}").status_code == 204
        assert client.get(f"{BASE}/{task.id}").status_code == 404

    def test_delete_missing_is_404(self, client):
        assert client.delete(f"{BASE}/{uuid.uuid4()}").status_code == 404


def test_requires_authentication(anon_client):
    resp = anon_client.get(BASE)

    assert resp.status_code == 401


def test_response_carries_request_id(client):
    resp = client.get(BASE)

    assert resp.headers["x-request-id"]


def test_service_span_is_tagged_with_request_id(client, span_exporter):
    resp = client.get(BASE)

    span = span_exporter.get_finished_spans()[-1]
    assert span.name == "TaskService.list"
    assert span.attributes["request.id"] == resp.headers["x-request-id"]
