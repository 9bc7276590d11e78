import inspect
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from fieldops.main import create_app
from fieldops.models.domain import UpdateOutcome


class FakeStore:
    def __init__(self, records=None, failing=()) -> None:
        self.records = records or []
        self.failing = set(failing)
        self.updates: list[tuple[str, dict]] = []

    async def update_by_id(self, work_order_id, fields):
        self.updates.append((work_order_id, fields))
        if work_order_id in self.failing:
            return UpdateOutcome(success=False, error="row is locked")
        return UpdateOutcome(success=True)

    async def fetch_by_ids(self, work_order_ids, select="*"):
        return [record for record in self.records if record["id"] in work_order_ids]


@pytest.fixture
def store() -> FakeStore:
    return FakeStore(
        records=[{"id": "1", "workOrderNumber": "WO-0001", "status": "open", "priority": "high"}],
        failing={"2"},
    )


@pytest.fixture
def api_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, store: FakeStore) -> TestClient:
    from fieldops.api.routes import batch as batch_routes
    from fieldops.persistence.filesystem import FileStorage
    from fieldops.services.batch import executor as executor_module
    from fieldops.services.routing import service as routing_service

    async def fake_store():
        return store

    monkeypatch.setattr(batch_routes, "get_work_order_store", fake_store)
    monkeypatch.setattr(batch_routes, "FileStorage", lambda: FileStorage(root=tmp_path))
    monkeypatch.setattr(routing_service, "FileStorage", lambda: FileStorage(root=tmp_path))
    monkeypatch.setattr(executor_module.settings, "inter_batch_delay_ms", 0)

    return TestClient(create_app())


WORK_ORDERS = [
    {"id": "A", "priority": "high", "latitude": 0.0, "longitude": 1.0},
    {"id": "B", "priority": "low", "latitude": 0.0, "longitude": 0.9},
    {"id": "C", "priority": "medium"},
]


def test_health(api_client: TestClient):
    assert api_client.get("/api/health").json() == {"status": "ok"}
    assert api_client.get("/").json()["status"] == "running"


def test_batch_status_reports_partial_outcome(api_client: TestClient, store: FakeStore):
    response = api_client.post(
        "/api/work-orders/batch/status",
        json={"work_order_ids": ["1", "2", "3"], "status": "completed"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["outcome"] == "partial"
    assert payload["successful"] == ["1", "3"]
    assert payload["failed"] == [{"id": "2", "error": "row is locked"}]
    assert payload["total_processed"] == 3
    assert len(store.updates) == 3


def test_batch_assignment_without_technician_is_rejected(api_client: TestClient, store: FakeStore):
    response = api_client.post("/api/work-orders/batch/assign", json={"work_order_ids": ["1"]})

    assert response.status_code == 400
    assert response.json()["detail"] == "Technician ID is required for batch assignment"
    assert store.updates == []


def test_batch_validate(api_client: TestClient):
    response = api_client.post(
        "/api/work-orders/batch/validate",
        json={"work_order_ids": [], "operation_type": "export"},
    )

    assert response.status_code == 200
    assert response.json()["is_valid"] is False


def test_batch_export_writes_file(api_client: TestClient, tmp_path: Path):
    response = api_client.post("/api/work-orders/batch/export", json={"work_order_ids": ["1"]})

    assert response.status_code == 200
    payload = response.json()
    assert payload["row_count"] == 1
    exported = Path(payload["path"])
    assert exported.parent == tmp_path.resolve() / "exports"
    assert exported.read_text(encoding="utf-8").split("\n")[1].startswith('"WO-0001","open","high"')


def test_batch_export_without_rows_is_not_found(api_client: TestClient):
    response = api_client.post("/api/work-orders/batch/export", json={"work_order_ids": ["missing"]})

    assert response.status_code == 404
    assert response.json()["detail"] == "No work orders found for export"


def test_batch_unavailable_without_store(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    from fieldops.api.routes import batch as batch_routes

    async def missing_store():
        raise RuntimeError("Supabase is not configured.")

    monkeypatch.setattr(batch_routes, "get_work_order_store", missing_store)
    client = TestClient(create_app())

    response = client.post("/api/work-orders/batch/status", json={"work_order_ids": ["1"], "status": "open"})

    assert response.status_code == 503


def test_selection_session_lifecycle(api_client: TestClient):
    created = api_client.post("/api/selections", json={"max_selections": 2})
    assert created.status_code == 201
    session = created.json()
    assert session["mode"] == "active"
    session_id = session["session_id"]

    api_client.post(f"/api/selections/{session_id}/toggle", json={"id": "a"})
    api_client.post(f"/api/selections/{session_id}/toggle", json={"id": "b"})
    rejected = api_client.post(f"/api/selections/{session_id}/toggle", json={"id": "c"}).json()

    assert rejected["accepted"] is False
    assert rejected["selected_ids"] == ["a", "b"]

    selected = api_client.post(f"/api/selections/{session_id}/select-all", json={"ids": ["x", "y", "z"]}).json()
    assert selected["selected_ids"] == ["x", "y"]

    exited = api_client.delete(f"/api/selections/{session_id}").json()
    assert exited["mode"] == "inactive"
    assert exited["selected_ids"] == []
    assert api_client.get(f"/api/selections/{session_id}").status_code == 404


def test_proximity_endpoint(api_client: TestClient):
    response = api_client.post(
        "/api/work-orders/proximity",
        json={"origin": {"lat": 0.0, "lng": 0.0}, "work_orders": WORK_ORDERS},
    )

    assert response.status_code == 200
    results = response.json()["results"]
    assert [item["work_order_id"] for item in results] == ["A", "B", "C"]
    assert results[-1]["distance_km"] is None


def test_proximity_endpoint_with_radius(api_client: TestClient):
    response = api_client.post(
        "/api/work-orders/proximity",
        json={"origin": {"lat": 0.0, "lng": 0.0}, "work_orders": WORK_ORDERS, "radius_km": 105},
    )

    assert [item["work_order_id"] for item in response.json()["results"]] == ["B"]


def test_route_optimize_endpoint(api_client: TestClient, tmp_path: Path):
    response = api_client.post(
        "/api/routes/optimize",
        json={"start": {"lat": 0.0, "lng": 0.0}, "work_orders": WORK_ORDERS, "persist": True},
    )

    assert response.status_code == 200
    payload = response.json()
    assert [stop["work_order_id"] for stop in payload["stops"]] == ["A", "B"]
    assert payload["excluded_ids"] == ["C"]
    assert Path(payload["output_dir"]).parent == tmp_path.resolve() / "outputs"


def test_route_optimize_without_locations_is_bad_request(api_client: TestClient):
    response = api_client.post(
        "/api/routes/optimize",
        json={"start": {"lat": 0.0, "lng": 0.0}, "work_orders": [{"id": "C"}]},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "No work orders have valid location data for route planning"


def test_map_url_endpoint(api_client: TestClient):
    response = api_client.post(
        "/api/routes/map-url",
        json={"start": {"lat": 0.0, "lng": 0.0}, "work_orders": WORK_ORDERS, "provider": "google"},
    )

    assert response.status_code == 200
    assert response.json()["url"].startswith("https://www.google.com/maps/dir/0.0,0.0/0.0,0.9")


def test_proximity_endpoint_honours_max_results_per_request(api_client: TestClient):
    work_orders = [
        {"id": f"WO-{i}", "priority": "medium", "latitude": 0.0, "longitude": 0.001 * i} for i in range(1, 6)
    ]
    body = {"origin": {"lat": 0.0, "lng": 0.0}, "work_orders": work_orders}

    first = api_client.post("/api/work-orders/proximity", json={**body, "max_results": 1}).json()
    second = api_client.post("/api/work-orders/proximity", json={**body, "max_results": 100}).json()

    assert len(first["results"]) == 1
    assert len(second["results"]) == 5


def test_proximity_endpoint_runs_on_the_event_loop():
    from fieldops.api.routes import proximity as proximity_routes

    assert inspect.iscoroutinefunction(proximity_routes.sort_by_proximity)


class ImmediateTimer:
    def __init__(self, callback) -> None:
        self.callback = callback

    def cancel(self) -> None:
        self.callback = None


class ManualScheduler:
    def __init__(self) -> None:
        self.timers: list[ImmediateTimer] = []

    def call_later(self, delay, callback):
        timer = ImmediateTimer(callback)
        self.timers.append(timer)
        return timer

    def fire(self) -> None:
        for timer in self.timers:
            if timer.callback is not None:
                timer.callback()


def test_selection_session_is_dropped_after_auto_exit(api_client: TestClient):
    session_ids = [api_client.post("/api/selections", json={}).json()["session_id"] for _ in range(3)]
    sessions = api_client.app.state.selections
    assert set(session_ids) <= set(sessions)

    scheduler = ManualScheduler()
    for session_id in session_ids:
        manager = sessions[session_id]
        manager.scheduler = scheduler
        manager.toggle("a")
        manager.toggle("a")

    scheduler.fire()

    assert sessions == {}
    assert api_client.get(f"/api/selections/{session_ids[0]}").status_code == 404


def test_deleted_selection_session_is_removed(api_client: TestClient):
    session_id = api_client.post("/api/selections", json={}).json()["session_id"]

    assert api_client.delete(f"/api/selections/{session_id}").status_code == 200
    assert api_client.app.state.selections == {}
    assert api_client.delete(f"/api/selections/{session_id}").status_code == 404
