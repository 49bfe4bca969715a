import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from src.dependencies import get_geocoder, get_profile_store, get_session_factory
from src.main import app
from tests.conftest import FakeSessionFactory
from tests.test_search_logic import FailingStore


@pytest.fixture
def client(store, geocoder):
    app.dependency_overrides[get_profile_store] = lambda: store
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    yield TestClient(app)
    app.dependency_overrides.clear()


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_search_requires_token(client, worker_token):
    assert client.get("/workers/search").status_code == 401
    assert client.get("/workers/search", headers=_auth("garbage")).status_code == 401
    assert client.get("/workers/search", headers=_auth(worker_token)).status_code == 403


def test_search_envelope_is_camel_case(client, admin_token):
    r = client.get("/workers/search", params={"pageSize": 2}, headers=_auth(admin_token))
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["pagination"] == {
        "total": 6,
        "page": 1,
        "pageSize": 2,
        "totalPages": 3,
        "hasNext": True,
        "hasPrev": False,
    }
    assert {"firstName", "userId", "postalCode", "createdAt"} <= set(body["data"][0])
    assert "dateOfBirth" not in body["data"][0]
    assert r.headers["X-Response-Time"].endswith("ms")


def test_multi_value_params_and_aliases(client, admin_token):
    r = client.get(
        "/workers/search?services[]=support-worker&gender=male&languages=greek,english",
        headers=_auth(admin_token),
    )
    body = r.json()
    assert {w["id"] for w in body["data"]} == {"w1", "w3"}
    assert body["appliedFilters"]["services"] == ["support-worker"]
    assert body["appliedFilters"]["languages"] == ["greek", "english"]


def test_bad_paging_is_clamped(client, admin_token):
    r = client.get("/workers/search", params={"page": "abc", "pageSize": "500"}, headers=_auth(admin_token))
    assert r.status_code == 200
    meta = r.json()["pagination"]
    assert meta["page"] == 1
    assert meta["pageSize"] == 100


def test_distance_search_over_http(client, admin_token):
    r = client.get(
        "/workers/search",
        params={"location": "Sydney NSW", "within": "20"},
        headers=_auth(admin_token),
    )
    body = r.json()
    assert [w["id"] for w in body["data"]] == ["w1", "w5", "w7"]
    assert body["data"][0]["distance"] == 0.0
    assert body["appliedFilters"]["radiusKm"] == 20.0


def test_store_failure_maps_to_500(records, geocoder, admin_token):
    app.dependency_overrides[get_profile_store] = lambda: FailingStore(records)
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    try:
        r = TestClient(app).get("/workers/search", headers=_auth(admin_token))
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Failed to fetch workers"
    assert "connection reset" in body["message"]


def test_filter_options(client, admin_token):
    factory = FakeSessionFactory(
        results=[
            [("WORKING_RIGHTS",)],
            [("APPROVED",)],
            [("police-check", "Police Check", "WORKING_RIGHTS")],
            [(5, 2, 1, 0, 1)],
        ]
    )
    app.dependency_overrides[get_session_factory] = lambda: factory
    r = client.get("/workers/filters", headers=_auth(admin_token))
    assert r.status_code == 200
    data = r.json()["data"]
    assert [(o["value"], o["label"]) for o in data["documentCategories"]] == [("WORKING_RIGHTS", "Working Rights")]
    assert data["documentTypes"][0]["category"] == "WORKING_RIGHTS"
    assert data["stats"]["totalProfiles"] == 5
    assert data["documentSubmissionFilters"][1]["label"] == "No Documents (3)"


def test_filter_options_failure_names_the_endpoint(client, admin_token):
    factory = FakeSessionFactory(error=OperationalError("SELECT 1", {}, Exception("connection refused")))
    app.dependency_overrides[get_session_factory] = lambda: factory
    r = client.get("/workers/filters", headers=_auth(admin_token))
    assert r.status_code == 500
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Failed to fetch filter options"
    assert "connection refused" in body["message"]
