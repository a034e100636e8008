"""HTTP tests for the character endpoints using FastAPI's TestClient."""

import pytest

from ranking_admin_api.app.repositories.character_repository import StorageError
from tests.conftest import build_character

RANKED = "/api/v1/characters/ranked"
SEARCH = "/api/v1/characters/search"


@pytest.fixture
def seeded(api_store):
    api_store.insert(build_character("A", level=50, exp=100, nickname="Alice", job="Mage", job_code=200))
    api_store.insert(build_character("B", level=50, exp=200, nickname="Bob"))
    api_store.insert(build_character("C", level=40, exp=999, nickname="Carol"))
    return api_store


def test_ranked_defaults(client, seeded):
    response = client.get(RANKED)

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"records", "totalCount", "currentPage", "totalPages", "hasMore"}
    assert [r["userId"] for r in body["records"]] == ["B", "A", "C"]
    assert body["totalCount"] == 3
    assert body["currentPage"] == 1
    assert body["totalPages"] == 1
    assert body["hasMore"] is False


def test_ranked_record_shape(client, seeded):
    record = client.get(RANKED).json()["records"][1]

    assert record["userId"] == "A"
    assert record["nickname"] == "Alice"
    assert record["jobCode"] == 200
    assert "playTime" in record
    assert "createdAt" in record and "updatedAt" in record
    assert "id" not in record


def test_ranked_pagination(client, seeded):
    body = client.get(RANKED, params={"page": "2", "pageSize": "2"}).json()

    assert [r["userId"] for r in body["records"]] == ["C"]
    assert body["totalPages"] == 2
    assert body["hasMore"] is False

    assert client.get(RANKED, params={"page": "1", "pageSize": "2"}).json()["hasMore"] is True


def test_unparseable_params_fall_back_to_defaults(client, seeded):
    body = client.get(RANKED, params={"page": "abc", "pageSize": ""}).json()

    assert body["currentPage"] == 1
    assert len(body["records"]) == 3


@pytest.mark.parametrize("page_size", ["2.5", "2abc", " 2 "])
def test_params_are_read_up_to_first_non_digit(client, seeded, page_size):
    body = client.get(RANKED, params={"page": "1.9", "pageSize": page_size}).json()

    assert body["currentPage"] == 1
    assert [r["userId"] for r in body["records"]] == ["B", "A"]
    assert body["totalPages"] == 2
    assert body["hasMore"] is True


@pytest.mark.parametrize("page_size", ["0", "1001", "-5"])
def test_out_of_range_page_size_is_rejected(client, seeded, page_size):
    response = client.get(RANKED, params={"pageSize": page_size})

    assert response.status_code == 400
    assert response.json() == {
        "detail": "Page size must be an integer between 1 and 1000",
        "error": "invalid_argument",
    }


def test_page_past_end_is_not_found(client, seeded):
    response = client.get(RANKED, params={"page": "5", "pageSize": "2"})

    assert response.status_code == 404
    assert response.json()["detail"] == "Page 5 does not exist. Total pages: 2"
    assert response.json()["error"] == "not_found"


def test_empty_store_any_page(client):
    response = client.get(RANKED, params={"page": "7"})

    assert response.status_code == 200
    assert response.json() == {
        "records": [],
        "totalCount": 0,
        "currentPage": 7,
        "totalPages": 0,
        "hasMore": False,
    }


def test_search(client, seeded):
    response = client.get(SEARCH, params={"keyword": " AL "})

    assert response.status_code == 200
    body = response.json()
    assert [m["userId"] for m in body["matches"]] == ["A"]
    assert body["returnedCount"] == 1
    assert body["normalizedKeyword"] == "AL"


@pytest.mark.parametrize(
    "params,detail",
    [
        ({}, "Search keyword cannot be empty"),
        ({"keyword": "b"}, "Search keyword must be at least 2 characters long"),
        ({"keyword": "<script>"}, "Search keyword contains invalid characters"),
    ],
)
def test_search_validation(client, params, detail):
    response = client.get(SEARCH, params=params)

    assert response.status_code == 400
    assert response.json()["detail"] == detail


def test_delete_then_delete_again(client, seeded):
    response = client.delete("/api/v1/characters/B")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "User with userId B has been deleted."}
    assert [r["userId"] for r in client.get(RANKED).json()["records"]] == ["A", "C"]

    again = client.delete("/api/v1/characters/B")
    assert again.status_code == 404
    assert again.json() == {"detail": "User not found", "error": "not_found"}


@pytest.mark.parametrize("path", ["a%2Fb", "a/b"])
def test_delete_identifier_with_slash(client, api_store, path):
    api_store.insert(build_character("a/b", level=3))
    api_store.insert(build_character("a", level=2))

    response = client.delete(f"/api/v1/characters/{path}")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "User with userId a/b has been deleted."}
    assert api_store.find_by_identifier("a/b") is None
    assert api_store.find_by_identifier("a") is not None


def test_delete_rejects_bad_identifier(client):
    response = client.delete("/api/v1/characters/%3Cscript%3E")

    assert response.status_code == 400
    assert response.json()["detail"] == "UserId contains invalid characters"


def test_storage_failure_is_generic(client, api_store, monkeypatch):
    def broken_count():
        raise StorageError("database disk image is malformed")

    monkeypatch.setattr(api_store, "count", broken_count)

    response = client.get(RANKED)

    assert response.status_code == 503
    assert response.json() == {
        "detail": "An error occurred while accessing the database",
        "error": "storage_unavailable",
    }


def test_unexpected_failure_is_internal(client, api_store, monkeypatch):
    def broken_search(keyword, limit=50):
        raise KeyError(keyword)

    monkeypatch.setattr(api_store, "find_by_keyword_substring", broken_search)

    response = client.get(SEARCH, params={"keyword": "abc"})

    assert response.status_code == 500
    assert response.json() == {"detail": "An unexpected error occurred", "error": "internal"}


def test_health(client):
    response = client.get("/api/v1/info/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_cors_allows_configured_origin(client):
    response = client.options(
        RANKED,
        headers={"Origin": "http://localhost:3001", "Access-Control-Request-Method": "GET"},
    )

    assert response.headers["access-control-allow-origin"] == "http://localhost:3001"
