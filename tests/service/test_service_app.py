"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi not installed", allow_module_level=True)

from bdg.readme.markers import BDG_BEGIN, BDG_END
from bdg.service import create_app
from tests._fixtures.lines import CI_LINE, CRATE_FOO


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_classify(client: TestClient) -> None:
    response = client.post("/version/classify", json={"version": "26.01", "allow_yy_calver": True})
    assert response.status_code == 200
    body = response.json()
    assert body["version_format"] == "calver"
    assert body["calver_scheme"] == "YY.MM"
    assert body["calver_parts"] == {"year": 2026, "month": 1}


def test_classify_rejects_inverted_year_bounds(client: TestClient) -> None:
    response = client.post(
        "/version/classify", json={"version": "2024.01", "year_min": 2100, "year_max": 2000}
    )
    assert response.status_code == 422


def test_parse_badges(client: TestClient) -> None:
    response = client.post("/badges/parse", json={"lines": [CI_LINE, "plain text"]})
    assert response.status_code == 200
    badges = response.json()["badges"]
    assert badges[0]["id"] == "ci:ci.yaml"
    assert badges[0]["kind"] == "github_actions"
    assert badges[1]["kind"] == "unknown"
    assert badges[1]["id"].startswith("unknown:")


def test_ensure_and_rewrite(client: TestClient) -> None:
    ensured = client.post("/readme/ensure", json={"content": "# Title\r\nBody\r\n"}).json()
    assert ensured["changed"] is True
    assert ensured["newline"] == "CRLF"
    assert ensured["marker_count"] == 1
    assert ensured["content"] == f"# Title\r\n{BDG_BEGIN}\r\n{BDG_END}\r\nBody\r\n"

    rewritten = client.post(
        "/readme/rewrite", json={"content": ensured["content"], "badges": [CRATE_FOO]}
    ).json()
    assert rewritten["badges"] == [CRATE_FOO]
    assert rewritten["trailing_newline"] is True


def test_rewrite_without_block_is_rejected(client: TestClient) -> None:
    response = client.post("/readme/rewrite", json={"content": "# Title\n", "badges": []})
    assert response.status_code == 400
    assert response.json()["detail"] == "marker block missing or duplicated"


def test_remove_by_kind(client: TestClient) -> None:
    content = f"# T\n{BDG_BEGIN}\n{CI_LINE}\n{CRATE_FOO}\n{BDG_END}\n"
    response = client.post("/readme/remove", json={"content": content, "kinds": ["github_actions"]})
    assert response.status_code == 200
    body = response.json()
    assert body["badges"] == [CRATE_FOO]
    assert body["removed_kinds"] == {"github_actions": 1}


def test_remove_strict_missing_id(client: TestClient) -> None:
    content = f"# T\n{BDG_BEGIN}\n{CRATE_FOO}\n{BDG_END}\n"
    response = client.post(
        "/readme/remove", json={"content": content, "ids": ["npm:gone"], "strict": True}
    )
    assert response.status_code == 400
    assert response.json() == {"detail": "id_not_found", "missing_ids": ["npm:gone"]}


def test_remove_all_conflicts_with_ids(client: TestClient) -> None:
    content = f"{BDG_BEGIN}\n{BDG_END}\n"
    response = client.post("/readme/remove", json={"content": content, "all": True, "ids": ["x"]})
    assert response.status_code == 422


def test_remove_without_filters_is_rejected(client: TestClient) -> None:
    content = f"# T\n{BDG_BEGIN}\n{BDG_END}\nBody\n"
    response = client.post("/readme/remove", json={"content": content})
    assert response.status_code == 422
    assert "nothing to remove" in response.json()["detail"]
