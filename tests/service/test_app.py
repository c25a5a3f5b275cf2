"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from docsite.service import create_app


@pytest.fixture
def project(docs_builder):
    docs_builder.configure({"categories": [{"name": "Guides", "routes": ["guide"]}]})
    docs_builder.write({"index.md": "# Home\n", "guide.md": "# Guide\n", "extra.md": "# Extra\n"})
    return docs_builder


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_build_then_query_routes_and_content(client: TestClient, project) -> None:
    root = str(project.root)

    response = client.post("/build", json={"path": root})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["routes"] == 3
    assert data["errors"] == []

    routes = client.get("/routes", params={"path": root}).json()
    assert routes == [
        {"id": "home", "title": "Home"},
        {"id": "", "title": "Guides", "category": "Guides"},
        {"id": "guide", "title": "Guide", "category": "Guides"},
    ]

    content = client.get("/content/extra", params={"path": root})
    assert content.status_code == 200
    assert content.json()["path"] == "/extra"
    assert "Extra" in content.json()["html"]


def test_content_missing_route_is_404(client: TestClient, project) -> None:
    root = str(project.root)
    client.post("/build", json={"path": root})

    response = client.get("/content/core/nowhere", params={"path": root})
    assert response.status_code == 404


def test_build_without_sources_is_reported(client: TestClient, tmp_path) -> None:
    response = client.post("/build", json={"path": str(tmp_path)})
    assert response.status_code == 422
    assert "No source directory" in response.json()["detail"]
