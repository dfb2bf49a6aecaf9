"""Integration tests for views API endpoints."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

METADATA_DIR = Path(__file__).parent.parent.parent / "metadata"


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Create test client with fresh database and the shipped metadata."""
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("VIEWFORGE_DEFAULT_ROLE", raising=False)
    monkeypatch.setenv("VIEWFORGE_DB_PATH", str(tmp_path / "test.db"))
    monkeypatch.setenv("VIEWFORGE_METADATA_PATH", str(METADATA_DIR))
    monkeypatch.chdir(tmp_path)

    from viewforge.api.app import app

    with TestClient(app) as client:
        yield client


def _list_body(slug, roles, default_roles=None, **extra):
    body = {
        "slug": slug,
        "label": slug.title(),
        "roles": roles,
        "default_roles": default_roles or [],
        "config": {"columns": [{"key": "title", "label": "Title"}]},
    }
    body.update(extra)
    return body


class TestEntityTypes:
    """Test GET /api/entity-types."""

    def test_lists_catalog(self, client):
        response = client.get("/api/entity-types")
        assert response.status_code == 200
        data = {et["id"]: et for et in response.json()["data"]}
        assert set(data) == {"article", "movie"}
        assert data["article"]["slug"] == "articles"
        assert [f["key"] for f in data["movie"]["fields"]][:2] == ["title", "status"]


class TestListViews:
    """Test GET /api/entity-types/{ref}/{kind}-views."""

    def test_seeded_views(self, client):
        response = client.get("/api/entity-types/article/list-views")
        assert response.status_code == 200
        [view] = response.json()["data"]
        assert view["slug"] == "all"
        assert view["default_roles"] == ["ADMIN", "EDITOR"]
        assert [c["key"] for c in view["config"]["columns"]] == [
            "title", "author", "status", "published_at",
        ]

    def test_entity_type_by_slug(self, client):
        response = client.get("/api/entity-types/articles/editor-views")
        assert response.status_code == 200
        [view] = response.json()["data"]
        assert view["sections"][1]["layout"] == "two-column"

    def test_role_filter_and_all(self, client):
        client.put("/api/entity-types/movie/list-view", json=_list_body("admins", ["ADMIN"]))
        client.put("/api/entity-types/movie/list-view", json=_list_body("editors", ["EDITOR"]))

        filtered = client.get("/api/entity-types/movie/list-views?role=editor").json()["data"]
        assert [v["slug"] for v in filtered] == ["editors"]

        everything = client.get("/api/entity-types/movie/list-views?role=editor&all=true").json()["data"]
        assert [v["slug"] for v in everything] == ["admins", "editors"]

    def test_unknown_entity_type(self, client):
        response = client.get("/api/entity-types/person/list-views")
        assert response.status_code == 404

    def test_unknown_kind_route(self, client):
        response = client.get("/api/entity-types/movie/grid-views")
        assert response.status_code == 404


class TestSaveView:
    """Test PUT /api/entity-types/{ref}/{kind}-view."""

    def test_create(self, client):
        response = client.put(
            "/api/entity-types/movie/list-view",
            json=_list_body("compact", ["EDITOR"], ["EDITOR"]),
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["slug"] == "compact"
        assert data["entityTypeId"] == "movie"
        assert data["roles"] == ["EDITOR"]
        assert data["isDefault"] is True
        assert data["source"] == "database"
        assert data["id"]

    def test_roles_default_to_caller_role(self, client):
        body = _list_body("mine", [])
        response = client.put(
            "/api/entity-types/movie/list-view", json=body, headers={"X-Role": "editor"}
        )
        assert response.json()["data"]["roles"] == ["EDITOR"]

    def test_roles_default_to_admin_without_caller_role(self, client):
        response = client.put("/api/entity-types/movie/list-view", json=_list_body("mine", []))
        assert response.json()["data"]["roles"] == ["ADMIN"]

    def test_editor_view(self, client):
        response = client.put(
            "/api/entity-types/movie/editor-view",
            json={
                "label": "Compact Editor",
                "roles": ["EDITOR"],
                "sections": [{"id": "main", "layout": "two-column", "fields": ["title", "status"]}],
            },
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["slug"] == "compact-editor"
        assert data["sections"][0]["layout"] == "two-column"

    def test_validation_error(self, client):
        response = client.put(
            "/api/entity-types/movie/list-view",
            json={"roles": ["ADMIN"], "config": {"columns": []}},
        )
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert "slug or label is required" in detail["errors"]

    def test_conflict(self, client):
        client.put("/api/entity-types/movie/list-view", json=_list_body("a", ["ADMIN"]))
        client.put("/api/entity-types/movie/list-view", json=_list_body("b", ["ADMIN"]))
        response = client.put(
            "/api/entity-types/movie/list-view",
            json=_list_body("b", ["ADMIN"], current_slug="a"),
        )
        assert response.status_code == 409

    def test_rename(self, client):
        client.put("/api/entity-types/movie/list-view", json=_list_body("a", ["ADMIN"]))
        response = client.put(
            "/api/entity-types/movie/list-view",
            json=_list_body("renamed", ["ADMIN"], current_slug="a"),
        )
        assert response.status_code == 200
        slugs = [v["slug"] for v in client.get("/api/entity-types/movie/list-views").json()["data"]]
        assert slugs == ["renamed"]

    def test_rename_missing(self, client):
        response = client.put(
            "/api/entity-types/movie/list-view",
            json=_list_body("renamed", ["ADMIN"], current_slug="missing"),
        )
        assert response.status_code == 404

    def test_unknown_entity_type(self, client):
        response = client.put("/api/entity-types/person/list-view", json=_list_body("a", ["ADMIN"]))
        assert response.status_code == 404


class TestResolveView:
    """Test GET /api/entity-types/{ref}/{kind}-view."""

    def test_builtin_for_empty_bucket(self, client):
        response = client.get("/api/entity-types/movie/list-view?role=EDITOR")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["source"] == "builtin"
        assert data["id"] is None
        assert [c["key"] for c in data["config"]["columns"]] == ["title", "status", "updated_at"]

    def test_uses_caller_role(self, client):
        client.put("/api/entity-types/movie/list-view", json=_list_body("all", ["ADMIN", "EDITOR"], ["ADMIN"]))
        client.put("/api/entity-types/movie/list-view", json=_list_body("compact", ["EDITOR"], ["EDITOR"]))

        as_editor = client.get("/api/entity-types/movie/list-view", headers={"X-Role": "EDITOR"})
        assert as_editor.json()["data"]["slug"] == "compact"
        as_admin = client.get("/api/entity-types/movie/list-view")
        assert as_admin.json()["data"]["slug"] == "all"

    def test_default_moves_between_views(self, client):
        client.put("/api/entity-types/movie/list-view", json=_list_body("all", ["ADMIN", "EDITOR"], ["ADMIN"]))
        client.put("/api/entity-types/movie/list-view", json=_list_body("compact", ["EDITOR"], ["EDITOR"]))
        client.put("/api/entity-types/movie/list-view", json=_list_body("mine", ["EDITOR"], ["EDITOR"]))

        views = {
            v["slug"]: v
            for v in client.get("/api/entity-types/movie/list-views").json()["data"]
        }
        assert views["compact"]["default_roles"] == []
        assert views["mine"]["default_roles"] == ["EDITOR"]
        resolved = client.get("/api/entity-types/movie/list-view?role=EDITOR").json()["data"]
        assert resolved["slug"] == "mine"

    def test_editor_builtin_has_catalog_fields(self, client):
        data = client.get("/api/entity-types/movie/editor-view").json()["data"]
        assert data["sections"][0]["fields"][:4] == ["title", "slug", "status", "release_year"]


class TestDeleteView:
    """Test DELETE /api/entity-types/{ref}/{kind}-view/{slug}."""

    def test_delete(self, client):
        client.put("/api/entity-types/movie/list-view", json=_list_body("a", ["ADMIN"]))
        response = client.delete("/api/entity-types/movie/list-view/a")
        assert response.status_code == 200
        assert response.json() == {"success": True, "deleted": True}

        again = client.delete("/api/entity-types/movie/list-view/a")
        assert again.json() == {"success": True, "deleted": False}

    def test_delete_role_membership(self, client):
        client.put("/api/entity-types/movie/list-view", json=_list_body("a", ["ADMIN", "EDITOR"]))
        response = client.delete("/api/entity-types/movie/list-view/a?role=EDITOR")
        assert response.json()["deleted"] is True

        [view] = client.get("/api/entity-types/movie/list-views").json()["data"]
        assert view["roles"] == ["ADMIN"]

    def test_resolve_after_delete_falls_back(self, client):
        client.put("/api/entity-types/movie/list-view", json=_list_body("a", ["EDITOR"], ["EDITOR"]))
        client.delete("/api/entity-types/movie/list-view/a")
        data = client.get("/api/entity-types/movie/list-view?role=EDITOR").json()["data"]
        assert data["source"] == "builtin"
