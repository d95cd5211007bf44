"""Tests for design_manager/api.py — FastAPI endpoints."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

import design_manager.api as api_mod
from design_manager import catalog
from design_manager.documents import save_profile


@pytest.fixture()
def client(tmp_store):
    return TestClient(api_mod.app)


def _body_ids(data: dict) -> list[str]:
    return [s["id"] for s in data["sections"] if s["id"] != "header"]


# ── Catalog ───────────────────────────────────────────────────────────────


def test_catalog(client):
    resp = client.get("/api/catalog")
    assert resp.status_code == 200
    data = resp.json()
    assert [s["id"] for s in data["sections"]] == catalog.required_ids()
    assert "salary_examples" in data["retired"]


# ── Load / save ───────────────────────────────────────────────────────────


def test_get_default_design(client):
    resp = client.get("/api/design/store1")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["isDefault"] is True
    assert body["data"]["sections"][0]["id"] == "header"


def test_put_reconciles_and_persists(client):
    payload = {
        "globalSettings": {"mainColor": "#000000"},
        "sections": [
            {"id": "header", "order": 4, "visible": False},
            {"id": "campaigns", "order": 1},
            {"id": "contact", "order": 2},
        ],
    }
    resp = client.put("/api/design/store1", json=payload)
    assert resp.status_code == 200
    saved = resp.json()["data"]
    assert "campaigns" not in {s["id"] for s in saved["sections"]}
    assert saved["sections"][0] == {**saved["sections"][0], "id": "header", "order": 0, "visible": True}

    loaded = client.get("/api/design/store1").json()
    assert loaded["isDefault"] is False
    assert loaded["data"] == saved
    assert loaded["data"]["globalSettings"]["mainColor"] == "#000000"


def test_invalid_store_id(client):
    assert client.get("/api/design/bad id").status_code == 400


def test_save_failure_returns_500(client):
    with patch.object(api_mod, "save_document", side_effect=OSError("disk full")):
        resp = client.put("/api/design/store1", json={"sections": []})
    assert resp.status_code == 500
    assert "disk full" in resp.json()["detail"]


# ── Section edits ─────────────────────────────────────────────────────────


def test_move_section(client):
    before = _body_ids(client.get("/api/design/store1").json()["data"])
    resp = client.post(f"/api/design/store1/sections/{before[0]}/move", json={"direction": "down"})
    assert resp.status_code == 200
    after = _body_ids(resp.json()["data"])
    assert after[:2] == [before[1], before[0]]
    assert _body_ids(client.get("/api/design/store1").json()["data"]) == after


def test_move_header_rejected(client):
    resp = client.post("/api/design/store1/sections/header/move", json={"direction": "down"})
    assert resp.status_code == 400


def test_move_bad_direction(client):
    resp = client.post("/api/design/store1/sections/salary/move", json={"direction": "left"})
    assert resp.status_code == 400


def test_reorder_section(client):
    resp = client.post("/api/design/store1/sections/blog/reorder", json={"destination_index": 0})
    assert resp.status_code == 200
    assert _body_ids(resp.json()["data"])[0] == "blog"


def test_visibility(client):
    resp = client.post("/api/design/store1/sections/salary/visibility", json={"visible": False})
    salary = next(s for s in resp.json()["data"]["sections"] if s["id"] == "salary")
    assert salary["visible"] is False

    resp = client.post("/api/design/store1/sections/header/visibility", json={"visible": False})
    assert resp.status_code == 400


def test_section_style_and_reset(client):
    resp = client.post(
        "/api/design/store1/sections/salary/style",
        json={"changes": {"background_color": "#000000", "padding": 0}},
    )
    salary = next(s for s in resp.json()["data"]["sections"] if s["id"] == "salary")
    assert salary["settings"]["backgroundColor"] == "#000000"
    assert salary["settings"]["padding"] == 0

    resp = client.post("/api/design/store1/sections/salary/reset")
    salary = next(s for s in resp.json()["data"]["sections"] if s["id"] == "salary")
    assert salary["settings"]["backgroundColor"] == "#ffffff"


def test_invalid_style_rejected(client):
    resp = client.post("/api/design/store1/sections/salary/style", json={"changes": {"shadow": 1}})
    assert resp.status_code == 400


def test_global_style(client):
    resp = client.post("/api/design/store1/global-style", json={"changes": {"hide_section_titles": False}})
    assert resp.json()["data"]["globalSettings"]["hideSectionTitles"] is False


@pytest.mark.parametrize("key", ["doc", "section_id", "self"])
def test_section_style_parameter_names_rejected(client, key):
    resp = client.post("/api/design/store1/sections/salary/style", json={"changes": {key: "#000000"}})
    assert resp.status_code == 400
    assert key in resp.json()["detail"]


@pytest.mark.parametrize("key", ["doc", "self"])
def test_global_style_parameter_names_rejected(client, key):
    resp = client.post("/api/design/store1/global-style", json={"changes": {key: 1}})
    assert resp.status_code == 400


# ── Profile and preview ───────────────────────────────────────────────────


def test_profile_not_found(client):
    assert client.get("/api/profile/store1").status_code == 404


def test_profile_normalized(client, sample_profile):
    save_profile("store1", sample_profile)
    data = client.get("/api/profile/store1").json()["data"]
    assert data["days_available"] == ["月", "火", "水"]
    assert data["benefits"] == ["送迎あり", "個室待機", "衣装貸与"]


def test_preview_working_document(client, sample_profile):
    save_profile("store1", sample_profile)
    working = {"sections": [{"id": "salary", "order": 1}]}
    resp = client.post("/api/preview/store1", json={"document": working, "device_view": "smartphone"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    salary = next(b for b in data["blocks"] if b["variant"] == "salary")
    assert salary["fields"]["hourly_rate"] == 5000
    assert data["isFallbackProfile"] is False
    assert "max-width: 100%" in data["html"]
    # a preview never stores anything
    assert client.get("/api/design/store1").json()["isDefault"] is True


def test_preview_without_profile_uses_fallback(client):
    data = client.post("/api/preview/store1", json={}).json()["data"]
    assert data["isFallbackProfile"] is True


def test_preview_bad_device(client):
    assert client.post("/api/preview/store1", json={"device_view": "tv"}).status_code == 400


def test_preview_html(client, sample_profile):
    save_profile("store1", sample_profile)
    resp = client.get("/api/preview/store1/html")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "Salon Rose" in resp.text
