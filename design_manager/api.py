"""FastAPI backend for the store design manager.

Provides endpoints for the section catalog, loading and saving a store's
reconciled design document, section edits (move, reorder, visibility,
style, reset), the canonical store profile, and page previews as content
blocks or HTML.

Responses use the ``{"success": true, "data": ...}`` envelope the store
pages already expect.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Callable

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from design_manager import catalog, editor, ordering
from design_manager.documents import load_document, load_profile, save_document
from design_manager.logger import _log_error
from design_manager.models import DesignDocument, GlobalStyle, SectionStyleOverride
from design_manager.preview_html import DEVICE_VIEWS, render_html
from design_manager.profile import normalize_profile
from design_manager.reconciler import reconcile, reset_section
from design_manager.renderer import render

app = FastAPI(title="Design Manager API")


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class DesignPayload(BaseModel):
    """A full design document in its stored (camelCase) shape."""
    globalSettings: dict[str, Any] = {}
    sections: list[dict[str, Any]] = []


class MoveRequest(BaseModel):
    direction: str


class ReorderRequest(BaseModel):
    destination_index: int


class VisibilityRequest(BaseModel):
    visible: bool


class StyleRequest(BaseModel):
    """Snake_case style fields to merge; ``null`` clears a field."""
    changes: dict[str, Any]


class PreviewRequest(BaseModel):
    document: DesignPayload | None = None
    device_view: str = "pc"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load(entity_id: str) -> tuple[DesignDocument, bool]:
    try:
        raw = load_document(entity_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return reconcile(raw), raw is None


def _persist(entity_id: str, doc: DesignDocument) -> dict[str, Any]:
    try:
        record = save_document(entity_id, doc)
    except OSError as exc:
        _log_error(f"Could not store design for {entity_id}: {exc}")
        raise HTTPException(status_code=500, detail=f"Could not save design: {exc}")
    return {"success": True, "data": record["document"], "updatedAt": record["updated_at"]}


def _edit(entity_id: str, change: Callable[[DesignDocument], DesignDocument]) -> dict[str, Any]:
    doc, _ = _load(entity_id)
    try:
        updated = change(doc)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _persist(entity_id, updated)


def _style_changes(changes: dict[str, Any], style_type: type) -> dict[str, Any]:
    """Reject keys that are not fields of *style_type* before merging."""
    known = {f.name for f in fields(style_type)}
    unknown = sorted(set(changes) - known)
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown style fields: {', '.join(unknown)}")
    return changes


# ---------------------------------------------------------------------------
# Endpoints: catalog and documents
# ---------------------------------------------------------------------------

@app.get("/api/catalog")
def get_catalog() -> dict[str, Any]:
    """Return the current section kinds and the retired ids."""
    return {
        "version": catalog.CATALOG_VERSION,
        "sections": [entry.to_dict() for entry in catalog.entries()],
        "retired": sorted(catalog.retired_ids()),
    }


@app.get("/api/design/{entity_id}")
def get_design(entity_id: str) -> dict[str, Any]:
    """Return the store's reconciled design; ``isDefault`` if nothing was stored."""
    doc, is_default = _load(entity_id)
    return {"success": True, "data": doc.to_dict(), "isDefault": is_default}


@app.put("/api/design/{entity_id}")
def put_design(entity_id: str, payload: DesignPayload) -> dict[str, Any]:
    """Reconcile and store a full design document."""
    _load(entity_id)
    return _persist(entity_id, reconcile(payload.model_dump()))


# ---------------------------------------------------------------------------
# Endpoints: section edits
# ---------------------------------------------------------------------------

@app.post("/api/design/{entity_id}/sections/{section_id}/move")
def move_section(entity_id: str, section_id: str, request: MoveRequest) -> dict[str, Any]:
    return _edit(entity_id, lambda doc: ordering.move(doc, section_id, request.direction))


@app.post("/api/design/{entity_id}/sections/{section_id}/reorder")
def reorder_section(entity_id: str, section_id: str, request: ReorderRequest) -> dict[str, Any]:
    return _edit(
        entity_id, lambda doc: ordering.reorder(doc, section_id, request.destination_index)
    )


@app.post("/api/design/{entity_id}/sections/{section_id}/visibility")
def set_section_visibility(
    entity_id: str, section_id: str, request: VisibilityRequest
) -> dict[str, Any]:
    return _edit(entity_id, lambda doc: editor.set_visibility(doc, section_id, request.visible))


@app.post("/api/design/{entity_id}/sections/{section_id}/style")
def update_section_style(entity_id: str, section_id: str, request: StyleRequest) -> dict[str, Any]:
    changes = _style_changes(request.changes, SectionStyleOverride)
    return _edit(entity_id, lambda doc: editor.update_section_style(doc, section_id, **changes))


@app.post("/api/design/{entity_id}/global-style")
def update_global_style(entity_id: str, request: StyleRequest) -> dict[str, Any]:
    changes = _style_changes(request.changes, GlobalStyle)
    return _edit(entity_id, lambda doc: editor.update_global_style(doc, **changes))


@app.post("/api/design/{entity_id}/sections/{section_id}/reset")
def reset_design_section(entity_id: str, section_id: str) -> dict[str, Any]:
    """Restore a section's catalog title, style and visibility."""
    return _edit(entity_id, lambda doc: reset_section(doc, section_id))


# ---------------------------------------------------------------------------
# Endpoints: profile and preview
# ---------------------------------------------------------------------------

@app.get("/api/profile/{entity_id}")
def get_profile(entity_id: str) -> dict[str, Any]:
    """Return the canonical profile record. 404 if the store has none."""
    try:
        raw = load_profile(entity_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if raw is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return {"success": True, "data": normalize_profile(raw).to_dict()}


def _preview_inputs(entity_id: str, payload: DesignPayload | None):
    doc = reconcile(payload.model_dump()) if payload is not None else _load(entity_id)[0]
    try:
        profile = normalize_profile(load_profile(entity_id))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return doc, profile


@app.post("/api/preview/{entity_id}")
def preview(entity_id: str, request: PreviewRequest) -> dict[str, Any]:
    """Render a working document (or the stored one) into content blocks."""
    if request.device_view not in DEVICE_VIEWS:
        raise HTTPException(status_code=400, detail=f"Unknown device view: {request.device_view}")
    doc, profile = _preview_inputs(entity_id, request.document)
    blocks = render(doc, profile)
    return {
        "success": True,
        "data": {
            "blocks": [block.to_dict() for block in blocks],
            "html": render_html(blocks, doc.global_style, request.device_view),
            "isFallbackProfile": profile.is_fallback,
        },
    }


@app.get("/api/preview/{entity_id}/html", response_class=HTMLResponse)
def preview_html(entity_id: str, device_view: str = "pc") -> str:
    """HTML preview of the stored document."""
    if device_view not in DEVICE_VIEWS:
        raise HTTPException(status_code=400, detail=f"Unknown device view: {device_view}")
    doc, profile = _preview_inputs(entity_id, None)
    return render_html(render(doc, profile), doc.global_style, device_view)
