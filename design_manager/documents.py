"""Local persistence for design documents and store profiles.

Design documents are stored as JSON files in data/designs/, one per store
(``<entity_id>.json``), wrapped with the store id and timestamps. Profiles
live in data/profiles/ in whatever shape the profile source delivered them;
``profile.normalize_profile`` deals with that shape on the way out.

Loads return None for missing or corrupt files. Saves always write the whole
document and let ``OSError`` propagate so the caller can report it.
"""

from __future__ import annotations

import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any

from design_manager.logger import _log_info, _log_warning
from design_manager.models import DesignDocument

DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "designs"
PROFILE_DIR = Path(__file__).resolve().parent.parent / "data" / "profiles"

_ENTITY_ID = re.compile(r"^[A-Za-z0-9_-]+$")


def _check_entity_id(entity_id: str) -> str:
    if not _ENTITY_ID.match(entity_id or ""):
        raise ValueError(f"Invalid store id: {entity_id!r}")
    return entity_id


def _read_json(path: Path) -> Any:
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError):
        _log_warning(f"Could not read {path.name}; treating as missing")
        return None


# ---------------------------------------------------------------------------
# Design documents
# ---------------------------------------------------------------------------

def save_document(entity_id: str, doc: DesignDocument) -> dict:
    """Write the full document for a store. Returns the stored record."""
    _check_entity_id(entity_id)
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    path = DATA_DIR / f"{entity_id}.json"

    now = datetime.now().isoformat()
    created_at = now
    existing = _read_json(path)
    if isinstance(existing, dict):
        created_at = existing.get("created_at", now)

    record = {
        "entity_id": entity_id,
        "document": doc.to_dict(),
        "created_at": created_at,
        "updated_at": now,
    }
    path.write_text(json.dumps(record, indent=2, ensure_ascii=False), encoding="utf-8")
    _log_info(f"Saved design for store {entity_id}")
    return record


def load_document(entity_id: str) -> dict | None:
    """Return the stored (unreconciled) document mapping, or None."""
    _check_entity_id(entity_id)
    record = _read_json(DATA_DIR / f"{entity_id}.json")
    if not isinstance(record, dict):
        return None
    document = record.get("document")
    return document if isinstance(document, dict) else None


def list_documents() -> list[dict]:
    """Summary info for every stored design, most recently updated first."""
    if not DATA_DIR.exists():
        return []
    summaries = []
    for path in DATA_DIR.glob("*.json"):
        record = _read_json(path)
        if not isinstance(record, dict):
            continue
        summaries.append({
            "entity_id": record.get("entity_id", path.stem),
            "updated_at": record.get("updated_at", ""),
        })
    summaries.sort(key=lambda s: s["updated_at"], reverse=True)
    return summaries


def delete_document(entity_id: str) -> bool:
    """Delete a store's design. Returns True if a file was removed."""
    _check_entity_id(entity_id)
    path = DATA_DIR / f"{entity_id}.json"
    if path.exists():
        path.unlink()
        return True
    return False


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

def save_profile(entity_id: str, profile: dict) -> None:
    _check_entity_id(entity_id)
    PROFILE_DIR.mkdir(parents=True, exist_ok=True)
    path = PROFILE_DIR / f"{entity_id}.json"
    path.write_text(json.dumps(profile, indent=2, ensure_ascii=False), encoding="utf-8")


def load_profile(entity_id: str) -> dict | None:
    """Return the raw stored profile, or None if missing or corrupt."""
    _check_entity_id(entity_id)
    data = _read_json(PROFILE_DIR / f"{entity_id}.json")
    return data if isinstance(data, dict) else None
