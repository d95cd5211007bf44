"""Visibility and style edits on a design document.

Each function returns a new ``DesignDocument``; none of them touch section
order (see ``ordering``).
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from design_manager.models import HEADER_ID, DesignDocument, Section


def _section(doc: DesignDocument, section_id: str) -> Section:
    section = doc.get(section_id)
    if section is None:
        raise ValueError(f"Section {section_id!r} is not in this document")
    return section


def set_visibility(doc: DesignDocument, section_id: str, visible: bool) -> DesignDocument:
    """Show or hide a section. The header is always visible."""
    section = _section(doc, section_id)
    if section_id == HEADER_ID and not visible:
        raise ValueError("The header section cannot be hidden")
    if section.visible == visible:
        return doc
    return doc.replace_section(replace(section, visible=visible))


def toggle_visibility(doc: DesignDocument, section_id: str) -> DesignDocument:
    return set_visibility(doc, section_id, not _section(doc, section_id).visible)


def update_section_style(doc: DesignDocument, section_id: str, **changes: Any) -> DesignDocument:
    """Merge snake_case style *changes* into a section's override.

    Passing ``None`` for a field clears it so the resolver falls back again.
    """
    section = _section(doc, section_id)
    return doc.replace_section(replace(section, settings=section.settings.merged(**changes)))


def update_global_style(doc: DesignDocument, **changes: Any) -> DesignDocument:
    return replace(doc, global_style=doc.global_style.merged(**changes))


def rename_section(doc: DesignDocument, section_id: str, title: str) -> DesignDocument:
    section = _section(doc, section_id)
    if not title.strip():
        raise ValueError("Section title cannot be empty")
    return doc.replace_section(replace(section, title=title.strip()))
