"""Reconcile stored design documents against the current section catalog.

Whatever was stored (nothing at all, a document written under an older
catalog, a hand-edited JSON blob with a broken header) comes out of
``reconcile`` as a document that satisfies every invariant:

* exactly one ``header`` section, order 0, visible;
* the other N sections hold orders ``1..N`` with no gaps or duplicates;
* no retired ids, and every current catalog id present.

``reconcile`` never raises and ``reconcile(reconcile(d)) == reconcile(d)``.
"""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any, Mapping

from design_manager import catalog
from design_manager.logger import _log_debug, _log_warning
from design_manager.models import (
    HEADER_ID,
    DesignDocument,
    GlobalStyle,
    RawSection,
    Section,
    SectionStyleOverride,
)

DocumentInput = DesignDocument | Mapping[str, Any] | str | None


def _section_from_catalog(section_id: str, order: int) -> Section:
    entry = catalog.defaults_for(section_id)
    return Section(
        id=section_id,
        title=entry.default_title,
        order=order,
        visible=entry.default_visible,
        settings=entry.default_style,
    )


def default_document(global_style: GlobalStyle | None = None) -> DesignDocument:
    """A fresh document: one section per catalog id, in catalog order."""
    sections = [
        _section_from_catalog(section_id, order)
        for order, section_id in enumerate(catalog.required_ids())
    ]
    return DesignDocument(global_style=global_style or GlobalStyle(), sections=tuple(sections))


# ---------------------------------------------------------------------------
# Input parsing
# ---------------------------------------------------------------------------

def _load_json(text: str, what: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        _log_warning(f"Could not parse {what} JSON; using defaults")
        return None


def _parse_input(doc: DocumentInput) -> tuple[GlobalStyle, list[RawSection]]:
    """Split any accepted input shape into a global style and raw sections.

    Raw sections come back sorted by stored order (entries without an order
    after the numbered ones, ties kept in list order) with duplicate ids
    removed, first one wins.
    """
    if isinstance(doc, DesignDocument):
        data: Any = doc.to_dict()
    elif isinstance(doc, str):
        data = _load_json(doc, "design document") if doc.strip() else None
    else:
        data = doc

    if data is None:
        return GlobalStyle(), []
    if not isinstance(data, Mapping):
        _log_warning(f"Design document is a {type(data).__name__}, not an object; using defaults")
        return GlobalStyle(), []

    global_raw = data.get("globalSettings")
    if isinstance(global_raw, str):
        global_raw = _load_json(global_raw, "globalSettings")
    global_style = GlobalStyle.from_dict(global_raw)

    sections_raw = data.get("sections")
    if isinstance(sections_raw, str):
        sections_raw = _load_json(sections_raw, "sections")
    if sections_raw is None:
        sections_raw = []
    elif not isinstance(sections_raw, list):
        _log_warning("Design document sections is not a list; starting from the catalog")
        sections_raw = []

    indexed: list[tuple[int, RawSection]] = []
    for index, item in enumerate(sections_raw):
        parsed = RawSection.from_dict(item)
        if parsed is None:
            _log_warning(f"Dropping malformed section at position {index}")
            continue
        indexed.append((index, parsed))

    indexed.sort(key=lambda pair: (pair[1].order is None, pair[1].order or 0, pair[0]))

    seen: set[str] = set()
    raw_sections: list[RawSection] = []
    for _, section in indexed:
        if section.id in seen:
            _log_warning(f"Dropping duplicate section {section.id!r}")
            continue
        seen.add(section.id)
        raw_sections.append(section)
    return global_style, raw_sections


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------

def _backfill_positions(present_ids: list[str]) -> list[str]:
    """Insert every missing catalog id after its nearest catalog predecessor.

    *present_ids* keeps its relative order, so a store owner's reordering
    survives a save/load cycle.
    """
    required = [i for i in catalog.required_ids() if i != HEADER_ID]
    ordered = list(present_ids)
    for position, section_id in enumerate(required):
        if section_id in ordered:
            continue
        insert_at = 0
        for predecessor in reversed(required[:position]):
            if predecessor in ordered:
                insert_at = ordered.index(predecessor) + 1
                break
        ordered.insert(insert_at, section_id)
    return ordered


def _kept_settings(raw: RawSection, section_id: str) -> SectionStyleOverride:
    if raw.settings == SectionStyleOverride() and catalog.is_required(section_id):
        return catalog.defaults_for(section_id).default_style
    return raw.settings


def reconcile(doc: DocumentInput) -> DesignDocument:
    """Merge a stored (possibly partial or legacy) document with the catalog."""
    global_style, raw_sections = _parse_input(doc)
    if not raw_sections:
        return default_document(global_style)

    header_raw: RawSection | None = None
    known: dict[str, RawSection] = {}
    unknown: list[RawSection] = []
    dropped: list[str] = []

    for raw in raw_sections:
        if raw.id == HEADER_ID:
            header_raw = raw
        elif catalog.is_retired(raw.id):
            dropped.append(raw.id)
        elif catalog.is_required(raw.id):
            known[raw.id] = raw
        else:
            unknown.append(raw)

    if dropped:
        _log_warning(f"Dropping retired sections: {', '.join(dropped)}")

    sections: list[Section] = []
    ordered_ids = _backfill_positions(list(known))
    for order, section_id in enumerate(ordered_ids, start=1):
        raw = known.get(section_id)
        if raw is None:
            _log_debug(f"Adding missing section {section_id!r} from catalog defaults")
            sections.append(_section_from_catalog(section_id, order))
            continue
        entry = catalog.defaults_for(section_id)
        sections.append(Section(
            id=section_id,
            title=raw.title or entry.default_title,
            order=order,
            visible=entry.default_visible if raw.visible is None else raw.visible,
            settings=_kept_settings(raw, section_id),
        ))

    # ids from a newer catalog: keep them, after everything we know about
    next_order = len(sections) + 1
    for raw in unknown:
        sections.append(Section(
            id=raw.id,
            title=raw.title or catalog.section_title(raw.id),
            order=next_order,
            visible=True if raw.visible is None else raw.visible,
            settings=raw.settings,
        ))
        next_order += 1

    if header_raw is None:
        _log_debug("Header section missing; synthesizing from catalog")
        header = _section_from_catalog(HEADER_ID, 0)
    else:
        header = Section(
            id=HEADER_ID,
            title=header_raw.title or catalog.defaults_for(HEADER_ID).default_title,
            order=0,
            visible=True,
            settings=_kept_settings(header_raw, HEADER_ID),
        )

    return DesignDocument(global_style=global_style, sections=(header, *sections))


def reset_section(doc: DesignDocument, section_id: str) -> DesignDocument:
    """Restore a catalog section's default title, style and visibility.

    The section keeps its position. Raises ``ValueError`` if the section is
    not in the document or is not a catalog section.
    """
    current = doc.get(section_id)
    if current is None:
        raise ValueError(f"Section {section_id!r} is not in this document")
    if not catalog.is_required(section_id):
        raise ValueError(f"Section {section_id!r} has no catalog defaults")
    entry = catalog.defaults_for(section_id)
    restored = replace(
        current,
        title=entry.default_title,
        visible=True if entry.fixed else entry.default_visible,
        settings=entry.default_style,
    )
    return doc.replace_section(restored)
