"""Section reordering for the design manager.

Two ways to change the order, both returning a new document whose non-header
orders are still exactly ``1..N``:

* ``move``: the up/down buttons, swapping a section with its neighbour;
* ``reorder``: drag and drop, pulling a section out of the sequence and
  dropping it at a new position.

Moving a section from position p to q with ``reorder`` ends in the same
order assignment as |p - q| ``move`` calls in that direction. The header is
never part of either sequence.
"""

from __future__ import annotations

from dataclasses import replace
from enum import Enum

from design_manager.logger import _log_warning
from design_manager.models import HEADER_ID, DesignDocument, Section


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


def _orderable(doc: DesignDocument, section_id: str) -> Section:
    if section_id == HEADER_ID:
        raise ValueError("The header section cannot be reordered")
    section = doc.get(section_id)
    if section is None:
        raise ValueError(f"Section {section_id!r} is not in this document")
    return section


def move(doc: DesignDocument, section_id: str, direction: Direction | str) -> DesignDocument:
    """Swap a section with its neighbour above or below.

    A section already at the boundary stays put and the same document comes
    back. Raises ``ValueError`` for the header, an absent id, or a direction
    other than ``"up"``/``"down"``.
    """
    section = _orderable(doc, section_id)
    step = -1 if Direction(direction) is Direction.UP else 1

    body = doc.body()
    current = section.order
    target = max(1, min(len(body), current + step))
    if target == current:
        return doc

    neighbour = next((s for s in body if s.order == target), None)
    if neighbour is None:
        _log_warning(f"No section holds order {target}; document needs reconciling")
        return doc

    return doc.with_sections([
        replace(s, order=target) if s.id == section.id
        else replace(s, order=current) if s.id == neighbour.id
        else s
        for s in doc.sections
    ])


def reorder(doc: DesignDocument, section_id: str, destination_index: int) -> DesignDocument:
    """Relocate a section to *destination_index* and renumber ``1..N``.

    *destination_index* is 0-based within the non-header sequence and is
    clamped to the valid range, matching what a drag-and-drop list reports.
    """
    _orderable(doc, section_id)
    body = doc.body()
    ids = [s.id for s in body]
    ids.remove(section_id)
    index = max(0, min(len(ids), destination_index))
    ids.insert(index, section_id)

    new_orders = {sid: position for position, sid in enumerate(ids, start=1)}
    return doc.with_sections([
        s if s.is_header else replace(s, order=new_orders[s.id])
        for s in doc.sections
    ])


def position_of(doc: DesignDocument, section_id: str) -> int:
    """0-based index of a section in the non-header sequence."""
    _orderable(doc, section_id)
    return [s.id for s in doc.body()].index(section_id)
