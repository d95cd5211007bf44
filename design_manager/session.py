"""Editing session for one store's design document.

Status flow::

    LOADING -> READY (clean) <-> READY (dirty) -> SAVING -> READY (clean)
    LOADING -> READY (clean, default document, notice) on any load failure
    SAVING  -> ERROR (still dirty, error kept in ``last_error``)

Every edit replaces ``document`` with a new value, bumps ``revision`` and
marks the session dirty. A save snapshots the reconciled document together
with the revision it was taken at; when the save completes, dirty is cleared
only if nothing was edited in the meantime. Only one save may be in flight.

Concurrent editors are not coordinated: the last save wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from design_manager import documents, editor, ordering
from design_manager.logger import _log_error, _log_info, _log_warning
from design_manager.models import DesignDocument
from design_manager.reconciler import default_document, reconcile, reset_section

Loader = Callable[[str], Any]
Saver = Callable[[str, DesignDocument], Any]


class SessionStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    SAVING = "saving"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    level: str      # "info" | "warning" | "error"
    message: str


@dataclass(frozen=True)
class SaveTicket:
    revision: int
    document: DesignDocument


class DesignSession:
    """Working copy of a store's design plus its load/save state."""

    def __init__(
        self,
        entity_id: str,
        loader: Loader | None = None,
        saver: Saver | None = None,
    ) -> None:
        self.entity_id = entity_id
        self._loader = loader or documents.load_document
        self._saver = saver or documents.save_document
        self.status = SessionStatus.LOADING
        self.document: DesignDocument = default_document()
        self.dirty = False
        self.revision = 0
        self.is_default = True
        self.last_error: str | None = None
        self.notices: list[Notice] = []
        self._in_flight: SaveTicket | None = None

    # ── Loading ──────────────────────────────────────────────────────

    def _notify(self, level: str, message: str) -> None:
        self.notices.append(Notice(level, message))

    def load(self) -> DesignDocument:
        """Fetch and reconcile the stored document. Never raises."""
        self.status = SessionStatus.LOADING
        try:
            raw = self._loader(self.entity_id)
        except Exception as exc:
            _log_error(f"Loading design for store {self.entity_id} failed: {exc}")
            self._notify("warning", f"デザイン設定の読み込みに失敗しました。初期設定を表示しています。({exc})")
            raw = None
        else:
            if raw is not None and not isinstance(raw, (Mapping, str, DesignDocument)):
                _log_warning(f"Stored design for store {self.entity_id} is a {type(raw).__name__}")
                self._notify("warning", "保存されたデザイン設定の形式が不正です。初期設定を表示しています。")
                raw = None

        self.is_default = raw is None
        self.document = reconcile(raw)
        self.dirty = False
        self.last_error = None
        self.status = SessionStatus.READY
        return self.document

    # ── Editing ──────────────────────────────────────────────────────

    def apply(self, edit: Callable[[DesignDocument], DesignDocument]) -> DesignDocument:
        """Run an edit function on the working document.

        Exceptions from *edit* (``ValueError`` for invalid targets) propagate
        and leave the session untouched. An edit that changes nothing does
        not mark the session dirty.
        """
        updated = edit(self.document)
        if updated == self.document:
            return self.document
        self.document = updated
        self.revision += 1
        self.dirty = True
        if self.status is SessionStatus.ERROR:
            self.status = SessionStatus.READY
        return updated

    def move(self, section_id: str, direction: ordering.Direction | str) -> DesignDocument:
        return self.apply(lambda doc: ordering.move(doc, section_id, direction))

    def reorder(self, section_id: str, destination_index: int) -> DesignDocument:
        return self.apply(lambda doc: ordering.reorder(doc, section_id, destination_index))

    def set_visibility(self, section_id: str, visible: bool) -> DesignDocument:
        return self.apply(lambda doc: editor.set_visibility(doc, section_id, visible))

    def toggle_visibility(self, section_id: str) -> DesignDocument:
        return self.apply(lambda doc: editor.toggle_visibility(doc, section_id))

    def update_section_style(self, section_id: str, **changes: Any) -> DesignDocument:
        return self.apply(lambda doc: editor.update_section_style(doc, section_id, **changes))

    def update_global_style(self, **changes: Any) -> DesignDocument:
        return self.apply(lambda doc: editor.update_global_style(doc, **changes))

    def rename_section(self, section_id: str, title: str) -> DesignDocument:
        return self.apply(lambda doc: editor.rename_section(doc, section_id, title))

    def reset_section(self, section_id: str) -> DesignDocument:
        return self.apply(lambda doc: reset_section(doc, section_id))

    # ── Saving ───────────────────────────────────────────────────────

    @property
    def saving(self) -> bool:
        return self._in_flight is not None

    def begin_save(self) -> SaveTicket:
        """Snapshot the reconciled document for submission.

        Raises ``RuntimeError`` if a save is already in flight.
        """
        if self._in_flight is not None:
            raise RuntimeError("A save is already in progress")
        ticket = SaveTicket(revision=self.revision, document=reconcile(self.document))
        self._in_flight = ticket
        self.status = SessionStatus.SAVING
        return ticket

    def complete_save(self, ticket: SaveTicket, error: BaseException | str | None = None) -> bool:
        """Record the outcome of the save started with *ticket*.

        Returns True when the session ended up clean.
        """
        if ticket is not self._in_flight:
            raise RuntimeError("This save ticket is not the one in flight")
        self._in_flight = None

        if error is not None:
            self.last_error = str(error)
            self.status = SessionStatus.ERROR
            _log_error(f"Saving design for store {self.entity_id} failed: {error}")
            self._notify("error", f"保存に失敗しました: {error}")
            return False

        self.last_error = None
        self.is_default = False
        self.status = SessionStatus.READY
        if ticket.revision == self.revision:
            self.document = ticket.document
            self.dirty = False
            _log_info(f"Saved design for store {self.entity_id} (revision {ticket.revision})")
            self._notify("info", "デザイン設定を保存しました。")
        else:
            _log_info(
                f"Saved revision {ticket.revision} for store {self.entity_id}; "
                f"revision {self.revision} still unsaved"
            )
        return not self.dirty

    def save(self) -> bool:
        """Save synchronously through the configured saver."""
        ticket = self.begin_save()
        try:
            self._saver(self.entity_id, ticket.document)
        except Exception as exc:
            return self.complete_save(ticket, exc)
        return self.complete_save(ticket)

    def pop_notices(self) -> list[Notice]:
        notices, self.notices = self.notices, []
        return notices
