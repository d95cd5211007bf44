"""Tests for design_manager/session.py — editing session state machine."""

from __future__ import annotations

import pytest

from design_manager.reconciler import default_document, reconcile
from design_manager.session import DesignSession, SessionStatus


class FakeStore:
    """In-memory loader/saver pair."""

    def __init__(self, stored=None, fail_load=False, fail_save=False):
        self.stored = stored
        self.fail_load = fail_load
        self.fail_save = fail_save
        self.saved = []

    def load(self, entity_id):
        if self.fail_load:
            raise ConnectionError("backend unreachable")
        return self.stored

    def save(self, entity_id, doc):
        if self.fail_save:
            raise OSError("disk full")
        self.saved.append(doc)
        self.stored = doc.to_dict()


def _session(store: FakeStore) -> DesignSession:
    return DesignSession("store1", loader=store.load, saver=store.save)


# ── Loading ───────────────────────────────────────────────────────────────


class TestLoad:
    def test_starts_loading(self):
        assert _session(FakeStore()).status is SessionStatus.LOADING

    def test_load_reconciles_stored_document(self):
        stored = {"sections": [{"id": "salary", "order": 1}, {"id": "sns", "order": 2}]}
        session = _session(FakeStore(stored))
        doc = session.load()
        assert doc == reconcile(stored)
        assert session.status is SessionStatus.READY
        assert session.dirty is False
        assert session.is_default is False

    def test_nothing_stored_gives_default(self):
        session = _session(FakeStore())
        assert session.load() == default_document()
        assert session.is_default is True
        assert session.notices == []

    def test_load_failure_falls_back_with_notice(self):
        session = _session(FakeStore(fail_load=True))
        assert session.load() == default_document()
        assert session.status is SessionStatus.READY
        assert session.dirty is False
        assert session.notices[0].level == "warning"
        assert "backend unreachable" in session.notices[0].message

    def test_invalid_payload_treated_as_missing(self):
        store = FakeStore()
        store.stored = 12345
        session = _session(store)
        assert session.load() == default_document()
        assert len(session.notices) == 1


# ── Editing ───────────────────────────────────────────────────────────────


class TestEditing:
    def test_edit_marks_dirty_and_bumps_revision(self):
        session = _session(FakeStore())
        session.load()
        session.move("salary", "down")
        assert session.dirty is True
        assert session.revision == 1
        session.set_visibility("blog", False)
        assert session.revision == 2

    def test_no_op_edit_stays_clean(self):
        session = _session(FakeStore())
        session.load()
        first = session.document.body()[0].id
        session.move(first, "up")
        assert session.dirty is False
        assert session.revision == 0

    def test_invalid_edit_raises_and_changes_nothing(self):
        session = _session(FakeStore())
        session.load()
        before = session.document
        with pytest.raises(ValueError):
            session.set_visibility("header", False)
        assert session.document is before
        assert session.dirty is False

    def test_all_edit_operations(self):
        session = _session(FakeStore())
        session.load()
        session.reorder("blog", 0)
        session.toggle_visibility("footer")
        session.update_section_style("salary", padding=0)
        session.update_global_style(main_color="#000000")
        session.rename_section("salary", "お給料")
        session.reset_section("salary")
        doc = session.document
        assert doc.body()[0].id == "blog"
        assert doc.get("footer").visible is True
        assert doc.get("salary").title == "給与情報"
        assert doc.global_style.main_color == "#000000"
        assert session.revision == 6


# ── Saving ────────────────────────────────────────────────────────────────


class TestSave:
    def test_save_clears_dirty(self):
        store = FakeStore()
        session = _session(store)
        session.load()
        session.move("salary", "down")
        assert session.save() is True
        assert session.dirty is False
        assert session.status is SessionStatus.READY
        assert store.saved[0] == session.document

    def test_round_trip(self):
        store = FakeStore({"sections": [{"id": "contact", "order": 1}, {"id": "privacy_measures", "order": 2}]})
        session = _session(store)
        session.load()
        session.reorder("contact", 3)
        session.save()
        reloaded = _session(store)
        assert reloaded.load() == session.document

    def test_save_failure_stays_dirty(self):
        session = _session(FakeStore(fail_save=True))
        session.load()
        session.move("salary", "down")
        assert session.save() is False
        assert session.dirty is True
        assert session.status is SessionStatus.ERROR
        assert session.last_error == "disk full"
        assert session.notices[-1].level == "error"

    def test_edit_after_failed_save_returns_to_ready(self):
        session = _session(FakeStore(fail_save=True))
        session.load()
        session.move("salary", "down")
        session.save()
        session.move("salary", "up")
        assert session.status is SessionStatus.READY
        assert session.dirty is True

    def test_edit_during_save_keeps_dirty(self):
        session = _session(FakeStore())
        session.load()
        session.move("salary", "down")
        ticket = session.begin_save()
        assert session.status is SessionStatus.SAVING
        session.set_visibility("blog", False)
        assert session.complete_save(ticket) is False
        assert session.dirty is True
        assert session.document.get("blog").visible is False

    def test_one_save_in_flight(self):
        session = _session(FakeStore())
        session.load()
        session.begin_save()
        with pytest.raises(RuntimeError):
            session.begin_save()

    def test_stale_ticket_rejected(self):
        session = _session(FakeStore())
        session.load()
        ticket = session.begin_save()
        session.complete_save(ticket)
        with pytest.raises(RuntimeError):
            session.complete_save(ticket)

    def test_save_submits_reconciled_document(self):
        store = FakeStore()
        session = _session(store)
        session.load()
        session.move("salary", "down")
        ticket = session.begin_save()
        assert ticket.document == reconcile(session.document)
        session.complete_save(ticket, "validation failed")
        assert session.last_error == "validation failed"

    def test_pop_notices(self):
        session = _session(FakeStore(fail_load=True))
        session.load()
        assert len(session.pop_notices()) == 1
        assert session.notices == []
