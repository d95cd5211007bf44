"""Tests for design_manager/catalog.py — section catalog."""

from __future__ import annotations

import pytest

from design_manager import catalog
from design_manager.config import set_config_value


class TestRequiredIds:
    def test_header_comes_first(self):
        assert catalog.required_ids()[0] == "header"

    def test_ids_are_unique(self):
        ids = catalog.required_ids()
        assert len(ids) == len(set(ids))

    def test_canonical_order(self):
        assert catalog.required_ids() == [
            "header", "main_visual", "catchphrase", "salary", "schedule",
            "security_measures", "photo_gallery", "special_offers", "benefits",
            "requirements", "contact", "sns_links", "access", "blog", "footer",
        ]

    def test_only_header_is_fixed(self):
        fixed = [e.id for e in catalog.entries() if e.fixed]
        assert fixed == ["header"]

    def test_main_visual_and_footer_start_hidden(self):
        hidden = {e.id for e in catalog.entries() if not e.default_visible}
        assert hidden == {"main_visual", "footer"}


class TestRetiredIds:
    def test_retired_ids_not_required(self):
        for section_id in catalog.retired_ids():
            assert not catalog.is_required(section_id)

    def test_known_legacy_ids_are_retired(self):
        assert catalog.is_retired("salary_examples")
        assert catalog.is_retired("facility_features")
        assert not catalog.is_retired("salary")

    def test_config_adds_retired_ids(self):
        set_config_value("extra_retired_ids", ["old_banner", "salary"])
        assert catalog.is_retired("old_banner")
        # a current catalog id can never be retired through config
        assert not catalog.is_retired("salary")

    def test_bad_config_value_ignored(self):
        set_config_value("extra_retired_ids", "old_banner")
        assert not catalog.is_retired("old_banner")


class TestDefaultsFor:
    def test_returns_entry(self):
        entry = catalog.defaults_for("salary")
        assert entry.default_title == "給与情報"
        assert entry.default_style.border_color == "#ffd6dd"

    def test_unknown_id_raises_key_error(self):
        with pytest.raises(KeyError, match="Unknown section id"):
            catalog.defaults_for("nope")

    def test_section_title_falls_back_to_id(self):
        assert catalog.section_title("contact") == "問い合わせ"
        assert catalog.section_title("future_kind") == "future_kind"

    def test_to_dict_uses_camel_case(self):
        d = catalog.defaults_for("header").to_dict()
        assert d["defaultTitle"] == "ヘッダー"
        assert d["fixed"] is True
        assert d["defaultStyle"]["titleColor"] == "#ff4d7d"
