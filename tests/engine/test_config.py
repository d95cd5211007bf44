"""Tests for design_manager/config.py — JSON config and environment."""

from __future__ import annotations

import json

from design_manager import config


class TestConfigStore:
    def test_missing_file_gives_defaults(self):
        assert config.load_config() is None
        assert config.get_config_value("gallery_limit") == 6

    def test_explicit_default_wins_when_absent(self):
        assert config.get_config_value("unknown_key", "fallback") == "fallback"

    def test_set_preserves_other_keys(self, tmp_config_dir):
        config.set_config_value("gallery_limit", 9)
        config.set_config_value("blog_posts_to_show", 5)
        data = json.loads((tmp_config_dir / "design-manager.json").read_text())
        assert data == {"gallery_limit": 9, "blog_posts_to_show": 5}

    def test_corrupt_file_ignored(self, tmp_config_dir):
        (tmp_config_dir / "design-manager.json").write_text("{bad")
        assert config.load_config() is None
        assert config.get_config_value("blog_excerpt_length") == 150

    def test_int_setting_rejects_bad_values(self):
        for bad in (0, -2, "12", True, 2.5):
            config.set_config_value("blog_posts_to_show", bad)
            assert config.get_int_setting("blog_posts_to_show") == 3
        config.set_config_value("blog_posts_to_show", 4)
        assert config.get_int_setting("blog_posts_to_show") == 4


class TestEnvironment:
    def test_api_base_strips_slash(self, monkeypatch):
        monkeypatch.setenv("DESIGN_API_BASE", "https://example.com/")
        assert config.api_base() == "https://example.com"

    def test_api_token_default_empty(self, monkeypatch):
        monkeypatch.delenv("DESIGN_API_TOKEN", raising=False)
        assert config.api_token() == ""

    def test_log_dir_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DESIGN_LOG_DIR", str(tmp_path))
        assert config.log_dir() == tmp_path
