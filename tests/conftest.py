"""Shared fixtures for all tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from loguru import logger

import design_manager.config as config_mod
import design_manager.documents as documents_mod


@pytest.fixture(autouse=True)
def tmp_config_dir(tmp_path: Path):
    """Point the design-manager config at an empty temporary directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    with patch.object(config_mod, "CONFIG_DIR", config_dir):
        yield config_dir


@pytest.fixture()
def tmp_store(tmp_path: Path):
    """Redirect design documents and profiles to temporary directories."""
    designs = tmp_path / "designs"
    profiles = tmp_path / "profiles"
    with patch.object(documents_mod, "DATA_DIR", designs), \
         patch.object(documents_mod, "PROFILE_DIR", profiles):
        yield designs, profiles


@pytest.fixture()
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture()
def sample_profile():
    """A store profile in the mixed legacy shapes the profile source sends."""
    return {
        "business_name": "Salon Rose",
        "service_type": "エステ",
        "catch_phrase": "未経験から安心して始められます",
        "description": "完全個室のリラクゼーションサロンです。",
        "location": "東京都渋谷区",
        "address": "東京都渋谷区道玄坂1-2-3",
        "access_info": "渋谷駅から徒歩5分",
        "business_hours": "10時〜22時",
        "minimum_guarantee": 30000,
        "maximum_guarantee": "50,000",
        "working_time_hours": 6,
        "average_hourly_pay": 30000,
        "contact_phone": "03-0000-0000",
        "phone_numbers": "[]",
        "email_addresses": ["recruit@example.com"],
        "contact_email": "info@example.com",
        "benefits": "送迎あり、個室待機,衣装貸与",
        "days_available": "月,火,水",
        "transportation_support": True,
        "gallery_photos": '[{"url": "https://example.com/b.jpg", "order": 2},'
                          ' {"url": "https://example.com/a.jpg", "order": 1, "title": "受付"}]',
        "special_offers": [{"title": "入店祝い金", "description": "最大5万円"}],
        "security_measures": '[{"title": "身バレ対策", "description": "顔出しなし"}]',
        "privacy_measures": "写真加工対応\nアリバイ対策",
        "salary_examples": ["勤務時間6時間　平均給与55000円"],
        "requirements": '{"age_min": 18, "age_max": 35}',
        "working_hours": {"start_time": "10:00", "end_time": "22:00", "min_hours": 3, "max_hours": 8},
        "sns_urls": ["https://instagram.com/salonrose"],
        "blog_posts": [
            {"title": "新人さん紹介", "content": "<p>今月から<b>新人</b>さんが入りました</p>"},
        ],
    }
