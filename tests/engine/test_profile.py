"""Tests for design_manager/profile.py — profile adapter."""

from __future__ import annotations

import json
from dataclasses import FrozenInstanceError

import pytest

from design_manager.profile import (
    ALL_DAYS,
    normalize_days,
    normalize_profile,
    parse_json_field,
    to_number,
)


class TestHelpers:
    def test_parse_json_field_decodes(self):
        assert parse_json_field("x", '["a", "b"]') == ["a", "b"]

    def test_parse_json_field_keeps_raw_on_failure(self, log_messages):
        assert parse_json_field("benefits", "[broken") == "[broken"
        assert any("invalid JSON" in m for m in log_messages)

    def test_parse_json_field_passes_structures_through(self):
        value = {"a": 1}
        assert parse_json_field("x", value) is value

    @pytest.mark.parametrize("raw, expected", [
        (30000, 30000),
        (6.5, 6.5),
        ("30,000", 30000),
        ("55000円", 55000),
        ("", None),
        ("abc", None),
        (True, None),
        (None, None),
        ("inf", None),
        ("-inf", None),
        ("nan", None),
        (float("inf"), None),
        (float("nan"), None),
    ])
    def test_to_number(self, raw, expected):
        assert to_number(raw) == expected

    def test_days_from_comma_string(self):
        assert normalize_days("月,火,水") == ["月", "火", "水"]

    def test_days_from_fullwidth_delimiters(self):
        assert normalize_days("土、日，祝") == ["土", "日", "祝"]

    def test_days_from_json_string(self):
        assert normalize_days('["金", "土"]') == ["金", "土"]

    @pytest.mark.parametrize("raw", [None, "", [], 7, " , "])
    def test_days_default_to_every_day(self, raw):
        assert normalize_days(raw) == list(ALL_DAYS)


class TestNormalizeProfile:
    def test_scalars(self, sample_profile):
        profile = normalize_profile(sample_profile)
        assert profile.business_name == "Salon Rose"
        assert profile.maximum_guarantee == 50000
        assert profile.transportation_support == "交通費支給あり"
        assert profile.housing_support == ""
        assert profile.is_fallback is False

    def test_lists_from_json_strings(self, sample_profile):
        profile = normalize_profile(sample_profile)
        assert [p["url"] for p in profile.gallery_photos] == [
            "https://example.com/b.jpg", "https://example.com/a.jpg",
        ]
        assert profile.security_measures[0]["title"] == "身バレ対策"
        assert profile.phone_numbers == ()

    def test_plain_text_lists(self, sample_profile):
        profile = normalize_profile(sample_profile)
        assert profile.benefits == ("送迎あり", "個室待機", "衣装貸与")
        assert [m["title"] for m in profile.privacy_measures] == ["写真加工対応", "アリバイ対策"]

    def test_salary_example_text_parsed(self, sample_profile):
        example = normalize_profile(sample_profile).salary_examples[0]
        assert example["amount"] == 55000
        assert example["hours"] == 6

    def test_non_finite_numbers_become_none(self):
        raw = '{"average_hourly_pay": 1e999, "minimum_guarantee": "nan", "working_time_hours": 6}'
        profile = normalize_profile(raw)
        assert profile.average_hourly_pay is None
        assert profile.minimum_guarantee is None
        assert profile.working_time_hours == 6

    def test_requirements_default_flag(self, sample_profile):
        profile = normalize_profile(sample_profile)
        assert profile.requirements["age_min"] == 18
        assert profile.requirements["accepts_temporary_workers"] is False

    def test_bad_requirements_json_uses_default(self, log_messages):
        profile = normalize_profile({"business_name": "A", "requirements": "{oops"})
        assert dict(profile.requirements) == {"accepts_temporary_workers": False}
        assert log_messages

    def test_sns_links_merged_from_urls(self, sample_profile):
        sample_profile["sns_links"] = [{"platform": "X", "url": "https://x.com/rose"}]
        links = normalize_profile(sample_profile).sns_links
        assert [(l["platform"], l["url"]) for l in links] == [
            ("X", "https://x.com/rose"),
            ("Instagram", "https://instagram.com/salonrose"),
        ]

    def test_working_hours_text_kept(self):
        profile = normalize_profile({"working_hours": "シフト制"})
        assert profile.working_hours_text == "シフト制"
        assert dict(profile.working_hours) == {}

    def test_envelope_and_json_string_accepted(self, sample_profile):
        wrapped = json.dumps({"success": True, "data": sample_profile})
        assert normalize_profile(wrapped).business_name == "Salon Rose"

    def test_missing_profile_gives_fallback(self):
        profile = normalize_profile(None)
        assert profile.is_fallback is True
        assert profile.business_name == "店舗情報が読み込めません"

    def test_record_is_read_only(self, sample_profile):
        profile = normalize_profile(sample_profile)
        with pytest.raises(FrozenInstanceError):
            profile.business_name = "changed"
        with pytest.raises(TypeError):
            profile.requirements["age_min"] = 20

    def test_to_dict_is_plain_json(self, sample_profile):
        data = normalize_profile(sample_profile).to_dict()
        json.dumps(data, ensure_ascii=False)
        assert isinstance(data["gallery_photos"], list)
        assert isinstance(data["requirements"], dict)
