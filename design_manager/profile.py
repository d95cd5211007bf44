"""Store profile adapter.

The business profile comes from another part of the recruitment site, and
its fields have drifted over the years: lists stored as JSON strings, as
comma separated text, or as a single legacy scalar; objects stored as JSON
text; numbers stored as ``"30,000"``. ``normalize_profile`` coerces every
field to one canonical shape, once, at the boundary, and returns a frozen
``ProfileRecord`` the renderer can read but not modify.

Strings in structured fields are always tried as JSON first. When that
fails the raw string is kept and coerced by the field's rule below; nothing
here raises.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Mapping

from design_manager.logger import _log_debug, _log_warning

ALL_DAYS: tuple[str, ...] = ("月", "火", "水", "木", "金", "土", "日")

_LIST_DELIMITERS = re.compile(r"[,、，\n]")
_SALARY_EXAMPLE_TEXT = re.compile(r"勤務時間\s*(\d+(?:\.\d+)?)\s*時間.*?平均給与\s*([\d,]+)\s*円")

# Shown when no profile could be loaded at all.
FALLBACK_PROFILE: dict[str, Any] = {
    "business_name": "店舗情報が読み込めません",
    "catch_phrase": "プレビュー表示中",
    "description": "店舗情報の取得に失敗しました。ページをリロードしてください。",
    "service_type": "エステ",
    "location": "東京都",
    "access_info": "最寄り駅から徒歩5分",
    "business_hours": "10:00〜22:00",
    "contact_email": "contact@example.com",
}


# ---------------------------------------------------------------------------
# Freezing helpers
# ---------------------------------------------------------------------------

def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------

def parse_json_field(name: str, value: Any) -> Any:
    """Try to decode a JSON-encoded string; return the raw value on failure."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        if text[0] in "[{":
            _log_warning(f"Profile field {name!r} holds invalid JSON; using raw text")
        else:
            _log_debug(f"Profile field {name!r} is plain text")
        return value


def to_number(value: Any) -> int | float | None:
    """Coerce ``30000``, ``30000.0`` or ``"30,000"`` to a finite number; else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.replace(",", "").replace("円", "").strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value)


def _as_str_list(name: str, value: Any) -> list[str]:
    value = parse_json_field(name, value)
    if value is None:
        return []
    if isinstance(value, str):
        items = _LIST_DELIMITERS.split(value)
    elif isinstance(value, (list, tuple)):
        items = []
        for item in value:
            if isinstance(item, Mapping):
                item = item.get("title") or item.get("name") or item.get("value")
            items.append(_text(item))
    else:
        items = [_text(value)]
    return [item.strip() for item in items if item and item.strip()]


def _as_object_list(name: str, value: Any, key: str = "title") -> list[dict]:
    """Lists of objects; bare strings become ``{key: text}``."""
    value = parse_json_field(name, value)
    if value is None:
        return []
    if isinstance(value, Mapping):
        value = [value]
    if isinstance(value, str):
        value = [line for line in value.splitlines() if line.strip()]
    if not isinstance(value, (list, tuple)):
        _log_warning(f"Profile field {name!r} has unexpected type {type(value).__name__}")
        return []
    result: list[dict] = []
    for item in value:
        if isinstance(item, Mapping):
            result.append(dict(item))
        elif isinstance(item, str) and item.strip():
            result.append({key: item.strip()})
    return result


def _as_mapping(name: str, value: Any) -> dict:
    value = parse_json_field(name, value)
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    _log_warning(f"Profile field {name!r} is not an object; using defaults")
    return {}


def normalize_days(value: Any) -> list[str]:
    """Availability days as a list; absent or unusable means every day."""
    if isinstance(value, (list, tuple)):
        days = [_text(day) for day in value if _text(day)]
    elif isinstance(value, str):
        parsed = parse_json_field("days_available", value)
        if isinstance(parsed, list):
            return normalize_days(parsed)
        days = [part.strip() for part in _LIST_DELIMITERS.split(value) if part.strip()]
    else:
        days = []
    return days or list(ALL_DAYS)


def _salary_examples(value: Any) -> list[dict]:
    """``{amount, hours}`` pairs from objects or ``勤務時間6時間　平均給与55000円`` text."""
    examples: list[dict] = []
    for item in _as_object_list("salary_examples", value, key="text"):
        amount = to_number(item.get("amount"))
        hours = to_number(item.get("hours", item.get("workingHours")))
        text = _text(item.get("text") or item.get("title"))
        if (amount is None or hours is None) and text:
            match = _SALARY_EXAMPLE_TEXT.search(text)
            if match:
                hours = to_number(match.group(1))
                amount = to_number(match.group(2))
        examples.append({"amount": amount, "hours": hours, "text": text})
    return examples


_SNS_PLATFORMS = (
    ("twitter.com", "Twitter"),
    ("x.com", "X"),
    ("instagram.com", "Instagram"),
    ("tiktok.com", "TikTok"),
    ("line.me", "LINE"),
    ("youtube.com", "YouTube"),
)


def _platform_for(url: str) -> str:
    lowered = url.lower()
    for domain, platform in _SNS_PLATFORMS:
        if domain in lowered:
            return platform
    return "SNS"


def _sns_links(links: Any, urls: Any) -> list[dict]:
    result: list[dict] = []
    for item in _as_object_list("sns_links", links, key="url"):
        url = _text(item.get("url"))
        if url:
            result.append({"platform": _text(item.get("platform")) or _platform_for(url), "url": url})
    known = {link["url"] for link in result}
    for url in _as_str_list("sns_urls", urls):
        if url not in known:
            result.append({"platform": _platform_for(url), "url": url})
            known.add(url)
    return result


def _support_text(value: Any, when_true: str) -> str:
    if value is True:
        return when_true
    if value is False or value is None:
        return ""
    return _text(value)


# ---------------------------------------------------------------------------
# Profile record
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProfileRecord:
    """Canonical, read-only view of a store profile."""

    business_name: str = ""
    service_type: str = ""
    catch_phrase: str = ""
    description: str = ""
    location: str = ""
    address: str = ""
    access_info: str = ""
    business_hours: str = ""
    holidays: str = ""
    shift_system: str = ""
    salary_system: str = ""
    salary_range: str = ""
    bonus_system: str = ""
    contact_hours: str = ""
    recruiter_name: str = ""
    pc_website_url: str = ""
    mobile_website_url: str = ""
    transportation_support: str = ""
    housing_support: str = ""
    top_image: str = ""

    minimum_guarantee: int | float | None = None
    maximum_guarantee: int | float | None = None
    working_time_hours: int | float | None = None
    average_hourly_pay: int | float | None = None

    contact_phone: str = ""
    contact_email: str = ""
    phone_numbers: tuple[str, ...] = ()
    email_addresses: tuple[str, ...] = ()

    benefits: tuple[str, ...] = ()
    days_available: tuple[str, ...] = ALL_DAYS
    working_hours: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    working_hours_text: str = ""
    requirements: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({"accepts_temporary_workers": False})
    )
    application_requirements: str = ""

    gallery_photos: tuple[Mapping[str, Any], ...] = ()
    special_offers: tuple[Mapping[str, Any], ...] = ()
    security_measures: tuple[Mapping[str, Any], ...] = ()
    privacy_measures: tuple[Mapping[str, Any], ...] = ()
    salary_examples: tuple[Mapping[str, Any], ...] = ()
    sns_links: tuple[Mapping[str, Any], ...] = ()
    blog_posts: tuple[Mapping[str, Any], ...] = ()

    is_fallback: bool = False

    def to_dict(self) -> dict:
        return {f.name: _thaw(getattr(self, f.name)) for f in fields(self)}


_TEXT_FIELDS = (
    "business_name", "service_type", "catch_phrase", "description", "location",
    "address", "access_info", "business_hours", "holidays", "shift_system",
    "salary_system", "salary_range", "bonus_system", "contact_hours",
    "recruiter_name", "pc_website_url", "mobile_website_url", "top_image",
    "contact_phone", "contact_email", "application_requirements",
)
_NUMBER_FIELDS = (
    "minimum_guarantee", "maximum_guarantee", "working_time_hours", "average_hourly_pay",
)


def _unwrap(raw: Any) -> Mapping[str, Any] | None:
    """Accept a profile mapping, a ``{data: {...}}`` envelope, or JSON text."""
    if isinstance(raw, str):
        raw = parse_json_field("profile", raw)
    if not isinstance(raw, Mapping):
        return None
    data = raw.get("data")
    if isinstance(data, str):
        data = parse_json_field("data", data)
    if isinstance(data, Mapping):
        return data
    return raw


def normalize_profile(raw: Any) -> ProfileRecord:
    """Build a canonical ``ProfileRecord`` from whatever the profile source sent.

    ``None`` or an unusable payload yields the fallback profile with
    ``is_fallback=True`` so the preview can say the data did not load.
    """
    data = _unwrap(raw)
    if data is None:
        if raw is not None:
            _log_warning(f"Profile payload is a {type(raw).__name__}; using fallback profile")
        data = FALLBACK_PROFILE
        is_fallback = True
    else:
        is_fallback = False

    values: dict[str, Any] = {name: _text(data.get(name)) for name in _TEXT_FIELDS}
    values.update({name: to_number(data.get(name)) for name in _NUMBER_FIELDS})

    working_hours = parse_json_field("working_hours", data.get("working_hours"))
    if isinstance(working_hours, Mapping):
        values["working_hours"] = dict(working_hours)
        values["working_hours_text"] = ""
    else:
        values["working_hours"] = {}
        values["working_hours_text"] = _text(working_hours)

    requirements = _as_mapping("requirements", data.get("requirements"))
    requirements.setdefault("accepts_temporary_workers", False)

    values.update(
        transportation_support=_support_text(data.get("transportation_support"), "交通費支給あり"),
        housing_support=_support_text(data.get("housing_support"), "寮完備"),
        phone_numbers=_as_str_list("phone_numbers", data.get("phone_numbers")),
        email_addresses=_as_str_list("email_addresses", data.get("email_addresses")),
        benefits=_as_str_list("benefits", data.get("benefits")),
        days_available=normalize_days(data.get("days_available")),
        requirements=requirements,
        gallery_photos=_as_object_list("gallery_photos", data.get("gallery_photos"), key="url"),
        special_offers=_as_object_list("special_offers", data.get("special_offers")),
        security_measures=_as_object_list("security_measures", data.get("security_measures")),
        privacy_measures=_as_object_list("privacy_measures", data.get("privacy_measures")),
        salary_examples=_salary_examples(data.get("salary_examples")),
        sns_links=_sns_links(data.get("sns_links"), data.get("sns_urls")),
        blog_posts=_as_object_list("blog_posts", data.get("blog_posts")),
        is_fallback=is_fallback,
    )
    return ProfileRecord(**{k: _freeze(v) for k, v in values.items()})
