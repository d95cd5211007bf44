"""Render dispatcher: design document + store profile -> content blocks.

``render`` walks the visible sections in order, maps each id (after the
legacy alias table) onto a ``Variant``, and calls that variant's content
function with the section's resolved style, the profile and the section's
own style override. Content functions are pure and only read the frozen
``ProfileRecord``.

The derived-field helpers (``hourly_rate``, ``format_guarantee``,
``normalize_business_hours``, ``parse_working_hours``, ``collect_contacts``)
are public because the API and the dashboard show the same values outside a
full render.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

from design_manager import config
from design_manager.logger import _log_warning
from design_manager.models import DesignDocument, GlobalStyle, Section, SectionStyleOverride
from design_manager.profile import ALL_DAYS, ProfileRecord, normalize_days, to_number
from design_manager.styles import ResolvedStyle, resolve

NEGOTIABLE = "応相談"
UNSUPPORTED_MESSAGE = "このセクションは現在サポートされていません"
DEFAULT_GALLERY_COLUMNS = 3
DEFAULT_MAIN_VISUAL_HEIGHT = 500


class Variant(str, Enum):
    HEADER = "header"
    MAIN_VISUAL = "main_visual"
    CATCHPHRASE = "catchphrase"
    PHOTO_GALLERY = "photo_gallery"
    BENEFITS = "benefits"
    SALARY = "salary"
    SCHEDULE = "schedule"
    SPECIAL_OFFERS = "special_offers"
    ACCESS = "access"
    CONTACT = "contact"
    SNS_LINKS = "sns_links"
    SECURITY_MEASURES = "security_measures"
    REQUIREMENTS = "requirements"
    BLOG = "blog"
    FOOTER = "footer"
    PLACEHOLDER = "placeholder"


# Ids older documents still carry for kinds that have since been renamed.
LEGACY_ALIASES: dict[str, str] = {
    "intro": "catchphrase",
    "about": "catchphrase",
    "work_environment": "schedule",
    "application_info": "contact",
    "faq": "security_measures",
    "security": "security_measures",
    "gallery": "photo_gallery",
    "news": "access",
    "location": "access",
    "campaign": "special_offers",
    "experience": "sns_links",
    "hero": "main_visual",
    "payment": "salary",
}

_UNTITLED = frozenset({Variant.HEADER, Variant.MAIN_VISUAL, Variant.FOOTER})


@dataclass(frozen=True)
class ContentBlock:
    """One rendered section, ready for a presentation layer."""

    section_id: str
    variant: Variant
    title: str | None
    style: ResolvedStyle
    fields: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "sectionId": self.section_id,
            "variant": self.variant.value,
            "title": self.title,
            "style": self.style.to_dict(),
            "fields": self.fields,
        }


def resolve_variant(section_id: str) -> Variant:
    """Map a section id, legacy or current, onto its content variant."""
    canonical = LEGACY_ALIASES.get(section_id, section_id)
    try:
        return Variant(canonical)
    except ValueError:
        return Variant.PLACEHOLDER


# ---------------------------------------------------------------------------
# Derived fields
# ---------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _is_positive(value: Any) -> bool:
    return _is_number(value) and value > 0


def _truthy_number(value: Any) -> bool:
    return _is_number(value) and bool(value)


def format_yen(value: int | float) -> str:
    """``30000`` -> ``"30,000"``; whole floats lose their ``.0``."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value:,}"


def hourly_rate(amount: Any, hours: Any) -> int:
    """Hourly equivalent of *amount* earned over *hours*, rounded half up.

    Returns 0 unless both values are positive numbers (numeric strings such
    as ``"30,000"`` are accepted).
    """
    amount = to_number(amount)
    hours = to_number(hours)
    if not (_is_positive(amount) and _is_positive(hours)):
        return 0
    return math.floor(amount / hours + 0.5)


def format_guarantee(minimum: Any, maximum: Any) -> str:
    """Guarantee range text; ``応相談`` unless a bound is a non-zero number."""
    has_min = _truthy_number(minimum)
    has_max = _truthy_number(maximum)
    if has_min and has_max:
        return f"{format_yen(minimum)}円〜{format_yen(maximum)}円"
    if has_min:
        return f"{format_yen(minimum)}円〜"
    if has_max:
        return f"〜{format_yen(maximum)}円"
    return NEGOTIABLE


def salary_example(example: Mapping[str, Any]) -> dict:
    amount = to_number(example.get("amount"))
    hours = to_number(example.get("hours"))
    rate = hourly_rate(amount, hours)
    if rate:
        summary = f"{format_yen(amount)}円（{format_yen(hours)}時間勤務 / 時給換算: {format_yen(rate)}円）"
    elif _truthy_number(amount):
        summary = f"{format_yen(amount)}円"
    else:
        summary = example.get("text") or NEGOTIABLE
    return {"amount": amount, "hours": hours, "hourly_rate": rate, "summary": summary}


def normalize_days_available(value: Any) -> list[str]:
    """Days as a list: arrays pass through, ``"月,火"`` splits, absent is every day."""
    return normalize_days(value)


def normalize_business_hours(text: str | None) -> str:
    """``"10時〜22時"`` -> ``"10:00-22:00"``; empty text is ``応相談``."""
    if not text or not text.strip():
        return NEGOTIABLE
    text = text.strip().replace("：", ":")
    text = re.sub(r"(\d{1,2})時", r"\1:00", text)
    return re.sub(r"[〜～~]", "-", text)


def parse_working_hours(working_hours: Any, working_time_text: str = "") -> dict:
    """Summarise a structured or free-text working-hours value.

    Structured values may carry ``start_time``/``end_time`` (a fixed range,
    not flexible), ``shift_pattern`` (shown instead of the range) and
    ``min_hours``/``max_hours`` (the daily length).
    """
    daily = working_time_text or NEGOTIABLE
    flexible = True
    hours_range = ""
    if isinstance(working_hours, str):
        return {"daily_hours": daily, "is_flexible": flexible, "hours_range": working_hours}
    if isinstance(working_hours, Mapping):
        start = working_hours.get("start_time")
        end = working_hours.get("end_time")
        if start and end:
            hours_range = f"{start}-{end}"
            flexible = False
        if working_hours.get("shift_pattern"):
            hours_range = str(working_hours["shift_pattern"])
        if working_hours.get("min_hours") and working_hours.get("max_hours"):
            daily = f"{working_hours['min_hours']}〜{working_hours['max_hours']}時間"
    return {"daily_hours": daily, "is_flexible": flexible, "hours_range": hours_range}


def collect_contacts(values: tuple[str, ...] | list[str], legacy: str) -> list[dict]:
    """Union list entries with the legacy scalar; the first one is primary."""
    ordered: list[str] = []
    for value in (*values, legacy):
        value = (value or "").strip()
        if value and value not in ordered:
            ordered.append(value)
    return [{"value": value, "primary": index == 0} for index, value in enumerate(ordered)]


_TAGS = re.compile(r"<[^>]+>")


def excerpt(html_text: str, length: int) -> str:
    text = " ".join(_TAGS.sub(" ", html_text or "").split())
    if len(text) <= length:
        return text
    return text[:length].rstrip() + "…"


def _limit(setting: int | float | None, config_key: str) -> int:
    if _is_positive(setting):
        return int(setting)
    return config.get_int_setting(config_key)


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

VariantRenderer = Callable[[ResolvedStyle, ProfileRecord, SectionStyleOverride], dict]


def _header(style, profile, settings):
    return {
        "business_name": profile.business_name,
        "service_type": profile.service_type,
        "location": profile.location,
        "catch_phrase": profile.catch_phrase,
    }


def _main_visual(style, profile, settings):
    return {
        "image_url": settings.image_url or profile.top_image,
        "title_text": settings.title_text or profile.catch_phrase or profile.business_name,
        "height": settings.height or DEFAULT_MAIN_VISUAL_HEIGHT,
        "overlay_color": settings.overlay_color or "",
    }


def _catchphrase(style, profile, settings):
    return {"catch_phrase": profile.catch_phrase, "description": profile.description}


def _photo_order(photo: Mapping[str, Any]) -> float:
    order = to_number(photo.get("order"))
    return math.inf if order is None else order


def _photo_gallery(style, profile, settings):
    photos = sorted(profile.gallery_photos, key=_photo_order)
    photos = [p for p in photos if p.get("url")][: _limit(settings.items_to_show, "gallery_limit")]
    return {
        "photos": [{"url": p["url"], "title": p.get("title") or ""} for p in photos],
        "column_count": int(settings.column_count) if _is_positive(settings.column_count) else DEFAULT_GALLERY_COLUMNS,
    }


def _benefits(style, profile, settings):
    return {
        "benefits": list(profile.benefits),
        "transportation_support": profile.transportation_support,
        "housing_support": profile.housing_support,
    }


def _salary(style, profile, settings):
    rate = hourly_rate(profile.average_hourly_pay, profile.working_time_hours)
    return {
        "guarantee": format_guarantee(profile.minimum_guarantee, profile.maximum_guarantee),
        "salary_range": profile.salary_range,
        "salary_system": profile.salary_system,
        "bonus_system": profile.bonus_system,
        "average_pay": format_yen(profile.average_hourly_pay) + "円"
        if _truthy_number(profile.average_hourly_pay) else NEGOTIABLE,
        "working_time_hours": profile.working_time_hours,
        "hourly_rate": rate,
        "examples": [salary_example(e) for e in profile.salary_examples],
    }


def _schedule(style, profile, settings):
    working = profile.working_hours or profile.working_hours_text
    daily_text = f"{format_yen(profile.working_time_hours)}時間" if _is_positive(profile.working_time_hours) else ""
    return {
        "business_hours": normalize_business_hours(profile.business_hours),
        "days_available": list(profile.days_available) or list(ALL_DAYS),
        "holidays": profile.holidays,
        "shift_system": profile.shift_system,
        "working_hours": parse_working_hours(working, daily_text),
    }


def _special_offers(style, profile, settings):
    return {
        "offers": [
            {
                "title": o.get("title") or "",
                "description": o.get("description") or "",
                "expire_date": o.get("expire_date") or o.get("expireDate") or "",
            }
            for o in profile.special_offers
        ]
    }


def _access(style, profile, settings):
    return {
        "location": profile.location,
        "address": profile.address,
        "access_info": profile.access_info,
    }


def _contact(style, profile, settings):
    return {
        "phones": collect_contacts(profile.phone_numbers, profile.contact_phone),
        "emails": collect_contacts(profile.email_addresses, profile.contact_email),
        "recruiter_name": profile.recruiter_name,
        "contact_hours": profile.contact_hours,
        "pc_website_url": profile.pc_website_url,
        "mobile_website_url": profile.mobile_website_url,
    }


def _sns_links(style, profile, settings):
    return {"links": [dict(link) for link in profile.sns_links]}


def _measures(items) -> list[dict]:
    return [
        {
            "title": m.get("title") or "",
            "description": m.get("description") or "",
            "category": m.get("category") or "",
        }
        for m in items
    ]


def _security_measures(style, profile, settings):
    return {
        "security_measures": _measures(profile.security_measures),
        "privacy_measures": _measures(profile.privacy_measures),
    }


def _requirements(style, profile, settings):
    reqs = profile.requirements
    age_min, age_max = to_number(reqs.get("age_min")), to_number(reqs.get("age_max"))
    if age_min and age_max:
        age_range = f"{format_yen(age_min)}歳〜{format_yen(age_max)}歳"
    elif age_min:
        age_range = f"{format_yen(age_min)}歳以上"
    elif age_max:
        age_range = f"{format_yen(age_max)}歳以下"
    else:
        age_range = ""
    others = reqs.get("other_conditions") or reqs.get("others") or []
    if isinstance(others, str):
        others = [others]
    return {
        "accepts_temporary_workers": bool(reqs.get("accepts_temporary_workers", False)),
        "age_range": age_range,
        "other_conditions": [str(o) for o in others if o],
        "application_requirements": profile.application_requirements,
    }


def _blog(style, profile, settings):
    length = config.get_int_setting("blog_excerpt_length")
    posts = profile.blog_posts[: _limit(settings.posts_to_show, "blog_posts_to_show")]
    return {
        "posts": [
            {
                "title": p.get("title") or "",
                "excerpt": excerpt(str(p.get("content") or ""), length),
                "published_at": p.get("published_at") or "",
                "thumbnail": p.get("thumbnail") or "",
            }
            for p in posts
        ]
    }


def _footer(style, profile, settings):
    return {"business_name": profile.business_name, "copyright": f"© {profile.business_name}"}


def _placeholder(style, profile, settings):
    return {"message": UNSUPPORTED_MESSAGE}


RENDERERS: dict[Variant, VariantRenderer] = {
    Variant.HEADER: _header,
    Variant.MAIN_VISUAL: _main_visual,
    Variant.CATCHPHRASE: _catchphrase,
    Variant.PHOTO_GALLERY: _photo_gallery,
    Variant.BENEFITS: _benefits,
    Variant.SALARY: _salary,
    Variant.SCHEDULE: _schedule,
    Variant.SPECIAL_OFFERS: _special_offers,
    Variant.ACCESS: _access,
    Variant.CONTACT: _contact,
    Variant.SNS_LINKS: _sns_links,
    Variant.SECURITY_MEASURES: _security_measures,
    Variant.REQUIREMENTS: _requirements,
    Variant.BLOG: _blog,
    Variant.FOOTER: _footer,
    Variant.PLACEHOLDER: _placeholder,
}

_missing = set(Variant) - set(RENDERERS)
if _missing:
    raise RuntimeError(f"No renderer for variants: {', '.join(sorted(v.value for v in _missing))}")


# ---------------------------------------------------------------------------
# Render
# ---------------------------------------------------------------------------

def render_section(section: Section, global_style: GlobalStyle, profile: ProfileRecord) -> ContentBlock:
    variant = resolve_variant(section.id)
    if variant is Variant.PLACEHOLDER:
        _log_warning(f"No content variant for section {section.id!r}; rendering placeholder")
    style = resolve(section, global_style)
    fields = RENDERERS[variant](style, profile, section.settings)
    if variant is Variant.PLACEHOLDER:
        fields = {**fields, "original_id": section.id}
    show_title = not global_style.hide_section_titles and variant not in _UNTITLED
    return ContentBlock(
        section_id=section.id,
        variant=variant,
        title=section.title if show_title else None,
        style=style,
        fields=fields,
    )


def render(doc: DesignDocument, profile: ProfileRecord) -> list[ContentBlock]:
    """Project the visible sections of *doc* into ordered content blocks."""
    return [
        render_section(section, doc.global_style, profile)
        for section in doc.ordered()
        if section.visible
    ]
