"""HTML preview of rendered content blocks.

Builds the store page preview shown in the dashboard and served by the API
from ``ContentBlock`` lists only. Every profile value is escaped; colours
and sizes come from the block's resolved style.
"""

from __future__ import annotations

import html
from typing import Callable

from design_manager.models import DesignDocument, GlobalStyle
from design_manager.profile import ProfileRecord
from design_manager.renderer import ContentBlock, Variant, render
from design_manager.styles import page_css

DEVICE_VIEWS = ("pc", "smartphone")
APPLY_LABEL = "応募する"

PREVIEW_CSS = """\
.dm-page { line-height: 1.7; }
.dm-section h2 { margin-top: 0; }
.dm-list { margin: 0; padding-left: 1.2em; }
.dm-gallery { display: grid; gap: 8px; }
.dm-gallery img { width: 100%; height: 140px; object-fit: cover; border-radius: 4px; }
.dm-main-visual { display: flex; align-items: center; justify-content: center;
    background-size: cover; background-position: center; margin-bottom: 20px; }
.dm-muted { color: #888; font-size: 0.85em; }
.dm-primary { font-weight: bold; }
.dm-placeholder { border-style: dashed !important; color: #888; text-align: center; }
.dm-apply { text-align: center; margin: 30px 0 10px; }
.dm-apply a { display: inline-block; padding: 14px 48px; border-radius: 30px;
    color: #fff; font-weight: bold; text-decoration: none; }
.dm-copyright { text-align: center; font-size: 0.8em; color: #999; margin-top: 20px; }
"""


def _e(value) -> str:
    return html.escape(str(value if value is not None else ""))


def _items(values: list[str]) -> str:
    if not values:
        return '<p class="dm-muted">情報がありません</p>'
    return '<ul class="dm-list">' + "".join(f"<li>{_e(v)}</li>" for v in values) + "</ul>"


def _row(label: str, value) -> str:
    if not value:
        return ""
    return f"<p><strong>{_e(label)}:</strong> {_e(value)}</p>"


# ── Variant bodies ───────────────────────────────────────────────────

def _header(f: dict) -> str:
    return (
        f"<h1>{_e(f['business_name'])}</h1>"
        f'<p class="dm-muted">{_e(f["service_type"])} {_e(f["location"])}</p>'
    )


def _catchphrase(f: dict) -> str:
    return f"<h3>{_e(f['catch_phrase'])}</h3><p>{_e(f['description'])}</p>"


def _photo_gallery(f: dict) -> str:
    if not f["photos"]:
        return '<p class="dm-muted">写真がありません</p>'
    cells = "".join(
        f'<img src="{_e(p["url"])}" alt="{_e(p["title"])}">' for p in f["photos"]
    )
    return (
        f'<div class="dm-gallery" style="grid-template-columns: repeat({int(f["column_count"])}, 1fr)">'
        f"{cells}</div>"
    )


def _benefits(f: dict) -> str:
    extras = [v for v in (f["transportation_support"], f["housing_support"]) if v]
    return _items(list(f["benefits"]) + extras)


def _salary(f: dict) -> str:
    parts = [_row("保証", f["guarantee"]), _row("平均給与", f["average_pay"])]
    if f["hourly_rate"]:
        parts.append(_row("時給換算", f"{f['hourly_rate']:,}円"))
    parts += [_row("給与体系", f["salary_system"]), _row("給与幅", f["salary_range"]),
              _row("ボーナス", f["bonus_system"])]
    if f["examples"]:
        parts.append(_items([e["summary"] for e in f["examples"]]))
    return "".join(parts)


def _schedule(f: dict) -> str:
    working = f["working_hours"]
    return "".join([
        _row("営業時間", f["business_hours"]),
        _row("勤務可能日", "・".join(f["days_available"])),
        _row("勤務時間", working["hours_range"]),
        _row("1日の勤務", working["daily_hours"]),
        _row("シフト", f["shift_system"]),
        _row("定休日", f["holidays"]),
    ])


def _special_offers(f: dict) -> str:
    if not f["offers"]:
        return '<p class="dm-muted">現在オファーはありません</p>'
    return "".join(
        f"<div><strong>{_e(o['title'])}</strong><p>{_e(o['description'])}</p>"
        + (f'<p class="dm-muted">期限: {_e(o["expire_date"])}</p>' if o["expire_date"] else "")
        + "</div>"
        for o in f["offers"]
    )


def _access(f: dict) -> str:
    return _row("所在地", f["address"] or f["location"]) + _row("アクセス", f["access_info"])


def _contacts(label: str, entries: list[dict]) -> str:
    if not entries:
        return ""
    values = "、".join(
        f'<span class="dm-primary">{_e(c["value"])}</span>' if c["primary"] else _e(c["value"])
        for c in entries
    )
    return f"<p><strong>{_e(label)}:</strong> {values}</p>"


def _contact(f: dict) -> str:
    return "".join([
        _contacts("電話番号", f["phones"]),
        _contacts("メール", f["emails"]),
        _row("採用担当", f["recruiter_name"]),
        _row("受付時間", f["contact_hours"]),
        _row("PCサイト", f["pc_website_url"]),
        _row("モバイルサイト", f["mobile_website_url"]),
    ])


def _sns_links(f: dict) -> str:
    if not f["links"]:
        return '<p class="dm-muted">SNSリンクはありません</p>'
    return '<ul class="dm-list">' + "".join(
        f'<li><a href="{_e(link["url"])}" target="_blank" rel="noopener">{_e(link["platform"])}</a></li>'
        for link in f["links"]
    ) + "</ul>"


def _security_measures(f: dict) -> str:
    measures = f["security_measures"] + f["privacy_measures"]
    return _items([
        f"{m['title']}: {m['description']}" if m["description"] else m["title"]
        for m in measures
    ])


def _requirements(f: dict) -> str:
    return "".join([
        _row("年齢", f["age_range"]),
        _row("体験入店", "可" if f["accepts_temporary_workers"] else "不可"),
        _items(f["other_conditions"]) if f["other_conditions"] else "",
        f"<p>{_e(f['application_requirements'])}</p>" if f["application_requirements"] else "",
    ])


def _blog(f: dict) -> str:
    if not f["posts"]:
        return '<p class="dm-muted">ブログ記事はまだありません</p>'
    return "".join(
        f"<div><strong>{_e(p['title'])}</strong>"
        f'<p class="dm-muted">{_e(p["published_at"])}</p><p>{_e(p["excerpt"])}</p></div>'
        for p in f["posts"]
    )


def _footer(f: dict) -> str:
    return f"<p>{_e(f['copyright'])}</p>"


def _placeholder(f: dict) -> str:
    return f"<p>{_e(f['message'])}</p><p class=\"dm-muted\">{_e(f.get('original_id'))}</p>"


_BODIES: dict[Variant, Callable[[dict], str]] = {
    Variant.HEADER: _header,
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


def _main_visual(block: ContentBlock) -> str:
    f = block.fields
    overlay = f["overlay_color"] or "transparent"
    image = f", url('{_e(f['image_url'])}')" if f["image_url"] else ""
    return (
        f'<div class="dm-main-visual" style="height: {int(f["height"])}px; '
        f"background-image: linear-gradient({_e(overlay)}, {_e(overlay)}){image}; "
        f'background-color: {_e(block.style.background_color)}; color: {_e(block.style.text_color)}">'
        f"<h2>{_e(f['title_text'])}</h2></div>"
    )


def render_block(block: ContentBlock) -> str:
    """HTML for one content block."""
    if block.variant is Variant.MAIN_VISUAL:
        return _main_visual(block)
    classes = "dm-section dm-placeholder" if block.variant is Variant.PLACEHOLDER else "dm-section"
    title = (
        f'<h2 style="{_e(block.style.title_css())}">{_e(block.title)}</h2>' if block.title else ""
    )
    return (
        f'<section class="{classes}" data-section="{_e(block.section_id)}" '
        f'style="{_e(block.style.to_css())}">{title}{_BODIES[block.variant](block.fields)}</section>'
    )


def render_html(
    blocks: list[ContentBlock],
    global_style: GlobalStyle,
    device_view: str = "pc",
) -> str:
    """Full page preview: every block, then the apply button and copyright."""
    if device_view not in DEVICE_VIEWS:
        raise ValueError(f"Unknown device view: {device_view!r}")
    business_name = next(
        (b.fields.get("business_name") for b in blocks if b.variant is Variant.HEADER), ""
    )
    body = "".join(render_block(b) for b in blocks)
    apply_button = (
        f'<div class="dm-apply"><a href="#apply" style="background-color: {_e(global_style.main_color)}">'
        f"{APPLY_LABEL}</a></div>"
    )
    copyright_line = f'<p class="dm-copyright">© {_e(business_name)} All Rights Reserved.</p>'
    return (
        f"<style>{PREVIEW_CSS}</style>"
        f'<div class="dm-page" style="{_e(page_css(global_style, device_view))}">'
        f"{body}{apply_button}{copyright_line}</div>"
    )


def render_document_html(doc: DesignDocument, profile: ProfileRecord, device_view: str = "pc") -> str:
    return render_html(render(doc, profile), doc.global_style, device_view)
