"""Section catalog for the store design manager.

Defines every section kind a store page currently supports, in the order a
freshly created page shows them, together with each kind's default title and
style. Ids that earlier releases used but the product has since dropped are
listed separately so old documents can be recognised and cleaned up.

Changes to this table are the only thing that gives the reconciler work to
do; the catalog itself has no state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from design_manager.config import get_config_value
from design_manager.models import HEADER_ID, SectionStyleOverride

CATALOG_VERSION = 3


@dataclass(frozen=True)
class CatalogEntry:
    """One section kind the product supports."""

    id: str
    default_title: str
    default_style: SectionStyleOverride = field(default_factory=SectionStyleOverride)
    fixed: bool = False            # pinned at order 0, cannot be moved or hidden
    default_visible: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "defaultTitle": self.default_title,
            "defaultStyle": self.default_style.to_dict(),
            "fixed": self.fixed,
            "defaultVisible": self.default_visible,
        }


def _style(
    background_color: str = "#ffffff",
    border_color: str = "#e0e0e0",
) -> SectionStyleOverride:
    return SectionStyleOverride(
        background_color=background_color,
        text_color="#333333",
        border_color=border_color,
        title_color="#ff4d7d",
        font_size=16,
        padding=20,
        border_radius=8,
        border_width=1,
    )


# ---------------------------------------------------------------------------
# Current catalog (canonical order)
# ---------------------------------------------------------------------------

_ENTRIES: tuple[CatalogEntry, ...] = (
    CatalogEntry(HEADER_ID, "ヘッダー", _style(), fixed=True),
    CatalogEntry(
        "main_visual",
        "メインビジュアル",
        SectionStyleOverride(
            background_color="#f9f9f9",
            title_color="#ffffff",
            text_color="#ffffff",
            height=500,
            overlay_color="rgba(0,0,0,0.3)",
        ),
        default_visible=False,
    ),
    CatalogEntry("catchphrase", "お仕事詳細", _style()),
    CatalogEntry("salary", "給与情報", _style(border_color="#ffd6dd")),
    CatalogEntry("schedule", "勤務時間", _style(background_color="#fff9fa")),
    CatalogEntry("security_measures", "安全対策", _style()),
    CatalogEntry("photo_gallery", "写真ギャラリー", _style(background_color="#fff9fa")),
    CatalogEntry("special_offers", "特別オファー", _style()),
    CatalogEntry("benefits", "待遇・環境", _style()),
    CatalogEntry("requirements", "応募条件", _style()),
    CatalogEntry("contact", "問い合わせ", _style(background_color="#fff9fa")),
    CatalogEntry("sns_links", "SNSリンク", _style()),
    CatalogEntry("access", "アクセス情報", _style()),
    CatalogEntry("blog", "店舗ブログ", _style()),
    CatalogEntry(
        "footer",
        "フッター",
        SectionStyleOverride(background_color="#333333", text_color="#ffffff"),
        default_visible=False,
    ),
)

# Section ids from the nineteen-section layout of an earlier release.
_RETIRED_IDS: frozenset[str] = frozenset({
    "salary_examples",
    "privacy_measures",
    "facility_features",
    "trial_entry",
    "campaigns",
    "testimonials",
    "job_videos",
    "sns",
})

_BY_ID: dict[str, CatalogEntry] = {entry.id: entry for entry in _ENTRIES}


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

def required_ids() -> list[str]:
    """Return every current section id in canonical (fresh page) order."""
    return [entry.id for entry in _ENTRIES]


def is_required(section_id: str) -> bool:
    return section_id in _BY_ID


def retired_ids() -> frozenset[str]:
    """Retired ids, including any the admin panel added to the config."""
    extra = get_config_value("extra_retired_ids")
    if not isinstance(extra, list):
        extra = []
    return _RETIRED_IDS | {i for i in extra if isinstance(i, str) and i not in _BY_ID}


def is_retired(section_id: str) -> bool:
    return section_id in retired_ids()


def defaults_for(section_id: str) -> CatalogEntry:
    """Return the catalog entry for *section_id*.

    Raises ``KeyError`` if the id is not part of the current catalog.
    """
    try:
        return _BY_ID[section_id]
    except KeyError:
        raise KeyError(
            f"Unknown section id: {section_id!r}. "
            f"Valid ids: {', '.join(_BY_ID)}"
        ) from None


def entries() -> list[CatalogEntry]:
    return list(_ENTRIES)


def section_title(section_id: str) -> str:
    """Display title for a section id, falling back to the id itself."""
    entry = _BY_ID.get(section_id)
    return entry.default_title if entry else section_id
