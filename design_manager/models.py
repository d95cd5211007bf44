"""Data model for store page designs.

A design document is the unit of load and save: one ``GlobalStyle`` plus the
ordered list of ``Section`` entries the store owner edits. All models are
frozen; edits build new values with ``dataclasses.replace`` so a session can
compare snapshots instead of tracking in-place mutation.

The JSON wire format keeps the camelCase keys written by earlier releases
(``globalSettings``, ``mainColor``, ``hideSectionTitles`` ...), so stored
documents load unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

HEADER_ID = "header"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


# ---------------------------------------------------------------------------
# Global style
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GlobalStyle:
    """Product-wide defaults. Exactly one per document."""

    main_color: str = "#ff4d7d"
    secondary_color: str = "#ffc7d8"
    accent_color: str = "#ff9eb8"
    background_color: str = "#fff5f9"
    font_family: str = "sans-serif"
    border_radius: int | float = 8
    max_width: int | float = 1200
    hide_section_titles: bool = True

    def to_dict(self) -> dict:
        return {_snake_to_camel(f.name): getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, d: Any) -> GlobalStyle:
        """Build from wire data, keeping the default for any missing or mistyped field."""
        if not isinstance(d, Mapping):
            return cls()
        defaults = cls()
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = d.get(_snake_to_camel(f.name))
            default = getattr(defaults, f.name)
            values[f.name] = raw if _matches_type(raw, default) else default
        return cls(**values)

    def merged(self, **changes: Any) -> GlobalStyle:
        """Return a copy with snake_case *changes* applied."""
        for name, value in changes.items():
            if name not in self.__dataclass_fields__:
                raise ValueError(f"Unknown global style field: {name!r}")
            if not _matches_type(value, getattr(self, name)):
                raise ValueError(f"Invalid value for {name}: {value!r}")
        return replace(self, **changes)


def _matches_type(value: Any, default: Any) -> bool:
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, str):
        return isinstance(value, str) and value != ""
    return _is_number(value)


# ---------------------------------------------------------------------------
# Per-section overrides
# ---------------------------------------------------------------------------

_STRING_FIELDS = (
    "background_color",
    "text_color",
    "title_color",
    "border_color",
    "accent_color",
    "overlay_color",
    "image_url",
    "title_text",
)
_NUMBER_FIELDS = (
    "font_size",
    "padding",
    "border_radius",
    "border_width",
    "height",
    "column_count",
    "posts_to_show",
    "items_to_show",
)


@dataclass(frozen=True)
class SectionStyleOverride:
    """Optional per-section style. ``None`` means "fall back" (see styles.resolve)."""

    background_color: str | None = None
    text_color: str | None = None
    title_color: str | None = None
    border_color: str | None = None
    font_size: int | float | None = None
    padding: int | float | None = None
    border_radius: int | float | None = None
    border_width: int | float | None = None
    # variant-specific extras
    accent_color: str | None = None
    height: int | float | None = None
    image_url: str | None = None
    title_text: str | None = None
    overlay_color: str | None = None
    column_count: int | float | None = None
    posts_to_show: int | float | None = None
    items_to_show: int | float | None = None

    def to_dict(self) -> dict:
        return {
            _snake_to_camel(f.name): getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @classmethod
    def from_dict(cls, d: Any) -> SectionStyleOverride:
        if not isinstance(d, Mapping):
            return cls()
        values: dict[str, Any] = {}
        for name in _STRING_FIELDS:
            raw = d.get(_snake_to_camel(name))
            if isinstance(raw, str):
                values[name] = raw
        for name in _NUMBER_FIELDS:
            raw = d.get(_snake_to_camel(name))
            if _is_number(raw):
                values[name] = raw
        return cls(**values)

    def merged(self, **changes: Any) -> SectionStyleOverride:
        """Apply snake_case *changes*; a ``None`` value clears the override."""
        current = {f.name: getattr(self, f.name) for f in fields(self)}
        for name, value in changes.items():
            if name not in current:
                raise ValueError(f"Unknown section style field: {name!r}")
            if value is None:
                current[name] = None
            elif name in _STRING_FIELDS and isinstance(value, str):
                current[name] = value
            elif name in _NUMBER_FIELDS and _is_number(value):
                current[name] = value
            else:
                raise ValueError(f"Invalid value for {name}: {value!r}")
        return SectionStyleOverride(**current)


# ---------------------------------------------------------------------------
# Sections and documents
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Section:
    """One content section. ``id`` names the kind of content, not an instance."""

    id: str
    title: str
    order: int
    visible: bool = True
    settings: SectionStyleOverride = field(default_factory=SectionStyleOverride)

    @property
    def is_header(self) -> bool:
        return self.id == HEADER_ID

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "order": self.order,
            "visible": self.visible,
            "settings": self.settings.to_dict(),
        }


@dataclass(frozen=True)
class RawSection:
    """A section as read from storage, before reconciliation fills the gaps."""

    id: str
    title: str | None
    order: int | float | None
    visible: bool | None
    settings: SectionStyleOverride

    @classmethod
    def from_dict(cls, d: Any) -> RawSection | None:
        """Parse one stored section. Returns None when it has no usable id."""
        if not isinstance(d, Mapping):
            return None
        section_id = d.get("id")
        if not isinstance(section_id, str) or not section_id.strip():
            return None
        title = d.get("title")
        order = d.get("order")
        visible = d.get("visible")
        return cls(
            id=section_id.strip(),
            title=title if isinstance(title, str) and title else None,
            order=order if _is_number(order) else None,
            visible=visible if isinstance(visible, bool) else None,
            settings=SectionStyleOverride.from_dict(d.get("settings")),
        )


@dataclass(frozen=True)
class DesignDocument:
    """``{globalSettings, sections}``: the whole design of one store page."""

    global_style: GlobalStyle = field(default_factory=GlobalStyle)
    sections: tuple[Section, ...] = ()

    def get(self, section_id: str) -> Section | None:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def ordered(self) -> list[Section]:
        """All sections sorted by order (stable for equal orders)."""
        return sorted(self.sections, key=lambda s: s.order)

    def body(self) -> list[Section]:
        """The orderable, non-header sections sorted by order."""
        return [s for s in self.ordered() if not s.is_header]

    def with_sections(self, sections: list[Section] | tuple[Section, ...]) -> DesignDocument:
        return replace(self, sections=tuple(sorted(sections, key=lambda s: s.order)))

    def replace_section(self, updated: Section) -> DesignDocument:
        return self.with_sections(
            [updated if s.id == updated.id else s for s in self.sections]
        )

    def to_dict(self) -> dict:
        return {
            "globalSettings": self.global_style.to_dict(),
            "sections": [s.to_dict() for s in self.ordered()],
        }
