"""Style cascade for rendered sections.

``resolve`` takes a section's override and the document's global style and
returns a ``ResolvedStyle`` with every field filled in. A field set on the
override always wins (``0`` included). Otherwise each field has one fixed
fallback:

==================  ===============================
field               fallback
==================  ===============================
background_color    ``#ffffff``
text_color          ``#333333``
title_color         ``global_style.main_color``
border_color        ``#e0e0e0``
font_size           ``16``
title_font_size     resolved ``font_size + 4``
padding             ``20``
border_radius       ``global_style.border_radius``
border_width        ``1``
accent_color        ``global_style.accent_color``
font_family         ``global_style.font_family``
==================  ===============================

The global style and the section override are separate vocabularies: only
the three global fields named above feed section defaults.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from design_manager.models import GlobalStyle, Section, SectionStyleOverride

DEFAULT_BACKGROUND_COLOR = "#ffffff"
DEFAULT_TEXT_COLOR = "#333333"
DEFAULT_BORDER_COLOR = "#e0e0e0"
DEFAULT_FONT_SIZE = 16
DEFAULT_PADDING = 20
DEFAULT_BORDER_WIDTH = 1
TITLE_SIZE_STEP = 4


@dataclass(frozen=True)
class ResolvedStyle:
    """Fully resolved style for one rendered section. No field is ever None."""

    background_color: str
    text_color: str
    title_color: str
    border_color: str
    font_size: int | float
    title_font_size: int | float
    padding: int | float
    border_radius: int | float
    border_width: int | float
    accent_color: str
    font_family: str

    def to_dict(self) -> dict:
        return asdict(self)

    def to_css(self) -> str:
        """Inline CSS declarations for the section container."""
        return (
            f"background-color: {self.background_color}; "
            f"color: {self.text_color}; "
            f"padding: {self.padding}px; "
            f"border-radius: {self.border_radius}px; "
            f"border: {self.border_width}px solid {self.border_color}; "
            f"font-size: {self.font_size}px; "
            f"margin-bottom: 20px"
        )

    def title_css(self) -> str:
        return (
            f"color: {self.title_color}; "
            f"font-size: {self.title_font_size}px; "
            f"margin-bottom: 15px; font-weight: bold"
        )


def _pick(value, fallback):
    return fallback if value is None else value


def resolve_override(override: SectionStyleOverride, global_style: GlobalStyle) -> ResolvedStyle:
    font_size = _pick(override.font_size, DEFAULT_FONT_SIZE)
    return ResolvedStyle(
        background_color=_pick(override.background_color, DEFAULT_BACKGROUND_COLOR),
        text_color=_pick(override.text_color, DEFAULT_TEXT_COLOR),
        title_color=_pick(override.title_color, global_style.main_color),
        border_color=_pick(override.border_color, DEFAULT_BORDER_COLOR),
        font_size=font_size,
        title_font_size=font_size + TITLE_SIZE_STEP,
        padding=_pick(override.padding, DEFAULT_PADDING),
        border_radius=_pick(override.border_radius, global_style.border_radius),
        border_width=_pick(override.border_width, DEFAULT_BORDER_WIDTH),
        accent_color=_pick(override.accent_color, global_style.accent_color),
        font_family=global_style.font_family,
    )


def resolve(section: Section, global_style: GlobalStyle) -> ResolvedStyle:
    """Cascade a section's override over the documented fallbacks."""
    return resolve_override(section.settings, global_style)


def page_css(global_style: GlobalStyle, device_view: str = "pc") -> str:
    """Inline CSS for the page container around all sections."""
    max_width = f"{global_style.max_width}px" if device_view == "pc" else "100%"
    padding = "30px" if device_view == "pc" else "15px"
    return (
        f"font-family: {global_style.font_family}; "
        f"background-color: {global_style.background_color}; "
        f"color: {DEFAULT_TEXT_COLOR}; "
        f"max-width: {max_width}; margin: 0 auto; padding: {padding}"
    )
