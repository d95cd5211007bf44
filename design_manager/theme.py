"""CSS and navigation bar for the design manager dashboard.

Import ``render_theme_css`` and ``render_nav_bar`` instead of inlining the
stylesheet in the dashboard.
"""

from __future__ import annotations

import html as html_mod

import streamlit as st

from design_manager.preview_html import PREVIEW_CSS

# ---------------------------------------------------------------------------
# Dashboard CSS
# ---------------------------------------------------------------------------

_BASE_CSS = """\
@import url('https://fonts.googleapis.com/css2?family=Noto+Sans+JP:wght@400;500;700&display=swap');

/* Hide Streamlit chrome */
#MainMenu, footer,
div[data-testid="stToolbar"] { display: none !important; }

.stApp {
    font-family: 'Noto Sans JP', -apple-system, BlinkMacSystemFont, sans-serif;
}

/* Navigation bar */
.nav-bar {
    display: flex;
    align-items: center;
    padding: 10px 4px;
    margin: -1rem 0 1.2rem 0;
    border-bottom: 1px solid rgba(0,0,0,0.07);
}
.nav-back {
    font-size: 0.85rem;
    font-weight: 500;
    color: #ff4d7d;
    text-decoration: none;
    min-width: 150px;
}
.nav-back:hover { text-decoration: underline; }
.nav-title {
    flex: 1;
    text-align: center;
    font-size: 1.15rem;
    font-weight: 700;
    color: #333333;
}
.nav-store {
    font-weight: 400;
    color: #86868b;
    font-size: 0.85rem;
    margin-left: 8px;
}
.nav-spacer { min-width: 150px; }

/* Section labels */
.section-label {
    font-size: 0.78rem;
    font-weight: 600;
    color: #5a6a85;
    margin-bottom: 4px;
    margin-top: 12px;
}

/* Section list rows */
.section-row {
    display: flex;
    align-items: center;
    gap: 8px;
    font-size: 0.9rem;
}
.section-order {
    display: inline-block;
    min-width: 28px;
    font-weight: 600;
    color: #5a6a85;
}
.section-hidden { color: #aaa; text-decoration: line-through; }
.section-fixed {
    display: inline-block;
    padding: 1px 8px;
    font-size: 0.7rem;
    font-weight: 600;
    background: #ffe4ec;
    color: #ff4d7d;
    border-radius: 10px;
}

/* Dirty / saved badges */
.dirty-badge {
    display: inline-block;
    padding: 3px 10px;
    font-size: 0.7rem;
    font-weight: 600;
    background: #fff4e5;
    color: #b76e00;
    border-radius: 12px;
}
.saved-toast {
    font-size: 0.8rem;
    color: #2e7d32;
    font-weight: 600;
}

/* Preview frame */
.preview-frame {
    border: 1px solid #e2e8f0;
    border-radius: 8px;
    max-height: 80vh;
    overflow-y: auto;
    box-shadow: 0 1px 4px rgba(0,0,0,0.04);
}
.preview-frame.smartphone { max-width: 390px; margin: 0 auto; }
"""


def render_theme_css(extra_css: str = "") -> None:
    """Inject the dashboard stylesheet plus the preview rules."""
    css = _BASE_CSS + "\n" + PREVIEW_CSS
    if extra_css:
        css += "\n" + extra_css
    st.markdown(f"<style>\n{css}\n</style>", unsafe_allow_html=True)


# ---------------------------------------------------------------------------
# Navigation bar
# ---------------------------------------------------------------------------

def render_nav_bar(tool_title: str, store_name: str = "") -> None:
    """Render the navigation bar with a back link and centered title."""
    store = f'<span class="nav-store">{html_mod.escape(store_name)}</span>' if store_name else ""
    st.markdown(
        f'<div class="nav-bar">'
        f'    <a href="/store/dashboard" class="nav-back">&#8592; 店舗ダッシュボード</a>'
        f'    <div class="nav-title">{html_mod.escape(tool_title)}{store}</div>'
        f'    <div class="nav-spacer"></div>'
        f'</div>',
        unsafe_allow_html=True,
    )
