"""Design Manager -- Streamlit dashboard.

Store page editor: reorder sections with the up/down buttons or by picking a
new position, show and hide them, adjust global and per-section colours, and
watch the page preview update as you go. Nothing is stored until you press
Save; the badge in the sidebar shows when there are unsaved changes.

Run with ``streamlit run design_manager/dashboard.py``.
"""

from __future__ import annotations

import html as html_mod
import re

import streamlit as st

from design_manager import catalog, remote
from design_manager.config import log_dir
from design_manager.documents import load_profile
from design_manager.logger import setup_logger
from design_manager.ordering import Direction
from design_manager.preview_html import render_html
from design_manager.profile import normalize_profile
from design_manager.renderer import render
from design_manager.session import DesignSession, SessionStatus
from design_manager.styles import resolve
from design_manager.theme import render_nav_bar, render_theme_css

# -- Page config --------------------------------------------------------------

st.set_page_config(
    page_title="デザイン管理",
    layout="wide",
    initial_sidebar_state="expanded",
)

render_theme_css()

if "_logger_ready" not in st.session_state:
    setup_logger(log_dir())
    st.session_state["_logger_ready"] = True

# -- Session state defaults ---------------------------------------------------

_DEFAULTS: dict = {
    "design_session": None,
    "profile": None,
    "use_remote": False,
    "device_view": "pc",
}
for k, v in _DEFAULTS.items():
    if k not in st.session_state:
        st.session_state[k] = v

_FONT_FAMILIES = ["sans-serif", "serif", "'Noto Sans JP', sans-serif", "'M PLUS Rounded 1c', sans-serif"]
_NOTICE_RENDERERS = {"info": st.success, "warning": st.warning, "error": st.error}
_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def _hex(value: str, fallback: str) -> str:
    """st.color_picker only accepts #rrggbb."""
    return value if _HEX_COLOR.match(value or "") else fallback


# -- Helpers ------------------------------------------------------------------

def _open_store(entity_id: str, use_remote: bool) -> None:
    """Start a new editing session for a store and load its profile."""
    if use_remote:
        session = DesignSession(
            entity_id,
            loader=remote.fetch_design_document,
            saver=remote.push_design_document,
        )
        raw_profile = remote.fetch_profile(entity_id)
    else:
        session = DesignSession(entity_id)
        try:
            raw_profile = load_profile(entity_id)
        except ValueError:
            raw_profile = None
    session.load()
    st.session_state.design_session = session
    st.session_state.profile = normalize_profile(raw_profile)


def _run_edit(action, *args, **kwargs) -> None:
    try:
        action(*args, **kwargs)
    except ValueError as exc:
        st.toast(str(exc))


def _render_global_style(session: DesignSession) -> None:
    gs = session.document.global_style
    fonts = _FONT_FAMILIES if gs.font_family in _FONT_FAMILIES else [gs.font_family, *_FONT_FAMILIES]
    shown = {
        "main_color": _hex(gs.main_color, "#ff4d7d"),
        "secondary_color": _hex(gs.secondary_color, "#ffc7d8"),
        "accent_color": _hex(gs.accent_color, "#ff9eb8"),
        "background_color": _hex(gs.background_color, "#fff5f9"),
        "font_family": gs.font_family,
        "border_radius": max(0, min(40, int(gs.border_radius))),
        "max_width": max(320, min(2000, int(gs.max_width))),
        "hide_section_titles": gs.hide_section_titles,
    }
    picks = {
        "main_color": st.color_picker("メインカラー", shown["main_color"], key="gs_main_color"),
        "secondary_color": st.color_picker("サブカラー", shown["secondary_color"], key="gs_secondary_color"),
        "accent_color": st.color_picker("アクセントカラー", shown["accent_color"], key="gs_accent_color"),
        "background_color": st.color_picker("背景色", shown["background_color"], key="gs_background_color"),
        "font_family": st.selectbox("フォント", fonts, index=fonts.index(gs.font_family), key="gs_font_family"),
        "border_radius": int(st.number_input("角丸 (px)", 0, 40, shown["border_radius"], key="gs_border_radius")),
        "max_width": int(st.number_input("最大幅 (px)", 320, 2000, shown["max_width"], step=20, key="gs_max_width")),
        "hide_section_titles": st.checkbox("セクション見出しを隠す", gs.hide_section_titles, key="gs_hide_titles"),
    }
    changes = {k: v for k, v in picks.items() if v != shown[k]}
    if changes:
        session.update_global_style(**changes)


def _render_section_style(session: DesignSession, section_id: str) -> None:
    section = session.document.get(section_id)
    resolved = resolve(section, session.document.global_style)
    shown = {
        "background_color": _hex(resolved.background_color, "#ffffff"),
        "text_color": _hex(resolved.text_color, "#333333"),
        "title_color": _hex(resolved.title_color, "#ff4d7d"),
        "border_color": _hex(resolved.border_color, "#e0e0e0"),
    }
    labels = {"background_color": "背景", "text_color": "文字", "title_color": "見出し", "border_color": "枠線"}
    cols = st.columns(4)
    picks = {
        name: col.color_picker(labels[name], value, key=f"{name}_{section_id}")
        for col, (name, value) in zip(cols, shown.items())
    }
    changes = {k: v for k, v in picks.items() if v != shown[k]}
    if changes:
        session.update_section_style(section_id, **changes)
    if catalog.is_required(section_id) and st.button("初期設定に戻す", key=f"reset_{section_id}"):
        _run_edit(session.reset_section, section_id)
        st.rerun()


def _render_section_list(session: DesignSession) -> None:
    body = session.document.body()
    header = session.document.get("header")
    if header is not None:
        st.markdown(
            f'<div class="section-row"><span class="section-order">0</span>'
            f'{html_mod.escape(header.title)} <span class="section-fixed">固定</span></div>',
            unsafe_allow_html=True,
        )

    for index, section in enumerate(body):
        row = st.columns([5, 1, 1, 2])
        title_class = "" if section.visible else ' class="section-hidden"'
        row[0].markdown(
            f'<div class="section-row"><span class="section-order">{section.order}</span>'
            f"<span{title_class}>{html_mod.escape(section.title)}</span></div>",
            unsafe_allow_html=True,
        )
        if row[1].button("↑", key=f"up_{section.id}", disabled=index == 0):
            _run_edit(session.move, section.id, Direction.UP)
            st.rerun()
        if row[2].button("↓", key=f"down_{section.id}", disabled=index == len(body) - 1):
            _run_edit(session.move, section.id, Direction.DOWN)
            st.rerun()
        visible = row[3].toggle("表示", value=section.visible, key=f"vis_{section.id}")
        if visible != section.visible:
            _run_edit(session.set_visibility, section.id, visible)
            st.rerun()

    st.markdown('<div class="section-label">並び替え</div>', unsafe_allow_html=True)
    ids = [s.id for s in body]
    move_cols = st.columns([3, 2, 1])
    target = move_cols[0].selectbox(
        "セクション", ids, format_func=lambda i: session.document.get(i).title, key="reorder_target"
    )
    position = move_cols[1].number_input("移動先", 1, max(1, len(ids)), 1, key="reorder_position")
    if move_cols[2].button("移動", key="reorder_go"):
        _run_edit(session.reorder, target, int(position) - 1)
        st.rerun()

    with st.expander("セクションのスタイル"):
        styled = st.selectbox(
            "編集するセクション",
            [s.id for s in session.document.ordered()],
            format_func=lambda i: session.document.get(i).title,
            key="style_target",
        )
        _render_section_style(session, styled)


# -- Navigation bar -----------------------------------------------------------

render_nav_bar("デザイン管理")

# -- Sidebar ------------------------------------------------------------------

with st.sidebar:
    st.markdown("#### 店舗")
    entity_id = st.text_input("店舗ID", key="inp_entity_id")
    use_remote = st.checkbox("リモートAPIを使用", key="use_remote")
    if st.button("読み込み", use_container_width=True, disabled=not entity_id):
        _open_store(entity_id.strip(), use_remote)
        st.rerun()

    session: DesignSession | None = st.session_state.design_session
    if session is not None:
        st.divider()
        if session.dirty:
            st.markdown('<span class="dirty-badge">未保存の変更があります</span>', unsafe_allow_html=True)
        if st.button(
            "保存",
            use_container_width=True,
            type="primary",
            disabled=session.status is SessionStatus.SAVING,
        ):
            session.save()
        if session.status is SessionStatus.ERROR and session.last_error:
            st.error(session.last_error)

        with st.expander("全体のスタイル", expanded=False):
            _render_global_style(session)

# -- Main area ----------------------------------------------------------------

session = st.session_state.design_session
if session is None:
    st.info("左のサイドバーで店舗IDを入力して読み込んでください。")
    st.stop()

for notice in session.pop_notices():
    _NOTICE_RENDERERS.get(notice.level, st.info)(notice.message)

profile = st.session_state.profile
if profile.is_fallback:
    st.warning("店舗情報を読み込めなかったため、サンプル情報でプレビューしています。")

edit_col, preview_col = st.columns([2, 3])

with edit_col:
    st.markdown("#### セクション")
    _render_section_list(session)

with preview_col:
    device_view = st.radio(
        "表示",
        ["pc", "smartphone"],
        format_func=lambda v: "PC" if v == "pc" else "スマートフォン",
        horizontal=True,
        key="device_view",
    )
    page_html = render_html(render(session.document, profile), session.document.global_style, device_view)
    st.markdown(
        f'<div class="preview-frame {device_view}">{page_html}</div>',
        unsafe_allow_html=True,
    )
