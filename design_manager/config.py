"""Configuration for the design manager.

Two layers, matching how the rest of the office tools are configured:

* per-tool JSON in ``data/config/design-manager.json``, edited from the admin
  panel, read with fallback to the hardcoded defaults below;
* environment values from the shared ``.env`` file for anything that points
  at another service (remote API base URL, bearer token, log directory).
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
CONFIG_DIR = BASE_DIR / "data" / "config"
TOOL_NAME = "design-manager"

load_dotenv(BASE_DIR / ".env")

# Render limits the admin panel may override.
DEFAULTS: dict[str, Any] = {
    "gallery_limit": 6,
    "blog_posts_to_show": 3,
    "blog_excerpt_length": 150,
    "extra_retired_ids": [],
}


def load_config(tool_name: str = TOOL_NAME) -> dict | None:
    """Load a tool's JSON config. Returns None if the file is missing or corrupt."""
    path = CONFIG_DIR / f"{tool_name}.json"
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return None
    return data if isinstance(data, dict) else None


def save_config(config: dict, tool_name: str = TOOL_NAME) -> None:
    """Write a tool's config to JSON. Creates the directory if needed."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    path = CONFIG_DIR / f"{tool_name}.json"
    path.write_text(json.dumps(config, indent=2, ensure_ascii=False))


def get_config_value(key: str, default: Any = None) -> Any:
    """Get a single design-manager setting.

    Falls back to *default*, then to ``DEFAULTS[key]``, when the config file
    or the key is absent.
    """
    if default is None:
        default = DEFAULTS.get(key)
    config = load_config()
    if config is None:
        return default
    return config.get(key, default)


def set_config_value(key: str, value: Any) -> None:
    """Set a single key in the design-manager config, preserving other keys."""
    config = load_config() or {}
    config[key] = value
    save_config(config)


def get_int_setting(key: str) -> int:
    """Read a positive integer setting, ignoring bad values in the JSON file."""
    value = get_config_value(key)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return DEFAULTS[key]
    return value


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

def api_base() -> str:
    """Base URL of the remote recruitment backend."""
    return os.environ.get("DESIGN_API_BASE", "http://localhost:8000").rstrip("/")


def api_token() -> str:
    return os.environ.get("DESIGN_API_TOKEN", "")


def log_dir() -> Path:
    return Path(os.environ.get("DESIGN_LOG_DIR", str(BASE_DIR / "data" / "logs")))
