"""Local UI preferences (theme, language, onboarding) persisted as YAML.

Only preferences live here; journal data never touches this file.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Literal

import structlog
import yaml

logger = structlog.get_logger()

STATE_KEY = "tradeflow_state"

Theme = Literal["light", "dark"]
Language = Literal["en", "fa"]


@dataclass
class Preferences:
    theme: Theme = "dark"
    language: Language = "en"
    has_onboarded: bool = False


def load_preferences(path: Path | str) -> Preferences:
    """Read preferences, falling back to defaults for anything missing or invalid."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError:
        return Preferences()
    except yaml.YAMLError as e:
        logger.warning("preferences_unreadable", path=str(path), error=str(e))
        return Preferences()

    saved = data.get(STATE_KEY, {}) if isinstance(data, dict) else {}
    if not isinstance(saved, dict):
        saved = {}
    prefs = Preferences()
    if saved.get("theme") in ("light", "dark"):
        prefs.theme = saved["theme"]
    if saved.get("language") in ("en", "fa"):
        prefs.language = saved["language"]
    prefs.has_onboarded = bool(saved.get("has_onboarded", False))
    return prefs


def save_preferences(prefs: Preferences, path: Path | str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump({STATE_KEY: asdict(prefs)}, f, default_flow_style=False, sort_keys=False)
