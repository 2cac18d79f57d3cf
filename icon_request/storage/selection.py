"""
Loads the list of selected apps from a JSON selection file.
"""

import json
import logging
from pathlib import Path
from typing import Any

from icon_request.exceptions import ConfigurationError
from icon_request.media.icons import FileIconRenderer
from icon_request.models.app import AppRecord

log = logging.getLogger(__name__)

REQUIRED_KEYS = ("name", "pkg", "code")


def _parse_entry(raw: Any, index: int, base_dir: Path) -> AppRecord:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Selection entry #{index} must be an object.")
    missing = [k for k in REQUIRED_KEYS if not str(raw.get(k, "")).strip()]
    if missing:
        raise ConfigurationError(
            f"Selection entry #{index} is missing: {', '.join(missing)}"
        )

    renderer = None
    if icon := raw.get("icon"):
        icon_path = Path(icon).expanduser()
        if not icon_path.is_absolute():
            icon_path = base_dir / icon_path
        renderer = FileIconRenderer(icon_path)

    return AppRecord(
        name=str(raw["name"]).strip(),
        pkg=str(raw["pkg"]).strip(),
        code=str(raw["code"]).strip(),
        icon=renderer,
    )


def load_selection(path: Path) -> list[AppRecord]:
    """
    Reads a JSON list of `{"name", "pkg", "code", "icon"}` objects.

    Relative icon paths are resolved against the selection file's folder.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read selection file '{path}': {e}") from e

    if isinstance(data, dict):
        data = data.get("apps", [])
    if not isinstance(data, list):
        raise ConfigurationError("Selection file must contain a list of apps.")

    base_dir = Path(path).resolve().parent
    apps = [_parse_entry(raw, i, base_dir) for i, raw in enumerate(data, start=1)]
    log.debug(f"Loaded {len(apps)} apps from {path}")
    return apps
