"""
Renders the two icon-pack manifest formats from the selected apps.

Both formats are built from the same `ManifestEntry` list, so each entry's
drawable token is computed once and shared verbatim between them.
"""

import json
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union
from xml.sax.saxutils import escape, quoteattr

from icon_request.models.app import AppRecord, ManifestEntry
from icon_request.models.config import RequestConfig

LEGACY_FILENAME = "appfilter.xml"
JSON_FILENAME = "appfilter.json"

_LEGACY_HEADER = (
    "<resources>\n"
    '    <iconback img1="iconback" />\n'
    '    <iconmask img1="iconmask" />\n'
    '    <iconupon img1="iconupon" />\n'
    '    <scale factor="1.0" />'
)
_LEGACY_FOOTER = "\n\n</resources>"


def build_entries(apps: Iterable[AppRecord]) -> List[ManifestEntry]:
    """Creates one manifest entry per app, preserving selection order."""
    return [ManifestEntry.from_app(app) for app in apps]


def _comment_text(name: str) -> str:
    # "--" is not allowed inside an XML comment
    return escape(name).replace("--", "- -")


def render_legacy(entries: Sequence[ManifestEntry]) -> str:
    """Renders an appfilter.xml document for the given entries."""
    parts = [_LEGACY_HEADER]
    for entry in entries:
        component = quoteattr(f"ComponentInfo{{{entry.component_id}}}")
        drawable = quoteattr(entry.drawable)
        parts.append(
            f"\n\n    <!-- {_comment_text(entry.name)} -->\n"
            "    <item\n"
            f"        component={component}\n"
            f"        drawable={drawable} />"
        )
    parts.append(_LEGACY_FOOTER)
    return "".join(parts)


def render_json(entries: Sequence[ManifestEntry]) -> str:
    """Renders the JSON manifest: `{"components": [...]}` in selection order."""
    payload = {"components": [entry.to_json_dict() for entry in entries]}
    return json.dumps(payload, indent=4, ensure_ascii=False)


@dataclass(frozen=True)
class LegacyPlan:
    """Only appfilter.xml is written to the archive."""

    legacy: str

    def files(self) -> List[Tuple[str, str]]:
        return [(LEGACY_FILENAME, self.legacy)]

    @property
    def upload_json(self) -> None:
        return None


@dataclass(frozen=True)
class JsonPlan:
    """The JSON manifest is attached to the upload and never written to disk."""

    json: str

    def files(self) -> List[Tuple[str, str]]:
        return []

    @property
    def upload_json(self) -> str:
        return self.json


@dataclass(frozen=True)
class BothPlan:
    """Both manifests are written into the archive."""

    legacy: str
    json: str

    def files(self) -> List[Tuple[str, str]]:
        return [(LEGACY_FILENAME, self.legacy), (JSON_FILENAME, self.json)]

    @property
    def upload_json(self) -> None:
        return None


ManifestPlan = Union[LegacyPlan, JsonPlan, BothPlan]


def plan_manifest(
    entries: Sequence[ManifestEntry], config: RequestConfig
) -> ManifestPlan:
    """Selects which manifests to produce for the configured delivery mode."""
    if config.is_remote:
        return JsonPlan(json=render_json(entries))
    if not config.json_manifest:
        return LegacyPlan(legacy=render_legacy(entries))
    return BothPlan(legacy=render_legacy(entries), json=render_json(entries))
