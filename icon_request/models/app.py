"""
Application identity records and the derived manifest entries built from them.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Protocol

from PIL import Image


class IconRenderer(Protocol):
    """Rasterizes an app's icon resource, or returns None when it has none."""

    def render(self, app: "AppRecord") -> Image.Image | None: ...


@dataclass(frozen=True)
class AppRecord:
    """An installed app the user selected for an icon request."""

    name: str
    pkg: str
    code: str
    icon: IconRenderer | None = field(default=None, compare=False, repr=False)

    def render_icon(self) -> Image.Image | None:
        if self.icon is None:
            return None
        return self.icon.render(self)


_NON_TOKEN_CHARS = re.compile(r"[^a-z0-9]+")


def drawable_name(name: str) -> str:
    """
    Derives the icon-resource token used as `drawable` in both manifests.

    Accents are folded, the result is lower-cased and every run of other
    characters becomes a single underscore, e.g. "Google Maps 2" -> "google_maps_2".
    """
    folded = unicodedata.normalize("NFKD", name)
    folded = "".join(c for c in folded if not unicodedata.combining(c))
    token = _NON_TOKEN_CHARS.sub("_", folded.lower()).strip("_")
    if not token:
        return "icon"
    if token[0].isdigit():
        # Resource names cannot start with a digit
        token = f"_{token}"
    return token


@dataclass(frozen=True)
class ManifestEntry:
    """One manifest record; the drawable token is computed exactly once."""

    name: str
    pkg: str
    component_id: str
    drawable: str

    @classmethod
    def from_app(cls, app: AppRecord) -> "ManifestEntry":
        return cls(
            name=app.name,
            pkg=app.pkg,
            component_id=app.code,
            drawable=drawable_name(app.name),
        )

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "pkg": self.pkg,
            "componentInfo": self.component_id,
            "drawable": self.drawable,
        }
