"""
Pillow-backed icon rendering for apps whose icons live in image files.
"""

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from icon_request.models.app import AppRecord

log = logging.getLogger(__name__)

DEFAULT_ICON_SIZE = 192


class FileIconRenderer:
    """
    Loads an icon from an image file and scales it to a square of `size` pixels.

    Missing or unreadable files render as None so the app is skipped rather
    than failing the whole request.
    """

    def __init__(self, path: Path, size: int | None = DEFAULT_ICON_SIZE):
        self.path = Path(path)
        self.size = size

    def render(self, app: AppRecord) -> Image.Image | None:
        if not self.path.is_file():
            log.warning(f"Icon file for {app.code} not found: {self.path}")
            return None
        try:
            with Image.open(self.path) as img:
                img = img.convert("RGBA")
                if self.size and img.size != (self.size, self.size):
                    img = img.resize((self.size, self.size), Image.LANCZOS)
                return img.copy()
        except (UnidentifiedImageError, OSError) as e:
            log.warning(f"Could not read icon for {app.code} from {self.path}: {e}")
            return None
