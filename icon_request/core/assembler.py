"""
Writes icons and manifests into the staging folder and zips them into a single
request archive.
"""

import logging
import os
from pathlib import Path
from typing import List, Sequence
from zipfile import ZIP_DEFLATED, ZipFile

import aiofiles
from pathvalidate import sanitize_filename
from PIL import Image

from icon_request.exceptions import (
    ArchiveFailedError,
    IconWriteFailedError,
    ManifestWriteFailedError,
    StagingUnavailableError,
)

log = logging.getLogger(__name__)


def icon_filename(pkg: str) -> str:
    """Icons are named after the app's package identifier."""
    return sanitize_filename(f"{pkg}.png", platform="universal")


class ArchiveAssembler:
    """
    Owns the staging set of a single send operation.

    Every path is recorded before it is written, so `clear` also removes files
    whose write failed halfway. Paths that were not staged by this instance,
    including the archive itself, are never touched.
    """

    def __init__(self, staging_dir: Path):
        self.staging_dir = Path(staging_dir)
        self._staged: List[Path] = []

    @property
    def staged(self) -> List[Path]:
        return list(self._staged)

    def ensure_staging(self) -> None:
        """Creates the staging folder (and parents) when missing."""
        try:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StagingUnavailableError(
                f"Unable to find or create cache folder: {self.staging_dir}: {e}"
            ) from e
        if not self.staging_dir.is_dir():
            raise StagingUnavailableError(
                f"Cache folder is not a directory: {self.staging_dir}"
            )

    def materialize_icon(self, image: Image.Image, dest: Path) -> Path:
        """Encodes an icon as PNG at `dest` and adds it to the staging set."""
        self._staged.append(dest)
        try:
            if image.mode not in ("RGB", "RGBA", "L", "LA", "P", "1", "I"):
                image = image.convert("RGBA")
            image.save(dest, format="PNG")
        except (OSError, ValueError) as e:
            raise IconWriteFailedError(f"Failed to save an icon: {e}") from e
        log.debug(f"Saved icon: {dest}")
        return dest

    async def write_manifest(self, text: str, dest: Path) -> Path:
        """Writes a manifest file and adds it to the staging set."""
        self._staged.append(dest)
        try:
            async with aiofiles.open(dest, "w", encoding="utf-8") as f:
                await f.write(text)
        except OSError as e:
            raise ManifestWriteFailedError(
                f"Failed to write your request {dest.name} file: {e}"
            ) from e
        log.debug(f"Generated manifest saved to {dest}")
        return dest

    def archive(self, paths: Sequence[Path], dest: Path) -> Path:
        """
        Zips every listed file into `dest`.

        The archive is built under a temporary name and only renamed into place
        once complete, so a failure never leaves a usable partial archive.
        """
        partial = dest.with_name(dest.name + ".part")
        try:
            with ZipFile(partial, mode="w", compression=ZIP_DEFLATED) as zf:
                for path in paths:
                    if not path.is_file():
                        raise FileNotFoundError(f"Staged file is missing: {path}")
                    zf.write(path, arcname=path.name)
            os.replace(partial, dest)
        except (OSError, ValueError) as e:
            partial.unlink(missing_ok=True)
            raise ArchiveFailedError(
                f"Failed to create the request ZIP file: {e}"
            ) from e
        log.debug(f"ZIP created at {dest} with {len(paths)} files")
        return dest

    def clear(self) -> int:
        """
        Deletes the staged files. Returns the number of files removed.

        Raises OSError for the first file that could not be removed after
        trying all of them.
        """
        removed = 0
        first_error: OSError | None = None
        for path in self._staged:
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                log.warning(f"Failed to remove staged file {path.name}: {e}")
                first_error = first_error or e
        self._staged.clear()
        if first_error:
            raise first_error
        return removed
