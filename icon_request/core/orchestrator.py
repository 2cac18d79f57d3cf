"""
The top-level send operation: validates the selection, stages icons and
manifests, archives them and hands the archive to one delivery channel.
"""

import asyncio
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar

from icon_request.delivery.router import DeliveryRouter, select_channel
from icon_request.exceptions import (
    EmptySelectionError,
    IconRequestError,
    IconWriteFailedError,
    NoContentError,
    NoDeliveryTargetError,
)
from icon_request.models.app import AppRecord
from icon_request.models.config import RequestConfig
from icon_request.models.outcome import SendOutcome
from icon_request.utils.structured_logger import RequestLogger

from .assembler import ArchiveAssembler, icon_filename
from .manifest import ManifestPlan, build_entries, plan_manifest

log = logging.getLogger(__name__)

ARCHIVE_NAME_FORMAT = "IconRequest-{timestamp}.zip"
ARCHIVE_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

T = TypeVar("T")


def archive_name(moment: datetime) -> str:
    return ARCHIVE_NAME_FORMAT.format(
        timestamp=moment.strftime(ARCHIVE_TIMESTAMP_FORMAT)
    )


async def _finish_on_cancel(aw: Awaitable[T]) -> T:
    """
    Awaits `aw`, letting it run to completion when the caller is cancelled.

    Staging writes run in worker threads that cannot be interrupted; waiting
    for them keeps a file from landing after the staged set was cleared.
    """
    task = asyncio.ensure_future(aw)
    try:
        return await asyncio.shield(task)
    except asyncio.CancelledError:
        while not task.done():
            try:
                await asyncio.wait({task})
            except asyncio.CancelledError:
                continue
        if not task.cancelled() and task.exception() is not None:
            log.debug(f"Staging write failed during cancellation: {task.exception()}")
        raise


class RequestOrchestrator:
    """
    Runs one icon request from selection to delivery.

    A single `send` call is sequential and emits exactly one `SendOutcome`.
    The staging folder must not be shared by concurrent sends.
    """

    def __init__(
        self,
        router: DeliveryRouter,
        events: Optional[RequestLogger] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.router = router
        self.events = events
        self.clock = clock

    async def send(
        self, selection: Sequence[AppRecord], config: RequestConfig
    ) -> SendOutcome:
        """Sends the request and reports the result as a single outcome."""
        start_time = time.monotonic()
        try:
            archive = await self.send_or_raise(selection, config)
        except IconRequestError as e:
            kind = e.kind.value if e.kind else type(e).__name__
            log.error(f"Icon request failed ({kind}): {e}")
            if self.events:
                self.events.request_failed(kind, str(e), time.monotonic() - start_time)
            return SendOutcome.failed(e, archive=e.archive)

        if self.events:
            self.events.request_completed(time.monotonic() - start_time, archive)
        return SendOutcome.ok(archive)

    async def send_or_raise(
        self, selection: Sequence[AppRecord], config: RequestConfig
    ) -> Path:
        """
        Same pipeline as `send`, but raises the typed `IconRequestError`.

        Returns the path of the archive that was delivered.
        """
        log.info("Preparing your request...")
        self._validate(selection, config)
        if self.events:
            self.events.request_started(
                len(selection), select_channel(config), config.cache_folder
            )

        assembler = ArchiveAssembler(config.cache_folder)
        await asyncio.to_thread(assembler.ensure_staging)
        try:
            archive, plan = await self._assemble(assembler, selection, config)
        finally:
            self._cleanup(assembler)

        if self.events:
            self.events.delivery_started(
                select_channel(config),
                config.api_host if config.is_remote else config.email_recipient,
            )
        try:
            await self.router.deliver(
                archive, selection, config, manifest_json=plan.upload_json
            )
        except IconRequestError as e:
            e.archive = archive
            raise
        return archive

    @staticmethod
    def _validate(selection: Sequence[AppRecord], config: RequestConfig) -> None:
        if not selection:
            raise EmptySelectionError("No apps were selected to send.")
        if not config.has_delivery_target:
            raise NoDeliveryTargetError(
                "You must either specify a recipient email or a request manager "
                "API key."
            )

    async def _assemble(
        self,
        assembler: ArchiveAssembler,
        selection: Sequence[AppRecord],
        config: RequestConfig,
    ) -> Tuple[Path, ManifestPlan]:
        files_to_zip: List[Path] = []

        log.info("Saving icons...")
        rendered: List[AppRecord] = []
        for app in selection:
            icon_path = await self._save_icon(assembler, app)
            if icon_path is None:
                continue
            rendered.append(app)
            files_to_zip.append(icon_path)

        log.info("Creating appfilter...")
        entries = build_entries(rendered)
        plan = plan_manifest(entries, config)
        for filename, text in plan.files():
            path = await _finish_on_cancel(
                assembler.write_manifest(text, assembler.staging_dir / filename)
            )
            files_to_zip.append(path)
            if self.events:
                self.events.manifest_written(filename, len(entries))

        if not files_to_zip:
            raise NoContentError("There are no files to put into the ZIP archive.")

        log.info("Creating ZIP...")
        archive = assembler.staging_dir / archive_name(self.clock())
        await _finish_on_cancel(
            asyncio.to_thread(assembler.archive, files_to_zip, archive)
        )
        log.info(f"ZIP created at {archive}")
        if self.events:
            self.events.archive_created(archive, len(files_to_zip))
        return archive, plan

    async def _save_icon(
        self, assembler: ArchiveAssembler, app: AppRecord
    ) -> Optional[Path]:
        """Renders and writes one icon; returns None when the app has no icon."""
        try:
            image = await asyncio.to_thread(app.render_icon)
        except Exception as e:
            raise IconWriteFailedError(
                f"Failed to render the icon of {app.code}: {e}"
            ) from e
        if image is None:
            log.debug(f"Got no icon for {app.code}, skipping it.")
            if self.events:
                self.events.icon_skipped(app.pkg, app.code)
            return None

        dest = assembler.staging_dir / icon_filename(app.pkg)
        await _finish_on_cancel(
            asyncio.to_thread(assembler.materialize_icon, image, dest)
        )
        if self.events:
            self.events.icon_saved(app.pkg, dest)
        return dest

    @staticmethod
    def _cleanup(assembler: ArchiveAssembler) -> None:
        """Best-effort removal of staged files; never masks the original error."""
        log.debug("Cleaning up files...")
        try:
            assembler.clear()
        except OSError as e:
            log.warning(f"Could not clean up the cache folder: {e}")
