"""
Picks exactly one delivery channel for a finished request archive.
"""

import logging
from pathlib import Path
from typing import Sequence

from icon_request.api.uploader import RemoteUploader
from icon_request.models.app import AppRecord
from icon_request.models.config import RequestConfig

from .share import ShareHandoff

log = logging.getLogger(__name__)

CHANNEL_REMOTE = "remote"
CHANNEL_SHARE = "share"


def select_channel(config: RequestConfig) -> str:
    """A configured API key selects the remote channel; otherwise share."""
    return CHANNEL_REMOTE if config.is_remote else CHANNEL_SHARE


class DeliveryRouter:
    """Dispatches to the `RemoteUploader` or the `ShareHandoff`, never both."""

    def __init__(self, uploader: RemoteUploader, share: ShareHandoff):
        self.uploader = uploader
        self.share = share

    async def deliver(
        self,
        archive: Path,
        apps: Sequence[AppRecord],
        config: RequestConfig,
        manifest_json: str | None = None,
    ) -> str:
        """Delivers the archive and returns the name of the channel used."""
        channel = select_channel(config)
        if channel == CHANNEL_REMOTE:
            await self.uploader.upload(
                config.api_host, config.api_key, archive, manifest_json or ""
            )
        else:
            await self.share.handoff(archive, apps, config)
        log.debug(f"Request delivered through the {channel} channel.")
        return channel
