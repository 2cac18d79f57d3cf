"""
Async client that submits an icon request to a request manager API.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import aiohttp
from pydantic import ValidationError

from icon_request.exceptions import RemoteApplicationError, RemoteTransportError
from icon_request.models.response import RemoteResponse

log = logging.getLogger(__name__)

USER_AGENT = "afollestad/icon-request"


@dataclass(frozen=True)
class UploaderSettings:
    """
    Immutable HTTP settings shared by every upload.

    Built once by the caller and handed to `RemoteUploader`; safe to reuse
    across requests.
    """

    user_agent: str = USER_AGENT
    accept: str = "application/json"
    total_timeout: float = 120.0
    connect_timeout: float = 15.0
    archive_filename: str = "icons.zip"

    def headers(self, api_key: str) -> dict[str, str]:
        return {
            "TokenID": api_key,
            "Accept": self.accept,
            "User-Agent": self.user_agent,
        }

    def timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self.total_timeout, connect=self.connect_timeout
        )


class RemoteUploader:
    """
    Performs a single multipart submission of the request archive.

    No retries are attempted: a failed upload surfaces immediately as a
    `RemoteTransportError` or `RemoteApplicationError`.
    """

    def __init__(
        self,
        settings: UploaderSettings | None = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Args:
            settings: HTTP settings; defaults are used when omitted.
            session: An existing session to reuse. When omitted a short-lived
                session is created for each upload.
        """
        self.settings = settings or UploaderSettings()
        self._session = session

    def _build_form(self, archive: Path, manifest_json: str) -> aiohttp.FormData:
        form = aiohttp.FormData()
        form.add_field(
            "archive",
            archive.read_bytes(),
            filename=self.settings.archive_filename,
            content_type="application/zip",
        )
        form.add_field("apps", manifest_json)
        return form

    async def upload(
        self, host: str, api_key: str, archive: Path, manifest_json: str
    ) -> RemoteResponse:
        """
        Uploads the archive and the JSON manifest to `host`.

        Returns the parsed response when the server accepted the request.
        """
        try:
            form = await asyncio.to_thread(self._build_form, archive, manifest_json)
        except OSError as e:
            raise RemoteTransportError(
                f"Unable to read the request archive {archive.name}: {e}"
            ) from e

        log.info(f"Uploading request to {host}...")
        start_time = time.monotonic()
        try:
            if self._session is not None:
                status, body = await self._post(self._session, host, api_key, form)
            else:
                async with aiohttp.ClientSession(
                    timeout=self.settings.timeout()
                ) as session:
                    status, body = await self._post(session, host, api_key, form)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.debug(f"Upload to {host} failed: {e!r}")
            raise RemoteTransportError(
                f"Failed to reach the request manager at {host}: {str(e) or type(e).__name__}"
            ) from e

        duration_ms = (time.monotonic() - start_time) * 1000
        log.debug(f"Upload to {host} answered HTTP {status} in {duration_ms:.0f} ms")
        return self._interpret(status, body)

    async def _post(
        self,
        session: aiohttp.ClientSession,
        host: str,
        api_key: str,
        form: aiohttp.FormData,
    ) -> tuple[int, bytes]:
        async with session.post(
            host,
            data=form,
            headers=self.settings.headers(api_key),
            timeout=self.settings.timeout(),
        ) as r:
            return r.status, await r.read()

    @staticmethod
    def _interpret(status: int, body: bytes) -> RemoteResponse:
        """Maps an HTTP status and body to a response or a remote error."""
        # A body that is not UTF-8 raises UnicodeDecodeError, a ValueError
        try:
            response = RemoteResponse.model_validate_json(body)
        except (ValidationError, ValueError) as e:
            raise RemoteTransportError(
                f"Unexpected response from the request manager (HTTP {status}): "
                f"{body[:200]!r}"
            ) from e

        if response.is_error:
            raise RemoteApplicationError(response.error or "Unknown error")
        if status >= 400:
            raise RemoteTransportError(
                f"The request manager answered HTTP {status} "
                f"with status '{response.status}'."
            )
        return response
